"""HTTP routes for the image API and the application factory."""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from http import HTTPStatus
from pathlib import Path
from typing import Any

from flask import Flask, Response, jsonify, redirect, request, send_from_directory

from pixshelf.errors import ErrorResponse, bad_request, internal_server_error, not_found
from pixshelf.service import (
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    ImageService,
    UploadedFile,
)

log = logging.getLogger(__name__)

_INTEGER = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1

_CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}


def _parse_int(text: str) -> int:
    if not _INTEGER.fullmatch(text):
        raise ValueError(f'parsing "{text}": invalid syntax')
    value = int(text)
    if not _INT64_MIN <= value <= _INT64_MAX:
        raise ValueError(f'parsing "{text}": value out of range')
    return value


def parse_paging(args: Mapping[str, str]) -> tuple[int, int]:
    """Read page and page_size from query arguments, falling back to defaults."""
    try:
        page = _parse_int(args.get("page", "1"))
    except ValueError:
        page = 1
    if page < 1:
        page = 1

    try:
        page_size = _parse_int(args.get("page_size", str(DEFAULT_PAGE_SIZE)))
    except ValueError:
        page_size = DEFAULT_PAGE_SIZE
    if page_size < 1 or page_size > MAX_PAGE_SIZE:
        page_size = DEFAULT_PAGE_SIZE
    return page, page_size


def _error(body: ErrorResponse) -> tuple[Response, int]:
    return jsonify(body.to_dict()), body.code


def _image_id(raw: str) -> int:
    try:
        return _parse_int(raw)
    except ValueError as exc:
        raise ValueError(f"invalid image ID: {exc}") from exc


def _listing(images: list, pagination: Any) -> Response:
    return jsonify(
        {
            "images": [img.to_dict() for img in images],
            "pagination": pagination.to_dict(),
        }
    )


def register_routes(app: Flask, service: ImageService) -> None:
    """Attach the image API and public image routes to an application."""

    def list_images():
        page, page_size = parse_paging(request.args)
        try:
            images, pagination = service.list(page, page_size)
        except Exception as exc:
            log.error("Error listing images: %s", exc)
            return _error(internal_server_error(exc))
        return _listing(images, pagination)

    def search_images():
        query = request.args.get("q", "")
        if not query:
            return _error(bad_request("search query is required"))
        page, page_size = parse_paging(request.args)
        try:
            images, pagination = service.search(query, page, page_size)
        except Exception as exc:
            log.error("Error searching images: %s", exc)
            return _error(internal_server_error(exc))
        return _listing(images, pagination)

    def get_image(id: str):
        try:
            image_id = _image_id(id)
        except ValueError as exc:
            return _error(bad_request(exc))
        try:
            image = service.get_by_id(image_id)
        except Exception:
            return _error(not_found("Image", image_id))
        return jsonify(image.to_dict())

    def upload_image():
        log.info("Upload image handler called")
        name = request.form.get("name", "")
        description = request.form.get("description", "")
        log.info("Name: %s, Description: %s", name, description)
        if not name:
            return _error(bad_request("name is required"))

        storage = request.files.get("image")
        if storage is None:
            log.info("Error getting file: no such file")
            return _error(bad_request("image is required: http: no such file"))

        upload = UploadedFile(
            filename=storage.filename or "",
            data=storage.read(),
            content_type=storage.content_type or "",
        )
        log.info("File received: %s, size: %d", upload.filename, upload.size)
        try:
            service.create(upload, name, description)
        except Exception as exc:
            log.error("Error creating image: %s", exc)
            return _error(internal_server_error(exc))
        return redirect("/", code=HTTPStatus.SEE_OTHER)

    def update_image(id: str):
        try:
            image_id = _image_id(id)
        except ValueError as exc:
            return _error(bad_request(exc))
        name = request.form.get("name", "")
        description = request.form.get("description", "")
        if not name:
            return _error(bad_request("name is required"))
        try:
            image = service.update(image_id, name, description)
        except Exception:
            return _error(not_found("Image", image_id))
        return jsonify(image.to_dict())

    def delete_image(id: str):
        try:
            image_id = _image_id(id)
        except ValueError as exc:
            return _error(bad_request(exc))
        try:
            service.delete(image_id)
        except Exception:
            return _error(not_found("Image", image_id))
        response = Response(status=HTTPStatus.NO_CONTENT)
        response.headers["HX-Redirect"] = "/"
        return response

    def public_image(filepath: str):
        directory = Path(service.upload_path).resolve()
        return send_from_directory(directory, filepath)

    app.add_url_rule("/api/images", "list_images", list_images, methods=["GET"])
    app.add_url_rule(
        "/api/images/search", "search_images", search_images, methods=["GET"]
    )
    app.add_url_rule("/api/images/<id>", "get_image", get_image, methods=["GET"])
    app.add_url_rule("/api/images", "upload_image", upload_image, methods=["POST"])
    app.add_url_rule(
        "/api/images/<id>", "update_image", update_image, methods=["PUT"]
    )
    app.add_url_rule(
        "/api/images/<id>", "delete_image", delete_image, methods=["DELETE"]
    )
    app.add_url_rule(
        "/public-images/<filepath>", "public_image", public_image, methods=["GET"]
    )


def create_app(service: ImageService) -> Flask:
    """Build the web application around an image service."""
    app = Flask(__name__, static_folder=None)
    static_dir = Path("static").resolve()

    @app.before_request
    def _preflight():
        if request.method == "OPTIONS":
            return Response(status=HTTPStatus.NO_CONTENT)
        return None

    @app.after_request
    def _cors(response: Response) -> Response:
        response.headers.update(_CORS_HEADERS)
        return response

    register_routes(app, service)

    def static_file(filename: str):
        return send_from_directory(static_dir, filename)

    app.add_url_rule(
        "/static/<path:filename>", "static_file", static_file, methods=["GET"]
    )
    return app