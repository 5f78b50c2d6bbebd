"""Command line entry point that runs the web server."""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence

from flask import Flask

from pixshelf.api import create_app
from pixshelf.queries import Queries, connect, ensure_schema
from pixshelf.repository import ImageRepository
from pixshelf.service import ImageService

log = logging.getLogger(__name__)

_DB_KEY = "pixshelf.db"


def build_parser() -> argparse.ArgumentParser:
    """Describe the server's command line options."""
    parser = argparse.ArgumentParser(
        prog="pixshelf", description="Serve an image library over HTTP."
    )
    parser.add_argument("--host", default="0.0.0.0", help="address to listen on")
    parser.add_argument("--port", type=int, default=8080, help="port to listen on")
    parser.add_argument(
        "--database-url",
        default="pixshelf.db",
        help="sqlite database path or sqlite:/// URL",
    )
    parser.add_argument(
        "--base-url",
        default=None,
        help="URL prefix used in image links (default: http://localhost:PORT)",
    )
    parser.add_argument(
        "--image-storage",
        default="static/images",
        help="directory that holds uploaded images",
    )
    parser.add_argument(
        "--environment",
        default="development",
        help="run mode; 'development' enables debug mode",
    )
    return parser


def build_app(args: argparse.Namespace) -> Flask:
    """Connect to the database and assemble the application."""
    conn = connect(args.database_url)
    ensure_schema(conn)
    repo = ImageRepository(Queries(conn))
    base_url = args.base_url or f"http://localhost:{args.port}"
    service = ImageService(repo, base_url, args.image_storage)
    app = create_app(service)
    app.extensions[_DB_KEY] = conn
    return app


def main(argv: Sequence[str] | None = None) -> int:
    """Run the server until it is interrupted."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(message)s")
    try:
        app = build_app(args)
    except ConnectionError as exc:
        print(f"Failed to connect to database: {exc}", file=sys.stderr)
        return 1

    debug = args.environment == "development"
    log.info("Starting server on :%d in %s mode", args.port, args.environment)
    try:
        app.run(host=args.host, port=args.port, debug=debug, use_reloader=False)
    finally:
        app.extensions[_DB_KEY].close()
    log.info("Server exited gracefully")
    return 0