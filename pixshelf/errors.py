"""JSON error bodies returned by the HTTP API."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from http import HTTPStatus
from typing import Any


@dataclass(frozen=True)
class ErrorResponse:
    """An error body with its HTTP status code."""

    error: str
    message: str
    code: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def respond_with_error(code: int, err: Any, message: str) -> ErrorResponse:
    """Build an error body carrying the error text and a message."""
    return ErrorResponse(error=str(err), message=message, code=int(code))


def not_found(resource: str, id: Any) -> ErrorResponse:
    """A 404 body for a missing resource."""
    return ErrorResponse(
        error="not_found",
        message=f"{resource} with ID {id} not found",
        code=HTTPStatus.NOT_FOUND.value,
    )


def bad_request(err: Any) -> ErrorResponse:
    """A 400 body whose message is the error text."""
    return ErrorResponse(
        error="bad_request", message=str(err), code=HTTPStatus.BAD_REQUEST.value
    )


def internal_server_error(err: Any) -> ErrorResponse:
    """A 500 body; the error itself is not exposed."""
    return ErrorResponse(
        error="internal_server_error",
        message="An unexpected error occurred",
        code=HTTPStatus.INTERNAL_SERVER_ERROR.value,
    )