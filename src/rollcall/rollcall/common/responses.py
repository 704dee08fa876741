from __future__ import annotations

from flask import Flask, jsonify

from ..common.logging import get_logger
from ..core.exceptions import (
    ConflictError,
    DomainError,
    NoStudentsError,
    NotFoundError,
    UnavailableError,
    ValidationError,
)

log = get_logger(__name__)

_STATUS = {
    ValidationError: 400,
    NoStudentsError: 400,
    NotFoundError: 404,
    ConflictError: 409,
    UnavailableError: 503,
}


def error_response(message: str, status: int, **extra):
    return jsonify({"error": message, **extra}), status


def domain_error(exc: DomainError):
    status = next((code for cls, code in _STATUS.items() if isinstance(exc, cls)), 400)
    return error_response(str(exc), status)


def server_error(app: Flask, message: str, exc: Exception):
    """Log an unexpected failure and answer 500; details only in debug mode."""

    log.exception("%s", message)
    detail = str(exc) if app.config.get("DEBUG") else "Please contact the administrator"
    return error_response(message, 500, msg=detail)
