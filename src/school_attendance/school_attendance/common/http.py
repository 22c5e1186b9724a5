from __future__ import annotations

import logging

from flask import jsonify

from ..core.exceptions import (
    ConflictError,
    DomainError,
    DuplicateIdentifierError,
    NotFoundError,
    StoreUnavailableError,
    ValidationError,
)

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (NotFoundError, 404),
    (ConflictError, 409),
    (StoreUnavailableError, 503),
    (DuplicateIdentifierError, 400),
    (ValidationError, 400),
)


def ok(message: str | None = None, **payload):
    body = {"success": True}
    if message:
        body["message"] = message
    body.update(payload)
    return jsonify(body)


def error_response(exc: DomainError):
    """Map a domain error to a JSON failure body and HTTP status."""
    status = 400
    for error_type, code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            status = code
            break
    return jsonify({"success": False, "message": str(exc)}), status


def unexpected_error(exc: Exception, *, action: str):
    logger.exception("Unexpected error while %s", action)
    return jsonify({"success": False, "message": f"Internal error while {action}"}), 500
