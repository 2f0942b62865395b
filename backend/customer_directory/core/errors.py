"""Centralized JSON envelope error handling for the API."""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any

from flask import Flask, Response, current_app, jsonify, request
from marshmallow import ValidationError as MarshmallowValidationError
from sqlalchemy.exc import IntegrityError
from werkzeug.exceptions import HTTPException

from customer_directory.core.logger import ensure_request_id

log = logging.getLogger(__name__)


def _envelope(
    *,
    message: str,
    errors: list[str] | None = None,
    data: Any = None,
) -> dict[str, Any]:
    """
    Build a failure envelope.

    :param message: Human-readable error summary (safe for clients).
    :param errors: Optional list of per-field messages.
    :param data: Optional structured payload (debug details only).
    :returns: ``{"success": False, "message": ..., "errors"?: ..., "data"?: ...}``.
    :rtype: dict
    """
    body: dict[str, Any] = {"success": False, "message": message}
    if errors:
        body["errors"] = errors
    if data is not None:
        body["data"] = data
    return body


def _error_response(body: dict[str, Any], status: int) -> tuple[Response, int]:
    return jsonify(body), status


def flatten_messages(messages: Any) -> list[str]:
    """
    Flatten marshmallow's nested ``{"field": ["msg", ...]}`` mapping.

    :param messages: ``ValidationError.messages`` (dict, list or str).
    :returns: Flat list of human-readable messages.
    """
    if isinstance(messages, str):
        return [messages]
    if isinstance(messages, list):
        flat: list[str] = []
        for item in messages:
            flat.extend(flatten_messages(item))
        return flat
    if isinstance(messages, dict):
        flat = []
        for field, value in messages.items():
            for msg in flatten_messages(value):
                flat.append(f"{field}: {msg}" if field != "_schema" else msg)
        return flat
    return [str(messages)]


class APIError(Exception):
    """
    Represent a JSON-serializable API error.

    Parameters
    ----------
    message : str
        Human-readable description presented to clients.
    status_code : int, optional
        HTTP status code to return. Defaults to ``400``.
    code : str, optional
        Machine-readable identifier used in logs. Defaults to
        ``"bad_request"``.
    errors : list[str] | None, optional
        Optional per-field messages included in the response body.

    Attributes
    ----------
    message : str
        Error summary stored for serialization.
    status_code : int
        HTTP status code returned to the client.
    code : str
        Stable machine-readable identifier.
    errors : list[str]
        Field-level messages specific to the error instance.
    """

    def __init__(
        self,
        message: str,
        status_code: int = 400,
        code: str = "bad_request",
        errors: list[str] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = int(status_code)
        self.code = code
        self.errors = list(errors or [])

    def to_envelope(self) -> dict[str, Any]:
        """
        Serialize error metadata into the response envelope.

        :returns: Envelope dictionary.
        :rtype: dict
        """
        return _envelope(message=self.message, errors=self.errors or None)


# Domain conveniences
class ValidationFailed(APIError):
    """400 carrying the list of rule violations."""

    def __init__(self, errors: list[str], message: str = "Validation failed") -> None:
        super().__init__(
            message, status_code=HTTPStatus.BAD_REQUEST, code="validation_error", errors=errors
        )


class BadRequest(APIError):
    """400 for malformed input such as an unparseable identifier."""

    def __init__(self, message: str = "Bad request") -> None:
        super().__init__(message, status_code=HTTPStatus.BAD_REQUEST, code="bad_request")


class NotFound(APIError):
    """404 when resources are missing."""

    def __init__(self, message: str = "Resource not found") -> None:
        super().__init__(message, status_code=HTTPStatus.NOT_FOUND, code="not_found")


class Conflict(APIError):
    """409 for uniqueness/constraint collisions."""

    def __init__(self, message: str = "Conflict") -> None:
        super().__init__(message, status_code=HTTPStatus.CONFLICT, code="conflict")


class Unauthorized(APIError):
    """401 when authentication fails."""

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message, status_code=HTTPStatus.UNAUTHORIZED, code="unauthorized")


class Forbidden(APIError):
    """403 when a presented token is rejected."""

    def __init__(self, message: str = "Forbidden") -> None:
        super().__init__(message, status_code=HTTPStatus.FORBIDDEN, code="forbidden")


def init_app(app: Flask) -> None:
    """
    Attach JSON error handlers to the Flask app.

    Notes
    -----
    - Guarantees ``{success: false, message, errors?}`` bodies for every error.
    - Service-layer errors are translated into :class:`APIError` first.
    - Emits 5xx with ``exc_info`` for traceability; 4xx as warnings.
    """
    from customer_directory.services._shared.base import translate_service_error
    from customer_directory.services._shared.errors import ServiceError

    @app.errorhandler(APIError)
    def handle_api_error(err: APIError):
        level = log.error if err.status_code >= 500 else log.warning
        level(
            "APIError: code=%s status=%s msg=%s request_id=%s",
            err.code,
            err.status_code,
            err.message,
            ensure_request_id(),
        )
        return _error_response(err.to_envelope(), err.status_code)

    @app.errorhandler(ServiceError)
    def handle_service_error(err: ServiceError):
        return handle_api_error(translate_service_error(err))

    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        status = int(err.code or HTTPStatus.INTERNAL_SERVER_ERROR)
        # Werkzeug may provide HTML-ish description; normalize for clients
        message = (err.description or HTTPStatus(status).phrase).strip()
        if status == HTTPStatus.NOT_FOUND:
            message = f"Route not found - {request.path}"
        level = log.error if status >= 500 else log.warning
        level(
            "HTTPException: status=%s detail=%s request_id=%s",
            status,
            message,
            ensure_request_id(),
        )
        return _error_response(_envelope(message=message), status)

    @app.errorhandler(MarshmallowValidationError)
    def handle_validation_error(err: MarshmallowValidationError):
        errors = flatten_messages(err.messages)
        log.warning("ValidationError: request_id=%s", ensure_request_id())
        return _error_response(
            _envelope(message="Validation failed", errors=errors), HTTPStatus.BAD_REQUEST
        )

    @app.errorhandler(IntegrityError)
    def handle_integrity_error(err: IntegrityError):
        # Do not leak raw DB error to clients
        log.error("IntegrityError: request_id=%s", ensure_request_id(), exc_info=True)
        return _error_response(_envelope(message="Resource conflict"), HTTPStatus.CONFLICT)

    @app.errorhandler(Exception)
    def handle_unexpected_error(err: Exception):
        log.error("Unhandled exception: request_id=%s", ensure_request_id(), exc_info=True)
        data = {"error": str(err)} if current_app.debug else None
        return _error_response(
            _envelope(message="Internal server error", data=data),
            HTTPStatus.INTERNAL_SERVER_ERROR,
        )
