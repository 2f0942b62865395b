"""Shared API helpers for request parsing and cross-cutting concerns."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable
from typing import Any, TypeVar, cast

from flask import Response, current_app, g, jsonify, request
from sqlalchemy.orm import Session

from customer_directory.core.errors import Forbidden, Unauthorized
from customer_directory.core.extensions import db, get_auth_settings
from customer_directory.infra.jwt.token_service import JWTTokenService
from customer_directory.infra.security.password_hasher import WerkzeugPasswordHasher
from customer_directory.services._shared.errors import InvalidTokenError
from customer_directory.services._shared.ports import TokenClaims
from customer_directory.services.auth import AuthService
from customer_directory.services.customers import CustomerService
from customer_directory.services.validation import sanitize_payload

F = TypeVar("F", bound=Callable[..., Any])

ACCESS_TOKEN_REQUIRED = "Access token required"


# ------------------------------ Services ----------------------------------


def get_session() -> Session:
    """Return the SQLAlchemy session bound to the current application."""

    return cast(Session, db.session)


def token_service() -> JWTTokenService:
    """Build the token service from the frozen auth settings."""

    return JWTTokenService(get_auth_settings(current_app))


def password_hasher() -> WerkzeugPasswordHasher:
    """Build the password hasher from the frozen auth settings."""

    return WerkzeugPasswordHasher.from_settings(get_auth_settings(current_app))


def customer_service() -> CustomerService:
    return CustomerService(hasher=password_hasher())


def auth_service() -> AuthService:
    hasher = password_hasher()
    return AuthService(
        token_service=token_service(),
        hasher=hasher,
        customers=CustomerService(hasher=hasher),
    )


# ------------------------------ Request bodies -----------------------------


def json_payload() -> dict[str, Any]:
    """Return the sanitized JSON object body, or ``{}`` when absent or not an object."""

    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        return {}
    return sanitize_payload(body)


# ------------------------------ Responses ----------------------------------


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    response = jsonify(payload)
    response.status_code = status
    return response


def envelope(message: str, data: Any = None, *, status: int = 200) -> Response:
    """Return a success envelope ``{success, message, data?}``."""

    body: dict[str, Any] = {"success": True, "message": message}
    if data is not None:
        body["data"] = data
    return json_response(body, status=status)


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            request_endpoint = getattr(request, "endpoint", None)
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request_endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]


# ------------------------------ Authentication -----------------------------


def extract_access_token() -> str | None:
    """Return the access token from the cookie, else the ``Bearer`` header."""

    settings = get_auth_settings(current_app)
    token = request.cookies.get(settings.access_cookie_name)
    if token:
        return token
    header = request.headers.get("Authorization", "")
    scheme, _, value = header.partition(" ")
    if scheme.lower() == "bearer" and value.strip():
        return value.strip()
    return None


def current_customer() -> TokenClaims | None:
    """Claims of the authenticated caller, or ``None`` for anonymous requests."""

    return cast(TokenClaims | None, g.get("current_customer"))


def require_auth(func: F) -> F:
    """Ensure the request carries a valid access token.

    A missing token yields 401; a token that fails verification yields 403.
    Claims land in ``g.current_customer``.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        token = extract_access_token()
        if not token:
            raise Unauthorized(ACCESS_TOKEN_REQUIRED)
        try:
            g.current_customer = token_service().verify_access_token(token)
        except InvalidTokenError as exc:
            raise Forbidden(str(exc)) from exc
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def optional_auth(func: F) -> F:
    """Attach claims when a valid access token is present; never rejects."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        g.current_customer = None
        token = extract_access_token()
        if token:
            try:
                g.current_customer = token_service().verify_access_token(token)
            except InvalidTokenError:
                current_app.logger.debug("optional_auth.ignored_invalid_token")
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]
