"""Authentication endpoints using the service layer."""

from __future__ import annotations

from flask import Blueprint, current_app, request

from customer_directory.api.cookies import clear_token_cookies, set_token_cookies
from customer_directory.api.deps import (
    auth_service,
    current_customer,
    envelope,
    json_payload,
    optional_auth,
    require_auth,
    timing,
)
from customer_directory.core.extensions import get_auth_settings
from customer_directory.schemas import (
    AuthResultSchema,
    CustomerSchema,
    TokenClaimsSchema,
    TokenPairSchema,
)
from customer_directory.services.auth import AuthResultOut

bp = Blueprint("auth", __name__, url_prefix="/auth")

auth_result_schema = AuthResultSchema()
token_pair_schema = TokenPairSchema()
customer_schema = CustomerSchema()
claims_schema = TokenClaimsSchema()


def _auth_result_response(result: AuthResultOut, message: str, *, status: int = 200):
    data = auth_result_schema.dump(
        {
            "user": result.customer,
            "access_token": result.tokens.access_token,
            "refresh_token": result.tokens.refresh_token,
        }
    )
    response = envelope(message, data, status=status)
    return set_token_cookies(response, result.tokens, get_auth_settings(current_app))


@bp.post("/register")
@timing
def register():
    """Register a new customer and sign them in."""

    result = auth_service().register(json_payload())
    return _auth_result_response(result, "User registered successfully", status=201)


@bp.post("/login")
@timing
def login():
    """Authenticate credentials and issue a token pair."""

    result = auth_service().login(json_payload())
    return _auth_result_response(result, "Login successful")


@bp.post("/refresh")
@timing
def refresh():
    """Exchange a refresh token (cookie or body) for a new pair."""

    settings = get_auth_settings(current_app)
    token = request.cookies.get(settings.refresh_cookie_name)
    if not token:
        body = request.get_json(silent=True)
        if isinstance(body, dict):
            token = body.get("refreshToken") or body.get("refresh_token")
    tokens = auth_service().refresh(token if isinstance(token, str) else None)
    response = envelope("Token refreshed successfully", token_pair_schema.dump(tokens))
    return set_token_cookies(response, tokens, settings)


@bp.post("/logout")
@optional_auth
@timing
def logout():
    """Clear the token cookies. Succeeds with or without a valid credential."""

    auth_service().logout(current_customer())
    response = envelope("Logout successful")
    return clear_token_cookies(response, get_auth_settings(current_app))


@bp.get("/profile")
@require_auth
@timing
def profile():
    """Return the stored record of the authenticated customer."""

    claims = current_customer()
    customer = auth_service().profile(claims.id)
    return envelope("Profile retrieved successfully", {"user": customer_schema.dump(customer)})


@bp.get("/verify")
@require_auth
@timing
def verify():
    """Echo the claim set of a valid access token."""

    return envelope("Token is valid", {"user": claims_schema.dump(current_customer())})
