"""Token cookie helpers."""

from __future__ import annotations

from flask import Response

from customer_directory.core.config import AuthSettings
from customer_directory.services._shared.ports import TokenPair


def set_token_cookies(response: Response, tokens: TokenPair, settings: AuthSettings) -> Response:
    """Attach both tokens as ``HttpOnly`` cookies living as long as the tokens."""

    common = {
        "httponly": True,
        "secure": settings.cookie_secure,
        "samesite": settings.cookie_samesite,
        "path": "/",
    }
    response.set_cookie(
        settings.access_cookie_name,
        tokens.access_token,
        max_age=int(settings.access_expires.total_seconds()),
        **common,
    )
    response.set_cookie(
        settings.refresh_cookie_name,
        tokens.refresh_token,
        max_age=int(settings.refresh_expires.total_seconds()),
        **common,
    )
    return response


def clear_token_cookies(response: Response, settings: AuthSettings) -> Response:
    """Expire both token cookies."""

    for name in (settings.access_cookie_name, settings.refresh_cookie_name):
        response.delete_cookie(
            name,
            path="/",
            secure=settings.cookie_secure,
            httponly=True,
            samesite=settings.cookie_samesite,
        )
    return response
