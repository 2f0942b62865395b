"""Cross-origin policy for the browser front end."""

from __future__ import annotations

from flask import Flask
from flask_cors import CORS

from customer_directory.core.logger import REQUEST_ID_HEADER


def parse_origins(raw: str | None) -> list[str]:
    """Split the comma-separated ``CORS_ORIGINS`` value; ``[]`` means any origin."""
    origins = [o.strip() for o in (raw or "").split(",") if o.strip()]
    return [] if origins == ["*"] else origins


def init_app(app: Flask) -> None:
    """Enable CORS on ``/api/*``.

    Token cookies only cross origins when credentials are allowed, and
    browsers refuse credentials with a wildcard origin. Credentials are
    therefore enabled only for an explicit origin list.
    """
    origins = parse_origins(app.config.get("CORS_ORIGINS"))

    CORS(
        app,
        resources={r"/api/*": {"origins": origins or "*"}},
        supports_credentials=bool(origins),
        expose_headers=[REQUEST_ID_HEADER],
        max_age=app.config.get("CORS_MAX_AGE", 600),
    )
