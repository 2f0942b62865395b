"""Liveness endpoint with a database probe."""

from __future__ import annotations

from datetime import UTC, datetime

from flask import Blueprint, current_app
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from customer_directory.api.deps import envelope, get_session, timing

bp = Blueprint("health", __name__)


def _database_status() -> str:
    try:
        get_session().execute(text("SELECT 1"))
    except SQLAlchemyError:  # pragma: no cover - depends on DB backend
        current_app.logger.exception("healthcheck.db_error")
        return "fail"
    return "ok"


@bp.get("/health")
@timing
def healthcheck():
    """Always 200 while the process serves requests; ``db`` reports the probe."""

    return envelope(
        "Server is running",
        {
            "status": "ok",
            "db": _database_status(),
            "version": current_app.config.get("APP_VERSION", "dev"),
            "timestamp": datetime.now(UTC).isoformat(),
        },
    )
