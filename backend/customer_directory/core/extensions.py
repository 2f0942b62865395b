"""Global Flask extension instances and initialization helpers."""

from __future__ import annotations

from flask import Flask
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import MetaData

from customer_directory.core.config import AuthSettings

# Global naming convention for all constraints
convention = {
    "ix": "ix_%(table_name)s_%(column_0_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(naming_convention=convention)

# Global singletons (import-safe)
db: SQLAlchemy = SQLAlchemy(session_options={"autoflush": False}, metadata=metadata)
migrate = Migrate(render_as_batch=True)

AUTH_SETTINGS_KEY = "auth_settings"


def init_app(app: Flask) -> None:
    """Initialize SQLAlchemy, migrations and the frozen auth settings.

    Parameters
    ----------
    app: flask.Flask
        Application used to bind extension instances. This call imports the
        :mod:`customer_directory.models` package so SQLAlchemy metadata is
        ready for migrations.
    """
    db.init_app(app)

    # Ensure models are imported so Alembic sees metadata
    from customer_directory import models as _models  # noqa: F401

    migrate.init_app(app, db)

    settings = AuthSettings.from_config(app.config)
    if settings.access_secret == settings.refresh_secret:
        raise RuntimeError("Access and refresh tokens must be signed with different secrets.")
    if "CHANGE_ME" in settings.access_secret and not (app.debug or app.testing):
        app.logger.warning("JWT secrets are using development placeholders.")
    app.extensions[AUTH_SETTINGS_KEY] = settings


def get_auth_settings(app: Flask) -> AuthSettings:
    """Return the auth settings frozen at application start."""
    settings = app.extensions.get(AUTH_SETTINGS_KEY)
    if settings is None:
        raise RuntimeError("Auth settings are not initialized. Call init_app() first.")
    return settings
