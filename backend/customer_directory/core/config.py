"""Application settings with environment-based simple classes."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Final

from dotenv import load_dotenv

# Public selector env var (keep neutral name to avoid collisions)
ENV_VAR: Final[str] = "APP_ENV"  # 'development' | 'testing' | 'production'

# Loads .env during development (no-op when the file is missing)
load_dotenv()


def env_bool(name: str, default: bool = False) -> bool:
    """Parse a boolean flag from an environment variable.

    Parameters
    ----------
    name: str
        Environment variable to inspect.
    default: bool, optional
        Value returned when the variable is unset. Defaults to ``False``.

    Returns
    -------
    bool
        ``True`` if the value resembles ``{"1", "true", "yes", "y", "on"}``
        ignoring case; otherwise ``False`` or ``default`` when missing.
    """
    val = os.getenv(name)
    if val is None:
        return default
    return str(val).strip().lower() in {"1", "true", "yes", "y", "on"}


def env_int(name: str, default: int) -> int:
    """Parse an integer from an environment variable, falling back to ``default``."""
    val = os.getenv(name)
    if val is None or not val.strip():
        return default
    return int(val)


_ACCESS_SECRET = os.getenv("JWT_ACCESS_SECRET_KEY") or os.getenv("JWT_SECRET", "CHANGE_ME_JWT")


class BaseConfig:
    """Base configuration shared across environments.

    Attributes
    ----------
    API_BASE_PREFIX: str
        Root path for registering API blueprints.
    SECRET_KEY: str
        Flask secret. Defaults to a development placeholder.
    JWT_ACCESS_SECRET_KEY: str
        HMAC key signing access tokens.
    JWT_REFRESH_SECRET_KEY: str
        HMAC key signing refresh tokens. Defaults to the access key suffixed
        with ``_refresh`` so the two kinds never share a key.
    JWT_ACCESS_TOKEN_EXPIRES / JWT_REFRESH_TOKEN_EXPIRES: timedelta
        Lifetimes of the two token kinds (15 minutes / 7 days).
    ACCESS_COOKIE_NAME / REFRESH_COOKIE_NAME: str
        Cookie names used to transport the tokens.
    AUTH_COOKIE_SECURE: bool
        Marks token cookies ``Secure``.
    AUTH_COOKIE_SAMESITE: str
        ``SameSite`` policy for token cookies.
    PASSWORD_HASH_METHOD: str
        Werkzeug hashing method string (``scrypt`` by default).
    SQLALCHEMY_DATABASE_URI: str
        Database connection string consumed by SQLAlchemy.
    LOG_LEVEL: str
        Root logging verbosity (``INFO`` by default).
    CORS_ORIGINS: str
        Comma-separated list of allowed origins for CORS.

    Notes
    -----
    Values are primarily sourced from environment variables, enabling
    configuration without code changes.
    """

    ENVIRONMENT = "development"
    API_BASE_PREFIX = "/api"
    APP_VERSION = os.getenv("APP_VERSION", "1.0.0")

    # Secrets / security
    SECRET_KEY = os.getenv("SECRET_KEY", "CHANGE_ME")
    JWT_ACCESS_SECRET_KEY = _ACCESS_SECRET
    JWT_REFRESH_SECRET_KEY = os.getenv("JWT_REFRESH_SECRET_KEY") or f"{_ACCESS_SECRET}_refresh"
    JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(minutes=env_int("ACCESS_TOKEN_EXPIRES_MINUTES", 15))
    JWT_REFRESH_TOKEN_EXPIRES = timedelta(days=env_int("REFRESH_TOKEN_EXPIRES_DAYS", 7))
    PASSWORD_HASH_METHOD = os.getenv("PASSWORD_HASH_METHOD", "scrypt")

    # Token cookies
    ACCESS_COOKIE_NAME = "accessToken"
    REFRESH_COOKIE_NAME = "refreshToken"
    AUTH_COOKIE_SECURE = env_bool("AUTH_COOKIE_SECURE", False)
    AUTH_COOKIE_SAMESITE = os.getenv("AUTH_COOKIE_SAMESITE", "Lax")

    # DB
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///./dev.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)

    PROPAGATE_EXCEPTIONS = False

    # Logging & CORS
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:5173")

    # Flask built-ins
    DEBUG = False
    TESTING = False


class DevelopmentConfig(BaseConfig):
    """Configuration tailored for local development."""

    DEBUG = env_bool("FLASK_DEBUG", True)
    CORS_MAX_AGE = 600  # 10 minutes


class TestingConfig(BaseConfig):
    """Configuration for automated test runs.

    Notes
    -----
    - Uses an in-memory SQLite database unless ``TEST_DATABASE_URL`` is set.
    - Swaps scrypt for a cheaper PBKDF2 work factor to keep suites fast.
    """

    ENVIRONMENT = "testing"
    TESTING = True
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    JWT_ACCESS_SECRET_KEY = "test-access-secret-0123456789abcdef"
    JWT_REFRESH_SECRET_KEY = "test-refresh-secret-0123456789abcdef"
    PASSWORD_HASH_METHOD = "pbkdf2:sha256:10000"


class ProductionConfig(BaseConfig):
    """Configuration defaults for production deployments.

    Notes
    -----
    Token cookies are forced to ``Secure`` + ``SameSite=Strict``.
    """

    ENVIRONMENT = "production"
    DEBUG = False
    SQLALCHEMY_ECHO = False
    AUTH_COOKIE_SECURE = True
    AUTH_COOKIE_SAMESITE = "Strict"


# Map names -> classes (simple, explicit)
CONFIG_MAP: Mapping[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def get_config() -> type[BaseConfig]:
    """Return the configuration class inferred from ``APP_ENV``.

    Falls back to :class:`DevelopmentConfig` when ``APP_ENV`` is unset or
    unknown.
    """
    name = os.getenv(ENV_VAR, "development").strip().lower()
    return CONFIG_MAP.get(name, DevelopmentConfig)


@dataclass(frozen=True, slots=True)
class AuthSettings:
    """
    Immutable snapshot of every auth-related setting.

    Built once by the application factory and passed by reference to the
    token service, the password hasher and the cookie builder.

    :param access_secret: HMAC key for access tokens.
    :param refresh_secret: HMAC key for refresh tokens.
    :param algorithm: JWT signing algorithm.
    :param access_expires: Access token lifetime.
    :param refresh_expires: Refresh token lifetime.
    :param password_hash_method: Werkzeug hashing method string.
    :param access_cookie_name: Cookie carrying the access token.
    :param refresh_cookie_name: Cookie carrying the refresh token.
    :param cookie_secure: ``Secure`` flag for token cookies.
    :param cookie_samesite: ``SameSite`` policy for token cookies.
    """

    access_secret: str
    refresh_secret: str
    algorithm: str = "HS256"
    access_expires: timedelta = timedelta(minutes=15)
    refresh_expires: timedelta = timedelta(days=7)
    password_hash_method: str = "scrypt"
    access_cookie_name: str = "accessToken"
    refresh_cookie_name: str = "refreshToken"
    cookie_secure: bool = False
    cookie_samesite: str = "Lax"

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> AuthSettings:
        """
        Freeze the relevant keys of a Flask config mapping.

        :raises RuntimeError: If either signing secret is empty.
        """
        access_secret = str(config.get("JWT_ACCESS_SECRET_KEY") or "")
        refresh_secret = str(config.get("JWT_REFRESH_SECRET_KEY") or "")
        if not access_secret or not refresh_secret:
            raise RuntimeError("JWT_ACCESS_SECRET_KEY and JWT_REFRESH_SECRET_KEY must be set.")
        return cls(
            access_secret=access_secret,
            refresh_secret=refresh_secret,
            algorithm=str(config.get("JWT_ALGORITHM", "HS256")),
            access_expires=config.get("JWT_ACCESS_TOKEN_EXPIRES", timedelta(minutes=15)),
            refresh_expires=config.get("JWT_REFRESH_TOKEN_EXPIRES", timedelta(days=7)),
            password_hash_method=str(config.get("PASSWORD_HASH_METHOD", "scrypt")),
            access_cookie_name=str(config.get("ACCESS_COOKIE_NAME", "accessToken")),
            refresh_cookie_name=str(config.get("REFRESH_COOKIE_NAME", "refreshToken")),
            cookie_secure=bool(config.get("AUTH_COOKIE_SECURE", False)),
            cookie_samesite=str(config.get("AUTH_COOKIE_SAMESITE", "Lax")),
        )
