"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic** and should never import or depend
on Flask or HTTP. They serve as stable contracts between repositories, the
token service, the validation engine and application services.

The translation to HTTP responses is handled by
``customer_directory/core/errors.py`` via
:func:`customer_directory.services._shared.base.translate_service_error`.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from sqlalchemy.exc import IntegrityError


def violates(exc: IntegrityError, *needles: str) -> bool:
    """
    Check whether an IntegrityError originates from a specific constraint.

    PostgreSQL reports the constraint name; SQLite only reports the column
    (``UNIQUE constraint failed: customers.username``), so several needles can
    be given and any match counts.

    Parameters
    ----------
    exc : IntegrityError
        The exception raised by SQLAlchemy during flush/commit.
    *needles : str
        Constraint names or ``table.column`` fragments to look for
        (e.g. ``'uq_customers_email'``, ``'customers.email'``).

    Returns
    -------
    bool
        True if the IntegrityError matches any of the given needles.
    """
    message = str(exc.orig).lower() if exc.orig else str(exc).lower()
    return any(needle.lower() in message for needle in needles)


# --------------------------------------------------------------------------- #
# Base types
# --------------------------------------------------------------------------- #


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Notes
    -----
    - These are *not* HTTP errors.
    - They can be safely raised from repositories or domain logic.
    - The API layer later translates them to ``APIError``.
    """

    pass


# --------------------------------------------------------------------------- #
# Specific domain-level errors
# --------------------------------------------------------------------------- #


@dataclass(slots=True)
class ValidationFailedError(ServiceError):
    """
    Raised when one or more validation rules fail.

    :param errors: Ordered, human-readable rule violations.
    :type errors: list[str]
    """

    errors: list[str] = field(default_factory=list)
    message: str = "Validation failed"

    def __str__(self) -> str:
        return self.message


class InvalidIdentifierError(ServiceError):
    """Raised when an id is not well-formed (distinct from an absent record)."""

    def __init__(self, message: str = "Invalid customer ID") -> None:
        super().__init__(message)


class UnauthenticatedError(ServiceError):
    """Raised when credentials are missing or do not identify a customer."""

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(message)


class InvalidTokenError(ServiceError):
    """
    Raised for any token verification failure.

    The message never reveals which check failed (signature, expiry, type).
    """

    def __init__(self, message: str = "Invalid or expired token") -> None:
        super().__init__(message)


@dataclass(slots=True)
class NotFoundError(ServiceError):
    """
    Raised when an entity is not found in the repository.

    :param entity: Entity name (e.g., "Customer").
    :type entity: str
    :param key: Identifier or search key (kept for logs, not rendered).
    :type key: str | None
    """

    entity: str
    key: str | None = None

    def __str__(self) -> str:
        return f"{self.entity} not found"


@dataclass(slots=True)
class ConflictError(ServiceError):
    """
    Raised when a unique constraint or business rule conflict occurs.

    :param entity: Entity name (e.g., "Customer").
    :type entity: str
    :param detail: Short human-readable explanation, rendered as-is.
    :type detail: str
    """

    entity: str
    detail: str

    def __str__(self) -> str:
        return self.detail
