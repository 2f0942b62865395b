# customer_directory/services/_shared/base.py
from __future__ import annotations

from collections.abc import Iterable

from customer_directory.core import errors as api_errors
from customer_directory.repositories.base import Pagination
from customer_directory.services._shared.errors import (
    ConflictError,
    InvalidIdentifierError,
    InvalidTokenError,
    NotFoundError,
    ServiceError,
    UnauthenticatedError,
    ValidationFailedError,
)
from customer_directory.services.validation import ValidationResult
from customer_directory.uow.sqlalchemy_uow import (
    SQLAlchemyReadOnlyUnitOfWork,
    SQLAlchemyUnitOfWork,
)


class BaseService:
    """
    Base class for application services.

    Responsibilities
    ----------------
    * Provide helpers to run read-only and read-write units of work.
    * Offer shared validation helpers (pagination, rule results).
    * Keep services thin, orchestration-only, no web/ORM leakage.

    Notes
    -----
    - Services must never touch the global session; always use a Unit of Work.
    """

    # -------------------------- UoW helpers ---------------------------------

    def rw_uow(self) -> SQLAlchemyUnitOfWork:
        """
        Create a read-write Unit of Work.

        :returns: Read-write UoW instance.
        :rtype: SQLAlchemyUnitOfWork
        """
        return SQLAlchemyUnitOfWork()

    def ro_uow(self) -> SQLAlchemyReadOnlyUnitOfWork:
        """
        Create a read-only Unit of Work.

        :returns: Read-only UoW instance.
        :rtype: SQLAlchemyReadOnlyUnitOfWork
        """
        return SQLAlchemyReadOnlyUnitOfWork()

    # ----------------------- Validation utilities ---------------------------

    @staticmethod
    def ensure_valid(result: ValidationResult) -> None:
        """
        Raise when a validation aggregator reported problems.

        :raises ValidationFailedError: Carrying every collected message.
        """
        if not result.is_valid:
            raise ValidationFailedError(errors=list(result.errors))

    def ensure_pagination(
        self, *, page: int, limit: int, sort: Iterable[str] | None = None
    ) -> Pagination:
        """
        Build a Pagination value object with basic clamping.

        :param page: 1-based page number.
        :type page: int
        :param limit: Page size.
        :type limit: int
        :param sort: Sort tokens like ["-created_at", "username"].
        :type sort: Iterable[str] | None
        :returns: Pagination instance.
        :rtype: Pagination
        """
        page = max(1, int(page))
        limit = max(1, int(limit))
        return Pagination(page=page, limit=limit, sort=list(sort or []))


def translate_service_error(exc: ServiceError) -> api_errors.APIError:
    """
    Map domain/service-level errors to API-level (HTTP) errors.

    :param exc: Exception raised within the service layer.
    :type exc: ServiceError
    :returns: Translated exception ready to be rendered.
    :rtype: APIError
    """
    if isinstance(exc, ValidationFailedError):
        # → 400 Bad Request with field messages
        return api_errors.ValidationFailed(list(exc.errors), message=str(exc))

    if isinstance(exc, InvalidIdentifierError):
        # → 400 Bad Request
        return api_errors.BadRequest(str(exc))

    if isinstance(exc, UnauthenticatedError):
        # → 401 Unauthorized
        return api_errors.Unauthorized(str(exc))

    if isinstance(exc, InvalidTokenError):
        # → 403 Forbidden
        return api_errors.Forbidden(str(exc))

    if isinstance(exc, NotFoundError):
        # → 404 Not Found
        return api_errors.NotFound(str(exc))

    if isinstance(exc, ConflictError):
        # → 409 Conflict
        return api_errors.Conflict(str(exc))

    # Any other ServiceError subclass → 400 Bad Request
    return api_errors.BadRequest(str(exc) or "Bad request")
