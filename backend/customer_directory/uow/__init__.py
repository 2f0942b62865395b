"""Unit of Work implementations."""

from customer_directory.uow.base import UnitOfWork
from customer_directory.uow.sqlalchemy_uow import (
    ReadOnlyViolation,
    SQLAlchemyReadOnlyUnitOfWork,
    SQLAlchemyUnitOfWork,
)

__all__ = [
    "ReadOnlyViolation",
    "UnitOfWork",
    "SQLAlchemyUnitOfWork",
    "SQLAlchemyReadOnlyUnitOfWork",
]
