"""
Unit of Work scopes over the Flask-SQLAlchemy session.

``SQLAlchemyUnitOfWork`` commits on a clean exit and rolls back on error.
``SQLAlchemyReadOnlyUnitOfWork`` serves lookups and list queries; it refuses
to commit and blocks any flush that would write customer rows.
"""

from __future__ import annotations

from sqlalchemy import event
from sqlalchemy.orm import Session

from customer_directory.core.extensions import db
from customer_directory.repositories import CustomerRepository
from customer_directory.uow.base import UnitOfWork


class ReadOnlyViolation(RuntimeError):
    """Raised when a read-only scope is asked to persist something."""


class _SessionScope(UnitOfWork):
    """Bind every repository to one session."""

    def __init__(self, session: Session | None = None) -> None:
        self.session = session if session is not None else db.session
        self.customers = CustomerRepository(session=self.session)


class SQLAlchemyUnitOfWork(_SessionScope):
    """Writer scope: one commit per service call."""

    def __enter__(self) -> SQLAlchemyUnitOfWork:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is not None:
            self.rollback()
            return
        try:
            self.commit()
        except Exception:
            self.rollback()
            raise

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()


class SQLAlchemyReadOnlyUnitOfWork(_SessionScope):
    """
    Reader scope for lookups and list queries.

    When the session is idle the scope opens its own transaction and rolls it
    back on exit. Inside a running transaction (nested service calls, test
    fixtures) it joins that transaction and leaves it untouched.
    """

    def __init__(self, session: Session | None = None) -> None:
        super().__init__(session)
        self._owns_transaction = False

    def __enter__(self) -> SQLAlchemyReadOnlyUnitOfWork:
        self._owns_transaction = not self.session.in_transaction()
        if self._owns_transaction:
            self.session.begin()
        event.listen(self.session, "before_flush", self._refuse_writes)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            if self._owns_transaction:
                self.session.rollback()
        finally:
            event.remove(self.session, "before_flush", self._refuse_writes)
            self._owns_transaction = False

    def commit(self) -> None:
        """
        :raises ReadOnlyViolation: Always.
        """
        raise ReadOnlyViolation("Read-only unit of work cannot commit")

    def rollback(self) -> None:
        self.session.rollback()

    def _refuse_writes(self, session, flush_context, instances) -> None:
        pending = len(session.new) + len(session.dirty) + len(session.deleted)
        if pending:
            raise ReadOnlyViolation(
                f"Read-only unit of work cannot flush {pending} pending change(s)"
            )
