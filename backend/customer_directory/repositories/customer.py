"""Customer repository for persistence and uniqueness lookups."""

from __future__ import annotations

import uuid
from collections.abc import Iterable, Mapping
from typing import Any

from sqlalchemy import select

from customer_directory.models.base import utcnow
from customer_directory.models.customer import Customer
from customer_directory.repositories.base import BaseRepository, Page
from customer_directory.services._shared.errors import InvalidIdentifierError, NotFoundError

DEFAULT_SORT = ("-created_at",)


def normalize_customer_id(customer_id: Any) -> str:
    """Return the canonical string form of a customer id.

    :param customer_id: Raw identifier as received from a caller.
    :returns: Lower-case, hyphenated UUID string.
    :raises InvalidIdentifierError: If the value is not a well-formed UUID.
    """
    if not isinstance(customer_id, str):
        raise InvalidIdentifierError()
    try:
        return str(uuid.UUID(customer_id.strip()))
    except ValueError as exc:
        raise InvalidIdentifierError() from exc


class CustomerRepository(BaseRepository[Customer]):
    """Persistence-only repository for :class:`Customer`.

    Stores values exactly as received: no hashing, trimming or case folding.
    The unique constraints on ``username``/``email`` remain the final word on
    uniqueness; the lookups below are fast-path probes for the services.
    """

    model = Customer

    # ---------------------------- Whitelists ----------------------------

    def _sortable_fields(self):
        """Expose sortable fields for safe public sorting."""
        return {
            "id": Customer.id,
            "username": Customer.username,
            "email": Customer.email,
            "first_name": Customer.first_name,
            "last_name": Customer.last_name,
            "created_at": Customer.created_at,
            "updated_at": Customer.updated_at,
        }

    def _filterable_fields(self):
        """Whitelist fields safe for equality filters."""
        return {
            "username": Customer.username,
            "email": Customer.email,
        }

    def _creatable_fields(self):
        return {"username", "email", "password_hash", "first_name", "last_name"}

    def _updatable_fields(self):
        return {"username", "email", "password_hash", "first_name", "last_name"}

    # ---------------------------- Lookup helpers ----------------------------

    def find_by_username(self, username: str) -> Customer | None:
        """Fetch a customer by exact username."""
        stmt = select(Customer).where(Customer.username == username)
        return self.session.execute(stmt).scalars().first()

    def find_by_email(self, email: str) -> Customer | None:
        """Fetch a customer by exact email."""
        stmt = select(Customer).where(Customer.email == email)
        return self.session.execute(stmt).scalars().first()

    def find_by_id(self, customer_id: Any) -> Customer | None:
        """Fetch a customer by id.

        :param customer_id: UUID string.
        :returns: Customer or ``None`` when the id is well-formed but absent.
        :raises InvalidIdentifierError: If ``customer_id`` is malformed.
        """
        return self.get(normalize_customer_id(customer_id))

    # ---------------------------- Writes ----------------------------

    def create(self, data: Mapping[str, Any]) -> Customer:
        """Insert a customer built from the whitelisted keys of ``data``.

        Caller-supplied ``id`` and timestamps are ignored; the store assigns
        them.

        :param data: Field mapping; ``password_hash`` must already be hashed.
        :returns: The persisted customer (flushed, id assigned).
        :raises sqlalchemy.exc.IntegrityError: On a uniqueness violation.
        """
        now = utcnow()
        customer = Customer(
            **self._pick(data, self._creatable_fields()),
            created_at=now,
            updated_at=now,
        )
        return self.add(customer)

    def find_all(
        self,
        filters: Mapping[str, Any] | None = None,
        skip: int = 0,
        limit: int = 100,
        sort: Iterable[str] | None = None,
    ) -> Page[Customer]:
        """List customers, newest first unless ``sort`` says otherwise.

        :param filters: Exact-match conjunction over ``username``/``email``.
        :param skip: Rows to skip.
        :param limit: Maximum rows returned.
        :param sort: Public sort tokens; unknown keys are ignored.
        :returns: Page whose ``total`` ignores ``skip``/``limit``.
        """
        tokens = list(sort or []) or list(DEFAULT_SORT)
        return self.slice(filters=filters, sort=tokens, offset=skip, limit=limit)

    def update_by_id(self, customer_id: Any, patch: Mapping[str, Any]) -> Customer:
        """Apply a partial update and re-stamp ``updated_at``.

        An absent or empty ``password_hash`` leaves the stored hash untouched.

        :raises InvalidIdentifierError: If ``customer_id`` is malformed.
        :raises NotFoundError: If no customer has that id.
        :raises sqlalchemy.exc.IntegrityError: On a uniqueness violation.
        """
        customer = self._require(customer_id)
        fields = dict(patch)
        if not fields.get("password_hash"):
            fields.pop("password_hash", None)
        self.assign_updates(customer, fields, flush=False)
        customer.updated_at = utcnow()
        self.flush()
        return customer

    def delete_by_id(self, customer_id: Any) -> bool:
        """Delete a customer.

        :returns: ``True`` once the row is gone.
        :raises InvalidIdentifierError: If ``customer_id`` is malformed.
        :raises NotFoundError: If no customer has that id.
        """
        self.delete(self._require(customer_id))
        return True

    def _require(self, customer_id: Any) -> Customer:
        customer = self.find_by_id(customer_id)
        if customer is None:
            raise NotFoundError("Customer", str(customer_id))
        return customer
