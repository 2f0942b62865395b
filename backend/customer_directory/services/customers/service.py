"""
CustomerService
===============

Application service for the `Customer` aggregate:
- Administrative CRUD (list / get / create / update / delete)
- The uniqueness-checked creation path shared with self-service registration
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

from sqlalchemy.exc import IntegrityError

from customer_directory.repositories.customer import CustomerRepository
from customer_directory.services._shared.base import BaseService
from customer_directory.services._shared.errors import ConflictError, NotFoundError, violates
from customer_directory.services._shared.ports import PasswordHasherPort
from customer_directory.services.customers.dto import (
    CustomerListIn,
    CustomerListOut,
    CustomerOut,
)
from customer_directory.services.validation import (
    ValidationResult,
    validate_customer_create,
    validate_customer_update,
)

log = logging.getLogger(__name__)

USERNAME_TAKEN = "Username already exists"
EMAIL_TAKEN = "Email already exists"

PROFILE_FIELDS = ("username", "email", "first_name", "last_name")


def conflict_from_integrity_error(exc: IntegrityError) -> ConflictError | None:
    """
    Translate a unique-constraint violation into the probe's ConflictError.

    :returns: Matching ConflictError, or ``None`` for unrelated violations.
    """
    if violates(exc, "uq_customers_username", "customers.username"):
        return ConflictError("Customer", USERNAME_TAKEN)
    if violates(exc, "uq_customers_email", "customers.email"):
        return ConflictError("Customer", EMAIL_TAKEN)
    return None


class CustomerService(BaseService):
    """
    Application service for the `Customer` aggregate.

    Responsibilities
    ----------------
    - Validate payloads with the validation engine.
    - Probe username/email uniqueness before writing (first conflict wins).
    - Hash passwords; the repository only ever sees ``password_hash``.
    - Map storage-level uniqueness violations to the same ConflictError.
    """

    def __init__(self, *, hasher: PasswordHasherPort) -> None:
        """
        :param hasher: One-way password hasher.
        """
        self.hasher = hasher

    # --------------------------------------------------------------------- #
    # Retrieval
    # --------------------------------------------------------------------- #

    def list_customers(self, dto: CustomerListIn) -> CustomerListOut:
        """
        List customers matching exact username/email filters.

        :param dto: Filters and paging.
        :returns: Page of public-safe customers plus the unpaged total.
        """
        pagination = self.ensure_pagination(page=dto.page, limit=dto.limit, sort=dto.sort)
        with self.ro_uow() as uow:
            repo: CustomerRepository = uow.customers
            page = repo.find_all(
                filters={"username": dto.username, "email": dto.email},
                skip=pagination.offset,
                limit=pagination.limit,
                sort=pagination.sort,
            )
            items = [CustomerOut.from_model(c) for c in page.items]

        return CustomerListOut(
            items=items, total=page.total, page=pagination.page, limit=pagination.limit
        )

    def get_customer(self, customer_id: Any) -> CustomerOut:
        """
        Retrieve a customer by id.

        :raises InvalidIdentifierError: If the id is malformed.
        :raises NotFoundError: If no customer has that id.
        """
        with self.ro_uow() as uow:
            customer = uow.customers.find_by_id(customer_id)
            if customer is None:
                raise NotFoundError("Customer", str(customer_id))
            return CustomerOut.from_model(customer)

    # --------------------------------------------------------------------- #
    # Creation
    # --------------------------------------------------------------------- #

    def create_customer(
        self,
        payload: Mapping[str, Any],
        *,
        rules: Callable[[Mapping[str, Any]], ValidationResult] = validate_customer_create,
    ) -> CustomerOut:
        """
        Validate, probe uniqueness, hash and persist a new customer.

        Registration reuses this path with ``rules=validate_registration``.

        :param payload: Sanitized request body.
        :param rules: Validation aggregator to apply.
        :returns: Public-safe customer DTO.
        :raises ValidationFailedError: When any rule fails.
        :raises ConflictError: When username or email is taken.
        """
        self.ensure_valid(rules(payload))

        with self.rw_uow() as uow:
            repo: CustomerRepository = uow.customers

            if repo.find_by_username(payload["username"]) is not None:
                raise ConflictError("Customer", USERNAME_TAKEN)
            if repo.find_by_email(payload["email"]) is not None:
                raise ConflictError("Customer", EMAIL_TAKEN)

            data = {k: payload[k] for k in PROFILE_FIELDS}
            data["password_hash"] = self.hasher.hash(payload["password"])
            try:
                customer = repo.create(data)
            except IntegrityError as exc:
                conflict = conflict_from_integrity_error(exc)
                if conflict is None:
                    raise  # unknown integrity error -> bubble up
                raise conflict from exc

            out = CustomerOut.from_model(customer)

        log.info("customer.created", extra={"customer_id": out.id})
        return out

    # --------------------------------------------------------------------- #
    # Update
    # --------------------------------------------------------------------- #

    def update_customer(self, customer_id: Any, payload: Mapping[str, Any]) -> CustomerOut:
        """
        Apply a partial update. Unknown keys are ignored.

        A new ``password`` is hashed into ``password_hash``; every other field
        is stored as given.

        :raises ValidationFailedError: When a present field fails its rule.
        :raises InvalidIdentifierError: If the id is malformed.
        :raises NotFoundError: If no customer has that id.
        :raises ConflictError: When the new username or email is taken.
        """
        self.ensure_valid(validate_customer_update(payload))

        with self.rw_uow() as uow:
            repo: CustomerRepository = uow.customers
            customer = repo.find_by_id(customer_id)
            if customer is None:
                raise NotFoundError("Customer", str(customer_id))

            username = payload.get("username")
            if username is not None and username != customer.username:
                other = repo.find_by_username(username)
                if other is not None and other.id != customer.id:
                    raise ConflictError("Customer", USERNAME_TAKEN)

            email = payload.get("email")
            if email is not None and email != customer.email:
                other = repo.find_by_email(email)
                if other is not None and other.id != customer.id:
                    raise ConflictError("Customer", EMAIL_TAKEN)

            patch: dict[str, Any] = {k: payload[k] for k in PROFILE_FIELDS if k in payload}
            if payload.get("password"):
                patch["password_hash"] = self.hasher.hash(payload["password"])

            try:
                customer = repo.update_by_id(customer.id, patch)
            except IntegrityError as exc:
                conflict = conflict_from_integrity_error(exc)
                if conflict is None:
                    raise
                raise conflict from exc

            out = CustomerOut.from_model(customer)

        log.info("customer.updated", extra={"customer_id": out.id})
        return out

    # --------------------------------------------------------------------- #
    # Deletion
    # --------------------------------------------------------------------- #

    def delete_customer(self, customer_id: Any) -> bool:
        """
        Delete a customer.

        :raises InvalidIdentifierError: If the id is malformed.
        :raises NotFoundError: If no customer has that id.
        """
        with self.rw_uow() as uow:
            deleted = uow.customers.delete_by_id(customer_id)

        log.info("customer.deleted", extra={"customer_id": str(customer_id)})
        return deleted
