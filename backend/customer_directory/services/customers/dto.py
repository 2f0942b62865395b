"""
DTOs for CustomerService.

Data Transfer Objects isolate the service layer from ORM models: nothing
leaving a service carries ``password_hash`` or a live session.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from customer_directory.models.customer import Customer


@dataclass(frozen=True, slots=True)
class CustomerOut:
    """
    Public-safe customer representation.

    :param id: Customer id.
    :param username: Username.
    :param email: Email.
    :param first_name: Given name.
    :param last_name: Family name.
    :param created_at: Creation timestamp.
    :param updated_at: Last update timestamp.
    """

    id: str
    username: str
    email: str
    first_name: str
    last_name: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_model(cls, customer: Customer) -> CustomerOut:
        return cls(
            id=customer.id,
            username=customer.username,
            email=customer.email,
            first_name=customer.first_name,
            last_name=customer.last_name,
            created_at=customer.created_at,
            updated_at=customer.updated_at,
        )


@dataclass(frozen=True, slots=True)
class CustomerListIn:
    """
    Input DTO for listing customers.

    :param username: Optional exact-match filter.
    :param email: Optional exact-match filter.
    :param page: 1-based page number.
    :param limit: Page size.
    :param sort: Sort tokens like ``["-created_at"]``.
    """

    username: str | None = None
    email: str | None = None
    page: int = 1
    limit: int = 100
    sort: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class CustomerListOut:
    """
    Output DTO for a page of customers.

    :param items: Customers in the requested slice.
    :param total: Matching rows ignoring paging.
    :param page: 1-based page number.
    :param limit: Page size.
    """

    items: list[CustomerOut]
    total: int
    page: int
    limit: int
