"""Repository package exposing persistence-layer access for domain models."""

from __future__ import annotations

from customer_directory.repositories.base import (
    BaseRepository,
    Page,
    Pagination,
    apply_sorting,
    paginate_select,
)
from customer_directory.repositories.customer import CustomerRepository

__all__ = [
    # Base
    "BaseRepository",
    "Page",
    "Pagination",
    "paginate_select",
    "apply_sorting",
    # Domain
    "CustomerRepository",
]
