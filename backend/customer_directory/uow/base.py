"""
Abstract Unit of Work contract shared by the writer and read-only scopes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from customer_directory.repositories import CustomerRepository


class UnitOfWork(ABC):
    """
    Transactional boundary for one service call.

    Every repository exposed by a unit of work shares its session, so the
    uniqueness probes and the write they guard see the same snapshot.

    Attributes
    ----------
    customers : CustomerRepository
        Customer persistence bound to this unit's session.
    """

    customers: CustomerRepository

    @abstractmethod
    def __enter__(self) -> UnitOfWork: ...

    @abstractmethod
    def __exit__(self, exc_type, exc, tb) -> None: ...

    @abstractmethod
    def commit(self) -> None:
        """Make staged changes durable."""

    @abstractmethod
    def rollback(self) -> None:
        """Discard staged changes."""
