"""Convenience exports for application schemas."""

from __future__ import annotations

from .auth import AuthResultSchema, TokenClaimsSchema, TokenPairSchema
from .common import PaginationMetaSchema, PaginationQuerySchema, build_pagination, split_sort
from .customer import CustomerListQuerySchema, CustomerSchema

__all__ = [
    "AuthResultSchema",
    "TokenClaimsSchema",
    "TokenPairSchema",
    "PaginationMetaSchema",
    "PaginationQuerySchema",
    "build_pagination",
    "split_sort",
    "CustomerListQuerySchema",
    "CustomerSchema",
]
