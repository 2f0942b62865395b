"""Deterministic demo customers for local development."""

from __future__ import annotations

import logging
from typing import Any

from customer_directory.services._shared.errors import ConflictError
from customer_directory.services.customers import CustomerService

LOGGER = logging.getLogger(__name__)

DEMO_PASSWORD = "Password1"

DEMO_CUSTOMERS: tuple[dict[str, str], ...] = (
    {"username": "alice", "email": "alice@example.com", "first_name": "Alice", "last_name": "Doe"},
    {"username": "bob_b", "email": "bob@example.com", "first_name": "Bob", "last_name": "Brown"},
    {"username": "carol", "email": "carol@example.com", "first_name": "Carol", "last_name": "Ng"},
    {"username": "dave_99", "email": "dave@example.com", "first_name": "Dave", "last_name": "Li"},
)


def seed_customers(service: CustomerService, *, verbose: bool = False) -> dict[str, int]:
    """Create each demo customer unless its username or email is already taken."""
    counters = {"created": 0, "existing": 0}
    for row in DEMO_CUSTOMERS:
        payload: dict[str, Any] = {**row, "password": DEMO_PASSWORD}
        try:
            service.create_customer(payload)
        except ConflictError:
            counters["existing"] += 1
            if verbose:
                LOGGER.debug("Customer %s already present", row["username"])
            continue
        counters["created"] += 1
    return counters


def run_all(service: CustomerService, *, verbose: bool = False) -> dict[str, dict[str, int]]:
    """Run every seeder and return a ``{table: {created, existing}}`` summary."""
    return {"customers": seed_customers(service, verbose=verbose)}
