# customer_directory/services/auth/dto.py
from __future__ import annotations

from dataclasses import dataclass

from customer_directory.services._shared.ports import TokenPair
from customer_directory.services.customers.dto import CustomerOut


@dataclass(frozen=True, slots=True)
class AuthResultOut:
    """
    Output DTO for register/login.

    :param customer: Public-safe customer.
    :type customer: CustomerOut
    :param tokens: Freshly issued access/refresh pair.
    :type tokens: TokenPair
    """

    customer: CustomerOut
    tokens: TokenPair
