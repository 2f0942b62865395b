# customer_directory/services/auth/service.py
from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from customer_directory.repositories.customer import CustomerRepository
from customer_directory.services._shared.base import BaseService
from customer_directory.services._shared.errors import (
    InvalidIdentifierError,
    InvalidTokenError,
    NotFoundError,
    UnauthenticatedError,
)
from customer_directory.services._shared.ports import (
    PasswordHasherPort,
    TokenClaims,
    TokenPair,
    TokenServicePort,
)
from customer_directory.services.auth.dto import AuthResultOut
from customer_directory.services.customers.dto import CustomerOut
from customer_directory.services.customers.service import CustomerService
from customer_directory.services.validation import validate_login, validate_registration

log = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid username or password"
REFRESH_TOKEN_REQUIRED = "Refresh token required"
USER_NOT_FOUND = "User not found"


class AuthService(BaseService):
    """
    Authentication lifecycle service (register / login / refresh / logout).

    Tokens are stateless: nothing is recorded server-side, so logout has no
    server effect and a refresh token stays usable until it expires.
    """

    def __init__(
        self,
        *,
        token_service: TokenServicePort,
        hasher: PasswordHasherPort,
        customers: CustomerService | None = None,
    ) -> None:
        """
        Initialize the service with its dependencies.

        :param token_service: Issues and verifies access/refresh tokens.
        :param hasher: One-way password hasher.
        :param customers: Creation path shared with administrative CRUD.
        """
        self.tokens = token_service
        self.hasher = hasher
        self.customers = customers or CustomerService(hasher=hasher)

    # ------------------------------------------------------------------ #
    # Register
    # ------------------------------------------------------------------ #

    def register(self, payload: Mapping[str, Any]) -> AuthResultOut:
        """
        Create a customer from a sign-up payload and issue a token pair.

        :raises ValidationFailedError: When any registration rule fails.
        :raises ConflictError: When username or email is taken.
        """
        customer = self.customers.create_customer(payload, rules=validate_registration)
        tokens = self.tokens.issue_token_pair(customer)
        log.info("auth.registered", extra={"customer_id": customer.id})
        return AuthResultOut(customer=customer, tokens=tokens)

    # ------------------------------------------------------------------ #
    # Login
    # ------------------------------------------------------------------ #

    def login(self, payload: Mapping[str, Any]) -> AuthResultOut:
        """
        Authenticate by username + password and issue a token pair.

        Unknown usernames and wrong passwords fail with the same message.

        :raises ValidationFailedError: When username or password is missing.
        :raises UnauthenticatedError: When credentials do not match.
        """
        self.ensure_valid(validate_login(payload))

        with self.ro_uow() as uow:
            repo: CustomerRepository = uow.customers
            customer = repo.find_by_username(payload["username"])
            if customer is None or not self.hasher.verify(
                payload["password"], customer.password_hash
            ):
                log.info("auth.login_failed", extra={"status": "invalid_credentials"})
                raise UnauthenticatedError(INVALID_CREDENTIALS)
            out = CustomerOut.from_model(customer)

        tokens = self.tokens.issue_token_pair(out)
        log.info("auth.login", extra={"customer_id": out.id})
        return AuthResultOut(customer=out, tokens=tokens)

    # ------------------------------------------------------------------ #
    # Refresh
    # ------------------------------------------------------------------ #

    def refresh(self, refresh_token: str | None) -> TokenPair:
        """
        Exchange a refresh token for a new pair built from the stored record.

        The presented token is not invalidated.

        :raises UnauthenticatedError: If the token is missing, invalid, expired,
            or its customer no longer exists (or its id claim is malformed).
        """
        if not refresh_token:
            raise UnauthenticatedError(REFRESH_TOKEN_REQUIRED)
        try:
            claims = self.tokens.verify_refresh_token(refresh_token)
        except InvalidTokenError as exc:
            raise UnauthenticatedError(str(exc)) from exc

        with self.ro_uow() as uow:
            try:
                customer = uow.customers.find_by_id(claims.id)
            except InvalidIdentifierError as exc:
                raise UnauthenticatedError(USER_NOT_FOUND) from exc
            if customer is None:
                raise UnauthenticatedError(USER_NOT_FOUND)
            out = CustomerOut.from_model(customer)

        log.info("auth.refreshed", extra={"customer_id": out.id})
        return self.tokens.issue_token_pair(out)

    # ------------------------------------------------------------------ #
    # Logout / identity
    # ------------------------------------------------------------------ #

    def logout(self, claims: TokenClaims | None = None) -> None:
        """Stateless logout: nothing to revoke server-side."""
        if claims is not None:
            log.info("auth.logout", extra={"customer_id": claims.id})

    def authenticate_access_token(self, token: str) -> TokenClaims:
        """
        :raises InvalidTokenError: If the access token does not verify.
        """
        return self.tokens.verify_access_token(token)

    def profile(self, customer_id: str) -> CustomerOut:
        """
        Return the stored customer behind an access token.

        :raises NotFoundError: If the customer was deleted after issuance.
        """
        try:
            return self.customers.get_customer(customer_id)
        except (InvalidIdentifierError, NotFoundError) as exc:
            raise NotFoundError("User", str(customer_id)) from exc
