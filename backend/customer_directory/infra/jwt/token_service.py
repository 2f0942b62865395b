# customer_directory/infra/jwt/token_service.py
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt

from customer_directory.core.config import AuthSettings
from customer_directory.services._shared.errors import InvalidTokenError
from customer_directory.services._shared.ports import (
    ClaimsSource,
    TokenClaims,
    TokenPair,
    TokenServicePort,
)

log = logging.getLogger(__name__)

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"

INVALID_ACCESS_MESSAGE = "Invalid or expired access token"
INVALID_REFRESH_MESSAGE = "Invalid or expired refresh token"

IDENTITY_CLAIMS = ("id", "username", "email")
REGISTERED_CLAIMS = ("exp", "iat", "jti", "type")


@dataclass(frozen=True, slots=True)
class _TokenKind:
    type: str
    secret: str
    lifetime: timedelta
    invalid_message: str


class JWTTokenService(TokenServicePort):
    """
    Stateless HS256 token issuer/verifier built on PyJWT.

    Access and refresh tokens are signed with distinct secrets and carry a
    ``type`` claim, so neither kind verifies as the other. Every token gets a
    random ``jti`` which keeps two tokens issued in the same second distinct.

    .. note::
       Nothing is stored server-side: a token stays valid until ``exp``.
    """

    def __init__(self, settings: AuthSettings) -> None:
        self.algorithm = settings.algorithm
        self._access = _TokenKind(
            ACCESS_TOKEN_TYPE,
            settings.access_secret,
            settings.access_expires,
            INVALID_ACCESS_MESSAGE,
        )
        self._refresh = _TokenKind(
            REFRESH_TOKEN_TYPE,
            settings.refresh_secret,
            settings.refresh_expires,
            INVALID_REFRESH_MESSAGE,
        )

    # ------------------------------------------------------------------ #
    # Issuance
    # ------------------------------------------------------------------ #

    def issue_access_token(self, claims: TokenClaims) -> str:
        return self._encode(claims, self._access)

    def issue_refresh_token(self, claims: TokenClaims) -> str:
        return self._encode(claims, self._refresh)

    def issue_token_pair(self, customer: ClaimsSource) -> TokenPair:
        """Derive the claim set from ``customer`` and sign both token kinds."""
        claims = TokenClaims.from_customer(customer)
        return TokenPair(
            access_token=self.issue_access_token(claims),
            refresh_token=self.issue_refresh_token(claims),
        )

    # ------------------------------------------------------------------ #
    # Verification
    # ------------------------------------------------------------------ #

    def verify_access_token(self, token: str) -> TokenClaims:
        """
        :raises InvalidTokenError: On any signature, expiry, type or shape failure.
        """
        return self._decode(token, self._access)

    def verify_refresh_token(self, token: str) -> TokenClaims:
        """
        :raises InvalidTokenError: On any signature, expiry, type or shape failure.
        """
        return self._decode(token, self._refresh)

    # ------------------------------------------------------------------ #
    # Internals
    # ------------------------------------------------------------------ #

    def _encode(self, claims: TokenClaims, kind: _TokenKind) -> str:
        now = datetime.now(UTC)
        payload: dict[str, Any] = {
            **claims.as_dict(),
            "iat": now,
            "exp": now + kind.lifetime,
            "jti": uuid.uuid4().hex,
            "type": kind.type,
        }
        return jwt.encode(payload, kind.secret, algorithm=self.algorithm)

    def _decode(self, token: str, kind: _TokenKind) -> TokenClaims:
        if not isinstance(token, str) or not token:
            raise InvalidTokenError(kind.invalid_message)
        try:
            payload = jwt.decode(
                token,
                kind.secret,
                algorithms=[self.algorithm],
                options={"require": ["exp", "iat", "type"]},
            )
        except jwt.PyJWTError as exc:
            log.debug("Rejected %s token: %s", kind.type, exc.__class__.__name__)
            raise InvalidTokenError(kind.invalid_message) from exc

        if payload.get("type") != kind.type:
            raise InvalidTokenError(kind.invalid_message)
        values = [payload.get(name) for name in IDENTITY_CLAIMS]
        if not all(isinstance(v, str) and v for v in values):
            raise InvalidTokenError(kind.invalid_message)
        return TokenClaims(*values)
