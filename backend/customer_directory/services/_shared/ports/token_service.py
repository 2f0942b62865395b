from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


class ClaimsSource(Protocol):
    """Anything exposing the three identity attributes embedded in tokens."""

    id: str
    username: str
    email: str


@dataclass(frozen=True, slots=True)
class TokenClaims:
    """
    Identity claim set carried by both token kinds.

    :param id: Customer id.
    :param username: Customer username at issuance time.
    :param email: Customer email at issuance time.
    """

    id: str
    username: str
    email: str

    @classmethod
    def from_customer(cls, customer: ClaimsSource) -> TokenClaims:
        return cls(id=str(customer.id), username=customer.username, email=customer.email)

    def as_dict(self) -> dict[str, str]:
        return {"id": self.id, "username": self.username, "email": self.email}


@dataclass(frozen=True, slots=True)
class TokenPair:
    """Access + refresh token pair."""

    access_token: str
    refresh_token: str


class TokenServicePort(Protocol):
    """Port for issuing and verifying the two token kinds."""

    def issue_access_token(self, claims: TokenClaims) -> str: ...

    def issue_refresh_token(self, claims: TokenClaims) -> str: ...

    def verify_access_token(self, token: str) -> TokenClaims: ...

    def verify_refresh_token(self, token: str) -> TokenClaims: ...

    def issue_token_pair(self, customer: ClaimsSource) -> TokenPair: ...
