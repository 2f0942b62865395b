from customer_directory.services._shared.ports.password_hasher import PasswordHasherPort
from customer_directory.services._shared.ports.token_service import (
    ClaimsSource,
    TokenClaims,
    TokenPair,
    TokenServicePort,
)

__all__ = [
    "ClaimsSource",
    "PasswordHasherPort",
    "TokenClaims",
    "TokenPair",
    "TokenServicePort",
]
