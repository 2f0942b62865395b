# customer_directory/infra/security/password_hasher.py
from __future__ import annotations

from dataclasses import dataclass

from werkzeug.security import check_password_hash, generate_password_hash

from customer_directory.core.config import AuthSettings
from customer_directory.services._shared.ports import PasswordHasherPort


@dataclass(frozen=True, slots=True)
class WerkzeugPasswordHasher(PasswordHasherPort):
    """
    Salted, adaptive password hashing backed by ``werkzeug.security``.

    :param method: Werkzeug method string, e.g. ``"scrypt"`` or
        ``"pbkdf2:sha256:600000"``.
    """

    method: str = "scrypt"

    @classmethod
    def from_settings(cls, settings: AuthSettings) -> WerkzeugPasswordHasher:
        return cls(method=settings.password_hash_method)

    def hash(self, plaintext: str) -> str:
        """
        Hash a plaintext password with a fresh random salt.

        :raises ValueError: If ``plaintext`` is not a non-empty string.
        """
        if not isinstance(plaintext, str) or not plaintext:
            raise ValueError("Password must be a non-empty string.")
        return generate_password_hash(plaintext, method=self.method)

    def verify(self, plaintext: str, hashed: str) -> bool:
        """
        Compare ``plaintext`` against a stored hash in constant time.

        Returns ``False`` for empty, non-string or unparseable hashes.
        """
        if not isinstance(plaintext, str) or not isinstance(hashed, str) or not hashed:
            return False
        try:
            return bool(check_password_hash(hashed, plaintext))
        except ValueError:
            return False
