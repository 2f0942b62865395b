"""Unit tests for the werkzeug-backed password hasher."""

from __future__ import annotations

import pytest

from customer_directory.core.config import AuthSettings
from customer_directory.infra.security.password_hasher import WerkzeugPasswordHasher


@pytest.fixture()
def hasher() -> WerkzeugPasswordHasher:
    return WerkzeugPasswordHasher(method="pbkdf2:sha256:1000")


class TestWerkzeugPasswordHasher:
    def test_hash_is_not_plaintext_and_verifies(self, hasher):
        hashed = hasher.hash("Secret123")
        assert hashed != "Secret123"
        assert hashed.startswith("pbkdf2:sha256:1000$")
        assert hasher.verify("Secret123", hashed) is True
        assert hasher.verify("Secret124", hashed) is False

    def test_hash_is_salted(self, hasher):
        assert hasher.hash("Secret123") != hasher.hash("Secret123")

    @pytest.mark.parametrize("value", ["", None])
    def test_hash_rejects_empty(self, hasher, value):
        with pytest.raises(ValueError):
            hasher.hash(value)

    def test_verify_never_raises_on_garbage(self, hasher):
        assert hasher.verify("Secret123", "") is False
        assert hasher.verify("Secret123", "not-a-hash") is False
        assert hasher.verify(None, hasher.hash("Secret123")) is False

    def test_from_settings_uses_configured_method(self):
        settings = AuthSettings(
            access_secret="a", refresh_secret="b", password_hash_method="pbkdf2:sha256:5000"
        )
        assert WerkzeugPasswordHasher.from_settings(settings).method == "pbkdf2:sha256:5000"
