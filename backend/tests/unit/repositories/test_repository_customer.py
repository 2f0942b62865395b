"""Unit tests for CustomerRepository."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from customer_directory.repositories.customer import CustomerRepository, normalize_customer_id
from customer_directory.services._shared.errors import InvalidIdentifierError, NotFoundError
from tests.factories.customer import CustomerFactory

ABSENT_ID = "00000000-0000-4000-8000-000000000000"


class TestCustomerRepository:
    """Ensure ``CustomerRepository`` performs core persistence operations."""

    @pytest.fixture()
    def repo(self, session):
        return CustomerRepository(session=session)

    def test_create_assigns_id_and_timestamps(self, repo, session):
        """Create a customer and verify the store filled id and timestamps."""
        customer = repo.create(
            {
                "username": "alice01",
                "email": "alice@example.com",
                "password_hash": "hashed",
                "first_name": "Alice",
                "last_name": "Doe",
                "id": "caller-chosen",
            }
        )
        session.commit()

        assert customer.id != "caller-chosen"
        assert normalize_customer_id(customer.id) == customer.id
        assert customer.created_at is not None
        assert customer.created_at == customer.updated_at

    def test_lookups_are_exact(self, repo, session):
        """Username and email lookups are case-sensitive exact matches."""
        CustomerFactory(username="Alice", email="Alice@Example.com")
        session.commit()

        assert repo.find_by_username("Alice") is not None
        assert repo.find_by_username("alice") is None
        assert repo.find_by_email("Alice@Example.com") is not None
        assert repo.find_by_email("alice@example.com") is None

    def test_find_by_id(self, repo, session):
        customer = CustomerFactory()
        session.commit()

        assert repo.find_by_id(customer.id).username == customer.username
        assert repo.find_by_id(customer.id.upper()).id == customer.id

    def test_find_by_id_distinguishes_malformed_from_absent(self, repo):
        assert repo.find_by_id(ABSENT_ID) is None
        with pytest.raises(InvalidIdentifierError):
            repo.find_by_id("not-an-id")
        with pytest.raises(InvalidIdentifierError):
            repo.find_by_id(42)

    def test_find_all_defaults_to_newest_first(self, repo, session):
        base = datetime(2024, 1, 1, tzinfo=UTC)
        for offset, name in enumerate(["oldest", "middle", "newest"]):
            CustomerFactory(username=name, created_at=base + timedelta(days=offset))
        session.commit()

        page = repo.find_all()
        assert [c.username for c in page.items] == ["newest", "middle", "oldest"]
        assert page.total == 3

    def test_find_all_filters_and_slices(self, repo, session):
        base = datetime(2024, 1, 1, tzinfo=UTC)
        for i in range(5):
            CustomerFactory(username=f"user{i}", created_at=base + timedelta(hours=i))
        target = CustomerFactory(username="target", email="target@example.com")
        session.commit()

        page = repo.find_all(skip=1, limit=2, sort=["username"])
        assert [c.username for c in page.items] == ["user0", "user1"]
        assert page.total == 6

        only = repo.find_all(filters={"username": "target", "email": "target@example.com"})
        assert [c.id for c in only.items] == [target.id]
        assert only.total == 1

        none = repo.find_all(filters={"username": "target", "email": "other@example.com"})
        assert none.items == [] and none.total == 0

    def test_update_by_id_applies_patch_and_restamps(self, repo, session):
        customer = CustomerFactory(
            first_name="Old", updated_at=datetime(2020, 1, 1, tzinfo=UTC)
        )
        session.commit()
        stamp = customer.updated_at

        updated = repo.update_by_id(customer.id, {"first_name": "New", "unknown": "ignored"})
        session.commit()

        assert updated.first_name == "New"
        assert updated.updated_at != stamp
        assert not hasattr(updated, "unknown")

    def test_update_by_id_keeps_hash_when_blank(self, repo, session):
        customer = CustomerFactory()
        session.commit()
        original = customer.password_hash

        repo.update_by_id(customer.id, {"password_hash": ""})
        assert customer.password_hash == original

        repo.update_by_id(customer.id, {"password_hash": "rehashed"})
        assert customer.password_hash == "rehashed"

    def test_update_by_id_missing(self, repo):
        with pytest.raises(NotFoundError):
            repo.update_by_id(ABSENT_ID, {"first_name": "X"})
        with pytest.raises(InvalidIdentifierError):
            repo.update_by_id("nope", {"first_name": "X"})

    def test_delete_by_id(self, repo, session):
        customer = CustomerFactory()
        session.commit()

        assert repo.delete_by_id(customer.id) is True
        assert repo.find_by_id(customer.id) is None
        with pytest.raises(NotFoundError):
            repo.delete_by_id(customer.id)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("1B4E28BA-2FA1-11D2-883F-0016D3CCA427", "1b4e28ba-2fa1-11d2-883f-0016d3cca427"),
        (" 1b4e28ba-2fa1-11d2-883f-0016d3cca427 ", "1b4e28ba-2fa1-11d2-883f-0016d3cca427"),
    ],
)
def test_normalize_customer_id(raw, expected):
    assert normalize_customer_id(raw) == expected


@pytest.mark.parametrize("raw", ["", "123", "not-an-id", None])
def test_normalize_customer_id_rejects(raw):
    with pytest.raises(InvalidIdentifierError, match="Invalid customer ID"):
        normalize_customer_id(raw)
