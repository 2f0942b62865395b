# tests/unit/services/test_customer_service.py
from __future__ import annotations

import pytest

from customer_directory.infra.security.password_hasher import WerkzeugPasswordHasher
from customer_directory.models import Customer
from customer_directory.repositories.customer import CustomerRepository
from customer_directory.services._shared.errors import (
    ConflictError,
    InvalidIdentifierError,
    NotFoundError,
    ValidationFailedError,
)
from customer_directory.services.customers import CustomerListIn, CustomerOut, CustomerService
from customer_directory.services.customers.service import EMAIL_TAKEN, USERNAME_TAKEN
from tests.factories.customer import CustomerFactory

ABSENT_ID = "00000000-0000-4000-8000-000000000000"


# ------------------------------ Fixtures ---------------------------------- #
@pytest.fixture()
def hasher() -> WerkzeugPasswordHasher:
    return WerkzeugPasswordHasher(method="pbkdf2:sha256:1000")


@pytest.fixture()
def service(hasher) -> CustomerService:
    return CustomerService(hasher=hasher)


@pytest.fixture()
def payload() -> dict:
    return {
        "username": "alice01",
        "email": "alice@example.com",
        "password": "Secret123",
        "first_name": "Alice",
        "last_name": "Doe",
    }


# ------------------------------- Create ----------------------------------- #
def test_create_customer_hashes_password_and_hides_it(service, hasher, payload, session):
    out = service.create_customer(payload)

    assert isinstance(out, CustomerOut)
    assert not hasattr(out, "password_hash")
    assert out.username == "alice01"

    stored = session.get(Customer, out.id)
    assert stored.password_hash != "Secret123"
    assert hasher.verify("Secret123", stored.password_hash)


def test_create_customer_collects_all_validation_errors(service, session):
    with pytest.raises(ValidationFailedError) as exc:
        service.create_customer({"username": "x", "email": "bad"})
    assert len(exc.value.errors) == 5
    assert session.query(Customer).count() == 0


def test_create_customer_username_conflict_wins_over_email(service, payload, session):
    CustomerFactory(username="alice01", email="alice@example.com")
    session.commit()

    with pytest.raises(ConflictError) as exc:
        service.create_customer(payload)
    assert str(exc.value) == USERNAME_TAKEN


def test_create_customer_email_conflict(service, payload, session):
    CustomerFactory(email="alice@example.com")
    session.commit()

    with pytest.raises(ConflictError, match=EMAIL_TAKEN):
        service.create_customer(payload)


def test_create_customer_ignores_unknown_keys(service, payload, session):
    out = service.create_customer({**payload, "id": "forced", "is_admin": True})
    assert out.id != "forced"


# The storage constraints catch writes that race past the lookups
@pytest.fixture()
def blind_lookups(monkeypatch):
    monkeypatch.setattr(CustomerRepository, "find_by_username", lambda self, username: None)
    monkeypatch.setattr(CustomerRepository, "find_by_email", lambda self, email: None)


def test_create_customer_username_backstop(service, payload, session, blind_lookups):
    CustomerFactory(username="alice01")
    session.commit()

    with pytest.raises(ConflictError, match=USERNAME_TAKEN):
        service.create_customer(payload)


def test_create_customer_email_backstop(service, payload, session, blind_lookups):
    CustomerFactory(email="alice@example.com")
    session.commit()

    with pytest.raises(ConflictError, match=EMAIL_TAKEN):
        service.create_customer(payload)


# ------------------------------- Read ------------------------------------- #
def test_get_customer(service, session):
    c = CustomerFactory()
    session.commit()

    out = service.get_customer(c.id)
    assert out.id == c.id
    assert out.email == c.email


def test_get_customer_malformed_vs_absent(service):
    with pytest.raises(InvalidIdentifierError):
        service.get_customer("not-an-id")
    with pytest.raises(NotFoundError, match="Customer not found"):
        service.get_customer(ABSENT_ID)


def test_list_customers_filters_and_pages(service, session):
    for i in range(3):
        CustomerFactory(username=f"list{i}")
    session.commit()

    page = service.list_customers(CustomerListIn(page=2, limit=2, sort=("username",)))
    assert [c.username for c in page.items] == ["list2"]
    assert page.total == 3

    filtered = service.list_customers(CustomerListIn(username="list1"))
    assert [c.username for c in filtered.items] == ["list1"]
    assert filtered.total == 1


# ------------------------------- Update ----------------------------------- #
def test_update_customer_partial(service, hasher, session):
    c = CustomerFactory(first_name="Old", last_name="Name")
    session.commit()
    old_hash = c.password_hash

    out = service.update_customer(c.id, {"first_name": "New", "unknown": 1})
    assert out.first_name == "New"
    assert out.last_name == "Name"
    assert session.get(Customer, c.id).password_hash == old_hash


def test_update_customer_rehashes_new_password(service, hasher, session):
    c = CustomerFactory()
    session.commit()

    service.update_customer(c.id, {"password": "NewSecret9"})
    assert hasher.verify("NewSecret9", session.get(Customer, c.id).password_hash)


def test_update_customer_keeps_own_username(service, session):
    c = CustomerFactory(username="same_name")
    session.commit()

    out = service.update_customer(c.id, {"username": "same_name", "last_name": "Other"})
    assert out.username == "same_name"


def test_update_customer_conflicts_with_other_record(service, session):
    CustomerFactory(username="taken", email="taken@example.com")
    c = CustomerFactory()
    session.commit()

    with pytest.raises(ConflictError, match=USERNAME_TAKEN):
        service.update_customer(c.id, {"username": "taken"})
    with pytest.raises(ConflictError, match=EMAIL_TAKEN):
        service.update_customer(c.id, {"email": "taken@example.com"})


def test_update_customer_validates_before_lookup(service):
    with pytest.raises(ValidationFailedError):
        service.update_customer("not-an-id", {"email": "bad"})
    with pytest.raises(InvalidIdentifierError):
        service.update_customer("not-an-id", {"first_name": "Ok"})
    with pytest.raises(NotFoundError):
        service.update_customer(ABSENT_ID, {"first_name": "Ok"})


def test_update_customer_backstop(service, session, blind_lookups):
    CustomerFactory(username="taken", email="taken@example.com")
    c = CustomerFactory()
    session.commit()

    with pytest.raises(ConflictError, match=USERNAME_TAKEN):
        service.update_customer(c.id, {"username": "taken"})
    with pytest.raises(ConflictError, match=EMAIL_TAKEN):
        service.update_customer(c.id, {"email": "taken@example.com"})


# ------------------------------- Delete ----------------------------------- #
def test_delete_customer(service, session):
    c = CustomerFactory()
    session.commit()

    assert service.delete_customer(c.id) is True
    with pytest.raises(NotFoundError):
        service.get_customer(c.id)
    with pytest.raises(NotFoundError):
        service.delete_customer(c.id)
