"""Unit tests for the validation engine."""

from __future__ import annotations

import pytest
from marshmallow import ValidationError

from customer_directory.services.validation import (
    is_valid_email,
    is_valid_password,
    is_valid_username,
    sanitize_payload,
    validate_customer_create,
    validate_customer_update,
    validate_login,
    validate_registration,
)
from customer_directory.services.validation.rules import (
    MSG_CONFIRMATION_REQUIRED,
    MSG_EMAIL_FORMAT,
    MSG_EMAIL_REQUIRED,
    MSG_FIRST_NAME_EMPTY,
    MSG_FIRST_NAME_REQUIRED,
    MSG_LAST_NAME_EMPTY,
    MSG_LAST_NAME_REQUIRED,
    MSG_PASSWORD_FORMAT,
    MSG_PASSWORD_INVALID,
    MSG_PASSWORD_REQUIRED,
    MSG_PASSWORDS_MISMATCH,
    MSG_USERNAME_FORMAT,
    MSG_USERNAME_INVALID,
    MSG_USERNAME_REQUIRED,
    CustomerUpdateRules,
    RegistrationRules,
)


def _registration(**overrides):
    data = {
        "username": "alice01",
        "email": "alice@example.com",
        "password": "Secret123",
        "password_confirmation": "Secret123",
        "first_name": "Alice",
        "last_name": "Doe",
    }
    data.update(overrides)
    return data


# ---------------------------- Single-field rules --------------------------- #
class TestFieldRules:
    @pytest.mark.parametrize("value", ["abc", "alice_01", "A" * 20, "___"])
    def test_username_accepts(self, value):
        assert is_valid_username(value)

    @pytest.mark.parametrize("value", ["ab", "A" * 21, "bad name", "dash-ed", "ñandu", "", None, 42])
    def test_username_rejects(self, value):
        assert not is_valid_username(value)

    @pytest.mark.parametrize("value", ["a@b.co", "first.last+tag@example.org"])
    def test_email_accepts(self, value):
        assert is_valid_email(value)

    @pytest.mark.parametrize(
        "value", ["plain", "a@b", "a b@c.com", "a@@b.com", "@b.com", "a@b.", "", None]
    )
    def test_email_rejects(self, value):
        assert not is_valid_email(value)

    @pytest.mark.parametrize("value", ["Secret123", "aB3aaaaa", "Longer Pass 9x"])
    def test_password_accepts(self, value):
        assert is_valid_password(value)

    @pytest.mark.parametrize("value", ["Short1a", "alllower1", "ALLUPPER1", "NoDigitsHere", "", None])
    def test_password_rejects(self, value):
        assert not is_valid_password(value)


# -------------------------------- Aggregators ------------------------------ #
class TestValidateRegistration:
    def test_valid_payload_has_no_errors(self):
        result = validate_registration(_registration())
        assert result.is_valid
        assert result.errors == []

    def test_empty_payload_reports_every_required_field_in_order(self):
        result = validate_registration({})
        assert result.errors == [
            MSG_USERNAME_REQUIRED,
            MSG_EMAIL_REQUIRED,
            MSG_PASSWORD_REQUIRED,
            MSG_CONFIRMATION_REQUIRED,
            MSG_FIRST_NAME_REQUIRED,
            MSG_LAST_NAME_REQUIRED,
        ]

    def test_format_errors_are_collected_together(self):
        result = validate_registration(
            _registration(username="x", email="nope", password="weak", password_confirmation="weak")
        )
        assert result.errors == [MSG_USERNAME_FORMAT, MSG_EMAIL_FORMAT, MSG_PASSWORD_FORMAT]

    def test_password_mismatch(self):
        result = validate_registration(_registration(password_confirmation="Secret124"))
        assert result.errors == [MSG_PASSWORDS_MISMATCH]

    def test_blank_names_are_required(self):
        result = validate_registration(_registration(first_name="   ", last_name=""))
        assert result.errors == [MSG_FIRST_NAME_REQUIRED, MSG_LAST_NAME_REQUIRED]


class TestValidateCustomerCreate:
    def test_confirmation_is_not_required(self):
        data = _registration()
        data.pop("password_confirmation")
        assert validate_customer_create(data).is_valid

    def test_missing_password(self):
        data = _registration()
        data.pop("password")
        assert validate_customer_create(data).errors == [MSG_PASSWORD_REQUIRED]


class TestValidateLogin:
    def test_presence_only(self):
        # Format is never hinted at on login
        assert validate_login({"username": "x", "password": "y"}).is_valid

    def test_missing_fields(self):
        assert validate_login({"username": " "}).errors == [
            MSG_USERNAME_REQUIRED,
            MSG_PASSWORD_REQUIRED,
        ]


class TestValidateCustomerUpdate:
    def test_empty_patch_is_valid(self):
        assert validate_customer_update({}).is_valid

    def test_only_present_fields_are_checked(self):
        result = validate_customer_update({"first_name": "Bob"})
        assert result.is_valid

    def test_present_invalid_fields(self):
        result = validate_customer_update(
            {"username": "no spaces", "email": "bad", "password": "weak", "first_name": " "}
        )
        assert result.errors == [
            MSG_USERNAME_INVALID,
            MSG_EMAIL_FORMAT,
            MSG_PASSWORD_INVALID,
            MSG_FIRST_NAME_EMPTY,
        ]

    def test_explicit_none_counts_as_present(self):
        result = validate_customer_update({"username": None})
        assert result.errors == [MSG_USERNAME_INVALID]


def test_sanitize_trims_strings_but_not_passwords():
    cleaned = sanitize_payload(
        {"username": "  alice ", "password": " Secret123 ", "age": 3, "email": None}
    )
    assert cleaned == {"username": "alice", "password": " Secret123 ", "age": 3, "email": None}


# ------------------------------- Rule schemas ------------------------------ #
class TestRuleSchemas:
    def test_registration_schema_raises_marshmallow_error(self):
        with pytest.raises(ValidationError) as exc:
            RegistrationRules().load({"username": "alice01"})
        assert exc.value.messages["email"] == [MSG_EMAIL_REQUIRED]
        assert exc.value.messages["password_confirmation"] == [MSG_CONFIRMATION_REQUIRED]

    def test_unknown_keys_are_ignored(self):
        assert validate_registration(_registration(role="admin", age=3)).is_valid

    def test_mismatch_is_reported_with_field_errors(self):
        result = validate_registration(
            _registration(username="x", password="weak", password_confirmation="other")
        )
        assert result.errors == [MSG_USERNAME_FORMAT, MSG_PASSWORD_FORMAT, MSG_PASSWORDS_MISMATCH]

    def test_null_and_empty_count_as_missing_on_create(self):
        result = validate_customer_create(_registration(username=None, email=""))
        assert result.errors == [MSG_USERNAME_REQUIRED, MSG_EMAIL_REQUIRED]

    def test_non_string_values_report_the_field_message(self):
        result = validate_customer_update({"email": 5, "last_name": ["x"]})
        assert result.errors == [MSG_EMAIL_FORMAT, MSG_LAST_NAME_EMPTY]

    def test_update_loads_partially(self):
        loaded = CustomerUpdateRules().load({"first_name": "Bob"}, partial=True)
        assert loaded == {"first_name": "Bob"}
