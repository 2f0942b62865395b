"""
Field-level validation rules and payload aggregators.

Each rule set is a marshmallow schema whose fields carry the client-facing
messages. Aggregators load a payload through the matching schema and return
every message at once, ordered by field declaration.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from marshmallow import (
    EXCLUDE,
    Schema,
    ValidationError,
    fields,
    pre_load,
    validate,
    validates_schema,
)

from customer_directory.core.errors import flatten_messages

USERNAME_RE = re.compile(r"[A-Za-z0-9_]{3,20}\Z")
EMAIL_RE = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+\Z")
PASSWORD_RE = re.compile(r"(?=.*[a-z])(?=.*[A-Z])(?=.*[0-9]).{8,}\Z")
NOT_BLANK_RE = re.compile(r"\s*\S")

PASSWORD_FIELDS = frozenset({"password", "password_confirmation"})

MSG_USERNAME_REQUIRED = "Username is required"
MSG_USERNAME_FORMAT = (
    "Username must be 3-20 characters and contain only letters, numbers, and underscores"
)
MSG_EMAIL_REQUIRED = "Email is required"
MSG_EMAIL_FORMAT = "Invalid email format"
MSG_PASSWORD_REQUIRED = "Password is required"
MSG_PASSWORD_FORMAT = (
    "Password must be at least 8 characters with 1 uppercase, 1 lowercase, and 1 number"
)
MSG_CONFIRMATION_REQUIRED = "Password confirmation is required"
MSG_PASSWORDS_MISMATCH = "Passwords do not match"
MSG_FIRST_NAME_REQUIRED = "First name is required"
MSG_LAST_NAME_REQUIRED = "Last name is required"

# Partial-update variants
MSG_USERNAME_INVALID = "Invalid username format"
MSG_PASSWORD_INVALID = "Invalid password format"
MSG_FIRST_NAME_EMPTY = "First name cannot be empty"
MSG_LAST_NAME_EMPTY = "Last name cannot be empty"


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """
    Outcome of an aggregator.

    :param errors: Messages in rule order; empty when valid.
    """

    errors: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


def _rule(pattern: re.Pattern[str], error: str, *, required: str | None = None) -> fields.String:
    """
    Build a string field checked against ``pattern``.

    Non-string and ``null`` values report ``error``. When ``required`` is
    given the field must be present and reports that message when absent.
    """
    messages = {"invalid": error, "null": error}
    if required is not None:
        messages["required"] = required
    return fields.String(
        required=required is not None,
        validate=validate.Regexp(pattern, error=error),
        error_messages=messages,
    )


# --------------------------------------------------------------------------- #
# Rule schemas
# --------------------------------------------------------------------------- #


class _RuleSchema(Schema):
    class Meta:
        unknown = EXCLUDE


class _PresenceSchema(_RuleSchema):
    """Rule set where ``null`` and ``""`` count as a missing field."""

    @pre_load
    def drop_empty(self, data: Mapping[str, Any], **_: Any) -> dict[str, Any]:
        return {key: value for key, value in data.items() if value is not None and value != ""}


class RegistrationRules(_PresenceSchema):
    """Self-service sign-up: every field required, password confirmed."""

    username = _rule(USERNAME_RE, MSG_USERNAME_FORMAT, required=MSG_USERNAME_REQUIRED)
    email = _rule(EMAIL_RE, MSG_EMAIL_FORMAT, required=MSG_EMAIL_REQUIRED)
    password = _rule(PASSWORD_RE, MSG_PASSWORD_FORMAT, required=MSG_PASSWORD_REQUIRED)
    password_confirmation = fields.String(
        required=True,
        error_messages={
            "required": MSG_CONFIRMATION_REQUIRED,
            "null": MSG_CONFIRMATION_REQUIRED,
            "invalid": MSG_PASSWORDS_MISMATCH,
        },
    )
    first_name = _rule(NOT_BLANK_RE, MSG_FIRST_NAME_REQUIRED, required=MSG_FIRST_NAME_REQUIRED)
    last_name = _rule(NOT_BLANK_RE, MSG_LAST_NAME_REQUIRED, required=MSG_LAST_NAME_REQUIRED)

    @validates_schema(pass_original=True, skip_on_field_errors=False)
    def confirmation_matches(
        self, data: dict[str, Any], original: Mapping[str, Any], **_: Any
    ) -> None:
        # Raw values, so a malformed password still reports a mismatch
        confirmation = original.get("password_confirmation")
        if not isinstance(confirmation, str) or not confirmation:
            return
        if confirmation != original.get("password"):
            raise ValidationError(MSG_PASSWORDS_MISMATCH, "password_confirmation")


class CustomerCreateRules(_PresenceSchema):
    """Administrative creation: sign-up rules without the confirmation field."""

    username = _rule(USERNAME_RE, MSG_USERNAME_FORMAT, required=MSG_USERNAME_REQUIRED)
    email = _rule(EMAIL_RE, MSG_EMAIL_FORMAT, required=MSG_EMAIL_REQUIRED)
    password = _rule(PASSWORD_RE, MSG_PASSWORD_FORMAT, required=MSG_PASSWORD_REQUIRED)
    first_name = _rule(NOT_BLANK_RE, MSG_FIRST_NAME_REQUIRED, required=MSG_FIRST_NAME_REQUIRED)
    last_name = _rule(NOT_BLANK_RE, MSG_LAST_NAME_REQUIRED, required=MSG_LAST_NAME_REQUIRED)

class LoginRules(_PresenceSchema):
    """Presence only; format is never hinted at on login."""

    username = _rule(NOT_BLANK_RE, MSG_USERNAME_REQUIRED, required=MSG_USERNAME_REQUIRED)
    password = _rule(NOT_BLANK_RE, MSG_PASSWORD_REQUIRED, required=MSG_PASSWORD_REQUIRED)


class CustomerUpdateRules(_RuleSchema):
    """Partial update: a key explicitly set to ``None`` fails its rule."""

    username = _rule(USERNAME_RE, MSG_USERNAME_INVALID)
    email = _rule(EMAIL_RE, MSG_EMAIL_FORMAT)
    password = _rule(PASSWORD_RE, MSG_PASSWORD_INVALID)
    first_name = _rule(NOT_BLANK_RE, MSG_FIRST_NAME_EMPTY)
    last_name = _rule(NOT_BLANK_RE, MSG_LAST_NAME_EMPTY)


def _collect(schema: Schema, data: Mapping[str, Any], **load_kwargs: Any) -> ValidationResult:
    try:
        schema.load(dict(data), **load_kwargs)
    except ValidationError as err:
        messages = err.normalized_messages()
        ordered: list[str] = []
        for name in schema.fields:
            if name in messages:
                ordered.extend(flatten_messages(messages[name]))
        return ValidationResult(ordered)
    return ValidationResult()


# --------------------------------------------------------------------------- #
# Single-field predicates
# --------------------------------------------------------------------------- #


def _accepts(pattern: re.Pattern[str], value: Any) -> bool:
    if not isinstance(value, str):
        return False
    try:
        validate.Regexp(pattern)(value)
    except ValidationError:
        return False
    return True


def is_valid_username(value: Any) -> bool:
    """3-20 ASCII letters, digits or underscores."""
    return _accepts(USERNAME_RE, value)


def is_valid_email(value: Any) -> bool:
    """``local@domain.tld`` with no whitespace and a single ``@``."""
    return _accepts(EMAIL_RE, value)


def is_valid_password(value: Any) -> bool:
    """At least 8 chars with one lowercase, one uppercase and one digit."""
    return _accepts(PASSWORD_RE, value)


# --------------------------------------------------------------------------- #
# Aggregators
# --------------------------------------------------------------------------- #


def validate_registration(data: Mapping[str, Any]) -> ValidationResult:
    """Self-service sign-up: every field required, password confirmed."""
    return _collect(RegistrationRules(), data)


def validate_customer_create(data: Mapping[str, Any]) -> ValidationResult:
    """Administrative creation: sign-up rules without the confirmation field."""
    return _collect(CustomerCreateRules(), data)


def validate_login(data: Mapping[str, Any]) -> ValidationResult:
    return _collect(LoginRules(), data)


def validate_customer_update(data: Mapping[str, Any]) -> ValidationResult:
    """Partial update: only keys present in ``data`` are checked."""
    return _collect(CustomerUpdateRules(), data, partial=True)


def sanitize_payload(data: Mapping[str, Any]) -> dict[str, Any]:
    """
    Return a copy of ``data`` with surrounding whitespace trimmed from strings.

    Password fields are copied verbatim.
    """
    return {
        key: value.strip() if isinstance(value, str) and key not in PASSWORD_FIELDS else value
        for key, value in data.items()
    }
