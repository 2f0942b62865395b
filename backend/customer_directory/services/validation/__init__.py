from customer_directory.services.validation.rules import (
    CustomerCreateRules,
    CustomerUpdateRules,
    LoginRules,
    RegistrationRules,
    ValidationResult,
    is_valid_email,
    is_valid_password,
    is_valid_username,
    sanitize_payload,
    validate_customer_create,
    validate_customer_update,
    validate_login,
    validate_registration,
)

__all__ = [
    "CustomerCreateRules",
    "CustomerUpdateRules",
    "LoginRules",
    "RegistrationRules",
    "ValidationResult",
    "is_valid_email",
    "is_valid_password",
    "is_valid_username",
    "sanitize_payload",
    "validate_customer_create",
    "validate_customer_update",
    "validate_login",
    "validate_registration",
]
