"""
Input validation for user operations.

All functions are pure: they either return None or raise ValidationError. They
run before the repository touches the store.
"""
import re
from typing import Callable

from userstore.exceptions.base import ValidationError
from userstore.models.user import CreateUserInput, UpdateUserInput

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

FieldValidator = Callable[[str], bool]


def _is_blank(value: str | None) -> bool:
    return value is None or value.strip() == ""


def is_valid_email(email: str) -> bool:
    """
    Loose format check: `local@domain.tld`, no whitespace, one `@`, a `.` after it.
    """
    return bool(EMAIL_PATTERN.match(email))


def validate_required(value: str | None, name: str) -> None:
    """
    Raise ValidationError("<name> is required") when value is missing or blank.
    Used for identifiers and lookup keys.
    """
    if not value or _is_blank(value):
        raise ValidationError(f"{name} is required", fields=[name.lower().replace(" ", "_")])


def validate_create_input(data: CreateUserInput,
                          email_validator: FieldValidator = is_valid_email) -> None:
    if _is_blank(data.name):
        raise ValidationError("Name cannot be empty", fields=["name"])

    if _is_blank(data.email):
        raise ValidationError("Email cannot be empty", fields=["email"])

    if not email_validator(data.email):
        raise ValidationError("Invalid email format", fields=["email"])


def validate_optional_field(value: str | None, field_name: str,
                            validator: FieldValidator | None = None) -> None:
    """
    Validate a field only if it was provided.

    | value            | result                                      |
    | ---------------- | ------------------------------------------- |
    | None             | no-op (field absent, left unchanged)        |
    | "" / "   "       | ValidationError("<field_name> cannot be empty") |
    | fails validator  | ValidationError("Invalid <field_name> format")  |
    """
    if value is None:
        return

    field = field_name.lower()
    if _is_blank(value):
        raise ValidationError(f"{field_name} cannot be empty", fields=[field])

    if validator is not None and not validator(value):
        raise ValidationError(f"Invalid {field} format", fields=[field])


def validate_update_input(data: UpdateUserInput) -> None:
    validate_optional_field(data.name, "Name")
    validate_optional_field(data.email, "Email", is_valid_email)


class UserInputValidator:
    """
    Validation capability held by repositories.

    `email_validator` can be swapped to tighten or relax the email rule without
    changing the repository.
    """

    def __init__(self, email_validator: FieldValidator = is_valid_email):
        self.email_validator = email_validator

    def validate_create(self, data: CreateUserInput) -> None:
        validate_create_input(data, self.email_validator)

    def validate_update(self, data: UpdateUserInput) -> None:
        validate_optional_field(data.name, "Name")
        validate_optional_field(data.email, "Email", self.email_validator)

    def validate_required(self, value: str | None, name: str) -> None:
        validate_required(value, name)
