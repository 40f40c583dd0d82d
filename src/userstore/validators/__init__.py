from .user_validators import (
    UserInputValidator,
    is_valid_email,
    validate_create_input,
    validate_optional_field,
    validate_required,
    validate_update_input,
)

__all__ = [
    "UserInputValidator",
    "is_valid_email",
    "validate_create_input",
    "validate_optional_field",
    "validate_required",
    "validate_update_input",
]
