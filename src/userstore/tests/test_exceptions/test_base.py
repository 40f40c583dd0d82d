import pytest

from userstore.exceptions import (
    ConfigurationError,
    ConflictError,
    ErrorKind,
    NotFoundError,
    RepositoryError,
    ValidationError,
)


@pytest.mark.parametrize(
    "error, kind, status",
    [
        (ValidationError("Name cannot be empty", fields=["name"]), ErrorKind.VALIDATION, 422),
        (ConflictError("Email already exists", fields=["email"]), ErrorKind.CONFLICT, 409),
        (NotFoundError("Failed to find user: Resource not found"), ErrorKind.NOT_FOUND, 404),
        (ConfigurationError("Failed to load SQL query 'x': missing"), ErrorKind.CONFIGURATION, 500),
        (RepositoryError("Failed to create user: boom"), ErrorKind.STORE, 500),
    ],
)
def test_kind_and_status(error, kind, status):
    assert isinstance(error, RepositoryError)
    assert error.kind is kind
    assert error.error_code == kind.value
    assert error.http_status() == status


def test_to_payload_includes_fields_not_constraint():
    error = ConflictError("Email already exists", fields=["email"], constraint="uq_users_email")

    assert error.to_payload() == {"detail": "Email already exists", "code": "conflict", "fields": ["email"]}


def test_to_payload_without_fields():
    assert NotFoundError().to_payload() == {"detail": "Not found", "code": "not_found"}


def test_str_mentions_fields_and_constraint():
    error = ConflictError("Email already exists", fields=["email"], constraint="uq_users_email")

    assert str(error) == "Email already exists (fields: email; constraint: uq_users_email)"
    assert str(RepositoryError("plain")) == "plain"


def test_unknown_error_code_falls_back_to_400():
    assert RepositoryError("odd", error_code="teapot").http_status() == 400
