import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from userstore.exceptions import (
    ConflictError,
    ErrorClassifier,
    NotFoundError,
    RepositoryError,
    ValidationError,
    db_error_handler,
    handle_db_error,
    handle_not_found_error,
    integrity_conflict_handler,
)


class FakeDriverError(Exception):
    """Stand-in for a DBAPI exception carrying Postgres diagnostics."""

    def __init__(self, message, sqlstate=None, constraint_name=None):
        super().__init__(message)
        self.sqlstate = sqlstate
        self.diag = type("Diag", (), {"constraint_name": constraint_name})()


def _integrity(message, **kwargs) -> IntegrityError:
    return IntegrityError("INSERT INTO users ...", {}, FakeDriverError(message, **kwargs))


class TestHandleDbError:

    def test_wraps_unknown_error_with_operation_label(self):
        error = ValueError("something broke")

        with pytest.raises(RepositoryError) as exc_info:
            handle_db_error("Failed to create user", error)

        assert type(exc_info.value) is RepositoryError
        assert exc_info.value.message == "Failed to create user: something broke"
        assert exc_info.value.__cause__ is error

    def test_uses_driver_message_for_dbapi_errors(self):
        error = OperationalError("SELECT 1", {}, Exception("server closed the connection"))

        with pytest.raises(RepositoryError) as exc_info:
            handle_db_error("Failed to find user", error)

        assert exc_info.value.message == "Failed to find user: server closed the connection"

    def test_classified_errors_pass_through(self):
        original = ValidationError("Email is required", fields=["email"])

        with pytest.raises(ValidationError) as exc_info:
            handle_db_error("Failed to find user by email", original)

        assert exc_info.value is original

    def test_custom_handler_replacement(self):
        with pytest.raises(NotFoundError):
            handle_db_error("Failed to find user", KeyError("x"), lambda exc: NotFoundError("gone"))

    def test_custom_handler_returning_none_falls_through(self):
        with pytest.raises(RepositoryError) as exc_info:
            handle_db_error("Failed to find user", RuntimeError("x"), lambda exc: None)

        assert exc_info.value.message == "Failed to find user: x"


def test_handle_not_found_error():
    with pytest.raises(NotFoundError) as exc_info:
        handle_not_found_error("Failed to find user")

    assert exc_info.value.message == "Failed to find user: Resource not found"


class TestIntegrityConflictHandler:

    def test_postgres_unique_violation(self):
        error = _integrity(
            'duplicate key value violates unique constraint "uq_users_email"\n'
            "DETAIL:  Key (email)=(john@example.com) already exists.",
            sqlstate="23505",
            constraint_name="uq_users_email",
        )

        conflict = integrity_conflict_handler(error)

        assert isinstance(conflict, ConflictError)
        assert conflict.message == "Email already exists"
        assert conflict.fields == ["email"]
        assert conflict.constraint == "uq_users_email"

    def test_sqlite_unique_violation(self):
        conflict = integrity_conflict_handler(_integrity("UNIQUE constraint failed: users.email"))

        assert isinstance(conflict, ConflictError)

    def test_not_null_violation_is_not_a_conflict(self):
        assert integrity_conflict_handler(_integrity("NOT NULL constraint failed: users.name")) is None

    def test_non_integrity_error_is_ignored(self):
        assert integrity_conflict_handler(RuntimeError("x")) is None


@pytest.mark.asyncio
class TestDbErrorHandler:

    async def test_classifies_errors_raised_in_block(self):
        with pytest.raises(ConflictError):
            async with db_error_handler("Failed to create user", ErrorClassifier()):
                raise _integrity("UNIQUE constraint failed: users.email")

    async def test_default_classifier(self):
        with pytest.raises(RepositoryError, match="Failed to delete user: nope"):
            async with db_error_handler("Failed to delete user"):
                raise RuntimeError("nope")

    async def test_no_error_passes(self):
        async with db_error_handler("Failed to find user"):
            value = 1

        assert value == 1

    async def test_classifier_without_custom_handler(self):
        classifier = ErrorClassifier(custom_handler=None)

        with pytest.raises(RepositoryError) as exc_info:
            async with db_error_handler("Failed to create user", classifier):
                raise _integrity("UNIQUE constraint failed: users.email")

        assert type(exc_info.value) is RepositoryError
