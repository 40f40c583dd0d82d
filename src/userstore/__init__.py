# src/userstore/
# ├─ config/          # Settings (pydantic-settings), get_settings()
# ├─ core/logging/    # dictConfig-based logging
# ├─ database/        # schema, query files, QuerySource, QueryExecutor
# ├─ exceptions/      # error taxonomy + classifier
# ├─ models/          # User, CreateUserInput, UpdateUserInput
# ├─ repositories/    # SqlUserRepository, InMemoryUserRepository
# ├─ utils/           # clock + project metadata helpers
# └─ validators/      # input validation

from .database import QueryExecutor, QuerySource
from .exceptions import (
    ConfigurationError,
    ConflictError,
    ErrorClassifier,
    ErrorKind,
    NotFoundError,
    RepositoryError,
    ValidationError,
)
from .models import CreateUserInput, UpdateUserInput, User
from .repositories import InMemoryUserRepository, SqlUserRepository, UserRepository
from .validators import UserInputValidator

__all__ = [
    "ConfigurationError",
    "ConflictError",
    "CreateUserInput",
    "ErrorClassifier",
    "ErrorKind",
    "InMemoryUserRepository",
    "NotFoundError",
    "QueryExecutor",
    "QuerySource",
    "RepositoryError",
    "SqlUserRepository",
    "UpdateUserInput",
    "User",
    "UserInputValidator",
    "UserRepository",
    "ValidationError",
]
