# userstore/
# │
# ├── exceptions/
# │   ├── __init__.py
# │   ├── base.py                    # Public taxonomy (ValidationError, ConflictError, NotFoundError, ...)
# │   ├── integrity_classifier.py    # SQL-level / driver-specific integrity labels
# │   └── handlers.py                # Classify raw store failures into the public taxonomy

from .base import (
    ErrorKind,
    RepositoryError,
    ValidationError,
    ConflictError,
    NotFoundError,
    ConfigurationError,
)
from .handlers import (
    ErrorClassifier,
    db_error_handler,
    handle_db_error,
    handle_not_found_error,
    integrity_conflict_handler,
)

__all__ = [
    "ErrorKind",
    "RepositoryError",
    "ValidationError",
    "ConflictError",
    "NotFoundError",
    "ConfigurationError",
    "ErrorClassifier",
    "db_error_handler",
    "handle_db_error",
    "handle_not_found_error",
    "integrity_conflict_handler",
]
