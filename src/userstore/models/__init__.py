"""
Domain models, importable from a single place:

    from userstore.models import User, CreateUserInput, UpdateUserInput
"""

from .user import User, CreateUserInput, UpdateUserInput

__all__ = [
    "User",
    "CreateUserInput",
    "UpdateUserInput",
]
