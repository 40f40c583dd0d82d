from .base_repository import UserRepository, generate_id
from .memory_repository import InMemoryUserRepository
from .row_mapper import map_row_to_user
from .user_repository import SqlUserRepository

__all__ = [
    "InMemoryUserRepository",
    "SqlUserRepository",
    "UserRepository",
    "generate_id",
    "map_row_to_user",
]
