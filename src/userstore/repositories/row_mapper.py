from typing import Any, Mapping

from userstore.models.user import User
from userstore.utils.clock import from_store_timestamp


def map_row_to_user(row: Mapping[str, Any]) -> User:
    """
    Convert a `users` row into a User.

    Trusts the store: the five columns are assumed present. Timestamps may come
    back as datetimes or ISO strings depending on the driver.
    """
    return User(
        id=str(row["id"]),
        name=row["name"],
        email=row["email"],
        created_at=from_store_timestamp(row["created_at"]),
        updated_at=from_store_timestamp(row["updated_at"]),
    )
