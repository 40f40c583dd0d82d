from .clock import MonotonicClock, advance_past, from_store_timestamp, to_store_timestamp, utcnow
from .logging import get_project_name, get_project_version

__all__ = [
    "MonotonicClock",
    "advance_past",
    "from_store_timestamp",
    "get_project_name",
    "get_project_version",
    "to_store_timestamp",
    "utcnow",
]
