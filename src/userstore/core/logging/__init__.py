# src/userstore/core/logging/
# ├─ __init__.py      # public API
# ├─ builder.py       # make_dict_config(settings) + setup_logging(settings)
# ├─ formatters.py    # JsonFormatter, ColorFormatter
# ├─ filters.py       # CorrelationIdFilter (+ contextvar helpers), RedactFilter
# └─ handlers.py      # handler config factories (console/file)

from .builder import make_dict_config, setup_logging
from .filters import (
    CorrelationIdFilter,
    RedactFilter,
    get_correlation_id,
    reset_correlation_id,
    set_correlation_id,
)
from .formatters import ColorFormatter, JsonFormatter

__all__ = [
    "ColorFormatter",
    "CorrelationIdFilter",
    "JsonFormatter",
    "RedactFilter",
    "get_correlation_id",
    "make_dict_config",
    "reset_correlation_id",
    "set_correlation_id",
    "setup_logging",
]
