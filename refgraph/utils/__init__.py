"""Utility modules for refgraph.

- **errors** -- Exception hierarchy rooted at RefGraphError.
- **logging** -- structlog setup with console / JSON renderers.
- **concurrency** -- fail-fast gather used for the startup dataset fetch.
- **parsing** -- count and year parsing for CSV-shaped records.
"""

from refgraph.utils.concurrency import gather_or_cancel
from refgraph.utils.errors import (
    ConfigurationError,
    LoadFailure,
    RefGraphError,
    ThresholdOutOfRange,
    UnknownAuthor,
)
from refgraph.utils.logging import configure_logging, get_logger
from refgraph.utils.parsing import is_blank_key, parse_count, parse_year

__all__ = [
    "ConfigurationError",
    "LoadFailure",
    "RefGraphError",
    "ThresholdOutOfRange",
    "UnknownAuthor",
    "configure_logging",
    "gather_or_cancel",
    "get_logger",
    "is_blank_key",
    "parse_count",
    "parse_year",
]
