"""Custom exception hierarchy for refgraph.

All application exceptions inherit from :class:`RefGraphError`, which
carries an optional ``source_name`` so error handlers can identify which
dataset (e.g. "matrix", "authors") or input caused the failure.

    RefGraphError  (base -- catch-all for any refgraph error)
    +-- LoadFailure            (a data source could not be fetched or parsed)
    +-- UnknownAuthor          (an author id outside the loaded dataset)
    +-- ThresholdOutOfRange    (threshold outside the allowed slider range)
    +-- ConfigurationError     (startup / invalid config)

Only :class:`LoadFailure` is terminal for a session.  Sparse or irregular
input (non-numeric matrix cells, authors without metadata or years) is
absorbed where it is read and never surfaces as an exception.
"""


class RefGraphError(Exception):
    """Base exception for all refgraph errors.

    Every subclass carries a human-readable ``message`` and an optional
    ``source_name`` identifying which dataset triggered the error.  The
    ``__str__`` method prefixes the source name in brackets for structured
    log output, e.g. ``[matrix] File not found``.
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        source_name: str | None = None,
    ) -> None:
        self._message = message
        self._source_name = source_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def source_name(self) -> str | None:
        return self._source_name

    def __str__(self) -> str:
        if self._source_name:
            return f"[{self._source_name}] {self._message}"
        return self._message


# ---------------------------------------------------------------------------
# Loading errors
# ---------------------------------------------------------------------------

class LoadFailure(RefGraphError):
    """Raised when either data source fails to fetch or parse.

    Fatal for the session: the engine is never constructed from a partial
    dataset, and there is no retry.
    """

    def __init__(
        self,
        message: str = "Failed to load data source",
        source_name: str | None = None,
    ) -> None:
        super().__init__(message=message, source_name=source_name)


# ---------------------------------------------------------------------------
# Lookup / interaction errors
# ---------------------------------------------------------------------------

class UnknownAuthor(RefGraphError):
    """Raised when an author id was never present in the loaded matrix."""

    def __init__(
        self,
        author_id: str,
        source_name: str | None = None,
    ) -> None:
        self._author_id = author_id
        super().__init__(message=f"Unknown author: {author_id!r}", source_name=source_name)

    @property
    def author_id(self) -> str:
        return self._author_id


class ThresholdOutOfRange(RefGraphError):
    """Raised when a threshold falls outside ``[0, max_threshold]``."""

    def __init__(self, value: int, maximum: int) -> None:
        self._value = value
        self._maximum = maximum
        super().__init__(message=f"Threshold {value} outside allowed range [0, {maximum}]")

    @property
    def value(self) -> int:
        return self._value

    @property
    def maximum(self) -> int:
        return self._maximum


class ConfigurationError(RefGraphError):
    """Raised when configuration is invalid or missing at startup."""

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        source_name: str | None = None,
    ) -> None:
        super().__init__(message=message, source_name=source_name)
