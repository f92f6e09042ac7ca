"""Abstract base class for tabular dataset sources.

Both inputs of the engine (the reference matrix and the author metadata)
arrive as a sequence of flat records, one per CSV row.  Where those rows
come from, a local file or an HTTP endpoint, is hidden behind this
contract so the loader and the tests never care.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


# Concrete implementations: CSVFileSource, HTTPCSVSource (refgraph/providers/records/)
class IRecordSource(ABC):
    """Contract for a one-shot, read-only record fetch.

    Fetching is async so that the two startup loads can run concurrently.
    """

    @abstractmethod
    async def fetch_records(self) -> list[dict[str, Any]]:
        """Fetch and parse every record.

        Returns
        -------
        list[dict]
            One dict per data row, keyed by header name.  Values are raw
            strings; interpretation belongs to the caller.

        Raises
        ------
        LoadFailure
            If the source cannot be read or parsed.
        """

    @abstractmethod
    def get_source_name(self) -> str:
        """Return a short human-readable label for logs and diagnostics."""
