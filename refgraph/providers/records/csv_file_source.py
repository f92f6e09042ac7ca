"""Local CSV file record source.

Reads the whole file off the event loop (``asyncio.to_thread``) and parses
it with :class:`csv.DictReader`.  A leading UTF-8 BOM is stripped so that
the blank first header of a matrix export stays blank.
"""

from __future__ import annotations

import asyncio
import csv
import io
from pathlib import Path
from typing import Any

import structlog

from refgraph.interfaces.record_source import IRecordSource
from refgraph.utils.errors import LoadFailure

logger = structlog.get_logger(logger_name=__name__)


def parse_csv_text(text: str, source_name: str) -> list[dict[str, Any]]:
    """Parse CSV *text* into header-keyed records.

    Raises
    ------
    LoadFailure
        If the text has no header row or is not valid CSV.
    """
    if text.startswith("\ufeff"):
        text = text[1:]
    try:
        reader = csv.DictReader(io.StringIO(text))
        records = [dict(row) for row in reader]
    except csv.Error as exc:
        raise LoadFailure(message=f"Malformed CSV: {exc}", source_name=source_name) from exc
    if not reader.fieldnames:
        raise LoadFailure(message="CSV has no header row", source_name=source_name)
    return records


class CSVFileSource(IRecordSource):
    """Records from a CSV file on the local filesystem."""

    def __init__(self, path: str | Path, encoding: str = "utf-8") -> None:
        self._path = Path(path)
        self._encoding = encoding

    def _read_sync(self) -> str:
        return self._path.read_text(encoding=self._encoding)

    async def fetch_records(self) -> list[dict[str, Any]]:
        """Read and parse the file."""
        try:
            text = await asyncio.to_thread(self._read_sync)
        except (OSError, UnicodeDecodeError) as exc:
            raise LoadFailure(
                message=f"Cannot read {self._path}: {exc}",
                source_name=self.get_source_name(),
            ) from exc

        records = parse_csv_text(text, self.get_source_name())
        logger.info("csv_file_loaded", path=str(self._path), records=len(records))
        return records

    def get_source_name(self) -> str:
        return str(self._path)
