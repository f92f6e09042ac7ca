"""HTTP CSV record source backed by httpx.

One GET per fetch, with no timeout and no retry.  A failed download is
terminal for the session and is reported as :class:`LoadFailure`.
"""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from refgraph.interfaces.record_source import IRecordSource
from refgraph.providers.records.csv_file_source import parse_csv_text
from refgraph.utils.errors import LoadFailure

logger = structlog.get_logger(logger_name=__name__)

_DEFAULT_HEADERS = {
    "User-Agent": "refgraph/0.1",
    "Accept": "text/csv,text/plain;q=0.9,*/*;q=0.8",
}


class HTTPCSVSource(IRecordSource):
    """Records from a CSV document served over HTTP(S).

    Parameters
    ----------
    url:
        Location of the CSV document.
    http_client:
        Optional shared client.  When omitted, the source creates one per
        fetch and closes it afterwards.
    """

    def __init__(self, url: str, http_client: httpx.AsyncClient | None = None) -> None:
        self._url = url
        self._client = http_client

    async def _get(self, client: httpx.AsyncClient) -> httpx.Response:
        response = await client.get(self._url)
        response.raise_for_status()
        return response

    async def fetch_records(self) -> list[dict[str, Any]]:
        """Download and parse the CSV document."""
        try:
            if self._client is not None:
                response = await self._get(self._client)
            else:
                async with httpx.AsyncClient(
                    timeout=None, headers=_DEFAULT_HEADERS, follow_redirects=True
                ) as client:
                    response = await self._get(client)
        except httpx.HTTPStatusError as exc:
            raise LoadFailure(
                message=f"HTTP {exc.response.status_code} fetching {self._url}",
                source_name=self.get_source_name(),
            ) from exc
        except httpx.HTTPError as exc:
            raise LoadFailure(
                message=f"HTTP error fetching {self._url}: {exc}",
                source_name=self.get_source_name(),
            ) from exc

        records = parse_csv_text(response.text, self.get_source_name())
        logger.info("csv_download_loaded", url=self._url, records=len(records))
        return records

    def get_source_name(self) -> str:
        return self._url
