"""Concurrent, fail-fast loading of the matrix and author datasets.

Both sources are fetched at the same time.  Nothing is parsed into
engine structures until *both* fetches have succeeded; the first failure
cancels the other fetch and surfaces as :class:`LoadFailure`.  There are
no retries and no partial datasets.

Architecture:
    - Called by ``refgraph.main.build_engine`` at startup.
    - Depends on two :class:`IRecordSource` adapters (file or HTTP).
    - Produces a :class:`LoadedDataset` that the engine is built from.
"""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from refgraph.interfaces.record_source import IRecordSource
from refgraph.services.author_registry import DEFAULT_DEATH_YEAR_OFFSET, AuthorRegistry
from refgraph.services.matrix_store import MatrixStore
from refgraph.utils.concurrency import gather_or_cancel
from refgraph.utils.errors import LoadFailure
from refgraph.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)


@dataclass(frozen=True)
class LoadedDataset:
    """The two parsed inputs, ready to hand to the engine."""

    matrix: MatrixStore
    registry: AuthorRegistry


class DatasetLoader:
    """Fetches both sources concurrently and builds matrix + registry.

    Injected with the two record sources; holds no other state.
    """

    def __init__(
        self,
        matrix_source: IRecordSource,
        authors_source: IRecordSource,
        death_year_offset: int = DEFAULT_DEATH_YEAR_OFFSET,
    ) -> None:
        self._matrix_source = matrix_source
        self._authors_source = authors_source
        self._death_year_offset = death_year_offset

    async def load(self) -> LoadedDataset:
        """Fetch, validate and index both datasets.

        Raises
        ------
        LoadFailure
            If either fetch fails or the matrix has no usable rows.
        """
        _logger.info(
            "dataset_load_started",
            matrix=self._matrix_source.get_source_name(),
            authors=self._authors_source.get_source_name(),
        )
        try:
            matrix_records, author_records = await gather_or_cancel(
                self._matrix_source.fetch_records(),
                self._authors_source.fetch_records(),
            )
        except LoadFailure as exc:
            _logger.error("dataset_load_failed", error=str(exc))
            raise
        except Exception as exc:
            _logger.error("dataset_load_failed", error=str(exc), error_type=type(exc).__name__)
            raise LoadFailure(message=f"Unexpected error while loading: {exc}") from exc

        matrix = MatrixStore.from_records(matrix_records)
        if not matrix.all_sources():
            exc = LoadFailure(
                message="Matrix has no source rows",
                source_name=self._matrix_source.get_source_name(),
            )
            _logger.error("dataset_load_failed", error=str(exc))
            raise exc

        registry = AuthorRegistry.from_metadata(
            matrix.author_ids(),
            author_records,
            death_year_offset=self._death_year_offset,
        )
        _logger.info("dataset_load_complete", authors=len(registry))
        return LoadedDataset(matrix=matrix, registry=registry)
