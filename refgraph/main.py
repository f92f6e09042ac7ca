"""refgraph composition root.

Wires record sources, the dataset loader and the engine together from a
:class:`Settings` instance.  The CLI and any embedding application call
:func:`build_engine` once per session and then drive the returned engine.
"""

from __future__ import annotations

import httpx
import structlog

from refgraph.config.settings import Settings
from refgraph.interfaces.record_source import IRecordSource
from refgraph.pipeline.engine import ReferenceGraphEngine
from refgraph.providers.records.csv_file_source import CSVFileSource
from refgraph.providers.records.http_csv_source import HTTPCSVSource
from refgraph.services.dataset_loader import DatasetLoader
from refgraph.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)


def is_remote(location: str) -> bool:
    """True when *location* is an http(s) URL rather than a local path."""
    return location.lower().startswith(("http://", "https://"))


def build_record_source(
    location: str,
    http_client: httpx.AsyncClient | None = None,
) -> IRecordSource:
    """Select the record source adapter for *location*."""
    if is_remote(location):
        return HTTPCSVSource(location, http_client=http_client)
    return CSVFileSource(location)


async def build_engine(
    app_settings: Settings | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> ReferenceGraphEngine:
    """Load both datasets and return an engine with its initial active set seeded.

    The engine has not recomputed yet; callers apply any interaction state
    first and then call ``recompute()`` once.

    Raises
    ------
    LoadFailure
        If either dataset cannot be loaded.
    """
    s = app_settings or Settings()

    loader = DatasetLoader(
        matrix_source=build_record_source(s.matrix_source, http_client),
        authors_source=build_record_source(s.authors_source, http_client),
        death_year_offset=s.death_year_offset,
    )
    dataset = await loader.load()

    engine = ReferenceGraphEngine(
        matrix=dataset.matrix,
        registry=dataset.registry,
        threshold=s.default_threshold,
        max_threshold=s.max_threshold,
    )
    engine.seed_initial_active_set(s.initial_active_count)
    _logger.info(
        "engine_ready",
        authors=len(dataset.registry),
        threshold=engine.threshold,
        active=len(engine.registry.active_ids()),
    )
    return engine
