"""Immutable store for the author-to-author reference matrix.

The raw input is a sequence of CSV-style records, one per source author:
the blank-keyed field names the source, every other key is a target
author id mapped to a reference count.  On construction the records are
indexed twice, by row (source -> target -> count) and by column
(target -> source -> count), so each lookup the aggregator performs is a
dict access instead of a scan over the records.

Only non-zero counts are stored.  A missing cell reads as 0.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import Any

import structlog

from refgraph.utils.errors import UnknownAuthor
from refgraph.utils.logging import get_logger
from refgraph.utils.parsing import is_blank_key, parse_count

_logger: structlog.BoundLogger = get_logger(__name__)

_EMPTY: Mapping[str, int] = MappingProxyType({})


class MatrixStore:
    """Indexed, read-only view of the reference matrix.

    Parameters
    ----------
    rows:
        ``source -> {target -> count}``.  Zero counts may be present and
        are dropped.
    author_ids:
        Known ids in presentation order.  Defaults to the row keys followed
        by any targets not already listed.
    """

    def __init__(
        self,
        rows: Mapping[str, Mapping[str, int]],
        author_ids: Iterable[str] | None = None,
    ) -> None:
        ordered: list[str] = list(dict.fromkeys(author_ids or ()))
        seen = set(ordered)
        row_index: dict[str, dict[str, int]] = {}
        col_index: dict[str, dict[str, int]] = {}

        for source, targets in rows.items():
            if source not in seen:
                ordered.append(source)
                seen.add(source)
            for target, count in targets.items():
                if target not in seen:
                    ordered.append(target)
                    seen.add(target)
                if count < 0:
                    raise ValueError(f"Negative count for {source!r} -> {target!r}")
                if count == 0:
                    continue
                row_index.setdefault(source, {})[target] = count
                col_index.setdefault(target, {})[source] = count

        self._ids: tuple[str, ...] = tuple(ordered)
        self._known: frozenset[str] = frozenset(ordered)
        self._sources: frozenset[str] = frozenset(rows.keys())
        self._rows = {k: MappingProxyType(v) for k, v in row_index.items()}
        self._cols = {k: MappingProxyType(v) for k, v in col_index.items()}
        self._malformed_cells = 0

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, Any]]) -> MatrixStore:
        """Build a store from CSV-style matrix records.

        The id order is the header order (keys of the first record,
        followed by keys first seen in later records), then any source
        author that never appears as a column.  Records without a source
        name are skipped.  Non-numeric or negative cells count as 0.
        """
        header: list[str] = []
        header_seen: set[str] = set()
        rows: dict[str, dict[str, int]] = {}
        malformed = 0
        skipped = 0

        for record in records:
            source: str | None = None
            cells: dict[str, int] = {}
            for key, value in record.items():
                if key is None:
                    # csv.DictReader puts surplus cells of a long row under None.
                    continue
                if is_blank_key(key):
                    source = str(value).strip() if value is not None else None
                    continue
                target = str(key).strip()
                if target not in header_seen:
                    header.append(target)
                    header_seen.add(target)
                count = parse_count(value)
                if count is None:
                    # Blank cells are ordinary sparsity, not malformed data.
                    if value is not None and str(value).strip():
                        malformed += 1
                    continue
                cells[target] = count
            if not source:
                skipped += 1
                continue
            row = rows.setdefault(source, {})
            for target, count in cells.items():
                row[target] = row.get(target, 0) + count

        store = cls(rows, author_ids=header)
        store._malformed_cells = malformed
        _logger.info(
            "matrix_loaded",
            authors=len(store.author_ids()),
            sources=len(store.all_sources()),
            nonzero_cells=sum(len(r) for r in store._rows.values()),
            malformed_cells=malformed,
            skipped_rows=skipped,
        )
        if malformed:
            _logger.warning("matrix_malformed_counts", cells=malformed)
        return store

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def count_from(self, source: str, target: str) -> int:
        """Number of references from *source* to *target* (0 if absent)."""
        self._require(source)
        self._require(target)
        return self._rows.get(source, _EMPTY).get(target, 0)

    def row_of(self, source: str) -> Mapping[str, int]:
        """Non-zero outgoing counts of *source*, keyed by target."""
        self._require(source)
        return self._rows.get(source, _EMPTY)

    def column_of(self, target: str) -> Mapping[str, int]:
        """Non-zero incoming counts of *target*, keyed by source."""
        self._require(target)
        return self._cols.get(target, _EMPTY)

    def all_sources(self) -> frozenset[str]:
        """Ids that appear as a source row in the loaded matrix."""
        return self._sources

    def author_ids(self) -> tuple[str, ...]:
        """Every id the matrix knows, header order first."""
        return self._ids

    def __contains__(self, author_id: object) -> bool:
        return author_id in self._known

    def __len__(self) -> int:
        return len(self._ids)

    @property
    def malformed_cells(self) -> int:
        """Cells that were non-numeric or negative at load and read as 0."""
        return self._malformed_cells

    def _require(self, author_id: str) -> None:
        if author_id not in self._known:
            raise UnknownAuthor(author_id, source_name="matrix")
