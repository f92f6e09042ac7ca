"""Per-author reference totals restricted to the active set.

For each active author ``a``::

    outgoing(a) = sum of count(a, t) over active t   (self included)
    incoming(a) = sum of count(s, a) over active s   (self included)

Totals are recomputed from scratch on every call.  Using the store's row
and column indexes, the cost is bounded by the non-zero cells of the
active rows, never worse than O(|active|^2).
"""

from __future__ import annotations

from collections.abc import Iterable

import structlog

from refgraph.models.graph import AuthorAggregate
from refgraph.services.matrix_store import MatrixStore
from refgraph.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)


class Aggregator:
    """Stateless aggregate calculator."""

    def recompute(
        self,
        active_ids: Iterable[str],
        matrix: MatrixStore,
    ) -> dict[str, AuthorAggregate]:
        """Compute outgoing/incoming totals for every id in *active_ids*.

        Ids unknown to the matrix are returned with zero totals.  The
        result is keyed in the iteration order of *active_ids*.
        """
        ordered = list(dict.fromkeys(active_ids))
        active = set(ordered)

        result: dict[str, AuthorAggregate] = {}
        for author_id in ordered:
            if author_id not in matrix:
                result[author_id] = AuthorAggregate()
                continue
            row = matrix.row_of(author_id)
            column = matrix.column_of(author_id)
            outgoing = sum(count for target, count in row.items() if target in active)
            incoming = sum(count for source, count in column.items() if source in active)
            result[author_id] = AuthorAggregate(outgoing_refs=outgoing, incoming_refs=incoming)

        _logger.debug(
            "aggregates_recomputed",
            active=len(ordered),
            total_refs=sum(a.outgoing_refs for a in result.values()),
        )
        return result
