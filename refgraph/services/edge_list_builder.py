"""Directed, deduplicated edge list for the current active set and threshold.

The list is regenerated in full on every call.  Renderers diff it against
the previous list by :attr:`Edge.key`; the builder guarantees unique keys
and a stable order (outer loop over active ids in registry order, inner
loop over matrix columns).
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence

import structlog

from refgraph.models.author import Author
from refgraph.models.graph import Edge, PairKey
from refgraph.services.matrix_store import MatrixStore
from refgraph.services.pair_classifier import PairClassifier
from refgraph.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)


class EdgeListBuilder:
    """Turns matrix counts into drawable :class:`Edge` objects."""

    def build(
        self,
        matrix: MatrixStore,
        active_ids: Sequence[str],
        threshold: int,
        bidirectional_pairs: Iterable[PairKey],
        authors: Mapping[str, Author],
    ) -> list[Edge]:
        """Return one edge per ordered pair of distinct active ids at or above *threshold*.

        Parameters
        ----------
        active_ids:
            Active ids in registry order.
        authors:
            Current author objects (with fresh aggregates), used as edge
            endpoints.  Ids missing here, or whose birth year is
            unresolved, are never linked.

        The comparison is ``weight >= threshold``, so at threshold 0 every
        ordered pair of linkable ids gets an edge, zero-weight ones included.
        """
        pairs = frozenset(bidirectional_pairs)
        linkable = {
            aid
            for aid in active_ids
            if aid in matrix and aid in authors and authors[aid].is_placeable
        }
        columns = [aid for aid in matrix.author_ids() if aid in linkable]

        edges: list[Edge] = []
        seen: set[str] = set()
        for source in dict.fromkeys(active_ids):
            if source not in linkable:
                continue
            row = matrix.row_of(source)
            for target in columns:
                if target == source:
                    continue
                weight = row.get(target, 0)
                if weight < threshold:
                    continue
                key = f"{source}->{target}"
                if key in seen:
                    continue
                seen.add(key)
                bidirectional = PairKey.of(source, target) in pairs
                edges.append(
                    Edge(
                        source=authors[source],
                        target=authors[target],
                        weight=weight,
                        curve_direction=PairClassifier.curve_direction(
                            source, target, bidirectional
                        ),
                        bidirectional=bidirectional,
                    )
                )

        _logger.debug(
            "edges_built",
            threshold=threshold,
            edges=len(edges),
            bidirectional_pairs=len(pairs),
        )
        return edges
