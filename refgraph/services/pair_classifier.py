"""Bidirectional pair detection and curve-direction tie-break.

A pair of distinct active authors is bidirectional at a threshold when
both directed counts reach it.  Renderers draw the two arcs of such a pair
curving opposite ways; which arc gets +1 is decided by plain string
comparison of the ids, so a redraw after any recompute keeps every arc on
the same side.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Literal

from refgraph.models.graph import PairKey
from refgraph.services.matrix_store import MatrixStore

CurveDirection = Literal[1, -1]


class PairClassifier:
    """Pure classifier: output depends only on matrix, active ids and threshold."""

    def classify(
        self,
        matrix: MatrixStore,
        active_ids: Iterable[str],
        threshold: int,
    ) -> frozenset[PairKey]:
        """Return the pair keys whose counts meet *threshold* in both directions."""
        ids = [aid for aid in dict.fromkeys(active_ids) if aid in matrix]
        pairs: set[PairKey] = set()
        for i, a in enumerate(ids):
            for b in ids[i + 1 :]:
                if (
                    matrix.count_from(a, b) >= threshold
                    and matrix.count_from(b, a) >= threshold
                ):
                    pairs.add(PairKey.of(a, b))
        return frozenset(pairs)

    @staticmethod
    def curve_direction(source: str, target: str, bidirectional: bool) -> CurveDirection:
        """+1 for the lexicographically lower source of a bidirectional pair, else -1.

        One-way edges always get +1.
        """
        if not bidirectional:
            return 1
        return 1 if source < target else -1
