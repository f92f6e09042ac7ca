"""The reference-graph engine: state owner and recompute pipeline.

One engine instance is built per session, after both datasets have
loaded.  It owns the :class:`MatrixStore`, the :class:`AuthorRegistry`
(which holds the active set) and the current threshold.

Interaction follows two separate steps:

  1. **Mark** -- ``set_active`` / ``toggle`` / ``replace_active`` /
     ``set_threshold`` only update state and flag the engine dirty.
  2. **Recompute** -- ``recompute()`` runs the whole pipeline once:

        Aggregator -> PairClassifier -> EdgeListBuilder -> GraphSnapshot
                                                            |
                                                 SnapshotBroadcaster -> listeners

So a burst of checkbox toggles followed by one slider read costs exactly
one recompute, and every emitted snapshot is consistent with itself.
"""

from __future__ import annotations

from collections.abc import Iterable

import structlog

from refgraph.models.graph import GraphSnapshot
from refgraph.pipeline.snapshot_broadcaster import SnapshotBroadcaster, SnapshotListener
from refgraph.services.aggregator import Aggregator
from refgraph.services.author_registry import AuthorRegistry
from refgraph.services.edge_list_builder import EdgeListBuilder
from refgraph.services.matrix_store import MatrixStore
from refgraph.services.pair_classifier import PairClassifier
from refgraph.utils.errors import ThresholdOutOfRange
from refgraph.utils.logging import get_logger

DEFAULT_THRESHOLD = 20
MAX_THRESHOLD = 40


class ReferenceGraphEngine:
    """Stateful owner of matrix, registry and threshold.

    Parameters
    ----------
    matrix:
        Immutable reference matrix.
    registry:
        Authors and the active set.  The engine mutates membership and
        aggregates through it.
    threshold:
        Initial threshold, within ``[0, max_threshold]``.
    max_threshold:
        Upper bound of the threshold slider.
    """

    def __init__(
        self,
        matrix: MatrixStore,
        registry: AuthorRegistry,
        threshold: int = DEFAULT_THRESHOLD,
        max_threshold: int = MAX_THRESHOLD,
        aggregator: Aggregator | None = None,
        classifier: PairClassifier | None = None,
        builder: EdgeListBuilder | None = None,
    ) -> None:
        self._matrix = matrix
        self._registry = registry
        self._max_threshold = max_threshold
        self._threshold = self._validated_threshold(threshold)
        self._aggregator = aggregator or Aggregator()
        self._classifier = classifier or PairClassifier()
        self._builder = builder or EdgeListBuilder()
        self._broadcaster = SnapshotBroadcaster()
        self._snapshot: GraphSnapshot | None = None
        self._dirty = True
        self._recompute_count = 0
        self._logger: structlog.BoundLogger = get_logger(__name__)

    # ------------------------------------------------------------------
    # State accessors
    # ------------------------------------------------------------------

    @property
    def matrix(self) -> MatrixStore:
        return self._matrix

    @property
    def registry(self) -> AuthorRegistry:
        return self._registry

    @property
    def threshold(self) -> int:
        return self._threshold

    @property
    def max_threshold(self) -> int:
        return self._max_threshold

    @property
    def snapshot(self) -> GraphSnapshot | None:
        """The last emitted snapshot, or ``None`` before the first recompute."""
        return self._snapshot

    @property
    def is_dirty(self) -> bool:
        """True when state changed since the last recompute."""
        return self._dirty

    @property
    def recompute_count(self) -> int:
        return self._recompute_count

    # ------------------------------------------------------------------
    # Mark step
    # ------------------------------------------------------------------

    def seed_initial_active_set(self, count: int) -> list[str]:
        """Activate the top *count* authors by full-matrix incoming references.

        Runs once at load: full-matrix totals are stored on the authors,
        ranked, and the ranking seeds the active set.
        """
        totals = self._aggregator.recompute(self._registry.ids(), self._matrix)
        self._registry.apply_aggregates(totals)
        seeded = self._registry.seed_initial_active(count)
        self._dirty = True
        return seeded

    def set_active(self, author_id: str, active: bool) -> None:
        was_active = self._registry.is_active(author_id)
        self._registry.set_active(author_id, active)
        if was_active != active:
            self._dirty = True

    def toggle(self, author_id: str) -> bool:
        """Flip *author_id*'s membership and return its new state."""
        state = self._registry.toggle(author_id)
        self._dirty = True
        return state

    def replace_active(self, author_ids: Iterable[str]) -> None:
        self._registry.replace_active(author_ids)
        self._dirty = True

    def set_threshold(self, value: int) -> None:
        value = self._validated_threshold(value)
        if value != self._threshold:
            self._threshold = value
            self._dirty = True

    def _validated_threshold(self, value: int) -> int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"Threshold must be an int, got {type(value).__name__}")
        if not 0 <= value <= self._max_threshold:
            raise ThresholdOutOfRange(value, self._max_threshold)
        return value

    # ------------------------------------------------------------------
    # Recompute step
    # ------------------------------------------------------------------

    def recompute(self) -> GraphSnapshot:
        """Run the full pipeline, store and broadcast the new snapshot."""
        active = self._registry.ordered_active_ids()

        aggregates = self._aggregator.recompute(active, self._matrix)
        self._registry.apply_aggregates(aggregates)

        pairs = self._classifier.classify(self._matrix, active, self._threshold)
        authors = {aid: self._registry.get(aid) for aid in active}
        edges = self._builder.build(self._matrix, active, self._threshold, pairs, authors)
        nodes = [authors[aid] for aid in active if authors[aid].is_placeable]

        snapshot = GraphSnapshot(
            nodes=nodes,
            edges=edges,
            threshold=self._threshold,
            active_ids=active,
        )
        self._snapshot = snapshot
        self._dirty = False
        self._recompute_count += 1

        self._logger.info(
            "recompute_complete",
            threshold=self._threshold,
            active=len(active),
            nodes=len(nodes),
            edges=len(edges),
            bidirectional_pairs=len(pairs),
        )
        self._broadcaster.publish(snapshot)
        return snapshot

    def recompute_if_dirty(self) -> GraphSnapshot:
        """Recompute only when state changed; otherwise return the last snapshot."""
        if self._dirty or self._snapshot is None:
            return self.recompute()
        return self._snapshot

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------

    def register_listener(self, callback: SnapshotListener) -> None:
        self._broadcaster.register_listener(callback)

    def unregister_listener(self, callback: SnapshotListener) -> None:
        self._broadcaster.unregister_listener(callback)
