"""Snapshot delivery to rendering listeners.

Implements the Observer pattern between the engine and whatever draws the
graph:

    ReferenceGraphEngine --publish()--> SnapshotBroadcaster --callback()--> renderer
                                                            --callback()--> (any other listener)

Listeners are plain synchronous callables taking one
:class:`GraphSnapshot`.  A listener that raises is logged and skipped so a
broken view cannot stop other listeners, or the engine, from receiving
later snapshots.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import structlog

from refgraph.models.graph import GraphSnapshot
from refgraph.utils.logging import get_logger

SnapshotListener = Callable[[GraphSnapshot], Any]


class SnapshotBroadcaster:
    """Holds listener callbacks and fans each snapshot out to them in order."""

    def __init__(self) -> None:
        self._listeners: list[SnapshotListener] = []
        self._logger: structlog.BoundLogger = get_logger(__name__)

    def register_listener(self, callback: SnapshotListener) -> None:
        """Register *callback*; registering the same callable twice is a no-op."""
        if callback not in self._listeners:
            self._listeners.append(callback)
            self._logger.debug("listener_registered", total_listeners=len(self._listeners))

    def unregister_listener(self, callback: SnapshotListener) -> None:
        """Remove a previously registered *callback* (no-op if absent)."""
        if callback in self._listeners:
            self._listeners.remove(callback)
            self._logger.debug(
                "listener_unregistered", remaining_listeners=len(self._listeners)
            )

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def publish(self, snapshot: GraphSnapshot) -> int:
        """Deliver *snapshot* to every listener.

        Returns
        -------
        int
            Number of listeners that accepted the snapshot without raising.
        """
        delivered = 0
        for callback in list(self._listeners):
            try:
                callback(snapshot)
                delivered += 1
            except Exception as exc:
                self._logger.warning(
                    "listener_callback_error",
                    error=str(exc),
                    callback=getattr(callback, "__name__", repr(callback)),
                )
        return delivered
