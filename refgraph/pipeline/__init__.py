"""Engine and snapshot delivery for the reference-graph pipeline."""

from refgraph.pipeline.engine import ReferenceGraphEngine
from refgraph.pipeline.snapshot_broadcaster import SnapshotBroadcaster, SnapshotListener

__all__ = [
    "ReferenceGraphEngine",
    "SnapshotBroadcaster",
    "SnapshotListener",
]
