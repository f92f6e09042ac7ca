"""refgraph domain models.

    - author.py -- Author and its birth-year provenance
    - graph.py  -- PairKey, AuthorAggregate, Edge, GraphSnapshot, ChartLayout
"""

from __future__ import annotations

from refgraph.models.author import Author, BirthYearSource
from refgraph.models.graph import (
    AuthorAggregate,
    ChartLayout,
    Edge,
    GraphSnapshot,
    PairKey,
)

__all__ = [
    "Author",
    "AuthorAggregate",
    "BirthYearSource",
    "ChartLayout",
    "Edge",
    "GraphSnapshot",
    "PairKey",
]
