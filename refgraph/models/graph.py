"""Graph output models: pair keys, aggregates, edges, snapshots, layout.

``PairKey`` and ``AuthorAggregate`` are small internal value types
(dataclasses).  ``Edge``, ``GraphSnapshot`` and ``ChartLayout`` cross the
boundary to the rendering side and are frozen Pydantic models.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from refgraph.models.author import Author


@dataclass(frozen=True, order=True)
class PairKey:
    """Unordered pair of two distinct author ids, stored low/high."""

    low: str
    high: str

    @classmethod
    def of(cls, a: str, b: str) -> PairKey:
        if a == b:
            raise ValueError(f"PairKey needs two distinct ids, got {a!r} twice")
        return cls(a, b) if a < b else cls(b, a)

    def __contains__(self, author_id: object) -> bool:
        return author_id == self.low or author_id == self.high


@dataclass(frozen=True)
class AuthorAggregate:
    """Reference totals for one author over a given active set."""

    outgoing_refs: int = 0
    incoming_refs: int = 0


class Edge(BaseModel):
    """A directed reference link drawn from ``source`` to ``target``.

    ``curve_direction`` separates the two arcs of a bidirectional pair;
    one-way edges always carry +1.
    """

    model_config = ConfigDict(frozen=True)

    source: Author
    target: Author
    weight: int = Field(ge=0)
    curve_direction: Literal[1, -1] = 1
    bidirectional: bool = False

    @property
    def key(self) -> str:
        """Identity used by renderers to diff consecutive edge lists."""
        return f"{self.source.id}->{self.target.id}"


class GraphSnapshot(BaseModel):
    """One internally consistent ``{nodes, edges}`` emission.

    Every edge endpoint is present in ``nodes``.
    """

    model_config = ConfigDict(frozen=True)

    nodes: list[Author] = Field(default_factory=list)
    edges: list[Edge] = Field(default_factory=list)
    threshold: int = 0
    # Active ids in registry order, including authors that cannot be placed.
    active_ids: list[str] = Field(default_factory=list)

    def node_ids(self) -> list[str]:
        return [n.id for n in self.nodes]


class ChartLayout(BaseModel):
    """Data-side extents a renderer needs to build its scales."""

    model_config = ConfigDict(frozen=True)

    x_domain: tuple[int, int] | None = None
    y_domain: tuple[int, int] | None = None
    radii: dict[str, float] = Field(default_factory=dict)
