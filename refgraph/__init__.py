"""refgraph: reference-graph engine for citation matrices between historical authors."""

__version__ = "0.1.0"
