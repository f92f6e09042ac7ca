"""Data-side chart extents for a snapshot.

Renderers place each node at (birth year, outgoing references) and size it
by incoming references.  This module computes the numbers they need to
build their scales, without drawing anything:

- x domain: birth-year extent of the nodes, widened to round tick bounds
- y domain: 0 .. largest outgoing total, widened the same way
- radius per node: square-root scale of incoming references, so circle
  *area* tracks the count
"""

from __future__ import annotations

import math

from refgraph.models.graph import ChartLayout, GraphSnapshot

_DEFAULT_TICKS = 10


def nice_bounds(lo: int, hi: int, ticks: int = _DEFAULT_TICKS) -> tuple[int, int]:
    """Widen ``[lo, hi]`` outward to multiples of a 1/2/5 x 10^k tick step.

    The step never drops below 1 since years and counts are integers.
    A degenerate range is returned unchanged.
    """
    if hi < lo:
        lo, hi = hi, lo
    if lo == hi:
        return lo, hi
    raw_step = (hi - lo) / ticks
    power = math.floor(math.log10(raw_step))
    error = raw_step / 10**power
    if error >= math.sqrt(50):
        factor = 10
    elif error >= math.sqrt(10):
        factor = 5
    elif error >= math.sqrt(2):
        factor = 2
    else:
        factor = 1
    step = max(factor * 10**power, 1)
    return int(math.floor(lo / step) * step), int(math.ceil(hi / step) * step)


def format_year(year: int) -> str:
    """Axis label for a signed year: ``-427`` -> ``"427 BCE"``, ``1600`` -> ``"1600 CE"``."""
    return f"{abs(year)} {'BCE' if year < 0 else 'CE'}"


def compute_layout(
    snapshot: GraphSnapshot,
    min_radius: float = 4.0,
    max_radius: float = 20.0,
) -> ChartLayout:
    """Compute scale domains and node radii for *snapshot*."""
    nodes = [n for n in snapshot.nodes if n.birth_year is not None]
    if not nodes:
        return ChartLayout()

    years = [n.birth_year for n in nodes]
    x_domain = nice_bounds(min(years), max(years))
    y_domain = nice_bounds(0, max(n.outgoing_refs for n in nodes))

    top_incoming = max(n.incoming_refs for n in nodes)
    radii: dict[str, float] = {}
    for node in nodes:
        if top_incoming == 0:
            radii[node.id] = min_radius
        else:
            fraction = math.sqrt(node.incoming_refs / top_incoming)
            radii[node.id] = min_radius + fraction * (max_radius - min_radius)

    return ChartLayout(x_domain=x_domain, y_domain=y_domain, radii=radii)
