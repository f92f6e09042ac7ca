# =============================================================================
# refgraph/cli/render.py -- CLI Render Command (load, interact, print)
# =============================================================================
#
# One-shot command line front end for the reference-graph engine.  It
# stands in for the interactive chart: membership flags and the threshold
# slider become options, and the resulting {nodes, edges} snapshot is
# printed instead of drawn.
#
# Typical usage:
#   python -m refgraph.cli                                  # defaults from config
#   python -m refgraph.cli --threshold 5 --activate Zeno
#   python -m refgraph.cli --only Plato --only Aristotle --json
#   python -m refgraph.cli --list-authors
#
# Flow:
#   1. Resolve Settings (config/config.yaml, .env, env vars, CLI flags)
#   2. Load both datasets concurrently (fail-fast)
#   3. Seed the initial active set (top-K by incoming references)
#   4. Apply all membership flags and the threshold (mark only)
#   5. Recompute exactly once and print the snapshot
#
# Exit codes: 0 ok, 1 load/config failure, 2 invalid interaction
# (unknown author name, threshold outside the slider range), 3 output file
# could not be written.
# =============================================================================

"""Command line front end: load datasets, apply interactions, print the graph."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any

from refgraph.config.loader import DEFAULT_CONFIG_PATH, load_config, settings_from_config
from refgraph.config.settings import Settings
from refgraph.models.graph import ChartLayout, GraphSnapshot
from refgraph.pipeline.engine import ReferenceGraphEngine
from refgraph.services.chart_layout import compute_layout, format_year
from refgraph.utils.errors import ConfigurationError, LoadFailure, ThresholdOutOfRange, UnknownAuthor
from refgraph.utils.logging import configure_logging

EXIT_OK = 0
EXIT_LOAD_FAILURE = 1
EXIT_USAGE = 2
EXIT_OUTPUT_FAILURE = 3


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


def _format_text_output(snapshot: GraphSnapshot, layout: ChartLayout) -> str:
    """Format a snapshot as a human-readable report."""
    lines: list[str] = []
    sep = "=" * 60

    lines.append(sep)
    lines.append("  refgraph -- Reference Graph")
    lines.append(sep)
    lines.append(
        f"Threshold: {snapshot.threshold}  |  Active: {len(snapshot.active_ids)}  |  "
        f"Nodes: {len(snapshot.nodes)}  |  Edges: {len(snapshot.edges)}"
    )
    if layout.x_domain is not None and layout.y_domain is not None:
        lo, hi = layout.x_domain
        lines.append(f"Birth years: {format_year(lo)} .. {format_year(hi)}")
        lines.append(f"Outgoing refs: {layout.y_domain[0]} .. {layout.y_domain[1]}")
    lines.append("")

    if snapshot.nodes:
        lines.append("AUTHORS")
        lines.append("-" * 40)
        for node in snapshot.nodes:
            lines.append(
                f"  {node.id:<24} {format_year(node.birth_year):>10}  "
                f"out={node.outgoing_refs:<5} in={node.incoming_refs}"
            )
        lines.append("")

    unplaced = [aid for aid in snapshot.active_ids if aid not in set(snapshot.node_ids())]
    if unplaced:
        lines.append(f"Active but not placed (no birth year): {', '.join(unplaced)}")
        lines.append("")

    if snapshot.edges:
        lines.append("REFERENCES")
        lines.append("-" * 40)
        for edge in snapshot.edges:
            marker = "<->" if edge.bidirectional else "-->"
            curve = "+" if edge.curve_direction > 0 else "-"
            lines.append(
                f"  {edge.source.id} {marker} {edge.target.id}  "
                f"weight={edge.weight}  curve={curve}"
            )
    else:
        lines.append("No references at or above the threshold.")

    return "\n".join(lines)


def _snapshot_payload(snapshot: GraphSnapshot, layout: ChartLayout) -> dict[str, Any]:
    """Flatten a snapshot into the JSON document handed to renderers.

    Edges reference nodes by id; the node objects appear once, in ``nodes``.
    """
    return {
        "threshold": snapshot.threshold,
        "active_ids": list(snapshot.active_ids),
        "layout": {
            "x_domain": list(layout.x_domain) if layout.x_domain else None,
            "y_domain": list(layout.y_domain) if layout.y_domain else None,
        },
        "nodes": [
            {
                **node.model_dump(mode="json"),
                "birth_label": format_year(node.birth_year),
                "radius": round(layout.radii.get(node.id, 0.0), 3),
            }
            for node in snapshot.nodes
        ],
        "edges": [
            {
                "key": edge.key,
                "source": edge.source.id,
                "target": edge.target.id,
                "weight": edge.weight,
                "curve_direction": edge.curve_direction,
                "bidirectional": edge.bidirectional,
            }
            for edge in snapshot.edges
        ],
    }


def _format_author_list(engine: ReferenceGraphEngine) -> str:
    """One line per author: membership flag, birth year and how it was resolved."""
    lines = []
    for author in engine.registry.authors():
        flag = "[x]" if author.active else "[ ]"
        year = format_year(author.birth_year) if author.birth_year is not None else "-"
        lines.append(f"{flag} {author.id:<24} {year:>10}  ({author.birth_year_source.value})")
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Settings resolution
# ---------------------------------------------------------------------------


def _resolve_settings(args: argparse.Namespace) -> Settings:
    """Layer CLI flags on top of config file + environment."""
    config = load_config(args.config)
    data = config.setdefault("data", {})
    if args.matrix:
        data["matrix_source"] = args.matrix
    if args.authors:
        data["authors_source"] = args.authors
    if args.top_k is not None:
        config.setdefault("graph", {})["initial_active_count"] = args.top_k
    return settings_from_config(config)


def _apply_interactions(engine: ReferenceGraphEngine, args: argparse.Namespace) -> None:
    """Apply membership flags and threshold.  Marks state only; no recompute."""
    if args.only:
        engine.replace_active(args.only)
    for name in args.activate:
        engine.set_active(name, True)
    for name in args.deactivate:
        engine.set_active(name, False)
    if args.threshold is not None:
        engine.set_threshold(args.threshold)


# ---------------------------------------------------------------------------
# Runner
# ---------------------------------------------------------------------------


async def _run(args: argparse.Namespace, app_settings: Settings) -> int:
    """Load datasets, apply interactions, recompute once and print."""
    from refgraph.main import build_engine

    try:
        engine = await build_engine(app_settings)
    except LoadFailure as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_LOAD_FAILURE

    try:
        _apply_interactions(engine, args)
    except (UnknownAuthor, ThresholdOutOfRange) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_USAGE

    if args.list_authors:
        print(_format_author_list(engine))
        return EXIT_OK

    snapshot = engine.recompute()
    layout = compute_layout(
        snapshot,
        min_radius=app_settings.min_node_radius,
        max_radius=app_settings.max_node_radius,
    )

    if args.json:
        text = json.dumps(_snapshot_payload(snapshot, layout), indent=2)
    else:
        text = _format_text_output(snapshot, layout)

    if args.output:
        try:
            Path(args.output).write_text(text, encoding="utf-8")
        except OSError as exc:
            print(f"Error: cannot write {args.output}: {exc}", file=sys.stderr)
            return EXIT_OUTPUT_FAILURE
        print(f"Results written to: {args.output}", file=sys.stderr)
    else:
        print(text)
    return EXIT_OK


def _build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the render CLI."""
    parser = argparse.ArgumentParser(
        prog="python -m refgraph.cli",
        description="Compute the reference graph between historical authors.",
    )
    parser.add_argument("--config", default=DEFAULT_CONFIG_PATH, help="YAML config file")
    parser.add_argument("--matrix", help="Reference matrix CSV (path or http(s) URL)")
    parser.add_argument("--authors", help="Author metadata CSV (path or http(s) URL)")
    parser.add_argument("--threshold", type=int, help="Minimum reference count per edge")
    parser.add_argument(
        "--top-k",
        type=int,
        dest="top_k",
        help="Size of the initial active set (most-referenced authors)",
    )
    parser.add_argument(
        "--only",
        action="append",
        default=[],
        metavar="NAME",
        help="Replace the initial active set (repeatable)",
    )
    parser.add_argument(
        "--activate", action="append", default=[], metavar="NAME", help="Include an author"
    )
    parser.add_argument(
        "--deactivate", action="append", default=[], metavar="NAME", help="Exclude an author"
    )
    parser.add_argument(
        "--list-authors",
        action="store_true",
        dest="list_authors",
        help="Print every author with its membership flag instead of the graph",
    )
    parser.add_argument("--json", action="store_true", help="Output JSON")
    parser.add_argument("--output", "-o", help="Write output to a file instead of stdout")
    parser.add_argument(
        "--quiet", "-q", action="store_true", help="Only log warnings and errors"
    )
    return parser


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> int:
    """CLI entry point.  Returns the process exit code."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        app_settings = _resolve_settings(args)
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_LOAD_FAILURE

    quiet = args.quiet or args.json
    configure_logging(
        log_level="WARNING" if quiet else app_settings.log_level,
        json_output=(app_settings.app_env == "production"),
    )

    return asyncio.run(_run(args, app_settings))


if __name__ == "__main__":
    sys.exit(main())
