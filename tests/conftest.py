"""Shared pytest fixtures for the refgraph test suite."""

from __future__ import annotations

import csv
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from refgraph.models.author import Author, BirthYearSource
from refgraph.pipeline.engine import ReferenceGraphEngine
from refgraph.services.author_registry import AuthorRegistry
from refgraph.services.matrix_store import MatrixStore

# ---------------------------------------------------------------------------
# Sample data
# ---------------------------------------------------------------------------

# Plato <-> Aristotle, the two-author matrix used by the A/B scenarios.
PLATO_ARISTOTLE: dict[str, dict[str, int]] = {
    "Plato": {"Aristotle": 5},
    "Aristotle": {"Plato": 3},
}

# A slightly larger matrix with a self-citation, an unresolved author and
# a one-way link.  Header order: Plato, Aristotle, Zeno, Mystery.
MATRIX_RECORDS: list[dict[str, str]] = [
    {"": "Plato", "Plato": "0", "Aristotle": "5", "Zeno": "1", "Mystery": "2"},
    {"": "Aristotle", "Plato": "3", "Aristotle": "4", "Zeno": "0", "Mystery": ""},
    {"": "Zeno", "Plato": "7", "Aristotle": "oops", "Zeno": "0", "Mystery": "0"},
    {"": "Mystery", "Plato": "6", "Aristotle": "0", "Zeno": "2", "Mystery": "0"},
]

AUTHOR_RECORDS: list[dict[str, str]] = [
    {"name": "Plato", "birth_year": "-427", "death_year": "-347"},
    {"name": "Aristotle", "birth_year": "-384", "death_year": "-322"},
    {"name": "Zeno", "birth_year": "", "death_year": "-262"},
]


def _make_engine(
    rows: dict[str, dict[str, int]],
    birth_years: dict[str, int | None] | None = None,
    active: list[str] | None = None,
    threshold: int = 0,
) -> ReferenceGraphEngine:
    """Engine over *rows* with every author placeable unless told otherwise."""
    matrix = MatrixStore(rows)
    years = birth_years or {}
    authors = []
    for aid in matrix.author_ids():
        year = years.get(aid, 0)
        authors.append(
            Author(
                id=aid,
                birth_year=year,
                birth_year_source=(
                    BirthYearSource.RECORDED if year is not None else BirthYearSource.UNKNOWN_AUTHOR
                ),
            )
        )
    registry = AuthorRegistry(authors)
    registry.replace_active(active if active is not None else matrix.author_ids())
    return ReferenceGraphEngine(matrix, registry, threshold=threshold)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def scenario_matrix() -> MatrixStore:
    """The Plato/Aristotle two-author matrix."""
    return MatrixStore(PLATO_ARISTOTLE)


@pytest.fixture
def sample_matrix() -> MatrixStore:
    """Matrix built from MATRIX_RECORDS through the CSV record path."""
    return MatrixStore.from_records(MATRIX_RECORDS)


@pytest.fixture
def sample_registry(sample_matrix: MatrixStore) -> AuthorRegistry:
    """Registry joining MATRIX_RECORDS with AUTHOR_RECORDS (Mystery has no metadata)."""
    return AuthorRegistry.from_metadata(sample_matrix.author_ids(), AUTHOR_RECORDS)


@pytest.fixture
def write_csv(tmp_path: Path) -> Callable[[str, list[dict[str, Any]]], Path]:
    """Write records to ``tmp_path/<name>`` as CSV and return the path."""

    def _write(name: str, records: list[dict[str, Any]]) -> Path:
        path = tmp_path / name
        fieldnames: list[str] = []
        for record in records:
            for key in record:
                if key not in fieldnames:
                    fieldnames.append(key)
        with open(path, "w", newline="", encoding="utf-8") as f:
            writer = csv.DictWriter(f, fieldnames=fieldnames)
            writer.writeheader()
            writer.writerows(records)
        return path

    return _write


@pytest.fixture
def make_engine() -> Callable[..., ReferenceGraphEngine]:
    """Factory for small engines: ``make_engine(rows, birth_years=None, active=None, threshold=0)``.

    Every author gets birth year 0 unless *birth_years* says otherwise
    (``None`` = unresolved).  All authors start active unless *active* is given.
    """
    return _make_engine
