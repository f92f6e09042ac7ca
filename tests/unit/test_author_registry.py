"""Unit tests for the author registry.

Tests: birth-year policy, metadata join, ranking, active-set membership,
and aggregate application.
"""

from __future__ import annotations

import pytest

from refgraph.models.author import Author, BirthYearSource
from refgraph.models.graph import AuthorAggregate
from refgraph.services.author_registry import AuthorRegistry, rank_by_incoming, resolve
from refgraph.utils.errors import UnknownAuthor


# ======================================================================
# resolve
# ======================================================================


class TestResolve:
    """Tests for the birth-year resolution policy."""

    def test_recorded_birth_year_wins(self) -> None:
        author = resolve("Plato", {"birth_year": "-427", "death_year": "-347"})
        assert author.birth_year == -427
        assert author.birth_year_source is BirthYearSource.RECORDED

    def test_death_year_minus_fifty(self) -> None:
        author = resolve("Zeno", {"birth_year": "", "death_year": "-262"})
        assert author.birth_year == -312
        assert author.birth_year_source is BirthYearSource.DERIVED_FROM_DEATH

    def test_custom_offset(self) -> None:
        author = resolve("Zeno", {"death_year": "-262"}, death_year_offset=70)
        assert author.birth_year == -332

    def test_numeric_metadata_values(self) -> None:
        assert resolve("Kant", {"birth_year": 1724}).birth_year == 1724

    def test_missing_years_is_unresolved(self) -> None:
        author = resolve("Anon", {"birth_year": "", "death_year": "unknown"})
        assert author.birth_year is None
        assert author.birth_year_source is BirthYearSource.MISSING_YEARS
        assert not author.is_placeable

    def test_no_metadata_is_unknown_author(self) -> None:
        author = resolve("Mystery", None)
        assert author.birth_year is None
        assert author.birth_year_source is BirthYearSource.UNKNOWN_AUTHOR

    def test_resolved_author_starts_inactive_with_zero_totals(self) -> None:
        author = resolve("Plato", {"birth_year": "-427"})
        assert (author.active, author.outgoing_refs, author.incoming_refs) == (False, 0, 0)


# ======================================================================
# rank_by_incoming
# ======================================================================


class TestRankByIncoming:
    """Tests for the load-time ranking."""

    def test_descending_order(self) -> None:
        authors = [
            Author(id="a", incoming_refs=1),
            Author(id="b", incoming_refs=9),
            Author(id="c", incoming_refs=4),
        ]
        assert [a.id for a in rank_by_incoming(authors)] == ["b", "c", "a"]

    def test_ties_keep_input_order(self) -> None:
        authors = [
            Author(id="x", incoming_refs=3),
            Author(id="y", incoming_refs=5),
            Author(id="z", incoming_refs=3),
            Author(id="w", incoming_refs=3),
        ]
        assert [a.id for a in rank_by_incoming(authors)] == ["y", "x", "z", "w"]

    def test_available_on_registry(self) -> None:
        assert AuthorRegistry.rank_by_incoming([]) == []
        assert AuthorRegistry.resolve("A", None).id == "A"


# ======================================================================
# AuthorRegistry
# ======================================================================


class TestFromMetadata:
    """Tests for joining matrix ids with metadata records."""

    def test_registry_order_follows_matrix(self, sample_registry: AuthorRegistry) -> None:
        assert sample_registry.ids() == ["Plato", "Aristotle", "Zeno", "Mystery"]

    def test_unknown_author_kept_unresolved(self, sample_registry: AuthorRegistry) -> None:
        mystery = sample_registry.get("Mystery")
        assert mystery.birth_year is None
        assert mystery.birth_year_source is BirthYearSource.UNKNOWN_AUTHOR

    def test_death_year_derivation_applied(self, sample_registry: AuthorRegistry) -> None:
        assert sample_registry.get("Zeno").birth_year == -312

    def test_first_metadata_record_wins(self) -> None:
        registry = AuthorRegistry.from_metadata(
            ["A"],
            [{"name": "A", "birth_year": "100"}, {"name": "A", "birth_year": "200"}],
        )
        assert registry.get("A").birth_year == 100

    def test_metadata_without_matrix_entry_ignored(self) -> None:
        registry = AuthorRegistry.from_metadata(["A"], [{"name": "Extra", "birth_year": "1"}])
        assert registry.ids() == ["A"]

    def test_names_are_stripped(self) -> None:
        registry = AuthorRegistry.from_metadata(["A"], [{"name": " A ", "birth_year": "5"}])
        assert registry.get("A").birth_year == 5

    def test_duplicate_ids_rejected(self) -> None:
        with pytest.raises(ValueError):
            AuthorRegistry([Author(id="A"), Author(id="A")])


class TestActiveSet:
    """Tests for membership marking."""

    def test_set_active_marks_author(self, sample_registry: AuthorRegistry) -> None:
        sample_registry.set_active("Plato", True)
        assert sample_registry.is_active("Plato")
        assert sample_registry.get("Plato").active
        assert sample_registry.active_ids() == {"Plato"}

    def test_set_inactive(self, sample_registry: AuthorRegistry) -> None:
        sample_registry.set_active("Plato", True)
        sample_registry.set_active("Plato", False)
        assert not sample_registry.is_active("Plato")
        assert not sample_registry.get("Plato").active

    def test_toggle_twice_is_identity(self, sample_registry: AuthorRegistry) -> None:
        sample_registry.replace_active(["Plato", "Zeno"])
        before = sample_registry.active_ids()
        assert sample_registry.toggle("Plato") is False
        assert sample_registry.toggle("Plato") is True
        assert sample_registry.active_ids() == before

    def test_ordered_active_ids_follow_registry(self, sample_registry: AuthorRegistry) -> None:
        sample_registry.set_active("Mystery", True)
        sample_registry.set_active("Plato", True)
        sample_registry.set_active("Zeno", True)
        assert sample_registry.ordered_active_ids() == ["Plato", "Zeno", "Mystery"]

    def test_replace_active(self, sample_registry: AuthorRegistry) -> None:
        sample_registry.replace_active(["Plato", "Aristotle"])
        sample_registry.replace_active(["Zeno"])
        assert sample_registry.active_ids() == {"Zeno"}
        assert not sample_registry.get("Plato").active

    def test_replace_active_unknown_id_changes_nothing(
        self, sample_registry: AuthorRegistry
    ) -> None:
        sample_registry.replace_active(["Plato"])
        with pytest.raises(UnknownAuthor):
            sample_registry.replace_active(["Zeno", "Socrates"])
        assert sample_registry.active_ids() == {"Plato"}

    def test_set_active_unknown_id_raises(self, sample_registry: AuthorRegistry) -> None:
        with pytest.raises(UnknownAuthor):
            sample_registry.set_active("Socrates", True)

    def test_is_active_unknown_id_raises(self, sample_registry: AuthorRegistry) -> None:
        with pytest.raises(UnknownAuthor):
            sample_registry.is_active("Socrates")


class TestAggregatesAndSeeding:
    """Tests for apply_aggregates and seed_initial_active."""

    def test_apply_aggregates_updates_and_resets(self, sample_registry: AuthorRegistry) -> None:
        sample_registry.apply_aggregates({"Plato": AuthorAggregate(4, 7)})
        sample_registry.apply_aggregates({"Zeno": AuthorAggregate(1, 2)})
        assert (sample_registry.get("Plato").outgoing_refs, sample_registry.get("Plato").incoming_refs) == (0, 0)
        assert (sample_registry.get("Zeno").outgoing_refs, sample_registry.get("Zeno").incoming_refs) == (1, 2)

    def test_apply_aggregates_keeps_active_flag(self, sample_registry: AuthorRegistry) -> None:
        sample_registry.set_active("Plato", True)
        sample_registry.apply_aggregates({"Plato": AuthorAggregate(1, 1)})
        assert sample_registry.get("Plato").active

    def test_seed_activates_top_k(self, sample_registry: AuthorRegistry) -> None:
        sample_registry.apply_aggregates(
            {
                "Plato": AuthorAggregate(0, 16),
                "Aristotle": AuthorAggregate(0, 9),
                "Zeno": AuthorAggregate(0, 3),
                "Mystery": AuthorAggregate(0, 9),
            }
        )
        seeded = sample_registry.seed_initial_active(2)
        assert seeded == ["Plato", "Aristotle"]
        assert sample_registry.active_ids() == {"Plato", "Aristotle"}
        assert sample_registry.initial_ranking == ("Plato", "Aristotle", "Mystery", "Zeno")

    def test_seed_more_than_available(self, sample_registry: AuthorRegistry) -> None:
        seeded = sample_registry.seed_initial_active(10)
        assert len(seeded) == 4

    def test_seed_zero(self, sample_registry: AuthorRegistry) -> None:
        assert sample_registry.seed_initial_active(0) == []
        assert sample_registry.active_ids() == frozenset()
