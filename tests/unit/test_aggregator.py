"""Unit tests for the Aggregator."""

from __future__ import annotations

import itertools

from refgraph.models.graph import AuthorAggregate
from refgraph.services.aggregator import Aggregator
from refgraph.services.matrix_store import MatrixStore


def test_two_author_totals(scenario_matrix: MatrixStore) -> None:
    result = Aggregator().recompute({"Plato", "Aristotle"}, scenario_matrix)
    assert result["Plato"] == AuthorAggregate(outgoing_refs=5, incoming_refs=3)
    assert result["Aristotle"] == AuthorAggregate(outgoing_refs=3, incoming_refs=5)


def test_self_citation_counts_both_ways(sample_matrix: MatrixStore) -> None:
    result = Aggregator().recompute(["Aristotle"], sample_matrix)
    assert result["Aristotle"] == AuthorAggregate(outgoing_refs=4, incoming_refs=4)


def test_only_active_peers_count(sample_matrix: MatrixStore) -> None:
    agg = Aggregator()
    full = agg.recompute(["Plato", "Aristotle", "Zeno", "Mystery"], sample_matrix)
    reduced = agg.recompute(["Plato", "Aristotle"], sample_matrix)

    # Plato -> A5, Z1, M2 ; <- A3, Z7, M6
    assert full["Plato"] == AuthorAggregate(outgoing_refs=8, incoming_refs=16)
    # Only the Aristotle cells survive once Zeno and Mystery drop out.
    assert reduced["Plato"] == AuthorAggregate(outgoing_refs=5, incoming_refs=3)


def test_isolated_author_is_zero_not_missing(sample_matrix: MatrixStore) -> None:
    result = Aggregator().recompute(["Zeno"], sample_matrix)
    assert result == {"Zeno": AuthorAggregate(0, 0)}


def test_result_restricted_to_active_ids(sample_matrix: MatrixStore) -> None:
    result = Aggregator().recompute(["Zeno", "Plato"], sample_matrix)
    assert list(result) == ["Zeno", "Plato"]


def test_id_outside_matrix_aggregates_to_zero(scenario_matrix: MatrixStore) -> None:
    result = Aggregator().recompute(["Plato", "Socrates"], scenario_matrix)
    assert result["Socrates"] == AuthorAggregate()
    assert result["Plato"] == AuthorAggregate()


def test_empty_active_set(sample_matrix: MatrixStore) -> None:
    assert Aggregator().recompute([], sample_matrix) == {}


def test_sent_equals_received_for_every_subset(sample_matrix: MatrixStore) -> None:
    agg = Aggregator()
    ids = sample_matrix.author_ids()
    for size in range(len(ids) + 1):
        for subset in itertools.combinations(ids, size):
            result = agg.recompute(subset, sample_matrix)
            sent = sum(a.outgoing_refs for a in result.values())
            received = sum(a.incoming_refs for a in result.values())
            assert sent == received, subset
