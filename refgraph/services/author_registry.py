"""Author identity, birth-year resolution and active-set membership.

The registry owns the ordered list of authors (matrix header order) and
their active flags.  Changing membership only marks state: nothing here
triggers a recompute, so several toggles can be batched before the engine
runs the pipeline once.

Birth-year policy, in order:
    1. a recorded ``birth_year``
    2. ``death_year - death_year_offset``
    3. unresolved (the author is listed but never placed or linked)
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

import structlog

from refgraph.models.author import Author, BirthYearSource
from refgraph.models.graph import AuthorAggregate
from refgraph.utils.errors import UnknownAuthor
from refgraph.utils.logging import get_logger
from refgraph.utils.parsing import parse_year

_logger: structlog.BoundLogger = get_logger(__name__)

DEFAULT_DEATH_YEAR_OFFSET = 50

# Field names in the author metadata records.
NAME_FIELD = "name"
BIRTH_YEAR_FIELD = "birth_year"
DEATH_YEAR_FIELD = "death_year"


def resolve(
    author_id: str,
    raw_metadata: Mapping[str, Any] | None,
    death_year_offset: int = DEFAULT_DEATH_YEAR_OFFSET,
) -> Author:
    """Build an :class:`Author` from its (possibly missing) metadata record."""
    if raw_metadata is None:
        return Author(id=author_id, birth_year_source=BirthYearSource.UNKNOWN_AUTHOR)

    birth_year = parse_year(raw_metadata.get(BIRTH_YEAR_FIELD))
    if birth_year is not None:
        return Author(
            id=author_id,
            birth_year=birth_year,
            birth_year_source=BirthYearSource.RECORDED,
        )

    death_year = parse_year(raw_metadata.get(DEATH_YEAR_FIELD))
    if death_year is not None:
        return Author(
            id=author_id,
            birth_year=death_year - death_year_offset,
            birth_year_source=BirthYearSource.DERIVED_FROM_DEATH,
        )

    return Author(id=author_id, birth_year_source=BirthYearSource.MISSING_YEARS)


def rank_by_incoming(authors: Iterable[Author]) -> list[Author]:
    """Order authors by ``incoming_refs``, highest first.

    The sort is stable, so ties keep their input order.
    """
    return sorted(authors, key=lambda a: a.incoming_refs, reverse=True)


class AuthorRegistry:
    """Ordered author collection plus the mutable active set.

    Parameters
    ----------
    authors:
        Authors in registry order.  Ids must be unique.
    """

    resolve = staticmethod(resolve)
    rank_by_incoming = staticmethod(rank_by_incoming)

    def __init__(self, authors: Iterable[Author]) -> None:
        self._authors: dict[str, Author] = {}
        for author in authors:
            if author.id in self._authors:
                raise ValueError(f"Duplicate author id: {author.id!r}")
            self._authors[author.id] = author
        self._active: set[str] = {a.id for a in self._authors.values() if a.active}
        self._initial_ranking: tuple[str, ...] = ()

    @classmethod
    def from_metadata(
        cls,
        author_ids: Sequence[str],
        metadata_records: Iterable[Mapping[str, Any]],
        death_year_offset: int = DEFAULT_DEATH_YEAR_OFFSET,
    ) -> AuthorRegistry:
        """Join matrix ids with metadata records by name.

        The first record for a name wins.  Records for names absent from
        the matrix are ignored.  Missing or year-less records are logged
        and kept as unresolved authors.
        """
        by_name: dict[str, Mapping[str, Any]] = {}
        for record in metadata_records:
            name = record.get(NAME_FIELD)
            if name is None:
                continue
            by_name.setdefault(str(name).strip(), record)

        authors = [resolve(aid, by_name.get(aid), death_year_offset) for aid in author_ids]

        unknown = [a.id for a in authors if a.birth_year_source is BirthYearSource.UNKNOWN_AUTHOR]
        missing = [a.id for a in authors if a.birth_year_source is BirthYearSource.MISSING_YEARS]
        for author_id in unknown:
            _logger.warning("unknown_author", author=author_id)
        for author_id in missing:
            _logger.warning("unresolved_birth_year", author=author_id)

        matrix_ids = set(author_ids)
        orphans = [name for name in by_name if name not in matrix_ids]
        _logger.info(
            "authors_resolved",
            authors=len(authors),
            derived_from_death=sum(
                a.birth_year_source is BirthYearSource.DERIVED_FROM_DEATH for a in authors
            ),
            unresolved=len(unknown) + len(missing),
            metadata_without_matrix=len(orphans),
        )
        return cls(authors)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get(self, author_id: str) -> Author:
        try:
            return self._authors[author_id]
        except KeyError:
            raise UnknownAuthor(author_id, source_name="registry") from None

    def authors(self) -> list[Author]:
        """All authors in registry order."""
        return list(self._authors.values())

    def ids(self) -> list[str]:
        return list(self._authors)

    def __contains__(self, author_id: object) -> bool:
        return author_id in self._authors

    def __len__(self) -> int:
        return len(self._authors)

    # ------------------------------------------------------------------
    # Active set
    # ------------------------------------------------------------------

    def set_active(self, author_id: str, active: bool) -> None:
        """Mark *author_id* in or out of the active set.  Does not recompute."""
        author = self.get(author_id)
        if active:
            self._active.add(author_id)
        else:
            self._active.discard(author_id)
        if author.active != active:
            self._authors[author_id] = author.model_copy(update={"active": active})

    def toggle(self, author_id: str) -> bool:
        """Flip membership of *author_id* and return the new state."""
        new_state = not self.is_active(author_id)
        self.set_active(author_id, new_state)
        return new_state

    def is_active(self, author_id: str) -> bool:
        self.get(author_id)
        return author_id in self._active

    def active_ids(self) -> frozenset[str]:
        return frozenset(self._active)

    def ordered_active_ids(self) -> list[str]:
        """Active ids in registry order."""
        return [aid for aid in self._authors if aid in self._active]

    def replace_active(self, author_ids: Iterable[str]) -> None:
        """Make exactly *author_ids* active.  Unknown ids raise before any change."""
        wanted = set(author_ids)
        for author_id in wanted:
            self.get(author_id)
        for author_id in self._authors:
            self.set_active(author_id, author_id in wanted)

    # ------------------------------------------------------------------
    # Aggregates and ranking
    # ------------------------------------------------------------------

    def apply_aggregates(self, aggregates: Mapping[str, AuthorAggregate]) -> None:
        """Store reference totals on every author.

        Authors missing from *aggregates* are reset to zero.
        """
        zero = AuthorAggregate()
        for author_id, author in self._authors.items():
            agg = aggregates.get(author_id, zero)
            if (author.outgoing_refs, author.incoming_refs) != (
                agg.outgoing_refs,
                agg.incoming_refs,
            ):
                self._authors[author_id] = author.model_copy(
                    update={
                        "outgoing_refs": agg.outgoing_refs,
                        "incoming_refs": agg.incoming_refs,
                    }
                )

    def seed_initial_active(self, count: int) -> list[str]:
        """Rank by the current (full-matrix) incoming totals and activate the top *count*.

        Called once at load.  The ranking is kept for reference and never
        recomputed.
        """
        ranking = rank_by_incoming(self._authors.values())
        self._initial_ranking = tuple(a.id for a in ranking)
        seeded = list(self._initial_ranking[: max(count, 0)])
        self.replace_active(seeded)
        _logger.info("active_set_seeded", count=len(seeded), authors=seeded)
        return seeded

    @property
    def initial_ranking(self) -> tuple[str, ...]:
        """Author ids ordered by full-matrix incoming references, as of load."""
        return self._initial_ranking
