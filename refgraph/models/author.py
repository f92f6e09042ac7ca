"""Author model for the reference graph.

An Author is one row/column of the reference matrix joined (loosely) with
its metadata record.  Instances are frozen: the registry replaces an
author with ``model_copy(update=...)`` whenever its membership flag or its
aggregates change, so every emitted snapshot holds values that never move
underneath the renderer.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class BirthYearSource(str, Enum):  # noqa: UP042 (StrEnum needs Python 3.11)
    """How an author's birth year was resolved.

    RECORDED:            metadata carried a birth year
    DERIVED_FROM_DEATH:  estimated as death year minus the configured offset
    MISSING_YEARS:       metadata record exists but has neither year
    UNKNOWN_AUTHOR:      matrix id with no metadata record at all
    """

    RECORDED = "recorded"
    DERIVED_FROM_DEATH = "derived_from_death"
    MISSING_YEARS = "missing_years"
    UNKNOWN_AUTHOR = "unknown_author"


class Author(BaseModel):
    """A historical author positioned by birth year and reference totals.

    ``outgoing_refs`` / ``incoming_refs`` hold totals over the full matrix
    right after load (used once, for the initial ranking) and totals over
    the current active set after every recompute.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    birth_year: int | None = None
    birth_year_source: BirthYearSource = BirthYearSource.UNKNOWN_AUTHOR
    outgoing_refs: int = Field(default=0, ge=0)
    incoming_refs: int = Field(default=0, ge=0)
    active: bool = False

    @property
    def is_placeable(self) -> bool:
        """True when the author can be positioned (and therefore linked)."""
        return self.birth_year is not None
