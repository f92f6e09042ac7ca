"""Cell parsing helpers for CSV-shaped matrix and author records.

CSV readers hand every cell over as a string (or ``None`` for a short
row).  These helpers turn those cells into the integers the engine works
with and decide what counts as "no value":

1. **Reference counts** -- non-negative integers.  Anything else
   (blank, ``"n/a"``, negative, NaN) is treated as 0 by the matrix store.

2. **Years** -- signed integers, negative for BCE.  Blank or non-numeric
   cells are ``None`` so the birth-year policy can fall through to the
   next rule.
"""

from __future__ import annotations

import math
from typing import Any


def is_blank_key(key: Any) -> bool:
    """Return True for the blank column header that names the source author."""
    return key is None or str(key).strip() == ""


def _to_number(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def parse_count(value: Any) -> int | None:
    """Parse a reference count, returning ``None`` when the cell is malformed.

    Fractional values are truncated toward zero.  Negative counts are
    malformed.
    """
    number = _to_number(value)
    if number is None or number < 0:
        return None
    return int(number)


def parse_year(value: Any) -> int | None:
    """Parse a signed year (negative = BCE), or ``None`` if absent/invalid."""
    number = _to_number(value)
    if number is None:
        return None
    return int(number)
