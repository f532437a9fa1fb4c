"""Total ordering helpers for optional values and post dates."""

from __future__ import annotations

from datetime import date, datetime
from typing import Callable, Optional, TypeVar

from yanos.front_matter import PostHeader

DATE_FORMAT = "%Y-%m-%d"

T = TypeVar("T")


class DateParseError(ValueError):
    """Raised when a post date is not in YYYY-MM-DD form."""


def compare_optional(a: Optional[T], b: Optional[T], compare_some: Callable[[T, T], int]) -> int:
    """Compare two optional values, ``None`` sorting before any value.

    Returns a negative, zero or positive int in the style of ``cmp``, so it can
    be used with :func:`functools.cmp_to_key`. When both values are present the
    comparison is delegated to ``compare_some``.
    """
    if a is None and b is None:
        return 0
    if a is None:
        return -1
    if b is None:
        return 1
    return compare_some(a, b)


def parse_date(value: str) -> date:
    try:
        return datetime.strptime(value, DATE_FORMAT).date()
    except ValueError as exc:
        raise DateParseError(f"Invalid date {value!r}, expected YYYY-MM-DD") from exc


def _compare_dates(a: str, b: str) -> int:
    date_a = parse_date(a)
    date_b = parse_date(b)
    return (date_a > date_b) - (date_a < date_b)


def compare_header_date(a: PostHeader, b: PostHeader) -> int:
    """Order headers chronologically; a header without a date comes first."""
    return compare_optional(a.date, b.date, _compare_dates)
