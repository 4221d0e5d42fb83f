"""Aggregate statistics over record sequences.

All functions are pure. Optional numeric fields are read through a
selector returning ``float | None``; a record whose selector returns None
does not contribute to sums or averages.
"""

from collections.abc import Callable, Hashable, Iterable
from datetime import date, datetime, timedelta
from typing import TypeVar, overload

T = TypeVar("T")
K = TypeVar("K", bound=Hashable)
N = TypeVar("N", int, float)


def count(records: Iterable[T], predicate: Callable[[T], bool] | None = None) -> int:
    """Count records, optionally only those matching ``predicate``."""
    if predicate is None:
        return sum(1 for _ in records)
    return sum(1 for record in records if predicate(record))


def sum_values(records: Iterable[T], selector: Callable[[T], float | None]) -> float:
    """Sum the selected values; missing values count as 0."""
    total = 0.0
    for record in records:
        value = selector(record)
        if value is not None:
            total += value
    return total


def average(records: Iterable[T], selector: Callable[[T], float | None]) -> float:
    """Average over records that have the field; 0.0 when none do."""
    total = 0.0
    present = 0
    for record in records:
        value = selector(record)
        if value is not None:
            total += value
            present += 1
    if present == 0:
        return 0.0
    return total / present


def percentage(part: float, whole: float) -> float:
    """Return ``part / whole`` as a fraction; 0.0 when ``whole`` is 0."""
    if whole == 0:
        return 0.0
    return part / whole


def group_counts(records: Iterable[T], key: Callable[[T], K | None]) -> dict[K, int]:
    """Count records per key in first-seen order. None keys are skipped."""
    counts: dict[K, int] = {}
    for record in records:
        group = key(record)
        if group is not None:
            counts[group] = counts.get(group, 0) + 1
    return counts


def group_sums(
    records: Iterable[T],
    key: Callable[[T], K | None],
    value: Callable[[T], float | None],
) -> dict[K, float]:
    """Sum values per key in first-seen order.

    Records with a None key or a None value are skipped.
    """
    sums: dict[K, float] = {}
    for record in records:
        group = key(record)
        amount = value(record)
        if group is not None and amount is not None:
            sums[group] = sums.get(group, 0.0) + amount
    return sums


def _ranked(totals: dict[K, N], n: int) -> list[tuple[K, N]]:
    if n <= 0:
        return []
    return sorted(totals.items(), key=lambda item: item[1], reverse=True)[:n]


@overload
def top_n(
    records: Iterable[T],
    key: Callable[[T], K | None],
    n: int,
    value: None = None,
) -> list[tuple[K, int]]: ...


@overload
def top_n(
    records: Iterable[T],
    key: Callable[[T], K | None],
    n: int,
    value: Callable[[T], float | None],
) -> list[tuple[K, float]]: ...


def top_n(
    records: Iterable[T],
    key: Callable[[T], K | None],
    n: int,
    value: Callable[[T], float | None] | None = None,
) -> list[tuple[K, int]] | list[tuple[K, float]]:
    """Rank groups by record count (or by summed ``value``), highest first.

    Counts stay ``int``; sums are ``float``. Ties keep first-seen order.
    """
    if value is None:
        return _ranked(group_counts(records, key), n)
    return _ranked(group_sums(records, key, value), n)


def most_common(records: Iterable[T], key: Callable[[T], K | None]) -> K | None:
    """Most frequent key (first-seen wins ties), or None for no records."""
    ranked = top_n(records, key, 1)
    return ranked[0][0] if ranked else None


def value_range(
    records: Iterable[T], selector: Callable[[T], float | None]
) -> tuple[float, float] | None:
    """(min, max) of the selected values, or None when no record has one."""
    values = [v for v in (selector(record) for record in records) if v is not None]
    if not values:
        return None
    return min(values), max(values)


def _as_date(value: date | datetime) -> date:
    return value.date() if isinstance(value, datetime) else value


def current_streak(days: Iterable[date | datetime], today: date) -> int:
    """Consecutive days with at least one entry, ending today.

    A streak that ended yesterday is still current (today may not be
    logged yet).
    """
    logged = {_as_date(day) for day in days}
    cursor = today if today in logged else today - timedelta(days=1)
    streak = 0
    while cursor in logged:
        streak += 1
        cursor -= timedelta(days=1)
    return streak


def longest_streak(days: Iterable[date | datetime]) -> int:
    """Longest run of consecutive logged days."""
    logged = sorted({_as_date(day) for day in days})
    longest = 0
    run = 0
    previous: date | None = None
    for day in logged:
        if previous is not None and day - previous == timedelta(days=1):
            run += 1
        else:
            run = 1
        longest = max(longest, run)
        previous = day
    return longest
