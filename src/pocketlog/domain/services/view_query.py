"""Declarative filter / sort / group queries over record snapshots."""

from collections.abc import Callable, Hashable, Iterable
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Generic, TypeVar

from pocketlog.domain.services.datetimes import normalize_to_utc

T = TypeVar("T")

Predicate = Callable[[T], bool]


class Ungrouped(Enum):
    """Bucket key for records whose group key is None."""

    UNGROUPED = "ungrouped"


UNGROUPED = Ungrouped.UNGROUPED


@dataclass(frozen=True)
class DateRange:
    """Inclusive date range; a missing bound means unbounded on that side.

    Bounds and tested values are compared in UTC; naive ones count as UTC.
    """

    start: datetime | None = None
    end: datetime | None = None

    def __post_init__(self) -> None:
        if self.start is not None:
            object.__setattr__(self, "start", normalize_to_utc(self.start))
        if self.end is not None:
            object.__setattr__(self, "end", normalize_to_utc(self.end))

    @property
    def is_unbounded(self) -> bool:
        """True when neither bound is set."""
        return self.start is None and self.end is None

    def contains(self, value: datetime) -> bool:
        """Whether ``value`` lies inside the range, bounds included."""
        value = normalize_to_utc(value)
        if self.start is not None and value < self.start:
            return False
        if self.end is not None and value > self.end:
            return False
        return True


class TimeRange(Enum):
    """Rolling time windows used by the analytics screens."""

    WEEK = "week"
    MONTH = "month"
    YEAR = "year"
    ALL = "all"

    @property
    def days(self) -> int | None:
        """Window length in days, None for ALL."""
        return {
            TimeRange.WEEK: 7,
            TimeRange.MONTH: 30,
            TimeRange.YEAR: 365,
            TimeRange.ALL: None,
        }[self]

    def window(self, now: datetime) -> DateRange:
        """Return the window ending at ``now`` (ALL is unbounded)."""
        if self.days is None:
            return DateRange()
        return DateRange(start=now - timedelta(days=self.days))


def _always(_: Any) -> bool:
    return True


def status_in(selector: Callable[[T], Any], statuses: Iterable[Any]) -> Predicate[T]:
    """Match records whose selected value is one of ``statuses``."""
    allowed = frozenset(statuses)
    return lambda record: selector(record) in allowed


def equals(selector: Callable[[T], Any], value: Any) -> Predicate[T]:
    """Match records whose selected value equals ``value``."""
    return lambda record: selector(record) == value


def text_contains(
    query: str | None, *selectors: Callable[[T], str | None]
) -> Predicate[T]:
    """Case-insensitive substring match across one or more text fields.

    A blank query matches everything.
    """
    if query is None or not query.strip():
        return _always
    needle = query.strip().casefold()

    def predicate(record: T) -> bool:
        for selector in selectors:
            value = selector(record)
            if value and needle in value.casefold():
                return True
        return False

    return predicate


def date_within(
    selector: Callable[[T], datetime | None], date_range: DateRange
) -> Predicate[T]:
    """Match records whose selected date falls inside ``date_range``.

    Records without a date are excluded unless the range is unbounded.
    """
    if date_range.is_unbounded:
        return _always

    def predicate(record: T) -> bool:
        value = selector(record)
        return value is not None and date_range.contains(value)

    return predicate


def numeric_range(
    selector: Callable[[T], float | None],
    minimum: float | None = None,
    maximum: float | None = None,
) -> Predicate[T]:
    """Inclusive numeric range on an optional field.

    Either bound may be omitted. With no bounds every record matches;
    otherwise records lacking the field are excluded.
    """
    if minimum is None and maximum is None:
        return _always

    def predicate(record: T) -> bool:
        value = selector(record)
        if value is None:
            return False
        if minimum is not None and value < minimum:
            return False
        if maximum is not None and value > maximum:
            return False
        return True

    return predicate


def tags_overlap(
    selector: Callable[[T], Iterable[str]], tags: Iterable[str]
) -> Predicate[T]:
    """Match records sharing at least one tag (case-insensitive).

    An empty tag set matches everything.
    """
    wanted = frozenset(tag.casefold() for tag in tags)
    if not wanted:
        return _always
    return lambda record: any(tag.casefold() in wanted for tag in selector(record))


@dataclass(frozen=True)
class SortRule(Generic[T]):
    """Sort key and direction. None values always sort last."""

    key: Callable[[T], Any]
    descending: bool = False

    def apply(self, records: list[T]) -> list[T]:
        present = [record for record in records if self.key(record) is not None]
        missing = [record for record in records if self.key(record) is None]
        # sorted() is stable in both directions, so ties keep input order
        return sorted(present, key=self.key, reverse=self.descending) + missing


@dataclass(frozen=True)
class ViewQuery(Generic[T]):
    """Composable filter + sort + top-N + grouping query.

    Evaluation is a pure function of the snapshot and the query: the input
    sequence and its records are never modified.
    """

    filters: tuple[Predicate[T], ...] = ()
    sort: SortRule[T] | None = None
    then_by: SortRule[T] | None = None
    limit: int | None = None
    group_by: Callable[[T], Hashable | None] | None = None

    def __post_init__(self) -> None:
        if self.limit is not None and self.limit < 0:
            raise ValueError("limit must not be negative")

    def where(self, *predicates: Predicate[T]) -> "ViewQuery[T]":
        """Return a copy with additional filters."""
        return replace(self, filters=self.filters + predicates)

    def sorted_by(
        self,
        key: Callable[[T], Any],
        descending: bool = False,
        then_by: SortRule[T] | None = None,
    ) -> "ViewQuery[T]":
        """Return a copy sorted by ``key`` (optionally with a secondary rule)."""
        return replace(self, sort=SortRule(key, descending), then_by=then_by)

    def take(self, limit: int | None) -> "ViewQuery[T]":
        """Return a copy truncated to the first ``limit`` results."""
        return replace(self, limit=limit)

    def grouped_by(self, key: Callable[[T], Hashable | None]) -> "ViewQuery[T]":
        """Return a copy that groups results by ``key``."""
        return replace(self, group_by=key)

    def evaluate(self, records: Iterable[T]) -> list[T]:
        """Apply filters, sort and limit; returns a new list."""
        result = [
            record
            for record in records
            if all(predicate(record) for predicate in self.filters)
        ]
        if self.then_by is not None:
            result = self.then_by.apply(result)
        if self.sort is not None:
            result = self.sort.apply(result)
        if self.limit is not None:
            result = result[: self.limit]
        return result

    def evaluate_groups(self, records: Iterable[T]) -> dict[Hashable, list[T]]:
        """Evaluate and group the result.

        Groups appear in order of their first record; the UNGROUPED bucket
        (records whose key is None) comes last. Without ``group_by`` every
        record lands in UNGROUPED.
        """
        groups: dict[Hashable, list[T]] = {}
        ungrouped: list[T] = []
        for record in self.evaluate(records):
            key = self.group_by(record) if self.group_by is not None else None
            if key is None:
                ungrouped.append(record)
            else:
                groups.setdefault(key, []).append(record)
        if ungrouped:
            groups[UNGROUPED] = ungrouped
        return groups
