"""Dream journal projections: filtered lists and tag statistics."""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from pocketlog.application.record_store import RecordStore, utc_now
from pocketlog.domain.entities.dream import Dream, DreamStatus
from pocketlog.domain.services import stats
from pocketlog.domain.services.view_query import (
    DateRange,
    SortRule,
    ViewQuery,
    date_within,
    status_in,
    tags_overlap,
    text_contains,
)


class DreamSort(Enum):
    """Sort options of the dream list."""

    NEWEST = "newest"
    OLDEST = "oldest"
    DEADLINE = "deadline"
    TITLE = "title"


class DateField(Enum):
    """Which date a date-range filter applies to."""

    DREAM_DATE = "dream_date"
    # Falls back to the dream date while the dream is waiting
    OUTCOME_DATE = "outcome_date"


@dataclass(frozen=True)
class DreamStats:
    """Counts per outcome and fulfilment rate.

    The rate is fulfilled / resolved; waiting dreams are not counted.
    """

    total: int
    waiting: int
    fulfilled: int
    not_fulfilled: int

    @property
    def resolved(self) -> int:
        return self.fulfilled + self.not_fulfilled

    @property
    def fulfilment_rate(self) -> float:
        return stats.percentage(self.fulfilled, self.resolved)


@dataclass(frozen=True)
class TagStats:
    """Derived per-tag aggregate."""

    tag: str
    stats: DreamStats


def _sort_rule(sort: DreamSort) -> SortRule[Dream]:
    if sort is DreamSort.OLDEST:
        return SortRule(lambda d: d.dream_date)
    if sort is DreamSort.DEADLINE:
        return SortRule(lambda d: d.check_deadline)
    if sort is DreamSort.TITLE:
        return SortRule(lambda d: d.title.casefold())
    return SortRule(lambda d: d.dream_date, descending=True)


def summarize(dreams: list[Dream]) -> DreamStats:
    counts = stats.group_counts(dreams, lambda d: d.status)
    return DreamStats(
        total=len(dreams),
        waiting=counts.get(DreamStatus.WAITING, 0),
        fulfilled=counts.get(DreamStatus.FULFILLED, 0),
        not_fulfilled=counts.get(DreamStatus.NOT_FULFILLED, 0),
    )


class DreamSummary:
    """Read-only projections over the dream store."""

    def __init__(
        self,
        store: RecordStore[Dream],
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._store = store
        self._clock = clock

    def dreams(
        self,
        statuses: list[DreamStatus] | None = None,
        tags: list[str] | None = None,
        date_range: DateRange | None = None,
        date_field: DateField = DateField.DREAM_DATE,
        text: str | None = None,
        sort: DreamSort = DreamSort.NEWEST,
    ) -> list[Dream]:
        """Dream list query.

        Args:
            statuses: Allowed statuses (None for all).
            tags: Dreams sharing at least one of these tags (None for all).
            date_range: Inclusive range on ``date_field`` (None for all).
            date_field: Dream date, or outcome date falling back to the
                dream date for waiting dreams.
            text: Matches title, expected event or description.
            sort: Sort option; ties keep insertion order.
        """
        query: ViewQuery[Dream] = ViewQuery().where(
            text_contains(
                text,
                lambda d: d.title,
                lambda d: d.expected_event,
                lambda d: d.description,
            ),
            tags_overlap(lambda d: d.tags, tags or ()),
        )
        if statuses is not None:
            query = query.where(status_in(lambda d: d.status, statuses))
        if date_range is not None:
            if date_field is DateField.OUTCOME_DATE:
                query = query.where(
                    date_within(lambda d: d.reference_date, date_range)
                )
            else:
                query = query.where(date_within(lambda d: d.dream_date, date_range))
        rule = _sort_rule(sort)
        return query.sorted_by(rule.key, descending=rule.descending).evaluate(
            self._store.all()
        )

    def pending(self) -> list[Dream]:
        """Waiting dreams, earliest check deadline first."""
        return self.dreams(statuses=[DreamStatus.WAITING], sort=DreamSort.DEADLINE)

    def overdue(self) -> list[Dream]:
        """Waiting dreams whose check deadline has passed, earliest first."""
        now = self._clock()
        return [dream for dream in self.pending() if dream.is_overdue(now)]

    def overall(self) -> DreamStats:
        return summarize(list(self._store.all()))

    def tag_statistics(self) -> list[TagStats]:
        """Per-tag statistics, most used tag first.

        Tag names are compared case-insensitively; the spelling seen first
        is reported.
        """
        dreams = self._store.all()
        spellings: dict[str, str] = {}
        for dream in dreams:
            for tag in dream.tags:
                spellings.setdefault(tag.casefold(), tag)
        result = [
            TagStats(tag=tag, stats=summarize([d for d in dreams if d.has_tag(tag)]))
            for tag in spellings.values()
        ]
        return sorted(result, key=lambda item: item.stats.total, reverse=True)
