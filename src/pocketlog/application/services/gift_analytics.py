"""Gift tracker analytics."""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from pocketlog.application.record_store import RecordStore, utc_now
from pocketlog.domain.entities.gift import GiftIdea, GiftOccasion, GiftStatus
from pocketlog.domain.services import stats
from pocketlog.domain.services.view_query import (
    SortRule,
    TimeRange,
    ViewQuery,
    date_within,
    numeric_range,
    status_in,
    text_contains,
)


@dataclass(frozen=True)
class GiftMetrics:
    """Key numbers for the analytics screen.

    Attributes:
        total: Number of gifts in the window.
        total_spent: Sum of prices of bought or gifted items.
        average_price: Average price of bought or gifted items with a price.
        completion_rate: Fraction of gifts bought or gifted (0..1).
    """

    total: int
    total_spent: float
    average_price: float
    completion_rate: float


@dataclass(frozen=True)
class Person:
    """Derived per-recipient aggregate.

    Attributes:
        name: Recipient name.
        gift_count: Number of gift records for this recipient.
        total_spent: Sum of prices of bought or gifted items.
        last_activity: Most recent modification among the recipient's gifts.
    """

    name: str
    gift_count: int
    total_spent: float
    last_activity: datetime | None


def _created(gift: GiftIdea) -> datetime | None:
    return gift.created_at


def _price(gift: GiftIdea) -> float | None:
    return gift.estimated_price


def _spent(gift: GiftIdea) -> float | None:
    return gift.estimated_price if gift.is_purchased else None


class GiftAnalytics:
    """Read-only projections over the gift store."""

    def __init__(
        self,
        store: RecordStore[GiftIdea],
        clock: Callable[[], datetime] = utc_now,
        top_limit: int = 5,
        recent_limit: int = 5,
    ) -> None:
        """Initialize GiftAnalytics.

        Args:
            store: Gift record store.
            clock: Source of "now" for time windows.
            top_limit: Size of the top recipients/spenders lists.
            recent_limit: Size of the recent activity list.
        """
        self._store = store
        self._clock = clock
        self._top_limit = top_limit
        self._recent_limit = recent_limit

    def gifts_in(self, time_range: TimeRange) -> list[GiftIdea]:
        """Gifts created inside the rolling window, in insertion order."""
        window = time_range.window(self._clock())
        query: ViewQuery[GiftIdea] = ViewQuery().where(date_within(_created, window))
        return query.evaluate(self._store.all())

    def metrics(self, time_range: TimeRange = TimeRange.ALL) -> GiftMetrics:
        gifts = self.gifts_in(time_range)
        purchased = [gift for gift in gifts if gift.is_purchased]
        return GiftMetrics(
            total=len(gifts),
            total_spent=stats.sum_values(purchased, _price),
            average_price=stats.average(purchased, _price),
            completion_rate=stats.percentage(len(purchased), len(gifts)),
        )

    def status_breakdown(
        self, time_range: TimeRange = TimeRange.ALL
    ) -> dict[GiftStatus, int]:
        """Count per status; every status is present, in declaration order."""
        counts = stats.group_counts(self.gifts_in(time_range), lambda g: g.status)
        return {status: counts.get(status, 0) for status in GiftStatus}

    def occasion_breakdown(
        self, time_range: TimeRange = TimeRange.ALL
    ) -> list[tuple[GiftOccasion, int]]:
        """Occasions ordered by count, highest first. Unset occasions are skipped."""
        gifts = self.gifts_in(time_range)
        return stats.top_n(gifts, lambda g: g.occasion, len(GiftOccasion))

    def top_recipients(
        self, time_range: TimeRange = TimeRange.ALL
    ) -> list[tuple[str, int]]:
        gifts = self.gifts_in(time_range)
        return stats.top_n(gifts, lambda g: g.recipient_name, self._top_limit)

    def top_spenders(
        self, time_range: TimeRange = TimeRange.ALL
    ) -> list[tuple[str, float]]:
        """Recipients ranked by money spent on bought or gifted items."""
        return stats.top_n(
            self.gifts_in(time_range),
            lambda g: g.recipient_name,
            self._top_limit,
            value=_spent,
        )

    def recent_activity(self, time_range: TimeRange = TimeRange.ALL) -> list[GiftIdea]:
        """Most recently added gifts inside the window, newest first."""
        query: ViewQuery[GiftIdea] = (
            ViewQuery().sorted_by(_created, descending=True).take(self._recent_limit)
        )
        return query.evaluate(self.gifts_in(time_range))

    def people(self) -> list[Person]:
        """Recipients derived from the gift records, sorted by name."""
        groups = (
            ViewQuery[GiftIdea]()
            .grouped_by(lambda g: g.recipient_name)
            .evaluate_groups(self._store.all())
        )
        people = [
            Person(
                name=str(name),
                gift_count=len(gifts),
                total_spent=stats.sum_values(gifts, _spent),
                last_activity=max(
                    (g.updated_at for g in gifts if g.updated_at is not None),
                    default=None,
                ),
            )
            for name, gifts in groups.items()
        ]
        return sorted(people, key=lambda person: person.name.casefold())

    def search(
        self,
        text: str | None = None,
        statuses: list[GiftStatus] | None = None,
        min_price: float | None = None,
        max_price: float | None = None,
    ) -> list[GiftIdea]:
        """Gift list query: newest first, filtered by text, status and price.

        Args:
            text: Matches recipient, description or comment (case-insensitive).
            statuses: Allowed statuses (None for all).
            min_price: Inclusive lower price bound (None for unbounded).
            max_price: Inclusive upper price bound (None for unbounded).
        """
        query: ViewQuery[GiftIdea] = ViewQuery().where(
            text_contains(
                text,
                lambda g: g.recipient_name,
                lambda g: g.description,
                lambda g: g.comment,
            ),
            numeric_range(_price, min_price, max_price),
        )
        if statuses is not None:
            query = query.where(status_in(lambda g: g.status, statuses))
        return query.sorted_by(
            _created,
            descending=True,
            then_by=SortRule(lambda g: g.recipient_name.casefold()),
        ).evaluate(self._store.all())
