"""Tests for ViewQuery and predicate builders."""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import pytest

from pocketlog.domain.services.view_query import (
    UNGROUPED,
    DateRange,
    SortRule,
    TimeRange,
    ViewQuery,
    date_within,
    equals,
    numeric_range,
    status_in,
    tags_overlap,
    text_contains,
)

NOW = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)


@dataclass(frozen=True)
class Item:
    name: str
    status: str = "open"
    price: float | None = None
    date: datetime | None = None
    group: str | None = None
    tags: tuple[str, ...] = ()


@pytest.fixture
def items() -> list[Item]:
    return [
        Item("banana", status="open", price=3.0, group="fruit", tags=("Yellow",)),
        Item("apple", status="done", price=None, group="fruit", tags=("red",)),
        Item("carrot", status="open", price=1.0, group="veg"),
        Item("Dill", status="done", price=2.0, group=None, tags=("green",)),
    ]


def names(result: list[Item]) -> list[str]:
    return [item.name for item in result]


class TestPredicates:
    """Predicate builder tests."""

    def test_status_in(self, items: list[Item]) -> None:
        """Test status set filtering."""
        query: ViewQuery[Item] = ViewQuery().where(
            status_in(lambda i: i.status, ["done"])
        )

        assert names(query.evaluate(items)) == ["apple", "Dill"]

    def test_equals(self, items: list[Item]) -> None:
        """Test equality filtering."""
        query: ViewQuery[Item] = ViewQuery().where(equals(lambda i: i.group, "veg"))

        assert names(query.evaluate(items)) == ["carrot"]

    def test_text_contains_is_case_insensitive(self, items: list[Item]) -> None:
        """Test substring search across fields."""
        query: ViewQuery[Item] = ViewQuery().where(
            text_contains("DI", lambda i: i.name, lambda i: i.group)
        )

        assert names(query.evaluate(items)) == ["Dill"]

    @pytest.mark.parametrize("query_text", [None, "", "   "])
    def test_blank_text_matches_everything(
        self, items: list[Item], query_text: str | None
    ) -> None:
        """Test that blank search text is not a filter."""
        query: ViewQuery[Item] = ViewQuery().where(
            text_contains(query_text, lambda i: i.name)
        )

        assert len(query.evaluate(items)) == len(items)

    def test_numeric_range_excludes_missing_values(self, items: list[Item]) -> None:
        """Test that records without a price are excluded once bounded."""
        query: ViewQuery[Item] = ViewQuery().where(
            numeric_range(lambda i: i.price, minimum=2.0)
        )

        assert names(query.evaluate(items)) == ["banana", "Dill"]

    def test_numeric_range_upper_bound_only(self, items: list[Item]) -> None:
        """Test an upper bound without a lower bound."""
        query: ViewQuery[Item] = ViewQuery().where(
            numeric_range(lambda i: i.price, maximum=2.0)
        )

        assert names(query.evaluate(items)) == ["carrot", "Dill"]

    def test_numeric_range_unbounded(self, items: list[Item]) -> None:
        """Test that no bounds means no filter."""
        query: ViewQuery[Item] = ViewQuery().where(numeric_range(lambda i: i.price))

        assert len(query.evaluate(items)) == 4

    def test_tags_overlap(self, items: list[Item]) -> None:
        """Test tag intersection (case-insensitive)."""
        query: ViewQuery[Item] = ViewQuery().where(
            tags_overlap(lambda i: i.tags, ["RED", "green"])
        )

        assert names(query.evaluate(items)) == ["apple", "Dill"]

    def test_empty_tag_filter(self, items: list[Item]) -> None:
        """Test that no tags means no filter."""
        query: ViewQuery[Item] = ViewQuery().where(tags_overlap(lambda i: i.tags, []))

        assert len(query.evaluate(items)) == 4


class TestTimeRange:
    """Rolling window tests."""

    @pytest.fixture
    def dated(self) -> list[Item]:
        return [
            Item("today", date=NOW),
            Item("ten days", date=NOW - timedelta(days=10)),
            Item("forty days", date=NOW - timedelta(days=40)),
        ]

    def test_week(self, dated: list[Item]) -> None:
        """Test that the week window only holds the last 7 days."""
        query: ViewQuery[Item] = ViewQuery().where(
            date_within(lambda i: i.date, TimeRange.WEEK.window(NOW))
        )

        assert names(query.evaluate(dated)) == ["today"]

    def test_month(self, dated: list[Item]) -> None:
        """Test that the month window holds the last 30 days."""
        query: ViewQuery[Item] = ViewQuery().where(
            date_within(lambda i: i.date, TimeRange.MONTH.window(NOW))
        )

        assert names(query.evaluate(dated)) == ["today", "ten days"]

    def test_year_and_all(self, dated: list[Item]) -> None:
        """Test the widest windows."""
        for time_range in (TimeRange.YEAR, TimeRange.ALL):
            query: ViewQuery[Item] = ViewQuery().where(
                date_within(lambda i: i.date, time_range.window(NOW))
            )
            assert len(query.evaluate(dated)) == 3

    def test_window_days(self) -> None:
        """Test window lengths."""
        assert TimeRange.WEEK.days == 7
        assert TimeRange.MONTH.days == 30
        assert TimeRange.YEAR.days == 365
        assert TimeRange.ALL.window(NOW).is_unbounded

    def test_date_range_is_inclusive(self) -> None:
        """Test both bounds are inclusive."""
        date_range = DateRange(start=NOW - timedelta(days=1), end=NOW)

        assert date_range.contains(NOW)
        assert date_range.contains(NOW - timedelta(days=1))
        assert not date_range.contains(NOW + timedelta(seconds=1))

    def test_date_range_accepts_naive_values(self) -> None:
        """Test that naive bounds and values are compared as UTC."""
        naive_now = NOW.replace(tzinfo=None)
        date_range = DateRange(start=naive_now - timedelta(days=1), end=naive_now)

        assert date_range.contains(NOW)
        assert date_range.contains(naive_now - timedelta(hours=1))
        assert not date_range.contains(naive_now + timedelta(seconds=1))
        assert TimeRange.WEEK.window(NOW).contains(naive_now - timedelta(days=2))

    def test_missing_date_is_excluded_from_bounded_range(self) -> None:
        """Test that undated records fall outside bounded windows."""
        query: ViewQuery[Item] = ViewQuery().where(
            date_within(lambda i: i.date, TimeRange.WEEK.window(NOW))
        )

        assert query.evaluate([Item("undated")]) == []


class TestSorting:
    """Sorting and limit tests."""

    def test_sort_ascending_puts_none_last(self, items: list[Item]) -> None:
        """Test that None values sort last."""
        query: ViewQuery[Item] = ViewQuery().sorted_by(lambda i: i.price)

        assert names(query.evaluate(items)) == ["carrot", "Dill", "banana", "apple"]

    def test_sort_descending_puts_none_last(self, items: list[Item]) -> None:
        """Test that None values sort last in descending order too."""
        query: ViewQuery[Item] = ViewQuery().sorted_by(
            lambda i: i.price, descending=True
        )

        assert names(query.evaluate(items)) == ["banana", "Dill", "carrot", "apple"]

    def test_ties_keep_input_order(self, items: list[Item]) -> None:
        """Test that sorting is stable."""
        query: ViewQuery[Item] = ViewQuery().sorted_by(lambda i: i.status)

        assert names(query.evaluate(items)) == ["apple", "Dill", "banana", "carrot"]

    def test_secondary_sort(self, items: list[Item]) -> None:
        """Test that the secondary rule orders ties."""
        query: ViewQuery[Item] = ViewQuery().sorted_by(
            lambda i: i.status, then_by=SortRule(lambda i: i.name.casefold())
        )

        assert names(query.evaluate(items)) == ["apple", "Dill", "banana", "carrot"]

    def test_secondary_sort_descending(self, items: list[Item]) -> None:
        """Test a descending secondary rule."""
        query: ViewQuery[Item] = ViewQuery().sorted_by(
            lambda i: i.status,
            then_by=SortRule(lambda i: i.name.casefold(), descending=True),
        )

        assert names(query.evaluate(items)) == ["Dill", "apple", "carrot", "banana"]

    def test_limit_applies_after_sort(self, items: list[Item]) -> None:
        """Test top-N truncation."""
        query: ViewQuery[Item] = (
            ViewQuery().sorted_by(lambda i: i.name.casefold()).take(2)
        )

        assert names(query.evaluate(items)) == ["apple", "banana"]

    def test_negative_limit_raises(self) -> None:
        """Test that a negative limit is rejected."""
        with pytest.raises(ValueError):
            ViewQuery(limit=-1)

    def test_zero_limit(self, items: list[Item]) -> None:
        """Test that a zero limit yields nothing."""
        assert ViewQuery[Item]().take(0).evaluate(items) == []


class TestEvaluation:
    """Evaluation purity and grouping tests."""

    def test_evaluation_is_idempotent(self, items: list[Item]) -> None:
        """Test that evaluating twice yields identical output."""
        query: ViewQuery[Item] = (
            ViewQuery()
            .where(status_in(lambda i: i.status, ["open", "done"]))
            .sorted_by(lambda i: i.price, descending=True)
        )
        snapshot = tuple(items)

        first = query.evaluate(snapshot)
        second = query.evaluate(snapshot)

        assert first == second
        assert list(snapshot) == items

    def test_evaluation_does_not_mutate_input(self, items: list[Item]) -> None:
        """Test that the input list keeps its order."""
        original = list(items)

        ViewQuery[Item]().sorted_by(lambda i: i.name).evaluate(items)

        assert items == original

    def test_builders_return_copies(self) -> None:
        """Test that builder methods do not modify the query."""
        base: ViewQuery[Item] = ViewQuery()

        base.where(equals(lambda i: i.name, "x")).take(3)

        assert base.filters == ()
        assert base.limit is None

    def test_group_by(self, items: list[Item]) -> None:
        """Test grouping order and the ungrouped bucket."""
        groups = ViewQuery[Item]().grouped_by(lambda i: i.group).evaluate_groups(items)

        assert list(groups) == ["fruit", "veg", UNGROUPED]
        assert names(groups["fruit"]) == ["banana", "apple"]
        assert names(groups[UNGROUPED]) == ["Dill"]

    def test_group_without_key(self, items: list[Item]) -> None:
        """Test that without group_by everything is ungrouped."""
        groups = ViewQuery[Item]().evaluate_groups(items)

        assert list(groups) == [UNGROUPED]
        assert len(groups[UNGROUPED]) == 4

    def test_group_by_on_empty_input(self) -> None:
        """Test that no records give no groups."""
        assert ViewQuery[Item]().grouped_by(lambda i: i.group).evaluate_groups([]) == {}
