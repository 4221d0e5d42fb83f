"""Domain services."""

from pocketlog.domain.services.view_query import (
    UNGROUPED,
    DateRange,
    SortRule,
    TimeRange,
    ViewQuery,
)

__all__ = [
    "UNGROUPED",
    "DateRange",
    "SortRule",
    "TimeRange",
    "ViewQuery",
]
