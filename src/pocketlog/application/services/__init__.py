"""Application services."""

from pocketlog.application.services.category_service import CustomCategoryService
from pocketlog.application.services.dream_summary import (
    DateField,
    DreamSort,
    DreamStats,
    DreamSummary,
    TagStats,
)
from pocketlog.application.services.gift_analytics import (
    GiftAnalytics,
    GiftMetrics,
    Person,
)
from pocketlog.application.services.mood_statistics import MoodOverview, MoodStatistics
from pocketlog.application.services.series_progress import (
    Achievement,
    CategorySummary,
    SeriesProgress,
    StatusSummary,
)
from pocketlog.application.services.tag_service import DreamTagService

__all__ = [
    "Achievement",
    "CategorySummary",
    "CustomCategoryService",
    "DateField",
    "DreamSort",
    "DreamStats",
    "DreamSummary",
    "DreamTagService",
    "GiftAnalytics",
    "GiftMetrics",
    "MoodOverview",
    "MoodStatistics",
    "Person",
    "SeriesProgress",
    "StatusSummary",
    "TagStats",
]
