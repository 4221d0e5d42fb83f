"""Domain entities."""

from pocketlog.domain.entities.category import (
    BuiltinCategory,
    Category,
    CategoryDisplay,
    CustomCategory,
    CustomCategoryRef,
    resolve_category,
)
from pocketlog.domain.entities.dream import Dream, DreamStatus, DreamTag
from pocketlog.domain.entities.gift import GiftIdea, GiftOccasion, GiftStatus
from pocketlog.domain.entities.mood import MoodEntry, MoodType, WeatherType
from pocketlog.domain.entities.record import Record, with_updated_fields
from pocketlog.domain.entities.series import Series, SeriesGenre, SeriesStatus

__all__ = [
    "BuiltinCategory",
    "Category",
    "CategoryDisplay",
    "CustomCategory",
    "CustomCategoryRef",
    "Dream",
    "DreamStatus",
    "DreamTag",
    "GiftIdea",
    "GiftOccasion",
    "GiftStatus",
    "MoodEntry",
    "MoodType",
    "Record",
    "Series",
    "SeriesGenre",
    "SeriesStatus",
    "WeatherType",
    "resolve_category",
    "with_updated_fields",
]
