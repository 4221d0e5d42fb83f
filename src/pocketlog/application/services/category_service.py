"""Custom category management for the watch tracker."""

import logging
from uuid import UUID

from pocketlog.application.record_store import RecordStore
from pocketlog.domain.entities.category import (
    BuiltinCategory,
    CustomCategory,
    references,
)
from pocketlog.domain.entities.record import with_updated_fields
from pocketlog.domain.entities.series import DEFAULT_GENRE, Series
from pocketlog.domain.exceptions import RecordNotFoundError, ValidationError
from pocketlog.domain.services.validation import require_text

logger = logging.getLogger(__name__)


class CustomCategoryService:
    """Adds, renames and deletes custom categories.

    Deleting a category moves every series referencing it to the fallback
    builtin before the category itself is removed, so no series is ever
    left pointing at a missing category.
    """

    def __init__(
        self,
        categories: RecordStore[CustomCategory],
        series: RecordStore[Series],
    ) -> None:
        self._categories = categories
        self._series = series

    def add(
        self,
        name: str,
        icon: str = "folder",
        color: str = "primaryBlue",
    ) -> CustomCategory:
        """Create a custom category.

        Raises:
            ValidationError: The name is blank or already used.
        """
        name = require_text(name, "name")
        self._ensure_unique(name)
        return self._categories.add(CustomCategory(name=name, icon=icon, color=color))

    def rename(self, category_id: UUID, name: str) -> CustomCategory:
        """Rename a custom category.

        Raises:
            RecordNotFoundError: No such category.
            ValidationError: The name is blank or already used.
        """
        category = self._categories.get(category_id)
        if category is None:
            raise RecordNotFoundError(category_id, self._categories.collection)
        name = require_text(name, "name")
        self._ensure_unique(name, exclude=category_id)
        return self._categories.update(with_updated_fields(category, name=name))

    def delete(self, category_id: UUID) -> int:
        """Delete a custom category and reassign its series.

        Args:
            category_id: Id of the category to delete.

        Returns:
            Number of series moved to the fallback category.
        """
        moved = self._series.update_where(
            lambda s: references(s.category, category_id),
            lambda s: with_updated_fields(
                s, category=BuiltinCategory(DEFAULT_GENRE)
            ),
        )
        if self._categories.delete(category_id):
            logger.info(
                "Deleted custom category %s, moved %d series to %s",
                category_id,
                moved,
                DEFAULT_GENRE.value,
            )
        return moved

    def usage_count(self, category_id: UUID) -> int:
        return sum(
            1 for s in self._series.all() if references(s.category, category_id)
        )

    def _ensure_unique(self, name: str, exclude: UUID | None = None) -> None:
        folded = name.casefold()
        for category in self._categories.all():
            if category.id != exclude and category.name.casefold() == folded:
                raise ValidationError("name", f"'{name}' already exists")
