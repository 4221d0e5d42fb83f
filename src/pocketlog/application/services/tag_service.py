"""Dream tag registry management."""

import logging
from uuid import UUID

from pocketlog.application.record_store import RecordStore
from pocketlog.domain.entities.dream import Dream, DreamTag, normalize_tags
from pocketlog.domain.entities.record import with_updated_fields
from pocketlog.domain.exceptions import (
    RecordNotFoundError,
    TagInUseError,
    ValidationError,
)
from pocketlog.domain.services.validation import require_text

logger = logging.getLogger(__name__)


class DreamTagService:
    """Keeps the tag registry and the tags stored on dreams consistent."""

    def __init__(self, tags: RecordStore[DreamTag], dreams: RecordStore[Dream]) -> None:
        self._tags = tags
        self._dreams = dreams

    def add(self, name: str) -> DreamTag:
        """Register a tag.

        Raises:
            ValidationError: The name is blank or already registered
                (case-insensitive).
        """
        name = require_text(name, "name")
        if self.find(name) is not None:
            raise ValidationError("name", f"tag '{name}' already exists")
        return self._tags.add(DreamTag(name=name))

    def find(self, name: str) -> DreamTag | None:
        folded = name.strip().casefold()
        for tag in self._tags.all():
            if tag.name.casefold() == folded:
                return tag
        return None

    def rename(self, tag_id: UUID, name: str) -> DreamTag:
        """Rename a tag and rewrite it on every dream that carries it.

        Raises:
            RecordNotFoundError: No such tag.
            ValidationError: The new name is blank or taken by another tag.
        """
        tag = self._tags.get(tag_id)
        if tag is None:
            raise RecordNotFoundError(tag_id, self._tags.collection)
        name = require_text(name, "name")
        existing = self.find(name)
        if existing is not None and existing.id != tag_id:
            raise ValidationError("name", f"tag '{name}' already exists")

        old = tag.name
        renamed = self._tags.update(with_updated_fields(tag, name=name))
        moved = self._dreams.update_where(
            lambda d: d.has_tag(old),
            lambda d: with_updated_fields(
                d,
                tags=normalize_tags(
                    [name if t.casefold() == old.casefold() else t for t in d.tags]
                ),
            ),
        )
        logger.debug("Renamed tag '%s' to '%s' on %d dream(s)", old, name, moved)
        return renamed

    def usage_count(self, name: str) -> int:
        return sum(1 for dream in self._dreams.all() if dream.has_tag(name))

    def delete(self, tag_id: UUID) -> bool:
        """Delete an unused tag.

        Returns:
            True if the tag was deleted, False if it did not exist.

        Raises:
            TagInUseError: At least one dream still carries the tag.
        """
        tag = self._tags.get(tag_id)
        if tag is None:
            return False
        used = self.usage_count(tag.name)
        if used:
            raise TagInUseError(tag.name, used)
        return self._tags.delete(tag_id)
