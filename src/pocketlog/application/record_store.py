"""Record store: the single source of truth for one record collection."""

import logging
from collections.abc import Callable, Iterator
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Generic, TypeVar
from uuid import UUID, uuid4

from pocketlog.application.notifier import Notifier, Unsubscribe
from pocketlog.domain.entities.record import Record
from pocketlog.domain.entities.save_job import SaveJob
from pocketlog.domain.exceptions import (
    DuplicateIdentifierError,
    PersistenceFailure,
    RecordNotFoundError,
)
from pocketlog.domain.repositories.record_storage import RecordStorage
from pocketlog.domain.services.protocols import PersistenceScheduler

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=Record)


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


class ChangeKind(Enum):
    """Kind of change announced to subscribers."""

    LOADED = "loaded"
    ADDED = "added"
    UPDATED = "updated"
    DELETED = "deleted"


@dataclass(frozen=True)
class StoreChange:
    """Change notification payload.

    Attributes:
        collection: Collection name of the store.
        kind: What happened.
        record_ids: Ids of the affected records (empty for LOADED).
    """

    collection: str
    kind: ChangeKind
    record_ids: tuple[UUID, ...] = ()


@dataclass(frozen=True)
class LoadReport:
    """Outcome of RecordStore.load().

    Attributes:
        loaded: Number of records now in the store.
        discarded: Number of stored documents that could not be used.
        failed: True when the storage could not be read at all.
    """

    loaded: int
    discarded: int = 0
    failed: bool = False


class RecordStore(Generic[T]):
    """Owns the canonical, insertion-ordered collection of records.

    All mutations are synchronous and happen in memory first. Every
    successful mutation notifies subscribers and hands a snapshot of the
    whole collection to the persistence scheduler. A failed write never
    rolls back the in-memory state; it is published on the error channel.
    """

    def __init__(
        self,
        storage: RecordStorage[T],
        scheduler: PersistenceScheduler,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """Initialize the store.

        Args:
            storage: Storage collaborator for this collection.
            scheduler: Background scheduler running the writes.
            clock: Source of timestamps.
        """
        self._storage = storage
        self._scheduler = scheduler
        self._clock = clock
        self._records: list[T] = []
        self._changes: Notifier[StoreChange] = Notifier(
            f"{storage.collection} changes"
        )
        self._errors: Notifier[PersistenceFailure] = Notifier(
            f"{storage.collection} errors"
        )
        self._last_error: PersistenceFailure | None = None

    @property
    def collection(self) -> str:
        """Collection name."""
        return self._storage.collection

    @property
    def last_error(self) -> PersistenceFailure | None:
        """Most recent persistence failure, if any."""
        return self._last_error

    async def load(self) -> LoadReport:
        """Replace the in-memory collection with the stored one.

        Never raises for storage problems: on failure the store starts
        empty and the failure is published on the error channel.

        Returns:
            LoadReport describing what was loaded.
        """
        try:
            result = await self._storage.load()
        except Exception as e:
            logger.warning("Failed to load '%s': %s", self.collection, e)
            self._records = []
            self._report_failure(PersistenceFailure(self.collection, "load", e))
            self._notify(ChangeKind.LOADED)
            return LoadReport(loaded=0, failed=True)

        records: list[T] = []
        seen: set[UUID] = set()
        discarded = result.discarded
        for record in result.records:
            if record.id is None or record.id in seen:
                discarded += 1
                continue
            seen.add(record.id)
            records.append(record)

        if discarded:
            logger.warning(
                "Discarded %d unreadable record(s) from '%s'",
                discarded,
                self.collection,
            )
        self._records = records
        logger.info("Loaded %d record(s) from '%s'", len(records), self.collection)
        self._notify(ChangeKind.LOADED)
        return LoadReport(loaded=len(records), discarded=discarded)

    def add(self, record: T) -> T:
        """Append a record, assigning id and timestamps when missing.

        Args:
            record: Record to add.

        Returns:
            The stored record.

        Raises:
            DuplicateIdentifierError: A record with the same id exists.
        """
        if record.id is not None and self._index_of(record.id) is not None:
            raise DuplicateIdentifierError(record.id, self.collection)

        now = self._clock()
        stored = replace(
            record,
            id=record.id or uuid4(),
            created_at=record.created_at or now,
            updated_at=record.updated_at or now,
        )
        self._records.append(stored)
        logger.debug("Added %s to '%s'", stored.id, self.collection)
        self._after_mutation(ChangeKind.ADDED, (stored.id,))
        return stored

    def update(self, record: T) -> T:
        """Replace the record with the same id, keeping its position.

        The creation timestamp of the existing record is kept and the
        last-modified timestamp is set to now.

        Args:
            record: New value of the record.

        Returns:
            The stored record.

        Raises:
            RecordNotFoundError: No record has this id; nothing is changed.
        """
        index = self._index_of(record.id) if record.id is not None else None
        if index is None:
            raise RecordNotFoundError(record.id, self.collection)

        stored = self._touch(self._records[index], record)
        self._records[index] = stored
        logger.debug("Updated %s in '%s'", stored.id, self.collection)
        self._after_mutation(ChangeKind.UPDATED, (stored.id,))
        return stored

    def update_where(
        self,
        predicate: Callable[[T], bool],
        transform: Callable[[T], T],
    ) -> int:
        """Replace every matching record with ``transform(record)``.

        All replacements are applied before a single notification and a
        single persistence job.

        Args:
            predicate: Selects the records to replace.
            transform: Returns the new value; must keep the record id.

        Returns:
            Number of records replaced.

        Raises:
            ValueError: ``transform`` changed a record id.
        """
        changed: list[tuple[int, T]] = []
        for index, existing in enumerate(self._records):
            if not predicate(existing):
                continue
            new_value = transform(existing)
            if new_value.id != existing.id:
                raise ValueError("transform must not change the record id")
            changed.append((index, self._touch(existing, new_value)))

        for index, stored in changed:
            self._records[index] = stored

        if changed:
            logger.debug("Updated %d record(s) in '%s'", len(changed), self.collection)
            self._after_mutation(
                ChangeKind.UPDATED,
                tuple(stored.id for _, stored in changed if stored.id is not None),
            )
        return len(changed)

    def delete(self, record_id: UUID) -> bool:
        """Remove the record with ``record_id``.

        Deleting an absent id is a no-op, so repeated calls are safe.

        Args:
            record_id: Id of the record to remove.

        Returns:
            True if a record was removed, False otherwise.
        """
        index = self._index_of(record_id)
        if index is None:
            logger.debug("Delete of unknown %s in '%s'", record_id, self.collection)
            return False

        del self._records[index]
        logger.debug("Deleted %s from '%s'", record_id, self.collection)
        self._after_mutation(ChangeKind.DELETED, (record_id,))
        return True

    def get(self, record_id: UUID) -> T | None:
        """Return the record with ``record_id`` or None."""
        index = self._index_of(record_id)
        return self._records[index] if index is not None else None

    def all(self) -> tuple[T, ...]:
        """Immutable snapshot of the collection in insertion order."""
        return tuple(self._records)

    def subscribe(self, callback: Callable[[StoreChange], None]) -> Unsubscribe:
        """Register a change subscriber.

        Returns:
            Function removing the subscription.
        """
        return self._changes.subscribe(callback)

    def subscribe_errors(
        self, callback: Callable[[PersistenceFailure], None]
    ) -> Unsubscribe:
        """Register a persistence error subscriber.

        Returns:
            Function removing the subscription.
        """
        return self._errors.subscribe(callback)

    def persist(self) -> None:
        """Schedule a write of the current collection.

        Mutations do this automatically; call it to retry after a failure.
        """
        snapshot = list(self._records)
        storage = self._storage

        async def write() -> None:
            await storage.save(snapshot)

        self._scheduler.schedule(
            SaveJob(
                collection=self.collection,
                action=write,
                on_complete=self._on_saved,
            )
        )

    async def flush(self) -> None:
        """Wait until scheduled writes have completed."""
        await self._scheduler.drain()

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[T]:
        return iter(self.all())

    def __contains__(self, record_id: object) -> bool:
        return isinstance(record_id, UUID) and self._index_of(record_id) is not None

    def _touch(self, existing: T, new_value: T) -> T:
        return replace(
            new_value,
            created_at=existing.created_at,
            updated_at=self._clock(),
        )

    def _index_of(self, record_id: UUID) -> int | None:
        for index, record in enumerate(self._records):
            if record.id == record_id:
                return index
        return None

    def _after_mutation(self, kind: ChangeKind, record_ids: tuple[UUID, ...]) -> None:
        self._notify(kind, record_ids)
        self.persist()

    def _notify(self, kind: ChangeKind, record_ids: tuple[UUID, ...] = ()) -> None:
        self._changes.notify(StoreChange(self.collection, kind, record_ids))

    def _on_saved(self, error: BaseException | None) -> None:
        if error is None:
            return
        self._report_failure(PersistenceFailure(self.collection, "save", error))

    def _report_failure(self, failure: PersistenceFailure) -> None:
        self._last_error = failure
        self._errors.notify(failure)
