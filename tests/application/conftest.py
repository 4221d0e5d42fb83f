"""Shared fixtures for application tests."""

from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest

from pocketlog.application.record_store import RecordStore
from pocketlog.domain.repositories import RecordCodec
from pocketlog.infrastructure.events import PersistenceWorker
from pocketlog.infrastructure.persistence import InMemoryRecordStorage


class FakeClock:
    """Manually advanced clock."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: Any) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    """Create a clock fixed at 2024-06-15 12:00 UTC."""
    return FakeClock(datetime(2024, 6, 15, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def worker() -> PersistenceWorker:
    """Create a worker that is not running (flush processes inline)."""
    return PersistenceWorker()


@pytest.fixture
def make_store(
    worker: PersistenceWorker, clock: FakeClock
) -> Callable[[str, RecordCodec], RecordStore]:
    """Create stores backed by in-memory storage."""

    def factory(collection: str, codec: RecordCodec) -> RecordStore:
        storage = InMemoryRecordStorage(collection, codec)
        return RecordStore(storage, worker, clock=clock)

    return factory
