"""Tests for SQLiteRecordStorage."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from uuid import uuid4

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from pocketlog.application.record_store import RecordStore
from pocketlog.domain.entities.gift import GiftIdea, GiftOccasion, GiftStatus
from pocketlog.domain.entities.mood import MoodEntry, MoodType, WeatherType
from pocketlog.infrastructure.events import PersistenceWorker
from pocketlog.infrastructure.persistence import (
    DatabaseError,
    GiftIdeaCodec,
    MoodEntryCodec,
    SQLiteRecordStorage,
)
from pocketlog.infrastructure.persistence.models import RecordDocumentModel

NOW = datetime(2024, 6, 1, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create in-memory SQLite async engine."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine):
    """Create async session factory."""
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    @asynccontextmanager
    async def get_session() -> AsyncGenerator[AsyncSession, None]:
        async with factory() as session:
            yield session

    return get_session


@pytest.fixture
def gift_storage(session_factory) -> SQLiteRecordStorage[GiftIdea]:
    """Create gift storage."""
    return SQLiteRecordStorage(session_factory, "gifts", GiftIdeaCodec())


def create_test_gift(name: str = "Alice", price: float | None = 12.5) -> GiftIdea:
    """Create a persisted-looking GiftIdea."""
    return GiftIdea(
        id=uuid4(),
        created_at=NOW,
        updated_at=NOW,
        recipient_name=name,
        description="Scarf",
        occasion=GiftOccasion.BIRTHDAY,
        status=GiftStatus.BOUGHT,
        estimated_price=price,
        comment="日本語のコメント",
    )


class TestSaveAndLoad:
    """save / load tests."""

    async def test_round_trip(
        self, gift_storage: SQLiteRecordStorage[GiftIdea]
    ) -> None:
        """Test that load returns the saved collection unchanged."""
        gifts = [create_test_gift("Cara"), create_test_gift("Alice", None)]

        await gift_storage.save(gifts)
        result = await gift_storage.load()

        assert result.records == gifts
        assert result.discarded == 0

    async def test_save_replaces_collection(
        self, gift_storage: SQLiteRecordStorage[GiftIdea]
    ) -> None:
        """Test that a save overwrites the previous snapshot."""
        first = create_test_gift("Alice")
        second = create_test_gift("Bob")
        await gift_storage.save([first, second])

        await gift_storage.save([second])
        result = await gift_storage.load()

        assert result.records == [second]

    async def test_save_empty_collection(
        self, gift_storage: SQLiteRecordStorage[GiftIdea]
    ) -> None:
        """Test saving an empty collection."""
        await gift_storage.save([create_test_gift()])

        await gift_storage.save([])

        assert (await gift_storage.load()).records == []

    async def test_collections_are_independent(
        self, session_factory, gift_storage: SQLiteRecordStorage[GiftIdea]
    ) -> None:
        """Test that saving one collection leaves others alone."""
        mood_storage = SQLiteRecordStorage(session_factory, "moods", MoodEntryCodec())
        entry = MoodEntry(
            id=uuid4(),
            created_at=NOW,
            updated_at=NOW,
            date=NOW,
            weather=WeatherType.FOGGY,
            temperature=-3.5,
            mood=MoodType.CALM,
        )
        gift = create_test_gift()

        await mood_storage.save([entry])
        await gift_storage.save([gift])
        await gift_storage.save([])

        assert (await mood_storage.load()).records == [entry]

    async def test_load_empty(
        self, gift_storage: SQLiteRecordStorage[GiftIdea]
    ) -> None:
        """Test loading a collection that was never saved."""
        result = await gift_storage.load()

        assert result.records == []
        assert result.discarded == 0


class TestCorruptData:
    """Partial decode tests."""

    async def test_undecodable_rows_are_discarded(
        self, session_factory, gift_storage: SQLiteRecordStorage[GiftIdea]
    ) -> None:
        """Test that broken documents are counted and skipped."""
        gift = create_test_gift()
        await gift_storage.save([gift])
        async with session_factory() as session:
            session.add_all(
                [
                    RecordDocumentModel(
                        collection="gifts",
                        record_id="broken-json",
                        position=1,
                        payload="{not json",
                    ),
                    RecordDocumentModel(
                        collection="gifts",
                        record_id="bad-status",
                        position=2,
                        payload=(
                            '{"id": "%s", "recipient_name": "Bob", '
                            '"description": "Pen", "status": "lost"}' % uuid4()
                        ),
                    ),
                    RecordDocumentModel(
                        collection="gifts",
                        record_id="not-an-object",
                        position=3,
                        payload="[1, 2]",
                    ),
                ]
            )
            await session.commit()

        result = await gift_storage.load()

        assert result.records == [gift]
        assert result.discarded == 3


class TestFailures:
    """Database failure tests."""

    async def test_save_without_table_raises(self, session_factory, engine) -> None:
        """Test that database errors surface as DatabaseError."""
        async with engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.drop_all)
        storage = SQLiteRecordStorage(session_factory, "gifts", GiftIdeaCodec())

        with pytest.raises(DatabaseError):
            await storage.save([create_test_gift()])
        with pytest.raises(DatabaseError):
            await storage.load()

    async def test_store_reports_failure_on_error_channel(
        self, session_factory, engine
    ) -> None:
        """Test that the store turns storage errors into failure events."""
        async with engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.drop_all)
        storage = SQLiteRecordStorage(session_factory, "gifts", GiftIdeaCodec())
        store: RecordStore[GiftIdea] = RecordStore(storage, PersistenceWorker())
        failures = []
        store.subscribe_errors(failures.append)

        report = await store.load()
        store.add(create_test_gift())
        await store.flush()

        assert report.failed is True
        assert [f.operation for f in failures] == ["load", "save"]
        assert len(store) == 1
