"""Tests for DatabaseManager."""

from pathlib import Path
from uuid import uuid4

from sqlalchemy import inspect
from sqlalchemy.pool import StaticPool

from pocketlog.config import StorageConfig
from pocketlog.domain.entities.dream import DreamTag
from pocketlog.infrastructure.persistence import (
    DatabaseManager,
    DreamTagCodec,
    SQLiteRecordStorage,
)


class TestDatabaseManager:
    """DatabaseManager tests."""

    def test_get_engine_creates_parent_directory(self, tmp_path: Path) -> None:
        """Test that parent directory is created if not exists."""
        db_path = tmp_path / "subdir" / "nested" / "test.db"
        manager = DatabaseManager(str(db_path))

        engine = manager.get_engine()

        assert "sqlite" in str(engine.url)
        assert db_path.parent.exists()
        assert manager.get_engine() is engine

    async def test_create_tables_is_repeatable(self, tmp_path: Path) -> None:
        """Test table creation on first and second run."""
        manager = DatabaseManager(str(tmp_path / "test.db"))

        await manager.create_tables()
        await manager.create_tables()

        engine = manager.get_engine()
        async with engine.connect() as conn:
            tables = await conn.run_sync(
                lambda sync_conn: inspect(sync_conn).get_table_names()
            )

        assert "record_documents" in tables
        await manager.close()

    async def test_record_documents_table(self) -> None:
        """Test columns and the per-collection unique constraint."""
        manager = DatabaseManager(":memory:")
        await manager.create_tables()

        engine = manager.get_engine()
        async with engine.connect() as conn:
            columns = await conn.run_sync(
                lambda sync_conn: {
                    col["name"]
                    for col in inspect(sync_conn).get_columns("record_documents")
                }
            )
            unique_constraints = await conn.run_sync(
                lambda sync_conn: inspect(sync_conn).get_unique_constraints(
                    "record_documents"
                )
            )

        assert columns == {
            "id",
            "collection",
            "record_id",
            "position",
            "payload",
            "saved_at",
        }
        assert "uq_collection_record" in [c["name"] for c in unique_constraints]
        await manager.close()

    async def test_get_session(self, tmp_path: Path) -> None:
        """Test session creation."""
        manager = DatabaseManager(str(tmp_path / "test.db"))
        await manager.create_tables()

        async with manager.get_session() as session:
            assert session is not None
        await manager.close()

    async def test_close_disposes_engine(self, tmp_path: Path) -> None:
        """Test that close disposes engine and clears references."""
        manager = DatabaseManager(str(tmp_path / "test.db"))
        await manager.create_tables()

        await manager.close()
        await manager.close()

        assert manager._engine is None
        assert manager._session_factory is None

    def test_from_config(self, tmp_path: Path) -> None:
        """Test construction from the storage section."""
        db_path = tmp_path / "journal.db"
        manager = DatabaseManager.from_config(StorageConfig(database_path=str(db_path)))

        assert manager.is_memory is False
        assert manager.url == f"sqlite+aiosqlite:///{db_path}"

    def test_memory_database_shares_one_connection(self) -> None:
        """Test that an in-memory database uses a static pool."""
        manager = DatabaseManager.from_config(StorageConfig(database_path=":memory:"))

        engine = manager.get_engine()

        assert manager.is_memory is True
        assert isinstance(engine.pool, StaticPool)

    async def test_memory_database_keeps_data_across_sessions(self) -> None:
        """Test that data saved in one session is read back in another."""
        manager = DatabaseManager(":memory:")
        await manager.create_tables()
        tag = DreamTag(id=uuid4(), name="Flying")

        writer = SQLiteRecordStorage(manager.get_session, "dream_tags", DreamTagCodec())
        reader = SQLiteRecordStorage(manager.get_session, "dream_tags", DreamTagCodec())

        await writer.save([tag])
        result = await reader.load()

        assert result.records == [tag]
        await manager.close()
