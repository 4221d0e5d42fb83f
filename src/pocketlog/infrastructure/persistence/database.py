"""Database management."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from pocketlog.config import StorageConfig

# Registers record_documents with SQLModel metadata
from pocketlog.infrastructure.persistence import models as _models  # noqa: F401

logger = logging.getLogger(__name__)

MEMORY_DATABASE = ":memory:"


class DatabaseManager:
    """ジャーナル保存先データベースの管理

    全コレクションのスナップショットを保持する SQLite データベースについて、
    エンジンの遅延生成、テーブル作成、セッション提供、破棄を行う。

    ":memory:" の場合は単一の接続を共有する（StaticPool）。
    セッションをまたいでもデータが残り、close() で破棄される。
    """

    def __init__(self, database_path: str, *, echo: bool = False) -> None:
        """初期化

        Args:
            database_path: SQLite データベースファイルのパス、または ":memory:"
            echo: 発行した SQL をログに出すかどうか
        """
        self._database_path = database_path
        self._echo = echo
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None

    @classmethod
    def from_config(cls, config: StorageConfig) -> "DatabaseManager":
        """ストレージ設定から生成する

        Args:
            config: ストレージ設定

        Returns:
            DatabaseManager インスタンス
        """
        return cls(config.database_path)

    @property
    def is_memory(self) -> bool:
        """インメモリデータベースかどうか"""
        return self._database_path == MEMORY_DATABASE

    @property
    def url(self) -> str:
        """aiosqlite 用の接続 URL"""
        return f"sqlite+aiosqlite:///{self._database_path}"

    def get_engine(self) -> AsyncEngine:
        """SQLAlchemy 非同期エンジンを取得する

        初回呼び出し時に生成してキャッシュする。
        ファイルの場合は親ディレクトリがなければ作成する。

        Returns:
            AsyncEngine インスタンス
        """
        if self._engine is not None:
            return self._engine

        options: dict[str, Any] = {"echo": self._echo}
        if self.is_memory:
            options["poolclass"] = StaticPool
            options["connect_args"] = {"check_same_thread": False}
        else:
            Path(self._database_path).parent.mkdir(parents=True, exist_ok=True)

        self._engine = create_async_engine(self.url, **options)
        self._session_factory = async_sessionmaker(
            self._engine, class_=AsyncSession, expire_on_commit=False
        )
        logger.debug("Opened journal database %s", self._database_path)
        return self._engine

    async def create_tables(self) -> None:
        """record_documents テーブルを作成する

        既存のテーブルがある場合は何もしない。
        """
        engine = self.get_engine()
        async with engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)

    @asynccontextmanager
    async def get_session(self) -> AsyncGenerator[AsyncSession, None]:
        """セッションを取得する（async context manager）

        SQLiteRecordStorage の session_factory としてそのまま渡せる。

        Yields:
            AsyncSession インスタンス
        """
        self.get_engine()
        assert self._session_factory is not None
        async with self._session_factory() as session:
            yield session

    async def close(self) -> None:
        """エンジンを破棄して接続を閉じる

        インメモリデータベースの内容はここで失われる。
        """
        if self._engine is None:
            return
        await self._engine.dispose()
        self._engine = None
        self._session_factory = None
        logger.debug("Closed journal database %s", self._database_path)
