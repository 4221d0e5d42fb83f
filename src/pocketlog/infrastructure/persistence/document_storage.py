"""SQLite implementation of RecordStorage."""

import json
import logging
from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from typing import Generic, TypeVar

from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from pocketlog.domain.repositories.record_storage import LoadResult, RecordCodec
from pocketlog.infrastructure.persistence.exceptions import DatabaseError, DecodeError
from pocketlog.infrastructure.persistence.models import RecordDocumentModel

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SQLiteRecordStorage(Generic[T]):
    """SQLite 版 RecordStorage 実装

    コレクションのレコードを 1 件 1 行の JSON ドキュメントとして保存する。
    保存はコレクション単位の置き換えで、1 トランザクション内で行う。
    """

    def __init__(
        self,
        session_factory: Callable[[], AbstractAsyncContextManager[AsyncSession]],
        collection: str,
        codec: RecordCodec[T],
    ) -> None:
        """初期化

        Args:
            session_factory: 非同期セッション生成関数
            collection: コレクション名
            codec: レコードとドキュメントの変換器
        """
        self._session_factory = session_factory
        self._collection = collection
        self._codec = codec

    @property
    def collection(self) -> str:
        return self._collection

    async def save(self, records: list[T]) -> None:
        """コレクション全体を保存する

        既存の行を削除してから、渡された順序で挿入する。

        Args:
            records: 保存するレコード

        Raises:
            DatabaseError: データベース操作に失敗した場合
        """
        models = []
        for position, record in enumerate(records):
            document = self._codec.encode(record)
            models.append(
                RecordDocumentModel(
                    collection=self._collection,
                    record_id=str(document["id"]),
                    position=position,
                    payload=json.dumps(document, ensure_ascii=False),
                )
            )

        async with self._session_factory() as session:
            try:
                stmt = delete(RecordDocumentModel).where(
                    RecordDocumentModel.collection == self._collection  # type: ignore[arg-type]
                )
                await session.execute(stmt)
                session.add_all(models)
                await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                raise DatabaseError(
                    f"Failed to save collection '{self._collection}': {e}"
                ) from e

        logger.debug("Saved %d records to '%s'", len(models), self._collection)

    async def load(self) -> LoadResult[T]:
        """コレクション全体を読み込む

        デコードできない行は破棄して件数を数える。

        Returns:
            LoadResult

        Raises:
            DatabaseError: データベース操作に失敗した場合
        """
        async with self._session_factory() as session:
            try:
                stmt = (
                    select(RecordDocumentModel)
                    .where(RecordDocumentModel.collection == self._collection)
                    .order_by(RecordDocumentModel.position)  # type: ignore[arg-type]
                )
                result = await session.exec(stmt)
                rows = list(result.all())
            except SQLAlchemyError as e:
                raise DatabaseError(
                    f"Failed to load collection '{self._collection}': {e}"
                ) from e

        records: list[T] = []
        discarded = 0
        for row in rows:
            try:
                records.append(self._to_entity(row))
            except DecodeError as e:
                discarded += 1
                logger.warning(
                    "Discarding undecodable record %s in '%s': %s",
                    row.record_id,
                    self._collection,
                    e,
                )
        return LoadResult(records=records, discarded=discarded)

    def _to_entity(self, model: RecordDocumentModel) -> T:
        """行をレコードに変換する

        Raises:
            DecodeError: ペイロードが不正な場合
        """
        try:
            document = json.loads(model.payload)
            if not isinstance(document, dict):
                raise TypeError("payload is not a JSON object")
            return self._codec.decode(document)
        except (ValueError, KeyError, TypeError) as e:
            raise DecodeError(str(e)) from e
