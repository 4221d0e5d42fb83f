"""In-memory implementation of RecordStorage."""

import copy
from typing import Any, Generic, TypeVar

from pocketlog.domain.repositories.record_storage import LoadResult, RecordCodec
from pocketlog.infrastructure.persistence.exceptions import DatabaseError

T = TypeVar("T")


class InMemoryRecordStorage(Generic[T]):
    """メモリ上にドキュメントを保持する RecordStorage 実装

    コーデックを通して保存するため、SQLite 版と同じ変換経路を通る。
    fail_saves / fail_loads を True にすると失敗を再現できる。
    """

    def __init__(
        self,
        collection: str,
        codec: RecordCodec[T],
        documents: list[dict[str, Any]] | None = None,
    ) -> None:
        """初期化

        Args:
            collection: コレクション名
            codec: レコードとドキュメントの変換器
            documents: 初期ドキュメント
        """
        self._collection = collection
        self._codec = codec
        self.documents: list[dict[str, Any]] = list(documents or [])
        self.save_count = 0
        self.fail_saves = False
        self.fail_loads = False

    @property
    def collection(self) -> str:
        return self._collection

    async def save(self, records: list[T]) -> None:
        if self.fail_saves:
            raise DatabaseError(f"Simulated save failure for '{self._collection}'")
        self.documents = [self._codec.encode(record) for record in records]
        self.save_count += 1

    async def load(self) -> LoadResult[T]:
        if self.fail_loads:
            raise DatabaseError(f"Simulated load failure for '{self._collection}'")
        records: list[T] = []
        discarded = 0
        for document in self.documents:
            try:
                records.append(self._codec.decode(copy.deepcopy(document)))
            except (ValueError, KeyError, TypeError):
                discarded += 1
        return LoadResult(records=records, discarded=discarded)
