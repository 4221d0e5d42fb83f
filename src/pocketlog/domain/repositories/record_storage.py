"""RecordStorage Protocol."""

from dataclasses import dataclass, field
from typing import Any, Generic, Protocol, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class LoadResult(Generic[T]):
    """ストレージからの読み込み結果

    Attributes:
        records: デコードできたレコード（保存順）
        discarded: デコードできず破棄したドキュメント数
    """

    records: list[T] = field(default_factory=list)
    discarded: int = 0


class RecordStorage(Protocol[T]):
    """コレクション全体を保存・読み込みするストレージ

    エンコード形式はストレージ実装に隠蔽される。
    """

    @property
    def collection(self) -> str:
        """コレクション名"""
        ...

    async def save(self, records: list[T]) -> None:
        """コレクション全体を保存する（既存の内容を置き換える）

        Args:
            records: 保存するレコード（この順序で保存される）

        Raises:
            Exception: 保存に失敗した場合
        """
        ...

    async def load(self) -> LoadResult[T]:
        """コレクション全体を読み込む

        デコードできないドキュメントは破棄し、件数を LoadResult.discarded に記録する。

        Returns:
            LoadResult

        Raises:
            Exception: 読み込み自体に失敗した場合
        """
        ...


class RecordCodec(Protocol[T]):
    """レコードとドキュメント（dict）の相互変換"""

    def encode(self, record: T) -> dict[str, Any]:
        """レコードを JSON 互換の dict に変換する"""
        ...

    def decode(self, document: dict[str, Any]) -> T:
        """dict をレコードに変換する

        Raises:
            KeyError, ValueError, TypeError: ドキュメントが不正な場合
        """
        ...
