"""Domain exceptions."""

from uuid import UUID


class RecordStoreError(Exception):
    """レコードストア関連の基底例外"""


class RecordNotFoundError(RecordStoreError):
    """指定 id のレコードが存在しない場合に発生する例外

    update の対象が見つからない場合に発生する。コレクションは変更されない。
    """

    def __init__(self, record_id: UUID | None, collection: str = "") -> None:
        """初期化

        Args:
            record_id: 見つからなかったレコードの id
            collection: コレクション名（オプション）
        """
        self.record_id = record_id
        self.collection = collection
        where = f" in '{collection}'" if collection else ""
        super().__init__(f"Record {record_id} not found{where}")


class DuplicateIdentifierError(RecordStoreError):
    """既に存在する id のレコードを追加しようとした場合に発生する例外"""

    def __init__(self, record_id: UUID, collection: str = "") -> None:
        """初期化

        Args:
            record_id: 重複した id
            collection: コレクション名（オプション）
        """
        self.record_id = record_id
        self.collection = collection
        where = f" in '{collection}'" if collection else ""
        super().__init__(f"Record {record_id} already exists{where}")


class PersistenceFailure(RecordStoreError):
    """ストレージへの保存・読み込みに失敗した場合の例外

    メモリ上の状態は巻き戻されない。エラーチャネル経由で通知される。
    """

    def __init__(self, collection: str, operation: str, cause: BaseException) -> None:
        """初期化

        Args:
            collection: コレクション名
            operation: 失敗した操作（"save" / "load"）
            cause: 元の例外
        """
        self.collection = collection
        self.operation = operation
        self.cause = cause
        super().__init__(f"Failed to {operation} '{collection}': {cause}")


class ValidationError(RecordStoreError, ValueError):
    """呼び出し側のバリデーションエラー

    ストア自体は検証を行わない。レコードを組み立てる側が validation ヘルパー
    経由で発生させる。
    """

    def __init__(self, field: str, message: str) -> None:
        """初期化

        Args:
            field: エラーのあったフィールド名
            message: エラーメッセージ
        """
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


class TagInUseError(RecordStoreError):
    """使用中のタグを削除しようとした場合に発生する例外"""

    def __init__(self, tag: str, usage_count: int) -> None:
        """初期化

        Args:
            tag: タグ名
            usage_count: タグを使用しているレコード数
        """
        self.tag = tag
        self.usage_count = usage_count
        super().__init__(f"Tag '{tag}' is used by {usage_count} record(s)")
