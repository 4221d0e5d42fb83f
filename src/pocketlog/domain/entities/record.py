"""Base record entity shared by every journal app."""

from dataclasses import dataclass, fields, replace
from datetime import datetime
from typing import Any, TypeVar
from uuid import UUID

from pocketlog.domain.services.datetimes import normalize_to_utc

# id / created_at は生成後に変更できないフィールド
IMMUTABLE_FIELDS = frozenset({"id", "created_at"})

R = TypeVar("R", bound="Record")


@dataclass(frozen=True, kw_only=True)
class Record:
    """全レコード共通の基底エンティティ

    id とタイムスタンプは RecordStore への追加時に未設定であれば割り当てられる。
    日時フィールドは UTC の aware datetime に揃える（naive は UTC とみなす）。

    Attributes:
        id: レコードの一意識別子（UUID）
        created_at: 作成日時（一度だけ設定される）
        updated_at: 最終更新日時（更新ごとに更新される）
    """

    id: UUID | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        for item in fields(self):
            value = getattr(self, item.name)
            if isinstance(value, datetime):
                object.__setattr__(self, item.name, normalize_to_utc(value))

    @property
    def is_persisted(self) -> bool:
        """ストアに追加済み（id 割り当て済み）かどうか"""
        return self.id is not None


def with_updated_fields(record: R, **changes: Any) -> R:
    """指定フィールドを置き換えたレコードのコピーを返す

    元のレコードは変更されない。

    Args:
        record: 元のレコード
        **changes: 置き換えるフィールドと値

    Returns:
        フィールドを置き換えた新しいレコード

    Raises:
        ValueError: id または created_at を変更しようとした場合
    """
    for name in sorted(IMMUTABLE_FIELDS.intersection(changes)):
        current = getattr(record, name)
        if current is not None and changes[name] != current:
            raise ValueError(f"Field '{name}' cannot be changed after creation")
    return replace(record, **changes)
