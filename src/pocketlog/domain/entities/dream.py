"""Dream / prediction journal entities."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from pocketlog.domain.entities.record import Record, with_updated_fields
from pocketlog.domain.exceptions import ValidationError
from pocketlog.domain.services.validation import (
    limit_length,
    optional_text,
    require_text,
    validate_date_order,
)

TITLE_LIMIT = 80
EXPECTED_EVENT_LIMIT = 140


class DreamStatus(Enum):
    """予知夢の結果状態"""

    WAITING = "waiting"
    FULFILLED = "fulfilled"
    NOT_FULFILLED = "not_fulfilled"

    @property
    def display_name(self) -> str:
        return self.value.replace("_", " ").capitalize()

    @property
    def is_resolved(self) -> bool:
        return self is not DreamStatus.WAITING


@dataclass(frozen=True)
class Dream(Record):
    """夢エンティティ

    Attributes:
        title: タイトル（80文字以内）
        expected_event: 予想される出来事（140文字以内）
        dream_date: 夢を見た日
        check_deadline: 結果を確認する期限（dream_date 以降）
        description: 夢の内容（未設定可）
        tags: タグ
        status: 結果状態
        outcome_date: 結果が出た日（WAITING 以外では必須）
        outcome_comment: 結果のコメント（未設定可）
    """

    title: str
    expected_event: str
    dream_date: datetime
    check_deadline: datetime
    description: str | None = None
    tags: tuple[str, ...] = ()
    status: DreamStatus = DreamStatus.WAITING
    outcome_date: datetime | None = None
    outcome_comment: str | None = None

    @property
    def reference_date(self) -> datetime:
        """結果日（未設定なら夢を見た日）"""
        return self.outcome_date or self.dream_date

    def is_overdue(self, now: datetime) -> bool:
        """結果待ちのまま確認期限を過ぎているかどうか"""
        return self.status is DreamStatus.WAITING and self.check_deadline < now

    def has_tag(self, tag: str) -> bool:
        """タグを持つかどうか（大文字小文字を区別しない）"""
        folded = tag.casefold()
        return any(t.casefold() == folded for t in self.tags)


@dataclass(frozen=True)
class DreamTag(Record):
    """夢に付けるタグ

    Attributes:
        name: タグ名
    """

    name: str


def normalize_tags(tags: list[str] | tuple[str, ...] | None) -> tuple[str, ...]:
    """タグの空白除去と重複排除（大文字小文字を区別しない、先勝ち）"""
    result: list[str] = []
    seen: set[str] = set()
    for tag in tags or ():
        stripped = tag.strip()
        if stripped and stripped.casefold() not in seen:
            seen.add(stripped.casefold())
            result.append(stripped)
    return tuple(result)


def create_dream(
    title: str,
    expected_event: str,
    dream_date: datetime,
    check_deadline: datetime,
    description: str | None = None,
    tags: list[str] | tuple[str, ...] | None = None,
) -> Dream:
    """Dream エンティティを生成する（状態は WAITING）

    Raises:
        ValidationError: タイトル・予想が空または長すぎる場合、
            期限が夢の日付より前の場合
    """
    return Dream(
        title=limit_length(require_text(title, "title"), "title", TITLE_LIMIT),
        expected_event=limit_length(
            require_text(expected_event, "expected_event"),
            "expected_event",
            EXPECTED_EVENT_LIMIT,
        ),
        dream_date=dream_date,
        check_deadline=validate_date_order(
            dream_date, check_deadline, "check_deadline"
        ),
        description=optional_text(description),
        tags=normalize_tags(tags),
    )


def resolve_outcome(
    dream: Dream,
    status: DreamStatus,
    outcome_date: datetime | None,
    comment: str | None = None,
) -> Dream:
    """夢の結果を確定したコピーを返す

    WAITING に戻す場合は結果日とコメントをクリアする。

    Raises:
        ValidationError: WAITING 以外で結果日が未設定の場合
    """
    if status is DreamStatus.WAITING:
        return with_updated_fields(
            dream, status=status, outcome_date=None, outcome_comment=None
        )
    if outcome_date is None:
        raise ValidationError("outcome_date", "is required for a resolved dream")
    return with_updated_fields(
        dream,
        status=status,
        outcome_date=outcome_date,
        outcome_comment=optional_text(comment),
    )
