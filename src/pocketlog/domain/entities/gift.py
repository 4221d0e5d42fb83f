"""Gift idea entity for the gift tracker."""

from dataclasses import dataclass
from enum import Enum

from pocketlog.domain.entities.record import Record, with_updated_fields
from pocketlog.domain.services.validation import (
    optional_text,
    require_text,
    validate_price,
)


class GiftStatus(Enum):
    """ギフトの状態"""

    IDEA = "idea"
    BOUGHT = "bought"
    GIFTED = "gifted"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()

    @property
    def icon(self) -> str:
        return {
            GiftStatus.IDEA: "lightbulb",
            GiftStatus.BOUGHT: "bag",
            GiftStatus.GIFTED: "gift",
        }[self]


class GiftOccasion(Enum):
    """贈る機会"""

    BIRTHDAY = "birthday"
    CHRISTMAS = "christmas"
    ANNIVERSARY = "anniversary"
    WEDDING = "wedding"
    GRADUATION = "graduation"
    VALENTINES = "valentines"
    HOUSEWARMING = "housewarming"
    OTHER = "other"

    @property
    def display_name(self) -> str:
        if self is GiftOccasion.VALENTINES:
            return "Valentine's Day"
        return self.value.capitalize()


@dataclass(frozen=True)
class GiftIdea(Record):
    """ギフトアイデアエンティティ

    Attributes:
        recipient_name: 贈る相手の名前
        description: ギフトの内容
        occasion: 贈る機会（未設定可）
        status: 状態
        estimated_price: 予想価格（未設定可）
        comment: コメント（未設定可）
    """

    recipient_name: str
    description: str
    occasion: GiftOccasion | None = None
    status: GiftStatus = GiftStatus.IDEA
    estimated_price: float | None = None
    comment: str | None = None

    @property
    def is_purchased(self) -> bool:
        """購入済み（bought / gifted）かどうか"""
        return self.status is not GiftStatus.IDEA


def create_gift_idea(
    recipient_name: str,
    description: str,
    occasion: GiftOccasion | None = None,
    status: GiftStatus = GiftStatus.IDEA,
    estimated_price: float | None = None,
    comment: str | None = None,
) -> GiftIdea:
    """GiftIdea エンティティを生成する

    id とタイムスタンプは RecordStore への追加時に割り当てられる。

    Raises:
        ValidationError: 相手の名前・内容が空、または価格が負数の場合
    """
    return GiftIdea(
        recipient_name=require_text(recipient_name, "recipient_name"),
        description=require_text(description, "description"),
        occasion=occasion,
        status=status,
        estimated_price=validate_price(estimated_price, "estimated_price"),
        comment=optional_text(comment),
    )


def mark_gifted(gift: GiftIdea) -> GiftIdea:
    """ギフトを贈呈済みにしたコピーを返す"""
    return with_updated_fields(gift, status=GiftStatus.GIFTED)
