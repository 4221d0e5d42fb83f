"""TV series entity for the watch tracker."""

from dataclasses import dataclass
from enum import Enum

from pocketlog.domain.entities.category import BuiltinCategory, Category
from pocketlog.domain.entities.record import Record
from pocketlog.domain.services.validation import optional_text, require_text


class SeriesGenre(Enum):
    """組み込みのシリーズカテゴリ"""

    DRAMA = "drama"
    COMEDY = "comedy"
    SCI_FI = "sci_fi"
    OTHER = "other"

    @property
    def display_name(self) -> str:
        if self is SeriesGenre.SCI_FI:
            return "Sci-Fi"
        return self.value.capitalize()

    @property
    def icon(self) -> str:
        return {
            SeriesGenre.DRAMA: "theatermasks",
            SeriesGenre.COMEDY: "face.smiling",
            SeriesGenre.SCI_FI: "sparkles",
            SeriesGenre.OTHER: "tv",
        }[self]

    @property
    def color(self) -> str:
        return {
            SeriesGenre.DRAMA: "primaryBlue",
            SeriesGenre.COMEDY: "accentOrange",
            SeriesGenre.SCI_FI: "accentGreen",
            SeriesGenre.OTHER: "statusWaiting",
        }[self]


# 参照先のカスタムカテゴリが削除された場合の移動先
DEFAULT_GENRE = SeriesGenre.OTHER


class SeriesStatus(Enum):
    """視聴状態"""

    WATCHING = "watching"
    WAITING = "waiting"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()


@dataclass(frozen=True)
class Series(Record):
    """シリーズエンティティ

    Attributes:
        title: タイトル
        category: カテゴリ（組み込みまたはカスタム）
        status: 視聴状態
        description: 説明（未設定可）
    """

    title: str
    category: Category = BuiltinCategory(SeriesGenre.DRAMA)
    status: SeriesStatus = SeriesStatus.WATCHING
    description: str | None = None


def create_series(
    title: str,
    category: Category | None = None,
    status: SeriesStatus = SeriesStatus.WATCHING,
    description: str | None = None,
) -> Series:
    """Series エンティティを生成する

    Raises:
        ValidationError: タイトルが空の場合
    """
    return Series(
        title=require_text(title, "title"),
        category=category or BuiltinCategory(SeriesGenre.DRAMA),
        status=status,
        description=optional_text(description),
    )
