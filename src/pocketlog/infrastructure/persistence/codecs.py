"""Record <-> JSON document codecs, one per entity."""

from datetime import datetime
from enum import Enum
from typing import Any, TypeVar
from uuid import UUID

from pocketlog.domain.entities.category import (
    BuiltinCategory,
    Category,
    CustomCategory,
    CustomCategoryRef,
)
from pocketlog.domain.entities.dream import Dream, DreamStatus, DreamTag
from pocketlog.domain.entities.gift import GiftIdea, GiftOccasion, GiftStatus
from pocketlog.domain.entities.mood import MoodEntry, MoodType, WeatherType
from pocketlog.domain.entities.record import Record
from pocketlog.domain.entities.series import Series, SeriesGenre, SeriesStatus
from pocketlog.infrastructure.persistence.datetime_utils import (
    format_datetime,
    parse_datetime,
)

E = TypeVar("E", bound=Enum)


def _encode_base(record: Record) -> dict[str, Any]:
    """基底フィールドを dict に変換する"""
    return {
        "id": str(record.id) if record.id is not None else None,
        "created_at": format_datetime(record.created_at),
        "updated_at": format_datetime(record.updated_at),
    }


def _decode_base(document: dict[str, Any]) -> dict[str, Any]:
    """基底フィールドを読み込む

    保存済みドキュメントは id を必ず持つ。

    Raises:
        KeyError: id がない場合
        ValueError: id または日時の形式が不正な場合
    """
    return {
        "id": UUID(document["id"]),
        "created_at": parse_datetime(document.get("created_at")),
        "updated_at": parse_datetime(document.get("updated_at")),
    }


def _required_datetime(document: dict[str, Any], key: str) -> datetime:
    value = parse_datetime(document[key])
    if value is None:
        raise ValueError(f"'{key}' is required")
    return value


def _optional_enum(enum_type: type[E], value: Any) -> E | None:
    return enum_type(value) if value is not None else None


def _optional_float(value: Any) -> float | None:
    return float(value) if value is not None else None


def encode_category(category: Category) -> dict[str, Any]:
    """カテゴリを dict に変換する"""
    if isinstance(category, CustomCategoryRef):
        return {"type": "custom", "id": str(category.category_id)}
    return {"type": "builtin", "value": category.value.value}


def decode_category(document: dict[str, Any], builtin: type[Enum]) -> Category:
    """dict をカテゴリに変換する

    Raises:
        ValueError: 種別または値が不正な場合
    """
    kind = document["type"]
    if kind == "custom":
        return CustomCategoryRef(UUID(document["id"]))
    if kind == "builtin":
        return BuiltinCategory(builtin(document["value"]))
    raise ValueError(f"Unknown category type: {kind!r}")


class GiftIdeaCodec:
    """GiftIdea の変換"""

    def encode(self, record: GiftIdea) -> dict[str, Any]:
        return {
            **_encode_base(record),
            "recipient_name": record.recipient_name,
            "description": record.description,
            "occasion": record.occasion.value if record.occasion else None,
            "status": record.status.value,
            "estimated_price": record.estimated_price,
            "comment": record.comment,
        }

    def decode(self, document: dict[str, Any]) -> GiftIdea:
        return GiftIdea(
            **_decode_base(document),
            recipient_name=document["recipient_name"],
            description=document["description"],
            occasion=_optional_enum(GiftOccasion, document.get("occasion")),
            status=GiftStatus(document.get("status", GiftStatus.IDEA.value)),
            estimated_price=_optional_float(document.get("estimated_price")),
            comment=document.get("comment"),
        )


class MoodEntryCodec:
    """MoodEntry の変換"""

    def encode(self, record: MoodEntry) -> dict[str, Any]:
        return {
            **_encode_base(record),
            "date": format_datetime(record.date),
            "time": format_datetime(record.time),
            "weather": record.weather.value,
            "temperature": record.temperature,
            "mood": record.mood.value,
            "location": record.location,
            "tag": record.tag,
            "comment": record.comment,
        }

    def decode(self, document: dict[str, Any]) -> MoodEntry:
        return MoodEntry(
            **_decode_base(document),
            date=_required_datetime(document, "date"),
            time=parse_datetime(document.get("time")),
            weather=WeatherType(document["weather"]),
            temperature=float(document["temperature"]),
            mood=MoodType(document["mood"]),
            location=document.get("location"),
            tag=document.get("tag"),
            comment=document.get("comment"),
        )


class SeriesCodec:
    """Series の変換"""

    def encode(self, record: Series) -> dict[str, Any]:
        return {
            **_encode_base(record),
            "title": record.title,
            "description": record.description,
            "category": encode_category(record.category),
            "status": record.status.value,
        }

    def decode(self, document: dict[str, Any]) -> Series:
        return Series(
            **_decode_base(document),
            title=document["title"],
            description=document.get("description"),
            category=decode_category(document["category"], SeriesGenre),
            status=SeriesStatus(document["status"]),
        )


class DreamCodec:
    """Dream の変換"""

    def encode(self, record: Dream) -> dict[str, Any]:
        return {
            **_encode_base(record),
            "title": record.title,
            "description": record.description,
            "expected_event": record.expected_event,
            "dream_date": format_datetime(record.dream_date),
            "check_deadline": format_datetime(record.check_deadline),
            "tags": list(record.tags),
            "status": record.status.value,
            "outcome_date": format_datetime(record.outcome_date),
            "outcome_comment": record.outcome_comment,
        }

    def decode(self, document: dict[str, Any]) -> Dream:
        tags = document.get("tags") or []
        if not isinstance(tags, list):
            raise TypeError("'tags' must be a list")
        return Dream(
            **_decode_base(document),
            title=document["title"],
            description=document.get("description"),
            expected_event=document["expected_event"],
            dream_date=_required_datetime(document, "dream_date"),
            check_deadline=_required_datetime(document, "check_deadline"),
            tags=tuple(str(tag) for tag in tags),
            status=DreamStatus(document.get("status", DreamStatus.WAITING.value)),
            outcome_date=parse_datetime(document.get("outcome_date")),
            outcome_comment=document.get("outcome_comment"),
        )


class DreamTagCodec:
    """DreamTag の変換"""

    def encode(self, record: DreamTag) -> dict[str, Any]:
        return {**_encode_base(record), "name": record.name}

    def decode(self, document: dict[str, Any]) -> DreamTag:
        return DreamTag(**_decode_base(document), name=document["name"])


class CustomCategoryCodec:
    """CustomCategory の変換"""

    def encode(self, record: CustomCategory) -> dict[str, Any]:
        return {
            **_encode_base(record),
            "name": record.name,
            "icon": record.icon,
            "color": record.color,
        }

    def decode(self, document: dict[str, Any]) -> CustomCategory:
        return CustomCategory(
            **_decode_base(document),
            name=document["name"],
            icon=document.get("icon", "folder"),
            color=document.get("color", "primaryBlue"),
        )
