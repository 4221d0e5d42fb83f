"""Mood and weather journal entry."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from pocketlog.domain.entities.record import Record
from pocketlog.domain.services.validation import optional_text, validate_temperature


class WeatherType(Enum):
    """天気"""

    SUNNY = "sunny"
    PARTLY_CLOUDY = "partly_cloudy"
    CLOUDY = "cloudy"
    RAINY = "rainy"
    STORMY = "stormy"
    SNOWY = "snowy"
    FOGGY = "foggy"
    WINDY = "windy"

    @property
    def display_name(self) -> str:
        return self.value.replace("_", " ").capitalize()


class MoodType(Enum):
    """気分"""

    HAPPY = "happy"
    CALM = "calm"
    NEUTRAL = "neutral"
    TIRED = "tired"
    SAD = "sad"
    ANXIOUS = "anxious"
    ANGRY = "angry"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()


@dataclass(frozen=True)
class MoodEntry(Record):
    """気分・天気の記録エンティティ

    Attributes:
        date: 記録対象の日付
        weather: 天気
        temperature: 気温（摂氏）
        mood: 気分
        time: 記録時刻（未設定可）
        location: 場所（未設定可）
        tag: タグ（未設定可）
        comment: コメント（未設定可）
    """

    date: datetime
    weather: WeatherType
    temperature: float
    mood: MoodType
    time: datetime | None = None
    location: str | None = None
    tag: str | None = None
    comment: str | None = None


def create_mood_entry(
    date: datetime,
    weather: WeatherType,
    temperature: float,
    mood: MoodType,
    time: datetime | None = None,
    location: str | None = None,
    tag: str | None = None,
    comment: str | None = None,
) -> MoodEntry:
    """MoodEntry エンティティを生成する

    Raises:
        ValidationError: 気温が -60 から 60 の範囲外の場合
    """
    return MoodEntry(
        date=date,
        weather=weather,
        temperature=validate_temperature(temperature),
        mood=mood,
        time=time,
        location=optional_text(location),
        tag=optional_text(tag),
        comment=optional_text(comment),
    )
