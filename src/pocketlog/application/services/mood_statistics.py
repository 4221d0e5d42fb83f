"""Mood and weather journal statistics."""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime

from pocketlog.application.record_store import RecordStore, utc_now
from pocketlog.domain.entities.mood import MoodEntry, MoodType, WeatherType
from pocketlog.domain.services import stats
from pocketlog.domain.services.view_query import TimeRange, ViewQuery, date_within


@dataclass(frozen=True)
class MoodOverview:
    """Summary numbers for a period.

    Attributes:
        entry_count: Number of entries in the period.
        average_temperature: Mean temperature (0.0 without entries).
        most_common_weather: Most frequent weather, or None.
        most_common_mood: Most frequent mood, or None.
        current_streak: Consecutive logged days up to today.
        longest_streak: Longest run of logged days overall.
    """

    entry_count: int
    average_temperature: float
    most_common_weather: WeatherType | None
    most_common_mood: MoodType | None
    current_streak: int
    longest_streak: int


def _entry_date(entry: MoodEntry) -> datetime:
    return entry.date


class MoodStatistics:
    """Read-only projections over the mood store."""

    def __init__(
        self,
        store: RecordStore[MoodEntry],
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._store = store
        self._clock = clock

    def entries_in(self, time_range: TimeRange) -> list[MoodEntry]:
        """Entries whose date falls in the window, newest first."""
        window = time_range.window(self._clock())
        query: ViewQuery[MoodEntry] = (
            ViewQuery()
            .where(date_within(_entry_date, window))
            .sorted_by(_entry_date, descending=True)
        )
        return query.evaluate(self._store.all())

    def average_temperature(self, time_range: TimeRange = TimeRange.ALL) -> float:
        return stats.average(self.entries_in(time_range), lambda e: e.temperature)

    def most_common_weather(
        self, time_range: TimeRange = TimeRange.ALL
    ) -> WeatherType | None:
        return stats.most_common(self.entries_in(time_range), lambda e: e.weather)

    def most_common_mood(
        self, time_range: TimeRange = TimeRange.ALL
    ) -> MoodType | None:
        return stats.most_common(self.entries_in(time_range), lambda e: e.mood)

    def mood_distribution(
        self, time_range: TimeRange = TimeRange.ALL
    ) -> dict[MoodType, float]:
        """Share of each mood in the period; every mood is present."""
        entries = self.entries_in(time_range)
        counts = stats.group_counts(entries, lambda e: e.mood)
        return {
            mood: stats.percentage(counts.get(mood, 0), len(entries))
            for mood in MoodType
        }

    def weather_distribution(
        self, time_range: TimeRange = TimeRange.ALL
    ) -> list[tuple[WeatherType, int]]:
        """Weather types seen in the period, most frequent first."""
        return stats.top_n(
            self.entries_in(time_range), lambda e: e.weather, len(WeatherType)
        )

    def temperature_series(
        self, time_range: TimeRange = TimeRange.ALL
    ) -> list[tuple[datetime, float]]:
        """(date, temperature) points in chronological order."""
        entries = sorted(self.entries_in(time_range), key=_entry_date)
        return [(entry.date, entry.temperature) for entry in entries]

    def entry_for_day(self, day: date) -> MoodEntry | None:
        """The latest entry logged on ``day``, if any."""
        for entry in self.entries_in(TimeRange.ALL):
            if entry.date.date() == day:
                return entry
        return None

    def current_streak(self) -> int:
        days = [entry.date for entry in self._store.all()]
        return stats.current_streak(days, self._clock().date())

    def longest_streak(self) -> int:
        return stats.longest_streak(entry.date for entry in self._store.all())

    def overview(self, time_range: TimeRange = TimeRange.ALL) -> MoodOverview:
        entries = self.entries_in(time_range)
        return MoodOverview(
            entry_count=len(entries),
            average_temperature=stats.average(entries, lambda e: e.temperature),
            most_common_weather=stats.most_common(entries, lambda e: e.weather),
            most_common_mood=stats.most_common(entries, lambda e: e.mood),
            current_streak=self.current_streak(),
            longest_streak=self.longest_streak(),
        )
