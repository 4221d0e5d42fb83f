"""Watch tracker progress and category summaries."""

from dataclasses import dataclass
from uuid import UUID

from pocketlog.application.record_store import RecordStore
from pocketlog.domain.entities.category import (
    BuiltinCategory,
    Category,
    CategoryDisplay,
    CustomCategory,
    CustomCategoryRef,
    resolve_category,
)
from pocketlog.domain.entities.series import DEFAULT_GENRE, Series, SeriesStatus
from pocketlog.domain.services import stats
from pocketlog.domain.services.view_query import (
    SortRule,
    ViewQuery,
    equals,
    text_contains,
)


@dataclass(frozen=True)
class StatusSummary:
    """Watching / waiting counts and their shares."""

    total: int
    watching: int
    waiting: int

    @property
    def watching_share(self) -> float:
        return stats.percentage(self.watching, self.total)

    @property
    def waiting_share(self) -> float:
        return stats.percentage(self.waiting, self.total)


@dataclass(frozen=True)
class CategorySummary:
    """Derived per-category aggregate.

    Attributes:
        category: Resolved category (dangling custom references are folded
            into the fallback builtin).
        display: Name, icon and color to show.
        count: Number of series in the category.
    """

    category: Category
    display: CategoryDisplay
    count: int


@dataclass(frozen=True)
class Achievement:
    """Milestone on the progress screen.

    Attributes:
        title: Short name.
        description: What has to be done.
        icon: Symbol name.
        color: Color name.
        target: Count needed to unlock.
        current: Count reached so far.
    """

    title: str
    description: str
    icon: str
    color: str
    target: int
    current: int

    @property
    def is_unlocked(self) -> bool:
        return self.current >= self.target

    @property
    def progress(self) -> float:
        """Fraction of the target reached, capped at 1.0."""
        return min(stats.percentage(self.current, self.target), 1.0)


# (title, description, icon, color, measure, target)
ACHIEVEMENT_RULES = (
    (
        "First Steps",
        "Add your first series",
        "plus.circle.fill",
        "accentGreen",
        "total",
        1,
    ),
    ("Series Collector", "Add 5 series", "tv.fill", "primaryBlue", "total", 5),
    (
        "Binge Watcher",
        "Have 3+ watching series",
        "play.circle.fill",
        "statusWatching",
        "watching",
        3,
    ),
    (
        "Patient Viewer",
        "Have 3+ waiting series",
        "clock.fill",
        "statusWaiting",
        "waiting",
        3,
    ),
    (
        "Category Explorer",
        "Use 3+ categories",
        "folder.fill",
        "accentOrange",
        "categories",
        3,
    ),
    ("Series Master", "Add 10+ series", "star.fill", "accentRed", "total", 10),
)


class SeriesProgress:
    """Read-only projections over the series store."""

    def __init__(
        self,
        store: RecordStore[Series],
        categories: RecordStore[CustomCategory],
        recent_limit: int = 5,
    ) -> None:
        """Initialize SeriesProgress.

        Args:
            store: Series record store.
            categories: Custom category store used to resolve references.
            recent_limit: Size of the recent series list.
        """
        self._store = store
        self._categories = categories
        self._recent_limit = recent_limit

    def status_summary(self) -> StatusSummary:
        series = self._store.all()
        return StatusSummary(
            total=len(series),
            watching=stats.count(series, lambda s: s.status is SeriesStatus.WATCHING),
            waiting=stats.count(series, lambda s: s.status is SeriesStatus.WAITING),
        )

    def achievements(self) -> list[Achievement]:
        """Milestones in display order, with the progress towards each."""
        summary = self.status_summary()
        measures = {
            "total": summary.total,
            "watching": summary.watching,
            "waiting": summary.waiting,
            "categories": len(self.get_all_categories()),
        }
        return [
            Achievement(title, description, icon, color, target, measures[measure])
            for title, description, icon, color, measure, target in ACHIEVEMENT_RULES
        ]

    def resolve(self, category: Category) -> CategoryDisplay:
        return resolve_category(category, self._custom_index(), DEFAULT_GENRE)

    def effective_category(self, category: Category) -> Category:
        """The category a series is shown under.

        A reference to a custom category that no longer exists resolves to
        the fallback builtin.
        """
        if (
            isinstance(category, CustomCategoryRef)
            and category.category_id not in self._categories
        ):
            return BuiltinCategory(DEFAULT_GENRE)
        return category

    def get_all_categories(self) -> list[CategorySummary]:
        """Categories in use (count > 0), in order of first appearance."""
        custom = self._custom_index()
        counts = stats.group_counts(
            self._store.all(), lambda s: self.effective_category(s.category)
        )
        return [
            CategorySummary(
                category=category,
                display=resolve_category(category, custom, DEFAULT_GENRE),
                count=total,
            )
            for category, total in counts.items()
            if total > 0
        ]

    def recent_series(self) -> list[Series]:
        """Most recently added series, newest first."""
        query: ViewQuery[Series] = (
            ViewQuery()
            .sorted_by(lambda s: s.created_at, descending=True)
            .take(self._recent_limit)
        )
        return query.evaluate(self._store.all())

    def filter(
        self,
        category: Category | None = None,
        status: SeriesStatus | None = None,
        text: str | None = None,
    ) -> list[Series]:
        """Series list query, sorted by title.

        Args:
            category: Builtin or custom category to match (None for all).
            status: Watching state to match (None for all).
            text: Matches title or description (case-insensitive).
        """
        query: ViewQuery[Series] = ViewQuery().where(
            text_contains(text, lambda s: s.title, lambda s: s.description)
        )
        if category is not None:
            query = query.where(
                equals(lambda s: self.effective_category(s.category), category)
            )
        if status is not None:
            query = query.where(equals(lambda s: s.status, status))
        return query.sorted_by(
            lambda s: s.title.casefold(),
            then_by=SortRule(lambda s: s.created_at),
        ).evaluate(self._store.all())

    def _custom_index(self) -> dict[UUID, CustomCategory]:
        return {
            category.id: category
            for category in self._categories.all()
            if category.id is not None
        }
