"""アプリケーションのエントリポイント"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from pocketlog.application.record_store import RecordStore
from pocketlog.application.services import (
    DreamSummary,
    GiftAnalytics,
    MoodStatistics,
    SeriesProgress,
)
from pocketlog.config import Config, ConfigError, LoggingConfig, load_config
from pocketlog.domain.entities import (
    CustomCategory,
    Dream,
    GiftIdea,
    MoodEntry,
    Series,
)
from pocketlog.domain.repositories import RecordCodec
from pocketlog.domain.services import TimeRange
from pocketlog.infrastructure.events import PersistenceWorker
from pocketlog.infrastructure.persistence import (
    CustomCategoryCodec,
    DatabaseManager,
    DreamCodec,
    GiftIdeaCodec,
    MoodEntryCodec,
    SeriesCodec,
    SQLiteRecordStorage,
)

# Default logging for early startup
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

JOURNALS = ("gifts", "moods", "series", "dreams")


def configure_logging(config: LoggingConfig | None) -> None:
    """Configure logging based on config.

    Args:
        config: Logging configuration. If None, uses defaults.
    """
    if config is None:
        return

    root_logger = logging.getLogger()
    level = getattr(logging, config.level.upper(), logging.INFO)
    root_logger.setLevel(level)

    if root_logger.handlers:
        formatter = logging.Formatter(config.format)
        for handler in root_logger.handlers:
            handler.setFormatter(formatter)

    if config.loggers:
        for logger_name, logger_level in config.loggers.items():
            individual_logger = logging.getLogger(logger_name)
            individual_level = getattr(logging, logger_level.upper(), logging.INFO)
            individual_logger.setLevel(individual_level)
            logger.debug(
                "Set logger '%s' to level %s", logger_name, logger_level.upper()
            )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="pocketlog")
    parser.add_argument(
        "--config", default="config.yaml", help="path to config.yaml"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    stats_parser = subparsers.add_parser("stats", help="print journal statistics")
    stats_parser.add_argument("journal", choices=JOURNALS)
    return parser.parse_args(argv)


def print_gifts(analytics: GiftAnalytics, period: TimeRange) -> None:
    metrics = analytics.metrics(period)
    print(f"Gifts ({period.value})")
    print(f"  total: {metrics.total}")
    print(f"  spent: {metrics.total_spent:.2f}")
    print(f"  average price: {metrics.average_price:.2f}")
    print(f"  completion: {metrics.completion_rate:.0%}")
    for status, total in analytics.status_breakdown(period).items():
        print(f"  {status.display_name}: {total}")
    for name, total in analytics.top_recipients(period):
        print(f"  top recipient {name}: {total}")


def print_moods(statistics: MoodStatistics, period: TimeRange) -> None:
    overview = statistics.overview(period)
    print(f"Moods ({period.value})")
    print(f"  entries: {overview.entry_count}")
    print(f"  average temperature: {overview.average_temperature:.1f}")
    if overview.most_common_weather is not None:
        print(f"  weather: {overview.most_common_weather.display_name}")
    if overview.most_common_mood is not None:
        print(f"  mood: {overview.most_common_mood.display_name}")
    print(f"  streak: {overview.current_streak} (best {overview.longest_streak})")


def print_series(progress: SeriesProgress) -> None:
    summary = progress.status_summary()
    print("Series")
    print(f"  watching: {summary.watching} ({summary.watching_share:.0%})")
    print(f"  waiting: {summary.waiting} ({summary.waiting_share:.0%})")
    for category in progress.get_all_categories():
        print(f"  {category.display.name}: {category.count}")
    achievements = progress.achievements()
    unlocked = [a for a in achievements if a.is_unlocked]
    print(f"  achievements: {len(unlocked)}/{len(achievements)}")


def print_dreams(summary: DreamSummary) -> None:
    overall = summary.overall()
    print("Dreams")
    print(f"  total: {overall.total} (waiting {overall.waiting})")
    print(f"  fulfilment: {overall.fulfilment_rate:.0%}")
    print(f"  overdue: {len(summary.overdue())}")
    for item in summary.tag_statistics():
        print(f"  #{item.tag}: {item.stats.total}")


async def show_stats(
    journal: str,
    config: Config,
    db_manager: DatabaseManager,
    worker: PersistenceWorker,
) -> None:
    """Load the stores a journal needs and print its dashboard."""

    def store(collection: str, codec: RecordCodec) -> RecordStore:
        storage = SQLiteRecordStorage(db_manager.get_session, collection, codec)
        record_store: RecordStore = RecordStore(storage, worker)
        record_store.subscribe_errors(
            lambda failure: logger.error("Persistence failure: %s", failure)
        )
        return record_store

    period = TimeRange(config.analytics.default_period)

    if journal == "gifts":
        gifts: RecordStore[GiftIdea] = store("gifts", GiftIdeaCodec())
        await gifts.load()
        print_gifts(
            GiftAnalytics(
                gifts,
                top_limit=config.analytics.top_n,
                recent_limit=config.analytics.recent_limit,
            ),
            period,
        )
    elif journal == "moods":
        moods: RecordStore[MoodEntry] = store("moods", MoodEntryCodec())
        await moods.load()
        print_moods(MoodStatistics(moods), period)
    elif journal == "series":
        series: RecordStore[Series] = store("series", SeriesCodec())
        categories: RecordStore[CustomCategory] = store(
            "custom_categories", CustomCategoryCodec()
        )
        await series.load()
        await categories.load()
        print_series(
            SeriesProgress(
                series, categories, recent_limit=config.analytics.recent_limit
            )
        )
    else:
        dreams: RecordStore[Dream] = store("dreams", DreamCodec())
        await dreams.load()
        print_dreams(DreamSummary(dreams))


async def main(argv: list[str] | None = None) -> None:
    """アプリケーションを起動する"""
    args = parse_args(argv)
    config_path = Path(args.config)
    if not config_path.exists():
        logger.error("%s not found", config_path)
        sys.exit(1)

    try:
        config = load_config(config_path)
    except ConfigError as e:
        logger.error("Failed to load config: %s", e)
        sys.exit(1)

    configure_logging(config.logging)

    db_manager = DatabaseManager.from_config(config.storage)
    await db_manager.create_tables()

    worker = PersistenceWorker()
    worker_task = asyncio.create_task(worker.start())

    try:
        await show_stats(args.journal, config, db_manager, worker)
    finally:
        await worker.drain()
        await worker.stop()
        await asyncio.gather(worker_task, return_exceptions=True)
        await db_manager.close()

    logger.debug("Shutdown complete")


def run() -> None:
    """Run the async main function."""
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Shutting down...")


if __name__ == "__main__":
    run()
