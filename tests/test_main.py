"""エントリポイントのテスト"""

import logging
from collections.abc import Generator
from datetime import datetime, timezone
from pathlib import Path
from uuid import uuid4

import pytest

from pocketlog.__main__ import configure_logging, main, parse_args
from pocketlog.config import LoggingConfig
from pocketlog.domain.entities import GiftIdea
from pocketlog.domain.entities.gift import GiftStatus
from pocketlog.infrastructure.persistence import (
    DatabaseManager,
    GiftIdeaCodec,
    SQLiteRecordStorage,
)


@pytest.fixture
def restore_logging() -> Generator[None, None, None]:
    """ロガーのレベルを元に戻す"""
    root_level = logging.getLogger().level
    named = logging.getLogger("pocketlog.test")
    named_level = named.level
    yield
    logging.getLogger().setLevel(root_level)
    named.setLevel(named_level)


@pytest.fixture
def config_path(tmp_path: Path) -> Path:
    """一時データベースを指す設定ファイル"""
    path = tmp_path / "config.yaml"
    path.write_text(
        f"""
storage:
  database_path: "{tmp_path / 'pocketlog.db'}"
analytics:
  default_period: all
""",
        encoding="utf-8",
    )
    return path


class TestParseArgs:
    """parse_args関数のテスト"""

    def test_stats_command(self) -> None:
        """statsサブコマンドを解釈できる"""
        args = parse_args(["--config", "my.yaml", "stats", "dreams"])

        assert args.config == "my.yaml"
        assert args.command == "stats"
        assert args.journal == "dreams"

    def test_default_config(self) -> None:
        """--config省略時はconfig.yaml"""
        assert parse_args(["stats", "gifts"]).config == "config.yaml"

    def test_unknown_journal(self) -> None:
        """未知のジャーナル名はエラー"""
        with pytest.raises(SystemExit):
            parse_args(["stats", "recipes"])


class TestConfigureLogging:
    """configure_logging関数のテスト"""

    def test_none_keeps_defaults(self, restore_logging: None) -> None:
        """Noneの場合は何もしない"""
        before = logging.getLogger().level

        configure_logging(None)

        assert logging.getLogger().level == before

    def test_levels_are_applied(self, restore_logging: None) -> None:
        """ルートと個別ロガーのレベルを設定できる"""
        configure_logging(
            LoggingConfig(level="warning", loggers={"pocketlog.test": "debug"})
        )

        assert logging.getLogger().level == logging.WARNING
        assert logging.getLogger("pocketlog.test").level == logging.DEBUG


class TestMain:
    """main関数のテスト"""

    async def test_missing_config_exits(self, tmp_path: Path) -> None:
        """設定ファイルがない場合は終了する"""
        with pytest.raises(SystemExit):
            await main(["--config", str(tmp_path / "missing.yaml"), "stats", "gifts"])

    async def test_gift_stats(
        self, tmp_path: Path, config_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """保存済みの贈り物を集計して表示する"""
        manager = DatabaseManager(str(tmp_path / "pocketlog.db"))
        await manager.create_tables()
        now = datetime.now(timezone.utc)
        await SQLiteRecordStorage(manager.get_session, "gifts", GiftIdeaCodec()).save(
            [
                GiftIdea(
                    id=uuid4(),
                    created_at=now,
                    updated_at=now,
                    recipient_name="Alice",
                    description="Scarf",
                    status=GiftStatus.GIFTED,
                    estimated_price=20.0,
                )
            ]
        )
        await manager.close()

        await main(["--config", str(config_path), "stats", "gifts"])

        output = capsys.readouterr().out
        assert "Gifts (all)" in output
        assert "total: 1" in output
        assert "spent: 20.00" in output
        assert "completion: 100%" in output
        assert "top recipient Alice: 1" in output

    async def test_empty_dream_stats(
        self, config_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """空のデータベースでも表示できる"""
        await main(["--config", str(config_path), "stats", "dreams"])

        output = capsys.readouterr().out
        assert "total: 0 (waiting 0)" in output
        assert "fulfilment: 0%" in output
        assert "overdue: 0" in output
