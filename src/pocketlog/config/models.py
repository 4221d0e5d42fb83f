"""設定データクラス"""

from dataclasses import dataclass, field


@dataclass
class StorageConfig:
    """ストレージ設定"""

    database_path: str


@dataclass
class AnalyticsConfig:
    """集計設定

    Attributes:
        top_n: ランキングの件数
        recent_limit: 最近の項目の件数
        default_period: 既定の集計期間（week / month / year / all）
    """

    top_n: int = 5
    recent_limit: int = 5
    default_period: str = "month"


@dataclass
class LoggingConfig:
    """ログ設定"""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    loggers: dict[str, str] | None = None


@dataclass
class Config:
    """アプリケーション設定"""

    storage: StorageConfig
    analytics: AnalyticsConfig = field(default_factory=AnalyticsConfig)
    logging: LoggingConfig | None = None
