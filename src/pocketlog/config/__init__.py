"""設定管理モジュール"""

from pocketlog.config.loader import (
    ConfigError,
    ConfigValidationError,
    EnvironmentVariableError,
    expand_env_vars,
    load_config,
)
from pocketlog.config.models import (
    AnalyticsConfig,
    Config,
    LoggingConfig,
    StorageConfig,
)

__all__ = [
    "AnalyticsConfig",
    "Config",
    "ConfigError",
    "ConfigValidationError",
    "EnvironmentVariableError",
    "LoggingConfig",
    "StorageConfig",
    "expand_env_vars",
    "load_config",
]
