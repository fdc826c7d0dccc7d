"""Configuration management for stock-checker"""

from stock_checker.config.settings import (
    CacheSettings,
    JQuantsSettings,
    LoggingSettings,
    Settings,
    get_settings,
)

__all__ = ["CacheSettings", "JQuantsSettings", "LoggingSettings", "Settings", "get_settings"]
