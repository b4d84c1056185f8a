"""
Configuration management for the site analytics tracker and collector.
Handles loading, validating, and providing access to application settings.
"""

import os
import json
from pathlib import Path
from typing import Dict, Any, Optional
from dataclasses import dataclass


@dataclass
class AnalyticsConfig:
    """Event delivery and batching settings."""
    base_url: str
    event_endpoint: str
    batch_endpoint: str
    batch_size: int
    batch_delay_seconds: float
    request_timeout: float
    max_workers: int


@dataclass
class AppConfig:
    """Collector application settings."""
    host: str
    port: int
    debug: bool


@dataclass
class PathsConfig:
    """Path configuration settings."""
    data_dir: str


class ConfigManager:
    """Manages application configuration loading and access."""

    def __init__(self, config_file: str = "analytics_config.json"):
        self.config_file = Path(config_file)
        self._config: Optional[Dict[str, Any]] = None
        self._load_config()

    def _load_config(self) -> None:
        """Load configuration from file and environment variables."""
        # Start with default config
        self._config = self._get_default_config()

        # Load base config from file
        if self.config_file.exists():
            try:
                with open(self.config_file, 'r', encoding='utf-8') as f:
                    file_config = json.load(f)
                    self._merge_config(file_config)
            except (json.JSONDecodeError, FileNotFoundError):
                # Keep default config if file is invalid or not found
                pass

        # Override with environment variables
        self._override_with_env()

    def _get_default_config(self) -> Dict[str, Any]:
        """Get default configuration."""
        return {
            "analytics": {
                "base_url": "",
                "event_endpoint": "/api/analytics",
                "batch_endpoint": "/api/analytics/batch",
                "batch_size": 10,
                "batch_delay_seconds": 5.0,
                "request_timeout": 5.0,
                "max_workers": 2
            },
            "app": {
                "host": "0.0.0.0",
                "port": 5000,
                "debug": False
            },
            "paths": {
                "data_dir": "analytics_data"
            }
        }

    def _merge_config(self, file_config: Dict[str, Any]) -> None:
        """Merge file configuration with current config."""
        for section, values in file_config.items():
            if section in self._config and isinstance(values, dict):
                self._config[section].update(values)
            else:
                self._config[section] = values

    def _override_with_env(self) -> None:
        """Override configuration with environment variables."""
        # Analytics delivery settings
        if os.getenv("ANALYTICS_BASE_URL"):
            self._config["analytics"]["base_url"] = os.getenv("ANALYTICS_BASE_URL")

        if os.getenv("ANALYTICS_BATCH_SIZE"):
            self._config["analytics"]["batch_size"] = int(os.getenv("ANALYTICS_BATCH_SIZE"))

        if os.getenv("ANALYTICS_BATCH_DELAY"):
            self._config["analytics"]["batch_delay_seconds"] = float(os.getenv("ANALYTICS_BATCH_DELAY"))

        if os.getenv("ANALYTICS_TIMEOUT"):
            self._config["analytics"]["request_timeout"] = float(os.getenv("ANALYTICS_TIMEOUT"))

        if os.getenv("ANALYTICS_MAX_WORKERS"):
            self._config["analytics"]["max_workers"] = int(os.getenv("ANALYTICS_MAX_WORKERS"))

        # App settings
        if os.getenv("APP_HOST"):
            self._config["app"]["host"] = os.getenv("APP_HOST")

        if os.getenv("APP_PORT"):
            self._config["app"]["port"] = int(os.getenv("APP_PORT"))

        if os.getenv("APP_DEBUG"):
            self._config["app"]["debug"] = os.getenv("APP_DEBUG").lower() == "true"

        # Paths
        if os.getenv("ANALYTICS_DATA_DIR"):
            self._config["paths"]["data_dir"] = os.getenv("ANALYTICS_DATA_DIR")

    def get_analytics_config(self) -> AnalyticsConfig:
        """Get analytics delivery configuration."""
        analytics_config = self._config["analytics"]
        return AnalyticsConfig(
            base_url=analytics_config["base_url"],
            event_endpoint=analytics_config["event_endpoint"],
            batch_endpoint=analytics_config["batch_endpoint"],
            batch_size=analytics_config["batch_size"],
            batch_delay_seconds=analytics_config["batch_delay_seconds"],
            request_timeout=analytics_config["request_timeout"],
            max_workers=analytics_config["max_workers"]
        )

    def get_app_config(self) -> AppConfig:
        """Get application configuration."""
        app_config = self._config["app"]
        return AppConfig(
            host=app_config["host"],
            port=app_config["port"],
            debug=app_config["debug"]
        )

    def get_paths_config(self) -> PathsConfig:
        """Get paths configuration."""
        return PathsConfig(data_dir=self._config["paths"]["data_dir"])

    def get_config(self) -> Dict[str, Any]:
        """Get raw configuration dictionary."""
        return self._config.copy()

    def reload(self) -> None:
        """Reload configuration from file."""
        self._load_config()

    def save_config(self) -> None:
        """Save current configuration to file."""
        with open(self.config_file, 'w', encoding='utf-8') as f:
            json.dump(self._config, f, indent=2, ensure_ascii=False)


# Global configuration instance
config_manager = ConfigManager()


def get_analytics_config() -> AnalyticsConfig:
    """Get analytics delivery configuration."""
    return config_manager.get_analytics_config()


def get_app_config() -> AppConfig:
    """Get application configuration."""
    return config_manager.get_app_config()


def get_paths_config() -> PathsConfig:
    """Get paths configuration."""
    return config_manager.get_paths_config()


def reload_config() -> None:
    """Reload configuration."""
    config_manager.reload()


def save_config() -> None:
    """Save configuration to file."""
    config_manager.save_config()
