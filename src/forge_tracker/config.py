"""
Configuration management for Forge Tracker

Handles auto-configuration with sensible defaults and environment detection.
Settings live in a JSON file inside the user data directory.
"""

import json
import os
from pathlib import Path
from typing import Dict, Any, Optional, List
from dataclasses import dataclass, field, asdict
import logging

from .domain.models import DEFAULT_ICON
from .store.codec import DOMAINS_KEY, SELECTED_DOMAIN_KEY

DATABASE_FILENAME = "forge_tracker.db"


@dataclass
class DatabaseConfig:
    """Database configuration."""

    url: str = ""  # Empty means <user_data_dir>/forge_tracker.db
    echo: bool = False
    log_queries: bool = False  # Enable query logging for performance analysis


@dataclass
class StorageConfig:
    """Key names and defaults for persisted tracker state."""

    domains_key: str = DOMAINS_KEY
    selected_domain_key: str = SELECTED_DOMAIN_KEY
    default_icon: str = DEFAULT_ICON


@dataclass
class AppConfig:
    """Main application configuration."""

    app_name: str = "Forge Tracker"
    version: str = "1.0.0"
    description: str = "Time tracking with XP and levels per activity domain"

    # Paths (will be set automatically)
    user_data_dir: Optional[str] = None

    # Logging
    debug: bool = False
    log_level: str = "INFO"
    log_to_file: bool = True
    log_dir: str = "logs"  # Relative paths resolve against user_data_dir


@dataclass
class ForgeConfig:
    """Complete configuration for Forge Tracker."""

    app: AppConfig = field(default_factory=AppConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    database: DatabaseConfig = field(default_factory=DatabaseConfig)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "app": asdict(self.app),
            "storage": asdict(self.storage),
            "database": asdict(self.database),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ForgeConfig":
        """Create from dictionary."""
        return cls(
            app=AppConfig(**data.get("app", {})),
            storage=StorageConfig(**data.get("storage", {})),
            database=DatabaseConfig(**data.get("database", {})),
        )


def _env_flag(name: str) -> Optional[bool]:
    value = os.getenv(name)
    if value is None:
        return None
    return value.strip().lower() in ("1", "true", "yes", "on")


class ConfigManager:
    """Manages configuration loading, saving, and auto-detection."""

    def __init__(self):
        self.config_file: Optional[Path] = None
        self.config: Optional[ForgeConfig] = None

    def detect_environment(self) -> Dict[str, Any]:
        """Detect the current environment and return environment info."""
        return {
            "user_data_dir": os.getenv("FORGE_USER_DATA_DIR"),
            "database_url": os.getenv("FORGE_DATABASE_URL"),
            "debug": _env_flag("FORGE_DEBUG"),
            "log_to_file": _env_flag("FORGE_LOG_TO_FILE"),
        }

    def get_user_data_dir(self) -> Path:
        """Get the directory holding config, database and logs."""
        user_data_dir = os.getenv("FORGE_USER_DATA_DIR")
        if user_data_dir:
            return Path(user_data_dir)
        return Path.home() / ".forge_tracker"

    def get_config_file_path(self) -> Path:
        """Get the path for the config file."""
        config_dir = self.get_user_data_dir()
        config_dir.mkdir(parents=True, exist_ok=True)
        return config_dir / "config.json"

    def _apply_environment(self, config: ForgeConfig) -> ForgeConfig:
        """Overlay environment overrides onto a loaded configuration."""
        env_info = self.detect_environment()

        config.app.user_data_dir = str(self.get_user_data_dir())
        if env_info["debug"] is not None:
            config.app.debug = env_info["debug"]
            config.app.log_level = "DEBUG" if env_info["debug"] else config.app.log_level
        if env_info["log_to_file"] is not None:
            config.app.log_to_file = env_info["log_to_file"]
        if env_info["database_url"]:
            config.database.url = env_info["database_url"]

        if not config.database.url:
            db_path = Path(config.app.user_data_dir) / DATABASE_FILENAME
            config.database.url = f"sqlite:///{db_path}"

        return config

    def create_default_config(self) -> ForgeConfig:
        """Create default configuration with auto-detected values."""
        return self._apply_environment(ForgeConfig())

    def load_config(self) -> ForgeConfig:
        """Load configuration from file or create default."""
        self.config_file = self.get_config_file_path()

        if self.config_file.exists():
            try:
                with open(self.config_file, "r", encoding="utf-8") as f:
                    data = json.load(f)

                self.config = self._apply_environment(ForgeConfig.from_dict(data))
                logging.info(f"Loaded configuration from {self.config_file}")

            except (OSError, ValueError, TypeError, AttributeError) as e:
                logging.warning(f"Failed to load config from {self.config_file}: {e}")
                logging.info("Creating default configuration")
                self.config = self.create_default_config()
        else:
            logging.info("No config file found, creating default configuration")
            self.config = self.create_default_config()

        return self.config

    def save_config(self, config: Optional[ForgeConfig] = None) -> bool:
        """Save configuration to file."""
        if config is None:
            config = self.config

        if config is None:
            logging.error("No configuration to save")
            return False

        try:
            if self.config_file is None:
                self.config_file = self.get_config_file_path()

            with open(self.config_file, "w", encoding="utf-8") as f:
                json.dump(config.to_dict(), f, indent=2, ensure_ascii=False)

            logging.info(f"Saved configuration to {self.config_file}")
            return True

        except OSError as e:
            logging.error(f"Failed to save config to {self.config_file}: {e}")
            return False

    def update_config(self, updates: Dict[str, Any]) -> bool:
        """Update configuration with new values."""
        if self.config is None:
            self.load_config()

        try:
            config_dict = self.config.to_dict()

            for key, value in updates.items():
                if "." in key:
                    # Handle nested keys like "storage.default_icon"
                    section, field_name = key.split(".", 1)
                    if section in config_dict:
                        config_dict[section][field_name] = value
                elif key in config_dict and isinstance(value, dict):
                    config_dict[key].update(value)

            self.config = ForgeConfig.from_dict(config_dict)
            return self.save_config()

        except TypeError as e:
            logging.error(f"Failed to update configuration: {e}")
            return False

    def get_database_url(self) -> str:
        """Get the database URL."""
        if self.config is None:
            self.load_config()
        return self.config.database.url

    def get_log_directory(self) -> Path:
        """Get the log directory, resolved against the user data dir."""
        if self.config is None:
            self.load_config()
        log_dir = Path(self.config.app.log_dir)
        if not log_dir.is_absolute():
            log_dir = Path(self.config.app.user_data_dir) / log_dir
        return log_dir

    def validate_config(self) -> List[str]:
        """Validate configuration and return list of warnings/errors."""
        if self.config is None:
            self.load_config()

        issues = []

        storage = self.config.storage
        if storage.domains_key == storage.selected_domain_key:
            issues.append(
                f"Domains and selection share the storage key '{storage.domains_key}'"
            )
        if not storage.default_icon.strip():
            issues.append("Default icon is blank")
        if not isinstance(logging.getLevelName(str(self.config.app.log_level).upper()), int):
            issues.append(f"Unknown log level '{self.config.app.log_level}'")

        # Check database file is writable
        db_url = self.config.database.url
        if db_url.startswith("sqlite:///") and ":memory:" not in db_url:
            db_dir = Path(db_url.replace("sqlite:///", "", 1)).parent
            if not db_dir.exists():
                try:
                    db_dir.mkdir(parents=True, exist_ok=True)
                except OSError as e:
                    issues.append(f"Cannot create database directory: {e}")
            elif not os.access(db_dir, os.W_OK):
                issues.append(f"Database directory is not writable: {db_dir}")

        return issues


# Global config manager instance
config_manager = ConfigManager()


def get_config() -> ForgeConfig:
    """Get the current configuration, loading it on first use."""
    if config_manager.config is None:
        return config_manager.load_config()
    return config_manager.config


def get_database_url() -> str:
    """Get the database URL."""
    return config_manager.get_database_url()
