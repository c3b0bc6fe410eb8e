"""Unit tests for configuration loading and saving."""

import json
import os
import pytest
from pathlib import Path
from unittest.mock import patch

from forge_tracker.config import (
    AppConfig,
    ConfigManager,
    ForgeConfig,
    StorageConfig,
    get_database_url,
)
from forge_tracker.store.codec import DOMAINS_KEY, SELECTED_DOMAIN_KEY


@pytest.fixture
def data_dir(tmp_path):
    with patch.dict(
        os.environ,
        {"FORGE_USER_DATA_DIR": str(tmp_path)},
    ):
        for name in ("FORGE_DATABASE_URL", "FORGE_DEBUG", "FORGE_LOG_TO_FILE"):
            os.environ.pop(name, None)
        yield tmp_path


@pytest.mark.unit
class TestDefaults:
    """Test default configuration values."""

    def test_storage_defaults_match_persisted_keys(self):
        storage = StorageConfig()

        assert storage.domains_key == DOMAINS_KEY == "forge.domains.v1"
        assert storage.selected_domain_key == SELECTED_DOMAIN_KEY == "forge.selectedDomainID.v1"
        assert storage.default_icon == "star.fill"

    def test_app_defaults(self):
        app = AppConfig()

        assert app.log_to_file is True
        assert app.debug is False

    def test_dict_round_trip(self):
        config = ForgeConfig()
        config.storage.default_icon = "sparkles"

        restored = ForgeConfig.from_dict(config.to_dict())

        assert restored == config


@pytest.mark.unit
class TestConfigManager:
    """Test loading, saving and environment overrides."""

    def test_default_database_lives_in_user_data_dir(self, data_dir):
        config = ConfigManager().create_default_config()

        assert config.app.user_data_dir == str(data_dir)
        assert config.database.url == f"sqlite:///{data_dir / 'forge_tracker.db'}"

    def test_environment_overrides(self, data_dir):
        with patch.dict(
            os.environ,
            {
                "FORGE_DATABASE_URL": "sqlite://",
                "FORGE_DEBUG": "1",
                "FORGE_LOG_TO_FILE": "0",
            },
        ):
            config = ConfigManager().create_default_config()

        assert config.database.url == "sqlite://"
        assert config.app.debug is True
        assert config.app.log_level == "DEBUG"
        assert config.app.log_to_file is False

    def test_load_without_file_creates_default(self, data_dir):
        manager = ConfigManager()

        config = manager.load_config()

        assert manager.config_file == data_dir / "config.json"
        assert config.storage == StorageConfig()

    def test_save_then_load(self, data_dir):
        manager = ConfigManager()
        config = manager.load_config()
        config.storage.default_icon = "flame"

        assert manager.save_config() is True

        reloaded = ConfigManager().load_config()
        assert reloaded.storage.default_icon == "flame"

    def test_corrupt_file_falls_back_to_defaults(self, data_dir):
        (data_dir / "config.json").write_text("{not json", encoding="utf-8")

        config = ConfigManager().load_config()

        assert config.storage == StorageConfig()

    def test_unknown_fields_fall_back_to_defaults(self, data_dir):
        (data_dir / "config.json").write_text(
            json.dumps({"app": {"no_such_field": 1}}), encoding="utf-8"
        )

        config = ConfigManager().load_config()

        assert config.app.app_name == "Forge Tracker"

    def test_update_config_nested_key(self, data_dir):
        manager = ConfigManager()
        manager.load_config()

        assert manager.update_config({"storage.default_icon": "bolt"}) is True

        saved = json.loads((data_dir / "config.json").read_text(encoding="utf-8"))
        assert saved["storage"]["default_icon"] == "bolt"
        assert manager.config.storage.default_icon == "bolt"

    def test_relative_log_dir_resolves_against_data_dir(self, data_dir):
        manager = ConfigManager()
        manager.load_config()

        assert manager.get_log_directory() == Path(data_dir) / "logs"


@pytest.mark.unit
class TestValidateConfig:
    """Test configuration validation."""

    def test_valid_default_config(self, data_dir):
        manager = ConfigManager()
        manager.load_config()

        assert manager.validate_config() == []

    def test_shared_storage_key_reported(self, data_dir):
        manager = ConfigManager()
        manager.load_config()
        manager.config.storage.selected_domain_key = manager.config.storage.domains_key
        manager.config.storage.default_icon = " "

        issues = manager.validate_config()

        assert len(issues) == 2
        assert any("share the storage key" in issue for issue in issues)
        assert any("icon" in issue for issue in issues)

    def test_unknown_log_level_reported(self, data_dir):
        manager = ConfigManager()
        manager.load_config()
        manager.config.app.log_level = "chatty"

        assert manager.validate_config() == ["Unknown log level 'chatty'"]

    def test_module_database_url_follows_loaded_config(self, data_dir):
        manager = ConfigManager()
        manager.load_config()

        with patch("forge_tracker.config.config_manager", manager):
            assert get_database_url() == manager.config.database.url
