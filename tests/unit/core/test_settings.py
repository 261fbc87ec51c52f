"""Unit tests for environment-driven settings."""

from __future__ import annotations

import pytest

from alchemy.core.config.settings import Settings, get_settings


class TestSettings:
    def test_defaults(self):
        settings = Settings(_env_file=None)
        assert settings.alchemy_log_level == "info"
        assert settings.knowledge_base_path == ""
        assert settings.achievements_path == ""
        assert settings.invalid_consumable_penalty == 20
        assert settings.favorite_category_limit == 3

    def test_environment_overrides(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("ALCHEMY_LOG_LEVEL", "debug")
        monkeypatch.setenv("INVALID_CONSUMABLE_PENALTY", "35")
        monkeypatch.setenv("FAVORITE_CATEGORY_LIMIT", "5")
        settings = Settings(_env_file=None)
        assert settings.alchemy_log_level == "debug"
        assert settings.invalid_consumable_penalty == 35
        assert settings.favorite_category_limit == 5

    def test_env_file(self, tmp_path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.delenv("ACHIEVEMENTS_PATH")
        env_file = tmp_path / ".env"
        env_file.write_text("ACHIEVEMENTS_PATH=/data/achievements.yaml\n")
        settings = Settings(_env_file=env_file)
        assert settings.achievements_path == "/data/achievements.yaml"

    def test_get_settings_returns_fresh_instance(self):
        assert get_settings() is not get_settings()
