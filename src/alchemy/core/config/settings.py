"""Application settings loaded from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Alchemy core configuration."""

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    # Logging
    alchemy_log_level: str = "info"

    # Reference data (empty means the bundled YAML files)
    knowledge_base_path: str = ""
    achievements_path: str = ""

    # Scoring
    invalid_consumable_penalty: int = 20

    # Progression
    favorite_category_limit: int = 3


def get_settings() -> Settings:
    """Create and return a Settings instance."""
    return Settings()
