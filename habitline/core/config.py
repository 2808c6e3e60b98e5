"""Configuration via environment variables."""

from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    # Storage
    data_path: Path = Path("data/habitline.json")
    audit_path: Path = Path("data/audit/habitline.jsonl")
    audit_enabled: bool = True

    # Tracker
    default_goal: str = "Daily Habit Tracker"

    # Locale
    timezone: str = "UTC"

    # App
    log_level: str = "INFO"

    model_config = {"env_prefix": "HABITLINE_", "env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
