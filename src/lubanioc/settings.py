from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """Runtime settings read from ``LUBAN_*`` environment variables."""

    model_config = SettingsConfigDict(env_prefix="LUBAN_")

    datasource: str = "memory"
    log_level: str = "INFO"
