"""Configuration management using Pydantic settings."""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from SKIRMISH_* environment variables or a .env file."""

    model_config = SettingsConfigDict(
        env_prefix="SKIRMISH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = "Grid Skirmish API"
    app_version: str = "1.0.0"

    # Unit stats applied when parsing a map
    start_hit_points: int = 200
    base_attack_power: int = 3

    # Sanity ceilings; maps whose factions can never meet would otherwise run forever
    max_rounds: Optional[int] = 10000
    search_power_ceiling: int = 1024

    event_page_limit: int = 500


settings = Settings()
