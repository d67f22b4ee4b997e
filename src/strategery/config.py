"""Runtime configuration for the strategery simulation."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-driven runtime settings."""

    model_config = SettingsConfigDict(env_prefix="STRATEGERY_", env_file=".env", extra="ignore")

    app_name: str = "strategery"
    log_level: str = "INFO"
    world_width: int = Field(default=64, gt=0)
    world_height: int = Field(default=64, gt=0)
    faction_count: int = Field(default=2, ge=0)
    tick_interval_seconds: float = Field(
        default=0.1,
        gt=0,
        description="Wall-clock pause between ticks in the real-time loop.",
    )
    max_tick_seconds: float = Field(
        default=1.0,
        gt=0,
        description="Upper bound applied to every tick's dt.",
    )
    max_planned_houses: int = Field(default=16, gt=0)
    order_log_path: str | None = Field(
        default=None,
        description="JSON lines file for the order journal; in-memory when unset.",
    )
    telemetry_enabled: bool = True


settings = Settings()
