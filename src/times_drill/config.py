"""Configuration for times_drill.

Settings load from TIMES_DRILL_* environment variables, with optional
.env file support, via pydantic-settings.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

__all__ = [
    "RedisSettings",
    "DrillSettings",
    "TimesDrillConfig",
]

_ENV = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


class RedisSettings(BaseSettings):
    """Optional Redis backend for saved sessions.

    Leaving url unset keeps sessions in memory only.
    """

    model_config = SettingsConfigDict(env_prefix="TIMES_DRILL_REDIS_", **_ENV)

    url: str | None = None
    enabled: bool = True


class DrillSettings(BaseSettings):
    """Session lifetime and acknowledgment cool-downs."""

    model_config = SettingsConfigDict(env_prefix="TIMES_DRILL_", **_ENV)

    storage_key: str = "mult_game_v11"
    state_ttl_seconds: int = Field(default=86400, gt=0)

    # Seconds before the matching acknowledgment is accepted
    miss_ack_cooldown_seconds: float = Field(default=0.35, ge=0)
    level_up_cooldown_seconds: float = Field(default=1.0, ge=0)
    completed_cooldown_seconds: float = Field(default=1.0, ge=0)


class TimesDrillConfig(BaseSettings):
    """Top-level configuration.

    Example:
        config = TimesDrillConfig()
        if config.redis_enabled:
            store = await RedisStateStore.from_config(config)
    """

    model_config = SettingsConfigDict(env_prefix="TIMES_DRILL_", **_ENV)

    redis: RedisSettings = Field(default_factory=RedisSettings)
    drill: DrillSettings = Field(default_factory=DrillSettings)

    log_level: str = "INFO"
    log_json: bool = False

    @property
    def redis_enabled(self) -> bool:
        return self.redis.enabled and self.redis.url is not None
