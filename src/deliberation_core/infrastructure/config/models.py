from typing import Literal

from pydantic import BaseModel, Field, field_validator

from deliberation_core.shared.constants import (
    DATE_PRESET_DAYS,
    DEFAULT_DATE_PRESET,
    DEFAULT_TEMPERATURE,
    LEADERBOARD_TIME_CAP_MS,
)

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class WeightingConfig(BaseModel):
    temperature: float = Field(default=DEFAULT_TEMPERATURE, gt=0.0, allow_inf_nan=False)


class MetricsConfig(BaseModel):
    strict_modes: bool = False


class AnalyticsConfig(BaseModel):
    default_preset: str = DEFAULT_DATE_PRESET
    leaderboard_time_cap_ms: int = Field(default=LEADERBOARD_TIME_CAP_MS, gt=0)

    @field_validator("default_preset")
    @classmethod
    def _known_preset(cls, value: str) -> str:
        if value not in DATE_PRESET_DAYS:
            raise ValueError(
                f"must be one of {', '.join(DATE_PRESET_DAYS)}, got '{value}'"
            )
        return value


class LoggingConfig(BaseModel):
    level: LogLevel = "INFO"
    log_file: str | None = None
    json_console: bool = False

    @field_validator("level", mode="before")
    @classmethod
    def _upper_level(cls, value: object) -> object:
        return value.upper() if isinstance(value, str) else value


class DeliberationConfig(BaseModel):
    weighting: WeightingConfig = Field(default_factory=WeightingConfig)
    metrics: MetricsConfig = Field(default_factory=MetricsConfig)
    analytics: AnalyticsConfig = Field(default_factory=AnalyticsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
