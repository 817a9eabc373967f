from deliberation_core.infrastructure.config.defaults import (
    ANALYTICS,
    LOGGING,
    METRICS,
    WEIGHTING,
    get_defaults,
)
from deliberation_core.infrastructure.config.env import (
    ENV_OVERRIDES,
    collect_env_overrides,
)
from deliberation_core.infrastructure.config.loader import Config, validate_config
from deliberation_core.infrastructure.config.models import (
    AnalyticsConfig,
    DeliberationConfig,
    LoggingConfig,
    MetricsConfig,
    WeightingConfig,
)

__all__ = [
    "ANALYTICS",
    "ENV_OVERRIDES",
    "LOGGING",
    "METRICS",
    "WEIGHTING",
    "AnalyticsConfig",
    "Config",
    "DeliberationConfig",
    "LoggingConfig",
    "MetricsConfig",
    "WeightingConfig",
    "collect_env_overrides",
    "get_defaults",
    "validate_config",
]
