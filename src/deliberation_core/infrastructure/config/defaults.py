"""Default configuration values for the deliberation core.

Defaults live in Python dictionaries so they ship with the package and need
no YAML file at runtime.
"""

from typing import Any

from deliberation_core.shared.constants import (
    DEFAULT_DATE_PRESET,
    DEFAULT_TEMPERATURE,
    LEADERBOARD_TIME_CAP_MS,
)

WEIGHTING: dict[str, Any] = {
    "temperature": DEFAULT_TEMPERATURE,
}

METRICS: dict[str, Any] = {
    "strict_modes": False,  # True = unknown modes raise instead of yielding the council shell
}

ANALYTICS: dict[str, Any] = {
    "default_preset": DEFAULT_DATE_PRESET,
    "leaderboard_time_cap_ms": LEADERBOARD_TIME_CAP_MS,
}

LOGGING: dict[str, Any] = {
    "level": "INFO",
    "log_file": None,
    "json_console": False,
}


def get_defaults() -> dict[str, Any]:
    return {
        "weighting": dict(WEIGHTING),
        "metrics": dict(METRICS),
        "analytics": dict(ANALYTICS),
        "logging": dict(LOGGING),
    }
