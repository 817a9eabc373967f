import os
from typing import Any

# Environment variable -> (section, key) in the configuration tree
ENV_OVERRIDES: dict[str, tuple[str, str]] = {
    "DELIBERATION_TEMPERATURE": ("weighting", "temperature"),
    "DELIBERATION_STRICT_MODES": ("metrics", "strict_modes"),
    "DELIBERATION_DATE_PRESET": ("analytics", "default_preset"),
    "DELIBERATION_LEADERBOARD_CAP_MS": ("analytics", "leaderboard_time_cap_ms"),
    "LOG_LEVEL": ("logging", "level"),
}


def collect_env_overrides() -> dict[str, Any]:
    """Nested overrides for every recognised variable that is set.

    Values stay as strings; model validation coerces and rejects them.
    """
    overrides: dict[str, Any] = {}
    for variable, (section, key) in ENV_OVERRIDES.items():
        value = os.getenv(variable)
        if value is None or value == "":
            continue
        overrides.setdefault(section, {})[key] = value
    return overrides
