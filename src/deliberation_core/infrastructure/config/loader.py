from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from deliberation_core.infrastructure.config.defaults import get_defaults
from deliberation_core.infrastructure.config.env import collect_env_overrides
from deliberation_core.infrastructure.config.models import DeliberationConfig
from deliberation_core.shared.logging import get_contextual_logger
from deliberation_core.shared.mapping_utils import deep_merge

logger = get_contextual_logger("deliberation.config")


def _build_settings(
    config_data: dict[str, Any],
) -> tuple[DeliberationConfig | None, list[str]]:
    errors = [
        f"Section '{section}' must be a dictionary"
        for section, value in config_data.items()
        if value is not None and not isinstance(value, dict)
    ]
    if errors:
        return None, errors

    try:
        return DeliberationConfig.model_validate(config_data), []
    except ValidationError as e:
        return None, [
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
            for err in e.errors()
        ]


def validate_config(config_data: dict[str, Any]) -> tuple[bool, list[str]]:
    """Check merged settings; errors are ``"<field path>: <message>"`` strings."""
    settings, errors = _build_settings(config_data)
    logger.debug(f"Validated config sections {sorted(config_data)}: {len(errors)} errors")
    return settings is not None, errors


class Config:
    """YAML configuration merged over package defaults and the environment.

    Precedence, lowest first: defaults, the YAML file, environment variables.
    """

    def __init__(self, config_path: str | None = None) -> None:
        self.config_path = Path(config_path) if config_path else None
        self.config_data: dict[str, Any] = {}
        self._settings: DeliberationConfig | None = None

    def _read_file(self) -> dict[str, Any] | None:
        if self.config_path is None:
            logger.error("No config path specified.")
            return None
        if not self.config_path.is_file():
            logger.error(f"Config file not found at {self.config_path.resolve()}")
            return None

        try:
            document = yaml.safe_load(self.config_path.read_text(encoding="utf-8"))
        except yaml.YAMLError as e:
            logger.error(f"Failed to parse YAML config file: {e}")
            return None

        if document is None:
            return {}
        if not isinstance(document, dict):
            logger.error("Config file must contain a mapping at the top level")
            return None
        return document

    def _apply(self, user_config: dict[str, Any]) -> tuple[bool, list[str]]:
        self.config_data = deep_merge(get_defaults(), user_config)
        overrides = collect_env_overrides()
        if overrides:
            logger.debug(f"Applying environment overrides: {sorted(overrides)}")
            self.config_data = deep_merge(self.config_data, overrides)

        self._settings, errors = _build_settings(self.config_data)
        return self._settings is not None, errors

    def load(self) -> bool:
        try:
            user_config = self._read_file()
        except OSError as e:
            logger.error(f"Failed to load configuration: {e!s}")
            return False
        if user_config is None:
            return False

        is_valid, errors = self._apply(user_config)
        if not is_valid:
            logger.error("Configuration validation failed.")
            for error in errors:
                logger.error(f"  - {error}")
            return False

        logger.info(f"Loaded configuration from {self.config_path}")
        return True

    def load_from_dict(self, settings: dict[str, Any]) -> tuple[bool, list[str]]:
        logger.debug("Loading configuration from dictionary")
        return self._apply(settings)

    @property
    def settings(self) -> DeliberationConfig:
        """Validated settings; defaults when nothing has been loaded."""
        return self._settings or DeliberationConfig()
