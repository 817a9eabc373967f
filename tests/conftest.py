"""Pytest configuration and shared fixtures."""

import tempfile
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import pytest

from deliberation_core.domain.records import StageRecord
from deliberation_core.domain.tournament import Contestant


@pytest.fixture()  # type: ignore[misc]
def tmp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture()  # type: ignore[misc]
def make_stage() -> Callable[..., StageRecord]:
    """Factory for stage records with sensible defaults."""

    def _make(
        stage_type: str,
        parsed_data: Any = None,
        message_id: str = "msg-1",
        **kwargs: Any,
    ) -> StageRecord:
        return StageRecord(
            message_id=message_id,
            stage_type=stage_type,
            parsed_data=parsed_data,
            **kwargs,
        )

    return _make


@pytest.fixture()  # type: ignore[misc]
def council_label_map() -> dict[str, str]:
    """Label map for a three-model council round."""
    return {"Response A": "m1", "Response B": "m2", "Response C": "m3"}


@pytest.fixture()  # type: ignore[misc]
def five_contestants() -> list[Contestant]:
    """Five contestants, enough to force a bye in round one."""
    return [
        Contestant(model=f"m{i}", response=f"answer from m{i}", response_time_ms=100 * i)
        for i in range(1, 6)
    ]


@pytest.fixture()  # type: ignore[misc]
def sample_config() -> dict[str, Any]:
    """Sample configuration for testing."""
    return {
        "weighting": {"temperature": 0.5},
        "metrics": {"strict_modes": True},
        "analytics": {
            "default_preset": "7d",
            "leaderboard_time_cap_ms": 30000,
        },
        "logging": {"level": "warning"},
    }


@pytest.fixture(autouse=True)  # type: ignore[misc]
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep configuration overrides from the host environment out of tests."""
    for variable in (
        "DELIBERATION_TEMPERATURE",
        "DELIBERATION_STRICT_MODES",
        "DELIBERATION_DATE_PRESET",
        "DELIBERATION_LEADERBOARD_CAP_MS",
        "LOG_LEVEL",
        "FORCE_COLOR",
        "NO_COLOR",
    ):
        monkeypatch.delenv(variable, raising=False)
