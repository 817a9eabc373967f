"""Integration test fixtures and utilities."""

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
import yaml


@pytest.fixture()  # type: ignore[misc]
def workdir(tmp_dir: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run inside an empty directory so no stray deliberation.yml is picked up."""
    monkeypatch.chdir(tmp_dir)
    return tmp_dir


@pytest.fixture()  # type: ignore[misc]
def write_json(workdir: Path) -> Callable[[str, Any], Path]:
    """Write a JSON input file and return its path."""

    def _write(name: str, payload: Any) -> Path:
        path = workdir / name
        path.write_text(json.dumps(payload), encoding="utf-8")
        return path

    return _write


@pytest.fixture()  # type: ignore[misc]
def write_config(workdir: Path) -> Callable[[dict[str, Any], str], Path]:
    """Write a YAML configuration file and return its path."""

    def _write(settings: dict[str, Any], name: str = "config.yml") -> Path:
        path = workdir / name
        with open(path, "w", encoding="utf-8") as f:
            yaml.dump(settings, f)
        return path

    return _write


@pytest.fixture()  # type: ignore[misc]
def cli_args() -> Callable[..., dict[str, Any]]:
    """Argument dictionaries shaped like parse_arguments() output."""

    def _args(command: str, **overrides: Any) -> dict[str, Any]:
        args: dict[str, Any] = {
            "command": command,
            "config": None,
            "debug": False,
            "log_file": None,
            "no_color": True,
        }
        args.update(overrides)
        return args

    return _args
