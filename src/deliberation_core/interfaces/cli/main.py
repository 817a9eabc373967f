#!/usr/bin/env python3

import json
import sys
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any, TextIO

import colorama
from pydantic import ValidationError

from deliberation_core.domain.analytics import AnalyticsAggregator
from deliberation_core.domain.errors import DeliberationError, FatalError
from deliberation_core.domain.judgments import RankingJudgment, WinnerJudgment
from deliberation_core.domain.metrics import ModeMetricsEngine
from deliberation_core.domain.modes import MODE_REGISTRY, modes_by_family
from deliberation_core.domain.parsing import (
    ResponseParser,
    parse_confidence,
    parse_ranking,
    parse_winner,
)
from deliberation_core.domain.ranking import RankingAggregator, create_label_map
from deliberation_core.domain.records import (
    CrossModeRow,
    LabelMapRow,
    MessageDateRow,
    ModeCount,
    RankingRow,
    ResponseTimeRow,
    StageRecord,
)
from deliberation_core.domain.tournament import (
    Contestant,
    EventHandler,
    Matchup,
    TournamentEngine,
)
from deliberation_core.domain.weighting import ConfidenceAnswer, ConfidenceWeighter
from deliberation_core.infrastructure.config import Config
from deliberation_core.interfaces.cli.args import parse_arguments
from deliberation_core.interfaces.cli.ui import cli_error, configure_display
from deliberation_core.shared.constants import DEFAULT_CONFIG_FILE
from deliberation_core.shared.json_utils import sanitize_for_json
from deliberation_core.shared.logging import get_contextual_logger, setup_logging


class LoggingEventHandler(EventHandler):
    def __init__(self) -> None:
        self.logger = get_contextual_logger("deliberation.cli.events")

    def publish(self, event_name: str, data: dict[str, Any]) -> None:
        self.logger.debug(f"Event {event_name}: {sorted(data)}")


class App:
    def __init__(
        self,
        args: dict[str, Any] | None = None,
        stdin: TextIO | None = None,
    ) -> None:
        self.args = args if args is not None else parse_arguments()
        self.stdin = stdin
        self.logger = get_contextual_logger("deliberation.cli")
        self.config = Config()

    def _fatal_error(self, message: str) -> None:
        self.logger.error(message)
        raise FatalError(message)

    def _load_config(self) -> Config:
        config_path = self.args.get("config")
        if config_path is None and Path(DEFAULT_CONFIG_FILE).exists():
            config_path = DEFAULT_CONFIG_FILE

        if config_path is None:
            config_obj = Config()
            is_valid, errors = config_obj.load_from_dict({})
            if not is_valid:
                self._fatal_error(f"Invalid configuration: {'; '.join(errors)}")
            return config_obj

        config_obj = Config(str(config_path))
        if not config_obj.load():
            self._fatal_error(
                f"Failed to load configuration from '{config_path}'. "
                f"Please ensure the file exists and is valid YAML. "
                f"Use --config to specify a different config file."
            )
        return config_obj

    def _reconfigure_logging_from_config(self) -> None:
        logging_settings = self.config.settings.logging
        setup_logging(
            log_file=self.args.get("log_file") or logging_settings.log_file,
            level=logging_settings.level,
            debug=bool(self.args.get("debug", False)),
            json_console=logging_settings.json_console,
            use_color=False if self.args.get("no_color") else None,
        )

    def _read_text(self) -> str:
        file_arg = str(self.args.get("file", ""))
        if file_arg == "-":
            return (self.stdin or sys.stdin).read()

        path = Path(file_arg)
        if not path.exists() or not path.is_file():
            self._fatal_error(f"Input file not found: {path}")
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            self._fatal_error(f"Failed to read input file '{path}': {e!s}")
        return ""

    def _read_json(self) -> Any:
        text = self._read_text()
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            self._fatal_error(f"Input is not valid JSON: {e!s}")
        return None

    def _read_json_object(self) -> dict[str, Any]:
        data = self._read_json()
        if not isinstance(data, dict):
            self._fatal_error("Input must be a JSON object")
        return data

    def _read_json_list(self) -> list[Any]:
        data = self._read_json()
        if not isinstance(data, list):
            self._fatal_error("Input must be a JSON list")
        return data

    def _parse(self) -> Any:
        return ResponseParser().parse(str(self.args["protocol"]), self._read_text())

    def _aggregate(self) -> Any:
        data = self._read_json_object()
        label_map = data.get("label_map")
        if label_map is None:
            label_map = create_label_map(list(data.get("models", [])))

        if "evaluations" in data:
            rankings = [parse_ranking(str(text)) for text in data["evaluations"]]
        else:
            rankings = [
                RankingJudgment(entries=entries) for entries in data.get("rankings", [])
            ]

        return {
            "label_map": label_map,
            "rankings": RankingAggregator().aggregate(rankings, label_map),
        }

    def _weigh(self) -> Any:
        answers = []
        for item in self._read_json_list():
            if isinstance(item, dict) and "text" in item and "rawConfidence" not in item:
                item = {
                    "model": item.get("model"),
                    "raw_confidence": parse_confidence(str(item["text"])).confidence,
                }
            answers.append(ConfidenceAnswer.model_validate(item))

        temperature = self.args.get("temperature")
        if temperature is None:
            temperature = self.config.settings.weighting.temperature
        return ConfidenceWeighter(temperature=temperature).weigh(answers)

    def _bracket(self) -> Any:
        data = self._read_json_object()
        contestants = [Contestant.model_validate(c) for c in data.get("contestants", [])]
        judgments: Iterator[Any] = iter(data.get("judgments", []))

        def judge(_matchup: Matchup) -> WinnerJudgment | None:
            text = next(judgments, None)
            return parse_winner(text) if isinstance(text, str) else None

        engine = TournamentEngine(event_handler=LoggingEventHandler())
        rounds, champion = engine.run(contestants, judge)
        return {"rounds": rounds, "champion": champion}

    def _metrics(self) -> Any:
        stages = [StageRecord.model_validate(s) for s in self._read_json_list()]
        engine = ModeMetricsEngine(strict_modes=self.config.settings.metrics.strict_modes)
        return engine.compute_metrics(
            str(self.args["mode"]), stages, strict=self.args.get("strict")
        )

    def _analytics(self) -> Any:
        data = self._read_json_object()
        settings = self.config.settings.analytics
        preset = self.args.get("preset") or data.get("preset") or settings.default_preset
        aggregator = AnalyticsAggregator(
            leaderboard_time_cap_ms=settings.leaderboard_time_cap_ms
        )

        report = aggregator.build_report(
            preset=preset,
            total_sessions=int(data.get("totalSessions", 0)),
            total_queries=int(data.get("totalQueries", 0)),
            ranking_rows=[RankingRow.model_validate(r) for r in data.get("rankings", [])],
            label_map_rows=[LabelMapRow.model_validate(r) for r in data.get("labelMaps", [])],
            response_time_rows=[
                ResponseTimeRow.model_validate(r) for r in data.get("responseTimes", [])
            ],
            message_dates=[
                MessageDateRow.model_validate(r) for r in data.get("messageDates", [])
            ],
        )
        distribution = aggregator.mode_distribution(
            [ModeCount.model_validate(r) for r in data.get("modeCounts", [])]
        )
        return {
            "report": report,
            "extended_summary": aggregator.extended_summary(
                report.summary.total_sessions,
                report.summary.total_queries,
                report.response_times,
                report.win_rates,
                distribution,
            ),
            "mode_distribution": distribution,
            "cross_mode_leaderboard": aggregator.cross_mode_leaderboard(
                [CrossModeRow.model_validate(r) for r in data.get("crossModeRows", [])]
            ),
        }

    def _modes(self) -> Any:
        family = self.args.get("family")
        if family:
            return modes_by_family(family)
        return list(MODE_REGISTRY.values())

    def _handlers(self) -> dict[str, Callable[[], Any]]:
        return {
            "parse": self._parse,
            "aggregate": self._aggregate,
            "weigh": self._weigh,
            "bracket": self._bracket,
            "metrics": self._metrics,
            "analytics": self._analytics,
            "modes": self._modes,
        }

    def execute(self) -> Any:
        """Run the selected command and return its JSON-ready result."""
        self.config = self._load_config()
        self._reconfigure_logging_from_config()

        command = str(self.args.get("command", "modes"))
        handler = self._handlers().get(command)
        if handler is None:
            self._fatal_error(f"Unknown command: {command}")
            return None

        mode = self.args.get("mode")
        try:
            with self.logger.session_context(mode=mode, phase=command):
                self.logger.debug(f"Running command '{command}'")
                result = handler()
        except ValidationError as e:
            self._fatal_error(f"Invalid input: {e.error_count()} validation errors\n{e}")
            return None
        return sanitize_for_json(result)

    def run(self, stdout: TextIO | None = None) -> None:
        output = json.dumps(self.execute(), indent=2, ensure_ascii=False)
        print(output, file=stdout or sys.stdout)


def run_from_cli() -> None:
    from dotenv import load_dotenv

    load_dotenv()

    args = parse_arguments()

    setup_logging(
        debug=bool(args.get("debug", False)),
        use_color=False if args.get("no_color") else None,
    )

    configure_display(use_color=not bool(args.get("no_color", False)))

    colorama.init()

    try:
        App(args).run()
    except FatalError:
        sys.exit(1)
    except DeliberationError as e:
        cli_error(e.message)
        sys.exit(1)
    except KeyboardInterrupt:
        print("\nInterrupted by user. Exiting...", file=sys.stderr)
        sys.exit(130)


if __name__ == "__main__":
    run_from_cli()
