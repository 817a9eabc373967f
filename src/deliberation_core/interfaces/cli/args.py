import argparse
from typing import Any

from deliberation_core.__about__ import __version__
from deliberation_core.domain.parsing import PARSE_PROTOCOLS
from deliberation_core.shared.constants import DATE_PRESET_DAYS, DEFAULT_CONFIG_FILE

MODE_FAMILIES = (
    "evaluation",
    "adversarial",
    "sequential",
    "role_based",
    "algorithmic",
    "creative",
    "verification",
)


def _add_common_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-d",
        "--debug",
        action="store_true",
        help="Enable detailed debug logging",
    )
    parser.add_argument(
        "-c",
        "--config",
        default=None,
        help=f"Path to config file (default: {DEFAULT_CONFIG_FILE} if present)",
    )
    parser.add_argument("--log-file", default=None, help="Write JSON logs to this file")
    parser.add_argument(
        "--no-color", help="Disable colored output", action="store_true"
    )


def _add_input_arg(parser: argparse.ArgumentParser, help_text: str) -> None:
    parser.add_argument("file", type=str, help=f"{help_text} ('-' reads stdin)")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="deliberation-core",
        description="Deliberation Core - parse, aggregate and analyse multi-model deliberations",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"Deliberation Core {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    parse_parser = subparsers.add_parser(
        "parse", help="Extract a structured judgment from model output"
    )
    parse_parser.add_argument("protocol", choices=sorted(PARSE_PROTOCOLS))
    _add_input_arg(parse_parser, "Text file with the model output")
    _add_common_args(parse_parser)

    aggregate_parser = subparsers.add_parser(
        "aggregate", help="Average peer rankings per model"
    )
    _add_input_arg(
        aggregate_parser,
        "JSON file with 'label_map' and 'rankings' or 'evaluations'",
    )
    _add_common_args(aggregate_parser)

    weigh_parser = subparsers.add_parser(
        "weigh", help="Softmax-weight answers by confidence"
    )
    _add_input_arg(weigh_parser, "JSON list of {model, rawConfidence} or {model, text}")
    weigh_parser.add_argument(
        "-t",
        "--temperature",
        type=float,
        default=None,
        help="Softmax temperature (default: weighting.temperature from config)",
    )
    _add_common_args(weigh_parser)

    bracket_parser = subparsers.add_parser(
        "bracket", help="Play a single-elimination bracket from recorded verdicts"
    )
    _add_input_arg(bracket_parser, "JSON file with 'contestants' and 'judgments'")
    _add_common_args(bracket_parser)

    metrics_parser = subparsers.add_parser(
        "metrics", help="Compute protocol metrics from stage records"
    )
    metrics_parser.add_argument("mode", type=str, help="Protocol id, e.g. jury")
    _add_input_arg(metrics_parser, "JSON list of stage records")
    metrics_parser.add_argument(
        "--strict",
        action="store_true",
        default=None,
        help="Fail on unknown modes instead of returning the council shell",
    )
    _add_common_args(metrics_parser)

    analytics_parser = subparsers.add_parser(
        "analytics", help="Build the dashboard report from exported rows"
    )
    _add_input_arg(analytics_parser, "JSON file with exported analytics rows")
    analytics_parser.add_argument(
        "-p",
        "--preset",
        choices=list(DATE_PRESET_DAYS),
        default=None,
        help="Date range preset (default: analytics.default_preset from config)",
    )
    _add_common_args(analytics_parser)

    modes_parser = subparsers.add_parser("modes", help="List deliberation protocols")
    modes_parser.add_argument("--family", choices=MODE_FAMILIES, default=None)
    _add_common_args(modes_parser)

    return parser


def parse_arguments(argv: list[str] | None = None) -> dict[str, Any]:
    parser = _build_parser()
    args_dict = vars(parser.parse_args(argv))
    if args_dict.get("command") is None:
        args_dict = vars(parser.parse_args(["modes"]))
    return args_dict
