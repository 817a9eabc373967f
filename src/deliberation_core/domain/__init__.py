from deliberation_core.domain.errors import (
    BracketStateError,
    ConfigurationError,
    DeliberationError,
    InvalidDatePresetError,
    UnknownModeError,
    UnknownProtocolError,
)
from deliberation_core.domain.metrics import ModeMetricsEngine
from deliberation_core.domain.parsing import ResponseParser
from deliberation_core.domain.ranking import RankingAggregator
from deliberation_core.domain.tournament import TournamentEngine
from deliberation_core.domain.weighting import ConfidenceWeighter

__all__ = [
    "BracketStateError",
    "ConfidenceWeighter",
    "ConfigurationError",
    "DeliberationError",
    "InvalidDatePresetError",
    "ModeMetricsEngine",
    "RankingAggregator",
    "ResponseParser",
    "TournamentEngine",
    "UnknownModeError",
    "UnknownProtocolError",
]
