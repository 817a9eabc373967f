from deliberation_core.__about__ import __version__
from deliberation_core.domain.analytics import (
    AnalyticsAggregator,
    AnalyticsReport,
    DateRange,
    resolve_date_preset,
)
from deliberation_core.domain.errors import (
    BracketStateError,
    ConfigurationError,
    DeliberationError,
    FatalError,
    InputError,
    InvalidDatePresetError,
    UnknownModeError,
    UnknownProtocolError,
)
from deliberation_core.domain.judgments import (
    ConfidenceJudgment,
    RankingEntry,
    RankingJudgment,
    SynthesisJudgment,
    VerdictJudgment,
    VoteJudgment,
    WinnerJudgment,
)
from deliberation_core.domain.metrics import (
    METRIC_ROUTINES,
    ModeMetrics,
    ModeMetricsEngine,
)
from deliberation_core.domain.modes import (
    MODE_REGISTRY,
    ModeDefinition,
    get_mode_definition,
    is_valid_mode,
    validate_model_count,
)
from deliberation_core.domain.parsing import PARSE_PROTOCOLS, ResponseParser
from deliberation_core.domain.ranking import (
    AggregateRanking,
    RankingAggregator,
    WinRateEntry,
    create_label_map,
)
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
    TournamentChampion,
    TournamentEngine,
    TournamentRound,
)
from deliberation_core.domain.weighting import (
    ConfidenceAnswer,
    ConfidenceWeight,
    ConfidenceWeighter,
)
from deliberation_core.infrastructure.config import Config, DeliberationConfig

__all__ = [
    "METRIC_ROUTINES",
    "MODE_REGISTRY",
    "PARSE_PROTOCOLS",
    "AggregateRanking",
    "AnalyticsAggregator",
    "AnalyticsReport",
    "BracketStateError",
    "ConfidenceAnswer",
    "ConfidenceJudgment",
    "ConfidenceWeight",
    "ConfidenceWeighter",
    "Config",
    "ConfigurationError",
    "Contestant",
    "CrossModeRow",
    "DateRange",
    "DeliberationConfig",
    "DeliberationError",
    "EventHandler",
    "FatalError",
    "InputError",
    "InvalidDatePresetError",
    "LabelMapRow",
    "Matchup",
    "MessageDateRow",
    "ModeCount",
    "ModeDefinition",
    "ModeMetrics",
    "ModeMetricsEngine",
    "RankingAggregator",
    "RankingEntry",
    "RankingJudgment",
    "RankingRow",
    "ResponseParser",
    "ResponseTimeRow",
    "StageRecord",
    "SynthesisJudgment",
    "TournamentChampion",
    "TournamentEngine",
    "TournamentRound",
    "UnknownModeError",
    "UnknownProtocolError",
    "VerdictJudgment",
    "VoteJudgment",
    "WinRateEntry",
    "WinnerJudgment",
    "__version__",
    "create_label_map",
    "get_mode_definition",
    "is_valid_mode",
    "resolve_date_preset",
    "validate_model_count",
]
