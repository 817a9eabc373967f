from deliberation_core.domain.metrics.engine import (
    METRIC_ROUTINES,
    MetricRoutine,
    ModeMetricsEngine,
)
from deliberation_core.domain.metrics.models import (
    BlueprintMetrics,
    BrainstormMetrics,
    ChainMetrics,
    ConfidenceMetrics,
    CouncilMetrics,
    DebateMetrics,
    DecomposeMetrics,
    DelphiMetrics,
    FactCheckMetrics,
    JuryMetrics,
    ModeMetrics,
    PeerReviewMetrics,
    RedTeamMetrics,
    SpecialistPanelMetrics,
    TournamentMetrics,
    VoteMetrics,
)

__all__ = [
    "METRIC_ROUTINES",
    "BlueprintMetrics",
    "BrainstormMetrics",
    "ChainMetrics",
    "ConfidenceMetrics",
    "CouncilMetrics",
    "DebateMetrics",
    "DecomposeMetrics",
    "DelphiMetrics",
    "FactCheckMetrics",
    "JuryMetrics",
    "MetricRoutine",
    "ModeMetrics",
    "ModeMetricsEngine",
    "PeerReviewMetrics",
    "RedTeamMetrics",
    "SpecialistPanelMetrics",
    "TournamentMetrics",
    "VoteMetrics",
]
