"""Per-protocol metric shapes.

``ModeMetrics`` is a union discriminated on ``kind``. Each variant carries
only the statistics meaningful for its protocol.
"""

from typing import Annotated, Literal

from pydantic import Field

from deliberation_core.domain.ranking.models import (
    AggregateRanking,
    WinRateEntry,
)
from deliberation_core.domain.records import FrozenModel


class ModelWins(FrozenModel):
    model: str
    wins: int


class MatchupWinRate(FrozenModel):
    model: str
    win_rate: float
    matches: int


class VerdictCount(FrozenModel):
    verdict: str
    count: int


class DecisionCount(FrozenModel):
    decision: str
    count: int


class BucketCount(FrozenModel):
    bucket: str
    count: int


class SeverityCount(FrozenModel):
    severity: str
    count: int


class MandateCount(FrozenModel):
    mandate: str
    count: int


class RoleCount(FrozenModel):
    role: str
    count: int


class ClaimTypeCount(FrozenModel):
    type: str
    count: int


class DimensionAverage(FrozenModel):
    dimension: str
    avg_score: float


class CriterionAverage(FrozenModel):
    criterion: str
    avg_score: float


class StepWordCount(FrozenModel):
    step: int
    avg_word_count: int


class CouncilMetrics(FrozenModel):
    kind: Literal["council"] = "council"
    win_rates: list[WinRateEntry] = Field(default_factory=list)
    avg_rankings: list[AggregateRanking] = Field(default_factory=list)


class VoteMetrics(FrozenModel):
    kind: Literal["vote"] = "vote"
    winner_distribution: list[ModelWins] = Field(default_factory=list)
    tiebreaker_rate: float = 0.0
    avg_win_margin: float = 0.0


class JuryMetrics(FrozenModel):
    kind: Literal["jury"] = "jury"
    verdict_distribution: list[VerdictCount] = Field(default_factory=list)
    dimension_averages: list[DimensionAverage] = Field(default_factory=list)
    juror_consensus_rate: float = 0.0


class DebateMetrics(FrozenModel):
    kind: Literal["debate"] = "debate"
    revision_decision_dist: list[DecisionCount] = Field(default_factory=list)
    winner_distribution: list[ModelWins] = Field(default_factory=list)
    avg_word_count_delta: int = 0


class TournamentMetrics(FrozenModel):
    kind: Literal["tournament"] = "tournament"
    champion_distribution: list[ModelWins] = Field(default_factory=list)
    matchup_win_rates: list[MatchupWinRate] = Field(default_factory=list)


class DelphiMetrics(FrozenModel):
    kind: Literal["delphi"] = "delphi"
    avg_convergence_rounds: float = 0.0
    confidence_distribution: list[BucketCount] = Field(default_factory=list)


class ConfidenceMetrics(FrozenModel):
    kind: Literal["confidence_weighted"] = "confidence_weighted"
    confidence_histogram: list[BucketCount] = Field(default_factory=list)
    outlier_rate: float = 0.0
    avg_confidence: float = 0.0


class RedTeamMetrics(FrozenModel):
    kind: Literal["red_team"] = "red_team"
    severity_distribution: list[SeverityCount] = Field(default_factory=list)
    defense_accept_rate: float = 0.0


class ChainMetrics(FrozenModel):
    kind: Literal["chain"] = "chain"
    avg_word_count_progression: list[StepWordCount] = Field(default_factory=list)
    mandate_distribution: list[MandateCount] = Field(default_factory=list)
    skip_rate: float = 0.0


class SpecialistPanelMetrics(FrozenModel):
    kind: Literal["specialist_panel"] = "specialist_panel"
    role_distribution: list[RoleCount] = Field(default_factory=list)


class BlueprintMetrics(FrozenModel):
    kind: Literal["blueprint"] = "blueprint"
    avg_section_count: float = 0.0
    avg_word_count: int = 0
    todo_marker_rate: float = 0.0


class PeerReviewMetrics(FrozenModel):
    kind: Literal["peer_review"] = "peer_review"
    finding_severity_dist: list[SeverityCount] = Field(default_factory=list)
    rubric_score_averages: list[CriterionAverage] = Field(default_factory=list)
    consensus_rate: float = 0.0


class DecomposeMetrics(FrozenModel):
    kind: Literal["decompose"] = "decompose"
    avg_parallelism_efficiency: float = 0.0
    task_success_rate: float = 0.0
    avg_wave_count: float = 0.0


class BrainstormMetrics(FrozenModel):
    kind: Literal["brainstorm"] = "brainstorm"
    avg_idea_count: float = 0.0
    cluster_score_averages: list[DimensionAverage] = Field(default_factory=list)


class FactCheckMetrics(FrozenModel):
    kind: Literal["fact_check"] = "fact_check"
    claim_type_distribution: list[ClaimTypeCount] = Field(default_factory=list)
    verdict_distribution: list[VerdictCount] = Field(default_factory=list)
    avg_agreement_rate: float = 0.0


ModeMetrics = Annotated[
    CouncilMetrics
    | VoteMetrics
    | JuryMetrics
    | DebateMetrics
    | TournamentMetrics
    | DelphiMetrics
    | ConfidenceMetrics
    | RedTeamMetrics
    | ChainMetrics
    | SpecialistPanelMetrics
    | BlueprintMetrics
    | PeerReviewMetrics
    | DecomposeMetrics
    | BrainstormMetrics
    | FactCheckMetrics,
    Field(discriminator="kind"),
]
