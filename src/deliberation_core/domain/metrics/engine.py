"""Dispatch from a protocol identifier to its metric routine."""

from collections.abc import Callable, Sequence

from deliberation_core.domain.errors import UnknownModeError
from deliberation_core.domain.metrics.adversarial import compute_red_team_metrics
from deliberation_core.domain.metrics.algorithmic import (
    compute_confidence_metrics,
    compute_decompose_metrics,
    compute_tournament_metrics,
)
from deliberation_core.domain.metrics.creative import compute_brainstorm_metrics
from deliberation_core.domain.metrics.evaluation import (
    compute_debate_metrics,
    compute_delphi_metrics,
    compute_jury_metrics,
    compute_vote_metrics,
)
from deliberation_core.domain.metrics.models import CouncilMetrics, ModeMetrics
from deliberation_core.domain.metrics.role_based import (
    compute_blueprint_metrics,
    compute_peer_review_metrics,
    compute_specialist_panel_metrics,
)
from deliberation_core.domain.metrics.sequential import compute_chain_metrics
from deliberation_core.domain.metrics.verification import (
    compute_fact_check_metrics,
)
from deliberation_core.domain.records import StageRecord
from deliberation_core.shared.logging import get_contextual_logger

MetricRoutine = Callable[[Sequence[StageRecord]], ModeMetrics]


def compute_council_metrics(_stages: Sequence[StageRecord]) -> CouncilMetrics:
    # Council statistics come from the win-rate pipeline, not from stages
    return CouncilMetrics()


METRIC_ROUTINES: dict[str, MetricRoutine] = {
    "council": compute_council_metrics,
    "vote": compute_vote_metrics,
    "jury": compute_jury_metrics,
    "debate": compute_debate_metrics,
    "tournament": compute_tournament_metrics,
    "delphi": compute_delphi_metrics,
    "confidence_weighted": compute_confidence_metrics,
    "red_team": compute_red_team_metrics,
    "chain": compute_chain_metrics,
    "specialist_panel": compute_specialist_panel_metrics,
    "blueprint": compute_blueprint_metrics,
    "peer_review": compute_peer_review_metrics,
    "decompose": compute_decompose_metrics,
    "brainstorm": compute_brainstorm_metrics,
    "fact_check": compute_fact_check_metrics,
}


class ModeMetricsEngine:
    def __init__(self, strict_modes: bool = False) -> None:
        self.strict_modes = strict_modes
        self.logger = get_contextual_logger("deliberation.metrics")

    def compute_metrics(
        self,
        mode: str,
        stages: Sequence[StageRecord],
        strict: bool | None = None,
    ) -> ModeMetrics:
        """Run the routine registered for ``mode`` over ``stages``.

        Unknown modes fall back to the empty council shell unless strict
        validation is on, in which case ``UnknownModeError`` is raised.
        """
        strict = self.strict_modes if strict is None else strict
        routine = METRIC_ROUTINES.get(mode)
        if routine is None:
            if strict:
                self.logger.warning(f"Rejected unknown mode '{mode}'")
                raise UnknownModeError(mode)
            self.logger.debug(f"No metric routine for mode '{mode}', using council shell")
            return CouncilMetrics()

        self.logger.debug(f"Computing {mode} metrics over {len(stages)} stages")
        return routine(stages)
