from collections.abc import Sequence

from deliberation_core.domain.metrics.helpers import (
    RunningMean,
    ScoreAverages,
    dimension_averages,
    filter_by_stage_type,
)
from deliberation_core.domain.metrics.models import BrainstormMetrics
from deliberation_core.domain.metrics.payloads import (
    ClusterScoresPayload,
    IdeationPayload,
)
from deliberation_core.domain.records import StageRecord
from deliberation_core.shared.statistics import round_half_up


def compute_brainstorm_metrics(stages: Sequence[StageRecord]) -> BrainstormMetrics:
    ideation = filter_by_stage_type(stages, "ideation", "ideas")
    clustering = filter_by_stage_type(stages, "clustering", "cluster_scoring")

    ideas = RunningMean()
    for stage in ideation:
        payload = IdeationPayload.from_stage(stage)
        if payload is None:
            continue
        idea_count = (
            len(payload.ideas) if payload.ideas is not None else payload.idea_count
        )
        if idea_count > 0:
            ideas.add(idea_count)

    cluster_scores = ScoreAverages()
    for stage in clustering:
        scored = ClusterScoresPayload.from_stage(stage)
        if scored is not None:
            cluster_scores.add_scores(scored.scores)

    return BrainstormMetrics(
        avg_idea_count=round_half_up(ideas.value, 1),
        cluster_score_averages=dimension_averages(cluster_scores),
    )
