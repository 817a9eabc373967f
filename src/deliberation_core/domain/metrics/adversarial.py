from collections.abc import Sequence

from deliberation_core.domain.metrics.helpers import (
    Tally,
    filter_by_stage_type,
    rate,
)
from deliberation_core.domain.metrics.models import RedTeamMetrics, SeverityCount
from deliberation_core.domain.metrics.payloads import (
    AttackPayload,
    DefenseOutcomePayload,
)
from deliberation_core.domain.records import StageRecord


def compute_red_team_metrics(stages: Sequence[StageRecord]) -> RedTeamMetrics:
    attacks = filter_by_stage_type(stages, "attack", "red_team_attack")
    defenses = filter_by_stage_type(stages, "defense", "red_team_defense")
    judgments = filter_by_stage_type(stages, "judgment", "red_team_judgment")

    severities = Tally()
    for stage in attacks:
        attack = AttackPayload.from_stage(stage)
        if attack is not None:
            severities.add(attack.severity if attack.severity is not None else "medium")

    accepted = 0
    judged = 0
    for stage in [*judgments, *defenses]:
        outcome = DefenseOutcomePayload.from_stage(stage)
        if outcome is None:
            continue
        judged += 1
        if outcome.accepted:
            accepted += 1

    return RedTeamMetrics(
        severity_distribution=severities.to_list(
            lambda severity, count: SeverityCount(severity=severity, count=count)
        ),
        defense_accept_rate=rate(accepted, judged),
    )
