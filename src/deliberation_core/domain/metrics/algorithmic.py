"""Metric routines for tournament, confidence-weighted and decompose."""

from collections.abc import Sequence

from deliberation_core.domain.metrics.helpers import (
    RunningMean,
    Tally,
    filter_by_stage_type,
    model_wins,
    rate,
)
from deliberation_core.domain.metrics.models import (
    BucketCount,
    ConfidenceMetrics,
    DecomposeMetrics,
    MatchupWinRate,
    TournamentMetrics,
)
from deliberation_core.domain.metrics.payloads import (
    ChampionPayload,
    ConfidencePayload,
    MatchResultPayload,
    OutlierPayload,
    PlanPayload,
    ReassemblyPayload,
    TaskResultPayload,
)
from deliberation_core.domain.records import StageRecord
from deliberation_core.shared.statistics import round_half_up, safe_ratio


def compute_tournament_metrics(stages: Sequence[StageRecord]) -> TournamentMetrics:
    champion_stages = filter_by_stage_type(stages, "champion", "final_result")
    matchup_stages = filter_by_stage_type(stages, "matchup", "match_result")

    champions = Tally()
    for stage in champion_stages:
        payload = ChampionPayload.from_stage(stage)
        if payload is None:
            continue
        model = payload.champion if payload.champion is not None else stage.model
        if model:
            champions.add(model)

    # model -> [wins, matches]
    records: dict[str, list[int]] = {}
    for stage in matchup_stages:
        result = MatchResultPayload.from_stage(stage)
        if result is None:
            continue
        if result.winner:
            record = records.setdefault(result.winner, [0, 0])
            record[0] += 1
            record[1] += 1
        if result.loser:
            records.setdefault(result.loser, [0, 0])[1] += 1

    win_rates = [
        MatchupWinRate(model=model, win_rate=safe_ratio(wins, matches), matches=matches)
        for model, (wins, matches) in records.items()
    ]
    win_rates.sort(key=lambda entry: entry.win_rate, reverse=True)

    return TournamentMetrics(
        champion_distribution=model_wins(champions),
        matchup_win_rates=win_rates,
    )


def _confidence_bucket(confidence: float) -> str:
    if confidence >= 0.9:
        return "Very High (≥90%)"
    if confidence >= 0.75:
        return "High (75-89%)"
    if confidence >= 0.5:
        return "Medium (50-74%)"
    return "Low (<50%)"


def compute_confidence_metrics(stages: Sequence[StageRecord]) -> ConfidenceMetrics:
    response_stages = filter_by_stage_type(stages, "response", "confidence_response")
    outlier_stages = filter_by_stage_type(stages, "outlier", "outlier_detection")

    confidence = RunningMean()
    histogram = Tally()
    for stage in response_stages:
        payload = ConfidencePayload.from_stage(stage)
        if payload is None or payload.confidence <= 0:
            continue
        confidence.add(payload.confidence)
        histogram.add(_confidence_bucket(payload.confidence))

    outliers = 0
    checks = 0
    for stage in outlier_stages:
        flagged = OutlierPayload.from_stage(stage)
        if flagged is None:
            continue
        checks += 1
        if flagged.is_outlier is True:
            outliers += 1

    return ConfidenceMetrics(
        confidence_histogram=histogram.to_list(
            lambda bucket, count: BucketCount(bucket=bucket, count=count)
        ),
        outlier_rate=rate(outliers, checks),
        avg_confidence=round_half_up(confidence.value, 3),
    )


def compute_decompose_metrics(stages: Sequence[StageRecord]) -> DecomposeMetrics:
    plans = filter_by_stage_type(stages, "plan", "decomposition")
    tasks = filter_by_stage_type(stages, "task_result", "subtask")
    assemblies = filter_by_stage_type(stages, "assembly", "reassembly")

    waves = RunningMean()
    for stage in plans:
        plan = PlanPayload.from_stage(stage)
        if plan is None:
            continue
        if plan.wave_count > 0:
            waves.add(plan.wave_count)
        elif plan.waves is not None:
            waves.add(len(plan.waves))

    # Tasks only fail when explicitly marked so
    succeeded = 0
    for stage in tasks:
        task = TaskResultPayload.from_stage(stage)
        if task is not None and task.success is not False:
            succeeded += 1

    efficiency = RunningMean()
    for stage in assemblies:
        assembly = ReassemblyPayload.from_stage(stage)
        if assembly is not None and assembly.parallelism_efficiency > 0:
            efficiency.add(assembly.parallelism_efficiency)

    return DecomposeMetrics(
        avg_parallelism_efficiency=round_half_up(efficiency.value, 2),
        task_success_rate=rate(succeeded, tasks),
        avg_wave_count=round_half_up(waves.value, 1),
    )
