"""Metric routines for the evaluation family: vote, jury, debate, delphi."""

from collections import Counter
from collections.abc import Sequence

from deliberation_core.domain.metrics.helpers import (
    RunningMean,
    ScoreAverages,
    Tally,
    count_words,
    dimension_averages,
    filter_by_stage_type,
    model_wins,
    rate,
)
from deliberation_core.domain.metrics.models import (
    BucketCount,
    DebateMetrics,
    DecisionCount,
    DelphiMetrics,
    JuryMetrics,
    VerdictCount,
    VoteMetrics,
)
from deliberation_core.domain.metrics.payloads import (
    ConfidencePayload,
    ConvergencePayload,
    JurorScoresPayload,
    RevisionPayload,
    VerdictPayload,
    VoteTallyPayload,
    WinnerPayload,
)
from deliberation_core.domain.records import StageRecord
from deliberation_core.shared.statistics import round_half_up


def _tally_winners(stages: Sequence[StageRecord]) -> Tally:
    winners = Tally()
    for stage in stages:
        payload = WinnerPayload.from_stage(stage)
        if payload is None:
            continue
        model = payload.winner if payload.winner is not None else stage.model
        if model:
            winners.add(model)
    return winners


def compute_vote_metrics(stages: Sequence[StageRecord]) -> VoteMetrics:
    winner_stages = filter_by_stage_type(stages, "winner")
    tally_stages = filter_by_stage_type(stages, "vote_tally")

    tiebreakers = 0
    for stage in winner_stages:
        payload = WinnerPayload.from_stage(stage)
        if payload is not None and payload.tiebreaker is True:
            tiebreakers += 1

    margin = RunningMean()
    for stage in tally_stages:
        tally = VoteTallyPayload.from_stage(stage)
        if tally is not None and tally.win_margin > 0:
            margin.add(tally.win_margin)

    return VoteMetrics(
        winner_distribution=model_wins(_tally_winners(winner_stages)),
        tiebreaker_rate=rate(tiebreakers, winner_stages),
        avg_win_margin=margin.value,
    )


def _juror_consensus_rate(juror_summaries: Sequence[StageRecord]) -> float:
    """Share of jurors agreeing with the majority of their own message.

    Messages with a single juror carry no agreement signal and are skipped.
    """
    groups: dict[str, list[str]] = {}
    for stage in juror_summaries:
        payload = JurorScoresPayload.from_stage(stage)
        if payload is None or not payload.recommendation:
            continue
        groups.setdefault(stage.message_id, []).append(payload.recommendation)

    agreeing = 0
    compared = 0
    for group in groups.values():
        if len(group) < 2:
            continue
        agreeing += max(Counter(group).values())
        compared += len(group)
    return rate(agreeing, compared)


def compute_jury_metrics(stages: Sequence[StageRecord]) -> JuryMetrics:
    verdict_stages = filter_by_stage_type(stages, "verdict")
    juror_summaries = filter_by_stage_type(stages, "juror_summary")
    deliberations = filter_by_stage_type(stages, "deliberation")

    verdicts = Tally()
    for stage in verdict_stages:
        payload = VerdictPayload.from_stage(stage)
        if payload is None:
            continue
        verdicts.add(payload.verdict if payload.verdict is not None else "unknown")

    averages = ScoreAverages()
    for stage in [*juror_summaries, *deliberations]:
        scored = JurorScoresPayload.from_stage(stage)
        if scored is not None:
            averages.add_scores(scored.scores)

    return JuryMetrics(
        verdict_distribution=verdicts.to_list(
            lambda verdict, count: VerdictCount(verdict=verdict, count=count)
        ),
        dimension_averages=dimension_averages(averages),
        juror_consensus_rate=_juror_consensus_rate(juror_summaries),
    )


def _word_count_delta(revision: RevisionPayload) -> float | None:
    if revision.original_word_count > 0 and revision.revised_word_count > 0:
        return revision.revised_word_count - revision.original_word_count
    if revision.original is not None and revision.revised is not None:
        return count_words(revision.revised) - count_words(revision.original)
    return None


def compute_debate_metrics(stages: Sequence[StageRecord]) -> DebateMetrics:
    revisions = filter_by_stage_type(stages, "revision")
    vote_results = filter_by_stage_type(stages, "vote_result", "winner")

    decisions = Tally()
    delta = RunningMean()
    for stage in revisions:
        revision = RevisionPayload.from_stage(stage)
        if revision is None:
            continue
        decisions.add(revision.decision if revision.decision is not None else "revised")
        word_delta = _word_count_delta(revision)
        if word_delta is not None:
            delta.add(word_delta)

    return DebateMetrics(
        revision_decision_dist=decisions.to_list(
            lambda decision, count: DecisionCount(decision=decision, count=count)
        ),
        winner_distribution=model_wins(_tally_winners(vote_results)),
        avg_word_count_delta=int(round_half_up(delta.value)),
    )


def _delphi_bucket(confidence: float) -> str:
    if confidence >= 0.9:
        return "High (≥90%)"
    if confidence >= 0.7:
        return "Medium (70-89%)"
    return "Low (<70%)"


def compute_delphi_metrics(stages: Sequence[StageRecord]) -> DelphiMetrics:
    round_stages = filter_by_stage_type(stages, "round", "delphi_round")
    convergence_stages = filter_by_stage_type(
        stages, "convergence", "final_synthesis"
    )

    rounds_per_message: dict[str, float] = {}
    for stage in round_stages:
        rounds_per_message[stage.message_id] = (
            rounds_per_message.get(stage.message_id, 0) + 1
        )
    # A convergence record states the authoritative round count
    for stage in convergence_stages:
        convergence = ConvergencePayload.from_stage(stage)
        if convergence is not None and convergence.total_rounds > 0:
            rounds_per_message[stage.message_id] = convergence.total_rounds

    rounds = RunningMean()
    for count in rounds_per_message.values():
        rounds.add(count)

    buckets = Tally()
    for stage in round_stages:
        payload = ConfidencePayload.from_stage(stage)
        if payload is not None and payload.confidence > 0:
            buckets.add(_delphi_bucket(payload.confidence))

    return DelphiMetrics(
        avg_convergence_rounds=round_half_up(rounds.value, 1),
        confidence_distribution=buckets.to_list(
            lambda bucket, count: BucketCount(bucket=bucket, count=count)
        ),
    )
