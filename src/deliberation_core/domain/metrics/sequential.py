from collections.abc import Sequence

from deliberation_core.domain.metrics.helpers import (
    RunningMean,
    Tally,
    count_words,
    filter_by_stage_type,
    rate,
)
from deliberation_core.domain.metrics.models import (
    ChainMetrics,
    MandateCount,
    StepWordCount,
)
from deliberation_core.domain.metrics.payloads import ChainStepPayload
from deliberation_core.domain.records import StageRecord
from deliberation_core.shared.statistics import round_half_up


def compute_chain_metrics(stages: Sequence[StageRecord]) -> ChainMetrics:
    steps = filter_by_stage_type(stages, "chain_step", "step", "improvement")

    words_by_step: dict[int, RunningMean] = {}
    mandates = Tally()
    skipped = 0
    for stage in steps:
        step = ChainStepPayload.from_stage(stage)
        if step is None:
            continue

        words = count_words(step.content)
        if words > 0:
            words_by_step.setdefault(stage.stage_order, RunningMean()).add(words)
        if step.mandate:
            mandates.add(step.mandate)
        if step.skipped is True:
            skipped += 1

    progression = [
        StepWordCount(step=order, avg_word_count=int(round_half_up(mean.value)))
        for order, mean in sorted(words_by_step.items())
    ]
    return ChainMetrics(
        avg_word_count_progression=progression,
        mandate_distribution=mandates.to_list(
            lambda mandate, count: MandateCount(mandate=mandate, count=count)
        ),
        skip_rate=rate(skipped, steps),
    )
