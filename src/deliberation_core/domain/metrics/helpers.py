from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import Any, TypeVar

from deliberation_core.domain.metrics.models import DimensionAverage, ModelWins
from deliberation_core.domain.metrics.payloads import safe_number
from deliberation_core.domain.records import StageRecord
from deliberation_core.shared.statistics import round_half_up, safe_ratio

T = TypeVar("T")


def filter_by_stage_type(
    stages: Iterable[StageRecord], *stage_types: str
) -> list[StageRecord]:
    return [stage for stage in stages if stage.stage_type in stage_types]


def count_words(text: str | None) -> int:
    return len(text.split()) if text else 0


class Tally:
    """Counts keys in first-seen order and sorts them descending, stable."""

    def __init__(self) -> None:
        self.counts: dict[str, int] = {}

    def add(self, key: str) -> None:
        self.counts[key] = self.counts.get(key, 0) + 1

    def sorted_items(self) -> list[tuple[str, int]]:
        return sorted(self.counts.items(), key=lambda item: item[1], reverse=True)

    def to_list(self, factory: Callable[[str, int], T]) -> list[T]:
        return [factory(key, count) for key, count in self.sorted_items()]


class RunningMean:
    def __init__(self) -> None:
        self.total = 0.0
        self.count = 0

    def add(self, value: float) -> None:
        self.total += value
        self.count += 1

    @property
    def value(self) -> float:
        return safe_ratio(self.total, self.count)


class ScoreAverages:
    """Averages named sub-scores independently, ignoring non-positive values."""

    def __init__(self) -> None:
        self.means: dict[str, RunningMean] = {}

    def add_scores(self, scores: Mapping[str, Any] | None) -> None:
        if not scores:
            return
        for name, raw in scores.items():
            value = safe_number(raw)
            if value <= 0:
                continue
            self.means.setdefault(name, RunningMean()).add(value)

    def to_list(self, factory: Callable[[str, float], T]) -> list[T]:
        rounded = [
            (name, round_half_up(mean.value, 1)) for name, mean in self.means.items()
        ]
        rounded.sort(key=lambda item: item[1], reverse=True)
        return [factory(name, avg) for name, avg in rounded]


def dimension_averages(averages: ScoreAverages) -> list[DimensionAverage]:
    return averages.to_list(
        lambda name, avg: DimensionAverage(dimension=name, avg_score=avg)
    )


def model_wins(tally: Tally) -> list[ModelWins]:
    return tally.to_list(lambda model, wins: ModelWins(model=model, wins=wins))


def rate(qualifying: int, eligible: Sequence[object] | int) -> float:
    total = eligible if isinstance(eligible, int) else len(eligible)
    return safe_ratio(qualifying, total)
