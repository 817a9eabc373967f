"""Temperature-controlled softmax over self-reported confidence."""

import math
from collections.abc import Sequence

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from deliberation_core.domain.errors import ConfigurationError
from deliberation_core.domain.records import FrozenModel
from deliberation_core.shared.constants import (
    DEFAULT_TEMPERATURE,
    MIN_TEMPERATURE,
    OUTLIER_HIGH_CONFIDENCE,
    OUTLIER_LOW_CONFIDENCE,
)
from deliberation_core.shared.logging import get_contextual_logger
from deliberation_core.shared.statistics import round_half_up


class ConfidenceAnswer(BaseModel):
    model_config = {
        "frozen": True,
        "extra": "ignore",
        "alias_generator": to_camel,
        "populate_by_name": True,
    }

    model: str
    raw_confidence: float = Field(ge=0.0, le=1.0, allow_inf_nan=False)


class ConfidenceWeight(FrozenModel):
    model: str
    raw_confidence: float
    normalized_weight: float
    weight_percent: float
    is_outlier: bool


def is_outlier(raw_confidence: float) -> bool:
    return (
        raw_confidence > OUTLIER_HIGH_CONFIDENCE
        or raw_confidence < OUTLIER_LOW_CONFIDENCE
    )


def _weight(answer: ConfidenceAnswer, normalized: float) -> ConfidenceWeight:
    return ConfidenceWeight(
        model=answer.model,
        raw_confidence=answer.raw_confidence,
        normalized_weight=normalized,
        weight_percent=round_half_up(normalized * 10000) / 100,
        is_outlier=is_outlier(answer.raw_confidence),
    )


class ConfidenceWeighter:
    def __init__(self, temperature: float = DEFAULT_TEMPERATURE) -> None:
        self.temperature = temperature
        self.logger = get_contextual_logger("deliberation.weighting")

    def weigh(
        self,
        answers: Sequence[ConfidenceAnswer],
        temperature: float | None = None,
    ) -> list[ConfidenceWeight]:
        """Normalize confidences into weights, preserving input order.

        Below ``MIN_TEMPERATURE`` every answer gets ``1/n``. Otherwise the
        softmax is taken over ``confidence / temperature`` with the maximum
        subtracted first, so large ratios never overflow.
        """
        temperature = self.temperature if temperature is None else temperature
        if not math.isfinite(temperature):
            raise ConfigurationError(f"Temperature must be a finite number, got {temperature}")
        if not answers:
            return []

        if temperature < MIN_TEMPERATURE:
            self.logger.debug(
                f"Temperature {temperature} below {MIN_TEMPERATURE}, using uniform weights"
            )
            uniform = 1.0 / len(answers)
            return [_weight(answer, uniform) for answer in answers]

        scaled = [answer.raw_confidence / temperature for answer in answers]
        peak = max(scaled)
        exps = [math.exp(value - peak) for value in scaled]
        total = sum(exps)
        return [
            _weight(answer, exp / total)
            for answer, exp in zip(answers, exps, strict=True)
        ]
