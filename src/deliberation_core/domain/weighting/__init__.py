from deliberation_core.domain.weighting.confidence import (
    ConfidenceAnswer,
    ConfidenceWeight,
    ConfidenceWeighter,
    is_outlier,
)

__all__ = [
    "ConfidenceAnswer",
    "ConfidenceWeight",
    "ConfidenceWeighter",
    "is_outlier",
]
