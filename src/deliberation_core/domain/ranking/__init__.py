from deliberation_core.domain.ranking.aggregator import RankingAggregator
from deliberation_core.domain.ranking.label_map import (
    LabelMap,
    create_label_map,
)
from deliberation_core.domain.ranking.models import (
    AggregateRanking,
    CastVote,
    MajorityVerdict,
    VoteTally,
    WinRateEntry,
)

__all__ = [
    "AggregateRanking",
    "CastVote",
    "LabelMap",
    "MajorityVerdict",
    "RankingAggregator",
    "VoteTally",
    "WinRateEntry",
    "create_label_map",
]
