from pydantic import Field

from deliberation_core.domain.judgments import Verdict
from deliberation_core.domain.records import FrozenModel


class AggregateRanking(FrozenModel):
    model: str
    average_rank: float
    rankings_count: int


class WinRateEntry(FrozenModel):
    model: str
    wins: int
    total_appearances: int
    win_rate: float


class CastVote(FrozenModel):
    model: str
    voted_for: str | None = None
    response_time_ms: int | None = None


class VoteTally(FrozenModel):
    tallies: dict[str, int] = Field(default_factory=dict)
    valid_votes: list[CastVote] = Field(default_factory=list)
    invalid_votes: list[CastVote] = Field(default_factory=list)
    winners: list[str] = Field(default_factory=list)
    is_tie: bool = False
    total_valid_votes: int = 0


class MajorityVerdict(FrozenModel):
    verdict: Verdict
    approve_count: int
    revise_count: int
    reject_count: int
