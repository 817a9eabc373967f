from typing import Literal

from pydantic import Field

from deliberation_core.domain.records import FrozenModel

Verdict = Literal["APPROVE", "REVISE", "REJECT"]
WinnerSide = Literal["A", "B"]

JURY_DIMENSIONS: tuple[str, ...] = (
    "accuracy",
    "completeness",
    "clarity",
    "relevance",
    "actionability",
)


class RankingEntry(FrozenModel):
    label: str
    position: int


class RankingJudgment(FrozenModel):
    entries: list[RankingEntry] = Field(default_factory=list)

    @property
    def labels(self) -> list[str]:
        return [entry.label for entry in self.entries]


class WinnerJudgment(FrozenModel):
    winner: WinnerSide | None = None
    reasoning: str = ""


class ConfidenceJudgment(FrozenModel):
    response: str = ""
    confidence: float = Field(default=0.5, ge=0.0, le=1.0)
    reasoning: str = ""
    parsed_successfully: bool = False


class SynthesisJudgment(FrozenModel):
    synthesis: str = ""
    calibration_notes: str = ""


class VoteJudgment(FrozenModel):
    voted_for: str | None = None


class VerdictJudgment(FrozenModel):
    verdict: Verdict | None = None
    scores: dict[str, int | None] = Field(default_factory=dict)


Judgment = (
    RankingJudgment
    | WinnerJudgment
    | ConfidenceJudgment
    | SynthesisJudgment
    | VoteJudgment
    | VerdictJudgment
)
