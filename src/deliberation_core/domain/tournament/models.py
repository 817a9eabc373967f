from typing import Literal

from pydantic import Field, model_validator

from deliberation_core.domain.judgments import WinnerSide
from deliberation_core.domain.records import FrozenModel, RecordModel


class Contestant(RecordModel):
    model: str
    response: str = ""
    response_time_ms: int = 0


class Matchup(FrozenModel):
    round_number: int
    match_index: int
    contestant_a: Contestant
    contestant_b: Contestant | None = None
    is_bye: bool = False
    winner: WinnerSide | None = None
    winner_model: str | None = None
    loser_model: str | None = None
    judge_reasoning: str = ""
    response_time_ms: int = 0
    was_default: bool = False

    @model_validator(mode="after")
    def _bye_has_no_opponent(self) -> "Matchup":
        if (self.contestant_b is None) != self.is_bye:
            raise ValueError(
                "contestant_b must be None exactly when the matchup is a bye"
            )
        return self

    @property
    def is_decided(self) -> bool:
        return self.winner_model is not None

    def involves(self, model: str) -> bool:
        return self.contestant_a.model == model or (
            self.contestant_b is not None and self.contestant_b.model == model
        )

    def opponent_of(self, model: str) -> str | None:
        if self.contestant_b is None:
            return None
        if self.contestant_a.model == model:
            return self.contestant_b.model
        return self.contestant_a.model


class TournamentRound(FrozenModel):
    round_number: int
    matchups: list[Matchup] = Field(default_factory=list)
    winners: list[str] = Field(default_factory=list)
    eliminated: list[str] = Field(default_factory=list)


class BracketPathEntry(FrozenModel):
    round: int
    opponent: str | None = None
    result: Literal["won", "bye"]


class TournamentChampion(FrozenModel):
    model: str
    response: str
    bracket_path: list[BracketPathEntry] = Field(default_factory=list)
    total_matchups_won: int = 0
    total_rounds: int = 0
