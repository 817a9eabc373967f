"""Single-elimination bracket over explicit round history.

The engine never holds tournament state. Every operation takes the rounds
played so far and returns new immutable values.
"""

import time
from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from typing import Any

from deliberation_core.domain.errors import BracketStateError
from deliberation_core.domain.judgments import WinnerJudgment
from deliberation_core.domain.tournament.models import (
    BracketPathEntry,
    Contestant,
    Matchup,
    TournamentChampion,
    TournamentRound,
)
from deliberation_core.shared.constants import (
    BYE_REASONING,
    DEFAULT_WIN_REASONING,
)
from deliberation_core.shared.logging import get_contextual_logger

MatchupJudge = Callable[[Matchup], WinnerJudgment | None]


class EventHandler(ABC):
    @abstractmethod
    def publish(self, _event_name: str, _data: dict[str, Any]) -> None:
        pass


class TournamentEngine:
    def __init__(self, event_handler: EventHandler | None = None) -> None:
        self.logger = get_contextual_logger("deliberation.tournament")
        self.event_handler = event_handler

    @staticmethod
    def total_rounds(contestant_count: int) -> int:
        """ceil(log2(n)) for n >= 2, computed without floating point."""
        if contestant_count < 2:
            return 0
        return (contestant_count - 1).bit_length()

    def seed_round1(self, contestants: Sequence[Contestant]) -> list[Matchup]:
        return self._pair(contestants, 1)

    def advance(
        self, winners: Sequence[Contestant], round_number: int
    ) -> list[Matchup]:
        return self._pair(winners, round_number)

    def _pair(
        self, contestants: Sequence[Contestant], round_number: int
    ) -> list[Matchup]:
        matchups: list[Matchup] = []
        for i in range(0, len(contestants), 2):
            contestant_a = contestants[i]
            if i + 1 < len(contestants):
                matchups.append(
                    Matchup(
                        round_number=round_number,
                        match_index=len(matchups),
                        contestant_a=contestant_a,
                        contestant_b=contestants[i + 1],
                    )
                )
                continue

            self.logger.debug(
                f"Round {round_number}: {contestant_a.model} receives a bye"
            )
            matchups.append(
                Matchup(
                    round_number=round_number,
                    match_index=len(matchups),
                    contestant_a=contestant_a,
                    contestant_b=None,
                    is_bye=True,
                    winner="A",
                    winner_model=contestant_a.model,
                    judge_reasoning=BYE_REASONING,
                )
            )
        return matchups

    def resolve_matchup(
        self,
        matchup: Matchup,
        judgment: WinnerJudgment | None,
        response_time_ms: int = 0,
    ) -> Matchup:
        """Apply a judge's verdict to an undecided matchup.

        Byes are already decided and come back unchanged. Without a usable
        verdict contestant A advances and the result is marked as a default.
        """
        if matchup.is_bye or matchup.contestant_b is None:
            return matchup

        if judgment is None or judgment.winner is None:
            self.logger.warning(
                f"Round {matchup.round_number} match {matchup.match_index}: "
                f"no verdict, {matchup.contestant_a.model} advances by default"
            )
            return matchup.model_copy(
                update={
                    "winner": "A",
                    "winner_model": matchup.contestant_a.model,
                    "loser_model": matchup.contestant_b.model,
                    "judge_reasoning": DEFAULT_WIN_REASONING,
                    "response_time_ms": response_time_ms,
                    "was_default": True,
                }
            )

        if judgment.winner == "A":
            winner, loser = matchup.contestant_a, matchup.contestant_b
        else:
            winner, loser = matchup.contestant_b, matchup.contestant_a

        return matchup.model_copy(
            update={
                "winner": judgment.winner,
                "winner_model": winner.model,
                "loser_model": loser.model,
                "judge_reasoning": judgment.reasoning,
                "response_time_ms": response_time_ms,
                "was_default": False,
            }
        )

    def close_round(
        self, round_number: int, matchups: Sequence[Matchup]
    ) -> TournamentRound:
        winners: list[str] = []
        eliminated: list[str] = []
        for matchup in matchups:
            if matchup.winner_model is None:
                raise BracketStateError(
                    f"Match {matchup.match_index} has no winner yet",
                    round_number=round_number,
                )
            winners.append(matchup.winner_model)
            if matchup.loser_model is not None:
                eliminated.append(matchup.loser_model)

        return TournamentRound(
            round_number=round_number,
            matchups=list(matchups),
            winners=winners,
            eliminated=eliminated,
        )

    def next_contestants(
        self,
        tournament_round: TournamentRound,
        contestants: Sequence[Contestant],
    ) -> list[Contestant]:
        """Map a round's winners back to their original entries."""
        by_model: dict[str, Contestant] = {}
        for contestant in contestants:
            by_model.setdefault(contestant.model, contestant)

        advancing = []
        for model in tournament_round.winners:
            contestant = by_model.get(model)
            if contestant is None:
                raise BracketStateError(
                    f"Winner '{model}' is not a known contestant",
                    round_number=tournament_round.round_number,
                )
            advancing.append(contestant)
        return advancing

    @staticmethod
    def is_complete(rounds: Sequence[TournamentRound]) -> bool:
        return bool(rounds) and len(rounds[-1].winners) == 1

    @staticmethod
    def reconstruct_path(
        model: str, rounds: Sequence[TournamentRound]
    ) -> list[BracketPathEntry]:
        path: list[BracketPathEntry] = []
        for tournament_round in rounds:
            matchup = next(
                (m for m in tournament_round.matchups if m.involves(model)),
                None,
            )
            if matchup is None:
                continue
            if matchup.is_bye:
                path.append(
                    BracketPathEntry(
                        round=tournament_round.round_number,
                        opponent=None,
                        result="bye",
                    )
                )
            elif matchup.winner_model == model:
                path.append(
                    BracketPathEntry(
                        round=tournament_round.round_number,
                        opponent=matchup.opponent_of(model),
                        result="won",
                    )
                )
            else:
                break
        return path

    def crown_champion(
        self,
        rounds: Sequence[TournamentRound],
        contestants: Sequence[Contestant],
    ) -> TournamentChampion:
        if not self.is_complete(rounds):
            raise BracketStateError(
                "Tournament has not produced a single winner",
                round_number=rounds[-1].round_number if rounds else None,
            )

        champion_model = rounds[-1].winners[0]
        response = next(
            (c.response for c in contestants if c.model == champion_model), ""
        )
        path = self.reconstruct_path(champion_model, rounds)
        return TournamentChampion(
            model=champion_model,
            response=response,
            bracket_path=path,
            total_matchups_won=sum(1 for e in path if e.result == "won"),
            total_rounds=len(rounds),
        )

    def run(
        self,
        contestants: Sequence[Contestant],
        judge: MatchupJudge,
    ) -> tuple[list[TournamentRound], TournamentChampion]:
        """Play a whole bracket, asking ``judge`` for every real matchup.

        Each judged matchup records how long ``judge`` took in ``response_time_ms``.
        """
        if len(contestants) < 2:
            raise BracketStateError(
                f"Tournament requires at least 2 contestants, got {len(contestants)}"
            )

        self.logger.info(
            f"Starting bracket with {len(contestants)} contestants, "
            f"{self.total_rounds(len(contestants))} rounds expected"
        )
        rounds: list[TournamentRound] = []
        matchups = self.seed_round1(contestants)
        round_number = 1

        while True:
            resolved: list[Matchup] = []
            for pending in matchups:
                outcome = pending if pending.is_bye else self._judge(pending, judge)
                resolved.append(outcome)
                self._publish("matchup_complete", outcome.model_dump(mode="json"))

            tournament_round = self.close_round(round_number, resolved)
            rounds.append(tournament_round)
            self._publish(
                "round_complete",
                {
                    "round": round_number,
                    "winners": tournament_round.winners,
                    "eliminated": tournament_round.eliminated,
                },
            )

            if len(tournament_round.winners) <= 1:
                break

            round_number += 1
            matchups = self.advance(
                self.next_contestants(tournament_round, contestants),
                round_number,
            )

        champion = self.crown_champion(rounds, contestants)
        self._publish("champion", champion.model_dump(mode="json"))
        self.logger.info(
            f"Champion: {champion.model} after {champion.total_rounds} rounds"
        )
        return rounds, champion

    def _judge(self, matchup: Matchup, judge: MatchupJudge) -> Matchup:
        start_time = time.perf_counter()
        judgment = judge(matchup)
        latency_ms = int((time.perf_counter() - start_time) * 1000)
        return self.resolve_matchup(matchup, judgment, latency_ms)

    def _publish(self, event_name: str, data: dict[str, Any]) -> None:
        if self.event_handler is not None:
            self.event_handler.publish(event_name, data)
