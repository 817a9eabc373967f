"""Peer-ranking, vote and verdict aggregation."""

from collections import Counter
from collections.abc import Mapping, Sequence
from typing import Any

from deliberation_core.domain.judgments import (
    RankingEntry,
    RankingJudgment,
    Verdict,
)
from deliberation_core.domain.ranking.models import (
    AggregateRanking,
    CastVote,
    MajorityVerdict,
    VoteTally,
    WinRateEntry,
)
from deliberation_core.domain.records import LabelMapRow, RankingRow
from deliberation_core.shared.logging import get_contextual_logger
from deliberation_core.shared.statistics import mean, round_half_up

RankingInput = RankingJudgment | Sequence[RankingEntry]

VERDICT_ORDER: tuple[Verdict, ...] = ("APPROVE", "REVISE", "REJECT")


def _entries(ranking: RankingInput) -> Sequence[RankingEntry]:
    if isinstance(ranking, RankingJudgment):
        return ranking.entries
    return ranking


def _first_place_label(parsed_ranking: Any) -> str | None:
    if not isinstance(parsed_ranking, list):
        return None
    for entry in parsed_ranking:
        if isinstance(entry, RankingEntry):
            if entry.position == 1:
                return entry.label
        elif isinstance(entry, Mapping) and entry.get("position") == 1:
            label = entry.get("label")
            return label if isinstance(label, str) else None
    return None


class RankingAggregator:
    """Combines evaluator rankings into per-model statistics.

    All methods are pure; the instance only carries a logger.
    """

    def __init__(self) -> None:
        self.logger = get_contextual_logger("deliberation.ranking")

    def aggregate(
        self,
        rankings: Sequence[RankingInput],
        label_map: Mapping[str, str],
    ) -> list[AggregateRanking]:
        positions_by_model: dict[str, list[int]] = {}
        dropped = 0

        for ranking in rankings:
            for entry in _entries(ranking):
                model = label_map.get(entry.label)
                if not model:
                    dropped += 1
                    continue
                positions_by_model.setdefault(model, []).append(entry.position)

        if dropped:
            self.logger.debug(f"Dropped {dropped} ranking entries with unknown labels")

        aggregate = [
            AggregateRanking(
                model=model,
                average_rank=round_half_up(mean(positions), 2),
                rankings_count=len(positions),
            )
            for model, positions in positions_by_model.items()
        ]
        return sorted(aggregate, key=lambda r: r.average_rank)

    def compute_win_rates(
        self,
        ranking_rows: Sequence[RankingRow],
        label_map_rows: Sequence[LabelMapRow],
    ) -> list[WinRateEntry]:
        """Win rate per model across persisted council messages.

        Appearances are counted once per (message, model) from the label
        maps, while wins are counted once per evaluator ranking. A message
        with more rankings than labelled responses can therefore push a
        model's rate above what a per-ranking denominator would give.
        """
        label_lookup: dict[str, dict[str, str]] = {}
        for row in label_map_rows:
            label_lookup.setdefault(row.message_id, {})[row.label] = row.model

        wins: dict[str, int] = {}
        appearances: dict[str, int] = {}
        seen: set[tuple[str, str]] = set()
        for row in label_map_rows:
            key = (row.message_id, row.model)
            if key in seen:
                continue
            seen.add(key)
            appearances[row.model] = appearances.get(row.model, 0) + 1
            wins.setdefault(row.model, 0)

        for ranking in ranking_rows:
            label = _first_place_label(ranking.parsed_ranking)
            if label is None:
                continue
            winner_model = label_lookup.get(ranking.message_id, {}).get(label)
            if winner_model is None or winner_model not in wins:
                continue
            wins[winner_model] += 1

        entries = [
            WinRateEntry(
                model=model,
                wins=wins[model],
                total_appearances=count,
                win_rate=wins[model] / count,
            )
            for model, count in appearances.items()
            if count > 0
        ]
        return sorted(entries, key=lambda e: e.win_rate, reverse=True)

    def tally_votes(
        self, votes: Sequence[CastVote], label_map: Mapping[str, str]
    ) -> VoteTally:
        tallies: dict[str, int] = {}
        valid_votes: list[CastVote] = []
        invalid_votes: list[CastVote] = []

        for vote in votes:
            if vote.voted_for and label_map.get(vote.voted_for):
                tallies[vote.voted_for] = tallies.get(vote.voted_for, 0) + 1
                valid_votes.append(vote)
            else:
                invalid_votes.append(vote)

        if invalid_votes:
            self.logger.debug(f"{len(invalid_votes)} votes did not resolve to a label")

        max_votes = max(tallies.values(), default=0)
        winners = [label for label, count in tallies.items() if count == max_votes]
        return VoteTally(
            tallies=tallies,
            valid_votes=valid_votes,
            invalid_votes=invalid_votes,
            winners=winners,
            is_tie=len(winners) > 1,
            total_valid_votes=len(valid_votes),
        )

    def majority_verdict(
        self, verdicts: Sequence[Verdict | None]
    ) -> MajorityVerdict:
        """Majority verdict; any tie at the top resolves to REVISE."""
        counts = Counter(v for v in verdicts if v in VERDICT_ORDER)
        top = max(counts[v] for v in VERDICT_ORDER)
        leaders = [v for v in VERDICT_ORDER if counts[v] == top]
        verdict: Verdict = leaders[0] if len(leaders) == 1 else "REVISE"

        return MajorityVerdict(
            verdict=verdict,
            approve_count=counts["APPROVE"],
            revise_count=counts["REVISE"],
            reject_count=counts["REJECT"],
        )
