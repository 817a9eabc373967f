from deliberation_core.domain.tournament.bracket import (
    EventHandler,
    MatchupJudge,
    TournamentEngine,
)
from deliberation_core.domain.tournament.models import (
    BracketPathEntry,
    Contestant,
    Matchup,
    TournamentChampion,
    TournamentRound,
)

__all__ = [
    "BracketPathEntry",
    "Contestant",
    "EventHandler",
    "Matchup",
    "MatchupJudge",
    "TournamentChampion",
    "TournamentEngine",
    "TournamentRound",
]
