from .tournament_model import Match, Player, Score, Tournament, TournamentState, generate_id
from .history_model import HistoryRecord, PlayerSummary

__all__ = [
    "Match",
    "Player",
    "Score",
    "Tournament",
    "TournamentState",
    "generate_id",
    "HistoryRecord",
    "PlayerSummary",
]
