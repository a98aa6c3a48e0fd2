from functools import lru_cache

from arcade.services.history_service import HistoryService
from arcade.services.tournament_service import TournamentService

# One live tournament per process; the portal runs a single bracket at a time.
tournament_service = TournamentService()


def get_tournament_service() -> TournamentService:
    return tournament_service


@lru_cache
def get_history_service() -> HistoryService:
    # Path and cap default to arcade.core.config.settings
    return HistoryService()
