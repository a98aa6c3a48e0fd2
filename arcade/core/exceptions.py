"""
Error kinds raised by the tournament engine and the history store.

Engine errors subclass ValueError so callers that only care about "bad
input" can catch that. Every engine error is raised before the tournament
is written to.
"""


class TournamentError(ValueError):
    """Base class for all tournament validation errors."""


class EmptyName(TournamentError):
    def __init__(self):
        super().__init__("Player name cannot be empty")


class DuplicateName(TournamentError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"A player named '{name}' already exists in the tournament")


class PlayerNotFound(TournamentError):
    def __init__(self, player_id: str):
        self.player_id = player_id
        super().__init__(f"Player with ID {player_id} not found")


class TournamentAlreadyStarted(TournamentError):
    def __init__(self):
        super().__init__("Cannot change players after the tournament has started")


class NotEnoughPlayers(TournamentError):
    def __init__(self, player_count: int):
        self.player_count = player_count
        super().__init__(f"At least 2 players are required to start a tournament (got {player_count})")


class AlreadyStarted(TournamentError):
    def __init__(self):
        super().__init__("Tournament has already started")


class NoActiveMatch(TournamentError):
    def __init__(self):
        super().__init__("No active match to record a result for")


class InvalidScore(TournamentError):
    def __init__(self, score1: int, score2: int, reason: str = "Scores cannot be equal, a winner must be determined"):
        self.score1 = score1
        self.score2 = score2
        super().__init__(f"{reason} (got {score1}-{score2})")


class MatchNotFound(TournamentError):
    def __init__(self, match_id: str):
        self.match_id = match_id
        super().__init__(f"Match with ID {match_id} not found in bracket")


class PersistenceFailure(RuntimeError):
    """Raised by the history store when records cannot be read or written."""
