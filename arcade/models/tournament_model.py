import random
import string
import time
from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

_ID_ALPHABET = string.digits + string.ascii_lowercase


def generate_id(prefix: str, length: int) -> str:
    """Build ids like ``trn_1700000000000_k3j9a2x``: prefix, epoch millis, random base-36."""
    suffix = "".join(random.choices(_ID_ALPHABET, k=length))
    return f"{prefix}_{int(time.time() * 1000)}_{suffix}"


class TournamentState(str, Enum):
    NOT_STARTED = "NOT_STARTED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"


class Player(BaseModel):
    id: str = Field(default_factory=lambda: generate_id("player", 5))
    name: str
    user_id: Optional[str] = None  # external account reference
    wins: int = 0
    losses: int = 0

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class Score(BaseModel):
    player1: int = 0
    player2: int = 0


class Match(BaseModel):
    id: str
    round: int = Field(ge=1)

    player1: Optional[Player] = None
    player2: Optional[Player] = None

    winner: Optional[Player] = None
    loser: Optional[Player] = None

    next_match_id: Optional[str] = None
    # Arena index of the next match, resolved once when the bracket is built.
    next_match_index: Optional[int] = Field(default=None, exclude=True)

    score: Score = Field(default_factory=Score)
    completed: bool = False

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True

    @property
    def is_playable(self) -> bool:
        return self.player1 is not None and self.player2 is not None and not self.completed


class Tournament(BaseModel):
    id: str = Field(default_factory=lambda: generate_id("trn", 7))
    players: List[Player] = Field(default_factory=list)
    matches: List[Match] = Field(default_factory=list)
    current_match_index: int = -1
    completed: bool = False
    start_date: Optional[datetime] = None
    state: TournamentState = TournamentState.NOT_STARTED

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True
