from typing import List, Optional

from pydantic import BaseModel, Field

from arcade.models.tournament_model import Player, Score

TBD = "TBD"


class DisplayMatch(BaseModel):
    id: str
    round: int
    player1: str = TBD
    player2: str = TBD
    winner: Optional[str] = None
    score: Score = Field(default_factory=Score)
    completed: bool = False


class BracketRound(BaseModel):
    round: int
    matches: List[DisplayMatch] = Field(default_factory=list)


class BracketData(BaseModel):
    rounds: List[BracketRound] = Field(default_factory=list)
    completed: bool = False
    champion: Optional[Player] = None
