from typing import Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from arcade.models.tournament_model import Match, Player


class AddPlayerRequest(BaseModel):
    """Payload for registering a player before the tournament starts."""
    name: str = Field(..., max_length=50, description="Display name, unique within the tournament (case-insensitive).")
    user_id: Optional[str] = Field(None, description="Optional registered account the player belongs to.")

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class MatchResultRequest(BaseModel):
    player1_score: int = Field(..., ge=0, description="Score for player 1")
    player2_score: int = Field(..., ge=0, description="Score for player 2")

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class MatchResultResponse(BaseModel):
    completed: bool
    next_match: Optional[Match] = None
    champion: Optional[Player] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True
