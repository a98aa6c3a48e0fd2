from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class PlayerSummary(BaseModel):
    id: str
    name: str
    userId: Optional[str] = None
    wins: int = 0
    losses: int = 0


class HistoryRecord(BaseModel):
    """Summary of one tournament as stored in the history file."""

    id: str
    players: List[PlayerSummary] = Field(default_factory=list)
    completed: bool = False
    startDate: Optional[datetime] = None
    endDate: Optional[datetime] = None
    matchCount: int = 0
    timestamp: datetime
