from __future__ import annotations

from datetime import datetime
from typing import List

from pydantic import BaseModel, Field


class GameCreateRequest(BaseModel):
    game_name: str = Field(..., min_length=1)
    game_start: datetime
    game_end: datetime


class GameResponse(BaseModel):
    game_id: str
    game_name: str
    game_start: datetime
    game_end: datetime
    created_at: datetime
    joined_team_names: List[str] = Field(default_factory=list)
    active_status: bool = True


class JoinGameRequest(BaseModel):
    game_id: str = Field(..., min_length=1)
    team_id: str = Field(..., min_length=1)
    user_id: str = Field(..., min_length=1)


class JoinedGamesResponse(BaseModel):
    games: List[dict]
