from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field


class TeamCreateRequest(BaseModel):
    tournament_id: str = Field(..., min_length=1, max_length=50)
    team_name: str = Field(..., min_length=1, max_length=30)
    players: List[str]
    budget_remaining: float | None = None


class TeamResponse(BaseModel):
    id: str
    tournament_id: str
    team_name: str
    players: List[str]
    budget_remaining: float | None = None
