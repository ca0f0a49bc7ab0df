from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field

from cricauction.models import TournamentData


class PlayerCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=50)
    category: str = Field(..., min_length=1, max_length=30)
    base_price: float = Field(..., gt=0, allow_inf_nan=False)
    active_status: bool = True


class PlayerUpdateRequest(BaseModel):
    name: str | None = None
    category: str | None = None
    base_price: float | str | None = None
    active_status: bool | None = None


class PlayerData(BaseModel):
    name: str | None = None
    category: str = ""
    base_price: float | str | None = None
    active_status: bool = True


class PlayerEntry(BaseModel):
    player_data: PlayerData | None = None
    tournament_data: TournamentData | None = None


class BulkPlayerRequest(BaseModel):
    players: List[PlayerEntry] = Field(..., min_length=1)


class CreatedPlayerResponse(BaseModel):
    player_id: str
    name: str
    base_price: str
    tournament_id: str | None = None
    success: bool = True


class SinglePlayerResponse(BaseModel):
    success: bool = True
    player_id: str
    tournament_id: str | None = None
    base_price: str
    message: str


class BulkPlayerResponse(BaseModel):
    success: bool = True
    players_created: int
    players: List[CreatedPlayerResponse]
    message: str
