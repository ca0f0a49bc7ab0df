"""Pydantic models for API I/O."""

from .games import GameCreateRequest, GameResponse, JoinGameRequest, JoinedGamesResponse
from .players import (
    BulkPlayerRequest,
    BulkPlayerResponse,
    CreatedPlayerResponse,
    PlayerCreateRequest,
    PlayerData,
    PlayerEntry,
    PlayerUpdateRequest,
    SinglePlayerResponse,
)
from .teams import TeamCreateRequest, TeamResponse
from .valuation import PointsRequest, PointsResponse, TournamentStatsResponse

__all__ = [
    "BulkPlayerRequest",
    "BulkPlayerResponse",
    "CreatedPlayerResponse",
    "GameCreateRequest",
    "GameResponse",
    "JoinGameRequest",
    "JoinedGamesResponse",
    "PlayerCreateRequest",
    "PlayerData",
    "PlayerEntry",
    "PlayerUpdateRequest",
    "PointsRequest",
    "PointsResponse",
    "SinglePlayerResponse",
    "TeamCreateRequest",
    "TeamResponse",
    "TournamentStatsResponse",
]
