from __future__ import annotations

from pydantic import BaseModel, Field


class PointsRequest(BaseModel):
    total_runs: int | None = Field(default=None, ge=0)
    total_balls_faced: int | None = Field(default=None, ge=0)
    innings_played: int = Field(default=0, ge=0)
    total_balls_bowled: int = Field(default=0, ge=0)
    total_wickets_taken: int = Field(default=0, ge=0)
    total_runs_conceded: int = Field(default=0, ge=0)


class PointsResponse(BaseModel):
    player_points: float


class PlayerLeader(BaseModel):
    player: str
    runs: int | None = None
    wickets: int | None = None


class TournamentStatsResponse(BaseModel):
    overall_runs: int
    overall_wickets: int
    highest_run_scorer: PlayerLeader
    highest_wicket_taker: PlayerLeader
