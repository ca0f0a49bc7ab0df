"""Canonical player models shared across valuation, services and the API."""

from __future__ import annotations

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class TournamentData(BaseModel):
    """Raw performance line for one player in one tournament.

    ``overs_bowled`` uses scorebook notation: the fractional digit is a ball
    count, so ``4.3`` is four overs and three balls.
    """

    runs: int = Field(default=0, ge=0)
    wickets: int = Field(default=0, ge=0)
    balls_faced: int = Field(default=0, ge=0)
    innings_played: int = Field(default=0, ge=0)
    overs_bowled: float = Field(default=0.0, ge=0.0)
    runs_conceded: int = Field(default=0, ge=0)


class PlayerStats(BaseModel):
    """Aggregated totals consumed by the valuation engine."""

    total_runs: int = Field(default=0, ge=0)
    total_balls_faced: int = Field(default=0, ge=0)
    innings_played: int = Field(default=0, ge=0)
    total_balls_bowled: int = Field(default=0, ge=0)
    total_wickets_taken: int = Field(default=0, ge=0)
    total_runs_conceded: int = Field(default=0, ge=0)

    model_config = ConfigDict(frozen=True)


class CompletePlayerStats(PlayerStats):
    batting_strike_rate: float
    batting_average: float
    bowling_strike_rate: float
    economy_rate: float
    player_points: float


class PlayerValuation(BaseModel):
    stats: CompletePlayerStats
    base_price: str
