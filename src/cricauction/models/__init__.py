"""Data models for players and their tournament performance."""

from .player import CompletePlayerStats, PlayerStats, PlayerValuation, TournamentData

__all__ = ["CompletePlayerStats", "PlayerStats", "PlayerValuation", "TournamentData"]
