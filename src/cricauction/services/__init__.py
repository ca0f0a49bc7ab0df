"""Record-level operations used by the API and CLI."""

from .players import (
    CreatedPlayer,
    NewPlayer,
    create_player,
    create_players,
    deactivate_player,
    get_player,
    list_players,
    tournaments_collection,
    update_player,
)
from .tournament_stats import TournamentStatsError, TournamentSummary, analyze_tournament_stats

__all__ = [
    "CreatedPlayer",
    "NewPlayer",
    "TournamentStatsError",
    "TournamentSummary",
    "analyze_tournament_stats",
    "create_player",
    "create_players",
    "deactivate_player",
    "get_player",
    "list_players",
    "tournaments_collection",
    "update_player",
]
