"""Player valuation engine."""

from .points import (
    PRICE_STEP,
    calculate_base_price,
    calculate_batting_average,
    calculate_batting_strike_rate,
    calculate_bowling_strike_rate,
    calculate_economy_rate,
    calculate_player_points,
    create_player_stats_from_tournament_data,
    get_complete_player_stats,
    overs_to_balls,
    value_player,
)

__all__ = [
    "PRICE_STEP",
    "calculate_base_price",
    "calculate_batting_average",
    "calculate_batting_strike_rate",
    "calculate_bowling_strike_rate",
    "calculate_economy_rate",
    "calculate_player_points",
    "create_player_stats_from_tournament_data",
    "get_complete_player_stats",
    "overs_to_balls",
    "value_player",
]
