"""Player valuation: tournament totals to points and an auction base price."""

from __future__ import annotations

import math
from typing import Any, Mapping, Optional

from cricauction.models import CompletePlayerStats, PlayerStats, PlayerValuation, TournamentData


BALLS_PER_OVER = 6

POINTS_STRIKE_RATE_DIVISOR = 5.0
POINTS_AVERAGE_WEIGHT = 0.8
POINTS_BOWLING_STRIKE_NUMERATOR = 500.0
POINTS_ECONOMY_NUMERATOR = 140.0

PRICE_POINTS_WEIGHT = 9
PRICE_FLOOR = 100
PRICE_UNIT = 1000
PRICE_STEP = 50_000


def overs_to_balls(overs: float) -> int:
    """Convert scorebook overs (``4.3`` = 4 overs, 3 balls) to a ball count.

    The fractional digit is read directly as balls. Digits of 6 and above are
    accepted as-is, so ``4.9`` gives 33 balls.
    """

    full_overs = math.floor(overs)
    remaining_balls = round((overs - full_overs) * 10)
    return int(full_overs) * BALLS_PER_OVER + int(remaining_balls)


def _field(source: TournamentData | Mapping[str, Any], name: str) -> Any:
    if isinstance(source, Mapping):
        value = source.get(name)
    else:
        value = getattr(source, name, None)
    return value or 0


def create_player_stats_from_tournament_data(data: TournamentData | Mapping[str, Any]) -> PlayerStats:
    """Build canonical totals from a tournament line or a stored tournament document."""

    return PlayerStats(
        total_runs=int(_field(data, "runs")),
        total_balls_faced=int(_field(data, "balls_faced")),
        innings_played=int(_field(data, "innings_played")),
        total_balls_bowled=overs_to_balls(float(_field(data, "overs_bowled"))),
        total_wickets_taken=int(_field(data, "wickets")),
        total_runs_conceded=int(_field(data, "runs_conceded")),
    )


def calculate_batting_strike_rate(stats: PlayerStats) -> float:
    if stats.total_balls_faced <= 0:
        return 0.0
    return stats.total_runs / stats.total_balls_faced * 100


def calculate_batting_average(stats: PlayerStats) -> float:
    if stats.innings_played <= 0:
        return 0.0
    return stats.total_runs / stats.innings_played


def calculate_bowling_strike_rate(stats: PlayerStats) -> Optional[float]:
    """Balls per wicket, or ``None`` when no wickets were taken."""

    if stats.total_wickets_taken <= 0:
        return None
    return stats.total_balls_bowled / stats.total_wickets_taken


def calculate_economy_rate(stats: PlayerStats) -> float:
    if stats.total_balls_bowled <= 0:
        return 0.0
    return stats.total_runs_conceded / stats.total_balls_bowled * BALLS_PER_OVER


def calculate_player_points(stats: PlayerStats) -> float:
    """Score batting directly and bowling inversely to strike rate and economy."""

    batting_strike_rate = calculate_batting_strike_rate(stats)
    batting_average = calculate_batting_average(stats)
    bowling_strike_rate = calculate_bowling_strike_rate(stats)
    economy_rate = calculate_economy_rate(stats)

    points = batting_strike_rate / POINTS_STRIKE_RATE_DIVISOR + batting_average * POINTS_AVERAGE_WEIGHT
    if bowling_strike_rate is not None and bowling_strike_rate > 0:
        points += POINTS_BOWLING_STRIKE_NUMERATOR / bowling_strike_rate
    if economy_rate > 0:
        points += POINTS_ECONOMY_NUMERATOR / economy_rate
    return points


def calculate_base_price(points: float) -> str:
    """Return the auction base price for ``points`` as a plain decimal string.

    The raw price ``(9 * points + 100) * 1000`` is rounded half-up to the
    nearest multiple of 50,000.
    """

    raw = (PRICE_POINTS_WEIGHT * points + PRICE_FLOOR) * PRICE_UNIT
    steps = math.floor(raw / PRICE_STEP + 0.5)
    return str(int(steps) * PRICE_STEP)


def get_complete_player_stats(stats: PlayerStats) -> CompletePlayerStats:
    bowling_strike_rate = calculate_bowling_strike_rate(stats)
    return CompletePlayerStats(
        **stats.model_dump(),
        batting_strike_rate=calculate_batting_strike_rate(stats),
        batting_average=calculate_batting_average(stats),
        # No wickets: reported as 0 in the bundle.
        bowling_strike_rate=bowling_strike_rate if bowling_strike_rate is not None else 0.0,
        economy_rate=calculate_economy_rate(stats),
        player_points=calculate_player_points(stats),
    )


def value_player(data: TournamentData | Mapping[str, Any]) -> PlayerValuation:
    """Run the full pipeline for one tournament line."""

    stats = get_complete_player_stats(create_player_stats_from_tournament_data(data))
    return PlayerValuation(stats=stats, base_price=calculate_base_price(stats.player_points))
