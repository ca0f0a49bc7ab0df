"""Auction rules shared by request validation and services."""

from __future__ import annotations

import re
from dataclasses import dataclass, field


@dataclass(frozen=True)
class AuctionRules:
    player_name_max: int = 50
    category_max: int = 30
    game_name_max: int = 50
    squad_min: int = 10
    squad_max: int = 11
    game_name_pattern: re.Pattern[str] = field(default=re.compile(r"^[A-Za-z0-9 ]*$"))


DEFAULT_RULES = AuctionRules()


def get_rules() -> AuctionRules:
    """Return the active auction rules."""

    return DEFAULT_RULES
