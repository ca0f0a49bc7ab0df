"""Configuration helpers for storage settings and auction rules."""

from .rules import AuctionRules, get_rules
from .settings import StoreSettings, resolve_db_path

__all__ = [
    "AuctionRules",
    "StoreSettings",
    "get_rules",
    "resolve_db_path",
]
