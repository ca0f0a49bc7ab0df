"""Environment-driven settings for the document store."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path


logger = logging.getLogger(__name__)

DB_PATH_ENV = "CRICAUCTION_DB_PATH"
TXN_TIMEOUT_ENV = "CRICAUCTION_TXN_TIMEOUT"
LOCK_TIMEOUT_ENV = "CRICAUCTION_LOCK_TIMEOUT"
TXN_ATTEMPTS_ENV = "CRICAUCTION_TXN_ATTEMPTS"

DEFAULT_DB_PATH = Path(__file__).resolve().parent.parent / "cricauction.sqlite"
DEFAULT_TXN_TIMEOUT = 10.0
DEFAULT_LOCK_TIMEOUT = 2.0
DEFAULT_TXN_ATTEMPTS = 5


def _env_float(name: str, default: float, *, clamp_min: float | None = None, clamp_max: float | None = None) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Invalid float for %s: %s; using default %.2f", name, raw, default)
        return default
    if clamp_min is not None:
        value = max(clamp_min, value)
    if clamp_max is not None:
        value = min(clamp_max, value)
    return value


def _env_int(name: str, default: int, *, min_value: int | None = None) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Invalid int for %s: %s; using default %d", name, raw, default)
        return default
    if min_value is not None:
        value = max(min_value, value)
    return value


@dataclass(frozen=True)
class StoreSettings:
    transaction_timeout: float = DEFAULT_TXN_TIMEOUT
    lock_timeout: float = DEFAULT_LOCK_TIMEOUT
    max_attempts: int = DEFAULT_TXN_ATTEMPTS

    @classmethod
    def from_env(cls) -> "StoreSettings":
        return cls(
            transaction_timeout=_env_float(TXN_TIMEOUT_ENV, DEFAULT_TXN_TIMEOUT, clamp_min=0.01),
            lock_timeout=_env_float(LOCK_TIMEOUT_ENV, DEFAULT_LOCK_TIMEOUT, clamp_min=0.0),
            max_attempts=_env_int(TXN_ATTEMPTS_ENV, DEFAULT_TXN_ATTEMPTS, min_value=1),
        )


def resolve_db_path(path: Path | str | None = None) -> Path | str:
    """Pick the store location: an explicit ``path`` first, then the env override.

    Values starting with ``file:`` are returned untouched and opened as SQLite URIs.
    """

    if path is not None:
        if isinstance(path, str) and path.startswith("file:"):
            return path
        return Path(path)
    env_db = os.getenv(DB_PATH_ENV)
    if env_db:
        return env_db if env_db.startswith("file:") else Path(env_db)
    return DEFAULT_DB_PATH
