"""Player creation and maintenance on top of the document store."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional

from cricauction.id_allocator import generate_next_id
from cricauction.models import TournamentData
from cricauction.persistence import Document, DocumentStore
from cricauction.valuation import value_player


logger = logging.getLogger("uvicorn.error")

PLAYERS_COLLECTION = "players"
DEFAULT_BASE_PRICE = "0"


def tournaments_collection(player_id: str) -> str:
    return f"{PLAYERS_COLLECTION}/{player_id}/tournaments"


@dataclass
class NewPlayer:
    name: str
    category: str = ""
    base_price: Optional[str] = None
    active_status: bool = True
    tournament_data: Optional[TournamentData] = None


@dataclass
class CreatedPlayer:
    player_id: str
    name: str
    base_price: str
    tournament_id: Optional[str] = None


def _resolve_base_price(player: NewPlayer) -> str:
    if player.base_price not in (None, ""):
        return str(player.base_price)
    if player.tournament_data is not None:
        return value_player(player.tournament_data).base_price
    return DEFAULT_BASE_PRICE


def create_player(store: DocumentStore, player: NewPlayer) -> CreatedPlayer:
    """Allocate an ID, store the player and its optional tournament line.

    Without an explicit base price the player is priced from the tournament
    line, or ``"0"`` when there is none.
    """

    if not player.name:
        raise ValueError("Player name is required")

    player_id = generate_next_id(store, PLAYERS_COLLECTION)
    base_price = _resolve_base_price(player)
    store.set(
        PLAYERS_COLLECTION,
        player_id,
        {
            "name": player.name,
            "category": player.category or "",
            "base_price": base_price,
            "active_status": player.active_status,
        },
    )

    tournament_id = None
    if player.tournament_data is not None:
        collection = tournaments_collection(player_id)
        tournament_id = generate_next_id(store, collection)
        store.set(collection, tournament_id, player.tournament_data.model_dump())

    logger.info("Created player %s (%s) with base price %s", player_id, player.name, base_price)
    return CreatedPlayer(
        player_id=player_id,
        name=player.name,
        base_price=base_price,
        tournament_id=tournament_id,
    )


def create_players(store: DocumentStore, players: Iterable[NewPlayer]) -> List[CreatedPlayer]:
    """Create each named player in order; entries without a name are skipped."""

    created: List[CreatedPlayer] = []
    for player in players:
        if not player.name:
            logger.warning("Skipping player entry without a name")
            continue
        created.append(create_player(store, player))
    return created


def player_to_dict(document: Document) -> Dict[str, Any]:
    return {"id": document.doc_id, **document.data}


def get_player(store: DocumentStore, player_id: str, *, active_only: bool = False) -> Optional[Dict[str, Any]]:
    data = store.get(PLAYERS_COLLECTION, player_id)
    if data is None:
        return None
    if active_only and not data.get("active_status"):
        return None
    return {"id": player_id, **data}


def list_players(store: DocumentStore, *, category: str | None = None) -> List[Dict[str, Any]]:
    where = {"category": category} if category else None
    return [player_to_dict(doc) for doc in store.list(PLAYERS_COLLECTION, where=where)]


def update_player(store: DocumentStore, player_id: str, updates: Mapping[str, Any]) -> Dict[str, Any]:
    """Apply ``updates`` to a player, raising ``KeyError`` when it does not exist."""

    if not updates:
        raise ValueError("No valid fields provided for update")
    store.update(PLAYERS_COLLECTION, player_id, updates)
    return {"id": player_id, **updates}


def deactivate_player(store: DocumentStore, player_id: str) -> None:
    """Soft delete: the document stays, flagged inactive."""

    data = store.get(PLAYERS_COLLECTION, player_id)
    if data is None or not data.get("active_status"):
        raise KeyError(f"Player {player_id} not found")
    store.update(PLAYERS_COLLECTION, player_id, {"active_status": False})
