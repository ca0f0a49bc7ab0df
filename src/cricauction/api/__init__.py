"""REST API for the cricket auction backend."""

from __future__ import annotations

import logging
import math
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Mapping

from fastapi import FastAPI, HTTPException, Query

from cricauction.api.schemas import (
    BulkPlayerRequest,
    BulkPlayerResponse,
    CreatedPlayerResponse,
    GameCreateRequest,
    GameResponse,
    JoinGameRequest,
    JoinedGamesResponse,
    PlayerCreateRequest,
    PlayerEntry,
    PlayerUpdateRequest,
    PointsRequest,
    PointsResponse,
    SinglePlayerResponse,
    TeamCreateRequest,
    TeamResponse,
    TournamentStatsResponse,
)
from cricauction.config import AuctionRules, get_rules
from cricauction.models import PlayerStats, PlayerValuation, TournamentData
from cricauction.persistence import DocumentStore, StoreError
from cricauction.services import (
    NewPlayer,
    TournamentStatsError,
    analyze_tournament_stats,
    create_player,
    create_players,
    deactivate_player,
    get_player,
    list_players,
    update_player,
)
from cricauction.valuation import calculate_player_points, value_player


logger = logging.getLogger("uvicorn.error")

TEAMS_COLLECTION = "user_teams"
TOURNAMENTS_COLLECTION = "tournaments"
GAMES_COLLECTION = "games"
USERS_COLLECTION = "users"


def _store_failure(action: str, exc: Exception) -> HTTPException:
    logger.error("Error %s: %s", action, exc)
    return HTTPException(status_code=500, detail=f"Failed to {action}")


def _format_price(value: float | str) -> str:
    number = float(value)
    return str(int(number)) if number.is_integer() else format(Decimal(str(number)), "f")


def _parse_price(value: Any) -> float | None:
    if isinstance(value, bool) or value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) and number > 0 else None


def _valid_player_updates(payload: PlayerUpdateRequest, rules: AuctionRules) -> dict[str, Any]:
    """Keep only the fields that pass validation; invalid ones are dropped silently."""

    updates: dict[str, Any] = {}
    if payload.name and 1 <= len(payload.name) <= rules.player_name_max:
        updates["name"] = payload.name
    if payload.category and 1 <= len(payload.category) <= rules.category_max:
        updates["category"] = payload.category
    price = _parse_price(payload.base_price)
    if price is not None:
        updates["base_price"] = _format_price(price)
    if payload.active_status is not None:
        updates["active_status"] = payload.active_status
    return updates


def _entry_to_new_player(entry: PlayerEntry) -> NewPlayer:
    data = entry.player_data
    if data is None:
        return NewPlayer(name="")
    base_price = data.base_price
    return NewPlayer(
        name=data.name or "",
        category=data.category or "",
        base_price=_format_price(base_price) if _parse_price(base_price) is not None else None,
        active_status=data.active_status,
        tournament_data=entry.tournament_data,
    )


def _document_or_404(store: DocumentStore, collection: str, doc_id: str, detail: str) -> dict[str, Any]:
    data = store.get(collection, doc_id)
    if data is None:
        raise HTTPException(status_code=404, detail=detail)
    return data


def _game_to_response(game_id: str, data: Mapping[str, Any]) -> GameResponse:
    return GameResponse(game_id=game_id, **data)


def create_app(store: DocumentStore | None = None) -> FastAPI:
    app = FastAPI(title="cricauction")
    store = store or DocumentStore()
    app.state.store = store
    rules = get_rules()

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    # TODO: add authentication and admin-role dependencies to the /admin routes.

    @app.get("/admin/players")
    async def admin_list_players(category: str | None = Query(default=None)):
        try:
            players = list_players(store, category=category)
        except StoreError as exc:
            raise _store_failure("fetch players", exc) from exc
        if not players:
            raise HTTPException(status_code=404, detail="No players found")
        return players

    @app.get("/admin/players/{player_id}")
    async def admin_get_player(player_id: str):
        try:
            player = get_player(store, player_id)
        except StoreError as exc:
            raise _store_failure("fetch player details", exc) from exc
        if player is None:
            raise HTTPException(status_code=404, detail="Player not found")
        return player

    @app.post("/admin/player", status_code=201)
    async def admin_add_player(payload: PlayerCreateRequest):
        new_player = NewPlayer(
            name=payload.name,
            category=payload.category,
            base_price=_format_price(payload.base_price),
            active_status=payload.active_status,
        )
        try:
            created = create_player(store, new_player)
        except StoreError as exc:
            raise _store_failure("add player", exc) from exc
        return {
            "id": created.player_id,
            "name": payload.name,
            "category": payload.category,
            "base_price": created.base_price,
            "active_status": payload.active_status,
        }

    def _update(player_id: str, payload: PlayerUpdateRequest, *, active_only: bool) -> dict[str, Any]:
        try:
            if get_player(store, player_id, active_only=active_only) is None:
                raise HTTPException(status_code=404, detail="Player not found")
            updates = _valid_player_updates(payload, rules)
            if not updates:
                raise HTTPException(status_code=400, detail="No valid fields provided for update")
            return update_player(store, player_id, updates)
        except KeyError as exc:
            raise HTTPException(status_code=404, detail="Player not found") from exc
        except StoreError as exc:
            raise _store_failure("update player", exc) from exc

    def _deactivate(player_id: str) -> dict[str, str]:
        try:
            deactivate_player(store, player_id)
        except KeyError as exc:
            raise HTTPException(status_code=404, detail="Player not found") from exc
        except StoreError as exc:
            raise _store_failure("delete player", exc) from exc
        return {"message": "Player deleted successfully"}

    @app.put("/admin/players/{player_id}")
    async def admin_update_player(player_id: str, payload: PlayerUpdateRequest):
        return _update(player_id, payload, active_only=False)

    @app.delete("/admin/players/{player_id}")
    async def admin_delete_player(player_id: str):
        return _deactivate(player_id)

    @app.post("/players/create", status_code=201, response_model=BulkPlayerResponse)
    async def players_create_bulk(payload: BulkPlayerRequest):
        try:
            created = create_players(store, [_entry_to_new_player(entry) for entry in payload.players])
        except StoreError as exc:
            raise _store_failure("create players", exc) from exc
        return BulkPlayerResponse(
            players_created=len(created),
            players=[
                CreatedPlayerResponse(
                    player_id=item.player_id,
                    name=item.name,
                    base_price=item.base_price,
                    tournament_id=item.tournament_id,
                )
                for item in created
            ],
            message="Players and tournament data added successfully",
        )

    @app.post("/players/create/single", status_code=201, response_model=SinglePlayerResponse)
    async def players_create_single(payload: PlayerEntry):
        new_player = _entry_to_new_player(payload)
        if not new_player.name:
            raise HTTPException(status_code=400, detail="Player data is required with at least a name field")
        try:
            created = create_player(store, new_player)
        except StoreError as exc:
            raise _store_failure("create player", exc) from exc
        return SinglePlayerResponse(
            player_id=created.player_id,
            tournament_id=created.tournament_id,
            base_price=created.base_price,
            message="Player and tournament data added successfully",
        )

    @app.get("/players/get")
    async def players_list(category: str | None = Query(default=None)):
        try:
            players = list_players(store, category=category)
        except StoreError as exc:
            raise _store_failure("fetch players", exc) from exc
        if not players:
            raise HTTPException(status_code=404, detail="No players found")
        return players

    @app.post("/players/valuation", response_model=PlayerValuation)
    async def players_valuation(payload: TournamentData):
        return value_player(payload)

    @app.post("/calculate-points", response_model=PointsResponse)
    async def calculate_points(payload: PointsRequest):
        if not payload.total_runs or not payload.total_balls_faced:
            raise HTTPException(status_code=400, detail="Invalid player stats data")
        stats = PlayerStats(**payload.model_dump())
        return PointsResponse(player_points=calculate_player_points(stats))

    @app.get("/teams", response_model=TeamResponse)
    async def get_team(
        team_name: str | None = Query(default=None),
        team_id: str | None = Query(default=None),
    ):
        try:
            if team_id:
                data = _document_or_404(store, TEAMS_COLLECTION, team_id, "No Team found")
                return TeamResponse(id=team_id, **data)
            if team_name:
                matches = store.list(TEAMS_COLLECTION, where={"team_name": team_name}, limit=1)
                if not matches:
                    raise HTTPException(status_code=404, detail="No Teams found")
                return TeamResponse(id=matches[0].doc_id, **matches[0].data)
        except StoreError as exc:
            raise _store_failure("fetch team", exc) from exc
        raise HTTPException(status_code=400, detail="team_name or team_id should be provided")

    @app.post("/teams/createTeam", status_code=201, response_model=TeamResponse)
    async def create_team(payload: TeamCreateRequest):
        if not rules.squad_min <= len(payload.players) <= rules.squad_max:
            raise HTTPException(status_code=400, detail="Invalid players value")
        try:
            tournaments = store.list(
                TOURNAMENTS_COLLECTION,
                where={"tournament_id": payload.tournament_id},
                limit=1,
            )
            if not tournaments:
                raise HTTPException(status_code=404, detail="Tournament not found")
            team = payload.model_dump()
            team_id = store.add(TEAMS_COLLECTION, team)
        except StoreError as exc:
            raise _store_failure("add team", exc) from exc
        logger.info("Created team %s (%s) for tournament %s", team_id, payload.team_name, payload.tournament_id)
        return TeamResponse(id=team_id, **team)

    @app.get("/teams/players/{player_id}")
    async def team_get_player(player_id: str):
        try:
            player = get_player(store, player_id, active_only=True)
        except StoreError as exc:
            raise _store_failure("fetch player details", exc) from exc
        if player is None:
            raise HTTPException(status_code=404, detail="Player not found")
        return player

    @app.put("/teams/players/{player_id}")
    async def team_update_player(player_id: str, payload: PlayerUpdateRequest):
        return _update(player_id, payload, active_only=True)

    @app.delete("/teams/players/{player_id}")
    async def team_delete_player(player_id: str):
        return _deactivate(player_id)

    @app.post("/game/createGame", status_code=201, response_model=GameResponse)
    async def create_game(payload: GameCreateRequest):
        name = payload.game_name
        if len(name) > rules.game_name_max or not rules.game_name_pattern.match(name):
            raise HTTPException(status_code=400, detail="Invalid game_name value")
        if payload.game_start >= payload.game_end:
            raise HTTPException(status_code=400, detail="game_start must be before game_end")

        game_id = name.replace(" ", "_")
        game = {
            "game_name": name,
            "game_start": payload.game_start.isoformat(),
            "game_end": payload.game_end.isoformat(),
            "created_at": datetime.now(timezone.utc).isoformat(),
            "joined_team_names": [],
            "active_status": True,
        }
        try:
            if store.list(GAMES_COLLECTION, where={"game_name": name}, limit=1):
                raise HTTPException(status_code=400, detail="Game already exists. game_name should be unique")
            store.set(GAMES_COLLECTION, game_id, game)
        except StoreError as exc:
            raise _store_failure("add game", exc) from exc
        return _game_to_response(game_id, game)

    @app.post("/game/joinGame")
    async def join_game(payload: JoinGameRequest):
        try:
            user = _document_or_404(store, USERS_COLLECTION, payload.user_id, "User not found")
            joined_game_ids = list(user.get("joined_game_ids") or [])
            if joined_game_ids:
                raise HTTPException(status_code=403, detail="User can join only one game at a time")

            team = _document_or_404(store, TEAMS_COLLECTION, payload.team_id, "Team not found")
            if payload.team_id not in (user.get("teams") or []):
                raise HTTPException(status_code=403, detail="User does not own the team")

            game = _document_or_404(store, GAMES_COLLECTION, payload.game_id, "Game not found")
            team_name = team.get("team_name")
            joined_team_names = list(game.get("joined_team_names") or [])
            if team_name in joined_team_names:
                raise HTTPException(status_code=400, detail="Team already joined the game")

            logger.info("Team %s is joining game %s", payload.team_id, payload.game_id)
            joined_team_names.append(team_name)
            store.update(GAMES_COLLECTION, payload.game_id, {"joined_team_names": joined_team_names})
            store.update(USERS_COLLECTION, payload.user_id, {"joined_game_ids": [*joined_game_ids, payload.game_id]})
        except StoreError as exc:
            raise _store_failure("join game", exc) from exc
        return {"message": "Team joined the game successfully"}

    @app.get("/game/joinedGames/{user_id}", response_model=JoinedGamesResponse)
    async def joined_games(user_id: str):
        try:
            user = _document_or_404(store, USERS_COLLECTION, user_id, "User not found")
            games: list[dict] = []
            for game_id in user.get("joined_game_ids") or []:
                data = store.get(GAMES_COLLECTION, game_id)
                if data is not None:
                    games.append({"game_id": game_id, **data})
        except StoreError as exc:
            raise _store_failure("get joined games", exc) from exc
        return JoinedGamesResponse(games=games)

    @app.delete("/game/{game_id}")
    async def delete_game(game_id: str):
        try:
            game = store.get(GAMES_COLLECTION, game_id)
            if game is None or not game.get("active_status"):
                raise HTTPException(status_code=404, detail="Game not found")
            store.update(GAMES_COLLECTION, game_id, {"active_status": False})
        except StoreError as exc:
            raise _store_failure("delete game", exc) from exc
        return {"message": "Game deleted successfully"}

    @app.get("/tournament/{tournament_id}", response_model=TournamentStatsResponse)
    async def tournament_stats(tournament_id: str):
        try:
            summary = analyze_tournament_stats(store, tournament_id)
        except TournamentStatsError as exc:
            raise HTTPException(status_code=500, detail="Error fetching tournament stats") from exc
        return summary.to_dict()

    return app
