"""Lightweight REST client for the cricauction API."""

from __future__ import annotations

import argparse
import json
from pathlib import Path

import httpx


def load_json(path: Path) -> dict | list:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise SystemExit(f"Invalid JSON in {path}: {exc}") from exc


def main() -> None:
    parser = argparse.ArgumentParser(description="Interact with the cricauction REST API")
    parser.add_argument("base_url", help="Base URL of the API, e.g. http://localhost:8000")
    parser.add_argument("--list-players", action="store_true", help="List players and exit")
    parser.add_argument("--category", default=None, help="Category filter for --list-players")
    parser.add_argument("--create-players", type=Path, metavar="JSON", help="Bulk create players from a JSON file")
    parser.add_argument("--value", type=Path, metavar="JSON", help="Value a single tournament line from a JSON file")
    parser.add_argument("--tournament-stats", metavar="TOURNAMENT_ID", help="Fetch statistics for a tournament")
    args = parser.parse_args()

    with httpx.Client(base_url=args.base_url) as client:
        if args.list_players:
            params = {"category": args.category} if args.category else None
            resp = client.get("/players/get", params=params)
            if resp.status_code == 404:
                raise SystemExit("no players found")
            resp.raise_for_status()
            print(json.dumps(resp.json(), indent=2))
        if args.create_players:
            payload = load_json(args.create_players)
            if isinstance(payload, list):
                payload = {"players": payload}
            resp = client.post("/players/create", json=payload)
            resp.raise_for_status()
            body = resp.json()
            print(f"Created {body['players_created']} players")
            for player in body["players"]:
                print(f"  {player['player_id']}  {player['name']}  base_price={player['base_price']}")
        if args.value:
            resp = client.post("/players/valuation", json=load_json(args.value))
            resp.raise_for_status()
            print(json.dumps(resp.json(), indent=2))
        if args.tournament_stats:
            resp = client.get(f"/tournament/{args.tournament_stats}")
            resp.raise_for_status()
            print(json.dumps(resp.json(), indent=2))


if __name__ == "__main__":
    main()
