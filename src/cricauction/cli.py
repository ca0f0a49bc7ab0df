"""Command-line interface for valuing players from tournament lines."""

from __future__ import annotations

import argparse
import csv
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, List, Mapping

from pydantic import ValidationError

from cricauction.models import PlayerValuation, TournamentData
from cricauction.persistence import DocumentStore
from cricauction.services import NewPlayer, create_players
from cricauction.valuation import value_player


TOURNAMENT_FIELDS = tuple(TournamentData.model_fields)

OUTPUT_HEADER = [
    "name",
    "category",
    "total_runs",
    "total_balls_faced",
    "innings_played",
    "total_balls_bowled",
    "total_wickets_taken",
    "total_runs_conceded",
    "batting_strike_rate",
    "batting_average",
    "bowling_strike_rate",
    "economy_rate",
    "player_points",
    "base_price",
]


@dataclass
class ValuedPlayer:
    name: str
    category: str
    tournament_data: TournamentData
    valuation: PlayerValuation


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Value cricket players from tournament performance")
    parser.add_argument("input", type=Path, help="CSV or JSON file of tournament lines")
    parser.add_argument("--output", type=Path, default=Path("valuations.csv"), help="Output CSV path")
    parser.add_argument("--top", type=int, default=None, help="Print the N highest valued players")
    parser.add_argument(
        "--store",
        type=Path,
        default=None,
        help="Also create the valued players in this document store file",
    )
    return parser.parse_args(argv)


def load_rows(path: Path) -> List[dict[str, Any]]:
    """Read raw rows from a CSV (header row) or a JSON list of objects."""

    if path.suffix.lower() == ".json":
        payload = json.loads(path.read_text(encoding="utf-8"))
        if isinstance(payload, dict):
            payload = payload.get("players", [])
        if not isinstance(payload, list):
            raise ValueError(f"{path} must contain a list of player objects")
        return [dict(item) for item in payload]
    with path.open(newline="", encoding="utf-8") as f:
        return [dict(row) for row in csv.DictReader(f)]


def _row_to_tournament_data(row: Mapping[str, Any]) -> TournamentData:
    values = {key: row[key] for key in TOURNAMENT_FIELDS if row.get(key) not in (None, "")}
    return TournamentData.model_validate(values)


def value_rows(rows: Iterable[Mapping[str, Any]]) -> tuple[List[ValuedPlayer], List[str]]:
    """Value every row, returning the results and one message per skipped row."""

    valued: List[ValuedPlayer] = []
    skipped: List[str] = []
    for index, row in enumerate(rows, start=1):
        name = str(row.get("name") or "").strip()
        try:
            data = _row_to_tournament_data(row)
        except ValidationError as exc:
            fields = ", ".join(str(err["loc"][0]) for err in exc.errors() if err.get("loc"))
            skipped.append(f"row {index} ({name or 'unnamed'}): invalid {fields}")
            continue
        valued.append(
            ValuedPlayer(
                name=name,
                category=str(row.get("category") or ""),
                tournament_data=data,
                valuation=value_player(data),
            )
        )
    return valued, skipped


def write_valuations(path: Path, players: Iterable[ValuedPlayer]) -> None:
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(OUTPUT_HEADER)
        for player in players:
            stats = player.valuation.stats
            writer.writerow([
                player.name,
                player.category,
                stats.total_runs,
                stats.total_balls_faced,
                stats.innings_played,
                stats.total_balls_bowled,
                stats.total_wickets_taken,
                stats.total_runs_conceded,
                f"{stats.batting_strike_rate:.2f}",
                f"{stats.batting_average:.2f}",
                f"{stats.bowling_strike_rate:.2f}",
                f"{stats.economy_rate:.2f}",
                f"{stats.player_points:.2f}",
                player.valuation.base_price,
            ])


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)

    rows = load_rows(args.input)
    valued, skipped = value_rows(rows)
    write_valuations(args.output, valued)
    print(f"Valued {len(valued)}/{len(rows)} players; wrote {args.output}")

    if skipped:
        preview = "; ".join(skipped[:5])
        more = len(skipped) - 5
        suffix = f"; +{more} more" if more > 0 else ""
        print(f"Skipped rows: {preview}{suffix}")

    if args.top:
        ranked = sorted(valued, key=lambda item: item.valuation.stats.player_points, reverse=True)
        for rank, player in enumerate(ranked[: args.top], start=1):
            print(
                f"{rank:>2}. {player.name or '-'}  points={player.valuation.stats.player_points:.2f}"
                f"  base_price={player.valuation.base_price}"
            )

    if args.store:
        store = DocumentStore(args.store)
        created = create_players(
            store,
            [
                NewPlayer(
                    name=player.name,
                    category=player.category,
                    base_price=player.valuation.base_price,
                    tournament_data=player.tournament_data,
                )
                for player in valued
            ],
        )
        print(f"Created {len(created)} players in {args.store}")


if __name__ == "__main__":
    main()
