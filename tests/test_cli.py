import csv
import json
from pathlib import Path

from cricauction.cli import load_rows, main, value_rows
from cricauction.config import StoreSettings
from cricauction.persistence import DocumentStore


def _write_csv(path: Path) -> None:
    path.write_text(
        "name,category,runs,balls_faced,innings_played,wickets,overs_bowled,runs_conceded\n"
        "Asha,all-rounder,450,300,10,15,40,280\n"
        "Bo,batter,200,160,5,,,\n"
        "Cy,bowler,-5,10,1,0,2.3,20\n",
        encoding="utf-8",
    )


def test_value_rows_skips_invalid_rows(tmp_path: Path):
    source = tmp_path / "lines.csv"
    _write_csv(source)

    valued, skipped = value_rows(load_rows(source))
    assert [player.name for player in valued] == ["Asha", "Bo"]
    assert valued[0].valuation.base_price == "1150000"
    assert valued[1].valuation.stats.total_balls_bowled == 0
    assert len(skipped) == 1
    assert "Cy" in skipped[0] and "runs" in skipped[0]


def test_load_rows_accepts_json(tmp_path: Path):
    source = tmp_path / "lines.json"
    source.write_text(json.dumps({"players": [{"name": "Asha", "runs": 12, "overs_bowled": 4.3}]}), encoding="utf-8")
    valued, skipped = value_rows(load_rows(source))
    assert not skipped
    assert valued[0].valuation.stats.total_balls_bowled == 27


def test_main_writes_csv_and_imports_players(tmp_path: Path, capsys):
    source = tmp_path / "lines.csv"
    output = tmp_path / "valuations.csv"
    db_path = tmp_path / "cli.sqlite"
    _write_csv(source)

    main([str(source), "--output", str(output), "--top", "1", "--store", str(db_path)])

    printed = capsys.readouterr().out
    assert "Valued 2/3 players" in printed
    assert "Skipped rows" in printed
    assert " 1. Asha" in printed
    assert "Created 2 players" in printed

    with output.open(newline="", encoding="utf-8") as f:
        rows = list(csv.DictReader(f))
    assert [row["name"] for row in rows] == ["Asha", "Bo"]
    assert rows[0]["player_points"] == "117.25"
    assert rows[0]["base_price"] == "1150000"

    store = DocumentStore(db_path, settings=StoreSettings())
    assert store.get("players", "0001")["base_price"] == "1150000"
    assert store.get("players/0001/tournaments", "0001")["runs"] == 450


def test_store_argument_wins_over_environment(tmp_path: Path, monkeypatch, capsys):
    source = tmp_path / "lines.csv"
    db_path = tmp_path / "cli.sqlite"
    env_path = tmp_path / "env.sqlite"
    _write_csv(source)
    monkeypatch.setenv("CRICAUCTION_DB_PATH", str(env_path))

    main([str(source), "--output", str(tmp_path / "out.csv"), "--store", str(db_path)])

    assert f"Created 2 players in {db_path}" in capsys.readouterr().out
    assert db_path.exists()
    assert not env_path.exists()
