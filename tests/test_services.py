from pathlib import Path

import pytest

from cricauction.config import StoreSettings
from cricauction.models import TournamentData
from cricauction.persistence import DocumentStore
from cricauction.services import (
    NewPlayer,
    TournamentStatsError,
    analyze_tournament_stats,
    create_player,
    create_players,
    deactivate_player,
    get_player,
    list_players,
    tournaments_collection,
)


@pytest.fixture()
def store(tmp_path: Path) -> DocumentStore:
    return DocumentStore(tmp_path / "store.sqlite", settings=StoreSettings())


def _line(**kwargs) -> TournamentData:
    return TournamentData(**kwargs)


def test_create_player_prices_from_tournament_line(store: DocumentStore):
    created = create_player(
        store,
        NewPlayer(
            name="Asha",
            category="all-rounder",
            tournament_data=_line(
                runs=450, balls_faced=300, innings_played=10, wickets=15, overs_bowled=40, runs_conceded=280
            ),
        ),
    )

    assert created.player_id == "0001"
    assert created.tournament_id == "0001"
    assert created.base_price == "1150000"
    assert store.get("players", "0001") == {
        "name": "Asha",
        "category": "all-rounder",
        "base_price": "1150000",
        "active_status": True,
    }
    line = store.get(tournaments_collection("0001"), "0001")
    assert line["runs"] == 450
    assert line["overs_bowled"] == 40


def test_explicit_price_wins_and_default_is_zero(store: DocumentStore):
    priced = create_player(store, NewPlayer(name="Bo", base_price="250000", tournament_data=_line(runs=10)))
    unpriced = create_player(store, NewPlayer(name="Cy"))
    assert priced.base_price == "250000"
    assert unpriced.base_price == "0"
    assert unpriced.tournament_id is None


def test_create_players_skips_nameless_entries(store: DocumentStore):
    created = create_players(store, [NewPlayer(name="Asha"), NewPlayer(name=""), NewPlayer(name="Bo")])
    assert [item.player_id for item in created] == ["0001", "0002"]
    assert [item["name"] for item in list_players(store)] == ["Asha", "Bo"]


def test_each_player_has_its_own_tournament_sequence(store: DocumentStore):
    first = create_player(store, NewPlayer(name="Asha", tournament_data=_line(runs=5)))
    second = create_player(store, NewPlayer(name="Bo", tournament_data=_line(runs=7)))
    assert first.tournament_id == second.tournament_id == "0001"


def test_create_player_requires_name(store: DocumentStore):
    with pytest.raises(ValueError):
        create_player(store, NewPlayer(name=""))


def test_deactivate_player_is_soft_delete(store: DocumentStore):
    create_player(store, NewPlayer(name="Asha"))
    deactivate_player(store, "0001")
    assert get_player(store, "0001")["active_status"] is False
    assert get_player(store, "0001", active_only=True) is None
    with pytest.raises(KeyError):
        deactivate_player(store, "0001")


def test_list_players_by_category(store: DocumentStore):
    create_players(store, [NewPlayer(name="Asha", category="batter"), NewPlayer(name="Bo", category="bowler")])
    assert [p["id"] for p in list_players(store, category="bowler")] == ["0002"]


def test_tournament_stats_totals_and_leaders(store: DocumentStore):
    create_players(
        store,
        [
            NewPlayer(name="Asha", tournament_data=_line(runs=300, wickets=2)),
            NewPlayer(name="Bo", tournament_data=_line(runs=120, wickets=9)),
            NewPlayer(name="Cy", tournament_data=_line(runs=300, wickets=9)),
            NewPlayer(name="Dev"),
        ],
    )

    summary = analyze_tournament_stats(store, "0001")
    assert summary.overall_runs == 720
    assert summary.overall_wickets == 20
    assert summary.highest_run_scorer.player == "Asha"
    assert summary.highest_wicket_taker.player == "Bo"
    assert summary.to_dict()["highest_wicket_taker"] == {"player": "Bo", "wickets": 9}


def test_tournament_stats_for_unknown_tournament_are_empty(store: DocumentStore):
    create_player(store, NewPlayer(name="Asha", tournament_data=_line(runs=10)))
    summary = analyze_tournament_stats(store, "0042")
    assert summary.to_dict() == {
        "overall_runs": 0,
        "overall_wickets": 0,
        "highest_run_scorer": {"player": "", "runs": 0},
        "highest_wicket_taker": {"player": "", "wickets": 0},
    }


def test_tournament_stats_wraps_bad_documents(store: DocumentStore):
    store.set("players", "0001", {"name": "Asha"})
    store.set(tournaments_collection("0001"), "0001", {"runs": "lots"})
    with pytest.raises(TournamentStatsError):
        analyze_tournament_stats(store, "0001")
