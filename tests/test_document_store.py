import sqlite3
from pathlib import Path

import pytest

from cricauction.config import StoreSettings
from cricauction.persistence import (
    DocumentStore,
    StoreUnavailableError,
    TransactionConflictError,
    TransactionTimeoutError,
)


@pytest.fixture()
def store(tmp_path: Path) -> DocumentStore:
    return DocumentStore(tmp_path / "store.sqlite", settings=StoreSettings())


def test_set_get_and_overwrite(store: DocumentStore):
    assert store.get("players", "0001") is None
    store.set("players", "0001", {"name": "Asha", "category": "batter"})
    store.set("players", "0001", {"name": "Asha"})
    assert store.get("players", "0001") == {"name": "Asha"}


def test_update_merges_and_requires_existing(store: DocumentStore):
    store.set("players", "0001", {"name": "Asha", "active_status": True})
    merged = store.update("players", "0001", {"active_status": False})
    assert merged == {"name": "Asha", "active_status": False}
    with pytest.raises(KeyError):
        store.update("players", "9999", {"active_status": False})


def test_list_filters_and_limits(store: DocumentStore):
    store.set("players", "0002", {"name": "Bo", "category": "bowler"})
    store.set("players", "0001", {"name": "Asha", "category": "batter"})
    store.set("players", "0003", {"name": "Cy", "category": "bowler"})
    store.set("players/0001/tournaments", "0001", {"runs": 10})

    assert [doc.doc_id for doc in store.list("players")] == ["0001", "0002", "0003"]
    bowlers = store.list("players", where={"category": "bowler"})
    assert [doc.data["name"] for doc in bowlers] == ["Bo", "Cy"]
    assert len(store.list("players", where={"category": "bowler"}, limit=1)) == 1
    assert store.list("players", limit=0) == []


def test_add_generates_unique_ids(store: DocumentStore):
    first = store.add("user_teams", {"team_name": "Strikers"})
    second = store.add("user_teams", {"team_name": "Chargers"})
    assert first != second
    assert store.get("user_teams", first) == {"team_name": "Strikers"}


def test_transaction_reads_its_own_writes(store: DocumentStore):
    def _body(tx):
        tx.set("counters", "players", {"count": 3})
        return tx.get("counters", "players")

    assert store.run_transaction(_body) == {"count": 3}
    assert store.get("counters", "players") == {"count": 3}


def test_transaction_rolls_back_when_body_raises(store: DocumentStore):
    def _body(tx):
        tx.set("counters", "players", {"count": 1})
        raise ValueError("boom")

    with pytest.raises(ValueError, match="boom"):
        store.run_transaction(_body)
    assert store.get("counters", "players") is None


def _hold_write_lock(path: Path) -> sqlite3.Connection:
    conn = sqlite3.connect(path, isolation_level=None)
    conn.execute("BEGIN IMMEDIATE")
    return conn


def test_conflict_after_exhausting_attempts(tmp_path: Path):
    path = tmp_path / "store.sqlite"
    store = DocumentStore(path, settings=StoreSettings(transaction_timeout=5.0, lock_timeout=0.01, max_attempts=2))
    blocker = _hold_write_lock(path)
    try:
        with pytest.raises(TransactionConflictError):
            store.run_transaction(lambda tx: tx.set("counters", "players", {"count": 1}))
    finally:
        blocker.execute("ROLLBACK")
        blocker.close()


def test_timeout_is_distinct_from_conflict(tmp_path: Path):
    path = tmp_path / "store.sqlite"
    store = DocumentStore(
        path,
        settings=StoreSettings(transaction_timeout=0.3, lock_timeout=0.05, max_attempts=10_000),
    )
    blocker = _hold_write_lock(path)
    try:
        with pytest.raises(TransactionTimeoutError):
            store.run_transaction(lambda tx: tx.set("counters", "players", {"count": 1}))
    finally:
        blocker.execute("ROLLBACK")
        blocker.close()
    assert store.get("counters", "players") is None


def test_unreachable_store_raises_unavailable(tmp_path: Path):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("", encoding="utf-8")
    with pytest.raises(StoreUnavailableError):
        DocumentStore(blocker / "store.sqlite", settings=StoreSettings())
