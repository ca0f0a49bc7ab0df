"""SQLite-backed document store with per-call write transactions."""

from __future__ import annotations

import json
import logging
import random
import sqlite3
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, TypeVar
from uuid import uuid4

from cricauction.config import StoreSettings, resolve_db_path


logger = logging.getLogger(__name__)

T = TypeVar("T")

_BACKOFF_BASE = 0.01
_BACKOFF_MAX = 0.25


class StoreError(RuntimeError):
    """Base class for document store failures."""


class StoreUnavailableError(StoreError):
    """Raised when the database cannot be opened."""


class TransactionConflictError(StoreError):
    """Raised when a transaction keeps losing the write lock to other writers."""


class TransactionTimeoutError(StoreError):
    """Raised when a transaction does not commit before its deadline."""


@dataclass
class Document:
    collection: str
    doc_id: str
    data: Dict[str, Any]


class Transaction:
    """Handle passed to ``run_transaction`` callbacks.

    Reads go straight to the database while the write lock is held; writes are
    buffered and applied together on commit. A read after a buffered write
    sees the buffered value.
    """

    def __init__(self, conn: sqlite3.Connection):
        self._conn = conn
        self._writes: Dict[Tuple[str, str], Dict[str, Any]] = {}

    def get(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        key = (collection, doc_id)
        if key in self._writes:
            return dict(self._writes[key])
        return _select(self._conn, collection, doc_id)

    def set(self, collection: str, doc_id: str, data: Mapping[str, Any]) -> None:
        self._writes[(collection, doc_id)] = dict(data)

    def _flush(self) -> None:
        for (collection, doc_id), data in self._writes.items():
            _upsert(self._conn, collection, doc_id, data)


def _select(conn: sqlite3.Connection, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
    row = conn.execute(
        "SELECT data_json FROM documents WHERE collection = ? AND doc_id = ?",
        (collection, doc_id),
    ).fetchone()
    if row is None:
        return None
    return json.loads(row["data_json"])


def _upsert(conn: sqlite3.Connection, collection: str, doc_id: str, data: Mapping[str, Any]) -> None:
    conn.execute(
        """
        INSERT INTO documents (collection, doc_id, data_json)
        VALUES (?, ?, ?)
        ON CONFLICT(collection, doc_id) DO UPDATE SET data_json = excluded.data_json
        """,
        (collection, doc_id, json.dumps(dict(data), default=str)),
    )


def _is_lock_error(exc: sqlite3.OperationalError) -> bool:
    message = str(exc).lower()
    return "locked" in message or "busy" in message


class DocumentStore:
    """Collections of JSON documents keyed by ``(collection, doc_id)``.

    Collection names are free-form paths, so ``players/0001/tournaments`` is a
    sub-collection of player ``0001``.
    """

    def __init__(self, db_path: Path | str | None = None, settings: StoreSettings | None = None):
        resolved = resolve_db_path(db_path)
        self._use_uri = isinstance(resolved, str)
        self.db_path = resolved
        self.settings = settings or StoreSettings.from_env()
        self._ensure_schema()

    def _connect(self, *, timeout: float | None = None) -> sqlite3.Connection:
        busy_timeout = self.settings.lock_timeout if timeout is None else timeout
        try:
            if isinstance(self.db_path, Path):
                self.db_path.parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(
                self.db_path,
                timeout=busy_timeout,
                uri=self._use_uri,
                isolation_level=None,
                check_same_thread=False,
            )
        except (sqlite3.OperationalError, OSError) as exc:
            raise StoreUnavailableError(f"Cannot open document store at {self.db_path}: {exc}") from exc
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_schema(self) -> None:
        conn = self._connect()
        try:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS documents (
                    collection TEXT NOT NULL,
                    doc_id TEXT NOT NULL,
                    data_json TEXT NOT NULL,
                    PRIMARY KEY (collection, doc_id)
                )
                """
            )
        except sqlite3.OperationalError as exc:
            raise StoreUnavailableError(f"Cannot prepare document store at {self.db_path}: {exc}") from exc
        finally:
            conn.close()

    def get(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        conn = self._connect()
        try:
            return _select(conn, collection, doc_id)
        except sqlite3.OperationalError as exc:
            raise StoreUnavailableError(str(exc)) from exc
        finally:
            conn.close()

    def set(self, collection: str, doc_id: str, data: Mapping[str, Any]) -> None:
        """Overwrite a document, creating it when missing."""

        def _write(tx: Transaction) -> None:
            tx.set(collection, doc_id, data)

        self.run_transaction(_write)

    def add(self, collection: str, data: Mapping[str, Any]) -> str:
        doc_id = uuid4().hex
        self.set(collection, doc_id, data)
        return doc_id

    def update(self, collection: str, doc_id: str, updates: Mapping[str, Any]) -> Dict[str, Any]:
        """Merge ``updates`` into an existing document and return the result."""

        def _apply(tx: Transaction) -> Dict[str, Any]:
            current = tx.get(collection, doc_id)
            if current is None:
                raise KeyError(f"Document {collection}/{doc_id} not found")
            current.update(updates)
            tx.set(collection, doc_id, current)
            return current

        return self.run_transaction(_apply)

    def list(
        self,
        collection: str,
        *,
        where: Mapping[str, Any] | None = None,
        limit: int | None = None,
    ) -> List[Document]:
        """Return documents ordered by id, keeping those whose fields equal ``where``."""

        conn = self._connect()
        try:
            rows = conn.execute(
                "SELECT doc_id, data_json FROM documents WHERE collection = ? ORDER BY doc_id",
                (collection,),
            ).fetchall()
        except sqlite3.OperationalError as exc:
            raise StoreUnavailableError(str(exc)) from exc
        finally:
            conn.close()

        documents: List[Document] = []
        for row in rows:
            if limit is not None and len(documents) >= limit:
                break
            data = json.loads(row["data_json"])
            if where and any(data.get(key) != value for key, value in where.items()):
                continue
            documents.append(Document(collection=collection, doc_id=row["doc_id"], data=data))
        return documents

    def run_transaction(self, fn: Callable[[Transaction], T]) -> T:
        """Run ``fn`` under the database write lock and commit its writes.

        Failing to take the lock counts as a conflict; the attempt is retried
        with jittered backoff up to ``max_attempts`` times. The whole call is
        bounded by ``transaction_timeout``. Exceptions raised by ``fn`` roll the
        transaction back and propagate unchanged.
        """

        settings = self.settings
        deadline = time.monotonic() + settings.transaction_timeout
        attempt = 0
        while True:
            attempt += 1
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                raise TransactionTimeoutError(
                    f"Transaction did not commit within {settings.transaction_timeout:.2f}s"
                )
            conn = self._connect(timeout=min(settings.lock_timeout, remaining))
            try:
                return self._attempt(conn, fn)
            except sqlite3.OperationalError as exc:
                if not _is_lock_error(exc):
                    raise StoreUnavailableError(str(exc)) from exc
                if attempt >= settings.max_attempts:
                    raise TransactionConflictError(
                        f"Transaction aborted after {attempt} attempts: {exc}"
                    ) from exc
                logger.debug("Write lock busy (attempt %d/%d); retrying", attempt, settings.max_attempts)
            finally:
                conn.close()
            time.sleep(min(_BACKOFF_MAX, _BACKOFF_BASE * (2 ** attempt)) * random.random())

    @staticmethod
    def _attempt(conn: sqlite3.Connection, fn: Callable[[Transaction], T]) -> T:
        conn.execute("BEGIN IMMEDIATE")
        tx = Transaction(conn)
        try:
            result = fn(tx)
            tx._flush()
            conn.execute("COMMIT")
        except BaseException:
            if conn.in_transaction:
                conn.execute("ROLLBACK")
            raise
        return result
