"""Sequential, zero-padded document IDs backed by per-namespace counters."""

from __future__ import annotations

import logging

from cricauction.persistence import DocumentStore, StoreError, Transaction


logger = logging.getLogger("uvicorn.error")

COUNTERS_COLLECTION = "counters"
ID_WIDTH = 4


def _current_count(counter: dict | None) -> int:
    if counter is None:
        return 0
    count = counter.get("count")
    if isinstance(count, float) and count.is_integer():
        count = int(count)
    if isinstance(count, bool) or not isinstance(count, int) or count < 0:
        return 0
    return count


def generate_next_id(store: DocumentStore, namespace: str) -> str:
    """Allocate the next ID for ``namespace`` (``"0001"`` for a fresh one).

    The counter lives in ``counters/<namespace>`` and is read, incremented and
    overwritten inside one store transaction; conflicting writers are retried
    by the store. Store errors are logged and re-raised unchanged.
    """

    def _increment(tx: Transaction) -> int:
        next_count = _current_count(tx.get(COUNTERS_COLLECTION, namespace)) + 1
        tx.set(COUNTERS_COLLECTION, namespace, {"count": next_count})
        return next_count

    try:
        next_count = store.run_transaction(_increment)
    except StoreError as exc:
        logger.error("Error generating next ID for %s: %s", namespace, exc)
        raise
    return str(next_count).zfill(ID_WIDTH)
