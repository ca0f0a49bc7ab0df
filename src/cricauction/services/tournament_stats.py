"""Tournament-wide aggregates across every player's tournament line."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from cricauction.persistence import DocumentStore, StoreError

from .players import PLAYERS_COLLECTION, tournaments_collection


logger = logging.getLogger("uvicorn.error")


class TournamentStatsError(RuntimeError):
    """Raised when tournament statistics cannot be aggregated."""


@dataclass
class TopPerformer:
    player: str = ""
    value: int = 0


@dataclass
class TournamentSummary:
    overall_runs: int = 0
    overall_wickets: int = 0
    highest_run_scorer: TopPerformer = field(default_factory=TopPerformer)
    highest_wicket_taker: TopPerformer = field(default_factory=TopPerformer)

    def to_dict(self) -> dict:
        return {
            "overall_runs": self.overall_runs,
            "overall_wickets": self.overall_wickets,
            "highest_run_scorer": {
                "player": self.highest_run_scorer.player,
                "runs": self.highest_run_scorer.value,
            },
            "highest_wicket_taker": {
                "player": self.highest_wicket_taker.player,
                "wickets": self.highest_wicket_taker.value,
            },
        }


def analyze_tournament_stats(store: DocumentStore, tournament_id: str) -> TournamentSummary:
    """Sum runs and wickets for ``tournament_id`` and find the top scorer and wicket taker.

    Players without a line for the tournament are skipped. Leaders change only
    on a strictly greater value, so ties go to the player listed first.
    """

    summary = TournamentSummary()
    try:
        players = store.list(PLAYERS_COLLECTION)
        for player in players:
            line = store.get(tournaments_collection(player.doc_id), tournament_id)
            if line is None:
                continue
            name = str(player.data.get("name", ""))
            runs = int(line.get("runs") or 0)
            wickets = int(line.get("wickets") or 0)

            summary.overall_runs += runs
            summary.overall_wickets += wickets
            if runs > summary.highest_run_scorer.value:
                summary.highest_run_scorer = TopPerformer(player=name, value=runs)
            if wickets > summary.highest_wicket_taker.value:
                summary.highest_wicket_taker = TopPerformer(player=name, value=wickets)
    except (StoreError, TypeError, ValueError) as exc:
        logger.error("Error analyzing tournament stats for %s: %s", tournament_id, exc)
        raise TournamentStatsError("Failed to analyze tournament statistics") from exc
    return summary
