"""Helpers for tracking results across consecutive Scoundrel runs."""

from __future__ import annotations

from dataclasses import dataclass, field

from . import rules
from .state import GameSession

__all__ = ["RunSummary", "RunTotals", "RunHistory", "summarise"]


@dataclass(frozen=True, slots=True)
class RunSummary:
    """Summary captured when a run ends."""

    run_number: int
    score: int
    health: int
    cleared: bool
    rooms: int


@dataclass(frozen=True, slots=True)
class RunTotals:
    """Aggregate statistics accumulated across recorded runs."""

    runs: int
    clears: int
    best_score: int | None
    worst_score: int | None
    mean_score: float | None


@dataclass(slots=True)
class RunHistory:
    """Mutable tracker that accumulates run summaries."""

    runs: list[RunSummary] = field(default_factory=list)
    _clears: int = field(default=0, init=False, repr=False)
    _score_total: int = field(default=0, init=False, repr=False)

    def record(self, summary: RunSummary) -> None:
        """Record ``summary`` and update cumulative totals."""

        if summary.run_number != len(self.runs) + 1:
            raise ValueError("runs must be recorded in order")
        self.runs.append(summary)
        self._score_total += summary.score
        if summary.cleared:
            self._clears += 1

    def next_run_number(self) -> int:
        return len(self.runs) + 1

    def totals(self) -> RunTotals:
        """Return the cumulative totals for every recorded run."""

        if not self.runs:
            return RunTotals(runs=0, clears=0, best_score=None, worst_score=None, mean_score=None)
        scores = [run.score for run in self.runs]
        return RunTotals(
            runs=len(self.runs),
            clears=self._clears,
            best_score=max(scores),
            worst_score=min(scores),
            mean_score=self._score_total / len(self.runs),
        )


def summarise(session: GameSession, run_number: int) -> RunSummary:
    """Build a :class:`RunSummary` from a finished (or abandoned) session."""

    return RunSummary(
        run_number=run_number,
        score=rules.score(session),
        health=session.health,
        cleared=rules.is_dungeon_cleared(session),
        rooms=session.room_number,
    )
