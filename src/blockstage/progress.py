"""Cumulative score and character-unlock progress."""

from __future__ import annotations

from typing import Protocol

from blockstage.models import ScoreEvent

SPRITE_CATALOG: tuple[str, ...] = (
    "🐱", "🐶", "🦄", "🦖", "🤖", "🦊", "🐼", "🦁", "🚀", "⛹️", "👧", "🎨",
)
POINTS_PER_UNLOCK = 3
INITIAL_UNLOCKED = 3


class ScoreLedger(Protocol):
    """Caller-owned store the runner reads and records score events into."""

    score: int

    def record(self, event: ScoreEvent) -> None:
        """Apply a score event."""

    def reset(self) -> None:
        """Zero the cumulative score."""


class Scoreboard:
    """In-memory score ledger."""

    def __init__(self, score: int = 0) -> None:
        self.score = score

    def record(self, event: ScoreEvent) -> None:
        self.score = event.new_score

    def reset(self) -> None:
        self.score = 0


def unlocked_count(score: int, catalog_size: int = len(SPRITE_CATALOG)) -> int:
    return min(catalog_size, INITIAL_UNLOCKED + score // POINTS_PER_UNLOCK)


def current_progress(score: int) -> int:
    """Points earned toward the next unlock."""
    return score % POINTS_PER_UNLOCK


def is_locked(index: int, score: int) -> bool:
    return index >= unlocked_count(score)


def points_needed(index: int, score: int) -> int:
    return (index - INITIAL_UNLOCKED + 1) * POINTS_PER_UNLOCK - score


def crosses_unlock(event: ScoreEvent, catalog_size: int = len(SPRITE_CATALOG)) -> bool:
    """True when the event earns a new character and one is still left to unlock."""
    before = event.previous_score // POINTS_PER_UNLOCK
    after = event.new_score // POINTS_PER_UNLOCK
    return after > before and unlocked_count(event.previous_score, catalog_size) < catalog_size
