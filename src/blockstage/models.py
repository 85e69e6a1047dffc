from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class RunStatus(str, Enum):
    idle = "idle"
    running = "running"
    cancelled = "cancelled"


@dataclass(frozen=True, slots=True)
class Actor:
    id: str
    kind: str
    x: int = 0
    y: int = 0
    speech: str | None = None

    @property
    def position(self) -> tuple[int, int]:
        return self.x, self.y


@dataclass(frozen=True, slots=True)
class Target:
    x: int
    y: int

    @property
    def position(self) -> tuple[int, int]:
        return self.x, self.y


@dataclass(frozen=True, slots=True)
class ScoreEvent:
    previous_score: int
    new_score: int


@dataclass(slots=True)
class RunState:
    """Per-run bookkeeping; a stopped run keeps its own flag set."""

    actor_id: str
    command_index: int = 0
    cancelled: bool = False


@dataclass(slots=True)
class RunReport:
    actor_id: str
    executed: list[str] = field(default_factory=list)
    score_events: list[ScoreEvent] = field(default_factory=list)
    cancelled: bool = False


@dataclass(frozen=True, slots=True)
class StageSnapshot:
    actors: tuple[Actor, ...]
    active_actor_id: str
    target: Target
    status: RunStatus
    success_message: str | None = None
