"""Block-programming stage with a cancellable script execution engine."""

from .actors import ActorRoster
from .commands import CommandKind, GlideTo, GoTo, Say, Script
from .models import Actor, RunReport, RunStatus, ScoreEvent, StageSnapshot, Target
from .runner import ScriptRunner
from .session import PlaygroundSession
from .target import TargetState, evaluate_proximity

__all__ = [
    "Actor",
    "ActorRoster",
    "CommandKind",
    "GlideTo",
    "GoTo",
    "PlaygroundSession",
    "RunReport",
    "RunStatus",
    "Say",
    "ScoreEvent",
    "Script",
    "ScriptRunner",
    "StageSnapshot",
    "Target",
    "TargetState",
    "evaluate_proximity",
]
