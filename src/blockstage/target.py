"""Scoring target and the proximity rule that decides a hit."""

from __future__ import annotations

import logging
import math
import random

from blockstage.models import Target

PROXIMITY_THRESHOLD = 50
TARGET_X_RANGE = (-150, 150)
TARGET_Y_RANGE = (-100, 100)
INITIAL_TARGET = Target(x=150, y=100)


def evaluate_proximity(actor_pos: tuple[float, float], target_pos: tuple[float, float]) -> bool:
    """Return True when the actor is strictly closer than the threshold to the target."""
    return math.dist(actor_pos, target_pos) < PROXIMITY_THRESHOLD


def random_target_position(rng: random.Random) -> Target:
    x_low, x_high = TARGET_X_RANGE
    y_low, y_high = TARGET_Y_RANGE
    return Target(
        x=math.floor(rng.random() * (x_high - x_low) + x_low),
        y=math.floor(rng.random() * (y_high - y_low) + y_low),
    )


class TargetState:
    """Holds the single process-wide target and respawns it after a hit."""

    def __init__(
        self,
        *,
        rng: random.Random | None = None,
        initial: Target = INITIAL_TARGET,
        logger: logging.Logger | None = None,
    ) -> None:
        self._rng = rng or random.Random()
        self._target = initial
        self._logger = logger or logging.getLogger("blockstage.target")

    @property
    def target(self) -> Target:
        return self._target

    @property
    def position(self) -> tuple[int, int]:
        return self._target.position

    def place(self, x: int, y: int) -> None:
        self._target = Target(x=x, y=y)

    def respawn(self) -> Target:
        self._target = random_target_position(self._rng)
        self._logger.debug("target_respawned", extra={"x": self._target.x, "y": self._target.y})
        return self._target
