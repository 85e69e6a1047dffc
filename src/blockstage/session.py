"""Session orchestration: one stage, one script, one runner, owned by the caller."""

from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass
from typing import Any

from blockstage.actors import ActorRoster
from blockstage.commands import Command, CommandKind, Script
from blockstage.config import Settings, settings as default_settings
from blockstage.models import Actor, RunReport, ScoreEvent, StageSnapshot
from blockstage.progress import (
    SPRITE_CATALOG,
    Scoreboard,
    crosses_unlock,
    current_progress,
    is_locked,
    points_needed,
    unlocked_count,
)
from blockstage.runner import ScriptRunner
from blockstage.target import TargetState
from blockstage.themes import Theme, get_theme
from blockstage.timers import SleepFn, TransientMessage

NOTICE_DURATION_MS = 3000
UNLOCK_NOTICE = "NEW CHARACTER UNLOCKED! 🌟"


@dataclass(frozen=True, slots=True)
class SessionSnapshot:
    stage: StageSnapshot
    theme: Theme
    score: int
    unlocked_count: int
    current_progress: int
    notice: str | None


class PlaygroundSession:
    """Ties the command list, actors, target and score to a single script runner."""

    def __init__(
        self,
        *,
        settings: Settings | None = None,
        theme: Theme | None = None,
        rng: random.Random | None = None,
        sleep: SleepFn = asyncio.sleep,
        logger: logging.Logger | None = None,
    ) -> None:
        self._settings = settings or default_settings
        self._theme = theme or get_theme(self._settings.theme_id)
        self._logger = logger or logging.getLogger("blockstage.session")

        self.script = Script()
        self.roster = ActorRoster(initial_kind=self._theme.initial_sprite)
        self.target = TargetState(rng=rng or random.Random(self._settings.rng_seed))
        self.scoreboard = Scoreboard()
        self.runner = ScriptRunner(
            self.roster,
            self.target,
            self.scoreboard,
            time_scale=self._settings.time_scale,
            sleep=sleep,
        )
        self.runner.subscribe_scores(self._on_score)
        self._notice = TransientMessage(sleep=sleep, time_scale=self._settings.time_scale)

    @property
    def theme(self) -> Theme:
        return self._theme

    @property
    def score(self) -> int:
        return self.scoreboard.score

    @property
    def notice(self) -> str | None:
        return self._notice.value

    def snapshot(self) -> SessionSnapshot:
        score = self.scoreboard.score
        return SessionSnapshot(
            stage=self.runner.snapshot(),
            theme=self._theme,
            score=score,
            unlocked_count=unlocked_count(score),
            current_progress=current_progress(score),
            notice=self._notice.value,
        )

    def add_command(self, kind: CommandKind | str) -> Command:
        return self.script.add(kind)

    def edit_command(self, command_id: str, field_name: str, value: Any) -> Command | None:
        return self.script.edit(command_id, field_name, value)

    def remove_command(self, command_id: str) -> bool:
        return self.script.remove(command_id)

    def run(self) -> asyncio.Task[RunReport] | None:
        return self.runner.run(self.script, self.roster.active_id)

    def stop(self) -> None:
        self.runner.stop()

    def reset(self) -> None:
        self.runner.reset()

    def add_actor(self, kind: str) -> Actor | None:
        """Add an unlocked sprite kind as the new active actor.

        Locked kinds are refused with a notice telling how many points are
        still missing.
        """
        if kind not in SPRITE_CATALOG:
            raise ValueError(f"Unknown sprite kind: {kind!r}")

        index = SPRITE_CATALOG.index(kind)
        score = self.scoreboard.score
        if is_locked(index, score):
            self._notice.show(f"Score {points_needed(index, score)} more points!", NOTICE_DURATION_MS)
            self._logger.info("actor_locked", extra={"kind": kind, "score": score})
            return None
        return self.roster.add(kind)

    def remove_actor(self, actor_id: str) -> bool:
        return self.roster.remove(actor_id)

    def select_actor(self, actor_id: str) -> Actor:
        return self.roster.select(actor_id)

    def select_theme(self, theme_id: int) -> Theme:
        theme = get_theme(theme_id)
        self.runner.stop()
        self._theme = theme
        self.roster.replace_all(theme.initial_sprite)
        self.script.clear()
        self._logger.info("theme_selected", extra={"theme_id": theme.id, "title": theme.title})
        return theme

    def _on_score(self, event: ScoreEvent) -> None:
        if crosses_unlock(event):
            self._notice.show(UNLOCK_NOTICE, NOTICE_DURATION_MS)
            self._logger.info("character_unlocked", extra={"score": event.new_score})
