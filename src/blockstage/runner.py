"""Sequential, cancellable interpreter for block scripts."""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Sequence

from blockstage.actors import ActorRoster
from blockstage.commands import DEFAULT_SAY_SECONDS, DEFAULT_SAY_TEXT, Command, GlideTo, MotionCommand, Say
from blockstage.models import RunReport, RunState, RunStatus, ScoreEvent, StageSnapshot
from blockstage.progress import ScoreLedger
from blockstage.target import TargetState, evaluate_proximity
from blockstage.timers import SleepFn, TransientMessage

GO_TO_DURATION_MS = 600
GLIDE_TO_DURATION_MS = 1500
SUCCESS_DURATION_MS = 2000
SUCCESS_MESSAGE = "EXCELLENT! 🎉"

ScoreListener = Callable[[ScoreEvent], None]
SnapshotListener = Callable[[StageSnapshot], None]


class ScriptRunner:
    """Walks a script one command at a time against a single active actor.

    Motion commands commit the final position first and then wait out their
    nominal duration; ``Say`` shows speech for its duration and clears it.
    ``stop()`` is cooperative: it flags the current run and the in-flight
    wait notices the flag when it resumes.
    """

    def __init__(
        self,
        roster: ActorRoster,
        target: TargetState,
        ledger: ScoreLedger,
        *,
        time_scale: float = 1.0,
        sleep: SleepFn = asyncio.sleep,
        logger: logging.Logger | None = None,
    ) -> None:
        self._roster = roster
        self._target = target
        self._ledger = ledger
        self._time_scale = time_scale
        self._sleep = sleep
        self._logger = logger or logging.getLogger("blockstage.runner")

        self._status = RunStatus.idle
        self._state: RunState | None = None
        self._task: asyncio.Task[RunReport] | None = None
        self._score_listeners: list[ScoreListener] = []
        self._snapshot_listeners: list[SnapshotListener] = []
        self._success = TransientMessage(sleep=sleep, time_scale=time_scale, on_change=self._publish)

    @property
    def status(self) -> RunStatus:
        return self._status

    @property
    def is_running(self) -> bool:
        return self._status is RunStatus.running

    @property
    def success_message(self) -> str | None:
        return self._success.value

    def subscribe_scores(self, listener: ScoreListener) -> None:
        self._score_listeners.append(listener)

    def subscribe_snapshots(self, listener: SnapshotListener) -> None:
        self._snapshot_listeners.append(listener)

    def snapshot(self) -> StageSnapshot:
        return StageSnapshot(
            actors=self._roster.actors,
            active_actor_id=self._roster.active_id,
            target=self._target.target,
            status=self._status,
            success_message=self._success.value,
        )

    def run(self, commands: Sequence[Command], active_actor_id: str) -> asyncio.Task[RunReport] | None:
        """Start a run and return its task, or ``None`` when the call is a no-op.

        Empty scripts and calls made while a run is in progress are ignored.
        Must be called from inside a running event loop.
        """
        if len(commands) == 0 or self.is_running:
            self._logger.debug(
                "run_ignored",
                extra={"command_count": len(commands), "status": self._status.value},
            )
            return None

        state = RunState(actor_id=active_actor_id)
        self._task = asyncio.get_running_loop().create_task(
            self._execute(commands, state), name="script-runner"
        )
        self._state = state
        self._status = RunStatus.running
        self._logger.info(
            "run_started",
            extra={"actor_id": active_actor_id, "command_count": len(commands)},
        )
        self._publish()
        return self._task

    def stop(self) -> None:
        """Cancel the current run, clear speech and the success message."""
        state, self._state = self._state, None
        if state is not None:
            state.cancelled = True
            self._status = RunStatus.cancelled
            self._logger.info(
                "run_cancelled",
                extra={"actor_id": state.actor_id, "command_index": state.command_index},
            )
        self._status = RunStatus.idle
        self._roster.clear_speech()
        self._success.clear()
        self._publish()

    def reset(self) -> None:
        """Stop, return every actor to the origin and zero the score."""
        self.stop()
        self._roster.reset_positions()
        self._ledger.reset()
        self._logger.info("stage_reset")
        self._publish()

    async def _execute(self, commands: Sequence[Command], state: RunState) -> RunReport:
        report = RunReport(actor_id=state.actor_id)
        try:
            while state.command_index < len(commands):
                if state.cancelled:
                    break

                command = commands[state.command_index]
                report.executed.append(command.id)
                self._logger.debug(
                    "command_started",
                    extra={"index": state.command_index, "kind": command.kind.value, "command_id": command.id},
                )
                if isinstance(command, Say):
                    await self._say(command, state)
                else:
                    event = await self._move(command, state)
                    if event is not None:
                        report.score_events.append(event)

                state.command_index += 1
        finally:
            report.cancelled = state.cancelled
            self._finish(state, report)
        return report

    async def _move(self, command: MotionCommand, state: RunState) -> ScoreEvent | None:
        x = 0 if command.x is None else command.x
        y = 0 if command.y is None else command.y
        duration = GLIDE_TO_DURATION_MS if isinstance(command, GlideTo) else GO_TO_DURATION_MS

        self._roster.move_to(state.actor_id, x, y)
        self._publish()
        await self._wait(duration)
        if state.cancelled:
            return None

        if not evaluate_proximity((x, y), self._target.position):
            return None

        previous = self._ledger.score
        event = ScoreEvent(previous_score=previous, new_score=previous + 1)
        self._ledger.record(event)
        self._logger.info(
            "score_event",
            extra={"actor_id": state.actor_id, "previous_score": previous, "new_score": event.new_score},
        )
        for listener in list(self._score_listeners):
            listener(event)

        self._target.respawn()
        self._success.show(SUCCESS_MESSAGE, SUCCESS_DURATION_MS)
        self._publish()
        return event

    async def _say(self, command: Say, state: RunState) -> None:
        text = command.text or DEFAULT_SAY_TEXT
        seconds = command.duration_seconds or DEFAULT_SAY_SECONDS

        self._roster.set_speech(state.actor_id, text)
        self._publish()
        await self._wait(seconds * 1000)
        # cleared even after a stop so no stale speech is left behind
        self._roster.set_speech(state.actor_id, None)
        self._publish()

    async def _wait(self, duration_ms: float) -> None:
        await self._sleep(duration_ms / 1000 * self._time_scale)

    def _finish(self, state: RunState, report: RunReport) -> None:
        self._logger.info(
            "run_completed",
            extra={"actor_id": state.actor_id, "executed": len(report.executed), "cancelled": state.cancelled},
        )
        if self._state is not state:
            return
        self._state = None
        self._status = RunStatus.idle
        self._publish()

    def _publish(self) -> None:
        if not self._snapshot_listeners:
            return
        snapshot = self.snapshot()
        for listener in list(self._snapshot_listeners):
            listener(snapshot)
