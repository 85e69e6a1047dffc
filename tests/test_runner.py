from __future__ import annotations

import asyncio
import random

from blockstage.actors import ActorRoster
from blockstage.commands import GlideTo, GoTo, Say, Script
from blockstage.models import RunStatus, ScoreEvent, StageSnapshot
from blockstage.progress import Scoreboard
from blockstage.runner import SUCCESS_MESSAGE, ScriptRunner
from blockstage.target import TargetState


def _build(sleep, *, score: int = 0):
    roster = ActorRoster(initial_kind="🐱")
    target = TargetState(rng=random.Random(3))
    board = Scoreboard(score)
    runner = ScriptRunner(roster, target, board, sleep=sleep)
    return roster, target, board, runner


def test_scenario_goto_then_say(instant) -> None:
    async def _run():
        roster, target, board, runner = _build(instant.sleep)
        roster.move_to(roster.active_id, 10, 10)
        target.place(0, 0)
        speeches: list[str | None] = []
        runner.subscribe_snapshots(lambda snapshot: speeches.append(snapshot.actors[0].speech))
        scores: list[ScoreEvent] = []
        runner.subscribe_scores(scores.append)

        task = runner.run(Script([GoTo(x=0, y=0), Say(text="Hi", duration_seconds=1)]), roster.active_id)
        assert runner.status is RunStatus.running
        report = await task
        return roster, board, runner, report, scores, speeches

    roster, board, runner, report, scores, speeches = asyncio.run(_run())

    assert roster.active.position == (0, 0)
    assert roster.active.speech is None
    assert scores == [ScoreEvent(previous_score=0, new_score=1)]
    assert report.score_events == scores
    assert board.score == 1
    assert "Hi" in speeches
    assert speeches[-1] is None
    assert runner.status is RunStatus.idle
    assert report.cancelled is False
    assert 0.6 in instant.waits and 1.0 in instant.waits


def test_commands_execute_in_order_exactly_once(instant) -> None:
    commands = [GoTo(x=1, y=1), GlideTo(x=2, y=2), Say(text="mid"), GoTo(x=3, y=3)]

    async def _run():
        roster, target, _, runner = _build(instant.sleep)
        target.place(1000, 1000)
        positions: list[tuple[int, int]] = []

        def _track(snapshot: StageSnapshot) -> None:
            position = snapshot.actors[0].position
            if not positions or positions[-1] != position:
                positions.append(position)

        runner.subscribe_snapshots(_track)
        report = await runner.run(Script(commands), roster.active_id)
        return report, positions

    report, positions = asyncio.run(_run())

    assert report.executed == [command.id for command in commands]
    assert positions == [(0, 0), (1, 1), (2, 2), (3, 3)]
    assert instant.waits == [0.6, 1.5, 2.0, 0.6]


def test_unset_coordinates_and_empty_say_use_defaults(instant) -> None:
    async def _run():
        roster, target, _, runner = _build(instant.sleep)
        roster.move_to(roster.active_id, 40, 40)
        target.place(500, 500)
        spoken: list[str] = []
        runner.subscribe_snapshots(
            lambda snapshot: spoken.append(snapshot.actors[0].speech) if snapshot.actors[0].speech else None
        )
        await runner.run(Script([GlideTo(), Say(text="", duration_seconds=None)]), roster.active_id)
        return roster, spoken

    roster, spoken = asyncio.run(_run())

    assert roster.active.position == (0, 0)
    assert spoken[0] == "Hello!"
    assert instant.waits == [1.5, 2.0]


def test_empty_script_is_a_noop(instant) -> None:
    async def _run():
        roster, _, _, runner = _build(instant.sleep)
        before = roster.actors
        task = runner.run(Script(), roster.active_id)
        return task, runner.status, roster.actors is before

    task, status, unchanged = asyncio.run(_run())

    assert task is None
    assert status is RunStatus.idle
    assert unchanged


def test_second_run_while_running_is_ignored(instant) -> None:
    async def _run():
        roster, target, _, runner = _build(instant.sleep)
        target.place(1000, 1000)
        first = runner.run(Script([GoTo(x=5, y=5)]), roster.active_id)
        second = runner.run(Script([GoTo(x=9, y=9)]), roster.active_id)
        assert runner.is_running
        report = await first
        return second, report, roster.active.position

    second, report, position = asyncio.run(_run())

    assert second is None
    assert len(report.executed) == 1
    assert position == (5, 5)


def test_stop_during_motion_wait_skips_scoring_and_remaining_commands(clock) -> None:
    async def _run():
        roster, target, board, runner = _build(clock.sleep)
        target.place(0, 0)
        script = Script([GoTo(x=0, y=0), GoTo(x=80, y=80)])
        task = runner.run(script, roster.active_id)
        await clock.settle()
        assert roster.active.position == (0, 0)

        runner.stop()
        assert runner.status is RunStatus.idle

        clock.release_all()
        report = await task
        return roster, target, board, report, script

    roster, target, board, report, script = asyncio.run(_run())

    assert report.cancelled is True
    assert report.executed == [script[0].id]
    assert report.score_events == []
    assert board.score == 0
    assert target.position == (0, 0)
    assert roster.active.position == (0, 0)


def test_stop_clears_speech_synchronously(clock) -> None:
    async def _run():
        roster, _, _, runner = _build(clock.sleep)
        task = runner.run(Script([Say(text="Hi", duration_seconds=5), GoTo(x=9, y=9)]), roster.active_id)
        await clock.settle()
        assert roster.active.speech == "Hi"
        assert clock.waits == [5.0]

        runner.stop()
        speech_after_stop = roster.active.speech
        clock.release_all()
        report = await task
        return roster, report, speech_after_stop

    roster, report, speech_after_stop = asyncio.run(_run())

    assert speech_after_stop is None
    assert roster.active.speech is None
    assert roster.active.position == (0, 0)
    assert report.cancelled is True


def test_stale_run_does_not_disturb_a_newer_run(clock) -> None:
    async def _run():
        roster, target, _, runner = _build(clock.sleep)
        target.place(1000, 1000)
        old = runner.run(Script([GoTo(x=1, y=1), GoTo(x=2, y=2)]), roster.active_id)
        await clock.settle()
        runner.stop()

        new = runner.run(Script([GoTo(x=7, y=7)]), roster.active_id)
        assert new is not None
        await clock.settle()

        clock.release_next()
        old_report = await old
        status_after_old = runner.status
        position_after_old = roster.active.position

        clock.release_next()
        new_report = await new
        return old_report, new_report, status_after_old, position_after_old, runner.status

    old_report, new_report, status_after_old, position_after_old, final_status = asyncio.run(_run())

    assert old_report.cancelled is True
    assert len(old_report.executed) == 1
    assert status_after_old is RunStatus.running
    assert position_after_old == (7, 7)
    assert new_report.cancelled is False
    assert final_status is RunStatus.idle


def test_edits_during_run_affect_commands_not_yet_reached(clock) -> None:
    async def _run():
        roster, target, _, runner = _build(clock.sleep)
        target.place(1000, 1000)
        script = Script([Say(text="wait", duration_seconds=1), GoTo()])
        task = runner.run(script, roster.active_id)
        await clock.settle()

        script.edit(script[1].id, "x", "9")
        clock.release_next()
        await clock.settle()
        clock.release_next()
        await task
        return roster

    roster = asyncio.run(_run())

    assert roster.active.position == (9, 0)


def test_score_event_uses_live_ledger_and_shows_success(clock) -> None:
    async def _run():
        roster, target, board, runner = _build(clock.sleep, score=4)
        target.place(10, 10)
        task = runner.run(Script([GoTo(x=0, y=0)]), roster.active_id)
        await clock.settle()
        clock.release_next()
        report = await task
        message_after_run = runner.success_message
        pending_timers = clock.pending

        clock.release_all()
        await clock.settle()
        return report, board, target, message_after_run, pending_timers, runner.success_message

    report, board, target, message_after_run, pending_timers, message_later = asyncio.run(_run())

    assert report.score_events == [ScoreEvent(previous_score=4, new_score=5)]
    assert board.score == 5
    assert target.position != (10, 10)
    assert -150 <= target.target.x <= 150 and -100 <= target.target.y <= 100
    assert message_after_run == SUCCESS_MESSAGE
    assert pending_timers == 1
    assert message_later is None


def test_success_timer_does_not_block_next_command(clock) -> None:
    async def _run():
        roster, target, _, runner = _build(clock.sleep)
        target.place(0, 0)
        task = runner.run(Script([GoTo(x=0, y=0), GoTo(x=90, y=90)]), roster.active_id)
        await clock.settle()
        clock.release_next()
        await clock.settle()
        # second command is already waiting while the success message is still up
        position = roster.active.position
        message = runner.success_message
        clock.release_all()
        await task
        return position, message, clock.waits

    position, message, waits = asyncio.run(_run())

    assert position == (90, 90)
    assert message == SUCCESS_MESSAGE
    assert waits == [0.6, 0.6, 2.0]


def test_reset_returns_actors_to_origin_and_zeroes_score(clock) -> None:
    async def _run():
        roster, target, board, runner = _build(clock.sleep, score=6)
        other = roster.add("🐶")
        roster.move_to(other.id, -20, 30)
        target.place(1000, 1000)
        task = runner.run(Script([GoTo(x=50, y=60)]), roster.actors[0].id)
        await clock.settle()

        runner.reset()
        clock.release_all()
        await task
        return roster, board, runner

    roster, board, runner = asyncio.run(_run())

    assert all(actor.position == (0, 0) for actor in roster.actors)
    assert board.score == 0
    assert runner.status is RunStatus.idle
