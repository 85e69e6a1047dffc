"""CLI entrypoint for blockstage."""

from __future__ import annotations

import asyncio

import typer
from rich import print

from blockstage.cli import build_script, describe_command
from blockstage.config import settings
from blockstage.models import RunReport, StageSnapshot
from blockstage.session import PlaygroundSession
from blockstage.telemetry.logging import configure_logging
from blockstage.themes import THEMES

app = typer.Typer(help="Block-programming stage: run scripts against an on-stage actor")


def _snapshot_payload(snapshot: StageSnapshot) -> dict:
    return {
        "status": snapshot.status.value,
        "actors": [
            {"id": actor.id, "kind": actor.kind, "x": actor.x, "y": actor.y, "speech": actor.speech}
            for actor in snapshot.actors
        ],
        "target": {"x": snapshot.target.x, "y": snapshot.target.y},
        "success_message": snapshot.success_message,
    }


def _report_payload(report: RunReport | None, session: PlaygroundSession) -> dict:
    state = session.snapshot()
    return {
        "executed": len(report.executed) if report else 0,
        "cancelled": report.cancelled if report else False,
        "score_events": [
            {"previous_score": event.previous_score, "new_score": event.new_score}
            for event in (report.score_events if report else [])
        ],
        "score": state.score,
        "unlocked_count": state.unlocked_count,
        "actor": {"x": session.roster.active.x, "y": session.roster.active.y},
        "target": {"x": state.stage.target.x, "y": state.stage.target.y},
    }


@app.callback()
def main(log_level: str = typer.Option(None, help="Override BLOCKSTAGE_LOG_LEVEL")) -> None:
    configure_logging(log_level or settings.log_level)


@app.command()
def start() -> None:
    """Show effective configuration."""
    print(
        {
            "app_name": settings.app_name,
            "log_level": settings.log_level,
            "time_scale": settings.time_scale,
            "rng_seed": settings.rng_seed,
            "theme_id": settings.theme_id,
        }
    )


@app.command()
def themes() -> None:
    """List the available stage themes."""
    for theme in THEMES:
        print({"id": theme.id, "title": theme.title, "goal": theme.goal, "sprite": theme.initial_sprite})


@app.command()
def run(
    lines: list[str] = typer.Argument(..., help='Command lines, e.g. "go 0 0" "glide 40 20" "say Hi 1"'),
    theme_id: int = typer.Option(None, "--theme", help="Theme id (see `themes`)"),
    actor_x: int = typer.Option(0, help="Starting actor X"),
    actor_y: int = typer.Option(0, help="Starting actor Y"),
    target_x: int = typer.Option(None, help="Place the target at this X before running"),
    target_y: int = typer.Option(None, help="Place the target at this Y before running"),
    time_scale: float = typer.Option(None, help="Clock multiplier; 0 runs instantly"),
    seed: int = typer.Option(None, help="Seed for target respawns"),
    snapshots: bool = typer.Option(True, "--snapshots/--no-snapshots", help="Print every state snapshot"),
) -> None:
    """Build a script from command lines and run it to completion."""
    overrides = {
        key: value
        for key, value in {"theme_id": theme_id, "time_scale": time_scale, "rng_seed": seed}.items()
        if value is not None
    }
    session_settings = settings.model_copy(update=overrides)

    async def _run() -> dict:
        session = PlaygroundSession(settings=session_settings)
        try:
            build_script(lines, session.script)
        except ValueError as exc:
            raise typer.BadParameter(str(exc)) from exc

        session.roster.move_to(session.roster.active_id, actor_x, actor_y)
        if target_x is not None or target_y is not None:
            current_x, current_y = session.target.position
            session.target.place(
                current_x if target_x is None else target_x,
                current_y if target_y is None else target_y,
            )
        if snapshots:
            session.runner.subscribe_snapshots(lambda snapshot: print(_snapshot_payload(snapshot)))

        print({"script": [describe_command(command) for command in session.script]})
        task = session.run()
        report = await task if task is not None else None
        return _report_payload(report, session)

    print({"run_result": asyncio.run(_run())})


if __name__ == "__main__":
    app()
