"""Actor state: the on-stage sprites the runner moves and makes speak."""

from __future__ import annotations

import logging
from dataclasses import replace
from uuid import uuid4

from blockstage.models import Actor


def new_actor_id() -> str:
    return f"actor-{uuid4().hex[:8]}"


class ActorRoster:
    """Actor collection with exactly one active actor.

    Writes replace only the targeted actor; the rest of the tuple is shared.
    """

    def __init__(self, initial_kind: str, *, logger: logging.Logger | None = None) -> None:
        self._logger = logger or logging.getLogger("blockstage.actors")
        first = Actor(id=new_actor_id(), kind=initial_kind)
        self._actors: tuple[Actor, ...] = (first,)
        self._active_id = first.id

    @property
    def actors(self) -> tuple[Actor, ...]:
        return self._actors

    @property
    def active_id(self) -> str:
        return self._active_id

    @property
    def active(self) -> Actor:
        return self.get(self._active_id)

    def __len__(self) -> int:
        return len(self._actors)

    def get(self, actor_id: str) -> Actor:
        for actor in self._actors:
            if actor.id == actor_id:
                return actor
        raise KeyError(f"Unknown actor id: {actor_id}")

    def add(self, kind: str) -> Actor:
        """Append a new actor at the origin and make it active."""
        actor = Actor(id=new_actor_id(), kind=kind)
        self._actors = (*self._actors, actor)
        self._active_id = actor.id
        self._logger.info("actor_added", extra={"actor_id": actor.id, "kind": kind})
        return actor

    def remove(self, actor_id: str) -> bool:
        if len(self._actors) <= 1:
            self._logger.info("actor_removal_ignored", extra={"actor_id": actor_id})
            return False

        remaining = tuple(actor for actor in self._actors if actor.id != actor_id)
        if len(remaining) == len(self._actors):
            return False

        self._actors = remaining
        if self._active_id == actor_id:
            self._active_id = remaining[0].id
        self._logger.info("actor_removed", extra={"actor_id": actor_id, "active_id": self._active_id})
        return True

    def select(self, actor_id: str) -> Actor:
        actor = self.get(actor_id)
        self._active_id = actor.id
        return actor

    def replace_all(self, kind: str) -> Actor:
        """Drop every actor and start over with a single one of ``kind``."""
        actor = Actor(id=new_actor_id(), kind=kind)
        self._actors = (actor,)
        self._active_id = actor.id
        return actor

    def move_to(self, actor_id: str, x: int, y: int) -> None:
        self._update(actor_id, x=x, y=y)

    def set_speech(self, actor_id: str, text: str | None) -> None:
        self._update(actor_id, speech=text)

    def clear_speech(self) -> None:
        self._actors = tuple(
            actor if actor.speech is None else replace(actor, speech=None) for actor in self._actors
        )

    def reset_positions(self) -> None:
        self._actors = tuple(replace(actor, x=0, y=0, speech=None) for actor in self._actors)

    def _update(self, actor_id: str, **changes) -> None:
        self._actors = tuple(
            replace(actor, **changes) if actor.id == actor_id else actor for actor in self._actors
        )
