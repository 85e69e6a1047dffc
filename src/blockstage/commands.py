"""Command model: the three block kinds and the editable script that holds them."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, ClassVar, Iterator
from uuid import uuid4

DEFAULT_SAY_TEXT = "Hello!"
DEFAULT_SAY_SECONDS = 2

_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")

_logger = logging.getLogger("blockstage.commands")


class CommandKind(str, Enum):
    """Closed set of block kinds a script can contain."""

    GO_TO = "go_to"
    GLIDE_TO = "glide_to"
    SAY = "say"


def new_command_id() -> str:
    return uuid4().hex[:9]


def parse_int_field(value: Any) -> int | None:
    """Normalize an edited numeric field.

    Integers pass through, floats are truncated and strings use their leading
    integer (``"12px"`` -> 12). Anything else, including an empty string,
    resolves to ``None`` so the zero default is only applied when the command
    executes.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if value != value or value in (float("inf"), float("-inf")):
            return None
        return int(value)
    if isinstance(value, str):
        match = _LEADING_INT_RE.match(value)
        if match:
            return int(match.group(1))
    return None


@dataclass(frozen=True, slots=True)
class GoTo:
    x: int | None = None
    y: int | None = None
    id: str = field(default_factory=new_command_id)

    kind: ClassVar[CommandKind] = CommandKind.GO_TO
    label: ClassVar[str] = "go to"
    numeric_fields: ClassVar[tuple[str, ...]] = ("x", "y")
    text_fields: ClassVar[tuple[str, ...]] = ()


@dataclass(frozen=True, slots=True)
class GlideTo:
    x: int | None = None
    y: int | None = None
    id: str = field(default_factory=new_command_id)

    kind: ClassVar[CommandKind] = CommandKind.GLIDE_TO
    label: ClassVar[str] = "glide to"
    numeric_fields: ClassVar[tuple[str, ...]] = ("x", "y")
    text_fields: ClassVar[tuple[str, ...]] = ()


@dataclass(frozen=True, slots=True)
class Say:
    text: str = DEFAULT_SAY_TEXT
    duration_seconds: int | None = DEFAULT_SAY_SECONDS
    id: str = field(default_factory=new_command_id)

    kind: ClassVar[CommandKind] = CommandKind.SAY
    label: ClassVar[str] = "say"
    numeric_fields: ClassVar[tuple[str, ...]] = ("duration_seconds",)
    text_fields: ClassVar[tuple[str, ...]] = ("text",)


Command = GoTo | GlideTo | Say
MotionCommand = GoTo | GlideTo

_COMMAND_TYPES: dict[CommandKind, type[GoTo] | type[GlideTo] | type[Say]] = {
    CommandKind.GO_TO: GoTo,
    CommandKind.GLIDE_TO: GlideTo,
    CommandKind.SAY: Say,
}

_FIELD_ALIASES = {"duration": "duration_seconds"}


def create_command(kind: CommandKind | str) -> Command:
    """Build a command of ``kind`` with its construction defaults."""
    return _COMMAND_TYPES[CommandKind(kind)]()


class Script:
    """Ordered, editable list of commands.

    The runner reads the script by index at every step, so edits made while a
    run is in progress affect the commands it has not reached yet.
    """

    def __init__(self, commands: list[Command] | None = None) -> None:
        self._commands: list[Command] = list(commands or [])

    def __len__(self) -> int:
        return len(self._commands)

    def __getitem__(self, index: int) -> Command:
        return self._commands[index]

    def __iter__(self) -> Iterator[Command]:
        return iter(list(self._commands))

    @property
    def commands(self) -> tuple[Command, ...]:
        return tuple(self._commands)

    def add(self, kind: CommandKind | str) -> Command:
        command = create_command(kind)
        self._commands.append(command)
        return command

    def edit(self, command_id: str, field_name: str, value: Any) -> Command | None:
        """Replace one field of a command; returns the new command or ``None`` if unknown."""
        for index, command in enumerate(self._commands):
            if command.id != command_id:
                continue

            name = _FIELD_ALIASES.get(field_name, field_name)
            if name in command.numeric_fields:
                updated = replace(command, **{name: parse_int_field(value)})
            elif name in command.text_fields:
                updated = replace(command, **{name: "" if value is None else str(value)})
            else:
                _logger.warning(
                    "command_edit_ignored",
                    extra={"command_id": command_id, "field": field_name, "kind": command.kind.value},
                )
                return command

            self._commands[index] = updated
            return updated
        return None

    def remove(self, command_id: str) -> bool:
        remaining = [command for command in self._commands if command.id != command_id]
        removed = len(remaining) != len(self._commands)
        self._commands = remaining
        return removed

    def clear(self) -> None:
        self._commands = []
