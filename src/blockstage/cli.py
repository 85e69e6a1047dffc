"""Text front-end for building scripts from command lines such as ``go 10 20``."""

from __future__ import annotations

import shlex

from blockstage.commands import Command, CommandKind, Script

_VERBS: dict[str, CommandKind] = {
    "go": CommandKind.GO_TO,
    "goto": CommandKind.GO_TO,
    "glide": CommandKind.GLIDE_TO,
    "say": CommandKind.SAY,
}


def parse_command_line(script: Script, line: str) -> Command:
    """Append the command described by ``line`` to ``script``.

    ``go X Y`` / ``glide X Y`` set coordinates and ``say TEXT [SECONDS]`` sets
    speech. Values go through the same edit path as the block editor, so a
    non-numeric coordinate stays unset.
    """
    tokens = shlex.split(line)
    if not tokens:
        raise ValueError("Empty command line")

    verb, args = tokens[0].lower(), tokens[1:]
    if verb not in _VERBS:
        raise ValueError(f"Unknown command {verb!r}; expected one of: {', '.join(sorted(_VERBS))}")

    kind = _VERBS[verb]
    command = script.add(kind)
    if kind is CommandKind.SAY:
        if args:
            script.edit(command.id, "text", args[0])
        if len(args) > 1:
            script.edit(command.id, "duration_seconds", args[1])
    else:
        for field_name, value in zip(("x", "y"), args):
            script.edit(command.id, field_name, value)
    return script.commands[-1]


def build_script(lines: list[str], script: Script | None = None) -> Script:
    script = script if script is not None else Script()
    for line in lines:
        parse_command_line(script, line)
    return script


def describe_command(command: Command) -> str:
    if command.kind is CommandKind.SAY:
        return f"{command.label} {command.text!r} for {command.duration_seconds} seconds"
    x = "_" if command.x is None else command.x
    y = "_" if command.y is None else command.y
    return f"{command.label} x: {x} y: {y}"
