#!/usr/bin/env python3
# conshell/commands/builtins.py
from __future__ import annotations

"""
Optional built-in commands.

Hosts opt in with `shell.add_commands(builtin_commands())`:
    help [prefix]   list commands (optionally filtered by name prefix)
    history         numbered list of previous input
    clear / cls     clear the screen
    exit / quit     stop the read loop
"""

from typing import TYPE_CHECKING

from conshell.commands.command_types import Command
from conshell.ui import clear_screen, format_table

if TYPE_CHECKING:  # pragma: no cover
    from conshell.interface.shell import Shell

# Short hint shown at startup
HELP_TEXT = "Type 'help <prefix>' to list matching commands."


def _help(shell: "Shell", prefix: str = "") -> str:
    descriptions = shell.get_commands_descriptions(prefix or None)
    if not descriptions:
        return f"No commands match '{prefix}'." if prefix else "No commands loaded."
    return format_table(
        [[name, text or "-"] for name, text in descriptions.items()],
        headers=["Command", "Description"],
    )


def _history(shell: "Shell") -> str:
    width = len(str(len(shell.history)))
    return "\n".join(
        f"{index:>{width}}  {line}" for index, line in enumerate(shell.history, start=1))


def _clear() -> None:
    clear_screen()


def _exit(shell: "Shell") -> None:
    shell.stop()


def builtin_commands() -> list[Command]:
    """Fresh Command objects for help, history, clear and exit."""
    return [
        Command(
            name="help",
            description="List commands, optionally those starting with a prefix.",
            callback=_help,
            example="help sh",
            category="builtin",
        ),
        Command(
            name="history",
            description="Show previously entered lines.",
            callback=_history,
            category="builtin",
        ),
        Command(
            name="clear",
            description="Clear the screen.",
            callback=_clear,
            aliases=("cls",),
            category="builtin",
        ),
        Command(
            name="exit",
            description="Leave the shell.",
            callback=_exit,
            aliases=("quit",),
            category="builtin",
        ),
    ]
