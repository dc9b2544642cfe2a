#!/usr/bin/env python3
# conshell/commands/__init__.py
from __future__ import annotations

"""
Package for command management and registration.

Provides:
- Data structures and protocols (`ShellCommand`, `Command`, `CommandResult`, `BoundCommand`).
- The lock-guarded registry and decorator (`CommandRegistry`, `command`, `collect_commands`).
- Optional built-in commands (`builtin_commands`).

This package re-exports public APIs from:
- command_types.py
- commands.py
- builtins.py
"""


# Re-export from submodules
from .command_types import BoundCommand, Command, CommandResult, ShellCommand
from .commands import CommandRegistry, collect_commands, command
from .builtins import builtin_commands

__all__ = [
    "BoundCommand",
    "Command",
    "CommandResult",
    "ShellCommand",
    "CommandRegistry",
    "collect_commands",
    "command",
    "builtin_commands",
]
