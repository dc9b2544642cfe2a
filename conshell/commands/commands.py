#!/usr/bin/env python3
# conshell/commands/commands.py
from __future__ import annotations

"""
Command registry and decorator utilities.

This module provides:
- CommandRegistry: lock-guarded registry of commands and aliases.
- command: decorator turning a function into a Command.
- collect_commands: find decorated functions and Command objects in a module.

Resolution policy: among the commands whose `accepts` is true, the one with
the longest matched name (in words) wins; ties go to the command registered
first. Predicate-only commands count as a zero-word match and receive every
token. Specificity beyond that is up to each command's predicate.
"""

import inspect
import logging
import threading
from types import ModuleType
from typing import TYPE_CHECKING, Any, Callable, Iterable, Sequence

from conshell.commands.command_types import BoundCommand, Command, ShellCommand
from conshell.errors import DuplicateCommandError

if TYPE_CHECKING:  # pragma: no cover
    from conshell.interface.shell import Shell

logger = logging.getLogger(__name__)

# Attribute set on functions decorated with @command
COMMAND_ATTRIBUTE = "__shell_command__"


def _name_length(command_obj: ShellCommand, tokens: Sequence[str]) -> int:
    """
    How many leading tokens a command's name consumes.

    Commands matching by predicate alone (no `name_length`) consume nothing:
    they score 0 and receive the full token list.
    """
    measure = getattr(command_obj, "name_length", None)
    if callable(measure):
        return int(measure(tokens))
    return 0


class _CommandTable:
    """Backing store. Replaced wholesale on clear, never emptied in place."""

    __slots__ = ("commands_by_name", "alias_to_primary")

    def __init__(self) -> None:
        # Primary name (lowercase) -> command, in registration order
        self.commands_by_name: dict[str, ShellCommand] = {}
        # Alias (lowercase) -> primary name (lowercase)
        self.alias_to_primary: dict[str, str] = {}

    def taken(self, key: str) -> bool:
        return key in self.commands_by_name or key in self.alias_to_primary


class CommandRegistry:
    """Holds all command definitions and provides lookup utilities."""

    def __init__(self, lock: threading.Lock | None = None) -> None:
        self._lock = lock or threading.Lock()
        self._table = _CommandTable()

    # ---------------- Registration ----------------

    def add(self, command_obj: ShellCommand) -> None:
        """Register a command and its aliases, rejecting any collision."""
        if not command_obj.name or not command_obj.name.strip():
            raise ValueError("Command name must be a non-empty string.")
        primary_key = command_obj.name.lower()
        alias_keys = [alias.lower()
                      for alias in getattr(command_obj, "aliases", ())]
        if any(not key.strip() for key in alias_keys):
            raise ValueError(f"Empty alias for command '{command_obj.name}'.")

        with self._lock:
            table = self._table
            if table.taken(primary_key):
                raise DuplicateCommandError(command_obj.name)
            for alias_key in alias_keys:
                if table.taken(alias_key) or alias_key == primary_key:
                    raise DuplicateCommandError(
                        alias_key,
                        f"Alias '{alias_key}' for '{command_obj.name}' collides with an existing name.",
                    )
            table.commands_by_name[primary_key] = command_obj
            for alias_key in alias_keys:
                table.alias_to_primary[alias_key] = primary_key

        logger.debug("Registered command %r", command_obj.name)

    def clear(self) -> None:
        """Swap in an empty table; holders of the old one are unaffected."""
        with self._lock:
            self._table = _CommandTable()
        logger.debug("Command registry cleared")

    # ---------------- Lookup ----------------

    def get(self, name: str) -> ShellCommand | None:
        """Return the command by primary name or alias, or None if not found."""
        key = name.lower()
        with self._lock:
            table = self._table
            if key in table.commands_by_name:
                return table.commands_by_name[key]
            if key in table.alias_to_primary:
                return table.commands_by_name[table.alias_to_primary[key]]
        return None

    def all(self) -> list[ShellCommand]:
        """Return only primary commands (avoid duplicates in UIs)."""
        with self._lock:
            return list(self._table.commands_by_name.values())

    def names(self) -> list[str]:
        """Return a list of all primary names and aliases."""
        with self._lock:
            table = self._table
            return [*table.commands_by_name.keys(), *table.alias_to_primary.keys()]

    def __len__(self) -> int:
        with self._lock:
            return len(self._table.commands_by_name)

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, str):
            return False
        key = name.lower()
        with self._lock:
            return self._table.taken(key)

    # ---------------- Resolution ----------------

    def _find(self, tokens: Sequence[str]) -> tuple[ShellCommand, int] | None:
        """Pick the accepting command with the longest name. Caller holds the lock."""
        best: tuple[ShellCommand, int] | None = None
        for command_obj in self._table.commands_by_name.values():
            if not command_obj.accepts(tokens):
                continue
            length = _name_length(command_obj, tokens)
            # Strictly greater keeps the earliest registration on ties
            if best is None or length > best[1]:
                best = (command_obj, length)
        return best

    def resolve(self, shell: "Shell", tokens: Sequence[str]) -> BoundCommand | None:
        """Return the winning command bound to the remaining arguments, or None."""
        tokens = list(tokens)
        if not tokens:
            return None
        with self._lock:
            found = self._find(tokens)
        if found is None:
            return None
        command_obj, length = found
        return BoundCommand(command=command_obj, args=tuple(tokens[length:]), shell=shell)

    def is_resolvable(self, tokens: Sequence[str]) -> bool:
        tokens = list(tokens)
        if not tokens:
            return False
        with self._lock:
            return self._find(tokens) is not None

    # ---------------- Completion & descriptions ----------------

    def complete(self, shell: "Shell", buffer: str) -> list[str]:
        """Union of every command's proposals, deduplicated and sorted."""
        proposals: set[str] = set()
        with self._lock:
            for command_obj in self._table.commands_by_name.values():
                proposals.update(command_obj.complete(shell, buffer))
        return sorted(proposals)

    def describe(self, prefix: str | None = None) -> dict[str, str]:
        """Return {name: description} for names starting with prefix, sorted by name."""
        with self._lock:
            commands = list(self._table.commands_by_name.values())
        lowered = (prefix or "").lower()
        selected = [c for c in commands if c.name.lower().startswith(lowered)]
        return {c.name: c.description for c in sorted(selected, key=lambda c: c.name.lower())}


def command(
    *,
    name: str | None = None,
    description: str | None = None,
    example: str | None = None,
    aliases: Iterable[str] | None = None,
    completer: Callable[[str], Iterable[str]] | None = None,
    category: str | None = None,
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """
    Decorator marking a function as a shell command.

    - Function name is transformed from snake_case to kebab-case for `name` if not provided.
    - The built Command is stored on the function; `collect_commands` picks it up.
    """

    def wrapper(func: Callable[..., Any]) -> Callable[..., Any]:
        command_obj = Command(
            name=name or func.__name__.replace("_", "-"),
            description=(description or inspect.getdoc(func) or "").strip(),
            callback=func,
            example=example or "",
            aliases=tuple(aliases or ()),
            completer=completer,
            category=category or "general",
        )
        setattr(func, COMMAND_ATTRIBUTE, command_obj)
        return func

    return wrapper


def collect_commands(module: ModuleType) -> list[ShellCommand]:
    """
    Gather commands exported by a module, in definition order.

    Sources: functions decorated with @command, plus COMMAND / COMMANDS
    attributes holding ShellCommand objects.
    """
    found: list[ShellCommand] = []
    for value in vars(module).values():
        command_obj = getattr(value, COMMAND_ATTRIBUTE, None)
        if isinstance(command_obj, Command) and getattr(value, "__module__", None) == module.__name__:
            found.append(command_obj)

    single = getattr(module, "COMMAND", None)
    if isinstance(single, ShellCommand):
        found.append(single)
    many = getattr(module, "COMMANDS", None)
    if isinstance(many, Iterable) and not isinstance(many, (str, bytes)):
        found.extend(item for item in many if isinstance(item, ShellCommand))
    return found
