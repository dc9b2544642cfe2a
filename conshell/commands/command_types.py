#!/usr/bin/env python3
# conshell/commands/command_types.py
from __future__ import annotations

"""
Command data structures and protocols.

This module defines:
- ShellCommand: the capability set the registry depends on.
- CommandResult: a normalized result container for command outputs.
- Command: a ready-made ShellCommand built from a plain callback.
- BoundCommand: a resolved command bound to its remaining arguments.
"""

import inspect
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Iterable, Protocol, Sequence, runtime_checkable

from conshell.errors import CommandUsageError
from conshell.interface.parser import bind_args, build_usage

if TYPE_CHECKING:  # pragma: no cover
    from conshell.interface.shell import Shell


@runtime_checkable
class ShellCommand(Protocol):
    """Protocol for anything that can be registered into a CommandRegistry."""

    name: str
    description: str

    def accepts(self, tokens: Sequence[str]) -> bool:  # pragma: no cover - signature only
        ...

    def invoke(self, shell: "Shell", args: list[str]) -> Any:  # pragma: no cover
        ...

    def complete(self, shell: "Shell", buffer: str) -> Iterable[str]:  # pragma: no cover
        ...


@dataclass(slots=True)
class CommandResult:
    """
    Normalized result container from command execution.

    Attributes:
        ok: True if the command completed successfully.
        message: Human-readable summary or primary output.
        data: Optional machine-readable payload (dict/list/primitive).
    """
    ok: bool = True
    message: str = ""
    data: Any = None

    def __str__(self) -> str:
        # Keep CLI printing predictable
        return self.message if self.message else ("ok" if self.ok else "error")


def _words(text: str) -> list[str]:
    return text.lower().split()


def _takes_shell(func: Callable[..., Any]) -> bool:
    """True when the callback's first parameter is named 'shell'."""
    try:
        parameters = list(inspect.signature(func).parameters)
    except (TypeError, ValueError):
        return False
    return bool(parameters) and parameters[0] == "shell"


@dataclass(slots=True, frozen=True)
class Command:
    """
    A command whose name is one or more literal words.

    Important fields:
        name: Primary unique command name, e.g. "show version".
        description: Short, user-facing description.
        callback: Function implementing the command. Tokens after the name
            are bound to its signature; a first parameter called `shell`
            receives the shell instance.
        example: One-line example usage string (optional).
        aliases: Extra names resolving to the same command.
        completer: Optional provider of argument suggestions. Called with the
            text typed after the name, returns full argument strings.
        category: Logical group for help output.
    """

    name: str
    description: str
    callback: Callable[..., Any]
    example: str = ""
    aliases: tuple[str, ...] = ()
    completer: Callable[[str], Iterable[str]] | None = field(default=None, repr=False)
    category: str = "general"

    # ---------------- Matching ----------------

    def matched_name(self, tokens: Sequence[str]) -> str | None:
        """Return the name or alias the tokens start with (longest first), or None."""
        lowered = [token.lower() for token in tokens]
        for candidate in sorted((self.name, *self.aliases), key=lambda n: -len(_words(n))):
            words = _words(candidate)
            if words and lowered[:len(words)] == words:
                return candidate
        return None

    def name_length(self, tokens: Sequence[str]) -> int:
        """Number of leading tokens consumed by the matched name."""
        matched = self.matched_name(tokens)
        return len(_words(matched)) if matched else 0

    def accepts(self, tokens: Sequence[str]) -> bool:
        return self.matched_name(tokens) is not None

    # ---------------- Execution ----------------

    @property
    def usage(self) -> str:
        return build_usage(self.name, self.callback, skip_first=_takes_shell(self.callback))

    def invoke(self, shell: "Shell", args: list[str]) -> Any:
        """Bind arguments to the callback signature and execute it."""
        takes_shell = _takes_shell(self.callback)
        try:
            positional, keywords = bind_args(
                self.callback, list(args), skip_first=takes_shell)
        except TypeError as exc:
            # Re-raise with the usage line attached
            raise CommandUsageError(str(exc).split("\n")[0], self.usage) from exc
        if takes_shell:
            return self.callback(shell, *positional, **keywords)
        return self.callback(*positional, **keywords)

    # ---------------- Completion ----------------

    def complete(self, shell: "Shell", buffer: str) -> Iterable[str]:
        """
        Propose continuations for the whole buffer.

        - Buffer is a prefix of the name or an alias: propose that name.
        - Buffer already holds the name plus a space: ask the completer.
        """
        text = buffer.lstrip()
        lowered = text.lower()
        for candidate in (self.name, *self.aliases):
            if candidate.lower().startswith(lowered):
                yield candidate
            elif self.completer is not None and lowered.startswith(candidate.lower() + " "):
                remainder = text[len(candidate) + 1:].lstrip()
                for suggestion in self.completer(remainder):
                    yield f"{candidate} {suggestion}"


@dataclass(slots=True, frozen=True)
class BoundCommand:
    """A resolved command closed over its shell and remaining arguments."""

    command: ShellCommand
    args: tuple[str, ...]
    shell: "Shell" = field(repr=False)

    def __call__(self) -> Any:
        return self.command.invoke(self.shell, list(self.args))
