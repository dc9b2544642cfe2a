#!/usr/bin/env python3
# conshell/errors.py
from __future__ import annotations

"""
Exception taxonomy for the shell.

Only CommandNotFoundError and TokenizationError are handled inside the
read-execute loop. Everything else propagates to the host.
"""


class ShellError(Exception):
    """Base class for every error raised by conshell."""


class TokenizationError(ShellError, ValueError):
    """Raised when a raw input line has malformed quoting."""

    def __init__(self, line: str, reason: str = "unbalanced quotes") -> None:
        super().__init__(f"Cannot tokenize {line!r}: {reason}")
        self.line = line
        self.reason = reason


class CommandNotFoundError(ShellError, LookupError):
    """No registered command accepts the (preprocessed) tokens."""

    def __init__(self, user_input: str) -> None:
        super().__init__(f"Command not found: {user_input}")
        self.user_input = user_input


class DuplicateCommandError(ShellError, ValueError):
    """A command name or alias is already registered."""

    def __init__(self, name: str, message: str | None = None) -> None:
        super().__init__(message or f"Command '{name}' already registered.")
        self.name = name


class StageFailure(ShellError):
    """Convenience base for preprocessor stages; never wrapped by the pipeline."""


class CommandInvocationFailure(ShellError):
    """Convenience base for errors raised by a command's own logic."""


class CommandUsageError(CommandInvocationFailure, TypeError):
    """Tokens could not be bound to a command callback's signature."""

    def __init__(self, message: str, usage: str = "") -> None:
        super().__init__(f"{message}\nUsage: {usage}" if usage else message)
        self.usage = usage
