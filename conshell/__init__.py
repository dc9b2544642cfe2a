#!/usr/bin/env python3
# conshell/__init__.py
from __future__ import annotations
"""
conshell: an embeddable interactive command shell.

Import order matters: `conshell.interface` loads the parser before
`conshell.commands`, which depends on it.
"""

from conshell.errors import (
    CommandInvocationFailure,
    CommandNotFoundError,
    CommandUsageError,
    DuplicateCommandError,
    ShellError,
    StageFailure,
    TokenizationError,
)
from conshell.interface import (
    AliasStage,
    CompletionResult,
    MacroStage,
    ScriptedLineReader,
    Shell,
    ShellHistory,
    load_commands,
    tokenize,
)
from conshell.commands import Command, CommandResult, ShellCommand, builtin_commands, command
from conshell.config import ShellConfig, load_config

__version__ = "0.1.0"

__all__ = [
    "AliasStage",
    "Command",
    "CommandInvocationFailure",
    "CommandNotFoundError",
    "CommandResult",
    "CommandUsageError",
    "CompletionResult",
    "DuplicateCommandError",
    "MacroStage",
    "ScriptedLineReader",
    "Shell",
    "ShellCommand",
    "ShellConfig",
    "ShellError",
    "ShellHistory",
    "StageFailure",
    "TokenizationError",
    "builtin_commands",
    "command",
    "load_commands",
    "load_config",
    "tokenize",
]
