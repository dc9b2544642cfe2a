#!/usr/bin/env python3
# conshell/interface/__init__.py
from __future__ import annotations

"""
Package for the interactive shell and its collaborators.

Provides:
- Tokenizer and argument binding helpers.
- Completion policy and single-use overrides.
- Preprocessing pipeline and stock stages.
- Line reader frontends (prompt_toolkit / readline / plain / scripted).
- The Shell controller and the plugin loader.
"""


# Parser FIRST (conshell.commands depends on it)
from .parser import tokenize, bind_args, build_usage

# Completion / history / events
from .completion import (
    CompletionOverrides,
    CompletionResult,
    default_completion_formatter,
    default_completions_printer,
    find_common_prefix,
    resolve_completion,
    simple_completions_printer,
)
from .history import ShellHistory
from .events import CommandExecuteEvent, CommandNotFoundEvent, EventHook

# Preprocessing
from .preprocess import AliasStage, MacroStage, PreprocessorPipeline, PreprocessorStage

# Line readers
from .cli import (
    BaseLineReader,
    PlainLineReader,
    PromptToolkitLineReader,
    ReadlineLineReader,
    ScriptedLineReader,
    make_line_reader,
)

# Controller (after everything it wires together)
from .shell import Shell
from .loader import load_commands

__all__ = [
    # parser
    "tokenize",
    "bind_args",
    "build_usage",
    # completion
    "CompletionOverrides",
    "CompletionResult",
    "default_completion_formatter",
    "default_completions_printer",
    "find_common_prefix",
    "resolve_completion",
    "simple_completions_printer",
    # history / events
    "ShellHistory",
    "CommandExecuteEvent",
    "CommandNotFoundEvent",
    "EventHook",
    # preprocessing
    "AliasStage",
    "MacroStage",
    "PreprocessorPipeline",
    "PreprocessorStage",
    # readers
    "BaseLineReader",
    "PlainLineReader",
    "PromptToolkitLineReader",
    "ReadlineLineReader",
    "ScriptedLineReader",
    "make_line_reader",
    # shell
    "Shell",
    "load_commands",
]
