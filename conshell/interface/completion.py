#!/usr/bin/env python3
# conshell/interface/completion.py
from __future__ import annotations

"""
Tab completion policy.

This module offers:
- find_common_prefix: longest case-insensitive prefix shared by candidates.
- resolve_completion: turn candidates into either a direct replacement for
  the buffer or a list of alternatives to display.
- Built-in formatter/printers and the single-use override slots.
"""

import threading
from dataclasses import dataclass, field
from typing import Callable, Sequence

from conshell.ui import print_line

CompletionFormatter = Callable[[list[str]], "list[str] | None"]
CompletionPrinter = Callable[[list[str]], None]


@dataclass(slots=True)
class CompletionResult:
    """
    Outcome of one tab-complete event.

    Attributes:
        output: Text that replaces the current buffer, or None.
        alternatives: Candidates to display instead of inserting, or empty.
    """
    output: str | None = None
    alternatives: list[str] = field(default_factory=list)

    def __bool__(self) -> bool:
        return self.output is not None or bool(self.alternatives)


def default_completion_formatter(candidates: list[str]) -> list[str]:
    """Append a separator to a lone candidate; pass longer lists through."""
    if len(candidates) == 1:
        return [f"{candidates[0]} "]
    return candidates


def default_completions_printer(candidates: list[str]) -> None:
    """Print a header and one bulleted line per candidate."""
    print_line("Possible completions:")
    for item in candidates:
        print_line(f"- {item}")


def simple_completions_printer(candidates: list[str]) -> None:
    """Print the candidates unformatted, framed by blank lines."""
    print_line()
    for item in candidates:
        print_line(item)
    print_line()


def find_common_prefix(candidates: Sequence[str]) -> str | None:
    """
    Return the longest prefix every candidate starts with (case-insensitive).

    The prefix is grown one character at a time from the first candidate and
    checked against all candidates at each step. None when nothing is shared.
    """
    if not candidates:
        return None
    first = candidates[0]
    lowered = [c.lower() for c in candidates]
    common = ""
    for index in range(len(first)):
        test = first[:index + 1].lower()
        if not all(c.startswith(test) for c in lowered):
            break
        common = first[:index + 1]
    return common or None


def resolve_completion(
    buffer: str,
    candidates: Sequence[str],
    formatter: CompletionFormatter = default_completion_formatter,
) -> CompletionResult:
    """
    Apply the completion policy for N candidates.

    - N == 0: nothing.
    - N == 1: the formatted candidate replaces the buffer.
    - N > 1: the common prefix replaces the buffer unless the buffer already
      ends with it; then the formatted list is offered as alternatives.
    """
    candidates = list(candidates)
    formatted = formatter(list(candidates)) or candidates

    if not candidates:
        return CompletionResult()
    if len(candidates) == 1:
        return CompletionResult(output=formatted[0])

    common_prefix = find_common_prefix(candidates)
    if common_prefix and not buffer.lower().endswith(common_prefix.lower()):
        return CompletionResult(output=common_prefix)
    return CompletionResult(alternatives=list(formatted))


class CompletionOverrides:
    """
    Single-use formatter and printer slots.

    `take_*` returns the override and resets the slot in one step under the
    shared lock, so an override set once is consumed at most once.
    """

    def __init__(self, lock: threading.Lock | None = None) -> None:
        self._lock = lock or threading.Lock()
        self._formatter: CompletionFormatter | None = None
        self._printer: CompletionPrinter | None = None

    def set_formatter(self, formatter: CompletionFormatter | None) -> None:
        with self._lock:
            self._formatter = formatter

    def set_printer(self, printer: CompletionPrinter | None) -> None:
        with self._lock:
            self._printer = printer

    def take_formatter(self) -> CompletionFormatter:
        with self._lock:
            formatter, self._formatter = self._formatter, None
        return formatter or default_completion_formatter

    def take_printer(self) -> CompletionPrinter:
        with self._lock:
            printer, self._printer = self._printer, None
        return printer or default_completions_printer
