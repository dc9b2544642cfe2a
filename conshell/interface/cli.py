#!/usr/bin/env python3
# conshell/interface/cli.py
from __future__ import annotations

"""
Interactive input frontends (line readers).

Selection order for "auto":
    1) prompt_toolkit (key-bound tab completion, history)
    2) readline (basic completion, history)
    3) plain input (last resort)

A reader knows nothing about commands. The shell wires four callbacks into
it: prompt requested, interrupt received, tab-complete requested and
alternatives to display.
"""

import contextlib
import getpass
import io
import logging
import os
import sys
from collections import deque
from typing import Callable, Iterable, Optional

from conshell.interface.completion import CompletionResult
from conshell.interface.history import ShellHistory
from conshell.ui import print_line, write_text

logger = logging.getLogger(__name__)

READER_KINDS = ("auto", "prompt_toolkit", "readline", "plain")


class BaseLineReader:
    """
    Base interface for line readers.

    Subclasses implement `get_line` and `get_masked_line`; `setup` and
    `teardown` are optional. Context manager support guarantees teardown.
    """

    def __init__(self, history: ShellHistory | None = None) -> None:
        self.history = history if history is not None else ShellHistory()
        self.ctrl_c_interrupts = os.name != "nt"
        self.ctrl_d_is_eof = True
        self.ctrl_z_is_eof = os.name == "nt"

        self.on_prompt: Optional[Callable[[], None]] = None
        self.on_interrupt: Optional[Callable[[], None]] = None
        self.on_tab_complete: Optional[Callable[[str], CompletionResult]] = None
        self.on_print_alternatives: Optional[Callable[[list[str]], None]] = None

    def setup(self) -> None:
        ...

    def get_line(self) -> str:  # pragma: no cover - interface
        raise NotImplementedError

    def get_masked_line(self) -> str:  # pragma: no cover - interface
        raise NotImplementedError

    def teardown(self) -> None:
        ...

    # Context manager helpers
    def __enter__(self) -> "BaseLineReader":
        self.setup()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.teardown()

    # ---------------- Callback helpers ----------------

    def _render_prompt(self) -> str:
        """Run the prompt callback and capture what it writes to stdout."""
        if self.on_prompt is None:
            return ""
        captured = io.StringIO()
        with contextlib.redirect_stdout(captured):
            self.on_prompt()
        return captured.getvalue()

    def _interrupt(self) -> str:
        """Ctrl-C: notify when enabled, discard the current line either way."""
        if self.ctrl_c_interrupts and self.on_interrupt is not None:
            self.on_interrupt()
        return ""

    def _eof_enabled(self) -> bool:
        # input() cannot tell the keys apart; use the platform's EOF key
        return self.ctrl_z_is_eof if os.name == "nt" else self.ctrl_d_is_eof

    def tab_complete(self, buffer: str) -> CompletionResult:
        """Ask the shell for a completion; show alternatives if that is the outcome."""
        if self.on_tab_complete is None:
            return CompletionResult()
        result = self.on_tab_complete(buffer)
        if result.output is None and result.alternatives:
            self.print_alternatives(result.alternatives)
        return result

    def print_alternatives(self, alternatives: list[str]) -> None:
        if self.on_print_alternatives is not None:
            self.on_print_alternatives(list(alternatives))


class PlainLineReader(BaseLineReader):
    """input()/getpass based reader with no completion."""

    def _guarded(self, read: Callable[[str], str], prompt_text: str) -> str:
        try:
            return read(prompt_text)
        except KeyboardInterrupt:
            print_line()
            return self._interrupt()
        except EOFError:
            if self._eof_enabled():
                raise
            print_line()
            return ""

    def get_line(self) -> str:
        return self._guarded(input, self._render_prompt())

    def get_masked_line(self) -> str:
        return self._guarded(lambda text: getpass.getpass(text), self._render_prompt())


class ReadlineLineReader(PlainLineReader):
    """GNU readline reader: whole-buffer tab completion and in-session history."""

    def __init__(self, history: ShellHistory | None = None) -> None:
        import readline  # type: ignore[import-not-found]

        super().__init__(history)
        self.readline = readline
        self._matches: list[str] = []
        self._prompt_text = ""

    def setup(self) -> None:
        self.readline.clear_history()
        for entry in self.history.entries:
            self.readline.add_history(entry)

        # The completer sees the whole buffer, not just the last word
        self.readline.set_completer_delims("")
        self.readline.set_completer(self._complete)
        if "libedit" in (getattr(self.readline, "__doc__", "") or ""):
            self.readline.parse_and_bind("bind ^I rl_complete")
        else:
            self.readline.parse_and_bind("tab: complete")

    def _complete(self, text: str, state: int) -> Optional[str]:
        if state == 0:
            result = self.tab_complete(self.readline.get_line_buffer())
            self._matches = [result.output] if result.output is not None else []
        return self._matches[state] if state < len(self._matches) else None

    def print_alternatives(self, alternatives: list[str]) -> None:
        print_line()
        super().print_alternatives(alternatives)
        # Redraw the prompt and the untouched buffer below the listing
        write_text(self._prompt_text + self.readline.get_line_buffer())

    def get_line(self) -> str:
        self._prompt_text = self._render_prompt()
        line = self._guarded(input, self._prompt_text)
        # The shell owns history; keep readline's list free of duplicates
        length = self.readline.get_current_history_length()
        if length >= 2 and self.readline.get_history_item(length) == self.readline.get_history_item(length - 1):
            self.readline.remove_history_item(length - 1)
        return line

    def teardown(self) -> None:
        self.readline.set_completer(None)


class PromptToolkitLineReader(BaseLineReader):
    """prompt_toolkit reader: Tab runs the shell's completion policy."""

    def __init__(self, history: ShellHistory | None = None) -> None:
        from prompt_toolkit import prompt
        from prompt_toolkit.application import run_in_terminal
        from prompt_toolkit.history import InMemoryHistory
        from prompt_toolkit.key_binding import KeyBindings

        super().__init__(history)
        self._prompt = prompt
        self._run_in_terminal = run_in_terminal
        self._history_class = InMemoryHistory
        self._key_bindings_class = KeyBindings

    def _key_bindings(self):
        kb = self._key_bindings_class()

        @kb.add("tab")
        def _(event):
            buffer = event.app.current_buffer
            if self.on_tab_complete is None:
                return
            result = self.on_tab_complete(buffer.text)
            if result.output is not None:
                buffer.text = result.output
                buffer.cursor_position = len(result.output)
            elif result.alternatives:
                alternatives = list(result.alternatives)
                self._run_in_terminal(
                    lambda: self.print_alternatives(alternatives))

        if not self.ctrl_c_interrupts:
            @kb.add("c-c")
            def _(event):
                event.app.current_buffer.reset()

        if not self.ctrl_d_is_eof:
            @kb.add("c-d")
            def _(event):
                event.app.current_buffer.delete(1)

        if self.ctrl_z_is_eof:
            @kb.add("c-z")
            def _(event):
                event.app.exit(exception=EOFError)

        return kb

    def _read(self, *, is_password: bool) -> str:
        try:
            return self._prompt(
                self._render_prompt(),
                history=self._history_class(self.history.entries),
                key_bindings=self._key_bindings(),
                is_password=is_password,
            )
        except KeyboardInterrupt:
            return self._interrupt()

    def get_line(self) -> str:
        return self._read(is_password=False)

    def get_masked_line(self) -> str:
        return self._read(is_password=True)


class ScriptedLineReader(BaseLineReader):
    """
    Feeds pre-recorded lines; raises EOFError when they run out.

    Useful for batch scripts and tests. `masked_lines` feeds get_masked_line
    (falls back to the regular queue). With `echo`, each line is printed
    after the prompt as a terminal would show it.
    """

    def __init__(
        self,
        lines: Iterable[str] = (),
        history: ShellHistory | None = None,
        *,
        masked_lines: Iterable[str] | None = None,
        echo: bool = False,
    ) -> None:
        super().__init__(history)
        self._lines = deque(lines)
        self._masked = deque(masked_lines) if masked_lines is not None else None
        self.echo = echo

    def feed(self, *lines: str) -> None:
        self._lines.extend(lines)

    def _next(self, queue: deque[str], *, masked: bool) -> str:
        if self.on_prompt is not None:
            self.on_prompt()
        if not queue:
            raise EOFError
        line = queue.popleft()
        if self.echo:
            print_line("*" * len(line) if masked else line)
        return line

    def get_line(self) -> str:
        return self._next(self._lines, masked=False)

    def get_masked_line(self) -> str:
        queue = self._masked if self._masked is not None else self._lines
        return self._next(queue, masked=True)


def make_line_reader(kind: str = "auto", history: ShellHistory | None = None) -> BaseLineReader:
    """
    Factory to select a line reader at runtime.

    "auto" prefers prompt_toolkit on an interactive terminal, then readline,
    then plain input().
    """
    if kind not in READER_KINDS:
        raise ValueError(f"Unknown line reader {kind!r}; expected one of {READER_KINDS}")

    if kind == "prompt_toolkit":
        return PromptToolkitLineReader(history)
    if kind == "readline":
        return ReadlineLineReader(history)
    if kind == "plain":
        return PlainLineReader(history)

    interactive = sys.stdin.isatty() and sys.stdout.isatty()
    if interactive:
        try:
            return PromptToolkitLineReader(history)
        except ImportError:
            logger.debug("prompt_toolkit unavailable, trying readline")
        try:
            return ReadlineLineReader(history)
        except ImportError:
            logger.debug("readline unavailable, using plain input")
    return PlainLineReader(history)
