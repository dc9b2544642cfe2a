#!/usr/bin/env python3
# conshell/interface/shell.py
from __future__ import annotations

"""
Shell controller: the read-resolve-execute loop and the public API.

One lock guards the registry, the pipeline list and the completion override
slots. It is released before a resolved command runs, so a command may add
or clear commands, or call `execute`, from inside its own invocation.
"""

import difflib
import logging
import threading
from typing import Any, Callable, Sequence

from conshell.commands.command_types import BoundCommand, ShellCommand
from conshell.commands.commands import CommandRegistry
from conshell.config import ShellConfig
from conshell.errors import CommandNotFoundError, TokenizationError
from conshell.interface.cli import BaseLineReader, make_line_reader
from conshell.interface.completion import (
    CompletionFormatter,
    CompletionOverrides,
    CompletionPrinter,
    CompletionResult,
    resolve_completion,
)
from conshell.interface.events import CommandExecuteEvent, CommandNotFoundEvent, EventHook
from conshell.interface.history import ShellHistory
from conshell.interface.parser import tokenize
from conshell.interface.preprocess import PreprocessorPipeline, PreprocessorStage
from conshell.ui import colorize, print_line, write_text

logger = logging.getLogger(__name__)


class Shell:
    """Embeddable interactive shell."""

    def __init__(
        self,
        history: ShellHistory | None = None,
        *,
        config: ShellConfig | None = None,
        reader_factory: Callable[[ShellHistory], BaseLineReader] | None = None,
    ) -> None:
        self.config = config or ShellConfig()
        self.history = history if history is not None else ShellHistory(
            max_size=self.config.history_size)

        self._lock = threading.Lock()
        self._registry = CommandRegistry(self._lock)
        self._pipeline = PreprocessorPipeline(self._lock)
        self._overrides = CompletionOverrides(self._lock)
        self._reader_factory = reader_factory or (
            lambda hist: make_line_reader(self.config.line_reader, hist))
        self._running = False

        self.ctrl_c_interrupts = self.config.ctrl_c_interrupts
        self.ctrl_d_is_eof = self.config.ctrl_d_is_eof
        self.ctrl_z_is_eof = self.config.ctrl_z_is_eof
        self.last_result: Any = None

        # Notification points; defaults run only without a subscriber
        self.before_execute: EventHook[CommandExecuteEvent] = EventHook(
            "before_execute", self._default_before_execute)
        self.after_execute: EventHook[CommandExecuteEvent] = EventHook(
            "after_execute", self._default_after_execute)
        self.command_not_found: EventHook[CommandNotFoundEvent] = EventHook(
            "command_not_found", self._default_command_not_found)
        self.interrupt: EventHook[None] = EventHook(
            "interrupt", self._default_interrupt)
        self.prompt: EventHook[None] = EventHook(
            "prompt", self._default_prompt)
        self.print_alternatives_hook: EventHook[list[str]] = EventHook(
            "print_alternatives", self._default_print_alternatives)

    # ------------------------------------------------------------------
    # Commands manipulation
    # ------------------------------------------------------------------

    def add_command(self, command_obj: ShellCommand) -> "Shell":
        self._registry.add(command_obj)
        return self

    def add_commands(self, commands: Sequence[ShellCommand]) -> "Shell":
        for command_obj in commands:
            self._registry.add(command_obj)
        return self

    def clear_commands(self) -> "Shell":
        self._registry.clear()
        return self

    def get_command(self, name: str) -> ShellCommand | None:
        return self._registry.get(name)

    def get_commands_descriptions(self, prefix: str | None = None) -> dict[str, str]:
        return self._registry.describe(prefix)

    @property
    def command_names(self) -> list[str]:
        return self._registry.names()

    def add_preprocessor(self, stage: PreprocessorStage) -> "Shell":
        self._pipeline.add(stage)
        return self

    @property
    def preprocessors(self) -> list[PreprocessorStage]:
        return self._pipeline.stages

    # ------------------------------------------------------------------
    # Resolution & execution
    # ------------------------------------------------------------------

    def _tokens(self, user_input: str | Sequence[str]) -> list[str]:
        tokens = tokenize(user_input) if isinstance(user_input, str) else list(user_input)
        return self._pipeline.process(self, tokens)

    def resolve(self, user_input: str | Sequence[str]) -> BoundCommand | None:
        """Tokenize, preprocess and resolve without executing."""
        return self._registry.resolve(self, self._tokens(user_input))

    def is_resolvable(self, user_input: str | Sequence[str]) -> bool:
        return self._registry.is_resolvable(self._tokens(user_input))

    def execute(self, user_input: str | Sequence[str]) -> Any:
        """
        Resolve and run one command; returns its result.

        Raises CommandNotFoundError when nothing accepts the tokens. Errors
        raised by the command itself propagate unchanged.
        """
        bound = self.resolve(user_input)
        if bound is None:
            raw = user_input if isinstance(user_input, str) else " ".join(user_input)
            raise CommandNotFoundError(raw)

        # The lock is already released here
        result = bound()
        self.last_result = result
        return result

    # ------------------------------------------------------------------
    # Completion
    # ------------------------------------------------------------------

    def set_completion_formatter(self, formatter: CompletionFormatter | None) -> None:
        """Use `formatter` for the next completion event only."""
        self._overrides.set_formatter(formatter)

    def set_completion_printer(self, printer: CompletionPrinter | None) -> None:
        """Use `printer` the next time alternatives are displayed (no subscriber attached)."""
        self._overrides.set_printer(printer)

    def complete(self, buffer: str) -> CompletionResult:
        """Handle a tab-complete request for the raw line buffer."""
        lookup = self._pipeline.remove_syntax(buffer)
        candidates = self._registry.complete(self, lookup)
        formatter = self._overrides.take_formatter()
        return resolve_completion(buffer, candidates, formatter)

    def print_alternatives(self, alternatives: list[str]) -> None:
        self.print_alternatives_hook.emit(list(alternatives))

    # ------------------------------------------------------------------
    # Loop
    # ------------------------------------------------------------------

    def _prepare_reader(self, reader: BaseLineReader | None) -> BaseLineReader:
        """Build a reader if none is given, then copy the toggles and wire prompt/interrupt."""
        reader = reader or self._reader_factory(self.history)
        reader.ctrl_c_interrupts = self.ctrl_c_interrupts
        reader.ctrl_d_is_eof = self.ctrl_d_is_eof
        reader.ctrl_z_is_eof = self.ctrl_z_is_eof
        if reader.on_prompt is None:
            reader.on_prompt = lambda: self.prompt.emit(None)
        if reader.on_interrupt is None:
            reader.on_interrupt = lambda: self.interrupt.emit(None)
        return reader

    def stop(self) -> None:
        """Ask the loop to return after the current iteration."""
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    def process_line(self, line: str) -> None:
        """One loop iteration for an already-read line."""
        if not line or line.isspace():
            return
        user_input = line.strip()

        try:
            self.before_execute.emit(CommandExecuteEvent(user_input))
            try:
                bound = self.resolve(user_input)
            except TokenizationError as exc:
                logger.warning("%s", exc)
                print_line(colorize(f"[error] {exc}", "red"))
                return
            if bound is None:
                logger.info("Command not found: %s", user_input)
                self.command_not_found.emit(CommandNotFoundEvent(user_input))
                return

            # Runs outside the lock; errors raised by the command propagate
            result = bound()
            self.last_result = result
            self.after_execute.emit(
                CommandExecuteEvent(user_input, result, bound.command))
        finally:
            self.history.add_unique(user_input)

    def run(self, reader: BaseLineReader | None = None) -> None:
        """
        Read, resolve and execute lines until `stop()` or end of input.

        Errors other than not-found and tokenization failures propagate.
        """
        reader = self._prepare_reader(reader)
        reader.on_tab_complete = self.complete
        reader.on_print_alternatives = self.print_alternatives

        self._running = True
        try:
            with reader:
                while self._running:
                    try:
                        line = reader.get_line()
                    except EOFError:
                        logger.debug("End of input")
                        break
                    self.process_line(line)
        finally:
            self._running = False

    def read_password(self, reader: BaseLineReader | None = None) -> str:
        """Read one masked line; it is neither executed nor stored in history."""
        reader = self._prepare_reader(reader)
        with reader:
            return reader.get_masked_line()

    # ------------------------------------------------------------------
    # Default notification behavior
    # ------------------------------------------------------------------

    def _default_before_execute(self, event: CommandExecuteEvent) -> None:
        logger.debug("Executing: %s", event.user_input)

    def _default_after_execute(self, event: CommandExecuteEvent) -> None:
        if event.result is not None:
            print_line(str(event.result))

    def _default_command_not_found(self, event: CommandNotFoundEvent) -> None:
        head = event.user_input.split(maxsplit=1)[0] if event.user_input else ""
        matches = difflib.get_close_matches(head, self._registry.names(), n=3, cutoff=0.6)
        hint = f" Did you mean: {', '.join(matches)}?" if matches else ""
        print_line(f"Command not found: {event.user_input}{hint}")

    def _default_interrupt(self, _: None) -> None:
        print_line("^C")

    def _default_prompt(self, _: None) -> None:
        write_text(self.config.prompt)

    def _default_print_alternatives(self, alternatives: list[str]) -> None:
        printer = self._overrides.take_printer()
        printer(alternatives)
