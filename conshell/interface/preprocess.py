#!/usr/bin/env python3
# conshell/interface/preprocess.py
from __future__ import annotations

"""
Preprocessing pipeline.

Stages rewrite the token list before resolution (execution path) and strip
their own syntax from the raw buffer before completion (completion path).
Both paths use the same order: ascending priority, registration order on ties.
Stage errors are not caught here.
"""

import threading
from typing import TYPE_CHECKING, Mapping, Protocol, Sequence, runtime_checkable

from conshell.interface.parser import tokenize

if TYPE_CHECKING:  # pragma: no cover
    from conshell.interface.shell import Shell


@runtime_checkable
class PreprocessorStage(Protocol):
    """A pipeline stage. Lower priority runs first."""

    priority: int

    def preprocess(self, shell: "Shell", tokens: list[str]) -> list[str]:  # pragma: no cover
        ...

    def remove_syntax(self, text: str) -> str:  # pragma: no cover
        ...


class PreprocessorPipeline:
    """Ordered list of stages shared by the execution and completion paths."""

    def __init__(self, lock: threading.Lock | None = None) -> None:
        self._lock = lock or threading.Lock()
        self._stages: list[PreprocessorStage] = []

    def add(self, stage: PreprocessorStage) -> None:
        with self._lock:
            # sorted() is stable, so equal priorities keep registration order
            self._stages = sorted([*self._stages, stage], key=lambda s: s.priority)

    @property
    def stages(self) -> list[PreprocessorStage]:
        """Snapshot of the stages in application order."""
        with self._lock:
            return list(self._stages)

    def __len__(self) -> int:
        with self._lock:
            return len(self._stages)

    def process(self, shell: "Shell", tokens: Sequence[str]) -> list[str]:
        """Execution path: feed each stage the previous stage's tokens."""
        result = list(tokens)
        for stage in self.stages:
            result = list(stage.preprocess(shell, result))
        return result

    def remove_syntax(self, text: str) -> str:
        """Completion path: strip each stage's syntax from the raw buffer."""
        for stage in self.stages:
            text = stage.remove_syntax(text)
        return text


class AliasStage:
    """
    Expand a leading alias into one or more tokens.

    `AliasStage({"ll": "list --long"})` turns `ll /tmp` into
    `list --long /tmp`. Only the first token is considered, once.
    """

    def __init__(self, aliases: Mapping[str, str] | None = None, *, priority: int = 0) -> None:
        self.priority = priority
        self.aliases: dict[str, str] = dict(aliases or {})

    def preprocess(self, shell: "Shell", tokens: list[str]) -> list[str]:
        if tokens and tokens[0] in self.aliases:
            return [*tokenize(self.aliases[tokens[0]]), *tokens[1:]]
        return tokens

    def remove_syntax(self, text: str) -> str:
        return text


class MacroStage:
    """
    Expand `@name` tokens into the named macro's tokens.

    The sigil is buffer-level syntax, so `remove_syntax` drops it from the
    start of the buffer to let completion match plain command names.
    Unknown macros are left untouched.
    """

    def __init__(
        self,
        macros: Mapping[str, str] | None = None,
        *,
        sigil: str = "@",
        priority: int = 10,
    ) -> None:
        if not sigil:
            raise ValueError("sigil must be a non-empty string")
        self.priority = priority
        self.sigil = sigil
        self.macros: dict[str, str] = dict(macros or {})

    def preprocess(self, shell: "Shell", tokens: list[str]) -> list[str]:
        expanded: list[str] = []
        for token in tokens:
            name = token[len(self.sigil):] if token.startswith(self.sigil) else None
            if name is not None and name in self.macros:
                expanded.extend(tokenize(self.macros[name]))
            else:
                expanded.append(token)
        return expanded

    def remove_syntax(self, text: str) -> str:
        stripped = text.lstrip()
        if stripped.startswith(self.sigil):
            return stripped[len(self.sigil):]
        return text
