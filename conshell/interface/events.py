#!/usr/bin/env python3
# conshell/interface/events.py
from __future__ import annotations

"""
Notification hooks.

Each hook has at most one subscriber. On emit exactly one handler runs:
the subscriber if attached, otherwise the hook's default.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Generic, TypeVar

if TYPE_CHECKING:  # pragma: no cover
    from conshell.commands.command_types import ShellCommand

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class CommandExecuteEvent:
    """Payload for before/after execute notifications."""
    user_input: str
    result: Any = None
    command: "ShellCommand | None" = None


@dataclass(frozen=True, slots=True)
class CommandNotFoundEvent:
    """Payload for the command-not-found notification."""
    user_input: str


class EventHook(Generic[T]):
    """A single-subscriber callback slot with a fallback default."""

    def __init__(self, name: str, default: Callable[[T], Any]) -> None:
        self.name = name
        self._default = default
        self._subscriber: Callable[[T], Any] | None = None

    def subscribe(self, handler: Callable[[T], Any]) -> Callable[[T], Any]:
        """Attach `handler`, replacing any previous subscriber. Usable as a decorator."""
        self._subscriber = handler
        return handler

    def unsubscribe(self) -> None:
        self._subscriber = None

    @property
    def has_subscriber(self) -> bool:
        return self._subscriber is not None

    def emit(self, payload: T) -> Any:
        handler = self._subscriber or self._default
        return handler(payload)

    def __repr__(self) -> str:
        state = "subscribed" if self.has_subscriber else "default"
        return f"<EventHook {self.name} ({state})>"
