"""Shared fixtures for the conshell test suite."""

from __future__ import annotations

from typing import Any, Callable

import pytest

from conshell import Command, Shell, ShellConfig


def make_command(name: str, callback: Callable[..., Any] | None = None, **kwargs: Any) -> Command:
    """Build a Command whose default callback returns its own name."""
    return Command(
        name=name,
        description=f"{name} command",
        callback=callback or (lambda *args: name),
        **kwargs,
    )


class AcceptAll:
    """A hand-written ShellCommand that accepts any tokens."""

    def __init__(self, name: str) -> None:
        self.name = name
        self.description = f"catch-all {name}"
        self.received: list[str] | None = None

    def accepts(self, tokens: list[str]) -> bool:
        return True

    def invoke(self, shell: Any, args: list[str]) -> str:
        self.received = list(args)
        return self.name

    def complete(self, shell: Any, buffer: str) -> list[str]:
        return []


@pytest.fixture
def shell() -> Shell:
    """A shell with a fixed prompt and POSIX-style key toggles."""
    return Shell(config=ShellConfig(prompt="> ", ctrl_c_interrupts=True,
                                    ctrl_d_is_eof=True, ctrl_z_is_eof=False))


@pytest.fixture
def show_shell(shell: Shell) -> Shell:
    """A shell with two 'show' commands and an unrelated one."""
    shell.add_command(make_command("show interfaces"))
    shell.add_command(make_command("show version"))
    shell.add_command(make_command("ls"))
    return shell
