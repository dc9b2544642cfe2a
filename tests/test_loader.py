"""Tests for discovering commands in a plugin package."""

from __future__ import annotations

import itertools
import textwrap
from pathlib import Path

import pytest

from conshell import DuplicateCommandError, Shell, load_commands
from conshell.commands import collect_commands, command

_counter = itertools.count()


def make_package(root: Path, files: dict[str, str]) -> str:
    """Write a throwaway package under `root` and return its import name."""
    name = f"conshell_plugins_{next(_counter)}"
    for relative, source in {"__init__.py": "", **files}.items():
        path = root / name / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(source).replace("PKG", name), encoding="utf-8")
    return name


@pytest.fixture
def plugin_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.syspath_prepend(str(tmp_path))
    return tmp_path


class TestLoadCommands:
    """Verify package scanning."""

    def test_modules_and_entrypoints(self, shell: Shell, plugin_root: Path) -> None:
        package = make_package(plugin_root, {
            "basic.py": """
                from conshell import command

                @command(description="Greet someone.")
                def say_hi(name="world"):
                    return f"hi {name}"
            """,
            "reexport.py": """
                from PKG.basic import say_hi
            """,
            "net/__init__.py": "",
            "net/entrypoint.py": """
                from conshell import Command

                COMMANDS = [Command(name="ping", description="Ping a host.",
                                    callback=lambda host: f"pong {host}")]
            """,
            "_private.py": """
                from conshell import command

                @command()
                def hidden():
                    return "hidden"
            """,
        })
        assert load_commands(shell, package) == 2
        assert shell.execute("say-hi bob") == "hi bob"
        assert shell.execute("ping example.org") == "pong example.org"
        assert shell.get_command("ping").category == "net"
        assert shell.get_command("say-hi").category == "general"
        assert shell.get_command("hidden") is None

    def test_explicit_category_kept(self, shell: Shell, plugin_root: Path) -> None:
        package = make_package(plugin_root, {
            "tools/__init__.py": "",
            "tools/entrypoint.py": """
                from conshell import Command

                COMMAND = Command(name="fmt", description="Format.",
                                  callback=lambda: None, category="text")
            """,
        })
        assert load_commands(shell, package) == 1
        assert shell.get_command("fmt").category == "text"

    def test_duplicates_rejected(self, shell: Shell, plugin_root: Path) -> None:
        package = make_package(plugin_root, {
            "one.py": """
                from conshell import command

                @command(name="same")
                def first():
                    return 1
            """,
            "two.py": """
                from conshell import command

                @command(name="same")
                def second():
                    return 2
            """,
        })
        with pytest.raises(DuplicateCommandError):
            load_commands(shell, package)

    def test_plain_module_is_not_a_package(self, shell: Shell) -> None:
        with pytest.raises(RuntimeError):
            load_commands(shell, "conshell.errors")


class TestDecorator:
    """Verify the @command decorator on its own."""

    def test_defaults_from_function(self) -> None:
        @command()
        def show_status():
            """Print the status."""
            return "ok"

        command_obj = show_status.__shell_command__
        assert command_obj.name == "show-status"
        assert command_obj.description == "Print the status."
        assert show_status() == "ok"

    def test_collect_ignores_foreign_functions(self) -> None:
        import types

        module = types.ModuleType("fake_module")

        @command(name="elsewhere")
        def elsewhere():
            return None

        module.elsewhere = elsewhere
        assert collect_commands(module) == []
