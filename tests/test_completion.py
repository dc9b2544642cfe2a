"""Tests for the completion policy, printers and single-use overrides."""

from __future__ import annotations

import threading

import pytest

from conshell import Shell
from conshell.interface.completion import (
    CompletionOverrides,
    CompletionResult,
    default_completion_formatter,
    default_completions_printer,
    find_common_prefix,
    resolve_completion,
    simple_completions_printer,
)
from tests.conftest import make_command


class TestFindCommonPrefix:
    """Verify the shared-prefix helper."""

    def test_shared_prefix(self) -> None:
        assert find_common_prefix(["show interfaces", "show version"]) == "show "

    def test_nothing_shared(self) -> None:
        assert find_common_prefix(["abc", "xyz"]) is None

    def test_single_candidate(self) -> None:
        assert find_common_prefix(["only"]) == "only"

    def test_no_candidates(self) -> None:
        assert find_common_prefix([]) is None

    def test_case_insensitive_keeps_first_spelling(self) -> None:
        """Comparison ignores case; the result is cut from the first candidate."""
        assert find_common_prefix(["Show x", "show y"]) == "Show "


class TestResolveCompletion:
    """Verify the N == 0 / 1 / many policy."""

    def test_no_candidates(self) -> None:
        result = resolve_completion("zz", [])
        assert result == CompletionResult()
        assert not result

    def test_single_candidate_gets_separator(self) -> None:
        assert resolve_completion("sh", ["show"]).output == "show "

    def test_many_candidates_insert_prefix(self) -> None:
        result = resolve_completion("sh", ["show interfaces", "show version"])
        assert result.output == "show "
        assert result.alternatives == []

    def test_many_candidates_at_prefix_list_alternatives(self) -> None:
        result = resolve_completion("show ", ["show interfaces", "show version"])
        assert result.output is None
        assert result.alternatives == ["show interfaces", "show version"]

    def test_no_common_prefix_lists_alternatives(self) -> None:
        result = resolve_completion("", ["ls", "pwd"])
        assert result.alternatives == ["ls", "pwd"]

    def test_custom_formatter(self) -> None:
        """The formatter shapes both the single output and the list."""
        upper = lambda items: [item.upper() for item in items]  # noqa: E731
        assert resolve_completion("s", ["show"], upper).output == "SHOW"
        assert resolve_completion("x ", ["x a", "x b"], upper).alternatives == ["X A", "X B"]

    def test_default_formatter(self) -> None:
        assert default_completion_formatter(["one"]) == ["one "]
        assert default_completion_formatter(["a", "b"]) == ["a", "b"]


class TestPrinters:
    """Verify the bundled alternative printers."""

    def test_default_printer(self, capsys: pytest.CaptureFixture[str]) -> None:
        default_completions_printer(["a", "b"])
        assert capsys.readouterr().out == "Possible completions:\n- a\n- b\n"

    def test_simple_printer(self, capsys: pytest.CaptureFixture[str]) -> None:
        simple_completions_printer(["a", "b"])
        assert capsys.readouterr().out == "\na\nb\n\n"


class TestShellCompletion:
    """Verify completion through the shell."""

    def test_partial_name(self, show_shell: Shell) -> None:
        """'sh' with two 'show' commands inserts 'show '."""
        assert show_shell.complete("sh").output == "show "

    def test_at_prefix(self, show_shell: Shell) -> None:
        """'show ' with two candidates offers both."""
        result = show_shell.complete("show ")
        assert result.alternatives == ["show interfaces", "show version"]

    def test_unique_command(self, shell: Shell) -> None:
        """A single 'show' command completes with a trailing space."""
        shell.add_command(make_command("show"))
        assert shell.complete("sh").output == "show "

    def test_no_match(self, show_shell: Shell) -> None:
        assert not show_shell.complete("xyz")

    def test_formatter_is_single_use(self, show_shell: Shell) -> None:
        """An override applies to exactly one completion event."""
        show_shell.set_completion_formatter(lambda items: [f"<{i}>" for i in items])
        assert show_shell.complete("show ").alternatives == ["<show interfaces>", "<show version>"]
        assert show_shell.complete("show ").alternatives == ["show interfaces", "show version"]

    def test_formatter_consumed_without_candidates(self, show_shell: Shell) -> None:
        """An event with no candidates still uses up the override."""
        show_shell.set_completion_formatter(lambda items: [f"<{i}>" for i in items])
        show_shell.complete("xyz")
        assert show_shell.complete("show ").alternatives == ["show interfaces", "show version"]

    def test_printer_is_single_use(self, show_shell: Shell,
                                   capsys: pytest.CaptureFixture[str]) -> None:
        """The printer override prints once, then the default returns."""
        show_shell.set_completion_printer(simple_completions_printer)
        show_shell.print_alternatives(["a"])
        show_shell.print_alternatives(["a"])
        assert capsys.readouterr().out == "\na\n\nPossible completions:\n- a\n"

    def test_subscriber_wins_and_keeps_printer(self, show_shell: Shell,
                                               capsys: pytest.CaptureFixture[str]) -> None:
        """With a subscriber, the printer override is neither used nor consumed."""
        seen: list[list[str]] = []
        show_shell.set_completion_printer(simple_completions_printer)
        show_shell.print_alternatives_hook.subscribe(seen.append)
        show_shell.print_alternatives(["a", "b"])
        assert seen == [["a", "b"]]
        assert capsys.readouterr().out == ""

        show_shell.print_alternatives_hook.unsubscribe()
        show_shell.print_alternatives(["a"])
        assert capsys.readouterr().out == "\na\n\n"


class TestOverrides:
    """Verify the override slots on their own."""

    def test_defaults_when_unset(self) -> None:
        overrides = CompletionOverrides()
        assert overrides.take_formatter() is default_completion_formatter
        assert overrides.take_printer() is default_completions_printer

    def test_concurrent_take_consumes_once(self) -> None:
        """Racing takers see the override exactly once."""
        def custom(items: list[str]) -> list[str]:
            return items

        overrides = CompletionOverrides()
        overrides.set_formatter(custom)
        taken: list[object] = []
        barrier = threading.Barrier(8)

        def worker() -> None:
            barrier.wait()
            taken.append(overrides.take_formatter())

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        assert taken.count(custom) == 1
        assert taken.count(default_completion_formatter) == 7
