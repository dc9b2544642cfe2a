"""Tests for the preprocessing pipeline and the bundled stages."""

from __future__ import annotations

import pytest

from conshell import AliasStage, MacroStage, Shell
from conshell.errors import CommandNotFoundError, StageFailure
from conshell.interface.preprocess import PreprocessorPipeline
from tests.conftest import make_command


class RecordingStage:
    """Appends its label to a shared log and to the token list."""

    def __init__(self, label: str, priority: int, log: list[str]) -> None:
        self.label = label
        self.priority = priority
        self.log = log

    def preprocess(self, shell, tokens: list[str]) -> list[str]:
        self.log.append(f"pre:{self.label}")
        return [*tokens, self.label]

    def remove_syntax(self, text: str) -> str:
        self.log.append(f"strip:{self.label}")
        return text


class FailingStage:
    """Always raises from both paths."""

    priority = 0

    def preprocess(self, shell, tokens: list[str]) -> list[str]:
        raise StageFailure("preprocess exploded")

    def remove_syntax(self, text: str) -> str:
        raise StageFailure("remove_syntax exploded")


class TestPipelineOrder:
    """Verify ordering by priority and registration."""

    def test_ascending_priority(self) -> None:
        """Stages registered as 10, 5, 20 run as 5, 10, 20."""
        log: list[str] = []
        pipeline = PreprocessorPipeline()
        for label, priority in (("ten", 10), ("five", 5), ("twenty", 20)):
            pipeline.add(RecordingStage(label, priority, log))
        assert pipeline.process(None, ["cmd"]) == ["cmd", "five", "ten", "twenty"]
        assert log == ["pre:five", "pre:ten", "pre:twenty"]

    @pytest.mark.parametrize("first, second", [("a", "b"), ("b", "a")])
    def test_equal_priority_keeps_registration_order(self, first: str, second: str) -> None:
        """Ties run in the order the stages were added."""
        log: list[str] = []
        pipeline = PreprocessorPipeline()
        pipeline.add(RecordingStage(first, 1, log))
        pipeline.add(RecordingStage(second, 1, log))
        assert pipeline.process(None, []) == [first, second]

    def test_remove_syntax_uses_same_order(self) -> None:
        """The completion path visits stages in execution order."""
        log: list[str] = []
        pipeline = PreprocessorPipeline()
        pipeline.add(RecordingStage("late", 20, log))
        pipeline.add(RecordingStage("early", 1, log))
        assert pipeline.remove_syntax("text") == "text"
        assert log == ["strip:early", "strip:late"]

    def test_stages_snapshot(self) -> None:
        """The stages property reflects application order and is a copy."""
        pipeline = PreprocessorPipeline()
        stage = AliasStage()
        pipeline.add(stage)
        snapshot = pipeline.stages
        snapshot.clear()
        assert pipeline.stages == [stage]
        assert len(pipeline) == 1


class TestStageFailures:
    """Verify stage errors reach the caller unchanged."""

    def test_execute_propagates(self, shell: Shell) -> None:
        """A failing preprocess aborts execution with its own error."""
        shell.add_command(make_command("ls"))
        shell.add_preprocessor(FailingStage())
        with pytest.raises(StageFailure, match="preprocess exploded"):
            shell.execute("ls")

    def test_complete_propagates(self, shell: Shell) -> None:
        """A failing remove_syntax aborts completion with its own error."""
        shell.add_preprocessor(FailingStage())
        with pytest.raises(StageFailure, match="remove_syntax exploded"):
            shell.complete("l")


class TestAliasStage:
    """Verify leading alias expansion."""

    def test_expands_first_token(self, shell: Shell) -> None:
        """The alias is replaced by its tokens; the rest is kept."""
        shell.add_command(make_command("list", lambda *args: args))
        shell.add_preprocessor(AliasStage({"ll": "list --long"}))
        assert shell.execute("ll /tmp") == ("--long", "/tmp")

    def test_only_first_token(self) -> None:
        """Aliases later in the line are left alone."""
        stage = AliasStage({"ll": "list --long"})
        assert stage.preprocess(None, ["echo", "ll"]) == ["echo", "ll"]


class TestMacroStage:
    """Verify sigil macros on both paths."""

    def test_expands_known_macro(self) -> None:
        """@name tokens become the macro's tokens."""
        stage = MacroStage({"ver": "show version"})
        assert stage.preprocess(None, ["@ver", "detail"]) == ["show", "version", "detail"]

    def test_unknown_macro_untouched(self) -> None:
        """Unknown names keep their sigil."""
        stage = MacroStage({"ver": "show version"})
        assert stage.preprocess(None, ["@nope"]) == ["@nope"]

    def test_remove_syntax_strips_leading_sigil(self) -> None:
        """Completion sees the buffer without the sigil."""
        stage = MacroStage()
        assert stage.remove_syntax("@sh") == "sh"
        assert stage.remove_syntax("  @sh") == "sh"
        assert stage.remove_syntax("sh") == "sh"

    def test_empty_sigil_rejected(self) -> None:
        """A sigil must be at least one character."""
        with pytest.raises(ValueError):
            MacroStage(sigil="")

    def test_sigil_buffer_completes_to_command(self, show_shell: Shell) -> None:
        """'@sh' with both 'show' commands completes to 'show '."""
        show_shell.add_preprocessor(MacroStage())
        result = show_shell.complete("@sh")
        assert result.output == "show "
        assert result.alternatives == []

    def test_macro_executes(self, show_shell: Shell) -> None:
        """A line built from a macro resolves like the expanded line."""
        show_shell.add_preprocessor(MacroStage({"ver": "show version"}))
        assert show_shell.execute("@ver") == "show version"

    def test_unknown_macro_not_found(self, show_shell: Shell) -> None:
        """An unexpanded macro token resolves to nothing."""
        show_shell.add_preprocessor(MacroStage())
        with pytest.raises(CommandNotFoundError):
            show_shell.execute("@nothing")
