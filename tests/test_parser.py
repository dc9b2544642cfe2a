"""Tests for the tokenizer and argument binding helpers."""

from __future__ import annotations

import pytest

from conshell.errors import CommandUsageError, TokenizationError
from conshell.interface.parser import bind_args, build_usage, tokenize


def scan(host, port: int = 80, *, timeout: float = 1.0):
    return host, port, timeout


class TestTokenize:
    """Verify quote-aware splitting."""

    def test_splits_on_whitespace(self) -> None:
        """Runs of whitespace separate tokens and are dropped."""
        assert tokenize("  show   version ") == ["show", "version"]

    def test_quoted_substrings_are_single_tokens(self) -> None:
        """Quotes group words and are removed from the token."""
        assert tokenize("echo \"hello world\" 'a b'") == ["echo", "hello world", "a b"]

    def test_empty_line(self) -> None:
        """An empty line yields no tokens."""
        assert tokenize("") == []

    def test_unbalanced_quotes_raise(self) -> None:
        """A missing closing quote is a TokenizationError."""
        with pytest.raises(TokenizationError) as excinfo:
            tokenize('say "unterminated')
        assert excinfo.value.line == 'say "unterminated'

    def test_tokenization_error_is_value_error(self) -> None:
        """Callers catching ValueError also see tokenization failures."""
        with pytest.raises(ValueError):
            tokenize("'")

    def test_input_is_not_mutated(self) -> None:
        """The raw line is left as it was."""
        line = "a 'b c'"
        tokenize(line)
        assert line == "a 'b c'"


class TestBindArgs:
    """Verify binding tokens to callback signatures."""

    def test_positional_and_keyword(self) -> None:
        """Annotations drive coercion for positional and key=value tokens."""
        args, kwargs = bind_args(scan, ["example.org", "8080", "timeout=2.5"])
        assert args == ("example.org", 8080)
        assert kwargs == {"timeout": 2.5}

    def test_defaults_fill_missing_optionals(self) -> None:
        """Omitted optional parameters take their defaults."""
        args, kwargs = bind_args(scan, ["example.org"])
        assert args == ("example.org", 80)
        assert kwargs == {}

    def test_missing_required_argument(self) -> None:
        """A missing required parameter is a usage error."""
        with pytest.raises(CommandUsageError):
            bind_args(scan, [])

    def test_too_many_arguments(self) -> None:
        """Surplus positional tokens are a usage error."""
        with pytest.raises(CommandUsageError):
            bind_args(scan, ["a", "1", "extra"])

    def test_bad_value_is_usage_error(self) -> None:
        """A token that cannot be coerced reports a usage error."""
        with pytest.raises(CommandUsageError):
            bind_args(scan, ["a", "not-a-port"])

    def test_var_positional_collects_rest(self) -> None:
        """*args receives every remaining token."""
        def echo(*words):
            return words

        assert bind_args(echo, ["a", "b", "c"]) == (("a", "b", "c"), {})

    def test_keyword_for_positional_parameter(self) -> None:
        """A positional-or-keyword parameter can be given as key=value."""
        def pair(a, b="x"):
            return a, b

        assert bind_args(pair, ["b=y", "1"]) == (("1",), {"b": "y"})

    def test_unknown_key_value_stays_positional(self) -> None:
        """Tokens containing '=' that match no parameter are plain values."""
        def one(expr):
            return expr

        assert bind_args(one, ["x=1"]) == (("x=1",), {})

    def test_skip_first_leaves_shell_parameter(self) -> None:
        """skip_first binds from the second parameter on."""
        def with_shell(shell, name):
            return name

        assert bind_args(with_shell, ["bob"], skip_first=True) == (("bob",), {})


class TestBuildUsage:
    """Verify usage rendering."""

    def test_usage_string(self) -> None:
        """Required, optional and keyword-only parameters render distinctly."""
        assert build_usage("scan", scan) == "scan <host> [port] [timeout=...]"

    def test_usage_without_parameters(self) -> None:
        """A parameterless command renders as its bare name."""
        assert build_usage("ls", lambda: None) == "ls"

    def test_usage_skips_shell(self) -> None:
        """The shell parameter is hidden from usage."""
        def greet(shell, name):
            return name

        assert build_usage("greet", greet, skip_first=True) == "greet <name>"
