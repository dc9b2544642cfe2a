#!/usr/bin/env python3
# conshell/interface/parser.py
from __future__ import annotations

"""
Tokenizer and argument helpers.

Responsibilities:
- Tokenize a command line into shell-like tokens (quote aware).
- Bind tokens to a callable signature with type coercion based on annotations.
- Render compact Usage strings from a function signature.
"""

import inspect
import shlex
from typing import Any, get_args, get_origin

from conshell.errors import CommandUsageError, TokenizationError


def tokenize(command_line: str) -> list[str]:
    """Split a raw command line into tokens using POSIX rules."""
    try:
        return shlex.split(command_line, posix=True)
    except ValueError as exc:
        # shlex reports "No closing quotation" / "No escaped character"
        raise TokenizationError(command_line, str(exc).lower()) from exc


def _coerce_value(text_value: str, annotation: Any) -> Any:
    """
    Convert a string to the annotated type when reasonable.

    Supported coercions:
        - str/Any/inspect._empty -> original text
        - bool -> accepts '1,true,yes,y,on' (case-insensitive)
        - int/float -> cast via constructor
    """
    if annotation in (inspect._empty, str, Any):
        return text_value
    # Annotations are strings under `from __future__ import annotations`
    if annotation in ("str", "Any"):
        return text_value
    if annotation in (bool, "bool"):
        return text_value.lower() in ("1", "true", "yes", "y", "on")
    if annotation in (int, "int"):
        return int(text_value)
    if annotation in (float, "float"):
        return float(text_value)
    return text_value


def _parameters(func: Any, skip_first: bool) -> list[inspect.Parameter]:
    parameters = list(inspect.signature(func).parameters.values())
    return parameters[1:] if skip_first else parameters


def bind_args(
    func: Any, tokens: list[str], *, skip_first: bool = False
) -> tuple[tuple[Any, ...], dict[str, Any]]:
    """
    Bind a flat token list to the signature of `func`.

    Supports:
        - positional tokens
        - key=value tokens for keyword-only or normal parameters
        - *args (VAR_POSITIONAL) with optional element annotation via tuple[T, ...]

    `skip_first` leaves the first parameter unbound (the shell context).
    Raises CommandUsageError on missing or surplus arguments.
    """
    parameters = _parameters(func, skip_first)
    known_names = {p.name for p in parameters}

    positional_tokens: list[str] = []
    kw_tokens_raw: dict[str, str] = {}
    for token in tokens:
        key, sep, value = token.partition("=")
        if sep and key in known_names:
            kw_tokens_raw[key] = value
        else:
            positional_tokens.append(token)

    bound_positional: list[Any] = []
    bound_keywords: dict[str, Any] = {}
    positional_index = 0
    var_positional_annotation: Any = None
    # Once a parameter arrives as key=value, later ones must be keywords too
    keyword_mode = False

    try:
        for parameter in parameters:
            if parameter.kind is parameter.VAR_POSITIONAL:
                var_positional_annotation = parameter.annotation
                continue

            if parameter.kind in (parameter.POSITIONAL_ONLY, parameter.POSITIONAL_OR_KEYWORD):
                if parameter.kind is parameter.POSITIONAL_OR_KEYWORD and parameter.name in kw_tokens_raw:
                    keyword_mode = True
                    bound_keywords[parameter.name] = _coerce_value(
                        kw_tokens_raw[parameter.name], parameter.annotation)
                    continue
                if positional_index < len(positional_tokens):
                    value = _coerce_value(
                        positional_tokens[positional_index], parameter.annotation)
                    positional_index += 1
                    if keyword_mode:
                        bound_keywords[parameter.name] = value
                    else:
                        bound_positional.append(value)
                elif parameter.default is not inspect._empty:
                    if not keyword_mode:
                        bound_positional.append(parameter.default)
                else:
                    raise CommandUsageError(
                        f"Missing required argument: {parameter.name}")
            elif parameter.kind is parameter.KEYWORD_ONLY:
                if parameter.name in kw_tokens_raw:
                    bound_keywords[parameter.name] = _coerce_value(
                        kw_tokens_raw[parameter.name], parameter.annotation)
                elif parameter.default is inspect._empty:
                    raise CommandUsageError(
                        f"Missing required keyword-only argument: {parameter.name}")

        # Pack remaining positionals into *args
        if var_positional_annotation is not None:
            remaining = positional_tokens[positional_index:]
            element_annotation: Any = str
            if get_origin(var_positional_annotation) is tuple and get_args(var_positional_annotation):
                element_annotation = get_args(var_positional_annotation)[0]
            elif var_positional_annotation is not inspect._empty:
                element_annotation = var_positional_annotation
            bound_positional.extend(
                _coerce_value(item, element_annotation) for item in remaining)
        elif positional_index < len(positional_tokens):
            raise CommandUsageError("Too many positional arguments.")
    except ValueError as exc:
        raise CommandUsageError(f"Invalid argument value: {exc}") from exc

    return tuple(bound_positional), bound_keywords


def build_usage(command_name: str, func: Any, *, skip_first: bool = False) -> str:
    """
    Render a compact usage string based on `func` signature.

    Examples:
        'scan <host> [port] [timeout=...] [args...]'
    """
    usage_parts: list[str] = []

    for parameter in _parameters(func, skip_first):
        if parameter.kind is parameter.VAR_POSITIONAL:
            usage_parts.append("[args...]")
            continue
        if parameter.kind is parameter.VAR_KEYWORD:
            continue

        token = f"<{parameter.name}>" if parameter.default is inspect._empty else f"[{parameter.name}]"
        if parameter.kind is parameter.KEYWORD_ONLY:
            token = f"[{parameter.name}=...]"
        usage_parts.append(token)

    return f"{command_name} " + " ".join(usage_parts) if usage_parts else command_name
