#!/usr/bin/env python3
# conshell/ui/ansi.py
from __future__ import annotations

import os
import re
import sys
from typing import Optional

# Foreground colors and styles used by the shell's default output
ANSI = {
    "reset": "\x1b[0m",
    "bold": "\x1b[1m",
    "dim": "\x1b[2m",
    "red": "\x1b[31m",
    "green": "\x1b[32m",
    "yellow": "\x1b[33m",
    "blue": "\x1b[34m",
    "magenta": "\x1b[35m",
    "cyan": "\x1b[36m",
    "bright_black": "\x1b[90m",
}

ANSI_REGEX = re.compile(r"\x1b\[[0-9;]*[A-Za-z]")

_vt_enabled_cache: Optional[bool] = None  # cached across calls


def strip_ansi(text: str) -> str:
    """Remove ANSI escape sequences from text."""
    return ANSI_REGEX.sub("", text)


def enable_windows_vt() -> bool:
    """
    Report whether ANSI escapes should render on the current console.

    POSIX terminals always qualify. On Windows only terminals that advertise
    VT support do (Windows Terminal, ANSICON, ConEmu, xterm-like TERM).
    """
    global _vt_enabled_cache
    if _vt_enabled_cache is not None:
        return _vt_enabled_cache

    if os.name != "nt":
        _vt_enabled_cache = True
    else:
        _vt_enabled_cache = bool(
            os.environ.get("WT_SESSION")
            or os.environ.get("ANSICON")
            or os.environ.get("ConEmuANSI") == "ON"
            or os.environ.get("TERM", "").startswith(("xterm", "vt100"))
        )
    return _vt_enabled_cache


def clear_screen() -> None:
    """Clear the terminal screen (ANSI erase + home, `cls` on legacy Windows consoles)."""
    if os.name == "nt" and not enable_windows_vt():
        os.system("cls")
        return
    sys.stdout.write("\x1b[2J\x1b[H")
    sys.stdout.flush()


def colorize(text: str, *styles: str) -> str:
    """
    Wrap text with one or more SGR styles/keys from ANSI (e.g., 'red', 'bold').
    Always auto-resets at the end.
    """
    seq = "".join(ANSI[s] for s in styles if s in ANSI)
    return f"{seq}{text}{ANSI['reset']}" if seq else text
