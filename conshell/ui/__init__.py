#!/usr/bin/env python3
# conshell/ui/__init__.py
from __future__ import annotations
# Re-export convenient top-level API
from .ansi import ANSI, clear_screen, colorize, enable_windows_vt, strip_ansi
from .console import PRINT_MUTEX, print_line, write_text
from .table import format_table
from .logging import ColorizingStreamHandler, PlainFormatter, init_logger

__all__ = [
    "ANSI",
    "clear_screen",
    "colorize",
    "enable_windows_vt",
    "strip_ansi",
    "PRINT_MUTEX",
    "print_line",
    "write_text",
    "format_table",
    "ColorizingStreamHandler",
    "PlainFormatter",
    "init_logger",
]
