#!/usr/bin/env python3
# conshell/ui/console.py
from __future__ import annotations

import sys
import threading
from typing import TextIO

# Single shared print mutex for all shell output (hooks, printers, logging).
PRINT_MUTEX = threading.Lock()


def print_line(text: str = "", *, file: TextIO | None = None, flush: bool = False) -> None:
    """Thread-safe single-line print."""
    stream = file if file is not None else sys.stdout
    with PRINT_MUTEX:
        stream.write(f"{text}\n")
        if flush:
            stream.flush()


def write_text(text: str, *, file: TextIO | None = None) -> None:
    """Thread-safe write without a trailing newline (prompts)."""
    stream = file if file is not None else sys.stdout
    with PRINT_MUTEX:
        stream.write(text)
        stream.flush()
