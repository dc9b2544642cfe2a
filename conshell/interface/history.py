#!/usr/bin/env python3
# conshell/interface/history.py
from __future__ import annotations

"""
In-memory command history.

Lines are appended in order; a line equal to the most recent entry is not
stored again. Persisting history is left to the host.
"""

import threading
from typing import Iterable, Iterator


class ShellHistory:
    """Append-only list of executed input lines with consecutive dedup."""

    def __init__(self, entries: Iterable[str] = (), *, max_size: int = 0) -> None:
        if max_size < 0:
            raise ValueError("max_size must be >= 0")
        self.max_size = max_size
        self._lock = threading.Lock()
        self._entries: list[str] = []
        for entry in entries:
            self.add_unique(entry)

    def add_unique(self, line: str) -> bool:
        """Append `line` unless it repeats the latest entry. Returns True if stored."""
        with self._lock:
            if self._entries and self._entries[-1] == line:
                return False
            self._entries.append(line)
            if self.max_size and len(self._entries) > self.max_size:
                del self._entries[:len(self._entries) - self.max_size]
            return True

    @property
    def entries(self) -> list[str]:
        """Snapshot, oldest first."""
        with self._lock:
            return list(self._entries)

    @property
    def last(self) -> str | None:
        with self._lock:
            return self._entries[-1] if self._entries else None

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self.entries)

    def __getitem__(self, index: int) -> str:
        with self._lock:
            return self._entries[index]
