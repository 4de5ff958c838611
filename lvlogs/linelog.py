"""A minimal line logger: a prefix, an optional header and one message per line."""

from __future__ import annotations

import os
import sys
import threading
from datetime import datetime, timezone
from typing import Any

from .config import LogConfigError, LogFlag
from .writers import MultiWriter

_TIME_FLAGS = LogFlag.DATE | LogFlag.TIME | LogFlag.MICROSECONDS
_FILE_FLAGS = LogFlag.SHORTFILE | LogFlag.LONGFILE


def _caller(depth: int) -> tuple[str, int]:
    try:
        frame = sys._getframe(depth + 1)
    except ValueError:
        return "???", 0
    return frame.f_code.co_filename, frame.f_lineno


class LineLogger:
    """Writes single log lines to a writer, with a prefix and a flag-driven header."""

    def __init__(self, writer: Any, prefix: str = "", flags: int = LogFlag.STD_FLAGS) -> None:
        if writer is None:
            raise LogConfigError("writer cannot be nil")
        self.writer = writer
        self.prefix = prefix
        self.flags = int(flags)
        self._lock = threading.Lock()

    def set_flags(self, flags: int) -> None:
        with self._lock:
            self.flags = int(flags)

    def set_prefix(self, prefix: str) -> None:
        with self._lock:
            self.prefix = prefix

    def format_line(
        self,
        msg: str,
        when: datetime | None = None,
        location: tuple[str, int] | None = None,
    ) -> str:
        """Build the full line for ``msg`` as it would be written."""
        flags = self.flags
        parts: list[str] = []
        if not flags & LogFlag.MSGPREFIX:
            parts.append(self.prefix)
        if flags & _TIME_FLAGS:
            if when is None:
                when = datetime.now()
            if flags & LogFlag.UTC:
                when = when.astimezone(timezone.utc)
            if flags & LogFlag.DATE:
                parts.append(f"{when.year:04d}/{when.month:02d}/{when.day:02d} ")
            if flags & (LogFlag.TIME | LogFlag.MICROSECONDS):
                clock = f"{when.hour:02d}:{when.minute:02d}:{when.second:02d}"
                if flags & LogFlag.MICROSECONDS:
                    clock += f".{when.microsecond:06d}"
                parts.append(clock + " ")
        if flags & _FILE_FLAGS:
            file, line = location if location is not None else ("???", 0)
            if flags & LogFlag.SHORTFILE:
                file = os.path.basename(file)
            parts.append(f"{file}:{line}: ")
        if flags & LogFlag.MSGPREFIX:
            parts.append(self.prefix)
        parts.append(msg)
        if not msg.endswith("\n"):
            parts.append("\n")
        return "".join(parts)

    def output(self, skip: int, msg: str) -> str:
        """Write ``msg``; ``skip`` of 1 reports the caller of this method. Returns the line."""
        now = datetime.now()
        location = _caller(skip) if self.flags & _FILE_FLAGS else None
        with self._lock:
            line = self.format_line(msg, now, location)
            MultiWriter(self.writer).write(line)
        return line