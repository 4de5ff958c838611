"""Destinations for log output: a size-rotating file and a fan-out writer."""

from __future__ import annotations

import gzip
import io
import shutil
import sys
import threading
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, BinaryIO

from .config import LogConfigError

_MEGABYTE = 1024 * 1024
_DEFAULT_MAX_SIZE_MB = 100
_STAMP_FORMAT = "%Y-%m-%dT%H-%M-%S"
_GZ = ".gz"


def _format_stamp(when: datetime) -> str:
    return when.strftime(_STAMP_FORMAT) + f".{when.microsecond // 1000:03d}"


def _parse_stamp(text: str) -> datetime:
    return datetime.strptime(text, _STAMP_FORMAT + ".%f").replace(tzinfo=timezone.utc)


class RotatingFileWriter:
    """A file writer that rotates by size and prunes old backups.

    ``max_size`` is in megabytes (0 means 100), ``max_backups`` is the number of
    old files kept (0 keeps all) and ``max_age`` the days they are kept (0 keeps
    them forever). Rotated files are named ``<name>-<UTC timestamp><ext>``.
    """

    def __init__(
        self,
        filename: str,
        max_size: int = 0,
        max_backups: int = 0,
        max_age: int = 0,
        compress: bool = False,
    ) -> None:
        self._lock = threading.Lock()
        self._file: BinaryIO | None = None
        self._size = 0
        self.filename = ""
        self.configure(filename, max_size, max_backups, max_age, compress)

    def configure(
        self,
        filename: str,
        max_size: int,
        max_backups: int,
        max_age: int,
        compress: bool,
    ) -> None:
        """Change the target file and the rotation settings."""
        if not filename:
            raise LogConfigError("filename cannot be empty")
        with self._lock:
            if filename != self.filename:
                self._close_file()
            self.filename = str(filename)
            self.max_size = max_size
            self.max_backups = max_backups
            self.max_age = max_age
            self.compress = compress

    def write(self, data: str | bytes) -> int:
        """Append ``data`` to the file, rotating first if it would not fit."""
        payload = data.encode("utf-8") if isinstance(data, str) else bytes(data)
        with self._lock:
            limit = self._max_bytes()
            if len(payload) > limit:
                raise ValueError(
                    f"write length {len(payload)} exceeds maximum file size {limit}"
                )
            if self._file is None:
                self._open_existing_or_new(len(payload))
            if self._size + len(payload) > limit:
                self._rotate()
            assert self._file is not None
            written = self._file.write(payload) or 0
            self._size += written
            return written

    def rotate(self) -> None:
        """Move the current file aside as a backup and start a new one."""
        with self._lock:
            self._rotate()

    def close(self) -> None:
        """Close the current file; the next write reopens it."""
        with self._lock:
            self._close_file()

    def __enter__(self) -> RotatingFileWriter:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    @property
    def _path(self) -> Path:
        return Path(self.filename)

    def _max_bytes(self) -> int:
        size = self.max_size if self.max_size > 0 else _DEFAULT_MAX_SIZE_MB
        return size * _MEGABYTE

    def _close_file(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None
        self._size = 0

    def _open_existing_or_new(self, write_len: int) -> None:
        path = self._path
        if not path.exists():
            self._open_new()
            return
        size = path.stat().st_size
        if size + write_len >= self._max_bytes():
            self._rotate()
            return
        self._file = open(path, "ab", buffering=0)
        self._size = size

    def _open_new(self) -> None:
        path = self._path
        path.parent.mkdir(parents=True, exist_ok=True)
        if path.exists():
            path.rename(self._backup_path())
        self._file = open(path, "wb", buffering=0)
        self._size = 0

    def _rotate(self) -> None:
        self._close_file()
        self._open_new()
        self._mill()

    def _name_parts(self) -> tuple[str, str]:
        path = self._path
        ext = path.suffix
        stem = path.name[: len(path.name) - len(ext)]
        return stem, ext

    def _backup_path(self) -> Path:
        stem, ext = self._name_parts()
        when = datetime.now(timezone.utc)
        while True:
            candidate = self._path.with_name(f"{stem}-{_format_stamp(when)}{ext}")
            gz_candidate = candidate.with_name(candidate.name + _GZ)
            if not candidate.exists() and not gz_candidate.exists():
                return candidate
            when += timedelta(milliseconds=1)

    def _backups(self) -> list[tuple[datetime, Path, bool]]:
        stem, ext = self._name_parts()
        head = stem + "-"
        directory = self._path.parent
        if not directory.is_dir():
            return []
        found = []
        for entry in directory.iterdir():
            name = entry.name
            if not entry.is_file() or not name.startswith(head):
                continue
            rest = name[len(head) :]
            if rest.endswith(ext + _GZ):
                stamp, compressed = rest[: len(rest) - len(ext + _GZ)], True
            elif rest.endswith(ext):
                stamp, compressed = rest[: len(rest) - len(ext)], False
            else:
                continue
            try:
                found.append((_parse_stamp(stamp), entry, compressed))
            except ValueError:
                continue
        found.sort(key=lambda item: item[0], reverse=True)
        return found

    def _mill(self) -> None:
        backups = self._backups()
        remove: list[Path] = []
        if self.max_backups > 0:
            kept_stamps: set[datetime] = set()
            survivors = []
            for item in backups:
                stamp = item[0]
                if stamp not in kept_stamps and len(kept_stamps) >= self.max_backups:
                    remove.append(item[1])
                    continue
                kept_stamps.add(stamp)
                survivors.append(item)
            backups = survivors
        if self.max_age > 0:
            cutoff = datetime.now(timezone.utc) - timedelta(days=self.max_age)
            survivors = []
            for item in backups:
                if item[0] < cutoff:
                    remove.append(item[1])
                else:
                    survivors.append(item)
            backups = survivors
        for path in remove:
            path.unlink(missing_ok=True)
        if self.compress:
            for _, path, compressed in backups:
                if not compressed:
                    _gzip_file(path)


def _gzip_file(path: Path) -> None:
    target = path.with_name(path.name + _GZ)
    with open(path, "rb") as src, gzip.open(target, "wb") as dst:
        shutil.copyfileobj(src, dst)
    path.unlink()


def _write_to(target: Any, data: str | bytes) -> None:
    if isinstance(target, io.TextIOBase):
        if isinstance(data, (bytes, bytearray)):
            data = bytes(data).decode("utf-8", errors="replace")
        target.write(data)
    elif isinstance(target, (io.RawIOBase, io.BufferedIOBase)):
        target.write(data.encode("utf-8") if isinstance(data, str) else data)
    else:
        target.write(data)
    flush = getattr(target, "flush", None)
    if callable(flush):
        flush()


class MultiWriter:
    """Writes each piece of data to every one of its writers in turn."""

    def __init__(self, *args: Any) -> None:
        flat: list[Any] = []
        for writer in args:
            if isinstance(writer, MultiWriter):
                flat.extend(writer.writers())
            else:
                flat.append(writer)
        self._writers = tuple(flat)

    def write(self, data: str | bytes) -> int:
        for writer in self._writers:
            _write_to(writer, data)
        return len(data)

    def writers(self) -> tuple[Any, ...]:
        return self._writers


class _Discard:
    """A writer that drops everything written to it."""

    def write(self, data: str | bytes) -> int:
        return len(data)


DISCARD = _Discard()


def is_std_stream(stream: Any) -> bool:
    """Tell whether ``stream`` is standard output, standard error or the discard writer."""
    if stream is DISCARD:
        return True
    candidates = (sys.stdout, sys.stderr, sys.__stdout__, sys.__stderr__)
    return any(stream is candidate for candidate in candidates if candidate is not None)