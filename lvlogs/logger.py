"""Levelled loggers with plain or JSON encoding, file rotation and async writes."""

from __future__ import annotations

import functools
import io
import os
import queue
import sys
import threading
from pathlib import Path
from typing import Any

from .config import (
    MODE_BOTH,
    MODE_CONSOLE,
    MODE_FILE,
    VALID_FLAGS,
    LogConf,
    LogConfigError,
    LogFlag,
    LogLevel,
    LogPanic,
    WriteStrategy,
    new_default_log_conf,
)
from .encoder import Encoder, PlainEncoder, encoder_for, sprint
from .linelog import LineLogger
from .writers import MultiWriter, RotatingFileWriter, is_std_stream

_LEVEL_TAGS = {
    LogLevel.DEBUG: "[DEBUG] ",
    LogLevel.INFO: "[INFO] ",
    LogLevel.WARN: "[WARN] ",
    LogLevel.ERROR: "[ERROR] ",
    LogLevel.FATAL: "[FATAL] ",
    LogLevel.PANIC: "[PANIC] ",
}
_ROOT_MARKER = "pyproject.toml"
_CHANNEL_SIZE = 1000
_TIME_FLAGS = int(LogFlag.DATE | LogFlag.TIME | LogFlag.MICROSECONDS)
_ROOT_STRIP = int(LogFlag.ROOTFILE | LogFlag.SHORTFILE | LogFlag.LONGFILE)


def find_project_root(start: str | os.PathLike[str] | None = None) -> str:
    """Return the nearest directory at or above ``start`` that holds a pyproject.toml."""
    directory = Path(start) if start is not None else Path(__file__).parent
    directory = directory.resolve()
    if directory.is_file():
        directory = directory.parent
    for candidate in (directory, *directory.parents):
        if (candidate / _ROOT_MARKER).exists():
            return str(candidate)
    raise FileNotFoundError(f"no {_ROOT_MARKER} found at or above {directory}")


@functools.lru_cache(maxsize=None)
def _project_root() -> str:
    try:
        return find_project_root()
    except FileNotFoundError:
        return ""


def _relative(path: str) -> str:
    root = _project_root()
    if not root or not path:
        return path
    try:
        rel = os.path.relpath(path, root)
    except ValueError:
        return path
    if rel.startswith(".."):
        return path
    return rel


def _location(skip: int) -> tuple[str, int]:
    """Frame ``skip`` counted from the function that calls this helper."""
    try:
        frame = sys._getframe(skip + 1)
    except ValueError:
        return "", 0
    return frame.f_code.co_filename, frame.f_lineno


def get_relative_path(skip: int = 1) -> tuple[str, int]:
    """Return the file (relative to the project root if inside it) and line of a caller.

    ``skip`` of 1 means the caller of this function.
    """
    path, line = _location(skip)
    return _relative(path), line


def get_log_prefix(skip: int = 1) -> str:
    """Return ``"<file> <line>: "`` for the caller ``skip`` frames up."""
    path, line = _location(skip)
    return f"{_relative(path)} {line}: "


def _sprintf(fmt: str, args: tuple[Any, ...]) -> str:
    try:
        return fmt % args
    except (TypeError, ValueError):
        if not args:
            return fmt
        return fmt + "%!(EXTRA " + ", ".join(sprint(arg) for arg in args) + ")"


class _AsyncWorker:
    """Background thread that writes queued records in order."""

    def __init__(self, size: int) -> None:
        self._queue: queue.Queue[tuple[LogsLogger, LogLevel, str] | None] = queue.Queue(
            maxsize=size
        )
        self._lock = threading.Lock()
        self._thread: threading.Thread | None = None

    def submit(self, logger: LogsLogger, level: LogLevel, msg: str) -> bool:
        with self._lock:
            if self._thread is None or not self._thread.is_alive():
                self._thread = threading.Thread(
                    target=self._run, name="lvlogs-writer", daemon=True
                )
                self._thread.start()
            try:
                self._queue.put_nowait((logger, level, msg))
            except queue.Full:
                return False
            return True

    def stop(self) -> None:
        with self._lock:
            thread, self._thread = self._thread, None
            if thread is None:
                return
            self._queue.put(None)
            thread.join()

    def _run(self) -> None:
        while True:
            item = self._queue.get()
            if item is None:
                return
            logger, level, msg = item
            try:
                logger.loggers[level].output(1, msg)
            except Exception as err:  # keep the worker alive for later records
                sys.stderr.write(f"async log write failed: {err}\n")


_WORKER = _AsyncWorker(_CHANNEL_SIZE)


def _file_name(writer: Any) -> str | None:
    if isinstance(writer, io.IOBase):
        name = getattr(writer, "name", None)
        if isinstance(name, str):
            return name
    return None


class LogsLogger:
    """A logger with one line logger per level, a shared encoder and configuration."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self.conf: LogConf = new_default_log_conf()
        self.encoder: Encoder = PlainEncoder()
        self.flags = int(LogFlag.COMMON)
        self.has_root_file_prefix = False
        self.write_strategy = WriteStrategy.SYNC
        self.output: Any = sys.stdout
        self.loggers: dict[LogLevel, LineLogger] = {}
        self._file_writer: RotatingFileWriter | None = None
        _project_root()
        self._init_loggers(sys.stdout)

    # -- wiring ---------------------------------------------------------------

    def _init_loggers(self, output: Any) -> None:
        flags = int(self.flags)
        if flags & LogFlag.ROOTFILE:
            self.has_root_file_prefix = True
            flags &= ~_ROOT_STRIP
        severe = output if output is sys.stderr else MultiWriter(sys.stderr, output)
        self.loggers = {
            level: LineLogger(
                severe if level >= LogLevel.FATAL else output, _LEVEL_TAGS[level], flags
            )
            for level in LogLevel
        }

    def _rotating_writer(self, path: str) -> RotatingFileWriter:
        conf = self.conf
        if self._file_writer is None:
            self._file_writer = RotatingFileWriter(
                path, conf.max_size, conf.max_backups, conf.keep_days, conf.compress
            )
        else:
            self._file_writer.configure(
                path, conf.max_size, conf.max_backups, conf.keep_days, conf.compress
            )
        return self._file_writer

    def _init_file_log(self, path: str) -> None:
        self.output = self._rotating_writer(path)
        self._init_loggers(self.output)

    def _init_multi_writer(self, path: str) -> None:
        self.output = MultiWriter(sys.stdout, self._rotating_writer(path))
        self._init_loggers(self.output)

    def _reinit_file_output(self) -> None:
        if self.conf.mode == MODE_FILE:
            self._init_file_log(self.conf.path)
        elif self.conf.mode == MODE_BOTH:
            self._init_multi_writer(self.conf.path)

    # -- configuration --------------------------------------------------------

    def set_up(self, conf: LogConf) -> None:
        """Apply ``conf``, filling empty fields with defaults, and rebuild the output."""
        with self._lock:
            conf = conf.with_defaults()
            self.conf = conf
            self.flags = int(LogFlag.COMMON)
            self.has_root_file_prefix = False
            self.write_strategy = WriteStrategy.SYNC
            if conf.mode in (MODE_FILE, MODE_BOTH) and not conf.path:
                raise LogConfigError("log path is required")
            self.encoder = encoder_for(conf.encoding)
            if conf.level < LogLevel.DEBUG:
                raise LogConfigError("invalid log level")
            _project_root()
            if conf.mode == MODE_FILE:
                self._init_file_log(conf.path)
            elif conf.mode == MODE_BOTH:
                self._init_multi_writer(conf.path)
            else:
                self._init_loggers(sys.stdout)

    def set_output(self, writer: Any) -> None:
        """Send output to ``writer`` and derive the mode from what it writes to."""
        with self._lock:
            if writer is None:
                raise LogConfigError("writer cannot be nil")
            self.output = writer
            mode = MODE_CONSOLE
            name = _file_name(writer)
            writers = getattr(writer, "writers", None)
            if name is not None:
                if name == os.devnull or is_std_stream(writer):
                    mode = MODE_CONSOLE
                else:
                    mode = MODE_FILE
                    self.conf.path = name
            elif callable(writers):
                has_file = has_console = False
                for inner in writers():
                    inner_name = _file_name(inner)
                    if inner_name is not None and not is_std_stream(inner):
                        has_file = True
                        self.conf.path = inner_name
                    elif is_std_stream(inner):
                        has_console = True
                if has_file and has_console:
                    mode = MODE_BOTH
                elif has_file:
                    mode = MODE_FILE
            self.conf.mode = mode
            self._init_loggers(self.output)

    def set_encoding(self, encoding: str) -> None:
        with self._lock:
            self.conf.encoding = encoding
            self.encoder = encoder_for(encoding)

    def set_max_size(self, max_size: int) -> None:
        with self._lock:
            self.conf.max_size = max_size
            self._reinit_file_output()

    def set_max_age(self, max_age: int) -> None:
        with self._lock:
            self.conf.keep_days = max_age
            self._reinit_file_output()

    def set_max_backups(self, max_backups: int) -> None:
        with self._lock:
            self.conf.max_backups = max_backups
            self._reinit_file_output()

    def set_log_level(self, level: int) -> None:
        with self._lock:
            if level < LogLevel.DEBUG:
                raise LogConfigError("invalid log level")
            self.conf.level = int(level)

    def set_flags(self, flags: int) -> None:
        """Set the header flags; ROOTFILE replaces the file:line flags."""
        with self._lock:
            flags = int(flags)
            if flags < 0 or flags & ~int(VALID_FLAGS):
                raise LogConfigError("invalid flags value")
            if not flags & _TIME_FLAGS:
                flags = int(LogFlag.DATE | LogFlag.TIME)
            if flags & LogFlag.ROOTFILE:
                self.has_root_file_prefix = True
                flags &= ~_ROOT_STRIP
            self.flags = flags
            for line_logger in self.loggers.values():
                line_logger.set_flags(flags)

    def set_log_write_strategy(self, strategy: WriteStrategy) -> None:
        with self._lock:
            self.write_strategy = WriteStrategy(strategy)

    def set_prefix(self, prefix: str) -> None:
        """Put ``prefix`` after the level tag of every level."""
        with self._lock:
            for level, line_logger in self.loggers.items():
                line_logger.set_prefix(_LEVEL_TAGS[level] + prefix)

    def set_level_prefix(self, level: int, prefix: str, keep_default: bool = True) -> None:
        """Set one level's prefix, after its level tag unless ``keep_default`` is false."""
        with self._lock:
            level = LogLevel(level)
            text = _LEVEL_TAGS[level] + prefix if keep_default else prefix
            self.loggers[level].set_prefix(text)

    # -- writing --------------------------------------------------------------

    def log(self, level: int, skip: int, fmt: str, *args: Any) -> None:
        """Write a record; ``skip`` counts frames up from this method to the reported caller."""
        if level < self.conf.level:
            return
        level = LogLevel(level)
        if fmt:
            msg = self.encoder.encode(_sprintf(fmt, args))
        else:
            msg = self.encoder.encode(*args)
        if self.has_root_file_prefix:
            msg = get_log_prefix(skip) + msg
        if self.write_strategy == WriteStrategy.SYNC or self.conf.mode == MODE_CONSOLE:
            self.loggers[level].output(skip, msg)
        elif not _WORKER.submit(self, level, msg):
            sys.stderr.write(f"log channel full, cannot write log asynchronously: {msg}\n")

    def debug(self, *args: Any) -> None:
        self.log(LogLevel.DEBUG, 3, "", *args)

    def debugf(self, fmt: str, *args: Any) -> None:
        self.log(LogLevel.DEBUG, 3, fmt, *args)

    def info(self, *args: Any) -> None:
        self.log(LogLevel.INFO, 3, "", *args)

    def infof(self, fmt: str, *args: Any) -> None:
        self.log(LogLevel.INFO, 3, fmt, *args)

    def warn(self, *args: Any) -> None:
        self.log(LogLevel.WARN, 3, "", *args)

    def warnf(self, fmt: str, *args: Any) -> None:
        self.log(LogLevel.WARN, 3, fmt, *args)

    def error(self, *args: Any) -> None:
        self.log(LogLevel.ERROR, 3, "", *args)

    def errorf(self, fmt: str, *args: Any) -> None:
        self.log(LogLevel.ERROR, 3, fmt, *args)

    def fatal(self, *args: Any) -> None:
        """Log at FATAL level and exit with status 1."""
        self.log(LogLevel.FATAL, 3, "", *args)
        raise SystemExit(1)

    def fatalf(self, fmt: str, *args: Any) -> None:
        self.log(LogLevel.FATAL, 3, fmt, *args)
        raise SystemExit(1)

    def panic(self, *args: Any) -> None:
        """Log at PANIC level and raise LogPanic."""
        self.log(LogLevel.PANIC, 3, "", *args)
        raise LogPanic(sprint(*args))

    def panicf(self, fmt: str, *args: Any) -> None:
        self.log(LogLevel.PANIC, 3, fmt, *args)
        raise LogPanic(_sprintf(fmt, args))


def new_default_logger() -> LogsLogger:
    """Return a console logger with the default configuration."""
    return LogsLogger()


def new_logger(conf: LogConf) -> LogsLogger:
    """Return a logger set up from ``conf``; raises LogConfigError if it is invalid."""
    logger = LogsLogger()
    logger.set_up(conf)
    return logger


def close() -> None:
    """Write out every queued asynchronous record and stop the background writer."""
    _WORKER.stop()