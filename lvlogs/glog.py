"""Process-wide logger and module-level functions that write through it."""

from __future__ import annotations

from typing import Any

from . import logger as _logger_module
from .config import (
    LogConf,
    LogConfigError,
    LogLevel,
    WriteStrategy,
    new_default_log_conf,
)
from .logger import LogsLogger

_GLOBAL = LogsLogger()
_GLOBAL.set_up(new_default_log_conf())


def global_logger() -> LogsLogger:
    """Return the process-wide logger that the module-level functions use."""
    return _GLOBAL


def set_up(conf: LogConf) -> None:
    """Configure the global logger from ``conf``; empty fields take defaults."""
    _GLOBAL.set_up(conf)


def setup_default() -> None:
    """Configure the global logger with the default configuration."""
    try:
        _GLOBAL.set_up(new_default_log_conf())
    except LogConfigError as err:
        raise LogConfigError(f"failed to set up default logger: {err}") from err


def default_log_conf() -> LogConf:
    """Return a fresh copy of the default configuration."""
    return new_default_log_conf()


def set_output(writer: Any) -> None:
    """Send global output to ``writer``, deriving the mode from it."""
    _GLOBAL.set_output(writer)


def set_encoding(encoding: str) -> None:
    _GLOBAL.set_encoding(encoding)


def set_max_size(max_size: int) -> None:
    _GLOBAL.set_max_size(max_size)


def set_max_age(max_age: int) -> None:
    _GLOBAL.set_max_age(max_age)


def set_max_backups(max_backups: int) -> None:
    _GLOBAL.set_max_backups(max_backups)


def set_log_level(level: int) -> None:
    """Set the minimum level written; it must lie between DEBUG and PANIC."""
    if level < LogLevel.DEBUG or level > LogLevel.PANIC:
        raise LogConfigError("invalid log level")
    _GLOBAL.set_log_level(level)


def set_flags(flags: int) -> None:
    _GLOBAL.set_flags(flags)


def set_log_write_strategy(strategy: WriteStrategy) -> None:
    _GLOBAL.set_log_write_strategy(strategy)


def set_prefix(prefix: str) -> None:
    """Put ``prefix`` after the level tag of every level."""
    _GLOBAL.set_prefix(prefix)


def set_level_prefix(level: int, prefix: str, keep_default: bool = True) -> None:
    """Set one level's prefix, after its tag unless ``keep_default`` is false."""
    _GLOBAL.set_level_prefix(level, prefix, keep_default)


def set_prefix_without_default_prefix(prefix: str) -> None:
    """Replace the prefix of every level, level tags included, with ``prefix``."""
    for level in LogLevel:
        _GLOBAL.set_level_prefix(level, prefix, False)


def debug(*args: Any) -> None:
    _GLOBAL.log(LogLevel.DEBUG, 3, "", *args)


def debugf(fmt: str, *args: Any) -> None:
    _GLOBAL.log(LogLevel.DEBUG, 3, fmt, *args)


def info(*args: Any) -> None:
    _GLOBAL.log(LogLevel.INFO, 3, "", *args)


def infof(fmt: str, *args: Any) -> None:
    _GLOBAL.log(LogLevel.INFO, 3, fmt, *args)


def warn(*args: Any) -> None:
    """Write a warning; the global logger files warnings at INFO level."""
    _GLOBAL.log(LogLevel.INFO, 3, "", *args)


def warnf(fmt: str, *args: Any) -> None:
    _GLOBAL.log(LogLevel.INFO, 3, fmt, *args)


def error(*args: Any) -> None:
    _GLOBAL.log(LogLevel.ERROR, 3, "", *args)


def errorf(fmt: str, *args: Any) -> None:
    _GLOBAL.log(LogLevel.ERROR, 3, fmt, *args)


def fatal(*args: Any) -> None:
    """Log at FATAL level and exit with status 1."""
    _GLOBAL.log(LogLevel.FATAL, 3, "", *args)
    raise SystemExit(1)


def fatalf(fmt: str, *args: Any) -> None:
    _GLOBAL.log(LogLevel.FATAL, 3, fmt, *args)
    raise SystemExit(1)


def panic(*args: Any) -> None:
    """Log at PANIC level and raise LogPanic."""
    from .config import LogPanic
    from .encoder import sprint

    _GLOBAL.log(LogLevel.PANIC, 3, "", *args)
    raise LogPanic(sprint(*args))


def panicf(fmt: str, *args: Any) -> None:
    from .config import LogPanic

    _GLOBAL.log(LogLevel.PANIC, 3, fmt, *args)
    try:
        text = fmt % args
    except (TypeError, ValueError):
        text = fmt
    raise LogPanic(text)


def close() -> None:
    """Write out every queued asynchronous record and stop the background writer."""
    _logger_module.close()