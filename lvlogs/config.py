"""Log levels, output flags, write strategies and the logging configuration."""

from __future__ import annotations

import dataclasses
import enum
from dataclasses import dataclass


class LogLevel(enum.IntEnum):
    """Severity of a log record, lowest first."""

    DEBUG = 0
    INFO = 1
    WARN = 2
    ERROR = 3
    FATAL = 4
    PANIC = 5


class LogFlag(enum.IntFlag):
    """Bits that control the header written in front of each log line."""

    DATE = 1
    TIME = 2
    MICROSECONDS = 4
    LONGFILE = 8
    SHORTFILE = 16
    UTC = 32
    MSGPREFIX = 64
    ROOTFILE = 128
    STD_FLAGS = DATE | TIME
    COMMON = MSGPREFIX | DATE | TIME | ROOTFILE


VALID_FLAGS = (
    LogFlag.DATE
    | LogFlag.TIME
    | LogFlag.MICROSECONDS
    | LogFlag.LONGFILE
    | LogFlag.SHORTFILE
    | LogFlag.UTC
    | LogFlag.MSGPREFIX
    | LogFlag.ROOTFILE
)


class WriteStrategy(enum.IntEnum):
    """Whether records are written at once or handed to a background worker."""

    SYNC = 0
    ASYNC = 1


MODE_CONSOLE = "console"
MODE_FILE = "file"
MODE_BOTH = "both"

ENCODING_PLAIN = "plain"
ENCODING_JSON = "json"


class LogConfigError(ValueError):
    """Raised for an invalid logging configuration or argument."""


class LogPanic(RuntimeError):
    """Raised after a record is logged at PANIC level."""


@dataclass
class LogConf:
    """Logging configuration; empty or zero fields mean "use the default"."""

    mode: str = ""
    level: int = 0
    encoding: str = ""
    path: str = ""
    max_size: int = 0
    max_backups: int = 0
    keep_days: int = 0
    compress: bool = False

    def with_defaults(self) -> LogConf:
        """Return a copy in which every empty or zero field takes the default value."""
        default = _DEFAULT_LOG_CONF
        return LogConf(
            mode=self.mode or default.mode,
            level=self.level or default.level,
            encoding=self.encoding or default.encoding,
            path=self.path or default.path,
            max_size=self.max_size or default.max_size,
            max_backups=self.max_backups or default.max_backups,
            keep_days=self.keep_days or default.keep_days,
            compress=self.compress or default.compress,
        )


_DEFAULT_LOG_CONF = LogConf(
    mode=MODE_CONSOLE,
    level=int(LogLevel.INFO),
    encoding=ENCODING_PLAIN,
    path="",
    max_size=1,
    max_backups=3,
    keep_days=1,
    compress=False,
)


def new_default_log_conf() -> LogConf:
    """Return a fresh copy of the default configuration."""
    return dataclasses.replace(_DEFAULT_LOG_CONF)


def new_log_conf_with_params(
    mode: str,
    level: int,
    encoding: str,
    path: str,
    max_size: int,
    max_backups: int,
    keep_days: int,
    compress: bool,
) -> LogConf:
    """Build a configuration from explicit values, taken as given."""
    return LogConf(
        mode=mode,
        level=int(level),
        encoding=encoding,
        path=path,
        max_size=max_size,
        max_backups=max_backups,
        keep_days=keep_days,
        compress=compress,
    )


def new_log_conf_with_defaults(custom: LogConf) -> LogConf:
    """Overlay the non-empty fields of ``custom`` on the default configuration."""
    return custom.with_defaults()