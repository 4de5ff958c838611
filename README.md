# lvlogs

lvlogs is a small levelled logger with six levels: `DEBUG`, `INFO`, `WARN`,
`ERROR`, `FATAL` and `PANIC`. It has these features:

- Messages are encoded as plain text or as a JSON array.
- Output goes to the console, to a file that is rotated by size, or to both.
- Records can be written at once or handed to a background thread.

The package needs nothing outside the standard library.

## Installation

```
pip install .
```

For the tests:

```
pip install .[test]
pytest
```

## Modules

| module | contents |
|---|---|
| `lvlogs.config` | `LogLevel`, `LogFlag`, `WriteStrategy`, `LogConf`, `LogConfigError`, `LogPanic` and the configuration helpers |
| `lvlogs.encoder` | `Encoder`, `PlainEncoder`, `JsonEncoder`, `sprint`, `encoder_for` |
| `lvlogs.writers` | `RotatingFileWriter`, `MultiWriter`, `is_std_stream` |
| `lvlogs.linelog` | `LineLogger`, which writes one line with a prefix and a header |
| `lvlogs.logger` | `LogsLogger`, `new_logger`, `new_default_logger`, `close` and caller-location helpers |
| `lvlogs.glog` | a process-wide logger and module-level functions that write through it |
| `lvlogs.demo` | the `lvlogs-demo` command |

## The global logger

Importing `lvlogs.glog` creates a global logger with the default
configuration. It writes to standard output, uses plain encoding and writes
records at `INFO` level and above.

```python
from lvlogs import glog
from lvlogs.config import LogLevel

glog.info("service started")
glog.debug("hidden at the default level")
glog.set_log_level(LogLevel.DEBUG)
glog.debugf("now visible: %s", 42)
glog.error("something went wrong")
glog.close()
```

Notes on the global functions:

- **Format strings.** The `*f` functions use Python `%` formatting. If the
  arguments do not fit the format, the extra arguments are appended as
  `%!(EXTRA ...)`.
- **Warnings.** `glog.warn` and `glog.warnf` write their records at `INFO`
  level.
- **Fatal records.** `glog.fatal` and `glog.fatalf` write the record and then
  raise `SystemExit(1)`.
- **Panic records.** `glog.panic` and `glog.panicf` write the record and then
  raise `LogPanic`.
- **Level range.** `glog.set_log_level` accepts only levels from `DEBUG` to
  `PANIC`. Any other value raises `LogConfigError`.

The module also has the following functions:

- `set_up`, `setup_default` and `default_log_conf`;
- `set_output` and `set_encoding`;
- `set_max_size`, `set_max_age` and `set_max_backups`;
- `set_flags` and `set_log_write_strategy`;
- `set_prefix`, `set_level_prefix` and `set_prefix_without_default_prefix`;
- `global_logger`, which returns the underlying `LogsLogger`.

## Separate loggers

```python
from lvlogs.config import LogConf
from lvlogs.logger import new_default_logger, new_logger

console = new_default_logger()
console.info("ok")

conf = LogConf(
    mode="both",
    encoding="json",
    path="logs/app.log",
    max_size=10,
    max_backups=10,
    keep_days=10,
    compress=True,
)
logger = new_logger(conf)
logger.infof("this is %s of %s", "one", "two")   # ["this is one of two"]
logger.warn("disk at", 91, "%")
```

A `LogsLogger` has these methods:

- `debug`, `info`, `warn`, `error`, `fatal` and `panic`;
- the format variants of each, ending in `f`;
- the same setters as `glog`, and `set_up(conf)`.

A logger's `warn` writes at `WARN` level.

`new_logger` and `set_up` raise `LogConfigError` in these cases:

- the mode is `file` or `both` and there is no path;
- the encoding is neither `plain` nor `json`;
- the level is below `DEBUG`.

Records at `FATAL` and `PANIC` level go to standard error as well as to the
logger's normal output.

## Configuration

`LogConf` fields:

| field | meaning | default |
|---|---|---|
| `mode` | `console`, `file` or `both` | `console` |
| `level` | lowest level written | `INFO` |
| `encoding` | `plain` or `json` | `plain` |
| `path` | log file path (file/both modes) | empty |
| `max_size` | file size in megabytes before rotation | 1 |
| `max_backups` | rotated files to keep | 3 |
| `keep_days` | days to keep rotated files | 1 |
| `compress` | gzip rotated files | `False` |

Fields that are empty or zero take the default value. `DEBUG` has the value
0, so `level=LogLevel.DEBUG` in a `LogConf` becomes `INFO`. To log debug
records, call `set_log_level(LogLevel.DEBUG)` after setup.

Helpers in `lvlogs.config`:

- `new_default_log_conf()` returns a copy of the defaults.
- `new_log_conf_with_params(...)` takes the values exactly as given.
- `new_log_conf_with_defaults(custom)` returns the same result as
  `custom.with_defaults()`.

## Output and rotation

`set_output(writer)` sends output to any object that has a `write` method. It
also sets the mode from the writer:

| writer | mode | path |
|---|---|---|
| an open file with a name | `file` | set from the file |
| standard output, standard error or `os.devnull` | `console` | unchanged |
| a `MultiWriter` holding a named file and a standard stream | `both` | set from the file |
| anything else | `console` | unchanged |

`RotatingFileWriter(filename, max_size, max_backups, max_age, compress)`
appends to a file. A `max_size` of 0 means 100 MB. Before a write that would
pass the limit, it does the following:

1. It moves the current file aside as `<name>-<UTC timestamp><ext>`.
2. It removes backups beyond `max_backups` and backups older than `max_age`
   days.
3. If `compress` is set, it gzips the remaining backups.

A single write larger than the limit raises `ValueError`.

## Line format and flags

`set_flags` takes a combination of `LogFlag` values:

| flag | effect |
|---|---|
| `DATE` | writes the date as `YYYY/MM/DD` |
| `TIME` | writes the time as `HH:MM:SS` |
| `MICROSECONDS` | adds microseconds to the time |
| `UTC` | writes the time in UTC |
| `LONGFILE` | adds the caller's full file path and line |
| `SHORTFILE` | adds the caller's file name and line |
| `MSGPREFIX` | moves the prefix from the start of the line to just before the message |
| `ROOTFILE` | puts `<path> <line>: ` in front of the message |

The path written for `ROOTFILE` is relative to the nearest directory above
the package that holds a `pyproject.toml`. `ROOTFILE` turns off `LONGFILE`
and `SHORTFILE`.

`set_flags` checks the flags as follows:

- Unknown bits raise `LogConfigError`.
- If no date or time flag is given, `DATE | TIME` is used.
- The default is `LogFlag.COMMON`, which is `MSGPREFIX | DATE | TIME |
  ROOTFILE`.

The prefix functions work like this:

- `set_prefix(p)` sets every level's prefix to its tag followed by `p`, for
  example `[INFO] p`.
- `set_level_prefix(level, p, keep_default=False)` replaces one level's prefix
  entirely.

## Asynchronous writes

```python
from lvlogs.config import WriteStrategy

logger.set_log_write_strategy(WriteStrategy.ASYNC)
```

In `file` and `both` modes, this hands records to one background thread that
is shared by all loggers. The thread's queue holds up to 1000 records. When
the queue is full, the record is reported on standard error instead.

In `console` mode, records are always written straight away.

Call `lvlogs.logger.close()` or `glog.close()` before the program ends. This
writes out the queued records and stops the thread.

## Demo

```
lvlogs-demo [--log-path PATH]
```

The demo runs through the following:

1. the global logger;
2. a default logger;
3. a JSON logger that writes to the console and to `PATH`, which defaults to
   `logs/logs.log`.

## Limitations

- The package does not read configuration from files. Build a `LogConf` in
  code.
- It does not plug into the standard `logging` module. Its loggers write
  directly to their own outputs.