import inspect
import io
import re
import sys

import pytest

from lvlogs.config import (
    LogConf,
    LogConfigError,
    LogFlag,
    LogLevel,
    LogPanic,
    WriteStrategy,
    new_default_log_conf,
)
from lvlogs.logger import (
    LogsLogger,
    close,
    find_project_root,
    get_log_prefix,
    get_relative_path,
    new_default_logger,
    new_logger,
)
from lvlogs.writers import MultiWriter


def _close_output(logger):
    output = logger.output
    writers = output.writers() if isinstance(output, MultiWriter) else (output,)
    for writer in writers:
        if hasattr(writer, "rotate"):
            writer.close()


def test_default_logger_line_has_header_level_and_location(capsys):
    logger = LogsLogger()
    logger.info("ok"); line = inspect.currentframe().f_lineno
    out = capsys.readouterr().out
    match = re.fullmatch(
        r"\d{4}/\d{2}/\d{2} \d{2}:\d{2}:\d{2} \[INFO\] .*test_logger\.py (\d+): ok\n",
        out,
    )
    assert match is not None
    assert int(match.group(1)) == line


def test_debug_is_filtered_at_default_level(capsys):
    logger = new_default_logger()
    logger.debug("hidden")
    assert capsys.readouterr().out == ""


def test_set_log_level_enables_debug_and_rejects_negative(capsys):
    logger = LogsLogger()
    logger.set_log_level(LogLevel.DEBUG)
    logger.debug("ss")
    assert "[DEBUG] " in capsys.readouterr().out
    with pytest.raises(LogConfigError):
        logger.set_log_level(-1)


def test_infof_formats_message(capsys):
    logger = LogsLogger()
    logger.infof("这是 %s 的 %s。", "1号", "2号")
    assert capsys.readouterr().out.endswith("这是 1号 的 2号。\n")


def test_json_encoding_and_bad_encoding(capsys):
    logger = LogsLogger()
    logger.set_encoding("json")
    logger.info("a", 1)
    assert capsys.readouterr().out.endswith('["a",1]\n')
    with pytest.raises(LogConfigError):
        logger.set_encoding("xml")


def test_fatal_exits_and_writes_to_stderr(capsys):
    logger = LogsLogger()
    with pytest.raises(SystemExit) as exc:
        logger.fatal("dead")
    assert exc.value.code == 1
    captured = capsys.readouterr()
    assert "[FATAL] " in captured.err
    assert "dead" in captured.out


def test_panic_raises_with_message(capsys):
    logger = LogsLogger()
    with pytest.raises(LogPanic, match="boom 1"):
        logger.panic("boom ", 1)
    with pytest.raises(LogPanic, match="x=5"):
        logger.panicf("x=%d", 5)
    assert "[PANIC] " in capsys.readouterr().err


def test_set_flags_validation_and_microseconds(capsys):
    logger = LogsLogger()
    with pytest.raises(LogConfigError):
        logger.set_flags(1 << 8)
    with pytest.raises(LogConfigError):
        logger.set_flags(-1)
    logger.set_flags(LogFlag.MICROSECONDS | LogFlag.ROOTFILE)
    logger.info("t")
    out = capsys.readouterr().out
    assert re.match(r"\[INFO\] \d{2}:\d{2}:\d{2}\.\d{6} ", out)


def test_set_flags_without_time_adds_date_and_time():
    logger = LogsLogger()
    logger.set_flags(0)
    assert logger.flags == int(LogFlag.DATE | LogFlag.TIME)


def test_prefixes(capsys):
    logger = LogsLogger()
    logger.set_prefix("svc ")
    logger.info("a")
    assert "[INFO] svc " in capsys.readouterr().out
    logger.set_level_prefix(LogLevel.WARN, ">> ", False)
    logger.warn("b")
    out = capsys.readouterr().out
    assert ">> " in out
    assert "[WARN]" not in out


def test_set_up_file_mode_writes_file(tmp_path):
    path = tmp_path / "logs" / "app.log"
    logger = new_logger(LogConf(mode="file", path=str(path)))
    logger.error("written")
    _close_output(logger)
    assert "[ERROR] " in path.read_text(encoding="utf-8")
    assert logger.conf.max_backups == new_default_log_conf().max_backups


def test_set_up_level_zero_becomes_default():
    logger = new_logger(LogConf(level=int(LogLevel.DEBUG)))
    assert logger.conf.level == LogLevel.INFO


def test_set_up_errors():
    with pytest.raises(LogConfigError, match="log path is required"):
        new_logger(LogConf(mode="file"))
    with pytest.raises(LogConfigError):
        new_logger(LogConf(encoding="yaml"))
    with pytest.raises(LogConfigError):
        new_logger(LogConf(level=-2))


def test_both_mode_writes_console_and_file(tmp_path, capsys):
    path = tmp_path / "both.log"
    logger = new_logger(LogConf(mode="both", path=str(path)))
    logger.info("twice")
    _close_output(logger)
    assert "twice" in capsys.readouterr().out
    assert "twice" in path.read_text(encoding="utf-8")


def test_set_output_modes(tmp_path):
    logger = LogsLogger()
    buffer = io.StringIO()
    logger.set_output(buffer)
    assert logger.conf.mode == "console"
    logger.info("buffered")
    assert "buffered" in buffer.getvalue()

    path = tmp_path / "out.log"
    with open(path, "w", encoding="utf-8") as handle:
        logger.set_output(handle)
        assert logger.conf.mode == "file"
        assert logger.conf.path == str(path)
        logger.set_output(MultiWriter(sys.stdout, handle))
        assert logger.conf.mode == "both"

    with pytest.raises(LogConfigError):
        logger.set_output(None)


def test_rotation_settings_follow_setters(tmp_path):
    logger = new_logger(LogConf(mode="file", path=str(tmp_path / "r.log")))
    logger.set_max_size(5)
    logger.set_max_backups(7)
    logger.set_max_age(9)
    assert (logger.output.max_size, logger.output.max_backups, logger.output.max_age) == (5, 7, 9)
    assert logger.conf.keep_days == 9


def test_async_records_are_written_after_close(tmp_path):
    path = tmp_path / "async.log"
    logger = new_logger(LogConf(mode="file", path=str(path)))
    logger.set_log_write_strategy(WriteStrategy.ASYNC)
    for index in range(5):
        logger.info("queued", index)
    close()
    _close_output(logger)
    text = path.read_text(encoding="utf-8")
    assert [f"queued{index}" in text for index in range(5)] == [True] * 5


def test_async_in_console_mode_writes_immediately(capsys):
    logger = LogsLogger()
    logger.set_log_write_strategy(WriteStrategy.ASYNC)
    logger.info("now")
    assert "now" in capsys.readouterr().out


def test_find_project_root(tmp_path):
    (tmp_path / "pyproject.toml").write_text("", encoding="utf-8")
    nested = tmp_path / "a" / "b"
    nested.mkdir(parents=True)
    assert find_project_root(nested) == str(tmp_path.resolve())


def test_find_project_root_missing(tmp_path):
    with pytest.raises(FileNotFoundError):
        find_project_root(tmp_path)


def test_get_relative_path_reports_caller():
    path, line = get_relative_path(1); expected = inspect.currentframe().f_lineno
    assert path.endswith("test_logger.py")
    assert line == expected


def test_get_log_prefix_format():
    prefix = get_log_prefix(1); line = inspect.currentframe().f_lineno
    assert prefix.endswith(f"test_logger.py {line}: ")

def test_new_default_logger_conf():
    assert new_default_logger().conf == new_default_log_conf()