import io

import pytest

from lvlogs import glog
from lvlogs.config import (
    LogConf,
    LogConfigError,
    LogFlag,
    LogLevel,
    LogPanic,
    WriteStrategy,
    new_default_log_conf,
)


@pytest.fixture
def sink():
    glog.set_up(new_default_log_conf())
    buf = io.StringIO()
    glog.set_output(buf)
    yield buf
    glog.close()
    glog.set_up(new_default_log_conf())


def test_info_written_with_tag_and_caller(sink):
    glog.info("ok")
    text = sink.getvalue()
    assert "[INFO] " in text
    assert text.endswith("ok\n")
    assert "test_glog.py" in text


def test_debug_suppressed_at_default_level(sink):
    glog.debug("hidden")
    assert sink.getvalue() == ""


def test_debug_written_after_lowering_level(sink):
    glog.set_log_level(LogLevel.DEBUG)
    glog.debug("shown")
    assert "[DEBUG] " in sink.getvalue()
    assert sink.getvalue().endswith("shown\n")


@pytest.mark.parametrize("level", [-1, int(LogLevel.PANIC) + 1])
def test_set_log_level_rejects_out_of_range(sink, level):
    with pytest.raises(LogConfigError):
        glog.set_log_level(level)


def test_warn_uses_info_logger(sink):
    glog.warn("careful")
    text = sink.getvalue()
    assert "[INFO] " in text
    assert "[WARN] " not in text
    assert text.endswith("careful\n")


def test_error_written(sink):
    glog.errorf("%s-%d", "code", 7)
    text = sink.getvalue()
    assert "[ERROR] " in text
    assert text.endswith("code-7\n")


def test_infof_formats(sink):
    glog.infof("%s and %s", "a", "b")
    assert sink.getvalue().endswith("a and b\n")


def test_json_encoding(sink):
    glog.set_encoding("json")
    glog.info("x", 1)
    assert sink.getvalue().endswith('["x",1]\n')


def test_unsupported_encoding(sink):
    with pytest.raises(LogConfigError):
        glog.set_encoding("xml")


def test_set_prefix(sink):
    glog.set_prefix("app: ")
    glog.info("hello")
    assert "[INFO] app: " in sink.getvalue()


def test_prefix_without_default(sink):
    glog.set_prefix_without_default_prefix("P> ")
    glog.error("boom")
    text = sink.getvalue()
    assert "P> " in text
    assert "[ERROR]" not in text


def test_level_prefix_only_touches_one_level(sink):
    glog.set_level_prefix(LogLevel.ERROR, "E> ", False)
    glog.error("one")
    glog.info("two")
    lines = sink.getvalue().splitlines()
    assert "E> " in lines[0] and "[ERROR]" not in lines[0]
    assert "[INFO] " in lines[1]


def test_flags_without_time_fall_back_to_date_time(sink):
    glog.set_flags(LogFlag.MSGPREFIX)
    glog.info("x")
    assert sink.getvalue().startswith("[INFO] ")


@pytest.mark.parametrize("flags", [-1, 1 << 8])
def test_invalid_flags(sink, flags):
    with pytest.raises(LogConfigError):
        glog.set_flags(flags)


def test_panic_raises_and_logs(sink):
    with pytest.raises(LogPanic, match="bad"):
        glog.panic("bad")
    assert "[PANIC] " in sink.getvalue()


def test_panicf_message(sink):
    with pytest.raises(LogPanic) as info:
        glog.panicf("n=%d", 3)
    assert str(info.value) == "n=3"


def test_fatal_exits_with_one(sink):
    with pytest.raises(SystemExit) as info:
        glog.fatal("dead")
    assert info.value.code == 1
    assert "[FATAL] " in sink.getvalue()


def test_file_mode_requires_path(sink):
    with pytest.raises(LogConfigError):
        glog.set_up(LogConf(mode="file"))


def test_file_mode_writes_file(sink, tmp_path):
    path = tmp_path / "app.log"
    glog.set_up(LogConf(mode="file", path=str(path)))
    glog.info("to file")
    assert path.read_text(encoding="utf-8").endswith("to file\n")


def test_async_records_flushed_on_close(sink, tmp_path):
    path = tmp_path / "async.log"
    glog.set_up(LogConf(mode="file", path=str(path)))
    glog.set_log_write_strategy(WriteStrategy.ASYNC)
    glog.info("queued")
    glog.close()
    assert "queued" in path.read_text(encoding="utf-8")


def test_set_max_size_updates_conf(sink, tmp_path):
    glog.set_up(LogConf(mode="file", path=str(tmp_path / "a.log")))
    glog.set_max_size(5)
    glog.set_max_backups(2)
    glog.set_max_age(4)
    conf = glog.global_logger().conf
    assert (conf.max_size, conf.max_backups, conf.keep_days) == (5, 2, 4)


def test_default_log_conf_matches_defaults():
    assert glog.default_log_conf() == new_default_log_conf()


def test_setup_default_restores_console(sink, tmp_path):
    glog.set_up(LogConf(mode="file", path=str(tmp_path / "b.log")))
    glog.setup_default()
    assert glog.global_logger().conf == new_default_log_conf()