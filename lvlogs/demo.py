"""Command that shows the global logger and separately configured loggers."""

from __future__ import annotations

import argparse

from . import glog
from .config import LogConf, LogConfigError, LogLevel
from .logger import new_default_logger, new_logger


def _parse(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="lvlogs-demo", description=__doc__)
    parser.add_argument(
        "--log-path",
        default="logs/logs.log",
        help="file written by the logger that logs to console and file",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Run the demonstration; returns the exit status."""
    args = _parse(argv)

    print("using the global logger")
    glog.info("ok")
    glog.debug("ss")
    glog.error("error")

    print("another logger with the default configuration")
    logger = new_default_logger()
    logger.info("ok")
    logger.debug("ss")
    logger.error("error")

    print("a newly configured logger")
    conf = LogConf(
        mode="both",
        level=int(LogLevel.DEBUG),
        encoding="json",
        path=args.log_path,
        max_size=10,
        max_backups=10,
        keep_days=10,
        compress=True,
    )
    try:
        logger2 = new_logger(conf)
    except LogConfigError as err:
        print("err:", err)
    else:
        first, second = "1号", "2号"
        logger2.infof("这是 %s 的 %s。", first, second)
        logger2.debug("ss")
        logger2.error("error")

    print("back in main")
    sequence = [
        (glog.info, "0"),
        (glog.info, "1"),
        (glog.debug, "2"),
        (glog.error, "3"),
        (glog.info, "4"),
        (glog.debug, "5"),
        (glog.error, "6"),
        (glog.info, "7"),
        (glog.debug, "8"),
        (glog.error, "9"),
    ]
    for _ in range(3):
        for write, text in sequence:
            write(text)
    glog.close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())