from __future__ import annotations

import logging
import os
from typing import Literal

import coloredlogs  # type: ignore[import]

LogLevel = Literal["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"]

TIME_FORMAT = "%H:%M:%S"


class LogFormat:
    """Predefined log formats."""

    SIMPLE = "%(asctime)s %(name)s %(levelname)s %(message)s"
    # DEBUG output is mostly wire traffic, so say where it came from
    DETAILED = "%(asctime)s [%(name)s] %(filename)s:%(lineno)d - %(message)s"


def suppress_logger(name: str, level: LogLevel = "WARNING") -> None:
    logging.getLogger(name).setLevel(level)


def setup_logging(level: LogLevel | None = None) -> None:
    resolved = (level or os.environ.get("LOGLEVEL", "INFO")).upper()
    log_format = LogFormat.DETAILED if resolved == "DEBUG" else LogFormat.SIMPLE

    coloredlogs.install(level=resolved, fmt=log_format, datefmt=TIME_FORMAT)

    # one line per request otherwise
    suppress_logger("httpx")
    suppress_logger("httpcore")
