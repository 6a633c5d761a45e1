from __future__ import annotations

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Mapping, TextIO

from sftpdrop.core.paths import get_logs_dir

LOGGER_NAME = "sftpdrop"
ENV_LOG_LEVEL = "SFTPDROP_LOG_LEVEL"

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
LOG_FILE_NAME = "sftpdrop.log"
LOG_FILE_MAX_BYTES = 1_000_000
LOG_FILE_BACKUPS = 5


def resolve_level(environ: Mapping[str, str] | None = None, default: int = logging.INFO) -> int:
    env = os.environ if environ is None else environ
    name = env.get(ENV_LOG_LEVEL, "").strip().upper()
    if not name:
        return default
    level = logging.getLevelName(name)
    # unknown names come back as "Level <name>"
    return level if isinstance(level, int) else default


def setup_logging(
    level: int | None = None,
    logs_dir: Path | None = None,
    stream: TextIO | None = None,
) -> logging.Logger:
    """Route the ``sftpdrop`` logger tree to a rotating file and to stderr.

    Calling it again replaces the handlers of the previous call.
    """
    effective_level = resolve_level() if level is None else level
    log_file = (logs_dir or get_logs_dir()) / LOG_FILE_NAME
    log_file.parent.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(effective_level)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    file_handler = RotatingFileHandler(
        filename=log_file,
        maxBytes=LOG_FILE_MAX_BYTES,
        backupCount=LOG_FILE_BACKUPS,
        encoding="utf-8",
    )
    stream_handler = logging.StreamHandler(stream or sys.stderr)
    for handler in (file_handler, stream_handler):
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger
