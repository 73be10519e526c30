from __future__ import annotations

import logging
import sys
from pathlib import Path

from logfmter import Logfmter

from websight.adapters.config.schema import LoggingConfig


def configure_logging(config: LoggingConfig) -> logging.Logger:
    if config.logfmt_enabled:
        formatter = Logfmter(
            keys=["at", "when", "name", "msg"],
            mapping={"at": "levelname", "when": "asctime"},
            datefmt="%Y%m%d %H:%M:%S",
        )
    else:
        formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")

    logger = logging.getLogger("websight")
    level = getattr(logging, config.log_level.upper(), logging.INFO)
    logger.setLevel(level)

    # stdout carries the MCP stdio transport
    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setFormatter(formatter)

    log_dir = Path(config.log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    file_handler = logging.FileHandler(log_dir / "websight.log")
    file_handler.setFormatter(formatter)

    logger.handlers = [stream_handler, file_handler]
    logger.propagate = False
    return logger
