from __future__ import annotations

import logging
from pathlib import Path
import sys
from typing import Iterator

import pytest
from logfmter import Logfmter

from websight.adapters.config.schema import LoggingConfig
from websight.adapters.logging.setup import configure_logging


@pytest.fixture(autouse=True)
def _restore_websight_logger() -> Iterator[None]:
    logger = logging.getLogger("websight")
    saved = (list(logger.handlers), logger.propagate, logger.level)
    yield
    for handler in logger.handlers:
        handler.close()
    logger.handlers, logger.propagate, logger.level = saved


def test_configure_logging_sets_handlers_and_level(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    config = LoggingConfig(logfmt_enabled=False, log_level="DEBUG")

    logger = configure_logging(config)

    assert logger.level == 10
    assert len(logger.handlers) == 2
    assert (tmp_path / "logs" / "websight.log").exists()


def test_stream_handler_writes_to_stderr_with_logfmt(tmp_path: Path) -> None:
    logger = configure_logging(LoggingConfig(log_dir=str(tmp_path / "custom")))

    stream_handler = next(
        handler for handler in logger.handlers if type(handler) is logging.StreamHandler
    )
    assert stream_handler.stream is sys.stderr
    assert isinstance(stream_handler.formatter, Logfmter)
    assert logger.propagate is False
    assert (tmp_path / "custom" / "websight.log").exists()
