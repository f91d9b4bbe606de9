from __future__ import annotations

import logging
from pathlib import Path

from invoice_pipeline.logging_config import configure_logging


def test_configure_logging_adds_stream_handler() -> None:
    configure_logging(None)
    root = logging.getLogger()
    assert any(isinstance(h, logging.StreamHandler) for h in root.handlers)


def test_configure_logging_writes_file_and_can_be_repeated(tmp_path: Path) -> None:
    log_file = tmp_path / "logs" / "run.log"
    configure_logging(log_file)
    configure_logging(log_file)
    root = logging.getLogger()
    file_handlers = [h for h in root.handlers if isinstance(h, logging.FileHandler)]
    assert len(file_handlers) == 1
    logging.getLogger("invoice_pipeline.test").info("hello")
    for h in root.handlers:
        h.flush()
    assert "hello" in log_file.read_text(encoding="utf-8")
    configure_logging(None)


def test_configure_logging_quiets_urllib3() -> None:
    configure_logging(None, level=logging.DEBUG)
    assert logging.getLogger("urllib3").level == logging.WARNING
