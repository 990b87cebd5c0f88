from __future__ import annotations

import logging
from pathlib import Path

from mantl_install.core.stdlib_logging import configure_stdlib_logging


def _handlers() -> list:
    return logging.getLogger("mantl_install").handlers


def test_configure_is_idempotent() -> None:
    configure_stdlib_logging(level="INFO")
    configure_stdlib_logging(level="DEBUG")

    assert len(_handlers()) == 1
    assert logging.getLogger("mantl_install").level == logging.DEBUG


def test_log_file_target(tmp_path: Path) -> None:
    log_path = tmp_path / "logs" / "mantl-install.log"
    configure_stdlib_logging(level="WARNING", log_path=log_path)

    logging.getLogger("mantl_install.core.test").warning("probe failed")
    for handler in _handlers():
        handler.flush()

    text = log_path.read_text(encoding="utf-8")
    assert "WARNING mantl_install.core.test: probe failed" in text
    assert len(_handlers()) == 1


def test_unknown_level_falls_back_to_warning() -> None:
    configure_stdlib_logging(level="chatty")

    assert logging.getLogger("mantl_install").level == logging.WARNING
