"""Tests for logging setup."""

import logging

import pytest
from rich.logging import RichHandler

from design_diff.logging_config import ROOT_LOGGER, get_logger, setup_logging


@pytest.fixture(autouse=True)
def restore_root_logging():
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        if handler not in saved_handlers:
            handler.close()
    root.handlers[:] = saved_handlers
    root.setLevel(saved_level)


class TestSetupLogging:
    def test_default_level(self):
        logger = setup_logging()
        assert logger.name == ROOT_LOGGER
        assert logger.level == logging.WARNING
        assert any(isinstance(h, RichHandler) for h in logging.getLogger().handlers)

    def test_verbose_and_quiet(self):
        assert setup_logging(verbose=True).level == logging.DEBUG
        assert setup_logging(verbose=True, quiet=True).level == logging.ERROR

    def test_log_file(self, tmp_path):
        log_file = tmp_path / "design-diff.log"
        setup_logging(verbose=True, log_file=str(log_file))

        get_logger("diff.rename").debug("Detected rename: a -> b")
        for handler in logging.getLogger().handlers:
            handler.flush()

        text = log_file.read_text(encoding="utf-8")
        assert "design_diff.diff.rename" in text
        assert "Detected rename: a -> b" in text


class TestGetLogger:
    def test_namespacing(self):
        assert get_logger().name == ROOT_LOGGER
        assert get_logger("design_diff.diff.engine").name == "design_diff.diff.engine"
        assert get_logger("cli").name == "design_diff.cli"
