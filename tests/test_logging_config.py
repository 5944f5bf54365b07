"""Tests for the package logger setup."""
import logging

import pytest

from sofarotator.logging_config import setup_logging


@pytest.fixture(autouse=True)
def restore_package_logger():
    logger = logging.getLogger("sofarotator")
    handlers, level = list(logger.handlers), logger.level
    yield
    for handler in logger.handlers:
        handler.close()
    logger.handlers[:] = handlers
    logger.setLevel(level)


class TestSetupLogging:

    def test_configures_package_logger(self):
        logger = setup_logging(logging.DEBUG)
        assert logger.name == "sofarotator"
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1

    def test_accepts_level_names(self):
        assert setup_logging("warning").level == logging.WARNING

    def test_rejects_unknown_level(self):
        with pytest.raises(ValueError):
            setup_logging("LOUD")

    def test_repeated_calls_do_not_stack_handlers(self):
        setup_logging()
        logger = setup_logging()
        assert len(logger.handlers) == 1

    def test_writes_log_file(self, tmp_path):
        log_file = tmp_path / "sofarotator.log"
        logger = setup_logging(logging.INFO, str(log_file))
        assert len(logger.handlers) == 2
        logging.getLogger("sofarotator.model.state").info("frame built")
        for handler in logger.handlers:
            handler.flush()
        text = log_file.read_text(encoding="utf-8")
        assert "Logging initialized." in text
        assert "sofarotator.model.state - INFO - frame built" in text
