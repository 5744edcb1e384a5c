"""Tests for logging setup."""

import logging

from whitted.logging_config import setup_logging


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_level_and_console_handler(self):
        logger = setup_logging(level="DEBUG", name="whitted.test.console")
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0], logging.StreamHandler)

    def test_unknown_level_falls_back_to_info(self):
        logger = setup_logging(level="CHATTY", name="whitted.test.fallback")
        assert logger.level == logging.INFO

    def test_repeated_setup_does_not_stack_handlers(self):
        setup_logging(name="whitted.test.repeat")
        logger = setup_logging(name="whitted.test.repeat")
        assert len(logger.handlers) == 1

    def test_log_file(self, tmp_path):
        log_file = tmp_path / "logs" / "render.log"
        logger = setup_logging(level="INFO", log_file=log_file, name="whitted.test.file")
        logger.info("hello from the renderer")
        for handler in logger.handlers:
            handler.flush()

        assert log_file.exists()
        assert "hello from the renderer" in log_file.read_text()

        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()
