"""Tests logging functions in tilemapper."""
import logging

import pytest

import tilemapper.logging_utils as tm_logging_utils


class TestLoggingUtils:
    def test_logger_singleton_behavior(self) -> None:
        """Test that logger instances are singleton per name."""
        logger1 = tm_logging_utils.setup_logger("test_logger")
        logger2 = tm_logging_utils.setup_logger("test_logger")
        assert logger1 is logger2
        assert len(logger1.handlers) == 1

    def test_logger_custom_formatter_and_handler(self) -> None:
        """Test custom formatter and handler are applied."""
        formatter = logging.Formatter("[CUSTOM] %(message)s")
        handler = logging.StreamHandler()
        logger = tm_logging_utils.setup_logger(
            "custom_logger",
            formatter=formatter,
            handler=handler,
        )
        assert logger.name == "custom_logger"
        assert len(logger.handlers) == 1
        assert logger.handlers[0].formatter._fmt.startswith("[CUSTOM]")

    def test_set_verbose_toggles_level(self) -> None:
        logger = tm_logging_utils.logger
        try:
            tm_logging_utils.set_verbose(verbose=True)
            assert logger.level == logging.DEBUG
        finally:
            tm_logging_utils.set_verbose(verbose=False)
        assert logger.level == logging.INFO


class TestLoggerReporter:
    def test_levels(self, caplog: pytest.LogCaptureFixture) -> None:
        target = logging.getLogger("tilemapper.test_reporter")
        reporter = tm_logging_utils.LoggerReporter(target)
        with caplog.at_level(logging.DEBUG, logger=target.name):
            reporter.debug("d %d", 1)
            reporter.info("i %s", "x")
            reporter.warning("w")
            reporter.fatal("f %s", "boom")

        levels = [(rec.levelno, rec.getMessage()) for rec in caplog.records]
        assert levels == [
            (logging.DEBUG, "d 1"),
            (logging.INFO, "i x"),
            (logging.WARNING, "w"),
            (logging.ERROR, "f boom"),
        ]

    def test_defaults_to_shared_logger(self) -> None:
        reporter = tm_logging_utils.LoggerReporter()
        assert reporter.logger is tm_logging_utils.logger

    def test_resolve_reporter(self) -> None:
        custom = tm_logging_utils.LoggerReporter()
        assert tm_logging_utils.resolve_reporter(custom) is custom
        fallback = tm_logging_utils.resolve_reporter(None)
        assert isinstance(fallback, tm_logging_utils.LoggerReporter)
        assert fallback.logger is tm_logging_utils.logger
