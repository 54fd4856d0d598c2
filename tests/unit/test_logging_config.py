"""
Unit tests for config.logging_config module.
"""

import logging

from config.logging_config import ROOT_LOGGER, get_logger, setup_logger


def handlers_on_path(logger: logging.Logger):
    """Handlers a record from logger passes through, up to the root logger."""
    handlers = []
    current = logger
    while current is not None and current is not logging.getLogger():
        handlers.extend(current.handlers)
        current = current.parent if current.propagate else None
    return handlers


class TestGetLogger:
    """Tests for get_logger/setup_logger."""

    def test_module_logger_has_no_own_handlers(self):
        logger = get_logger("graphweaver.batch.orchestrator")

        assert logger.name == "graphweaver.batch.orchestrator"
        assert logger.handlers == []
        assert logger.propagate is True
        assert logging.getLogger(ROOT_LOGGER).handlers

    def test_record_reaches_each_handler_once(self):
        """Console and file handler each see a module record exactly once."""
        get_logger(ROOT_LOGGER)
        logger = get_logger("graphweaver.storage.stats_sink")

        handlers = handlers_on_path(logger)

        assert len(handlers) == 2
        assert len(set(map(id, handlers))) == 2

    def test_repeated_setup_adds_no_handlers(self):
        setup_logger("graphweaver.cli")
        setup_logger("graphweaver.cli")
        setup_logger()

        assert len(logging.getLogger(ROOT_LOGGER).handlers) == 2

    def test_packages_share_handlers(self):
        """Other packages log through the same console and file handlers."""
        get_logger("ai_providers.manager")

        assert logging.getLogger("ai_providers").handlers == logging.getLogger(ROOT_LOGGER).handlers
        assert get_logger("ai_providers.manager").handlers == []

    def test_module_record_emitted_once(self):
        emitted = []

        class Collect(logging.Handler):
            def emit(self, record):
                emitted.append(record.getMessage())

        collector = Collect()
        root = logging.getLogger(ROOT_LOGGER)
        root.addHandler(collector)
        try:
            get_logger("graphweaver.batch.chunk_scheduler").warning("single-line")
        finally:
            root.removeHandler(collector)

        assert emitted == ["single-line"]
