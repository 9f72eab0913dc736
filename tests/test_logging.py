"""
Tests for logging configuration and helpers.
"""

import json
import logging

import pytest

from tradeclarity.config.logging import (
    _HANDLER_MARK,
    ConsoleFormatter,
    LogContext,
    StructuredFormatter,
    clear_analysis_context,
    configure_logging,
    get_analysis_id,
    log_performance,
    set_analysis_context,
)


@pytest.fixture(autouse=True)
def clean_context():
    clear_analysis_context()
    yield
    clear_analysis_context()


def make_record(msg="hello", **extra):
    record = logging.LogRecord("tradeclarity.test", logging.INFO, __file__, 10, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestAnalysisContext:
    """Tests for analysis correlation IDs."""

    def test_generated_id(self):
        """Test an ID is generated when none is given."""
        analysis_id = set_analysis_context()
        assert analysis_id
        assert get_analysis_id() == analysis_id

    def test_explicit_id_and_clear(self):
        """Test explicit IDs and clearing."""
        set_analysis_context("pass-1", user_id="user-9")
        assert get_analysis_id() == "pass-1"
        clear_analysis_context()
        assert get_analysis_id() is None


class TestFormatters:
    """Tests for the log formatters."""

    def test_structured_formatter(self):
        """Test JSON output with context fields."""
        set_analysis_context("pass-json")
        formatter = StructuredFormatter(service_name="svc", environment="test")
        data = json.loads(formatter.format(make_record(ctx_insights=4)))
        assert data["message"] == "hello"
        assert data["service"] == "svc"
        assert data["analysis_id"] == "pass-json"
        assert data["insights"] == 4

    def test_console_formatter(self):
        """Test console output without colors."""
        set_analysis_context("abcdef123456")
        line = ConsoleFormatter(use_colors=False).format(make_record(ctx_count=2))
        assert "[abcdef12]" in line
        assert "hello" in line
        assert "count=2" in line


def installed_handlers():
    return [h for h in logging.getLogger().handlers if getattr(h, _HANDLER_MARK, False)]


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_json_handler(self):
        """Test JSON format installs a structured formatter."""
        configure_logging(level="DEBUG", json_format=True)
        assert logging.getLogger().level == logging.DEBUG
        (handler,) = installed_handlers()
        assert isinstance(handler.formatter, StructuredFormatter)

    def test_log_file(self, tmp_path):
        """Test a file handler is added for log_file."""
        log_file = tmp_path / "insights.log"
        configure_logging(level="INFO", log_file=str(log_file))
        handlers = installed_handlers()
        assert len(handlers) == 2
        assert any(isinstance(h, logging.FileHandler) for h in handlers)

    def test_reconfigure_replaces_own_handlers(self):
        """Test repeated calls swap their handlers and keep foreign ones."""
        foreign = logging.NullHandler()
        logging.getLogger().addHandler(foreign)

        configure_logging(level="INFO")
        configure_logging(level="WARNING", json_format=True)

        (handler,) = installed_handlers()
        assert isinstance(handler.formatter, StructuredFormatter)
        assert foreign in logging.getLogger().handlers
        assert logging.getLogger().level == logging.WARNING


class TestLogPerformance:
    """Tests for the log_performance decorator."""

    def test_returns_result(self, caplog):
        """Test the wrapped function's result is returned and timed."""

        @log_performance(threshold_ms=10_000)
        def compute(x):
            return x * 2

        with caplog.at_level(logging.DEBUG):
            assert compute(21) == 42
        assert any("Operation completed: compute" in r.getMessage() for r in caplog.records)

    def test_slow_warning(self, caplog):
        """Test passes over the threshold log a warning."""

        @log_performance(threshold_ms=-1)
        def compute():
            return 1

        with caplog.at_level(logging.DEBUG):
            compute()
        assert any(r.levelno == logging.WARNING for r in caplog.records)

    def test_exception_reraised(self, caplog):
        """Test failures are logged and re-raised."""

        @log_performance()
        def explode():
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            explode()
        assert any("Operation failed: explode" in r.getMessage() for r in caplog.records)


class TestLogContext:
    """Tests for LogContext."""

    def test_fields_added_and_removed(self, caplog):
        """Test context fields appear only inside the block."""
        logger = logging.getLogger("tradeclarity.test")
        with caplog.at_level(logging.INFO, logger="tradeclarity.test"):
            with LogContext(logger, symbol="BTCUSDT"):
                logger.info("inside")
            logger.info("outside")

        inside, outside = caplog.records[-2], caplog.records[-1]
        assert inside.ctx_symbol == "BTCUSDT"
        assert not hasattr(outside, "ctx_symbol")
