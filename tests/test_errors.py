"""
Tests for the error taxonomy.
"""

import logging

import pytest

from tradeclarity.core.errors import (
    AnalysisError,
    ErrorCategory,
    ErrorCodes,
    ErrorSeverity,
    InsightDataError,
    InsightValidationError,
    TradeClarityError,
    wrap_exception,
)


class TestErrorCodes:
    """Tests for ErrorCode formatting."""

    def test_code_string(self):
        """Test codes render as CATEGORY_NUMBER."""
        assert str(ErrorCodes.DATA_INSUFFICIENT) == "DATA_1001"
        assert str(ErrorCodes.ANALYSIS_FAILED) == "ANALYSIS_3001"

    def test_categories(self):
        """Test codes carry their category."""
        assert ErrorCodes.VALIDATION_INVALID_PAYLOAD.category is ErrorCategory.VALIDATION
        assert ErrorCodes.SYSTEM_INTERNAL_ERROR.severity is ErrorSeverity.ERROR


class TestTradeClarityError:
    """Tests for the base exception."""

    def test_messages(self):
        """Test user and technical messages include the detail."""
        error = TradeClarityError(ErrorCodes.ANALYSIS_FAILED, detail="timing edge")
        assert error.code == "ANALYSIS_3001"
        assert "timing edge" in error.user_message
        assert error.technical_message.startswith("[ANALYSIS_3001]")
        assert str(error) == error.technical_message

    def test_to_dict(self):
        """Test dictionary form, with and without debug data."""
        error = TradeClarityError(
            ErrorCodes.DATA_MALFORMED_TRADE,
            detail="bad row",
            context={"row": 3},
        )
        data = error.to_dict()
        assert data["code"] == "DATA_1002"
        assert data["category"] == "DATA"
        assert "debug" not in data

        debug = error.to_dict(include_debug=True)["debug"]
        assert debug["context"] == {"row": 3}

    def test_original_traceback_captured(self):
        """Test wrapping keeps the original traceback."""
        try:
            raise KeyError("pnl")
        except KeyError as e:
            error = TradeClarityError(ErrorCodes.DATA_MALFORMED_TRADE, original_error=e)
        assert "original_traceback" in error.debug_info

    def test_log_uses_severity(self, caplog):
        """Test log() emits at the code's severity."""
        error = TradeClarityError(ErrorCodes.DATA_MALFORMED_TRADE, detail="skipped")
        with caplog.at_level(logging.DEBUG, logger="tradeclarity.core.errors"):
            error.log()
        assert caplog.records[-1].levelno == logging.WARNING
        assert "skipped" in caplog.records[-1].getMessage()


class TestSubclasses:
    """Tests for the exception subclasses."""

    def test_validation_error_field(self):
        """Test validation errors carry the offending field."""
        error = InsightValidationError(detail="impact 9", field="impact")
        assert error.field == "impact"
        assert error.error_code is ErrorCodes.VALIDATION_INVALID_VALUE

    def test_default_codes(self):
        """Test subclass default codes."""
        assert InsightDataError().error_code is ErrorCodes.DATA_MALFORMED_TRADE
        assert AnalysisError().error_code is ErrorCodes.ANALYSIS_FAILED

    def test_all_inherit_base(self):
        """Test every subclass is a TradeClarityError."""
        for cls in (InsightDataError, InsightValidationError, AnalysisError):
            assert issubclass(cls, TradeClarityError)


class TestWrapException:
    """Tests for wrap_exception."""

    @pytest.mark.parametrize(
        "exception, expected",
        [
            (ValueError("v"), ErrorCodes.VALIDATION_INVALID_VALUE),
            (TypeError("t"), ErrorCodes.DATA_MALFORMED_TRADE),
            (KeyError("k"), ErrorCodes.DATA_MALFORMED_TRADE),
            (ZeroDivisionError("z"), ErrorCodes.DATA_INSUFFICIENT),
            (RuntimeError("r"), ErrorCodes.ANALYSIS_FAILED),
        ],
    )
    def test_mapping(self, exception, expected):
        """Test builtin exceptions map to codes."""
        wrapped = wrap_exception(exception)
        assert isinstance(wrapped, AnalysisError)
        assert wrapped.error_code is expected
        assert wrapped.original_error is exception

    def test_passthrough(self):
        """Test TradeClarityErrors are returned unchanged."""
        error = InsightDataError(detail="x")
        assert wrap_exception(error) is error

    def test_context(self):
        """Test context is attached."""
        wrapped = wrap_exception(RuntimeError("boom"), context={"analysis_id": "abc"})
        assert wrapped.context == {"analysis_id": "abc"}
