"""
TradeClarity Error Handling Module

Structured error codes and exception classes for the insight engine.

Insufficient data is never an error here: calculators and comparators
return ``None`` for that case. Exceptions are reserved for malformed
payloads and for unexpected failures caught at the aggregation boundary.
"""

import logging
import traceback
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum, auto
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

# =============================================================================
# Error Code Taxonomy
# =============================================================================


class ErrorCategory(Enum):
    """Top-level error categories."""

    DATA = "DATA"
    VALIDATION = "VALIDATION"
    ANALYSIS = "ANALYSIS"
    SYSTEM = "SYSTEM"


class ErrorSeverity(Enum):
    """Error severity levels, named after logging levels."""

    DEBUG = auto()
    INFO = auto()
    WARNING = auto()
    ERROR = auto()
    CRITICAL = auto()


@dataclass(frozen=True)
class ErrorCode:
    """Structured error code with metadata."""

    code: str
    category: ErrorCategory
    severity: ErrorSeverity
    message: str
    user_message: str
    recovery_hint: str = ""

    def __str__(self) -> str:
        return f"{self.category.value}_{self.code}"


class ErrorCodes:
    """Central registry of insight engine error codes."""

    # Data Errors (1xxx)
    DATA_INSUFFICIENT = ErrorCode(
        code="1001",
        category=ErrorCategory.DATA,
        severity=ErrorSeverity.INFO,
        message="Not enough trades to compute this metric",
        user_message="Keep trading to unlock this insight.",
        recovery_hint="Connect more exchanges or upload historical CSV files.",
    )
    DATA_MALFORMED_TRADE = ErrorCode(
        code="1002",
        category=ErrorCategory.DATA,
        severity=ErrorSeverity.WARNING,
        message="Trade record could not be interpreted",
        user_message="Some trades could not be read and were skipped.",
        recovery_hint="Re-import the affected trades.",
    )

    # Validation Errors (2xxx)
    VALIDATION_INVALID_VALUE = ErrorCode(
        code="2001",
        category=ErrorCategory.VALIDATION,
        severity=ErrorSeverity.WARNING,
        message="Invalid value",
        user_message="One of the values provided is not valid.",
    )
    VALIDATION_INVALID_PAYLOAD = ErrorCode(
        code="2002",
        category=ErrorCategory.VALIDATION,
        severity=ErrorSeverity.WARNING,
        message="Input payload failed validation",
        user_message="Your trading data could not be analyzed.",
        recovery_hint="Check the trade and analytics payload format.",
    )

    # Analysis Errors (3xxx)
    ANALYSIS_FAILED = ErrorCode(
        code="3001",
        category=ErrorCategory.ANALYSIS,
        severity=ErrorSeverity.ERROR,
        message="Insight generation failed",
        user_message="Insights are temporarily unavailable.",
        recovery_hint="The dashboard still works without insights.",
    )

    # System Errors (9xxx)
    SYSTEM_INTERNAL_ERROR = ErrorCode(
        code="9001",
        category=ErrorCategory.SYSTEM,
        severity=ErrorSeverity.ERROR,
        message="Internal error",
        user_message="Something went wrong.",
    )


# =============================================================================
# Base Exception Classes
# =============================================================================


class TradeClarityError(Exception):
    """
    Base exception for all TradeClarity errors.

    Carries an ErrorCode with user-facing and technical messages.
    """

    def __init__(
        self,
        error_code: ErrorCode,
        detail: Optional[str] = None,
        original_error: Optional[Exception] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        self.error_code = error_code
        self.detail = detail
        self.original_error = original_error
        self.context = context or {}
        self.debug_info: Dict[str, Any] = {}
        self.timestamp = datetime.now(timezone.utc)

        if original_error:
            self.debug_info["original_traceback"] = traceback.format_exception(
                type(original_error), original_error, original_error.__traceback__
            )

        super().__init__(self.technical_message)

    @property
    def code(self) -> str:
        """Full error code string."""
        return str(self.error_code)

    @property
    def category(self) -> ErrorCategory:
        return self.error_code.category

    @property
    def severity(self) -> ErrorSeverity:
        return self.error_code.severity

    @property
    def user_message(self) -> str:
        """User-friendly error message."""
        msg = self.error_code.user_message
        if self.detail:
            msg = f"{msg} ({self.detail})"
        return msg

    @property
    def technical_message(self) -> str:
        """Technical error message for logging."""
        msg = f"[{self.code}] {self.error_code.message}"
        if self.detail:
            msg = f"{msg}: {self.detail}"
        return msg

    @property
    def recovery_hint(self) -> str:
        return self.error_code.recovery_hint

    def to_dict(self, include_debug: bool = False) -> Dict[str, Any]:
        """
        Convert error to dictionary.

        Args:
            include_debug: Include context and traceback (development only)
        """
        result = {
            "code": self.code,
            "category": self.category.value,
            "message": self.user_message,
            "recoveryHint": self.recovery_hint,
            "timestamp": self.timestamp.isoformat(),
        }

        if include_debug:
            result["debug"] = {
                "technicalMessage": self.technical_message,
                "context": self.context,
                "debugInfo": self.debug_info,
            }

        return result

    def log(self) -> None:
        """Log the error at its severity, with traceback when wrapping."""
        log_method = getattr(logger, self.severity.name.lower(), logger.error)
        log_method(
            self.technical_message,
            extra={
                "ctx_error_code": self.code,
                "ctx_context": self.context,
            },
            exc_info=self.original_error,
        )


class InsightDataError(TradeClarityError):
    """Input data cannot support the requested computation."""

    def __init__(
        self,
        error_code: ErrorCode = ErrorCodes.DATA_MALFORMED_TRADE,
        **kwargs,
    ):
        super().__init__(error_code, **kwargs)


class InsightValidationError(TradeClarityError):
    """Payload or Insight failed validation."""

    def __init__(
        self,
        detail: Optional[str] = None,
        field: Optional[str] = None,
        error_code: ErrorCode = ErrorCodes.VALIDATION_INVALID_VALUE,
        **kwargs,
    ):
        self.field = field
        super().__init__(error_code, detail=detail, **kwargs)


class AnalysisError(TradeClarityError):
    """Unexpected failure while generating insights."""

    def __init__(
        self,
        error_code: ErrorCode = ErrorCodes.ANALYSIS_FAILED,
        **kwargs,
    ):
        super().__init__(error_code, **kwargs)


# =============================================================================
# Utility Functions
# =============================================================================


def wrap_exception(
    exception: Exception,
    default_code: ErrorCode = ErrorCodes.ANALYSIS_FAILED,
    context: Optional[Dict[str, Any]] = None,
) -> TradeClarityError:
    """
    Wrap a generic exception in a TradeClarityError.

    Maps common exception types to appropriate error codes.
    """
    if isinstance(exception, TradeClarityError):
        return exception

    exception_mapping = {
        ValueError: ErrorCodes.VALIDATION_INVALID_VALUE,
        TypeError: ErrorCodes.DATA_MALFORMED_TRADE,
        KeyError: ErrorCodes.DATA_MALFORMED_TRADE,
        ZeroDivisionError: ErrorCodes.DATA_INSUFFICIENT,
    }

    for exc_type, error_code in exception_mapping.items():
        if isinstance(exception, exc_type):
            return AnalysisError(
                error_code,
                detail=str(exception),
                original_error=exception,
                context=context,
            )

    return AnalysisError(
        default_code,
        detail=str(exception),
        original_error=exception,
        context=context,
    )
