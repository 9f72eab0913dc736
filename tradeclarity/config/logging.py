"""
TradeClarity Logging Configuration

Console and JSON log formatting, analysis-pass correlation and a timing
decorator for the insight generators.
"""

import json
import logging
import os
import sys
import time
import uuid
from contextvars import ContextVar
from datetime import datetime, timezone
from functools import wraps
from typing import Any, Callable, Dict, Optional, TypeVar

# Correlates every log line of one insight-generation pass
analysis_id_var: ContextVar[Optional[str]] = ContextVar("analysis_id", default=None)
user_id_var: ContextVar[Optional[str]] = ContextVar("user_id", default=None)

# Attribute set on handlers owned by configure_logging
_HANDLER_MARK = "_tradeclarity_handler"


# =============================================================================
# Log Level Strategy
# =============================================================================
#
# DEBUG   - Candidate counts per generator, calculator skips, timings
# INFO    - Configuration loaded, aggregation pass summaries
# WARNING - Slow passes, unparseable trades dropped from validation
# ERROR   - Aggregator failures (converted to an empty insight list)
# =============================================================================


class StructuredFormatter(logging.Formatter):
    """
    JSON structured log formatter for production log shipping.
    """

    def __init__(
        self,
        service_name: str = "tradeclarity-insights",
        environment: str = "development",
    ):
        super().__init__()
        self.service_name = service_name
        self.environment = environment
        self.hostname = os.uname().nodename if hasattr(os, "uname") else "unknown"

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "service": self.service_name,
            "environment": self.environment,
            "hostname": self.hostname,
            "logger": record.name,
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "message": record.getMessage(),
            "analysis_id": analysis_id_var.get(),
            "user_id": user_id_var.get(),
        }

        if record.exc_info:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "traceback": self.formatException(record.exc_info),
            }

        # Context fields prefixed with ctx_ are included without the prefix
        for key, value in record.__dict__.items():
            if key.startswith("ctx_"):
                log_data[key[4:]] = value

        log_data = {k: v for k, v in log_data.items() if v is not None}

        return json.dumps(log_data, default=str)


class ConsoleFormatter(logging.Formatter):
    """
    Human-readable console formatter for development.
    """

    COLORS = {
        "DEBUG": "\033[36m",     # Cyan
        "INFO": "\033[32m",      # Green
        "WARNING": "\033[33m",   # Yellow
        "ERROR": "\033[31m",     # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def __init__(self, use_colors: bool = True):
        super().__init__()
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S.%f")[:-3]
        analysis_id = analysis_id_var.get()
        pass_str = f"[{analysis_id[:8]}] " if analysis_id else ""

        if self.use_colors:
            color = self.COLORS.get(record.levelname, self.RESET)
            level = f"{color}{record.levelname:8}{self.RESET}"
        else:
            level = f"{record.levelname:8}"

        formatted = f"{timestamp} {level} {pass_str}{record.name} - {record.getMessage()}"

        extras = [
            f"{key[4:]}={value}"
            for key, value in record.__dict__.items()
            if key.startswith("ctx_")
        ]
        if extras:
            formatted += f" | {', '.join(extras)}"

        if record.exc_info:
            formatted += f"\n{self.formatException(record.exc_info)}"

        return formatted


def configure_logging(
    level: str = "INFO",
    json_format: bool = False,
    service_name: str = "tradeclarity-insights",
    environment: str = "development",
    log_file: Optional[str] = None,
) -> None:
    """
    Configure logging for the insight engine.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: Use JSON structured logging (for production)
        service_name: Service name for structured logs
        environment: Environment name (development, staging, production)
        log_file: Optional file path for JSON log output
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))

    # Replace only handlers installed by an earlier call, leave the host's alone
    for handler in [h for h in root_logger.handlers if getattr(h, _HANDLER_MARK, False)]:
        root_logger.removeHandler(handler)
        handler.close()

    if json_format:
        formatter: logging.Formatter = StructuredFormatter(service_name, environment)
    else:
        formatter = ConsoleFormatter(use_colors=sys.stdout.isatty())

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    setattr(console_handler, _HANDLER_MARK, True)
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(StructuredFormatter(service_name, environment))
        setattr(file_handler, _HANDLER_MARK, True)
        root_logger.addHandler(file_handler)


# =============================================================================
# Context Management
# =============================================================================


def set_analysis_context(
    analysis_id: Optional[str] = None, user_id: Optional[str] = None
) -> str:
    """
    Set the correlation context for an insight-generation pass.

    Args:
        analysis_id: Pass ID (generated if not provided)
        user_id: Optional user ID

    Returns:
        The analysis ID being used
    """
    pass_id = analysis_id or str(uuid.uuid4())
    analysis_id_var.set(pass_id)
    if user_id:
        user_id_var.set(user_id)
    return pass_id


def clear_analysis_context() -> None:
    """Clear the correlation context after the pass completes."""
    analysis_id_var.set(None)
    user_id_var.set(None)


def get_analysis_id() -> Optional[str]:
    return analysis_id_var.get()


# =============================================================================
# Performance Logging Decorator
# =============================================================================

T = TypeVar("T")


def log_performance(threshold_ms: float = 250.0) -> Callable:
    """
    Decorator to log how long an insight pass takes.

    Args:
        threshold_ms: Log a warning if execution exceeds this threshold

    Example:
        @log_performance(threshold_ms=100)
        def generate_value_first_insights(analytics, psychology, trades):
            ...
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        logger = logging.getLogger(func.__module__)

        @wraps(func)
        def wrapper(*args, **kwargs) -> T:
            start_time = time.perf_counter()
            extra: Dict[str, Any] = {"ctx_function": func.__name__}

            try:
                result = func(*args, **kwargs)
            except Exception as e:
                duration_ms = (time.perf_counter() - start_time) * 1000
                extra["ctx_duration_ms"] = round(duration_ms, 2)
                extra["ctx_error_type"] = type(e).__name__
                logger.error(
                    f"Operation failed: {func.__name__} - {e}",
                    extra=extra,
                )
                raise

            duration_ms = (time.perf_counter() - start_time) * 1000
            extra["ctx_duration_ms"] = round(duration_ms, 2)

            if duration_ms > threshold_ms:
                logger.warning(
                    f"Slow operation: {func.__name__} took {duration_ms:.2f}ms",
                    extra=extra,
                )
            else:
                logger.debug(
                    f"Operation completed: {func.__name__} in {duration_ms:.2f}ms",
                    extra=extra,
                )

            return result

        return wrapper

    return decorator


# =============================================================================
# Structured Log Helpers
# =============================================================================


class LogContext:
    """Context manager for adding structured fields to logs within a block."""

    def __init__(self, logger: logging.Logger, **fields: Any):
        self.logger = logger
        self.fields = {f"ctx_{k}": v for k, v in fields.items()}
        self._old_factory = None

    def __enter__(self):
        old_factory = logging.getLogRecordFactory()
        self._old_factory = old_factory
        fields = self.fields

        def record_factory(*args, **kwargs):
            record = old_factory(*args, **kwargs)
            for key, value in fields.items():
                setattr(record, key, value)
            return record

        logging.setLogRecordFactory(record_factory)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self._old_factory:
            logging.setLogRecordFactory(self._old_factory)
