"""
Centralized error handling for the CTC estimator.

Defines the user-facing error taxonomy and the decorators/utilities used
for consistent logging and fallback behavior around best-effort operations.
"""

import logging
from functools import wraps
from typing import Any, Callable, Optional, TypeVar

T = TypeVar("T")


class CTCEstimatorError(Exception):
    """Base class for errors that stop an analysis and are shown to the user."""

    user_message: str = "Something went wrong while analyzing this profile."

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.user_message)
        self.user_message = message or self.user_message


class InvalidProfileUrlError(CTCEstimatorError):
    """The submitted URL is not a github.com profile URL."""

    user_message = "Please enter a valid GitHub profile URL (e.g. https://github.com/username)."


class InvalidAnalysisInputError(CTCEstimatorError):
    """Experience bracket or target role missing."""

    user_message = "Please select your years of experience and target role."


class ProfileUnavailableError(CTCEstimatorError):
    """The GitHub profile could not be fetched (not found, rate limited or unreachable)."""

    user_message = (
        "Could not fetch this GitHub profile. Check the username or try again later."
    )


def pipeline_operation(
    operation_name: str,
    layer: str = "unknown",
    critical: bool = False,
    log_success: bool = True,
    fallback_value: Any = None,
    reraise: bool = False,
):
    """
    Decorator for pipeline operations with consistent error handling.

    Provides:
    - Automatic INFO logging on success (if log_success=True)
    - ERROR logging on failure for critical operations
    - WARNING logging on failure for non-critical operations
    - Stack traces for critical errors
    - Optional re-raising of exceptions

    Args:
        operation_name: Human-readable operation name (e.g., "MongoDB insert")
        layer: Layer identifier (e.g., "persist", "github")
        critical: If True, logs at ERROR level with stack trace; if False, WARNING
        log_success: If True, logs successful completion at INFO level
        fallback_value: Value (or zero-arg callable producing it, called with
            the exception) to return on failure
        reraise: If True, re-raises the exception after logging

    Usage:
        @pipeline_operation("MongoDB insert", layer="persist", fallback_value=None)
        def _insert(self, doc):
            ...
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        def wrapper(*args, **kwargs) -> T:
            logger = logging.getLogger(func.__module__)
            try:
                result = func(*args, **kwargs)
                if log_success:
                    logger.info(f"[{layer}] [{operation_name}] ✓ Completed successfully")
                return result
            except Exception as e:
                log_level = logging.ERROR if critical else logging.WARNING
                logger.log(
                    log_level,
                    f"[{layer}] [{operation_name}] ✗ Failed: {e}",
                    exc_info=critical,
                )
                if reraise:
                    raise
                if callable(fallback_value):
                    return fallback_value(e)
                return fallback_value

        return wrapper

    return decorator


def log_on_exception(
    logger: logging.Logger,
    operation: str,
    level: int = logging.WARNING,
    include_traceback: bool = False,
):
    """
    Context manager for logging exceptions without swallowing them.

    Usage:
        with log_on_exception(logger, "MongoDB ping", level=logging.ERROR):
            client.admin.command("ping")

    Args:
        logger: Logger instance to use
        operation: Operation description for the log message
        level: Log level (default: WARNING)
        include_traceback: Whether to include stack trace in log
    """

    class ExceptionLogger:
        def __enter__(self):
            return self

        def __exit__(self, exc_type, exc_val, exc_tb):
            if exc_val is not None:
                logger.log(level, f"[{operation}] Failed: {exc_val}", exc_info=include_traceback)
            # Never suppress
            return False

    return ExceptionLogger()


def safe_execute(
    func: Callable[..., T],
    *args,
    operation_name: str = "operation",
    logger: Optional[logging.Logger] = None,
    fallback: T = None,
    critical: bool = False,
    **kwargs,
) -> T:
    """
    Execute a function safely with error handling and logging.

    Alternative to the decorator for one-off operations such as jobs handed
    to a background executor.

    Returns:
        Function result or fallback value on error
    """
    if logger is None:
        logger = logging.getLogger(__name__)

    try:
        return func(*args, **kwargs)
    except Exception as e:
        log_level = logging.ERROR if critical else logging.WARNING
        logger.log(
            log_level,
            f"[{operation_name}] Failed: {e}",
            exc_info=critical,
        )
        return fallback
