"""Standardized error handling and performance utilities.

This module provides:
1. Consistent error logging with structured context
2. User-facing error messages for failed exports
3. Performance timing decorator for profiling the export phases
4. Error collection for batch steps that must not stop on one failure

Usage in the export service:
    from utils.error_handling import log_exception, user_error_message

    try:
        service.export(request)
    except ReportExportError as e:
        log_exception(e, "Report export failed")
        print(user_error_message(e))

Performance timing usage:
    from utils.error_handling import timed

    @timed
    def render_report():
        ...

    # Enable timing with: PLANTDBG_PERF_DEBUG=1
"""

from __future__ import annotations

import logging
import time
from functools import wraps
from typing import Any, Callable, Optional, TypeVar

from .env import is_perf_debug

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

GENERIC_FAILURE_MESSAGE = "Failed to generate PDF. Please try again."


def timed(func: F) -> F:
    """Decorator to log execution time of functions.

    Only active when PLANTDBG_PERF_DEBUG=1 is set. Logs at DEBUG level.
    """
    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        if not is_perf_debug():
            return func(*args, **kwargs)

        start = time.perf_counter()
        try:
            result = func(*args, **kwargs)
            elapsed = time.perf_counter() - start
            logger.debug(f"PERF: {func.__module__}.{func.__name__} took {elapsed:.3f}s")
            return result
        except Exception:
            elapsed = time.perf_counter() - start
            logger.debug(f"PERF: {func.__module__}.{func.__name__} failed after {elapsed:.3f}s")
            raise

    return wrapper  # type: ignore


def format_error_message(
    error: Exception,
    context: Optional[str] = None,
    include_type: bool = True,
) -> str:
    """Format an exception into a readable one-line message.

    Args:
        error: The exception that occurred
        context: Optional context describing what was being done
        include_type: Whether to include the exception type name
    """
    error_str = str(error)

    if not error_str or error_str == "None":
        error_str = type(error).__name__
        include_type = False

    parts = []
    if context:
        parts.append(context)

    if include_type:
        parts.append(f"{type(error).__name__}: {error_str}")
    else:
        parts.append(error_str)

    return " - ".join(parts) if len(parts) > 1 else parts[0]


def user_error_message(error: Exception) -> str:
    """Message shown to the user for a failed export.

    Export errors carry their own ``user_message``; anything else gets the
    generic retry prompt so internals never reach the user.
    """
    return getattr(error, "user_message", None) or GENERIC_FAILURE_MESSAGE


def log_exception(
    error: Exception,
    context: str,
    extra: Optional[dict] = None,
    level: int = logging.ERROR,
) -> None:
    """Log an exception with structured context and its traceback."""
    log_extra = {"event": "error", "error_type": type(error).__name__}
    if extra:
        log_extra.update(extra)

    logger.log(level, f"{context}: {error}", extra=log_extra, exc_info=True)


class ErrorCollector:
    """Collects errors during batch operations without stopping.

    Example:
        collector = ErrorCollector("image load")
        for path in paths:
            with collector.catch(f"Loading {path.name}"):
                load(path)

        if collector.has_errors:
            logger.warning(collector.get_summary())
    """

    def __init__(self, operation_name: str):
        self.operation_name = operation_name
        self.errors: list[str] = []
        self.exceptions: list[Exception] = []
        self._current_context: Optional[str] = None

    @property
    def has_errors(self) -> bool:
        return len(self.errors) > 0

    def catch(self, context: str):
        """Context manager that catches and collects errors."""
        self._current_context = context
        return self

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_val is not None and isinstance(exc_val, Exception):
            self.add_exception(exc_val, self._current_context)
            return True
        return False

    def add_exception(self, error: Exception, context: Optional[str] = None) -> None:
        """Record an exception raised elsewhere (e.g. in a worker thread)."""
        self.errors.append(format_error_message(error, context))
        self.exceptions.append(error)
        log_exception(
            error,
            f"{self.operation_name}: {context or 'unknown'}",
            level=logging.WARNING,
        )

    def add_error(self, message: str) -> None:
        """Manually add an error message."""
        self.errors.append(message)
        logger.warning(f"{self.operation_name}: {message}")

    def get_summary(self) -> str:
        """Get a summary of collected errors."""
        if not self.errors:
            return f"{self.operation_name} completed successfully"
        return f"{self.operation_name} completed with {len(self.errors)} error(s)"
