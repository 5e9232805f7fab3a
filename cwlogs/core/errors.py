"""Module for centralized error handling."""

from typing import Optional, Any, Dict
from rich.console import Console
from rich.markup import escape
from functools import wraps
from typing import Type, Tuple, Callable
import logging

# Errors go to stderr so command output on stdout stays clean
console = Console(stderr=True)

# Define error codes
ERROR_CODES = {
    'CONFIG_ERROR': 1000,
    'RETRIEVAL_ERROR': 2000,
    'TIME_FORMAT_ERROR': 3000,
    'CALLBACK_ERROR': 4000,
    'VALIDATION_ERROR': 5000,
}

class CwlError(Exception):
    """Base exception class for cwlogs."""

    def __init__(
        self,
        message: str,
        error_code: int,
        details: Optional[Dict[str, Any]] = None
    ):
        """Initialize error.

        Args:
            message: Error message
            error_code: Numeric error code
            details: Optional dictionary with additional error details
        """
        super().__init__(message)
        self.error_code = error_code
        self.details = details or {}

class ConfigError(CwlError):
    """Configuration-related errors."""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, ERROR_CODES['CONFIG_ERROR'], details)

class RetrievalError(CwlError):
    """A page fetch against the log store failed.

    ``details`` always names the log group (or listing prefix) and the
    store operation that failed.
    """
    def __init__(
        self,
        message: str,
        group: Optional[str] = None,
        operation: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        merged = {"group": group, "operation": operation}
        merged.update(details or {})
        super().__init__(message, ERROR_CODES['RETRIEVAL_ERROR'], merged)
        self.group = group
        self.operation = operation

class TimeFormatError(CwlError):
    """User-supplied time expression could not be parsed."""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, ERROR_CODES['TIME_FORMAT_ERROR'], details)

class MalformedDurationError(TimeFormatError):
    """Relative duration such as ``30m`` could not be parsed."""

class MalformedTimestampError(TimeFormatError):
    """Absolute timestamp could not be parsed."""

class CallbackError(CwlError):
    """The consumer of a live tail failed while handling an event."""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, ERROR_CODES['CALLBACK_ERROR'], details)

class ValidationError(CwlError):
    """Invalid user input."""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, ERROR_CODES['VALIDATION_ERROR'], details)

def report_error(error: Exception) -> None:
    """Print an error to the console and log it.

    Args:
        error: The exception to report
    """
    if isinstance(error, CwlError):
        console.print(f"[red]Error {error.error_code}:[/red] {escape(str(error))}", highlight=False)
        details = {k: v for k, v in error.details.items() if v is not None}
        if details:
            console.print("[yellow]Details:[/yellow]")
            for key, value in details.items():
                console.print(f"  [blue]{key}:[/blue] {escape(str(value))}", highlight=False)
    else:
        console.print(f"[red]Unexpected Error:[/red] {escape(str(error))}", highlight=False)

    logger = logging.getLogger(__name__)
    logger.debug(
        "Error occurred",
        exc_info=error,
        extra={
            "error_code": getattr(error, "error_code", None),
            "details": getattr(error, "details", None)
        }
    )

def error_handler(reraise: bool = True, exclude: Tuple[Type[BaseException], ...] = None):
    """Decorator for handling errors in functions.

    Args:
        reraise: Whether to reraise the exception after handling
        exclude: Tuple of exception types to exclude from handling

    Returns:
        Decorated function
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return func(*args, **kwargs)
            except Exception as e:
                if exclude and isinstance(e, exclude):
                    raise

                report_error(e)

                if reraise:
                    raise

            return None
        return wrapper
    return decorator
