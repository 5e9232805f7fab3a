"""Core retrieval, formatting and error handling."""

from .errors import (
    error_handler,
    CwlError,
    ConfigError,
    RetrievalError,
    TimeFormatError,
    MalformedDurationError,
    MalformedTimestampError,
    CallbackError,
    ValidationError
)

__all__ = [
    'error_handler',
    'CwlError',
    'ConfigError',
    'RetrievalError',
    'TimeFormatError',
    'MalformedDurationError',
    'MalformedTimestampError',
    'CallbackError',
    'ValidationError'
]
