"""Structured logging for cwlogs.

Log entries are JSON objects on stderr so they never mix with the events
a command prints on stdout. Entries made while a command runs carry the
command name and log group bound through :func:`bind_command`.
"""

import logging
import sys
import time
from functools import wraps
from typing import Any, Callable, List, Optional

import structlog
from structlog.processors import CallsiteParameter
from structlog.stdlib import ProcessorFormatter
from structlog.types import Processor

# Third-party loggers kept quiet even under -v
NOISY_LOGGERS = ("botocore", "boto3", "urllib3")


def _shared_processors(with_callsite: bool) -> List[Processor]:
    processors: List[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]
    if with_callsite:
        processors.append(structlog.processors.CallsiteParameterAdder(
            parameters={
                CallsiteParameter.MODULE,
                CallsiteParameter.FUNC_NAME,
                CallsiteParameter.LINENO,
            }
        ))
    return processors


def setup_logging(level: str = "WARNING", enable_debug: bool = False) -> None:
    """Route structlog and stdlib logging to a JSON handler on stderr.

    Calling this again replaces the handler installed by the previous call.

    Args:
        level: Root logging level name
        enable_debug: Add module, function and line number to each entry
    """
    shared = _shared_processors(enable_debug)

    structlog.configure(
        processors=[*shared, ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(ProcessorFormatter(
        processor=structlog.processors.JSONRenderer(),
        foreign_pre_chain=shared,
    ))

    root_logger = logging.getLogger()
    for existing in root_logger.handlers[:]:
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)
    root_logger.setLevel(level.upper())

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger for module ``name``."""
    return structlog.get_logger(name)


def bind_command(command: str, log_group: Optional[str] = None) -> None:
    """Attach the running command (and its log group) to later entries."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(command=command)
    if log_group:
        structlog.contextvars.bind_contextvars(log_group=log_group)


def log_duration(logger: structlog.stdlib.BoundLogger) -> Callable:
    """Decorator logging ``function_completed`` with ``duration_ms`` at debug.

    Args:
        logger: Logger instance to use
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            start = time.perf_counter()
            try:
                return func(*args, **kwargs)
            finally:
                logger.debug(
                    "function_completed",
                    function=func.__name__,
                    duration_ms=round((time.perf_counter() - start) * 1000, 3),
                )
        return wrapper
    return decorator
