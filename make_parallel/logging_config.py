"""
Structured logging configuration for the make_parallel package.

Provides:
- JSON formatter for machine-readable log output
- Console formatter for human-readable output
- Timing helpers (context manager and decorator)
- Centralized logging setup for the ``make_parallel`` logger tree

Usage:
    from make_parallel.logging_config import setup_logging, get_logger

    setup_logging(level=logging.INFO, json_file="make_parallel.log.json")

    logger = get_logger(__name__)
    logger.info("Direction resolved", extra={"element_id": 101, "strategy": "grid"})
"""

import json
import logging
import sys
import time
from contextlib import contextmanager
from datetime import datetime
from functools import wraps
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, Optional, TypeVar, Union

F = TypeVar('F', bound=Callable[..., Any])

PACKAGE_LOGGER = "make_parallel"

# Attributes every LogRecord carries; anything else came in through `extra=`.
_RESERVED_KEYS = frozenset({
    'name', 'msg', 'args', 'created', 'filename', 'funcName',
    'levelname', 'levelno', 'lineno', 'module', 'msecs',
    'pathname', 'process', 'processName', 'relativeCreated',
    'stack_info', 'exc_info', 'exc_text', 'thread', 'threadName',
    'message', 'asctime', 'taskName',
})


def _extra_fields(record: logging.LogRecord) -> Dict[str, Any]:
    """Collect fields attached to a record via ``extra={}``."""
    return {
        key: value for key, value in record.__dict__.items()
        if key not in _RESERVED_KEYS
    }


class JSONFormatter(logging.Formatter):
    """Formats each record as one JSON line.

    Output format:
        {"timestamp": "...", "level": "INFO", "logger": "...", "message": "...", ...}
    """

    def __init__(self, include_extra: bool = True):
        super().__init__()
        self.include_extra = include_extra

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        # Location is noise for INFO but useful when debugging or failing
        if record.levelno >= logging.WARNING or record.levelno <= logging.DEBUG:
            entry["location"] = {
                "file": record.filename,
                "line": record.lineno,
                "function": record.funcName,
            }

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        if self.include_extra:
            for key, value in _extra_fields(record).items():
                try:
                    json.dumps(value)
                    entry[key] = value
                except (TypeError, ValueError):
                    # numpy arrays, elements and the like
                    entry[key] = str(value)

        return json.dumps(entry, ensure_ascii=False)


class ConsoleFormatter(logging.Formatter):
    """Human-readable console formatter with optional ANSI colors.

    Format: [TIME] LEVEL logger: message [key=value, ...]
    """

    COLORS = {
        'DEBUG': '\033[36m',
        'INFO': '\033[32m',
        'WARNING': '\033[33m',
        'ERROR': '\033[31m',
        'CRITICAL': '\033[35m',
        'RESET': '\033[0m',
    }

    def __init__(self, use_colors: bool = True, show_extra: bool = True):
        super().__init__()
        self.use_colors = use_colors
        self.show_extra = show_extra

    def _format_level(self, level: str) -> str:
        if self.use_colors and level in self.COLORS:
            return f"{self.COLORS[level]}{level:8}{self.COLORS['RESET']}"
        return f"{level:8}"

    @staticmethod
    def _format_value(key: str, value: Any) -> str:
        if isinstance(value, float):
            return f"{key}={value:.4g}"
        if isinstance(value, (list, tuple)) and len(value) > 3:
            return f"{key}=[...{len(value)} items]"
        return f"{key}={value}"

    def format(self, record: logging.LogRecord) -> str:
        time_str = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")
        level_str = self._format_level(record.levelname)

        logger_name = record.name
        prefix = PACKAGE_LOGGER + "."
        if logger_name.startswith(prefix):
            logger_name = logger_name[len(prefix):]

        extra_str = ""
        if self.show_extra:
            extras = [self._format_value(k, v) for k, v in _extra_fields(record).items()]
            if extras:
                extra_str = " [" + ", ".join(extras) + "]"

        result = f"[{time_str}] {level_str} {logger_name}: {record.getMessage()}{extra_str}"
        if record.exc_info:
            result += "\n" + self.formatException(record.exc_info)
        return result


def setup_logging(
    level: int = logging.INFO,
    json_file: Optional[Union[str, Path]] = None,
    console: bool = True,
    use_colors: bool = True,
    root_logger: bool = False,
) -> logging.Logger:
    """Configure logging for the make_parallel package.

    Args:
        level: Minimum log level (default INFO)
        json_file: Optional path for a JSON-lines log file
        console: Enable console output on stderr
        use_colors: Use ANSI colors in console output
        root_logger: Configure the root logger instead of ``make_parallel``

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger("" if root_logger else PACKAGE_LOGGER)
    logger.setLevel(level)
    logger.handlers.clear()

    if console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(level)
        console_handler.setFormatter(ConsoleFormatter(use_colors=use_colors))
        logger.addHandler(console_handler)

    if json_file:
        json_handler = logging.FileHandler(Path(json_file), encoding='utf-8')
        json_handler.setLevel(level)
        json_handler.setFormatter(JSONFormatter())
        logger.addHandler(json_handler)

    if not root_logger:
        logger.propagate = False

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a module (typically ``__name__``)."""
    return logging.getLogger(name)


@contextmanager
def log_timing(
    logger: logging.Logger,
    operation: str,
    level: int = logging.DEBUG,
    **extra_fields: Any
) -> Iterator[Dict[str, Any]]:
    """Log start, completion and failure of an operation with its duration.

    Example:
        with log_timing(logger, "Make parallel", target=element.id):
            result = command.execute(pick, rotate)

    Yields:
        dict that the caller may fill with extra fields for the completion record
    """
    timing_info: Dict[str, Any] = {}
    start_time = time.perf_counter()

    logger.log(level, "Starting: %s", operation, extra={
        "event": "start",
        "operation": operation,
        **extra_fields,
    })

    try:
        yield timing_info
    except Exception as exc:
        elapsed = time.perf_counter() - start_time
        logger.error("Failed: %s (%.3fs) - %s", operation, elapsed, exc, extra={
            "event": "error",
            "operation": operation,
            "elapsed_seconds": elapsed,
            "error": str(exc),
            **extra_fields,
        })
        raise

    elapsed = time.perf_counter() - start_time
    timing_info['elapsed_seconds'] = elapsed
    logger.log(level, "Completed: %s (%.3fs)", operation, elapsed, extra={
        "event": "complete",
        "operation": operation,
        **extra_fields,
        **timing_info,
    })


def timed(
    logger: Optional[logging.Logger] = None,
    level: int = logging.DEBUG,
    operation: Optional[str] = None,
) -> Callable[[F], F]:
    """Decorator logging a function's execution time.

    Uses the function's module logger when ``logger`` is not given.
    """
    def decorator(func: F) -> F:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            func_logger = logger or logging.getLogger(func.__module__)
            with log_timing(func_logger, operation or func.__name__, level):
                return func(*args, **kwargs)

        return wrapper  # type: ignore
    return decorator


class _ContextFilter(logging.Filter):
    """Copies the fields of a LogContext onto every record."""

    def __init__(self, fields: Dict[str, Any]):
        super().__init__()
        self.fields = fields

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in self.fields.items():
            setattr(record, key, value)
        return True


class LogContext:
    """Adds common fields to every make_parallel log record within a scope.

    Example:
        with LogContext(reference_id=101, target_id=202):
            logger.info("Resolving directions")  # carries both ids
    """

    _current: Optional['LogContext'] = None

    def __init__(self, **fields: Any):
        self.fields = fields
        self._previous: Optional['LogContext'] = None
        self._filter: Optional[_ContextFilter] = None

    def __enter__(self) -> 'LogContext':
        self._previous = LogContext._current
        LogContext._current = self
        self._filter = _ContextFilter(self.fields)
        # Logger filters only see records logged on that logger itself;
        # handler filters also see records propagated from child modules.
        package_logger = logging.getLogger(PACKAGE_LOGGER)
        package_logger.addFilter(self._filter)
        for handler in package_logger.handlers:
            handler.addFilter(self._filter)
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if self._filter:
            package_logger = logging.getLogger(PACKAGE_LOGGER)
            package_logger.removeFilter(self._filter)
            for handler in package_logger.handlers:
                handler.removeFilter(self._filter)
        LogContext._current = self._previous

    @classmethod
    def current(cls) -> Optional['LogContext']:
        """Get the innermost active context."""
        return cls._current


def configure_default_logging(verbose: bool = False) -> logging.Logger:
    """Console logging at DEBUG when verbose, INFO otherwise."""
    level = logging.DEBUG if verbose else logging.INFO
    return setup_logging(level=level, console=True, use_colors=True)
