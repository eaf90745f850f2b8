"""
Logging for the browser test harness.

Harness modules log through the standard library with an ``extra={"metadata":
{...}}`` payload. ``setup_logging`` installs one formatter for the whole run:
JSON lines in CI, a compact text line locally. The driver adapter logs every
browser call at DEBUG, so a DEBUG log of a failing test also holds the page
markup fetched by the failure capture.
"""

import functools
import json
import logging
import logging.handlers
import sys
import time
from datetime import datetime, timezone
from typing import Optional

from .config import Config

LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5


class StructuredFormatter(logging.Formatter):
    """One JSON object per record."""

    def __init__(self, run_id: str):
        super().__init__()
        self.run_id = run_id

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            # A run_id passed through get_logger() context wins over the default
            "run_id": getattr(record, "run_id", self.run_id),
            "message": record.getMessage(),
        }

        metadata = getattr(record, "metadata", None)
        if metadata:
            entry["metadata"] = metadata

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, ensure_ascii=False, default=str)


class TextFormatter(logging.Formatter):
    """Single-line text for terminals and the local log file."""

    def __init__(self, run_id: str):
        super().__init__(datefmt="%H:%M:%S")
        self.run_id = run_id

    def format(self, record: logging.LogRecord) -> str:
        run_id = getattr(record, "run_id", self.run_id)
        line = (
            f"{self.formatTime(record, self.datefmt)} {record.levelname:<8} "
            f"[{run_id[:8]}] {record.name}: {record.getMessage()}"
        )

        metadata = getattr(record, "metadata", None)
        if metadata:
            line += " | " + " ".join(f"{key}={value}" for key, value in metadata.items())

        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)

        return line


def _is_harness_handler(handler: logging.Handler) -> bool:
    return isinstance(handler.formatter, (StructuredFormatter, TextFormatter))


def setup_logging(config: Config, run_id: str) -> logging.Logger:
    """
    Route all log records of a test run to the console and, outside CI, a file.

    Calling it again replaces the handlers installed by the previous call;
    handlers installed by anything else are left alone.

    Args:
        config: Harness configuration (level, format, CI mode, logs directory)
        run_id: Identifier stamped on every record

    Returns:
        The root logger
    """
    root_logger = logging.getLogger()
    for handler in [h for h in root_logger.handlers if _is_harness_handler(h)]:
        root_logger.removeHandler(handler)
        handler.close()

    level = getattr(logging, config.log_level)
    root_logger.setLevel(level)
    formatter = (
        StructuredFormatter(run_id) if config.log_format == "json" else TextFormatter(run_id)
    )

    handlers = [logging.StreamHandler(sys.stdout)]
    # CI keeps stdout, local runs also keep a rotating file
    if not config.is_ci_mode:
        handlers.append(
            logging.handlers.RotatingFileHandler(
                config.get_log_file_path(),
                maxBytes=LOG_FILE_MAX_BYTES,
                backupCount=LOG_FILE_BACKUPS,
                encoding="utf-8",
            )
        )
    for handler in handlers:
        handler.setFormatter(formatter)
        handler.setLevel(level)
        root_logger.addHandler(handler)

    logging.getLogger(__name__).info(
        f"Logging configured for run {run_id}",
        extra={"metadata": {"level": config.log_level, "format": config.log_format}},
    )
    return root_logger


class ContextAdapter(logging.LoggerAdapter):
    """Adds fixed attributes (such as ``run_id``) to every record."""

    def process(self, msg, kwargs):
        kwargs["extra"] = {**self.extra, **kwargs.get("extra", {})}
        return msg, kwargs


def get_logger(name: str, **context) -> logging.Logger:
    """Logger for ``name``, wrapped in a ContextAdapter when context is given."""
    logger = logging.getLogger(name)
    if context:
        return ContextAdapter(logger, context)
    return logger


def log_performance(logger: logging.Logger, operation: str, duration: float, **metadata):
    """Log how long an operation took, at INFO."""
    logger.info(
        f"Performance: {operation} completed in {duration:.2f}s",
        extra={"metadata": {"operation": operation, "duration": duration, **metadata}},
    )


def log_driver_call(
    logger: logging.Logger,
    method: str,
    duration: float,
    success: bool,
    **metadata,
):
    """Log one browser driver call: DEBUG when it worked, WARNING when it failed."""
    status = "success" if success else "failed"
    logger.log(
        logging.DEBUG if success else logging.WARNING,
        f"Driver call: {method} {status} in {duration:.3f}s",
        extra={
            "metadata": {
                "method": method,
                "duration": duration,
                "success": success,
                **metadata,
            }
        },
    )


def timed(operation_name: str, logger: Optional[logging.Logger] = None):
    """
    Decorator logging the duration of each call, or the error that ended it.

    Args:
        operation_name: Name used in the log messages
        logger: Logger to use; defaults to one named after the function
    """

    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            log = logger or get_logger(f"{func.__module__}.{func.__name__}")
            start = time.monotonic()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                log.error(
                    f"{operation_name} failed",
                    extra={
                        "metadata": {
                            "operation": operation_name,
                            "duration": time.monotonic() - start,
                            "success": False,
                            "error": str(e),
                        }
                    },
                )
                raise

            log_performance(log, operation_name, time.monotonic() - start, success=True)
            return result

        return wrapper

    return decorator
