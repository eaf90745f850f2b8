"""Core components for the browser test harness."""

from .config import Config
from .exceptions import (
    HarnessError,
    ConditionTimeoutError,
    CaptureError,
    DriverError,
    ValidationError,
)
from .logging_config import setup_logging, get_logger

__all__ = [
    "Config",
    "HarnessError",
    "ConditionTimeoutError",
    "CaptureError",
    "DriverError",
    "ValidationError",
    "setup_logging",
    "get_logger",
]
