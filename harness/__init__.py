"""
Browser test harness - failure-capturing execution of browser acceptance tests.

Synchronizes test code with asynchronous page rendering, captures a screenshot
when a test fails without hiding the failure, and keeps the session's
anti-CSRF token at hand.
"""

__version__ = "0.1.0"

from .core.config import Config
from .core.exceptions import HarnessError, ConditionTimeoutError
from .core.logging_config import setup_logging
from .session.context import SessionContext
from .testcase import BrowserTest

__all__ = [
    "Config",
    "HarnessError",
    "ConditionTimeoutError",
    "setup_logging",
    "SessionContext",
    "BrowserTest",
]
