"""
Browser driver abstraction for the harness.

The protocol lists what the harness consumes; the Playwright adapter is the
shipped implementation.
"""

from .driver import BrowserDriver, NativeConditionWaiter, Authenticator
from .playwright_driver import PlaywrightDriver

__all__ = [
    "BrowserDriver",
    "NativeConditionWaiter",
    "Authenticator",
    "PlaywrightDriver",
]
