"""
Per-session state threaded through tests.

Bundles the browser driver with the poller and the token cache that operate on
it, so nothing about a session lives in module globals.
"""

from dataclasses import dataclass

from ..core.config import Config
from ..polling.poller import ConditionPoller
from .token_cache import SecretTokenCache


@dataclass
class SessionContext:
    """Everything a test needs to talk to one browser session."""

    driver: object
    config: Config
    poller: ConditionPoller
    token_cache: SecretTokenCache

    @classmethod
    def open(cls, driver, config: Config) -> "SessionContext":
        """Build a context for ``driver`` with an empty token cache."""
        return cls(
            driver=driver,
            config=config,
            poller=ConditionPoller.from_config(driver, config),
            token_cache=SecretTokenCache(driver, config),
        )
