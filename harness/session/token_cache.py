"""
Anti-CSRF secret token cache.

State-changing requests need the form token of the current authenticated
session. The cache holds one token per browser session and is refreshed only
when ``recache`` is called: after session start, every login and every logout.
Nothing invalidates it automatically.
"""

from typing import Optional

from ..core.config import Config
from ..core.logging_config import get_logger, timed


class SecretTokenCache:
    """Single-slot token cache bound to one browser session."""

    def __init__(self, driver, config: Config):
        """
        Initialize an empty cache.

        Args:
            driver: BrowserDriver of the session the token belongs to
            config: Configuration holding the registration endpoint and field locator
        """
        self.driver = driver
        self.config = config
        self.logger = get_logger(__name__)
        self._token: Optional[str] = None

    @property
    def is_cached(self) -> bool:
        return self._token is not None

    @timed("recache_secret_token")
    def recache(self) -> None:
        """
        Read a fresh token from the registration form.

        Navigates to the registration page, stores the form token, then goes
        back to where the browser was. The browser is navigated twice even
        when reading the token fails.
        """
        previous_url = self.driver.get_current_url()

        self.driver.navigate(self.config.registration_path)
        try:
            self.driver.wait_for_load(self.config.poll_timeout_ms)
            # A missing field is stored as an empty token
            self._token = self.driver.get_field_value(self.config.token_field_locator) or ""
            if not self._token:
                self.logger.warning(
                    "Failed to cache anti-CSRF secret token, some tests might fail!",
                    extra={"metadata": {"locator": self.config.token_field_locator}},
                )
            else:
                self.logger.debug("Anti-CSRF secret token cached")
        finally:
            self._restore_location(previous_url)

    def _restore_location(self, previous_url: Optional[str]) -> None:
        if self._is_usable_location(previous_url):
            self.driver.navigate(previous_url)
        else:
            self.logger.debug(
                f"Previous location [{previous_url}] unusable, returning to home page"
            )
            self.driver.navigate(self.config.home_path)
        self.driver.wait_for_load(self.config.poll_timeout_ms)

    def _is_usable_location(self, url: Optional[str]) -> bool:
        # Browser start pages (about:blank, data:) do not load reliably
        if not url:
            return False
        return url.startswith(self.config.base_url)

    def get_token(self) -> str:
        """Cached token, or an empty string when ``recache`` never ran."""
        if self._token is None:
            self.logger.warning(
                "No cached anti-CSRF token found. Make sure to call recache() before "
                "get_token(), otherwise this test might fail."
            )
            return ""
        return self._token
