"""
Capabilities the harness needs from a browser automation driver.

The harness never talks to a browser directly; it is a client of whatever
transport implements this protocol.
"""

from typing import Any, Optional, Protocol, runtime_checkable


@runtime_checkable
class BrowserDriver(Protocol):
    """Browser operations consumed by the poller, capturer and token cache."""

    def navigate(self, url: str) -> None: ...

    def get_current_url(self) -> str: ...

    def wait_for_load(self, timeout_ms: int) -> None: ...

    def find_text(self, locator: str) -> Optional[str]:
        """Text of the element, or None when it is absent."""
        ...

    def is_present(self, locator: str) -> bool: ...

    def is_text_present_on_page(self, text: str) -> bool: ...

    def get_field_value(self, locator: str) -> Optional[str]: ...

    def click(self, locator: str) -> None: ...

    def type(self, locator: str, text: str) -> None: ...

    def set_checked(self, locator: str) -> None: ...

    def evaluate_script(self, expression: str) -> Any: ...

    def is_alert_present(self) -> bool: ...

    def is_confirmation_present(self) -> bool: ...

    def capture_screenshot(self) -> bytes: ...

    def get_page_markup(self) -> str: ...


@runtime_checkable
class NativeConditionWaiter(Protocol):
    """Optional capability: the driver polls a script condition itself."""

    def wait_for_condition(self, script: str, timeout_ms: int) -> None: ...


class Authenticator(Protocol):
    """Skin-specific login and logout steps."""

    def login(self, username: str, password: str, remember_me: bool) -> None: ...

    def login_as_admin(self) -> None: ...

    def logout(self) -> None: ...
