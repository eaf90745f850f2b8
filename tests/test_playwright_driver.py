"""
Unit tests for the Playwright driver adapter.

The Playwright page is mocked; these tests check how driver calls map onto
page calls, how dialogs are tracked and how errors are converted.
"""

import logging
from unittest.mock import MagicMock, Mock, patch

import pytest
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from harness.core.exceptions import ConditionTimeoutError, DriverError
from harness.browser.playwright_driver import PlaywrightDriver
from harness.polling.poller import ConditionPoller


@pytest.fixture
def page():
    page = MagicMock()
    page.url = "http://localhost:8080/xwiki/bin/view/Main/WebHome"
    return page


@pytest.fixture
def driver(page, temp_config):
    return PlaywrightDriver(page, temp_config)


def _open_dialog(page, dialog_type, message):
    handler = page.on.call_args[0][1]
    dialog = Mock(type=dialog_type, message=message)
    handler(dialog)
    return dialog


class TestPlaywrightDriver:
    """Test cases for PlaywrightDriver."""

    def test_registers_dialog_listener(self, driver, page):
        assert page.on.call_args[0][0] == "dialog"

    def test_navigate_resolves_relative_urls(self, driver, page):
        driver.navigate("/xwiki/bin/view/Sandbox/WebHome")

        page.goto.assert_called_once_with("http://localhost:8080/xwiki/bin/view/Sandbox/WebHome")

    def test_get_current_url(self, driver):
        assert driver.get_current_url() == "http://localhost:8080/xwiki/bin/view/Main/WebHome"

    def test_wait_for_load(self, driver, page):
        driver.wait_for_load(5000)

        page.wait_for_load_state.assert_called_once_with("load", timeout=5000)

    def test_find_text_absent_element(self, driver, page):
        page.locator.return_value.count.return_value = 0

        assert driver.find_text("#status") is None

    def test_find_text_present_element(self, driver, page):
        element = page.locator.return_value
        element.count.return_value = 1
        element.first.inner_text.return_value = "Saved"

        assert driver.find_text("#status") == "Saved"
        page.locator.assert_called_with("#status")

    def test_is_present(self, driver, page):
        page.locator.return_value.count.return_value = 2

        assert driver.is_present("li") is True

    def test_is_text_present_on_page(self, driver, page):
        page.inner_text.return_value = "Welcome to your wiki"

        assert driver.is_text_present_on_page("Welcome") is True
        assert driver.is_text_present_on_page("Goodbye") is False
        page.inner_text.assert_called_with("body")

    def test_get_field_value(self, driver, page):
        element = page.locator.return_value
        element.count.return_value = 1
        element.first.get_attribute.return_value = "abc123"

        assert driver.get_field_value("//input[@name='form_token']") == "abc123"
        element.first.get_attribute.assert_called_once_with("value")

    def test_form_actions(self, driver, page):
        driver.click("#save")
        driver.type("#title", "Hello")
        driver.set_checked("#remember")

        page.click.assert_called_once_with("#save")
        page.fill.assert_called_once_with("#title", "Hello")
        page.check.assert_called_once_with("#remember")

    def test_evaluate_script(self, driver, page):
        page.evaluate.return_value = 3

        assert driver.evaluate_script("1 + 2") == 3

    def test_playwright_errors_become_driver_errors(self, driver, page):
        page.click.side_effect = PlaywrightError("element is detached")

        with pytest.raises(DriverError) as exc_info:
            driver.click("#save")

        assert exc_info.value.method == "click"
        assert exc_info.value.locator == "#save"
        assert "element is detached" in str(exc_info.value)

    def test_wait_for_condition(self, driver, page):
        driver.wait_for_condition("window.ready", 2000)

        page.wait_for_function.assert_called_once_with("window.ready", timeout=2000)

    def test_wait_for_condition_timeout(self, driver, page):
        page.wait_for_function.side_effect = PlaywrightTimeoutError("Timeout 2000ms exceeded")

        with pytest.raises(ConditionTimeoutError) as exc_info:
            driver.wait_for_condition("window.ready", 2000)

        assert str(exc_info.value) == "Condition [window.ready] was not satisfied"
        assert exc_info.value.timeout_ms == 2000

    def test_alert_tracking(self, driver, page):
        assert driver.is_alert_present() is False

        dialog = _open_dialog(page, "alert", "Page saved")

        assert driver.is_alert_present() is True
        assert driver.is_confirmation_present() is False
        assert driver.accept_dialog() == "Page saved"
        dialog.accept.assert_called_once_with()
        assert driver.is_alert_present() is False

    def test_confirmation_tracking(self, driver, page):
        dialog = _open_dialog(page, "confirm", "Delete page?")

        assert driver.is_confirmation_present() is True
        assert driver.dismiss_dialog() == "Delete page?"
        dialog.dismiss.assert_called_once_with()

    def test_no_pending_dialog(self, driver):
        assert driver.accept_dialog() is None
        assert driver.dismiss_dialog() is None

    def test_capture_screenshot(self, driver, page):
        page.screenshot.return_value = b"png-bytes"

        assert driver.capture_screenshot() == b"png-bytes"
        page.screenshot.assert_called_once_with(full_page=True)

    def test_get_page_markup_is_logged(self, driver, page, caplog):
        page.content.return_value = "<html><body>Oops</body></html>"

        with caplog.at_level(logging.DEBUG, logger="harness.browser.playwright_driver"):
            markup = driver.get_page_markup()

        assert markup == "<html><body>Oops</body></html>"
        record = [r for r in caplog.records if r.getMessage() == "Page markup captured"][0]
        assert record.metadata["markup"] == markup

    def test_launch_and_close(self, temp_config):
        with patch("harness.browser.playwright_driver.sync_playwright") as mock_sync:
            playwright = mock_sync.return_value.start.return_value
            browser = playwright.chromium.launch.return_value

            with PlaywrightDriver.launch(temp_config) as driver:
                assert driver.page is browser.new_page.return_value

            playwright.chromium.launch.assert_called_once_with(headless=True)
            browser.close.assert_called_once_with()
            playwright.stop.assert_called_once_with()

    def test_launch_failure_stops_playwright(self, temp_config):
        with patch("harness.browser.playwright_driver.sync_playwright") as mock_sync:
            playwright = mock_sync.return_value.start.return_value
            playwright.chromium.launch.side_effect = PlaywrightError("no chromium")

            with pytest.raises(DriverError, match="Failed to launch browser"):
                PlaywrightDriver.launch(temp_config)

            playwright.stop.assert_called_once_with()

    def test_dialog_checks_let_playwright_dispatch_events(self, driver, page):
        driver.is_alert_present()
        driver.is_confirmation_present()

        assert page.wait_for_timeout.call_count == 2
        page.wait_for_timeout.assert_called_with(0)

    def test_wait_for_alert_sees_dialog_opened_after_last_call(self, driver, page, fake_clock):
        handler = page.on.call_args[0][1]
        alert = Mock(type="alert", message="Saved in the background")

        def dispatch(timeout):
            # The dialog event arrives during the third call into the page
            if page.wait_for_timeout.call_count == 3:
                handler(alert)

        page.wait_for_timeout.side_effect = dispatch
        poller = ConditionPoller(driver, clock=fake_clock, sleep=fake_clock.sleep)

        poller.wait_for_alert()

        assert page.wait_for_timeout.call_count == 3
        assert fake_clock.sleeps == [0.5, 0.5]
        assert driver.accept_dialog() == "Saved in the background"
