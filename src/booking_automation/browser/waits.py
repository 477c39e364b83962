from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import TypeVar

from booking_automation.browser.driver import BrowserDriver, BrowserElement
from booking_automation.pages.locators import Locator
from booking_automation.utils.errors import ElementWaitError, StaleElementError, WaitTimeoutError

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_POLL_INTERVAL = 0.25


def poll(
    probe: Callable[[], T],
    *,
    timeout: float,
    interval: float = DEFAULT_POLL_INTERVAL,
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], None] = time.sleep,
    description: str = "condition",
) -> T:
    """
    What it does:
    - Calls `probe` until it returns a truthy value or `timeout` seconds pass.

    Why it matters:
    - Every wait in the project (elements, spinners, windows, calendar header)
      goes through this one bounded-retry loop.

    Behavior:
    - StaleElementError raised by the probe counts as "not ready yet".
    - The probe always runs at least once, and once more right at the deadline.
    - Raises WaitTimeoutError when the deadline passes.
    """
    deadline = clock() + timeout
    while True:
        try:
            result = probe()
        except StaleElementError:
            result = None
        if result:
            return result

        remaining = deadline - clock()
        if remaining <= 0:
            raise WaitTimeoutError(f"Timed out after {timeout:g}s waiting for {description}")
        sleep(min(interval, remaining))


# -------------------- Conditions --------------------
# Each condition is a callable (driver) -> value; falsy means "keep polling".


def visibility_of(locator: Locator) -> Callable[[BrowserDriver], BrowserElement | None]:
    def _condition(driver: BrowserDriver) -> BrowserElement | None:
        element = driver.find_element(locator.selector)
        if element is not None and element.is_displayed():
            return element
        return None

    return _condition


def visibility_of_all(locator: Locator) -> Callable[[BrowserDriver], list[BrowserElement]]:
    def _condition(driver: BrowserDriver) -> list[BrowserElement]:
        elements = driver.find_elements(locator.selector)
        if elements and all(e.is_displayed() for e in elements):
            return elements
        return []

    return _condition


def element_to_be_clickable(locator: Locator) -> Callable[[BrowserDriver], BrowserElement | None]:
    def _condition(driver: BrowserDriver) -> BrowserElement | None:
        element = driver.find_element(locator.selector)
        if element is not None and element.is_displayed() and element.is_enabled():
            return element
        return None

    return _condition


def element_is_clickable(element: BrowserElement) -> Callable[[BrowserDriver], BrowserElement | None]:
    def _condition(driver: BrowserDriver) -> BrowserElement | None:
        if element.is_displayed() and element.is_enabled():
            return element
        return None

    return _condition


def presence_of(locator: Locator) -> Callable[[BrowserDriver], BrowserElement | None]:
    def _condition(driver: BrowserDriver) -> BrowserElement | None:
        return driver.find_element(locator.selector)

    return _condition


def invisibility_of(locator: Locator) -> Callable[[BrowserDriver], bool]:
    def _condition(driver: BrowserDriver) -> bool:
        try:
            return all(not e.is_displayed() for e in driver.find_elements(locator.selector))
        except StaleElementError:
            return True

    return _condition


def staleness_of(element: BrowserElement) -> Callable[[BrowserDriver], bool]:
    def _condition(driver: BrowserDriver) -> bool:
        try:
            element.is_enabled()
        except StaleElementError:
            return True
        return False

    return _condition


def text_changed(locator: Locator, old_text: str) -> Callable[[BrowserDriver], str | None]:
    def _condition(driver: BrowserDriver) -> str | None:
        element = driver.find_element(locator.selector)
        if element is None:
            return None
        text = element.text.strip()
        return text if text and text != old_text else None

    return _condition


def visible_text(locator: Locator) -> Callable[[BrowserDriver], str | None]:
    def _condition(driver: BrowserDriver) -> str | None:
        element = driver.find_element(locator.selector)
        if element is None or not element.is_displayed():
            return None
        return element.text.strip() or None

    return _condition


def value_to_be(element: BrowserElement, value: str) -> Callable[[BrowserDriver], bool]:
    def _condition(driver: BrowserDriver) -> bool:
        return value in element.input_value()

    return _condition


# -------------------- Policy --------------------


class WaitPolicy:
    """
    What it does:
    - Binds a driver and a timeout to the conditions above.

    Why it matters:
    - Page objects must never report a bare "timed out"; this is the one place
      that turns a poll timeout into an ElementWaitError naming the operation
      and what the element is for.

    Behavior:
    - Each helper returns what the condition returned.
    - Pass `timeout=` to override the policy timeout for a single call.
    """

    def __init__(self, driver: BrowserDriver, timeout: float) -> None:
        self.driver = driver
        self.timeout = timeout

    def until(
        self,
        condition: Callable[[BrowserDriver], T],
        *,
        operation: str,
        locator: Locator,
        timeout: float | None = None,
    ) -> T:
        limit = self.timeout if timeout is None else timeout
        try:
            return self.driver.wait_until(condition, limit)
        except WaitTimeoutError as e:
            logger.debug("%s: %s", operation, e)
            raise ElementWaitError(operation, locator.intent, locator.selector, limit) from e

    def visible(self, locator: Locator, *, operation: str, timeout: float | None = None) -> BrowserElement:
        return self.until(visibility_of(locator), operation=operation, locator=locator, timeout=timeout)

    def all_visible(
        self, locator: Locator, *, operation: str, timeout: float | None = None
    ) -> list[BrowserElement]:
        return self.until(visibility_of_all(locator), operation=operation, locator=locator, timeout=timeout)

    def clickable(self, locator: Locator, *, operation: str, timeout: float | None = None) -> BrowserElement:
        return self.until(element_to_be_clickable(locator), operation=operation, locator=locator, timeout=timeout)

    def text_of(self, locator: Locator, *, operation: str, timeout: float | None = None) -> str:
        return self.until(visible_text(locator), operation=operation, locator=locator, timeout=timeout)

    def present(self, locator: Locator, *, operation: str, timeout: float | None = None) -> BrowserElement:
        return self.until(presence_of(locator), operation=operation, locator=locator, timeout=timeout)

    def invisible(self, locator: Locator, *, operation: str, timeout: float | None = None) -> None:
        self.until(invisibility_of(locator), operation=operation, locator=locator, timeout=timeout)

    def stale(
        self, element: BrowserElement, locator: Locator, *, operation: str, timeout: float | None = None
    ) -> None:
        self.until(staleness_of(element), operation=operation, locator=locator, timeout=timeout)
