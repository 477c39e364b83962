from __future__ import annotations

import logging

from booking_automation.browser.driver import BrowserDriver
from booking_automation.browser.waits import WaitPolicy
from booking_automation.pages.locators import Locator
from booking_automation.utils.errors import StaleElementError

logger = logging.getLogger(__name__)


class BasePage:
    """
    What it does:
    - Holds the shared browser session and a WaitPolicy sized for the page.

    Why it matters:
    - Every page object receives the same driver explicitly; nothing is global.

    Behavior:
    - Subclasses set DEFAULT_TIMEOUT (seconds); `timeout=` overrides it per instance.
    """

    DEFAULT_TIMEOUT: float = 15.0

    def __init__(self, driver: BrowserDriver, *, timeout: float | None = None) -> None:
        self.driver = driver
        self.wait = WaitPolicy(driver, self.DEFAULT_TIMEOUT if timeout is None else timeout)

    def click_if_displayed(self, locator: Locator) -> bool:
        """Clicks the first match when it is visible and enabled; returns whether it clicked."""
        try:
            for element in self.driver.find_elements(locator.selector)[:1]:
                if element.is_displayed() and element.is_enabled():
                    element.click()
                    return True
        except StaleElementError:
            logger.debug("%s went stale before it could be clicked", locator.intent)
        return False
