from __future__ import annotations

import logging

from booking_automation.browser.driver import BrowserDriver
from booking_automation.pages.base_page import BasePage
from booking_automation.pages.locators import PaymentLocators

logger = logging.getLogger(__name__)


class PaymentPage(BasePage):
    DEFAULT_TIMEOUT = 15.0

    def __init__(self, driver: BrowserDriver, *, timeout: float | None = None) -> None:
        super().__init__(driver, timeout=timeout)
        self.sel = PaymentLocators()

    def get_hotel_name(self) -> str:
        name = self.wait.text_of(self.sel.hotel_name, operation="get_hotel_name")
        logger.info("Hotel name on Payment Page: %s", name)
        return name


def hotel_name_matches(displayed: str, expected: str) -> bool:
    """The displayed name may carry extra annotations, so containment is enough."""
    return expected.strip() in displayed
