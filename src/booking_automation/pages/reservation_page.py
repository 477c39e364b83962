from __future__ import annotations

import logging

from booking_automation.browser.driver import BrowserDriver
from booking_automation.pages.base_page import BasePage
from booking_automation.pages.locators import ReservationLocators
from booking_automation.pages.payment_page import PaymentPage

logger = logging.getLogger(__name__)


class ReservationPage(BasePage):
    """Guest-details step shown after 'I'll reserve'."""

    DEFAULT_TIMEOUT = 30.0

    def __init__(self, driver: BrowserDriver, *, timeout: float | None = None) -> None:
        super().__init__(driver, timeout=timeout)
        self.sel = ReservationLocators()

    def get_hotel_name(self) -> str:
        name = self.wait.text_of(self.sel.hotel_name, operation="get_hotel_name")
        logger.info("Hotel name on Reservation Page: %s", name)
        return name

    def continue_to_payment(self) -> PaymentPage:
        # Payment details render on the same tab; PaymentPage waits for its own header.
        logger.info("ReservationPage: continuing to payment")
        return PaymentPage(self.driver)
