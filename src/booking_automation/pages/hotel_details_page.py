from __future__ import annotations

import logging

from booking_automation.browser.driver import BrowserDriver, BrowserElement
from booking_automation.browser.waits import element_is_clickable, value_to_be
from booking_automation.pages.base_page import BasePage
from booking_automation.pages.calendar import CalendarDate
from booking_automation.pages.locators import HotelDetailsLocators, xpath_literal
from booking_automation.pages.reservation_page import ReservationPage
from booking_automation.utils.errors import DateMismatchError, RoomNotFoundError, StructuralUIError

logger = logging.getLogger(__name__)

_WEEKDAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def format_display_date(value: CalendarDate) -> str:
    """Formats a date the way the hotel page's date fields show it, e.g. 'Tue 10 Jun'."""
    d = value.to_date()
    return f"{_WEEKDAYS[d.weekday()]} {d.day} {_MONTHS[d.month - 1]}"


class HotelDetailsPage(BasePage):
    """
    What it does:
    - Checks the dates carried over from the search, picks a room and quantity,
      and starts the reservation.

    Why it matters:
    - This is where the case's room data meets the site; a room that isn't
      offered is reported as not found rather than as a layout failure.

    Behavior:
    - Room names match case-insensitively.
    - Selecting a quantity waits for the price spinner to clear before returning.
    """

    DEFAULT_TIMEOUT = 15.0

    def __init__(self, driver: BrowserDriver, *, timeout: float | None = None) -> None:
        super().__init__(driver, timeout=timeout)
        self.sel = HotelDetailsLocators()

    def verify_dates(self, expected_check_in: CalendarDate, expected_check_out: CalendarDate) -> None:
        logger.info("HotelDetailsPage: verifying check-in/out dates")

        actual_in = self.wait.text_of(self.sel.check_in_display, operation="verify_dates")
        actual_out = self.wait.text_of(self.sel.check_out_display, operation="verify_dates")

        expected_in = format_display_date(expected_check_in)
        expected_out = format_display_date(expected_check_out)
        logger.info("Expected check-in %r, actual %r", expected_in, actual_in)
        logger.info("Expected check-out %r, actual %r", expected_out, actual_out)

        if actual_in != expected_in:
            raise DateMismatchError(f"Check-in date mismatch: expected {expected_in!r}, got {actual_in!r}")
        if actual_out != expected_out:
            raise DateMismatchError(f"Check-out date mismatch: expected {expected_out!r}, got {actual_out!r}")

    def select_room_and_quantity(self, room_type: str, quantity: int) -> None:
        logger.info("HotelDetailsPage: selecting room %r with quantity %d", room_type, quantity)

        row = self._room_row(room_type)
        if row is None:
            raise RoomNotFoundError(f"Room with name {room_type!r} not found on Hotel Details Page")

        dropdown = row.find_element(self.sel.quantity_select.selector)
        if dropdown is None:
            raise StructuralUIError(f"Quantity dropdown not found for room {room_type!r}")

        op = "select_room_and_quantity"
        self.wait.until(element_is_clickable(dropdown), operation=op, locator=self.sel.quantity_select)
        dropdown.select_by_value(str(quantity))
        self.wait.until(value_to_be(dropdown, str(quantity)), operation=op, locator=self.sel.quantity_select)
        logger.info("Quantity %d selected for room %r", quantity, room_type)

        self.wait.invisible(self.sel.loading_spinner, operation=op)
        self.wait.clickable(self.sel.reserve_button, operation=op)
        logger.info("Reserve button is ready after quantity selection")

    def click_reserve(self, room_type: str) -> ReservationPage:
        op = "click_reserve"
        self.wait.present(self.sel.room_row_by_name.format(room_type=xpath_literal(room_type)), operation=op)

        if self.click_if_displayed(self.sel.modal_dismiss):
            logger.info("Popup dismissed")

        self.wait.invisible(self.sel.loading_spinner, operation=op)
        self.wait.clickable(self.sel.reserve_button, operation=op).click()
        logger.info("'I'll reserve' clicked for room %r", room_type)
        return ReservationPage(self.driver)

    def _room_row(self, room_type: str) -> BrowserElement | None:
        wanted = room_type.strip().lower()
        for name in self.wait.all_visible(self.sel.room_type_names, operation="select_room_and_quantity"):
            if name.text.strip().lower() != wanted:
                continue
            row = name.find_element(self.sel.room_row.selector)
            if row is not None:
                logger.info("Found room row for %r", room_type)
                return row
            logger.info("No parent row for room name %r, trying next match", room_type)
        return None
