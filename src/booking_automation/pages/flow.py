"""
flow.py

What this module does
- Drives one booking case through the page chain
  HOME -> SEARCH_RESULTS -> HOTEL_DETAILS -> RESERVATION -> PAYMENT.

Why it matters
- Page identity is an explicit tagged value (`CurrentPage`) returned by a
  transition function, not something tracked in shared mutable state. The runner
  and the e2e tests reuse the same walk.

Behavior summary
- `advance(current, case)` performs the page operations of `current.step` and
  returns the next page.
- `run_booking_flow(driver, case)` opens the site, walks to PAYMENT and reads the
  displayed hotel name; the caller decides how to report a mismatch.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum

from booking_automation.browser.driver import BrowserDriver
from booking_automation.data.booking_case import BookingCase
from booking_automation.pages.calendar import DEFAULT_NAVIGATION_BUDGET
from booking_automation.pages.home_page import HomePage
from booking_automation.pages.hotel_details_page import HotelDetailsPage
from booking_automation.pages.payment_page import PaymentPage, hotel_name_matches
from booking_automation.pages.reservation_page import ReservationPage
from booking_automation.pages.search_results_page import SearchResultsPage

logger = logging.getLogger(__name__)


class FlowStep(StrEnum):
    HOME = "home"
    SEARCH_RESULTS = "search_results"
    HOTEL_DETAILS = "hotel_details"
    RESERVATION = "reservation"
    PAYMENT = "payment"


@dataclass(frozen=True)
class CurrentPage:
    step: FlowStep
    page: HomePage | SearchResultsPage | HotelDetailsPage | ReservationPage | PaymentPage


@dataclass(frozen=True)
class FlowResult:
    expected_hotel_name: str
    displayed_hotel_name: str

    @property
    def hotel_name_matches(self) -> bool:
        return hotel_name_matches(self.displayed_hotel_name, self.expected_hotel_name)


def advance(current: CurrentPage, case: BookingCase) -> CurrentPage:
    page = current.page

    if current.step is FlowStep.HOME:
        assert isinstance(page, HomePage)
        page.enter_location(case.location)
        page.select_check_in_out_dates(case.check_in, case.check_out)
        return CurrentPage(FlowStep.SEARCH_RESULTS, page.click_search())

    if current.step is FlowStep.SEARCH_RESULTS:
        assert isinstance(page, SearchResultsPage)
        return CurrentPage(FlowStep.HOTEL_DETAILS, page.select_hotel(case.hotel_name))

    if current.step is FlowStep.HOTEL_DETAILS:
        assert isinstance(page, HotelDetailsPage)
        page.verify_dates(case.check_in, case.check_out)
        page.select_room_and_quantity(case.room_type, case.number_of_rooms)
        return CurrentPage(FlowStep.RESERVATION, page.click_reserve(case.room_type))

    if current.step is FlowStep.RESERVATION:
        assert isinstance(page, ReservationPage)
        return CurrentPage(FlowStep.PAYMENT, page.continue_to_payment())

    raise ValueError(f"No transition out of {current.step}")


def run_booking_flow(
    driver: BrowserDriver,
    case: BookingCase,
    *,
    base_url: str | None = None,
    navigation_budget: int = DEFAULT_NAVIGATION_BUDGET,
    window_timeout: float = 15.0,
) -> FlowResult:
    logger.info("--- Starting case for %s ---", case.hotel_name)
    logger.info("Test data: %s", case.describe())

    if base_url:
        driver.get(base_url)

    current = CurrentPage(
        FlowStep.HOME,
        HomePage(driver, navigation_budget=navigation_budget, window_timeout=window_timeout),
    )
    while current.step is not FlowStep.PAYMENT:
        current = advance(current, case)
        logger.info("Reached %s", current.step)

    assert isinstance(current.page, PaymentPage)
    displayed = current.page.get_hotel_name()
    return FlowResult(expected_hotel_name=case.hotel_name, displayed_hotel_name=displayed)
