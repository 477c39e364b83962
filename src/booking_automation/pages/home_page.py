from __future__ import annotations

import logging

from booking_automation.browser.driver import BrowserDriver
from booking_automation.pages.base_page import BasePage
from booking_automation.pages.calendar import DEFAULT_NAVIGATION_BUDGET, CalendarDate, CalendarNavigator
from booking_automation.pages.locators import CalendarLocators, HomeLocators, xpath_literal
from booking_automation.pages.search_results_page import SearchResultsPage
from booking_automation.utils.errors import ElementWaitError

logger = logging.getLogger(__name__)


class HomePage(BasePage):
    """
    What it does:
    - Fills the main search form: destination, dates, search.

    Why it matters:
    - First page of the flow; the calendar interaction lives behind it.

    Behavior:
    - Dismisses the sign-in popup on construction and after searching.
    - Falls back to pressing ENTER when no destination suggestion shows up.
    """

    DEFAULT_TIMEOUT = 3.0

    def __init__(
        self,
        driver: BrowserDriver,
        *,
        timeout: float | None = None,
        navigation_budget: int = DEFAULT_NAVIGATION_BUDGET,
        window_timeout: float = 15.0,
    ) -> None:
        super().__init__(driver, timeout=timeout)
        self.window_timeout = window_timeout
        self.sel = HomeLocators()
        self.calendar_sel = CalendarLocators()
        self.calendar = CalendarNavigator(
            driver,
            timeout=self.wait.timeout,
            budget=navigation_budget,
            locators=self.calendar_sel,
        )
        self.dismiss_sign_in_popup()

    def dismiss_sign_in_popup(self) -> None:
        if self.click_if_displayed(self.sel.popup_close):
            logger.info("Sign-in popup dismissed")

    def enter_location(self, location: str) -> None:
        logger.info("HomePage: entering location %r", location)

        box = self.wait.clickable(self.sel.location_input, operation="enter_location")
        box.clear()
        box.send_keys(location)

        suggestion = self.sel.location_suggestion.format(location=xpath_literal(location))
        try:
            self.wait.clickable(suggestion, operation="enter_location").click()
            logger.info("%s selected from suggestions", location)
        except ElementWaitError as e:
            logger.warning("%s not found in suggestions, pressing ENTER instead (%s)", location, e)
            box.press("Enter")

    def select_check_in_out_dates(self, check_in: CalendarDate, check_out: CalendarDate) -> None:
        logger.info("Selecting check-in/out dates: %s to %s", check_in, check_out)
        self.open_calendar()
        self.calendar.select_date(check_in)
        self.calendar.select_date(check_out)
        logger.info("Dates selected successfully")

    def open_calendar(self) -> None:
        """Makes sure the date picker is open; the site usually opens it after a destination is chosen."""
        container = self.driver.find_element(self.calendar_sel.container.selector)
        if container is None or not container.is_displayed():
            self.wait.clickable(self.sel.checkin_field, operation="open_calendar").click()
        self.wait.visible(self.calendar_sel.container, operation="open_calendar")
        self.wait.visible(self.calendar_sel.month_header, operation="open_calendar")

    def click_search(self) -> SearchResultsPage:
        self.wait.clickable(self.sel.search_button, operation="click_search").click()
        logger.info("Search button clicked")
        self.dismiss_sign_in_popup()
        return SearchResultsPage(self.driver, window_timeout=self.window_timeout)
