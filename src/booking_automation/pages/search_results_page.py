from __future__ import annotations

import logging

from booking_automation.browser.driver import BrowserDriver, BrowserElement
from booking_automation.browser.waits import element_is_clickable
from booking_automation.browser.windows import WindowSwitcher
from booking_automation.pages.base_page import BasePage
from booking_automation.pages.hotel_details_page import HotelDetailsPage
from booking_automation.pages.locators import Locator, SearchResultsLocators, xpath_literal
from booking_automation.utils.errors import ElementWaitError, HotelNotFoundError, StaleElementError

logger = logging.getLogger(__name__)


class SearchResultsPage(BasePage):
    """
    What it does:
    - Finds a hotel in the result list and opens its details in a new tab.

    Why it matters:
    - Results are paginated behind "Load more results"; a hotel that is not on
      the first screen is still a valid case.

    Behavior:
    - Up to `max_load_attempts` views are searched before HotelNotFoundError.
    - The session ends up on the hotel's tab; the results tab stays open behind it.
    """

    DEFAULT_TIMEOUT = 20.0
    MAX_LOAD_ATTEMPTS = 5

    def __init__(
        self,
        driver: BrowserDriver,
        *,
        timeout: float | None = None,
        window_timeout: float = 15.0,
        max_load_attempts: int = MAX_LOAD_ATTEMPTS,
    ) -> None:
        super().__init__(driver, timeout=timeout)
        self.sel = SearchResultsLocators()
        self.switcher = WindowSwitcher(driver, timeout=window_timeout)
        self.max_load_attempts = max_load_attempts

    def select_hotel(self, hotel_name: str) -> HotelDetailsPage:
        logger.info("SearchResultsPage: selecting hotel %r", hotel_name)
        original = self.driver.current_window_handle()
        title = self.sel.hotel_title.format(hotel_name=xpath_literal(hotel_name))

        for attempt in range(1, self.max_load_attempts + 1):
            try:
                button = self._availability_button(title)
            except StaleElementError:
                logger.info("Result list re-rendered while reading %r, attempt %d", hotel_name, attempt)
                continue

            if button is None:
                logger.info(
                    "Hotel %r not found on current view. Looking for 'Load more results'. Attempt %d",
                    hotel_name,
                    attempt,
                )
                if not self._load_more():
                    break
                continue

            try:
                self.switcher.await_new_window(original, lambda: self._open(button))
            except StaleElementError:
                logger.info("'See availability' for %r went stale before the click, attempt %d", hotel_name, attempt)
                continue
            self.wait.visible(self.sel.hotel_page_name, operation="select_hotel")
            logger.info("Switched to hotel details for %r", hotel_name)
            return HotelDetailsPage(self.driver)

        raise HotelNotFoundError(
            f"Hotel {hotel_name!r} not found after loading all available results"
        )

    def _availability_button(self, title: Locator) -> BrowserElement | None:
        try:
            title_el = self.wait.visible(title, operation="select_hotel")
        except ElementWaitError:
            return None

        card = title_el.find_element(self.sel.property_card.selector)
        button = card.find_element(self.sel.see_availability.selector) if card is not None else None
        if button is None:
            return None

        try:
            return self.wait.until(
                element_is_clickable(button), operation="select_hotel", locator=self.sel.see_availability
            )
        except ElementWaitError:
            return None

    def _open(self, button: BrowserElement) -> None:
        button.scroll_into_view()
        button.click()
        logger.info("'See availability' clicked")

    def _load_more(self) -> bool:
        """Clicks 'Load more results'; False once there is nothing more to load."""
        op = "load_more_results"
        try:
            button = self.wait.clickable(self.sel.load_more, operation=op)
            button.scroll_into_view()
            button.click()
        except ElementWaitError as e:
            logger.info("No more results to load: %s", e)
            return False
        except StaleElementError:
            # The next attempt locates the button again.
            logger.info("'Load more results' went stale before the click")
            return True

        logger.info("'Load more results' clicked. Waiting for new results")
        try:
            self.wait.stale(button, self.sel.load_more, operation=op)
            self.wait.clickable(self.sel.results_ready, operation=op)
        except ElementWaitError as e:
            logger.info("No more results to load: %s", e)
            return False
        return True
