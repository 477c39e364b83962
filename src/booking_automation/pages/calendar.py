"""
calendar.py

What this module does
- Models calendar dates and drives the search box's month-paginated date picker.

Why it matters
- The date picker is rendered by the site and re-rendered asynchronously, so
  selecting a date is a small state machine: read the displayed month, step
  forward, click the day. Transient staleness is retried in place; anything that
  means the page changed (unreadable header, overshoot, missing day) fails at once.

Behavior summary
- `CalendarDate.parse("2025-06-10")` builds the immutable target.
- `CalendarNavigator.select_date(target)` walks forward at most `budget` months.
- Backward navigation is not supported: a displayed month after the target is
  reported as NavigationOvershootError.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import date

from booking_automation.browser.driver import BrowserDriver
from booking_automation.browser.waits import WaitPolicy, text_changed
from booking_automation.pages.locators import CalendarLocators
from booking_automation.utils.errors import (
    DateNotFoundError,
    DateNotSelectableError,
    ElementWaitError,
    InvalidDateError,
    NavigationOvershootError,
    StaleElementError,
    UnparsableHeaderError,
    WaitTimeoutError,
)

logger = logging.getLogger(__name__)

DEFAULT_NAVIGATION_BUDGET = 24

MONTH_NAMES = (
    "january",
    "february",
    "march",
    "april",
    "may",
    "june",
    "july",
    "august",
    "september",
    "october",
    "november",
    "december",
)

_HEADER_RE = re.compile(r"^([A-Za-z]+)\s+(\d{4})$")
_ISO_DATE_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")


@dataclass(frozen=True)
class CalendarDate:
    year: int
    month: int
    day: int

    def __post_init__(self) -> None:
        try:
            date(self.year, self.month, self.day)
        except ValueError as e:
            raise InvalidDateError(f"Not a calendar date: {self.year}-{self.month}-{self.day}") from e

    @classmethod
    def parse(cls, value: str) -> CalendarDate:
        """Parses a strict yyyy-MM-dd string."""
        match = _ISO_DATE_RE.match(value.strip())
        if not match:
            raise InvalidDateError(
                f"Invalid date format {value!r}. Please use 'yyyy-MM-dd' format."
            )
        year, month, day = (int(part) for part in match.groups())
        return cls(year, month, day)

    @classmethod
    def from_date(cls, value: date) -> CalendarDate:
        return cls(value.year, value.month, value.day)

    @property
    def year_month(self) -> tuple[int, int]:
        return (self.year, self.month)

    def to_date(self) -> date:
        return date(self.year, self.month, self.day)

    def canonical(self) -> str:
        return f"{self.year:04d}-{self.month:02d}-{self.day:02d}"

    def __str__(self) -> str:
        return self.canonical()


def parse_month_header(text: str) -> tuple[int, int]:
    """
    Parses a 'MMMM yyyy' header such as 'June 2025' into (2025, 6).

    Raises ValueError for anything else.
    """
    match = _HEADER_RE.match(text.strip())
    if not match:
        raise ValueError(f"Not a 'Month yyyy' header: {text!r}")
    name, year = match.groups()
    try:
        month = MONTH_NAMES.index(name.lower()) + 1
    except ValueError:
        raise ValueError(f"Unknown month name in header: {text!r}") from None
    return (int(year), month)


def format_year_month(year_month: tuple[int, int]) -> str:
    year, month = year_month
    return f"{MONTH_NAMES[month - 1].capitalize()} {year}"


class CalendarNavigator:
    """
    What it does:
    - Selects one date in the open date picker, paging forward month by month.

    Why it matters:
    - Check-in and check-out are selected with two calls in a row; the second
      starts from wherever the first left the calendar.

    Behavior:
    - Each step re-reads the header; nothing about the displayed month is cached.
    - A stale day cell or next button is retried without spending budget. Those
      in-place retries are capped by the same budget value.
    - Raises UnparsableHeaderError, NavigationOvershootError or
      DateNotSelectableError immediately; DateNotFoundError once the budget is spent.
    """

    def __init__(
        self,
        driver: BrowserDriver,
        *,
        timeout: float = 3.0,
        budget: int = DEFAULT_NAVIGATION_BUDGET,
        locators: CalendarLocators | None = None,
    ) -> None:
        self.driver = driver
        self.wait = WaitPolicy(driver, timeout)
        self.budget = budget
        self.sel = locators or CalendarLocators()

    def select_date(self, target: CalendarDate) -> None:
        cell = self.sel.day_cell.format(date=target.canonical())
        steps = 0
        stale_retries = 0

        while steps < self.budget:
            header_text = self.wait.text_of(self.sel.month_header, operation="select_date")
            try:
                displayed = parse_month_header(header_text)
            except ValueError as e:
                logger.error("Could not parse current calendar month text: %r", header_text)
                raise UnparsableHeaderError(header_text, target) from e

            if displayed == target.year_month:
                try:
                    self.wait.clickable(cell, operation="select_date").click()
                except StaleElementError:
                    stale_retries += 1
                    if stale_retries > self.budget:
                        raise DateNotSelectableError(target, header_text, cell.selector) from None
                    logger.info("Day cell for %s went stale, retrying selection", target)
                    continue
                except ElementWaitError as e:
                    logger.error(
                        "Date %s not found or clickable in %s despite month being correct",
                        target,
                        header_text,
                    )
                    raise DateNotSelectableError(target, header_text, cell.selector) from e
                logger.info("Selected date: %s", target)
                return

            if displayed > target.year_month:
                logger.error(
                    "Current month (%s) is after target month (%s)",
                    header_text,
                    format_year_month(target.year_month),
                )
                raise NavigationOvershootError(header_text, target)

            logger.info(
                "Current month: %s. Clicking next to find %s",
                header_text,
                format_year_month(target.year_month),
            )
            try:
                self._next_month(header_text)
            except StaleElementError:
                stale_retries += 1
                if stale_retries > self.budget:
                    raise
                continue
            steps += 1

        raise DateNotFoundError(target, self.budget)

    def _next_month(self, header_text: str) -> None:
        self.wait.clickable(self.sel.next_month, operation="select_date").click()
        try:
            self.driver.wait_until(text_changed(self.sel.month_header, header_text), self.wait.timeout)
        except WaitTimeoutError:
            # Stalled: the next iteration re-reads the header and spends another unit.
            logger.warning("Calendar header still shows %s after clicking next", header_text)
