from __future__ import annotations

import calendar as _calendar
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TypeVar

from booking_automation.browser.waits import poll
from booking_automation.pages.calendar import CalendarDate, format_year_month
from booking_automation.pages.hotel_details_page import format_display_date
from booking_automation.pages.locators import (
    CalendarLocators,
    HomeLocators,
    HotelDetailsLocators,
    PaymentLocators,
    ReservationLocators,
    SearchResultsLocators,
    xpath_literal,
)
from booking_automation.utils.errors import StaleElementError

T = TypeVar("T")


class FakeElement:
    """
    What it does:
    - In-memory stand-in for a browser element.

    Why it matters:
    - Page objects and the calendar navigator are tested without a browser.

    Behavior:
    - `detach()` makes every later call raise StaleElementError.
    - `stale_clicks=n` makes the next n clicks raise StaleElementError (a re-render
      between locating and clicking).
    - `children` maps selectors to elements for element-relative lookups.
    """

    def __init__(
        self,
        text: str = "",
        *,
        displayed: bool = True,
        enabled: bool = True,
        attributes: dict[str, str] | None = None,
        on_click: Callable[[], None] | None = None,
        on_press: Callable[[str], None] | None = None,
        options: list[str] | None = None,
        children: dict[str, FakeElement] | None = None,
        stale_clicks: int = 0,
    ) -> None:
        self._text = text
        self.displayed = displayed
        self.enabled = enabled
        self.attributes = attributes or {}
        self.on_click = on_click
        self.on_press = on_press
        self.options = options
        self.children = children or {}
        self.stale_clicks = stale_clicks

        self.value = ""
        self.clicks = 0
        self.pressed: list[str] = []
        self.stale = False

    def _check(self) -> None:
        if self.stale:
            raise StaleElementError("Element is not attached to the DOM")

    def detach(self) -> None:
        self.stale = True

    def set_text(self, text: str) -> None:
        self._text = text

    @property
    def text(self) -> str:
        self._check()
        return self._text

    def is_displayed(self) -> bool:
        self._check()
        return self.displayed

    def is_enabled(self) -> bool:
        self._check()
        return self.enabled

    def click(self) -> None:
        self._check()
        if self.stale_clicks > 0:
            self.stale_clicks -= 1
            raise StaleElementError("Element is not attached to the DOM")
        self.clicks += 1
        if self.on_click:
            self.on_click()

    def clear(self) -> None:
        self._check()
        self.value = ""

    def send_keys(self, value: str) -> None:
        self._check()
        self.value += value

    def press(self, key: str) -> None:
        self._check()
        self.pressed.append(key)
        if self.on_press:
            self.on_press(key)

    def get_attribute(self, name: str) -> str | None:
        self._check()
        return self.attributes.get(name)

    def input_value(self) -> str:
        self._check()
        return self.value

    def select_by_value(self, value: str) -> None:
        self._check()
        if self.options is not None and value not in self.options:
            raise ValueError(f"No option with value {value!r}")
        self.value = value

    def scroll_into_view(self) -> None:
        self._check()

    def find_element(self, selector: str) -> FakeElement | None:
        self._check()
        return self.children.get(selector)


@dataclass
class FakeWindow:
    elements: dict[str, list[FakeElement]] = field(default_factory=dict)


class FakeDriver:
    """
    What it does:
    - In-memory BrowserDriver with windows, a selector registry and a virtual clock.

    Why it matters:
    - Waits poll against `now`, which only moves when a wait sleeps, so tests
      never sleep for real and asynchronous re-renders are deterministic.

    Behavior:
    - `add(selector, element)` registers an element in the active (or given) window.
    - `later(delay, fn)` runs `fn` once the virtual clock passes `now + delay`.
    - `open_window()` creates a window without switching to it, like a popup.
    """

    def __init__(self, *, poll_interval: float = 0.25) -> None:
        self.poll_interval = poll_interval
        self.now = 0.0
        self.windows: dict[str, FakeWindow] = {}
        self.visited: list[str] = []
        self.screenshots: list[str] = []
        self.closed = False
        self._scheduled: list[tuple[float, Callable[[], None]]] = []
        self._counter = 0
        self._active = self.open_window()

    # -------------------- test helpers --------------------

    def open_window(self) -> str:
        self._counter += 1
        handle = f"window-{self._counter}"
        self.windows[handle] = FakeWindow()
        return handle

    def add(self, selector: str, element: FakeElement, *, handle: str | None = None) -> FakeElement:
        window = self.windows[handle or self._active]
        window.elements.setdefault(selector, []).append(element)
        return element

    def remove(self, selector: str, *, handle: str | None = None) -> None:
        window = self.windows[handle or self._active]
        for element in window.elements.pop(selector, []):
            element.detach()

    def later(self, delay: float, fn: Callable[[], None]) -> None:
        self._scheduled.append((self.now + delay, fn))

    def _sleep(self, seconds: float) -> None:
        self.now += seconds
        due = [item for item in self._scheduled if item[0] <= self.now]
        self._scheduled = [item for item in self._scheduled if item[0] > self.now]
        for _, fn in sorted(due, key=lambda item: item[0]):
            fn()

    # -------------------- BrowserDriver interface --------------------

    def get(self, url: str) -> None:
        self.visited.append(url)

    def find_element(self, selector: str) -> FakeElement | None:
        elements = self.windows[self._active].elements.get(selector) or []
        return elements[0] if elements else None

    def find_elements(self, selector: str) -> list[FakeElement]:
        return list(self.windows[self._active].elements.get(selector) or [])

    def wait_until(self, condition: Callable[[FakeDriver], T], timeout: float) -> T:
        return poll(
            lambda: condition(self),
            timeout=timeout,
            interval=self.poll_interval,
            clock=lambda: self.now,
            sleep=self._sleep,
        )

    def window_handles(self) -> list[str]:
        return list(self.windows)

    def current_window_handle(self) -> str:
        return self._active

    def switch_to(self, handle: str) -> None:
        if handle not in self.windows:
            raise RuntimeError(f"Unknown window handle: {handle}")
        self._active = handle

    def screenshot(self, tag: str) -> None:
        self.screenshots.append(tag)

    def close(self) -> None:
        self.closed = True


class FakeCalendar:
    """
    A month-paginated date picker: header, next button and one day cell per day.

    `render_delay` (virtual seconds) delays the re-render after "next", like the
    real widget. `selected` records the data-date of every clicked day cell.
    """

    def __init__(
        self,
        driver: FakeDriver,
        *,
        year: int,
        month: int,
        render_delay: float = 0.0,
        displayed: bool = True,
        locators: CalendarLocators | None = None,
    ) -> None:
        self.driver = driver
        self.sel = locators or CalendarLocators()
        self.shown = (year, month)
        self.render_delay = render_delay
        self.next_clicks = 0
        self.selected: list[str] = []
        self._cells: list[str] = []

        self.container = driver.add(self.sel.container.selector, FakeElement(displayed=displayed))
        self.header = driver.add(self.sel.month_header.selector, FakeElement(format_year_month(self.shown)))
        self.next_button = driver.add(self.sel.next_month.selector, FakeElement(on_click=self._on_next))
        self._render_days()

    def cell(self, iso_date: str) -> FakeElement | None:
        return self.driver.find_element(self.sel.day_cell.format(date=iso_date).selector)

    def _on_next(self) -> None:
        self.next_clicks += 1
        year, month = self.shown
        self.shown = (year + 1, 1) if month == 12 else (year, month + 1)
        if self.render_delay:
            self.driver.later(self.render_delay, self._render)
        else:
            self._render()

    def show(self, year: int, month: int) -> None:
        """Re-renders the widget on an arbitrary month, as a misbehaving widget might."""
        self.shown = (year, month)
        self._render()

    def _render(self) -> None:
        self.header.set_text(format_year_month(self.shown))
        self._render_days()

    def _render_days(self) -> None:
        for selector in self._cells:
            self.driver.remove(selector)
        self._cells = []

        year, month = self.shown
        for day in range(1, _calendar.monthrange(year, month)[1] + 1):
            iso = f"{year:04d}-{month:02d}-{day:02d}"
            selector = self.sel.day_cell.format(date=iso).selector
            self.driver.add(
                selector,
                FakeElement(str(day), attributes={"data-date": iso}, on_click=lambda iso=iso: self.selected.append(iso)),
            )
            self._cells.append(selector)


class FakeBookingSite:
    """
    What it does:
    - Wires a FakeDriver up as the whole booking site: search form, calendar,
      paginated results, hotel tab, reservation and payment steps.

    Why it matters:
    - The page chain and the runner are exercised end to end without a browser.

    Behavior:
    - The hotel shows up after `load_more_clicks` clicks on "Load more results".
    - "See availability" opens a new window unless `opens_window=False`.
    - `availability_stale_clicks` / `load_more_stale_clicks` make those buttons go
      stale on their first clicks, as when the result list re-renders.
    - `reservation_header=False` renders only the payment header after reserving.
    - The hotel tab shows whatever dates the calendar recorded as selected.
    - Reservation/payment pages show `displayed_hotel_name`.
    """

    def __init__(
        self,
        driver: FakeDriver,
        *,
        location: str = "Alexandria",
        hotel_name: str = "Test Hotel",
        displayed_hotel_name: str | None = None,
        room_types: tuple[str, ...] = ("Deluxe", "Standard"),
        calendar_start: tuple[int, int] = (2025, 6),
        load_more_clicks: int = 0,
        opens_window: bool = True,
        sign_in_popup: bool = False,
        with_suggestion: bool = True,
        reservation_header: bool = True,
        availability_stale_clicks: int = 0,
        load_more_stale_clicks: int = 0,
    ) -> None:
        self.driver = driver
        self.hotel_name = hotel_name
        self.displayed_hotel_name = displayed_hotel_name or f"{hotel_name} (Genius property)"
        self.room_types = room_types
        self.load_more_remaining = load_more_clicks
        self.opens_window = opens_window
        self.reservation_header = reservation_header
        self.availability_stale_clicks = availability_stale_clicks
        self.load_more_stale_clicks = load_more_stale_clicks
        self.results_handle = driver.current_window_handle()
        self.details_handle: str | None = None
        self.quantity_selects: dict[str, FakeElement] = {}

        self.home = HomeLocators()
        self.results = SearchResultsLocators()
        self.details = HotelDetailsLocators()

        if sign_in_popup:
            self.popup = driver.add(self.home.popup_close.selector, FakeElement())
            self.popup.on_click = lambda: setattr(self.popup, "displayed", False)

        self.location_input = driver.add(self.home.location_input.selector, FakeElement())
        self.location_input.on_press = lambda key: self._show_calendar()
        if with_suggestion:
            suggestion = self.home.location_suggestion.format(location=xpath_literal(location))
            driver.add(suggestion.selector, FakeElement(location, on_click=self._show_calendar))
        driver.add(self.home.checkin_field.selector, FakeElement(on_click=self._show_calendar))

        year, month = calendar_start
        self.calendar = FakeCalendar(driver, year=year, month=month, displayed=False)
        self.search_button = driver.add(self.home.search_button.selector, FakeElement(on_click=self._search))

    # -------------------- home --------------------

    def _show_calendar(self) -> None:
        self.calendar.container.displayed = True

    def _search(self) -> None:
        if self.load_more_remaining > 0:
            self._add_load_more()
        else:
            self._add_hotel_card()

    # -------------------- results --------------------

    def _add_load_more(self) -> None:
        button = FakeElement(on_click=self._on_load_more, stale_clicks=self.load_more_stale_clicks)
        self.load_more_stale_clicks = 0
        self.driver.add(self.results.load_more.selector, button, handle=self.results_handle)

    def _on_load_more(self) -> None:
        self.load_more_remaining -= 1
        self.driver.remove(self.results.load_more.selector, handle=self.results_handle)
        if self.load_more_remaining > 0:
            self._add_load_more()
        else:
            self._add_hotel_card()

    def _add_hotel_card(self) -> None:
        button = FakeElement("See availability", on_click=self._open_hotel, stale_clicks=self.availability_stale_clicks)
        card = FakeElement(children={self.results.see_availability.selector: button})
        title = FakeElement(self.hotel_name, children={self.results.property_card.selector: card})
        selector = self.results.hotel_title.format(hotel_name=xpath_literal(self.hotel_name)).selector
        self.driver.add(selector, title, handle=self.results_handle)

    def _open_hotel(self) -> None:
        if self.opens_window:
            self.details_handle = self.driver.open_window()
        else:
            self.details_handle = self.results_handle
        self._build_details(self.details_handle)

    # -------------------- hotel details --------------------

    def _build_details(self, handle: str) -> None:
        add = self.driver.add
        add(self.results.hotel_page_name.selector, FakeElement(self.hotel_name), handle=handle)

        selected = [CalendarDate.parse(d) for d in self.calendar.selected[-2:]]
        if len(selected) == 2:
            add(self.details.check_in_display.selector, FakeElement(format_display_date(selected[0])), handle=handle)
            add(self.details.check_out_display.selector, FakeElement(format_display_date(selected[1])), handle=handle)

        for room in self.room_types:
            dropdown = FakeElement(options=[str(n) for n in range(0, 10)])
            dropdown.value = "0"
            self.quantity_selects[room] = dropdown
            row = FakeElement(room, children={self.details.quantity_select.selector: dropdown})
            name = FakeElement(room, children={self.details.room_row.selector: row})
            add(self.details.room_type_names.selector, name, handle=handle)
            row_selector = self.details.room_row_by_name.format(room_type=xpath_literal(room)).selector
            add(row_selector, row, handle=handle)

        add(self.details.reserve_button.selector, FakeElement(on_click=lambda: self._reserve(handle)), handle=handle)

    def _reserve(self, handle: str) -> None:
        reservation = ReservationLocators().hotel_name.selector
        payment = PaymentLocators().hotel_name.selector
        if self.reservation_header:
            self.driver.add(reservation, FakeElement(self.displayed_hotel_name), handle=handle)
        self.driver.add(payment, FakeElement(self.displayed_hotel_name), handle=handle)
