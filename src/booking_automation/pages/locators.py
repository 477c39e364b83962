"""
Centralized locators for every page of the booking flow.

Each Locator pairs a Playwright selector with the element's intent, so a wait that
times out can say what it was waiting for and why. The site's UI changes; updating
a selector here is the only edit a layout change should require.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Locator:
    selector: str
    intent: str

    def format(self, **values: str) -> Locator:
        """Fills `{placeholders}` in the selector; the intent is filled too when it has any."""
        return Locator(self.selector.format(**values), self.intent.format(**values))


def xpath_literal(value: str) -> str:
    """
    Quotes `value` for use inside an XPath expression.

    Hotel and room names can contain apostrophes, which a plain '...' literal cannot hold.
    """
    if "'" not in value:
        return f"'{value}'"
    if '"' not in value:
        return f'"{value}"'
    parts = value.split("'")
    return "concat(" + ", \"'\", ".join(f"'{p}'" for p in parts) + ")"


@dataclass(frozen=True)
class CalendarLocators:
    container: Locator = Locator(
        "div[data-testid='searchbox-datepicker-calendar']", "date picker calendar"
    )
    month_header: Locator = Locator(".e7addce19e.af236b7586", "calendar month/year header")
    next_month: Locator = Locator("button[aria-label='Next month']", "next month button")
    day_cell: Locator = Locator("span[data-date='{date}']", "day cell for {date}")


@dataclass(frozen=True)
class HomeLocators:
    location_input: Locator = Locator(
        "xpath=//input[@aria-label='Where are you going?']", "destination input"
    )
    location_suggestion: Locator = Locator(
        "xpath=//li[@id='autocomplete-result-0']//div[normalize-space(text())={location}]",
        "first destination suggestion",
    )
    checkin_field: Locator = Locator(
        "div[data-testid='searchbox-dates-checkin']", "check-in date field"
    )
    search_button: Locator = Locator("button[type='submit']", "search button")
    popup_close: Locator = Locator(
        "button[aria-label='Dismiss sign in information.']", "sign-in popup close button"
    )


@dataclass(frozen=True)
class SearchResultsLocators:
    hotel_title: Locator = Locator(
        "xpath=//div[@data-testid='property-card']"
        "//div[@data-testid='title' and contains(normalize-space(.), {hotel_name})]",
        "property card title",
    )
    property_card: Locator = Locator(
        "xpath=ancestor::div[@data-testid='property-card']", "property card"
    )
    see_availability: Locator = Locator(
        "a[data-testid='availability-cta-btn']", "'See availability' button"
    )
    load_more: Locator = Locator(
        "xpath=//button[span[text()='Load more results']]", "'Load more results' button"
    )
    results_ready: Locator = Locator("button[type='submit']", "search form after reload")
    hotel_page_name: Locator = Locator("#hp_hotel_name", "hotel name on details page")


@dataclass(frozen=True)
class HotelDetailsLocators:
    check_in_display: Locator = Locator(
        "button[data-testid='date-display-field-start'] span", "displayed check-in date"
    )
    check_out_display: Locator = Locator(
        "button[data-testid='date-display-field-end'] span", "displayed check-out date"
    )
    room_type_names: Locator = Locator("span.hprt-roomtype-icon-link", "room type names")
    room_row: Locator = Locator(
        "xpath=ancestor::tr[contains(@class,'hprt-table-row') or contains(@class,'js-room-row')]",
        "room table row",
    )
    room_row_by_name: Locator = Locator("xpath=//tr[contains(., {room_type})]", "room table row")
    quantity_select: Locator = Locator(
        "td.hprt-table-room-select select.hprt-nos-select", "room quantity dropdown"
    )
    reserve_button: Locator = Locator(
        "button.txp-bui-main-pp.bui-button--primary.js-reservation-button", "'I'll reserve' button"
    )
    loading_spinner: Locator = Locator("span.bui-button__loader", "reserve button spinner")
    modal_dismiss: Locator = Locator(
        "div.bui-modal__content button[aria-label='Dismiss']", "modal dismiss button"
    )


@dataclass(frozen=True)
class ReservationLocators:
    hotel_name: Locator = Locator(
        "xpath=//h1[contains(@class, 'conf-page-hotel-name')]"
        " | //div[contains(@class, 'hotel-name')]"
        " | //div[@data-testid='bui-breadcrumb-item-title']",
        "hotel name on reservation page",
    )


@dataclass(frozen=True)
class PaymentLocators:
    hotel_name: Locator = Locator("xpath=//h1[@class='e7addce19e']", "hotel name on payment page")
