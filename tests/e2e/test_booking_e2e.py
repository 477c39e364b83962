"""
Data-driven booking flow against the live site.

Skipped unless BOOKING_RUN_E2E=1 and the data file from settings exists.
Each spreadsheet row becomes one test case.
"""

from __future__ import annotations

import pytest

from booking_automation.config.settings import require_data_file, settings
from booking_automation.data.booking_case import BookingCase
from booking_automation.data.excel_reader import read_records
from booking_automation.pages.flow import run_booking_flow
from booking_automation.utils.errors import AutomationError, DataError

pytestmark = [
    pytest.mark.e2e,
    pytest.mark.skipif(not settings.run_e2e, reason="Set BOOKING_RUN_E2E=1 to run against the live site"),
]


def _load_records() -> list[dict[str, str]]:
    if not settings.run_e2e:
        return []
    try:
        path = require_data_file()
    except RuntimeError:
        return []
    return read_records(path, settings.sheet_name)


RECORDS = _load_records()


@pytest.mark.parametrize(
    "case_number, record",
    [pytest.param(n, r, id=f"case{n}-{r.get('HotelName', '')}") for n, r in enumerate(RECORDS, start=1)],
)
def test_booking_reaches_payment_with_expected_hotel(driver, case_number, record):
    try:
        case = BookingCase.from_record(record, case_number=case_number)
    except DataError as e:
        pytest.skip(f"Skipping case {case_number} due to invalid data: {e}")

    try:
        result = run_booking_flow(
            driver,
            case,
            base_url=settings.base_url,
            navigation_budget=settings.navigation_budget,
            window_timeout=settings.window_timeout_seconds,
        )
    except AutomationError:
        driver.screenshot(f"case_{case_number}_failure")
        raise

    if not result.hotel_name_matches:
        driver.screenshot(f"case_{case_number}_hotel_name_mismatch")
    assert result.hotel_name_matches, (
        "Hotel name mismatch on payment page. "
        f"Expected to contain: {result.expected_hotel_name!r}, Actual: {result.displayed_hotel_name!r}"
    )
