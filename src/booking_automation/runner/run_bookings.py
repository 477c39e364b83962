from __future__ import annotations

import argparse
import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from enum import StrEnum

from booking_automation.browser.driver import BrowserDriver
from booking_automation.browser.playwright_driver import PlaywrightDriver
from booking_automation.config.paths import resolve_path
from booking_automation.config.settings import require_data_file, settings
from booking_automation.data.booking_case import BookingCase
from booking_automation.data.excel_reader import read_records
from booking_automation.pages.flow import run_booking_flow
from booking_automation.utils.errors import (
    AutomationError,
    DataError,
    NotFoundError,
    StaleElementError,
    StructuralUIError,
)
from booking_automation.utils.logging import configure_logging

logger = logging.getLogger(__name__)

DriverFactory = Callable[[], BrowserDriver]


class CaseStatus(StrEnum):
    PASSED = "passed"
    FAILED = "failed"
    SKIPPED = "skipped"
    ERROR = "error"


@dataclass(frozen=True)
class CaseOutcome:
    case_number: int
    status: CaseStatus
    message: str = ""
    error_kind: str | None = None
    record: dict[str, str] = field(default_factory=dict)


def classify_error(error: BaseException) -> str:
    """Lets a report tell 'the page changed' apart from 'the data is legitimately absent'."""
    if isinstance(error, NotFoundError):
        return "not_found"
    if isinstance(error, StructuralUIError):
        return "structural"
    if isinstance(error, StaleElementError):
        return "transient"
    if isinstance(error, DataError):
        return "data"
    return "unexpected"


def run_case(
    record: dict[str, str],
    case_number: int,
    *,
    driver_factory: DriverFactory,
    base_url: str | None,
    navigation_budget: int,
    window_timeout: float,
) -> CaseOutcome:
    """
    What it does:
    - Runs one data row end to end in its own browser session.

    Why it matters:
    - One case's failure must not stop, or leak browser state into, the next case.

    Behavior:
    - Data problems skip the case before a browser is started.
    - Any failure during the flow is logged with the data row, screenshotted,
      and returned as an outcome; the session is always closed.
    """
    try:
        case = BookingCase.from_record(record, case_number=case_number)
    except DataError as e:
        logger.warning("Skipping case %d due to invalid data: %s", case_number, e)
        return CaseOutcome(case_number, CaseStatus.SKIPPED, str(e), classify_error(e), record)

    driver = driver_factory()
    try:
        result = run_booking_flow(
            driver,
            case,
            base_url=base_url,
            navigation_budget=navigation_budget,
            window_timeout=window_timeout,
        )
        if not result.hotel_name_matches:
            message = (
                "Hotel name mismatch on payment page. "
                f"Expected to contain: {result.expected_hotel_name!r}, "
                f"Actual: {result.displayed_hotel_name!r}"
            )
            logger.error("Case %d failed: %s | data row: %s", case_number, message, record)
            driver.screenshot(f"case_{case_number}_hotel_name_mismatch")
            return CaseOutcome(case_number, CaseStatus.FAILED, message, "assertion", record)

        logger.info("Case %d passed: %s", case_number, result.displayed_hotel_name)
        return CaseOutcome(case_number, CaseStatus.PASSED, result.displayed_hotel_name, None, record)

    except AutomationError as e:
        kind = classify_error(e)
        logger.error("Case %d failed (%s) %s: %s | data row: %s", case_number, kind, type(e).__name__, e, record)
        driver.screenshot(f"case_{case_number}_{type(e).__name__}")
        return CaseOutcome(case_number, CaseStatus.FAILED, f"{type(e).__name__}: {e}", kind, record)

    except Exception as e:
        logger.exception("Case %d hit an unexpected error | data row: %s", case_number, record)
        driver.screenshot(f"case_{case_number}_error")
        return CaseOutcome(case_number, CaseStatus.ERROR, f"{type(e).__name__}: {e}", "unexpected", record)

    finally:
        driver.close()


def run_all(
    records: Iterable[dict[str, str]],
    *,
    driver_factory: DriverFactory,
    base_url: str | None = None,
    navigation_budget: int = 24,
    window_timeout: float = 15.0,
) -> list[CaseOutcome]:
    return [
        run_case(
            record,
            number,
            driver_factory=driver_factory,
            base_url=base_url,
            navigation_budget=navigation_budget,
            window_timeout=window_timeout,
        )
        for number, record in enumerate(records, start=1)
    ]


def main(argv: list[str] | None = None) -> int:
    """
    What it does:
    - Runs every row of the booking data sheet against the live site.

    Behavior:
    - Each case gets a fresh Playwright session.
    - Prints one OK/FAILED/SKIPPED/ERROR line per case.
    - Returns 1 if any case failed or errored, else 0.
    """
    parser = argparse.ArgumentParser(description="Run the data-driven hotel booking UI flow.")
    parser.add_argument("--data", type=str, default=None, help="Path to the .xlsx data file.")
    parser.add_argument("--sheet", type=str, default=None, help="Sheet name (default from settings).")
    parser.add_argument("--base-url", type=str, default=None, help="Site to open for every case.")
    parser.add_argument("--headful", action="store_true", help="Show the browser window for debugging.")
    parser.add_argument("--log-level", type=str, default=None)
    args = parser.parse_args(argv)

    configure_logging(args.log_level or settings.log_level)

    data_file = require_data_file(args.data) if args.data else require_data_file()
    records = read_records(data_file, args.sheet or settings.sheet_name)

    def driver_factory() -> PlaywrightDriver:
        return PlaywrightDriver(
            headless=settings.headless and not args.headful,
            channel=settings.browser_channel,
            artifacts_dir=resolve_path(settings.artifacts_dir),
            default_timeout_ms=settings.default_timeout_ms,
            poll_interval=settings.poll_interval_seconds,
        )

    outcomes = run_all(
        records,
        driver_factory=driver_factory,
        base_url=args.base_url or settings.base_url,
        navigation_budget=settings.navigation_budget,
        window_timeout=settings.window_timeout_seconds,
    )

    labels = {
        CaseStatus.PASSED: "OK",
        CaseStatus.FAILED: "FAILED",
        CaseStatus.SKIPPED: "SKIPPED",
        CaseStatus.ERROR: "ERROR",
    }
    for outcome in outcomes:
        print(f"{labels[outcome.status]}: case={outcome.case_number} {outcome.message}")

    bad = [o for o in outcomes if o.status in (CaseStatus.FAILED, CaseStatus.ERROR)]
    print(f"{len(outcomes)} case(s), {len(bad)} failed")
    return 1 if bad else 0


if __name__ == "__main__":
    raise SystemExit(main())
