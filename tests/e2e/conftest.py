from __future__ import annotations

import pytest

from booking_automation.browser.playwright_driver import PlaywrightDriver
from booking_automation.config.paths import resolve_path
from booking_automation.config.settings import settings
from booking_automation.utils.logging import configure_logging


@pytest.fixture(scope="session", autouse=True)
def _logging():
    configure_logging(settings.log_level)


@pytest.fixture()
def driver():
    """
    One real browser session per test case, closed on teardown even when the case fails.
    """
    d = PlaywrightDriver(
        headless=settings.headless,
        channel=settings.browser_channel,
        artifacts_dir=resolve_path(settings.artifacts_dir),
        default_timeout_ms=settings.default_timeout_ms,
        poll_interval=settings.poll_interval_seconds,
    )
    try:
        yield d
    finally:
        d.close()
