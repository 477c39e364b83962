from __future__ import annotations

import logging
from collections.abc import Callable

from booking_automation.browser.driver import BrowserDriver, Handle
from booking_automation.utils.errors import WaitTimeoutError, WindowNotOpenedError

logger = logging.getLogger(__name__)


class WindowSwitcher:
    """
    What it does:
    - Runs an action that is expected to open one new tab/window and moves the
      session onto it.

    Why it matters:
    - The browser session has a single active window. Changing it only happens
      here, explicitly, after the new window has actually appeared.

    Behavior:
    - Samples the handle set, runs the action, polls until exactly one new
      handle exists, switches to it and returns it.
    - Raises WindowNotOpenedError if no new handle shows up before the timeout.
    - After success the original window is no longer the active one.
    """

    def __init__(self, driver: BrowserDriver, *, timeout: float = 15.0) -> None:
        self.driver = driver
        self.timeout = timeout

    def await_new_window(self, original: Handle, triggering_action: Callable[[], None]) -> Handle:
        before = set(self.driver.window_handles())
        before.add(original)

        triggering_action()

        def _one_new_handle(driver: BrowserDriver) -> Handle | None:
            opened = [h for h in driver.window_handles() if h not in before]
            if len(opened) == 1:
                return opened[0]
            if len(opened) > 1:
                logger.warning("Expected one new window, saw %d; waiting for the count to settle", len(opened))
            return None

        try:
            handle = self.driver.wait_until(_one_new_handle, self.timeout)
        except WaitTimeoutError as e:
            raise WindowNotOpenedError(
                f"No new window opened within {self.timeout:g}s (had {len(before)} window(s))"
            ) from e

        self.driver.switch_to(handle)
        logger.info("Switched to new window %s", handle)
        return handle
