"""
playwright_driver.py

What this module does
- Implements the BrowserDriver / BrowserElement protocols on top of the Playwright sync API.

Why it matters
- Page objects, the calendar navigator and the window switcher only see the protocol,
  so they are unit-tested against fakes and run unchanged against a real browser.

Behavior summary
- Lazy start: the browser is launched on first use (or via `start()`).
- Window handles are stable string ids ("window-1", "window-2", ...) assigned to
  Playwright pages as they appear in the browser context (popups included).
- Element operations on a detached node raise StaleElementError.
- Polling waits pump Playwright's event loop (`page.wait_for_timeout`) between probes,
  so pages opened by the site are observed while waiting.
- On failures the runner calls `screenshot(tag)`, which writes ./artifacts/<tag>.png.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import TypeVar

from playwright.sync_api import ElementHandle, Page
from playwright.sync_api import Error as PWError
from playwright.sync_api import TimeoutError as PWTimeoutError
from playwright.sync_api import sync_playwright

from booking_automation.browser.driver import Handle
from booking_automation.browser.waits import DEFAULT_POLL_INTERVAL, poll
from booking_automation.utils.errors import StaleElementError

logger = logging.getLogger(__name__)

T = TypeVar("T")

_DETACHED_MARKERS = (
    "not attached to the dom",
    "execution context was destroyed",
    "is disposed",
    "target closed",
)


def _is_detached(error: PWError) -> bool:
    message = str(error).lower()
    return any(marker in message for marker in _DETACHED_MARKERS)


@contextmanager
def _stale_guard() -> Iterator[None]:
    try:
        yield
    except PWTimeoutError:
        raise
    except PWError as e:
        if _is_detached(e):
            raise StaleElementError(str(e)) from e
        raise


class PlaywrightElement:
    def __init__(self, handle: ElementHandle) -> None:
        self._handle = handle

    @property
    def text(self) -> str:
        with _stale_guard():
            return self._handle.inner_text()

    def is_displayed(self) -> bool:
        with _stale_guard():
            return self._handle.is_visible()

    def is_enabled(self) -> bool:
        with _stale_guard():
            return self._handle.is_enabled()

    def click(self) -> None:
        with _stale_guard():
            self._handle.click()

    def clear(self) -> None:
        with _stale_guard():
            self._handle.fill("")

    def send_keys(self, value: str) -> None:
        with _stale_guard():
            self._handle.fill(self._handle.input_value() + value)

    def press(self, key: str) -> None:
        with _stale_guard():
            self._handle.press(key)

    def get_attribute(self, name: str) -> str | None:
        with _stale_guard():
            return self._handle.get_attribute(name)

    def input_value(self) -> str:
        with _stale_guard():
            return self._handle.input_value()

    def select_by_value(self, value: str) -> None:
        with _stale_guard():
            self._handle.select_option(value=value)

    def scroll_into_view(self) -> None:
        with _stale_guard():
            self._handle.scroll_into_view_if_needed()

    def find_element(self, selector: str) -> PlaywrightElement | None:
        with _stale_guard():
            child = self._handle.query_selector(selector)
        return PlaywrightElement(child) if child is not None else None


class PlaywrightDriver:
    """
    Playwright implementation of BrowserDriver.

    What it does:
    - Owns one browser, one context and the pages (windows/tabs) opened in it.

    Why it matters:
    - A case gets exactly one session; closing it releases everything so the
      next case starts clean.

    Behavior:
    - Uses Playwright-managed Chromium, or an installed channel (e.g. "msedge").
    - `close()` is safe to call multiple times.
    """

    def __init__(
        self,
        *,
        headless: bool = True,
        channel: str | None = None,
        artifacts_dir: str | Path = "artifacts",
        default_timeout_ms: int = 30_000,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
    ) -> None:
        self.headless = headless
        self.channel = channel
        self.poll_interval = poll_interval
        self._default_timeout_ms = default_timeout_ms

        self._artifacts_dir = Path(artifacts_dir)
        self._artifacts_dir.mkdir(parents=True, exist_ok=True)

        self._pw = None
        self._browser = None
        self._context = None
        self._page: Page | None = None

        self._handles: dict[Handle, Page] = {}
        self._counter = 0

    # -------------------- Lifecycle --------------------

    def start(self) -> None:
        """
        What it does:
        - Starts Playwright, launches the browser and opens the first page.

        Behavior:
        - If the browser isn't installed, Playwright raises. Install via:
            playwright install chromium
        """
        if self._page is not None:
            return

        self._pw = sync_playwright().start()
        launch_args: dict = {"headless": self.headless}
        if self.channel:
            launch_args["channel"] = self.channel
        try:
            self._browser = self._pw.chromium.launch(**launch_args)
        except Exception as e:
            self.close()
            raise RuntimeError(
                "Failed to launch the Playwright browser.\n"
                "If this is the first time on this machine, run:\n\n"
                "  playwright install chromium\n"
            ) from e

        self._context = self._browser.new_context(
            locale="en-US",  # calendar headers are parsed as English month names
            viewport={"width": 1920, "height": 1080},
        )
        self._context.set_default_timeout(self._default_timeout_ms)
        self._page = self._context.new_page()
        self._register(self._page)
        logger.info("Browser session started (headless=%s, channel=%s)", self.headless, self.channel)

    def close(self) -> None:
        try:
            if self._context:
                self._context.close()
        finally:
            self._context = None

        try:
            if self._browser:
                self._browser.close()
        finally:
            self._browser = None

        try:
            if self._pw:
                self._pw.stop()
        finally:
            self._pw = None
            self._page = None
            self._handles.clear()

    def __enter__(self) -> PlaywrightDriver:
        self.start()
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # -------------------- BrowserDriver interface --------------------

    def get(self, url: str) -> None:
        self.start()
        self._require_page().goto(url, wait_until="domcontentloaded")
        logger.info("Opened %s", url)

    def find_element(self, selector: str) -> PlaywrightElement | None:
        with _stale_guard():
            handle = self._require_page().query_selector(selector)
        return PlaywrightElement(handle) if handle is not None else None

    def find_elements(self, selector: str) -> list[PlaywrightElement]:
        with _stale_guard():
            handles = self._require_page().query_selector_all(selector)
        return [PlaywrightElement(h) for h in handles]

    def wait_until(self, condition: Callable[[PlaywrightDriver], T], timeout: float) -> T:
        return poll(
            lambda: condition(self),
            timeout=timeout,
            interval=self.poll_interval,
            sleep=self._pump,
            description=getattr(condition, "__qualname__", "condition"),
        )

    def window_handles(self) -> list[Handle]:
        self._refresh_handles()
        return list(self._handles)

    def current_window_handle(self) -> Handle:
        page = self._require_page()
        for handle, p in self._handles.items():
            if p is page:
                return handle
        return self._register(page)

    def switch_to(self, handle: Handle) -> None:
        self._refresh_handles()
        page = self._handles.get(handle)
        if page is None:
            raise RuntimeError(f"Unknown window handle: {handle}")
        page.bring_to_front()
        self._page = page

    def screenshot(self, tag: str) -> None:
        """
        Writes ./artifacts/<tag>.png (best effort).
        """
        page = self._page
        if not page:
            return
        out = self._artifacts_dir / f"{tag}.png"
        try:
            page.screenshot(path=str(out), full_page=True)
            logger.info("Saved screenshot %s", out)
        except PWError as e:
            logger.warning("Could not save screenshot %s: %s", out, e)

    # -------------------- Helpers --------------------

    def _require_page(self) -> Page:
        if self._page is None:
            raise RuntimeError("Playwright page not initialized. Did start() run?")
        return self._page

    def _pump(self, seconds: float) -> None:
        self._require_page().wait_for_timeout(seconds * 1000)

    def _register(self, page: Page) -> Handle:
        self._counter += 1
        handle = f"window-{self._counter}"
        self._handles[handle] = page
        return handle

    def _refresh_handles(self) -> None:
        if self._context is None:
            return
        known = list(self._handles.values())
        for page in self._context.pages:
            if not any(page is p for p in known):
                self._register(page)
        for handle, page in list(self._handles.items()):
            if page.is_closed():
                del self._handles[handle]
