from __future__ import annotations

from collections.abc import Callable
from typing import Any, Protocol, TypeVar

T = TypeVar("T")

Handle = str
Condition = Callable[["BrowserDriver"], Any]


class BrowserElement(Protocol):
    """
    What it does:
    - The element operations page objects are allowed to use.

    Why it matters:
    - Page objects and the calendar navigator stay independent of the browser
      library, so unit tests run against fakes.

    Behavior:
    - Every method raises StaleElementError if the element was detached by a re-render.
    """

    @property
    def text(self) -> str: ...

    def is_displayed(self) -> bool: ...

    def is_enabled(self) -> bool: ...

    def click(self) -> None: ...

    def clear(self) -> None: ...

    def send_keys(self, value: str) -> None: ...

    def press(self, key: str) -> None: ...

    def get_attribute(self, name: str) -> str | None: ...

    def input_value(self) -> str: ...

    def select_by_value(self, value: str) -> None: ...

    def scroll_into_view(self) -> None: ...

    def find_element(self, selector: str) -> BrowserElement | None: ...


class BrowserDriver(Protocol):
    """
    What it does:
    - Defines the browser session every component receives in its constructor.

    Why it matters:
    - One session is shared by all page objects of a case; passing it explicitly
      (Fake for tests, Playwright for real use) keeps that sharing visible.

    Behavior:
    - find_element returns None when nothing matches; find_elements returns [].
    - wait_until polls `condition(driver)` until it returns a truthy value and
      returns that value, or raises WaitTimeoutError.
    - switch_to makes `handle` the window every later call acts on.
    """

    def get(self, url: str) -> None: ...

    def find_element(self, selector: str) -> BrowserElement | None: ...

    def find_elements(self, selector: str) -> list[BrowserElement]: ...

    def wait_until(self, condition: Callable[[BrowserDriver], T], timeout: float) -> T: ...

    def window_handles(self) -> list[Handle]: ...

    def current_window_handle(self) -> Handle: ...

    def switch_to(self, handle: Handle) -> None: ...

    def screenshot(self, tag: str) -> None: ...

    def close(self) -> None: ...
