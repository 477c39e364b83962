from __future__ import annotations


class AutomationError(Exception):
    """Base class for every failure raised by the booking automation."""


# -------------------- Data errors --------------------


class DataError(AutomationError):
    """Raised when a data-table row cannot be turned into a runnable case."""


class MissingFieldError(DataError):
    """Raised when a required column is missing or blank in a data row."""

    def __init__(self, fields: list[str], record: dict[str, str]) -> None:
        self.fields = fields
        self.record = record
        super().__init__(f"Missing or empty data for {', '.join(fields)}: {record}")


class InvalidDateError(DataError):
    """Raised when a date cell is not a valid yyyy-MM-dd value."""


class SheetNotFoundError(DataError):
    """Raised when the requested sheet does not exist in the workbook."""

    def __init__(self, sheet_name: str, path: str, available: list[str]) -> None:
        self.sheet_name = sheet_name
        self.path = path
        self.available = available
        super().__init__(
            f"Sheet with name '{sheet_name}' not found in {path}. Available: {', '.join(available) or '-'}"
        )


# -------------------- Transient UI errors --------------------


class StaleElementError(AutomationError):
    """Raised when an element reference was detached by a re-render."""


class WaitTimeoutError(AutomationError):
    """Raised by the polling helper when a condition never became ready."""


# -------------------- Structural UI errors --------------------


class StructuralUIError(AutomationError):
    """Raised when the page does not look or behave the way the page objects expect."""


class ElementWaitError(StructuralUIError):
    """Raised when an element needed by an operation never reached the expected state."""

    def __init__(self, operation: str, intent: str, selector: str, timeout: float) -> None:
        self.operation = operation
        self.intent = intent
        self.selector = selector
        self.timeout = timeout
        super().__init__(
            f"{operation}: timed out after {timeout:g}s waiting for {intent} ({selector})"
        )


class UnparsableHeaderError(StructuralUIError):
    """Raised when the calendar header text is not a 'Month yyyy' label."""

    def __init__(self, header_text: str, target: object) -> None:
        self.header_text = header_text
        self.target = target
        super().__init__(
            f"Could not parse calendar header {header_text!r} while looking for {target}"
        )


class NavigationOvershootError(StructuralUIError):
    """Raised when the calendar shows a month after the target month."""

    def __init__(self, header_text: str, target: object) -> None:
        self.header_text = header_text
        self.target = target
        super().__init__(
            f"Calendar navigated past target month: showing {header_text!r}, target {target}"
        )


class DateNotSelectableError(StructuralUIError):
    """Raised when the month is correct but the day cell cannot be clicked."""

    def __init__(self, target: object, header_text: str, selector: str) -> None:
        self.target = target
        self.header_text = header_text
        self.selector = selector
        super().__init__(
            f"Date {target} not found or clickable in {header_text!r} despite month being correct ({selector})"
        )


class WindowNotOpenedError(StructuralUIError):
    """Raised when a new browser window/tab did not appear in time."""


class DateMismatchError(StructuralUIError):
    """Raised when the dates shown on the hotel page differ from the requested ones."""


# -------------------- Not-found errors --------------------


class NotFoundError(AutomationError):
    """Raised when data that should exist on the site is legitimately absent."""


class DateNotFoundError(NotFoundError):
    """Raised when the navigation budget runs out before the target month shows up."""

    def __init__(self, target: object, budget: int) -> None:
        self.target = target
        self.budget = budget
        super().__init__(f"Could not find date {target} after trying {budget} months")


class HotelNotFoundError(NotFoundError):
    """Raised when a hotel is absent after exhausting result pagination."""


class RoomNotFoundError(NotFoundError):
    """Raised when a room type is not offered on the hotel page."""
