from __future__ import annotations

import logging
from dataclasses import dataclass, field

from booking_automation.pages.calendar import CalendarDate
from booking_automation.utils.errors import InvalidDateError, MissingFieldError

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = (
    "Location",
    "CheckInDate",
    "CheckOutDate",
    "HotelName",
    "RoomType",
    "NumberOfRooms",
)

DEFAULT_NUMBER_OF_ROOMS = 1


def parse_number_of_rooms(raw: str) -> int:
    """
    Non-numeric or non-positive values fall back to 1 with a warning instead of
    failing the case.
    """
    try:
        value = int(raw.strip())
    except ValueError:
        logger.warning(
            "Error parsing number of rooms (%r), defaulting to %d", raw, DEFAULT_NUMBER_OF_ROOMS
        )
        return DEFAULT_NUMBER_OF_ROOMS

    if value <= 0:
        logger.warning(
            "Invalid number of rooms (%r), defaulting to %d", raw, DEFAULT_NUMBER_OF_ROOMS
        )
        return DEFAULT_NUMBER_OF_ROOMS
    return value


@dataclass(frozen=True)
class BookingCase:
    """
    What it does:
    - One validated row of the booking data table.

    Why it matters:
    - The flow only ever sees typed values; data problems are found before a
      browser is started.

    Behavior:
    - `from_record` raises MissingFieldError / InvalidDateError (the case is skipped).
    - `case_number` is the 1-based position of the record in the data table (blank
      rows excluded); it and `record` are kept so failures can name the data row.
    """

    location: str
    check_in: CalendarDate
    check_out: CalendarDate
    hotel_name: str
    room_type: str
    number_of_rooms: int
    case_number: int | None = None
    record: dict[str, str] = field(default_factory=dict, compare=False)

    @classmethod
    def from_record(cls, record: dict[str, str], *, case_number: int | None = None) -> BookingCase:
        missing = [name for name in REQUIRED_FIELDS if not (record.get(name) or "").strip()]
        if missing:
            raise MissingFieldError(missing, record)

        check_in = CalendarDate.parse(record["CheckInDate"])
        check_out = CalendarDate.parse(record["CheckOutDate"])
        if check_out.to_date() <= check_in.to_date():
            raise InvalidDateError(
                f"Check-out {check_out} must be after check-in {check_in}"
            )

        return cls(
            location=record["Location"].strip(),
            check_in=check_in,
            check_out=check_out,
            hotel_name=record["HotelName"].strip(),
            room_type=record["RoomType"].strip(),
            number_of_rooms=parse_number_of_rooms(record["NumberOfRooms"]),
            case_number=case_number,
            record=dict(record),
        )

    def describe(self) -> str:
        return (
            f"Location={self.location}, CheckIn={self.check_in}, CheckOut={self.check_out}, "
            f"Hotel={self.hotel_name}, RoomType={self.room_type}, Rooms={self.number_of_rooms}"
        )
