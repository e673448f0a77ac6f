"""Shared service helpers and factories."""

from typing import NamedTuple, Optional

from ..exceptions import ValidationError, InvalidDateRangeError
from ..models.rental import Rental
from ..models.user import User
from ..models.vehicle import Vehicle
from ..utils.dates import parse_datetime


class SweepResult(NamedTuple):
    processed: int
    success: int

    def to_dict(self) -> dict:
        return {"processed": self.processed, "success": self.success}


# -------- validators / normalizers --------
def require_text(value, field: str) -> str:
    """Return the stripped string or raise ValidationError if it is missing/blank."""
    s = "" if value is None else str(value).strip()
    if not s:
        raise ValidationError(f"Missing required field: {field}")
    return s


def parse_booking_dates(start, end, tz_name: str = "UTC"):
    """
    Parse and order-check a booking range.
    Missing values -> ValidationError; unparseable or end <= start -> InvalidDateRangeError.
    """
    if not start or not end:
        raise ValidationError("Missing required field: start_date/end_date")
    try:
        d1 = parse_datetime(start, tz_name)
        d2 = parse_datetime(end, tz_name)
    except (ValueError, OverflowError):
        raise InvalidDateRangeError("Invalid dates (YYYY-MM-DD or ISO-8601)") from None
    if d2 <= d1:
        raise InvalidDateRangeError("End date must be after start date")
    return d1, d2


def parse_status(enum_cls, value):
    """Map boundary input onto a closed enum (status or role); unknown values are rejected."""
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(s.value for s in enum_cls)
        raise ValidationError(f"Invalid value '{value}'. Must be one of: {allowed}") from None


# -------- dict -> rich model mappers --------
def user_from_dict(d: Optional[dict]) -> Optional[User]:
    return User.from_dict(d) if d else None


def vehicle_from_dict(d: Optional[dict]) -> Optional[Vehicle]:
    return Vehicle.from_dict(d) if d else None


def rental_from_dict(d: Optional[dict]) -> Optional[Rental]:
    return Rental.from_dict(d) if d else None
