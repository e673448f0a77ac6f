"""Booking price calculation."""

import math
from datetime import datetime, timedelta

import pytz

from ..exceptions import InvalidDateRangeError
from ..utils.constants import PLATFORM_FEE

ONE_DAY = timedelta(days=1)


def _wall_clock(value, tz_name: str):
    """Naive local time in `tz_name`, so a day is always 24 hours long."""
    if isinstance(value, datetime) and value.tzinfo is not None:
        return value.astimezone(pytz.timezone(tz_name)).replace(tzinfo=None)
    return value


def rental_days(start, end, tz_name: str = "UTC") -> int:
    """
    Billable days for [start, end): any started day counts as a whole day.
    Days are counted on the calendar of `tz_name`, so a booking that crosses
    a DST change is not billed for the extra hour.
    Raises InvalidDateRangeError when end is not after start.
    """
    if end <= start:
        raise InvalidDateRangeError()
    span = _wall_clock(end, tz_name) - _wall_clock(start, tz_name)
    # An hour-long booking across a fall-back change can have zero wall-clock length
    return max(1, math.ceil(span / ONE_DAY))


def compute_cost(start, end, price_per_day, platform_fee=PLATFORM_FEE, tz_name: str = "UTC"):
    """
    days * price_per_day + platform_fee.

    >>> from datetime import date
    >>> compute_cost(date(2024, 1, 1), date(2024, 1, 4), 100)
    309
    """
    return rental_days(start, end, tz_name) * price_per_day + platform_fee
