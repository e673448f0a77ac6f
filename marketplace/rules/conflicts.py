"""Booking conflict detection."""

from typing import Optional

from ..models.rental import Rental


def overlaps(a_start, a_end, b_start, b_end) -> bool:
    """
    Check overlap between [a_start, a_end) and [b_start, b_end).
    End is exclusive: a rental ending exactly when another begins does not conflict.
    Overlap rule: a_start < b_end and b_start < a_end
    """
    return a_start < b_end and b_start < a_end


def find_overlapping_rental(store, vehicle_id: str, start, end) -> Optional[Rental]:
    """
    Return a non-cancelled rental on `vehicle_id` whose range overlaps
    [start, end), or None. Pending, active and completed rentals all block.
    """
    row = store.find_overlapping_rental(vehicle_id, start, end)
    return Rental.from_dict(row) if row else None
