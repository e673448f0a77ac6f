from .conflicts import overlaps, find_overlapping_rental
from .guards import (
    GuardResult,
    can_create_rental,
    can_cancel_rental,
    can_manage_vehicle,
    is_vehicle_owner,
)
from .transitions import can_change_rental_status, can_change_provider_status

__all__ = [
    "overlaps",
    "find_overlapping_rental",
    "GuardResult",
    "can_create_rental",
    "can_cancel_rental",
    "can_manage_vehicle",
    "is_vehicle_owner",
    "can_change_rental_status",
    "can_change_provider_status",
]
