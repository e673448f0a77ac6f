"""
Authorization guards: may this actor request this action on this resource?

These answer a different question than the transition tables. An operation
must pass both the guard for the actor and the table for the status change.
"""

from typing import NamedTuple, Optional

from ..utils.constants import Role, RentalStatus

SELF_RENTAL_REASON = "You cannot rent your own vehicle"


class GuardResult(NamedTuple):
    allowed: bool
    reason: Optional[str] = None


def can_create_rental(is_owner: bool) -> GuardResult:
    """Renters may book anything except their own vehicles."""
    if is_owner:
        return GuardResult(False, SELF_RENTAL_REASON)
    return GuardResult(True)


def can_cancel_rental(role, status) -> bool:
    """
    - admin: always
    - provider: while pending or active
    - user (renter): only while pending
    - anyone else: never
    """
    if role == Role.ADMIN:
        return True
    if role == Role.PROVIDER and status in (RentalStatus.PENDING, RentalStatus.ACTIVE):
        return True
    if role == Role.USER and status == RentalStatus.PENDING:
        return True
    return False


def is_vehicle_owner(store, vehicle_id: str, user_id: str) -> bool:
    """Look the vehicle up and compare its owner to `user_id`; False if it does not exist."""
    v = store.get_vehicle(vehicle_id)
    if not v:
        return False
    return str(v.get("owner_id")) == str(user_id)


def can_manage_vehicle(actor, vehicle) -> bool:
    """Admins manage every vehicle; providers only the ones they own."""
    if actor.role == Role.ADMIN:
        return True
    return actor.role == Role.PROVIDER and vehicle.is_owned_by(actor.user_id)
