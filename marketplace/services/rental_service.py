"""Rental lifecycle: booking, status changes and the expiry sweep."""

import logging
from typing import Optional

from ..exceptions import (
    ConflictError,
    ForbiddenError,
    InvalidTransitionError,
    RentalNotFoundError,
    VehicleNotFoundError,
    VehicleUnavailableError,
)
from ..models.rental import Rental
from ..rules.conflicts import find_overlapping_rental
from ..rules.guards import can_cancel_rental, can_create_rental, is_vehicle_owner
from ..rules.transitions import can_change_rental_status
from ..utils.constants import PLATFORM_FEE, RentalStatus, Role
from ..utils.dates import utcnow
from .common import (
    SweepResult,
    parse_booking_dates,
    parse_status,
    rental_from_dict,
    require_text,
    vehicle_from_dict,
)
from .pricing import compute_cost

logger = logging.getLogger(__name__)


def _as_role(value) -> Optional[Role]:
    try:
        return Role(value)
    except ValueError:
        return None


class RentalService:
    """
    Create, transition and sweep rentals.

    Every failure is raised as a typed RentalError subclass; nothing is
    retried here. The store is injected so tests can hand in a fresh one.
    """

    def __init__(self, store, platform_fee=PLATFORM_FEE, clock=utcnow, tz_name: str = "UTC"):
        self.store = store
        self.platform_fee = platform_fee
        self.clock = clock
        self.tz_name = tz_name

    # --------------- Queries ---------------
    def get_rental(self, rental_id: str) -> Rental:
        rental = rental_from_dict(self.store.get_rental(rental_id))
        if rental is None:
            raise RentalNotFoundError()
        return rental

    def get_rental_for(self, rental_id: str, actor_id: str, actor_role) -> Rental:
        """A rental as seen by its renter, the owner of its vehicle, or an admin."""
        rental = self.get_rental(rental_id)
        role = _as_role(actor_role)
        if role == Role.ADMIN or rental.renter_id == str(actor_id):
            return rental
        if role == Role.PROVIDER and is_vehicle_owner(self.store, rental.vehicle_id, actor_id):
            return rental
        raise ForbiddenError("Not allowed to view this rental")

    def rentals_for_renter(self, renter_id: str) -> list[Rental]:
        return [Rental.from_dict(r) for r in self.store.find_rentals_by_renter(renter_id)]

    def rentals_for_provider(self, provider_id: str) -> list[Rental]:
        """Rentals on every vehicle the provider owns."""
        vehicles = self.store.find_vehicles_by_owner(provider_id)
        if not vehicles:
            return []
        ids = [v["vehicle_id"] for v in vehicles]
        return [Rental.from_dict(r) for r in self.store.find_rentals_by_vehicle_ids(ids)]

    # --------------- Commands ---------------
    def create_rental(
            self,
            renter_id: str,
            vehicle_id: str,
            start_date,
            end_date,
            pickup_location: str,
            drop_off_location: str,
    ) -> Rental:
        """
        Book a vehicle. Checks run in a fixed order:
          input -> vehicle exists -> not own vehicle -> available
          -> no overlap -> price -> persist as pending
        """
        renter_id = require_text(renter_id, "renter_id")
        vehicle_id = require_text(vehicle_id, "vehicle_id")
        pickup = require_text(pickup_location, "pickup_location")
        drop_off = require_text(drop_off_location, "drop_off_location")
        start, end = parse_booking_dates(start_date, end_date, self.tz_name)

        vehicle = vehicle_from_dict(self.store.get_vehicle(vehicle_id))
        if vehicle is None:
            raise VehicleNotFoundError()

        check = can_create_rental(vehicle.is_owned_by(renter_id))
        if not check.allowed:
            raise ForbiddenError(check.reason)

        if not vehicle.is_available:
            raise VehicleUnavailableError()

        if find_overlapping_rental(self.store, vehicle_id, start, end) is not None:
            raise ConflictError()

        total = compute_cost(start, end, vehicle.price_per_day, self.platform_fee, self.tz_name)

        row = self.store.create_rental({
            "vehicle_id": vehicle.vehicle_id,
            "renter_id": renter_id,
            "pickup_location": pickup,
            "drop_off_location": drop_off,
            "start_date": start,
            "end_date": end,
            "total_cost": total,
            "status": RentalStatus.PENDING,
        })
        if row is None:
            # Another booking took the range between our check and the insert
            raise ConflictError()

        logger.info("Rental %s created: vehicle=%s renter=%s total=%s",
                    row["rental_id"], vehicle.vehicle_id, renter_id, total)
        return Rental.from_dict(row)

    def change_rental_status(self, rental_id: str, actor_id: str, actor_role, requested_status) -> Rental:
        """
        Move a rental to `requested_status` on behalf of an actor.
        Order: resolve rental -> authorize actor -> check transition table
        -> compare-and-set on the status that was authorized.
        """
        requested = parse_status(RentalStatus, requested_status)

        rental = self.get_rental(rental_id)
        self._authorize_status_change(rental, str(actor_id), _as_role(actor_role), requested)

        if not can_change_rental_status(rental.status, requested):
            raise InvalidTransitionError(
                f"Invalid status transition: {rental.status.value} -> {requested.value}")

        row = self.store.update_rental_status(rental.rental_id, requested, expected=rental.status)
        if row is None:
            raise ConflictError("Rental status changed in the meantime, please retry")

        logger.info("Rental %s: %s -> %s by %s (%s)", rental.rental_id,
                    rental.status.value, requested.value, actor_id, getattr(actor_role, "value", actor_role))
        return Rental.from_dict(row)

    def _authorize_status_change(self, rental: Rental, actor_id: str, role: Optional[Role],
                                 requested: RentalStatus) -> None:
        if role == Role.ADMIN:
            return

        # The renter keeps renter rights whatever role the session carries
        if role in (Role.USER, Role.PROVIDER) and rental.renter_id == actor_id:
            if requested != RentalStatus.CANCELLED:
                raise ForbiddenError("Renters can only cancel their rentals")
            if not can_cancel_rental(Role.USER, rental.status):
                raise ForbiddenError("Only pending rentals can be cancelled")
            return

        if role == Role.PROVIDER:
            if not is_vehicle_owner(self.store, rental.vehicle_id, actor_id):
                raise ForbiddenError("Forbidden: Ownership mismatch")
            if requested == RentalStatus.CANCELLED and not can_cancel_rental(role, rental.status):
                raise ForbiddenError("Providers can only cancel pending or active rentals")
            return

        if role == Role.USER:
            raise ForbiddenError("Not allowed to change this rental")

        raise ForbiddenError()

    def accept_rental(self, rental_id: str, actor_id: str, actor_role=Role.PROVIDER) -> Rental:
        return self.change_rental_status(rental_id, actor_id, actor_role, RentalStatus.ACTIVE)

    def reject_rental(self, rental_id: str, actor_id: str, actor_role=Role.PROVIDER) -> Rental:
        return self.change_rental_status(rental_id, actor_id, actor_role, RentalStatus.CANCELLED)

    def cancel_rental(self, rental_id: str, actor_id: str, actor_role=Role.USER) -> Rental:
        return self.change_rental_status(rental_id, actor_id, actor_role, RentalStatus.CANCELLED)

    # --------------- Sweeps ---------------
    def complete_expired_rentals(self) -> SweepResult:
        """
        Complete every active rental whose end date has passed.
        Each update stands alone: one failure is logged and only lowers `success`.
        Running it again right away processes nothing.
        """
        now = self.clock()
        rows = self.store.find_active_ended_before(now)
        result = self._sweep(rows, RentalStatus.ACTIVE, RentalStatus.COMPLETED)
        logger.info("Expiry sweep: processed=%d success=%d", result.processed, result.success)
        return result

    def activate_due_rentals(self) -> SweepResult:
        """Activate pending rentals whose start date has arrived."""
        now = self.clock()
        rows = self.store.find_pending_started_by(now)
        result = self._sweep(rows, RentalStatus.PENDING, RentalStatus.ACTIVE)
        logger.info("Activation sweep: processed=%d success=%d", result.processed, result.success)
        return result

    def _sweep(self, rows: list[dict], current: RentalStatus, target: RentalStatus) -> SweepResult:
        success = 0
        for row in rows:
            rid = row.get("rental_id")
            try:
                if self.store.update_rental_status(rid, target, expected=current) is not None:
                    success += 1
            except Exception:
                logger.exception("Sweep failed to move rental %s to %s", rid, target.value)
        return SweepResult(processed=len(rows), success=success)
