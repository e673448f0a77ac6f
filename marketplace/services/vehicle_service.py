"""Vehicle listing management, gated by ownership."""

import logging

from ..exceptions import ConflictError, ForbiddenError, ValidationError, VehicleNotFoundError
from ..models.user import Actor
from ..models.vehicle import Vehicle
from ..rules.guards import can_manage_vehicle
from ..utils.constants import ALLOWED_TYPES, ProviderStatus, Role
from .common import require_text, vehicle_from_dict

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("name", "type", "license_plate", "pickup_station", "price_per_day", "is_available")


def _to_price(value) -> float:
    """Positive per-day price; whole numbers stay ints so totals stay whole."""
    try:
        price = float(value)
    except (TypeError, ValueError):
        raise ValidationError("price_per_day must be a number") from None
    if price <= 0:
        raise ValidationError("price_per_day must be positive")
    return int(price) if price.is_integer() else price


def _to_type(value) -> str:
    vtype = (value or "").strip().lower()
    if vtype not in ALLOWED_TYPES:
        raise ValidationError("Invalid vehicle type")
    return vtype


class VehicleService:
    """Vehicle catalogue: create, update, availability, delete."""

    def __init__(self, store):
        self.store = store

    def get_vehicle(self, vehicle_id: str) -> Vehicle:
        """Return a vehicle by ID or raise VehicleNotFoundError."""
        v = vehicle_from_dict(self.store.get_vehicle(vehicle_id))
        if v is None:
            raise VehicleNotFoundError()
        return v

    def vehicles_for_owner(self, owner_id: str) -> list[Vehicle]:
        return [Vehicle.from_dict(v) for v in self.store.find_vehicles_by_owner(owner_id)]

    def create_vehicle(self, actor: Actor, payload: dict) -> Vehicle:
        """Only approved providers list vehicles; the actor becomes the owner."""
        if actor.role != Role.PROVIDER or actor.provider_status != ProviderStatus.APPROVED:
            raise ForbiddenError("Only approved providers can list vehicles")

        vid = self.store.create_vehicle({
            "owner_id": actor.user_id,
            "name": require_text(payload.get("name"), "name"),
            "type": _to_type(payload.get("type")),
            "license_plate": require_text(payload.get("license_plate"), "license_plate"),
            "pickup_station": require_text(payload.get("pickup_station"), "pickup_station"),
            "price_per_day": _to_price(payload.get("price_per_day")),
            "is_available": bool(payload.get("is_available", True)),
        })
        logger.info("Vehicle %s listed by %s", vid, actor.user_id)
        return self.get_vehicle(vid)

    def _managed(self, actor: Actor, vehicle_id: str) -> Vehicle:
        vehicle = self.get_vehicle(vehicle_id)
        if not can_manage_vehicle(actor, vehicle):
            raise ForbiddenError("Forbidden: Ownership mismatch")
        return vehicle

    def update_vehicle(self, actor: Actor, vehicle_id: str, changes: dict) -> Vehicle:
        vehicle = self._managed(actor, vehicle_id)

        updates = {}
        for key in EDITABLE_FIELDS:
            if key not in changes:
                continue
            value = changes[key]
            if key == "price_per_day":
                value = _to_price(value)
            elif key == "type":
                value = _to_type(value)
            elif key == "is_available":
                value = bool(value)
            else:
                value = require_text(value, key)
            updates[key] = value
        if not updates:
            raise ValidationError("No editable fields supplied")

        row = self.store.update_vehicle(vehicle.vehicle_id, **updates)
        if row is None:
            raise VehicleNotFoundError()
        return Vehicle.from_dict(row)

    def set_availability(self, actor: Actor, vehicle_id: str, is_available: bool) -> Vehicle:
        return self.update_vehicle(actor, vehicle_id, {"is_available": is_available})

    def delete_vehicle(self, actor: Actor, vehicle_id: str) -> None:
        """
        Delete a vehicle if and only if:
        - the vehicle exists and the actor may manage it,
        - no pending or active rental references it.
        Completed and cancelled rentals stay behind as history.
        """
        vehicle = self._managed(actor, vehicle_id)
        deleted = self.store.delete_vehicle_if_idle(vehicle.vehicle_id)
        if deleted is None:
            raise VehicleNotFoundError()
        if not deleted:
            raise ConflictError("Cannot delete: pending or active rentals exist")
        logger.info("Vehicle %s deleted by %s", vehicle.vehicle_id, actor.user_id)
