from flask import Blueprint, g, jsonify

from . import json_body, rental_service, vehicle_service
from ..utils.decorators import approved_provider_required

bp = Blueprint("provider", __name__, url_prefix="/provider")


@bp.get("/rentals")
@approved_provider_required
def provider_rentals():
    """Rentals on the caller's vehicles."""
    rentals = rental_service().rentals_for_provider(g.actor.user_id)
    return jsonify([r.to_dict() for r in rentals])


@bp.patch("/rentals/<rental_id>")
@approved_provider_required
def change_rental_status(rental_id):
    """Accept (active), reject/cancel (cancelled) or complete a rental."""
    status = json_body().get("status")
    rental = rental_service().change_rental_status(rental_id, g.actor.user_id, g.actor.role, status)
    return jsonify(rental.to_dict())


@bp.get("/vehicles")
@approved_provider_required
def provider_vehicles():
    vehicles = vehicle_service().vehicles_for_owner(g.actor.user_id)
    return jsonify([v.to_dict() for v in vehicles])


@bp.post("/vehicles")
@approved_provider_required
def create_vehicle():
    vehicle = vehicle_service().create_vehicle(g.actor, json_body())
    return jsonify({"success": True, "vehicle": vehicle.to_dict()}), 201


@bp.patch("/vehicles/<vehicle_id>")
@approved_provider_required
def update_vehicle(vehicle_id):
    vehicle = vehicle_service().update_vehicle(g.actor, vehicle_id, json_body())
    return jsonify({"success": True, "vehicle": vehicle.to_dict()})


@bp.delete("/vehicles/<vehicle_id>")
@approved_provider_required
def delete_vehicle(vehicle_id):
    vehicle_service().delete_vehicle(g.actor, vehicle_id)
    return jsonify({"success": True, "message": "Vehicle deleted"})
