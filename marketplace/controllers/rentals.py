from flask import Blueprint, g, jsonify

from . import json_body, rental_service
from ..utils.decorators import login_required

bp = Blueprint("rentals", __name__, url_prefix="/rentals")


@bp.post("")
@login_required
def create_rental():
    """Book a vehicle for the current user; the rental starts out pending."""
    data = json_body()
    period = data.get("rental_period") or {}
    rental = rental_service().create_rental(
        renter_id=g.actor.user_id,
        vehicle_id=data.get("vehicle_id"),
        start_date=data.get("start_date") or period.get("start_date"),
        end_date=data.get("end_date") or period.get("end_date"),
        pickup_location=data.get("pickup_location"),
        drop_off_location=data.get("drop_off_location"),
    )
    return jsonify({"success": True, "message": "Rental created successfully",
                    "rental": rental.to_dict()}), 201


@bp.get("")
@login_required
def my_rentals():
    rentals = rental_service().rentals_for_renter(g.actor.user_id)
    return jsonify({"rentals": [r.to_dict() for r in rentals]})


@bp.get("/<rental_id>")
@login_required
def rental_detail(rental_id):
    rental = rental_service().get_rental_for(rental_id, g.actor.user_id, g.actor.role)
    return jsonify({"rental": rental.to_dict()})


@bp.post("/<rental_id>/cancel")
@login_required
def cancel_rental(rental_id):
    """Cancel in whatever role the caller holds; the guards decide what is allowed."""
    rental = rental_service().cancel_rental(rental_id, g.actor.user_id, g.actor.role)
    return jsonify({"success": True, "rental": rental.to_dict()})
