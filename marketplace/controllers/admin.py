from flask import Blueprint, g, jsonify, request

from . import json_body, rental_service, user_service
from ..utils.constants import Role
from ..utils.decorators import role_required

bp = Blueprint("admin", __name__, url_prefix="/admin")


@bp.get("/providers")
@role_required(Role.ADMIN)
def list_providers():
    """Provider accounts, filtered by ?status=pending|approved|rejected|all."""
    providers = user_service().list_providers(request.args.get("status"))
    return jsonify([p.to_dict() for p in providers])


@bp.get("/providers/<provider_id>")
@role_required(Role.ADMIN)
def provider_detail(provider_id):
    return jsonify(user_service().get_user(provider_id).to_dict())


@bp.patch("/providers/<provider_id>")
@role_required(Role.ADMIN)
def change_provider_status(provider_id):
    """Approve or reject a provider application."""
    data = json_body()
    status = data.get("provider_status") or data.get("providerStatus")
    user = user_service().change_provider_status(provider_id, status)
    return jsonify({"success": True, "user": user.to_dict()})


@bp.get("/rentals/<rental_id>")
@role_required(Role.ADMIN)
def rental_detail(rental_id):
    return jsonify({"rental": rental_service().get_rental(rental_id).to_dict()})


@bp.patch("/rentals/<rental_id>")
@role_required(Role.ADMIN)
def change_rental_status(rental_id):
    status = json_body().get("status")
    rental = rental_service().change_rental_status(rental_id, g.actor.user_id, g.actor.role, status)
    return jsonify(rental.to_dict())
