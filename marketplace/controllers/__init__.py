"""HTTP boundary: blueprints plus accessors for the services bound to the app."""

from flask import current_app, request


def _services() -> dict:
    return current_app.extensions["marketplace"]


def rental_service():
    return _services()["rentals"]


def user_service():
    return _services()["users"]


def vehicle_service():
    return _services()["vehicles"]


def json_body() -> dict:
    """Request JSON (or form data) as a dict; never None."""
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form.to_dict()
