from flask import Blueprint, current_app, jsonify

from . import rental_service
from ..utils.decorators import cron_or_admin_required

bp = Blueprint("cron", __name__, url_prefix="/cron")


@bp.post("/complete-rentals")
@cron_or_admin_required
def complete_rentals():
    """
    Scheduled sweep: activate pending rentals whose start has arrived, then
    complete active rentals whose end has passed.
    """
    service = rental_service()
    activated = service.activate_due_rentals()
    completed = service.complete_expired_rentals()
    current_app.logger.info("Cron sweep: %s activated, %s completed",
                            activated.success, completed.success)
    return jsonify({
        "success": True,
        "activated": activated.to_dict(),
        "completed": completed.to_dict(),
        "message": f"{activated.success} rental(s) activated, {completed.success} rental(s) completed",
    })
