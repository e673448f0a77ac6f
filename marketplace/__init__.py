import atexit
import logging

import click
import pytz
from flask import Flask, jsonify

from .config import Config
from .controllers.admin import bp as admin_bp
from .controllers.cron import bp as cron_bp
from .controllers.provider import bp as provider_bp
from .controllers.rentals import bp as rentals_bp
from .exceptions import RentalError
from .models.store import Store
from .services import RentalService, UserService, VehicleService

logger = logging.getLogger(__name__)


def create_app(config=None, store=None):
    """
    Application factory.

    `config` overrides the defaults in Config; `store` injects a ready-made
    persistence object (tests pass a fresh in-memory Store).
    """
    app = Flask(__name__)
    app.config.from_object(Config)
    if config:
        app.config.update(config)

    # Fail at startup, not on the first booking, if the zone is misspelled
    pytz.timezone(app.config["APP_TIMEZONE"])

    if store is None:
        store = Store(app.config.get("DATA_PATH") or None)
        if store.path and not app.config.get("TESTING"):
            atexit.register(store.close)
    store.open()

    app.extensions["marketplace"] = {
        "store": store,
        "rentals": RentalService(
            store,
            platform_fee=app.config["PLATFORM_FEE"],
            tz_name=app.config["APP_TIMEZONE"],
        ),
        "users": UserService(store),
        "vehicles": VehicleService(store),
    }

    app.register_blueprint(rentals_bp)
    app.register_blueprint(provider_bp)
    app.register_blueprint(admin_bp)
    app.register_blueprint(cron_bp)

    @app.errorhandler(RentalError)
    def handle_rental_error(e: RentalError):
        return jsonify(e.to_dict()), e.status_code

    @app.cli.command("complete-rentals")
    @click.option("--activate/--no-activate", default=True,
                  help="Also activate pending rentals whose start date has arrived.")
    def complete_rentals_command(activate):
        """Run the rental expiry sweep once."""
        rentals = app.extensions["marketplace"]["rentals"]
        if activate:
            activated = rentals.activate_due_rentals()
            click.echo(f"{activated.success}/{activated.processed} rental(s) activated")
        completed = rentals.complete_expired_rentals()
        click.echo(f"{completed.success}/{completed.processed} rental(s) completed")
        store.save()

    return app
