import sys, pathlib
from datetime import datetime

ROOT = pathlib.Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

import pytest
import pytz

from marketplace import create_app
from marketplace.models.store import Store
from marketplace.services import RentalService, UserService, VehicleService
from marketplace.utils.constants import ProviderStatus, Role
from marketplace.utils.dates import parse_datetime

# Every test runs "at" this instant unless it says otherwise
NOW = datetime(2024, 6, 1, 12, 0, tzinfo=pytz.utc)


@pytest.fixture
def store():
    """A clean, memory-only store for each test."""
    with Store() as st:
        yield st


@pytest.fixture
def rentals(store):
    return RentalService(store, clock=lambda: NOW)


@pytest.fixture
def users(store):
    return UserService(store)


@pytest.fixture
def vehicles(store):
    return VehicleService(store)


@pytest.fixture
def app(store):
    app = create_app({"TESTING": True, "SECRET_KEY": "test", "CRON_SECRET": "cron-test"}, store=store)
    app.extensions["marketplace"]["rentals"].clock = lambda: NOW
    return app


@pytest.fixture
def client(app):
    with app.test_client() as c:
        yield c


def login(client, user_id, role, provider_status=None):
    """Write the actor into the session the way sign-in would."""
    with client.session_transaction() as sess:
        sess["uid"] = user_id
        sess["role"] = getattr(role, "value", role)
        sess["provider_status"] = getattr(provider_status, "value", provider_status)


# ---------- seed helpers ----------
def make_user(store, name="Riley", role=Role.USER, provider_status=None):
    email = f"{name.lower().replace(' ', '.')}@example.com"
    return store.create_user(name, email, role, provider_status=provider_status)


def make_provider(store, name="Pat", status=ProviderStatus.APPROVED):
    return make_user(store, name, Role.PROVIDER, status)


def make_vehicle(store, owner_id, price_per_day=50, is_available=True, name="Honda Fit"):
    return store.create_vehicle({
        "owner_id": owner_id,
        "name": name,
        "type": "car",
        "license_plate": "FIT001",
        "pickup_station": "Central",
        "price_per_day": price_per_day,
        "is_available": is_available,
    })


def seed_rental(store, vehicle_id, renter_id, start, end, status="pending", total=0):
    """Insert a rental directly, then force its status."""
    row = store.create_rental({
        "vehicle_id": vehicle_id,
        "renter_id": renter_id,
        "pickup_location": "Central",
        "drop_off_location": "Airport",
        "start_date": parse_datetime(start),
        "end_date": parse_datetime(end),
        "total_cost": total,
    })
    assert row is not None, "seed rental overlaps an existing one"
    store.rentals[row["rental_id"]]["status"] = status
    return row["rental_id"]
