import logging
import os
import pickle
import threading
import uuid
from typing import Iterable, Optional

from ..rules.conflicts import overlaps
from ..utils.constants import RentalStatus, OPEN_RENTAL_STATES
from ..utils.dates import utcnow
from .rental import Rental

logger = logging.getLogger(__name__)


def _created_key(r: dict):
    created = r.get("created_at")
    return (created is not None, created or 0)


def _value(status) -> str:
    return getattr(status, "value", status)


class Store:
    """
    In-memory persistence for users, vehicles and rentals, optionally backed
    by a pickle file.

    Records are plain dicts. Every read hands out a copy, so callers can never
    write back a stale record by mutating what they were given; changes go
    through the update methods, which run under one re-entrant lock.

    Lifecycle is explicit: ``open()`` loads the file (if any), ``close()``
    writes it back. The store is also a context manager.
    """

    def __init__(self, path: str | os.PathLike | None = None):
        self.path = str(path) if path else None
        self.users: dict[str, dict] = {}
        self.vehicles: dict[str, dict] = {}
        self.rentals: dict[str, dict] = {}
        self._rw = threading.RLock()
        self.is_open = False

    # ---------- Lifecycle ----------
    def open(self) -> "Store":
        with self._rw:
            if not self.is_open:
                self._load()
                self.is_open = True
        return self

    def close(self) -> None:
        with self._rw:
            if self.is_open:
                self.save()
                self.is_open = False

    def __enter__(self) -> "Store":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # ---------- Persistence ----------
    def _load(self):
        """Load data from the pickle file, or start empty if unavailable or invalid."""
        if not self.path or not os.path.exists(self.path):
            return
        try:
            with open(self.path, "rb") as f:
                data = pickle.load(f)
        except (OSError, pickle.UnpicklingError, EOFError) as e:
            logger.warning("Store load failed (%s); starting empty.", e)
            return

        if isinstance(data, dict):
            self.users = data.get("users", {}) or {}
            self.vehicles = data.get("vehicles", {}) or {}
            self.rentals = data.get("rentals", {}) or {}
            logger.info("Store loaded: users=%d, vehicles=%d, rentals=%d",
                        len(self.users), len(self.vehicles), len(self.rentals))
        else:
            # Incompatible data format: back up the old file and start empty
            bak = self.path + ".bak"
            os.replace(self.path, bak)
            logger.warning("Incompatible store (%s); backed up to %s. Starting empty.",
                           type(data).__name__, bak)

    def _dump(self):
        """Write the in-memory data to the pickle file safely (atomic replace)."""
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        tmp = self.path + ".tmp"
        payload = {
            "users": self.users,
            "vehicles": self.vehicles,
            "rentals": self.rentals,
        }
        with open(tmp, "wb") as f:
            pickle.dump(payload, f, protocol=pickle.HIGHEST_PROTOCOL)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp, self.path)

    def save(self):
        """Thread-safe save; a no-op for memory-only stores."""
        if not self.path:
            return
        with self._rw:
            logger.debug("Saving store to %s", self.path)
            self._dump()

    # ---------- Users ----------
    def create_user(self, name: str, email: str, role, provider_status=None) -> str:
        """Create a new user and return its ID."""
        with self._rw:
            if any(u["email"] == email for u in self.users.values()):
                raise ValueError("Email already exists")
            uid = str(uuid.uuid4())
            self.users[uid] = {
                "user_id": uid,
                "name": name,
                "email": email,
                "role": _value(role),
                "provider_status": _value(provider_status) if provider_status else None,
            }
            self.save()
            return uid

    def get_user(self, user_id: str) -> dict | None:
        u = self.users.get(str(user_id))
        return dict(u) if u else None

    def find_users(self, predicate) -> list[dict]:
        with self._rw:
            return [dict(u) for u in self.users.values() if predicate(u)]

    def update_user_if(self, user_id: str, expected: dict, updates: dict) -> dict | None:
        """
        Apply `updates` only if every key in `expected` still holds the given
        value. Returns the updated copy, or None if the user is missing or
        the expectation failed.
        """
        with self._rw:
            u = self.users.get(str(user_id))
            if u is None:
                return None
            if any(u.get(k) != _value(v) for k, v in expected.items()):
                return None
            u.update({k: _value(v) for k, v in updates.items()})
            self.save()
            return dict(u)

    # ---------- Vehicles ----------
    def create_vehicle(self, data: dict) -> str:
        """Create a new vehicle record and return its ID."""
        with self._rw:
            vid = str(uuid.uuid4())
            self.vehicles[vid] = {
                "vehicle_id": vid,
                "owner_id": str(data["owner_id"]),
                "name": data.get("name", ""),
                "type": data.get("type", "car"),
                "license_plate": data.get("license_plate", ""),
                "pickup_station": data.get("pickup_station", ""),
                "price_per_day": data.get("price_per_day") or 0,
                "is_available": bool(data.get("is_available", True)),
            }
            self.save()
            return vid

    def get_vehicle(self, vehicle_id: str) -> dict | None:
        """Get vehicle information by ID."""
        v = self.vehicles.get(str(vehicle_id))
        return dict(v) if v else None

    def find_vehicles_by_owner(self, owner_id: str) -> list[dict]:
        with self._rw:
            return [dict(v) for v in self.vehicles.values() if v.get("owner_id") == str(owner_id)]

    def update_vehicle(self, vehicle_id: str, **updates) -> dict | None:
        """Update vehicle attributes; return the updated copy or None if missing."""
        with self._rw:
            v = self.vehicles.get(str(vehicle_id))
            if v is None:
                return None
            v.update({k: val for k, val in updates.items() if val is not None})
            self.save()
            return dict(v)

    def delete_vehicle_if_idle(self, vehicle_id: str) -> bool | None:
        """
        Delete a vehicle unless a pending or active rental references it.
        The check and the delete share one lock hold, so no booking can land
        in between. Returns True when deleted, False when open rentals remain,
        None when the vehicle does not exist.
        """
        with self._rw:
            vid = str(vehicle_id)
            if vid not in self.vehicles:
                return None
            if self.has_open_rentals(vid):
                return False
            del self.vehicles[vid]
            self.save()
            return True

    # ---------- Rentals ----------
    def get_rental(self, rental_id: str) -> dict | None:
        r = self.rentals.get(str(rental_id))
        return dict(r) if r else None

    def find_rentals_by_renter(self, renter_id: str) -> list[dict]:
        """Rentals booked by one renter, newest first."""
        with self._rw:
            rows = [dict(r) for r in self.rentals.values() if r.get("renter_id") == str(renter_id)]
        rows.sort(key=_created_key, reverse=True)
        return rows

    def find_rentals_by_vehicle_ids(self, vehicle_ids: Iterable[str]) -> list[dict]:
        ids = {str(v) for v in vehicle_ids}
        with self._rw:
            rows = [dict(r) for r in self.rentals.values() if r.get("vehicle_id") in ids]
        rows.sort(key=_created_key, reverse=True)
        return rows

    def _overlapping(self, vehicle_id: str, start, end) -> Optional[dict]:
        for r in self.rentals.values():
            if r.get("vehicle_id") != str(vehicle_id):
                continue
            if not Rental.from_dict(r).blocks_vehicle:
                continue
            if overlaps(start, end, r["start_date"], r["end_date"]):
                return r
        return None

    def find_overlapping_rental(self, vehicle_id: str, start, end) -> dict | None:
        """First non-cancelled rental on `vehicle_id` overlapping [start, end), or None."""
        with self._rw:
            r = self._overlapping(vehicle_id, start, end)
            return dict(r) if r else None

    def has_open_rentals(self, vehicle_id: str) -> bool:
        open_states = {s.value for s in OPEN_RENTAL_STATES}
        with self._rw:
            return any(
                r.get("vehicle_id") == str(vehicle_id) and r.get("status") in open_states
                for r in self.rentals.values()
            )

    def find_active_ended_before(self, now) -> list[dict]:
        """Active rentals whose end date has passed."""
        with self._rw:
            return [dict(r) for r in self.rentals.values()
                    if r.get("status") == RentalStatus.ACTIVE.value and r["end_date"] < now]

    def find_pending_started_by(self, now) -> list[dict]:
        """Pending rentals whose start date has arrived."""
        with self._rw:
            return [dict(r) for r in self.rentals.values()
                    if r.get("status") == RentalStatus.PENDING.value and r["start_date"] <= now]

    def create_rental(self, data: dict) -> dict | None:
        """
        Insert a rental unless a non-cancelled rental on the same vehicle
        overlaps it. The check and the insert happen under one lock, so two
        concurrent bookings cannot both succeed. Returns the stored copy, or
        None when the range is taken.
        """
        with self._rw:
            if self._overlapping(data["vehicle_id"], data["start_date"], data["end_date"]):
                return None
            rid = str(uuid.uuid4())
            now = utcnow()
            r = dict(data)
            r.update({
                "rental_id": rid,
                "vehicle_id": str(data["vehicle_id"]),
                "renter_id": str(data["renter_id"]),
                "status": _value(data.get("status") or RentalStatus.PENDING),
                "created_at": now,
                "updated_at": now,
            })
            self.rentals[rid] = r
            self.save()
            return dict(r)

    def update_rental_status(self, rental_id: str, status, expected) -> dict | None:
        """
        Compare-and-set: move the rental to `status` only if it is still in
        `expected`. Returns the updated copy, or None if the rental is missing
        or its status changed since the caller read it.
        """
        with self._rw:
            r = self.rentals.get(str(rental_id))
            if r is None or r.get("status") != _value(expected):
                return None
            r["status"] = _value(status)
            r["updated_at"] = utcnow()
            self.save()
            return dict(r)
