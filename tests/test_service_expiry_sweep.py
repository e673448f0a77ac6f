"""
Expiry sweep: active rentals past their end date become completed, one
record at a time, and a second run has nothing left to do.
"""

from conftest import make_provider, make_user, make_vehicle, seed_rental


def _seed(store):
    p = make_provider(store)
    renter = make_user(store, "Riley")
    v1 = make_vehicle(store, p, name="One")
    v2 = make_vehicle(store, p, name="Two")
    return {
        "expired_1": seed_rental(store, v1, renter, "2024-05-01", "2024-05-05", status="active"),
        "expired_2": seed_rental(store, v2, renter, "2024-05-10", "2024-05-20", status="active"),
        "running": seed_rental(store, v1, renter, "2024-05-30", "2024-06-10", status="active"),
        "pending_past": seed_rental(store, v2, renter, "2024-05-21", "2024-05-25", status="pending"),
        "future": seed_rental(store, v1, renter, "2024-07-01", "2024-07-05", status="pending"),
    }


def test_completes_only_elapsed_active_rentals(rentals, store):
    ids = _seed(store)
    result = rentals.complete_expired_rentals()
    assert (result.processed, result.success) == (2, 2)

    status = {k: store.rentals[v]["status"] for k, v in ids.items()}
    assert status == {
        "expired_1": "completed",
        "expired_2": "completed",
        "running": "active",
        "pending_past": "pending",
        "future": "pending",
    }


def test_second_run_is_noop(rentals, store):
    _seed(store)
    rentals.complete_expired_rentals()
    again = rentals.complete_expired_rentals()
    assert again.processed == 0
    assert again.success == 0


def test_one_failure_does_not_stop_the_sweep(rentals, store, monkeypatch):
    ids = _seed(store)
    real_update = store.update_rental_status

    def flaky(rid, status, expected):
        if rid == ids["expired_1"]:
            raise RuntimeError("disk full")
        return real_update(rid, status, expected=expected)

    monkeypatch.setattr(store, "update_rental_status", flaky)
    result = rentals.complete_expired_rentals()
    assert (result.processed, result.success) == (2, 1)
    assert store.rentals[ids["expired_2"]]["status"] == "completed"
    assert store.rentals[ids["expired_1"]]["status"] == "active"


def test_activation_sweep(rentals, store):
    ids = _seed(store)
    result = rentals.activate_due_rentals()
    assert (result.processed, result.success) == (1, 1)
    assert store.rentals[ids["pending_past"]]["status"] == "active"
    assert store.rentals[ids["future"]]["status"] == "pending"
