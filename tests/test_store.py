"""
Store behaviour the services rely on: copies on read, compare-and-set
updates, and pickle persistence across open/close.
"""

from conftest import make_provider, make_user, make_vehicle, seed_rental

from marketplace.models.store import Store
from marketplace.utils.dates import parse_datetime


def test_reads_are_copies(store):
    pid = make_provider(store)
    vid = make_vehicle(store, pid)
    v = store.get_vehicle(vid)
    v["price_per_day"] = 1
    assert store.vehicles[vid]["price_per_day"] == 50


def test_compare_and_set(store):
    pid = make_provider(store)
    vid = make_vehicle(store, pid)
    rid = seed_rental(store, vid, make_user(store, "Riley"), "2024-01-01", "2024-01-03")

    assert store.update_rental_status(rid, "active", expected="cancelled") is None
    assert store.rentals[rid]["status"] == "pending"

    row = store.update_rental_status(rid, "active", expected="pending")
    assert row["status"] == "active"
    assert store.update_rental_status("missing", "active", expected="pending") is None


def test_overlap_query_is_half_open(store):
    pid = make_provider(store)
    vid = make_vehicle(store, pid)
    seed_rental(store, vid, make_user(store, "Riley"), "2024-01-01", "2024-01-05")

    touching = store.find_overlapping_rental(vid, parse_datetime("2024-01-05"), parse_datetime("2024-01-07"))
    inside = store.find_overlapping_rental(vid, parse_datetime("2024-01-02"), parse_datetime("2024-01-03"))
    assert touching is None
    assert inside is not None


def test_persists_across_open_close(tmp_path):
    path = tmp_path / "data.pkl"
    with Store(path) as st:
        pid = make_provider(st)
        vid = make_vehicle(st, pid)

    with Store(path) as st2:
        assert vid in st2.vehicles
        assert st2.get_user(pid)["role"] == "provider"


def test_memory_store_writes_nothing(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    with Store() as st:
        make_provider(st)
    assert list(tmp_path.iterdir()) == []


def test_delete_vehicle_if_idle(store):
    pid = make_provider(store)
    vid = make_vehicle(store, pid)
    rid = seed_rental(store, vid, make_user(store, "Riley"), "2024-01-01", "2024-01-03")

    assert store.delete_vehicle_if_idle(vid) is False
    assert vid in store.vehicles

    store.rentals[rid]["status"] = "cancelled"
    assert store.delete_vehicle_if_idle(vid) is True
    assert vid not in store.vehicles
    assert store.delete_vehicle_if_idle(vid) is None


def test_cancelled_rental_does_not_block_range(store):
    pid = make_provider(store)
    vid = make_vehicle(store, pid)
    rid = seed_rental(store, vid, make_user(store, "Riley"), "2024-01-01", "2024-01-05")
    store.rentals[rid]["status"] = "cancelled"
    assert store.find_overlapping_rental(vid, parse_datetime("2024-01-02"), parse_datetime("2024-01-03")) is None
