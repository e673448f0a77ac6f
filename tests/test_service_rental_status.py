"""
Status changes through RentalService.change_rental_status: authorization by
role and ownership first, then the transition table, then compare-and-set.
"""

import pytest
from conftest import make_provider, make_user, make_vehicle, seed_rental

from marketplace.exceptions import (
    ConflictError,
    ForbiddenError,
    InvalidTransitionError,
    RentalNotFoundError,
    ValidationError,
)
from marketplace.utils.constants import Role, RentalStatus


@pytest.fixture
def world(store):
    p = make_provider(store, "Pat")
    q = make_provider(store, "Quinn")
    renter = make_user(store, "Riley")
    admin = make_user(store, "Ada", role=Role.ADMIN)
    vid = make_vehicle(store, p)
    rid = seed_rental(store, vid, renter, "2024-07-01", "2024-07-05", status="pending")
    return {"p": p, "q": q, "renter": renter, "admin": admin, "vid": vid, "rid": rid}


def test_owner_accepts_pending(rentals, world):
    rental = rentals.accept_rental(world["rid"], world["p"])
    assert rental.status == RentalStatus.ACTIVE


def test_other_provider_forbidden_regardless_of_transition(rentals, world):
    for status in ("active", "cancelled", "completed"):
        with pytest.raises(ForbiddenError):
            rentals.change_rental_status(world["rid"], world["q"], "provider", status)


def test_provider_illegal_transition(rentals, world):
    with pytest.raises(InvalidTransitionError):
        rentals.change_rental_status(world["rid"], world["p"], "provider", "completed")


def test_renter_cancels_pending(rentals, world, store):
    rental = rentals.cancel_rental(world["rid"], world["renter"])
    assert rental.status == RentalStatus.CANCELLED
    assert store.rentals[world["rid"]]["status"] == "cancelled"


def test_renter_cannot_cancel_active(rentals, world, store):
    store.rentals[world["rid"]]["status"] = "active"
    with pytest.raises(ForbiddenError):
        rentals.cancel_rental(world["rid"], world["renter"])


def test_renter_cannot_accept(rentals, world):
    with pytest.raises(ForbiddenError):
        rentals.change_rental_status(world["rid"], world["renter"], Role.USER, "active")


def test_stranger_cannot_cancel(rentals, world, store):
    stranger = make_user(store, "Sam")
    with pytest.raises(ForbiddenError):
        rentals.cancel_rental(world["rid"], stranger)


def test_provider_cancels_active(rentals, world, store):
    store.rentals[world["rid"]]["status"] = "active"
    rental = rentals.reject_rental(world["rid"], world["p"])
    assert rental.status == RentalStatus.CANCELLED


def test_admin_cancel_of_terminal_is_invalid_transition(rentals, world, store):
    store.rentals[world["rid"]]["status"] = "completed"
    with pytest.raises(InvalidTransitionError):
        rentals.change_rental_status(world["rid"], world["admin"], "admin", "cancelled")


def test_unknown_role_forbidden(rentals, world):
    with pytest.raises(ForbiddenError):
        rentals.change_rental_status(world["rid"], world["p"], "superuser", "active")


def test_unknown_status_rejected(rentals, world):
    with pytest.raises(ValidationError):
        rentals.change_rental_status(world["rid"], world["admin"], "admin", "Active")


def test_missing_rental(rentals, world):
    with pytest.raises(RentalNotFoundError):
        rentals.change_rental_status("missing", world["admin"], "admin", "cancelled")


def test_stale_status_is_not_overwritten(rentals, world, store, monkeypatch):
    """
    Accept and cancel race: the cancel lands after our read, so the accept
    must fail instead of resurrecting the rental.
    """
    real_get = store.get_rental

    def get_then_cancel(rid):
        row = real_get(rid)
        store.rentals[rid]["status"] = "cancelled"
        return row

    monkeypatch.setattr(store, "get_rental", get_then_cancel)
    with pytest.raises(ConflictError):
        rentals.accept_rental(world["rid"], world["p"])
    assert store.rentals[world["rid"]]["status"] == "cancelled"


def test_rentals_for_provider_and_renter(rentals, world, store):
    other_vid = make_vehicle(store, world["q"], name="Q car")
    seed_rental(store, other_vid, world["renter"], "2024-07-01", "2024-07-05")

    mine = rentals.rentals_for_provider(world["p"])
    assert [r.rental_id for r in mine] == [world["rid"]]
    assert len(rentals.rentals_for_renter(world["renter"])) == 2
    assert rentals.rentals_for_provider(make_provider(store, "Nobody")) == []


def test_rental_visibility(rentals, world):
    rid = world["rid"]
    assert rentals.get_rental_for(rid, world["renter"], "user").rental_id == rid
    assert rentals.get_rental_for(rid, world["p"], "provider").rental_id == rid
    assert rentals.get_rental_for(rid, world["admin"], "admin").rental_id == rid
    with pytest.raises(ForbiddenError):
        rentals.get_rental_for(rid, world["q"], "provider")


def test_provider_booking_elsewhere_cancels_as_renter(rentals, world, store):
    # Quinn is a provider but booked Pat's vehicle as a renter
    rid = seed_rental(store, world["vid"], world["q"], "2024-08-01", "2024-08-03", status="pending")
    rental = rentals.cancel_rental(rid, world["q"], Role.PROVIDER)
    assert rental.status == RentalStatus.CANCELLED


def test_provider_booking_elsewhere_cannot_accept_own_booking(rentals, world, store):
    rid = seed_rental(store, world["vid"], world["q"], "2024-08-01", "2024-08-03", status="active")
    with pytest.raises(ForbiddenError):
        rentals.change_rental_status(rid, world["q"], Role.PROVIDER, "completed")
    with pytest.raises(ForbiddenError):
        rentals.cancel_rental(rid, world["q"], Role.PROVIDER)
    assert store.rentals[rid]["status"] == "active"
