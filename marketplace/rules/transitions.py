"""
Legal state graphs for rentals and provider approval.

This module is the single source of truth for both tables; every service
and controller asks it instead of keeping its own copy.
"""

from ..utils.constants import RentalStatus, ProviderStatus

RENTAL_TRANSITIONS: dict[RentalStatus, frozenset] = {
    RentalStatus.PENDING: frozenset({RentalStatus.ACTIVE, RentalStatus.CANCELLED}),
    RentalStatus.ACTIVE: frozenset({RentalStatus.COMPLETED, RentalStatus.CANCELLED}),
    RentalStatus.COMPLETED: frozenset(),
    RentalStatus.CANCELLED: frozenset(),
}

PROVIDER_TRANSITIONS: dict[ProviderStatus, frozenset] = {
    ProviderStatus.PENDING: frozenset({ProviderStatus.APPROVED, ProviderStatus.REJECTED}),
    ProviderStatus.APPROVED: frozenset(),
    ProviderStatus.REJECTED: frozenset(),
}


def _coerce(enum_cls, value):
    """Exact, case-sensitive lookup of an enum member; None for anything unknown."""
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        return None


def _allowed(table: dict, enum_cls, current, nxt) -> bool:
    cur = _coerce(enum_cls, current)
    target = _coerce(enum_cls, nxt)
    if cur is None or target is None:
        return False
    return target in table.get(cur, frozenset())


def can_change_rental_status(current, nxt) -> bool:
    """True iff a rental in `current` may move to `nxt`. Unknown values fail closed."""
    return _allowed(RENTAL_TRANSITIONS, RentalStatus, current, nxt)


def can_change_provider_status(current, nxt) -> bool:
    """True iff a provider in `current` may move to `nxt`. Unknown values fail closed."""
    return _allowed(PROVIDER_TRANSITIONS, ProviderStatus, current, nxt)
