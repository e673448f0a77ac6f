"""
seeds.py
--------
Populate the store at DATA_PATH with demo accounts and vehicles.

Usage:
    $ DATA_PATH=data.pkl python seeds.py
"""

from marketplace import create_app
from marketplace.utils.constants import ProviderStatus, Role


def ensure_user(store, name: str, email: str, role: Role, provider_status=None) -> str:
    """
    Ensure a user with `email` exists in the store (idempotent).
    Existing users get their role and provider status refreshed.
    """
    found = store.find_users(lambda u: u["email"] == email)
    if found:
        uid = found[0]["user_id"]
        store.update_user_if(uid, {}, {"role": role, "provider_status": provider_status})
        return uid
    return store.create_user(name, email, role, provider_status=provider_status)


def main():
    app = create_app()
    store = app.extensions["marketplace"]["store"]

    # ---- Admin / provider / renter demo accounts ----
    ensure_user(store, "Admin", "admin@example.com", Role.ADMIN)
    provider_id = ensure_user(store, "Pat Provider", "provider@example.com",
                              Role.PROVIDER, ProviderStatus.APPROVED)
    ensure_user(store, "Pending Provider", "pending@example.com",
                Role.PROVIDER, ProviderStatus.PENDING)
    ensure_user(store, "Riley Renter", "renter@example.com", Role.USER)

    # ---- Demo vehicles (create only if none exist) ----
    if not store.vehicles:
        store.create_vehicle({
            "owner_id": provider_id, "name": "Toyota Corolla", "type": "car",
            "license_plate": "ABC123", "pickup_station": "Central", "price_per_day": 45,
        })
        store.create_vehicle({
            "owner_id": provider_id, "name": "Honda Civic", "type": "car",
            "license_plate": "XYZ789", "pickup_station": "Airport", "price_per_day": 50,
        })
        store.create_vehicle({
            "owner_id": provider_id, "name": "Yamaha MT-07", "type": "bike",
            "license_plate": "MOTO07", "pickup_station": "Central", "price_per_day": 40,
        })

    store.close()
    print("Seed complete.")
    print(f"Users: {len(store.users)}, vehicles: {len(store.vehicles)}")


if __name__ == "__main__":
    main()
