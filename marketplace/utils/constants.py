# marketplace/utils/constants.py

"""
Global constants for roles, statuses, and pricing.
These constants are imported by models, rules and services.
"""

from enum import Enum

# Date format accepted for date-only booking input
DATE_FMT = "%Y-%m-%d"

# Flat surcharge added to every booking, in whole currency units
PLATFORM_FEE = 9


class Role(str, Enum):
    USER = "user"
    PROVIDER = "provider"
    ADMIN = "admin"


class RentalStatus(str, Enum):
    PENDING = "pending"
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class ProviderStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


# --- Misc ---
ALLOWED_TYPES = {"car", "bike"}

# Statuses that keep a vehicle "in use" for deletion purposes
OPEN_RENTAL_STATES = {RentalStatus.PENDING, RentalStatus.ACTIVE}
