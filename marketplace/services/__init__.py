from .rental_service import RentalService
from .user_service import UserService
from .vehicle_service import VehicleService

__all__ = [
    "RentalService",
    "VehicleService",
    "UserService",
]
