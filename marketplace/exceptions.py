"""
Custom exception classes for the rental marketplace.

Services raise these; the app-level error handler turns them into JSON
responses using ``kind`` and ``status_code``, so controllers never have to
guess what went wrong from a message string.
"""


class RentalError(Exception):
    """Base class for every failure surfaced by the rental core."""

    kind = "error"
    status_code = 500
    default_message = "Error: request failed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def __str__(self) -> str:  # pragma: no cover
        return self.message

    def to_dict(self) -> dict:
        return {"error": self.message, "kind": self.kind}


class NotFoundError(RentalError):
    """Raised when a referenced rental, vehicle or user does not exist."""

    kind = "not_found"
    status_code = 404
    default_message = "Error: resource not found"


class VehicleNotFoundError(NotFoundError):
    """Raised when a vehicle ID cannot be found in the system."""

    default_message = "Vehicle not found"


class UserNotFoundError(NotFoundError):
    """Raised when a user/provider ID cannot be found in the system."""

    default_message = "User not found"


class RentalNotFoundError(NotFoundError):
    """Raised when a rental record cannot be found in the system."""

    default_message = "Rental not found"


class ForbiddenError(RentalError):
    """Raised when the actor may not perform the requested action."""

    kind = "forbidden"
    status_code = 403
    default_message = "Forbidden"


class ConflictError(RentalError):
    """Raised when a booking overlaps an existing non-cancelled rental."""

    kind = "conflict"
    status_code = 409
    default_message = "Vehicle is already booked for these dates"


class InvalidTransitionError(RentalError):
    """Raised when a status change is not reachable from the current status."""

    kind = "invalid_transition"
    status_code = 400
    default_message = "Invalid status transition"


class VehicleUnavailableError(RentalError):
    """Raised when a vehicle is flagged unavailable at booking time."""

    kind = "unavailable"
    status_code = 400
    default_message = "Vehicle is currently unavailable for rent"


class ValidationError(RentalError):
    """Raised for malformed input, before any state is touched."""

    kind = "validation"
    status_code = 400
    default_message = "Error: invalid input"


class InvalidDateRangeError(ValidationError):
    """Raised when the end date is not after the start date or a date cannot be parsed."""

    default_message = "End date must be after start date"
