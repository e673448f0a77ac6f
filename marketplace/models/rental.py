from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..utils.constants import RentalStatus
from ..utils.dates import fmt_iso


@dataclass
class Rental:
    """
    A booking of one vehicle by one renter over [start_date, end_date).
    Dates are aware UTC datetimes; the end is exclusive.
    """
    rental_id: str
    vehicle_id: str
    renter_id: str
    pickup_location: str
    drop_off_location: str
    start_date: datetime
    end_date: datetime
    total_cost: int
    status: RentalStatus = RentalStatus.PENDING
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def blocks_vehicle(self) -> bool:
        """Every status except cancelled keeps its date range occupied."""
        return self.status != RentalStatus.CANCELLED

    @classmethod
    def from_dict(cls, d: dict) -> "Rental":
        return cls(
            rental_id=d["rental_id"],
            vehicle_id=d["vehicle_id"],
            renter_id=d["renter_id"],
            pickup_location=d.get("pickup_location", ""),
            drop_off_location=d.get("drop_off_location", ""),
            start_date=d["start_date"],
            end_date=d["end_date"],
            total_cost=d.get("total_cost", 0),
            status=RentalStatus(d.get("status") or RentalStatus.PENDING),
            created_at=d.get("created_at"),
            updated_at=d.get("updated_at"),
        )

    def to_dict(self) -> dict:
        """JSON-friendly view used by the controllers."""
        return {
            "rental_id": self.rental_id,
            "vehicle_id": self.vehicle_id,
            "renter_id": self.renter_id,
            "pickup_location": self.pickup_location,
            "drop_off_location": self.drop_off_location,
            "rental_period": {
                "start_date": fmt_iso(self.start_date),
                "end_date": fmt_iso(self.end_date),
            },
            "total_cost": self.total_cost,
            "status": self.status.value,
            "created_at": fmt_iso(self.created_at),
            "updated_at": fmt_iso(self.updated_at),
        }
