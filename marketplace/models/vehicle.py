from dataclasses import dataclass


@dataclass
class Vehicle:
    """
    Listed vehicle. Per-day price is the public rate before the platform fee.
    Only owner, price and availability matter to the booking rules.
    """
    vehicle_id: str
    owner_id: str
    name: str
    type: str  # "car" | "bike"
    price_per_day: float
    is_available: bool = True
    license_plate: str = ""
    pickup_station: str = ""

    def is_owned_by(self, user_id: str) -> bool:
        return str(self.owner_id) == str(user_id)

    @classmethod
    def from_dict(cls, d: dict) -> "Vehicle":
        return cls(
            vehicle_id=d["vehicle_id"],
            owner_id=d["owner_id"],
            name=d.get("name", ""),
            type=d.get("type", "car"),
            price_per_day=d.get("price_per_day") or 0,
            is_available=bool(d.get("is_available", True)),
            license_plate=d.get("license_plate", ""),
            pickup_station=d.get("pickup_station", ""),
        )

    def to_dict(self) -> dict:
        return {
            "vehicle_id": self.vehicle_id,
            "owner_id": self.owner_id,
            "name": self.name,
            "type": self.type,
            "price_per_day": self.price_per_day,
            "is_available": self.is_available,
            "license_plate": self.license_plate,
            "pickup_station": self.pickup_station,
        }
