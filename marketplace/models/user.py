from dataclasses import dataclass, field
from typing import Optional

from ..utils.constants import Role, ProviderStatus


@dataclass
class User:
    """
    Marketplace account. The Store keeps raw dicts; services wrap them into
    this object when they need typed access to role and provider status.
    """
    user_id: str
    name: str
    email: str
    role: Role = Role.USER
    provider_status: Optional[ProviderStatus] = None

    @property
    def is_approved_provider(self) -> bool:
        return self.role == Role.PROVIDER and self.provider_status == ProviderStatus.APPROVED

    @classmethod
    def from_dict(cls, d: dict) -> "User":
        status = d.get("provider_status")
        return cls(
            user_id=d["user_id"],
            name=d.get("name", ""),
            email=d.get("email", ""),
            role=Role(d.get("role") or Role.USER),
            provider_status=ProviderStatus(status) if status else None,
        )

    def to_dict(self) -> dict:
        return {
            "user_id": self.user_id,
            "name": self.name,
            "email": self.email,
            "role": self.role.value,
            "provider_status": self.provider_status.value if self.provider_status else None,
        }


@dataclass
class Actor:
    """The authenticated caller of a request: who they are and what role they act in."""
    user_id: str
    role: Role
    provider_status: Optional[ProviderStatus] = field(default=None)
