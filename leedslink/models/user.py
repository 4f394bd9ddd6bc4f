"""
User data model.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional
import uuid

from leedslink.utils.timestamps import utc_now, to_iso, from_iso


class UserRole(str, Enum):
    SUPPLIER = "Supplier"
    SERVICE_PROVIDER = "Service Provider"
    CUSTOMER = "Customer"


@dataclass
class User:
    """A marketplace member. Owns listings and gives/receives ratings."""
    name: str
    role: UserRole
    business_name: Optional[str] = None
    address: str = ""
    phone_number: str = ""
    postcode: str = ""
    description: str = ""
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_at: datetime = field(default_factory=utc_now)

    def __post_init__(self):
        try:
            self.role = UserRole(self.role)
        except ValueError:
            raise ValueError(f"Invalid role: {self.role!r}")
        self.created_at = from_iso(self.created_at)

    @classmethod
    def from_dict(cls, data: dict) -> "User":
        """Create User from JSON dict."""
        return cls(
            id=data["id"],
            name=data["name"],
            role=data.get("role", UserRole.CUSTOMER.value),
            business_name=data.get("business_name"),
            address=data.get("address", ""),
            phone_number=data.get("phone_number", ""),
            postcode=data.get("postcode", ""),
            description=data.get("description", ""),
            created_at=data.get("created_at") or utc_now()
        )

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        return {
            "id": self.id,
            "name": self.name,
            "role": self.role.value,
            "business_name": self.business_name,
            "address": self.address,
            "phone_number": self.phone_number,
            "postcode": self.postcode,
            "description": self.description,
            "created_at": to_iso(self.created_at)
        }
