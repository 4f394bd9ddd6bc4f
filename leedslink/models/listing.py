"""
Listing data model.

Represents an offer or request posted to the marketplace.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional
import uuid

from leedslink.utils.timestamps import utc_now, to_iso, from_iso


class ListingType(str, Enum):
    """Supply side (offer) or demand side (request)."""
    OFFER = "Offer"
    REQUEST = "Request"


class ListingCategory(str, Enum):
    FOOD = "Food & Beverage"
    CONSTRUCTION = "Construction"
    PROFESSIONAL = "Professional Services"
    RETAIL = "Retail"
    HEALTH = "Health & Wellness"
    TECHNOLOGY = "Technology"
    HOSPITALITY = "Hospitality"
    EDUCATION = "Education"
    TRANSPORT = "Transport"
    OTHER = "Other"


@dataclass
class Listing:
    """
    A user-authored offer or request.

    `type` and `category` are treated as immutable once the listing exists;
    the matching engine reads them as snapshot inputs.
    """
    owner_id: str  # Creating user, never changes
    title: str
    category: ListingCategory
    type: ListingType
    tags: List[str] = field(default_factory=list)  # Treated as a set when matching
    description: str = ""
    is_urgent: bool = False
    availability: str = ""
    budget: Optional[str] = None  # Requests carry a budget by convention
    price: Optional[str] = None  # Offers carry a price by convention
    address: Optional[str] = None
    postcode: Optional[str] = None
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_at: datetime = field(default_factory=utc_now)

    def __post_init__(self):
        # Validate enums (accept raw string values from storage)
        try:
            self.category = ListingCategory(self.category)
        except ValueError:
            raise ValueError(f"Invalid category: {self.category!r}")

        try:
            self.type = ListingType(self.type)
        except ValueError:
            raise ValueError(
                f"Invalid type: {self.type!r}. Must be 'Offer' or 'Request'"
            )

        self.tags = list(self.tags or [])
        self.created_at = from_iso(self.created_at)

    @classmethod
    def from_dict(cls, data: dict) -> "Listing":
        """Create Listing from JSON dict."""
        return cls(
            id=data["id"],
            owner_id=data["owner_id"],
            title=data.get("title", ""),
            category=data["category"],
            type=data["type"],
            tags=data.get("tags", []),
            description=data.get("description", ""),
            is_urgent=data.get("is_urgent", False),
            availability=data.get("availability", ""),
            budget=data.get("budget"),
            price=data.get("price"),
            address=data.get("address"),
            postcode=data.get("postcode"),
            created_at=data.get("created_at") or utc_now()
        )

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        return {
            "id": self.id,
            "owner_id": self.owner_id,
            "title": self.title,
            "category": self.category.value,
            "type": self.type.value,
            "tags": self.tags,
            "description": self.description,
            "is_urgent": self.is_urgent,
            "availability": self.availability,
            "budget": self.budget,
            "price": self.price,
            "address": self.address,
            "postcode": self.postcode,
            "created_at": to_iso(self.created_at)
        }
