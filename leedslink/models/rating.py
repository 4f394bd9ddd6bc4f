"""
Rating data models.

Represents a single rating between two users and the derived per-user summary.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, Optional
import uuid

from leedslink.utils.timestamps import utc_now, to_iso, from_iso

MIN_RATING = 1
MAX_RATING = 5


class RatingCategory(str, Enum):
    SERVICE = "Service Quality"
    COMMUNICATION = "Communication"
    RELIABILITY = "Reliability"
    VALUE = "Value for Money"
    OVERALL = "Overall Experience"


@dataclass
class Rating:
    """
    A star rating left by one user for another.

    Out-of-range values are clamped into [1, 5], never rejected.
    """
    from_user_id: str
    to_user_id: str
    rating: int  # 1-5 stars after clamping
    category: RatingCategory = RatingCategory.OVERALL
    review: Optional[str] = None
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_at: datetime = field(default_factory=utc_now)

    def __post_init__(self):
        self.rating = max(MIN_RATING, min(MAX_RATING, int(self.rating)))

        try:
            self.category = RatingCategory(self.category)
        except ValueError:
            raise ValueError(f"Invalid rating category: {self.category!r}")

        self.created_at = from_iso(self.created_at)

    @classmethod
    def from_dict(cls, data: dict) -> "Rating":
        """Create Rating from JSON dict."""
        return cls(
            id=data["id"],
            from_user_id=data["from_user_id"],
            to_user_id=data["to_user_id"],
            rating=data["rating"],
            category=data.get("category", RatingCategory.OVERALL.value),
            review=data.get("review"),
            created_at=data.get("created_at") or utc_now()
        )

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        return {
            "id": self.id,
            "from_user_id": self.from_user_id,
            "to_user_id": self.to_user_id,
            "rating": self.rating,
            "category": self.category.value,
            "review": self.review,
            "created_at": to_iso(self.created_at)
        }


@dataclass
class UserRatingSummary:
    """
    Derived rating statistics for one user.
    Recomputed from the rating collection on every query, never stored.
    """
    user_id: str
    average_rating: float = 0.0
    total_ratings: int = 0
    rating_breakdown: Dict[int, int] = field(default_factory=dict)  # stars -> count
    category_ratings: Dict[RatingCategory, float] = field(default_factory=dict)  # only rated categories
    last_updated: datetime = field(default_factory=utc_now)

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        return {
            "user_id": self.user_id,
            "average_rating": self.average_rating,
            "total_ratings": self.total_ratings,
            "rating_breakdown": {str(k): v for k, v in sorted(self.rating_breakdown.items())},
            "category_ratings": {c.value: v for c, v in self.category_ratings.items()},
            "last_updated": to_iso(self.last_updated)
        }
