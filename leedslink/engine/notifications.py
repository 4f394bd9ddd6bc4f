"""
Notification decisions.

Boolean predicates and content builders consumed by an external notifier.
Nothing here delivers a notification.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

from leedslink.models.listing import Listing


class NotificationType(str, Enum):
    NEW_LISTING = "new_listing"
    MATCH_FOUND = "match_found"
    URGENT_LISTING = "urgent_listing"


@dataclass
class NotificationSettings:
    """Per-device notification toggles."""
    new_listing_notifications: bool = True
    match_notifications: bool = True
    urgent_notifications: bool = True
    authorized: bool = True  # Whether the device granted permission

    @classmethod
    def from_dict(cls, data: dict) -> "NotificationSettings":
        return cls(**{k: bool(v) for k, v in data.items() if k in cls.__dataclass_fields__})

    def to_dict(self) -> dict:
        return {
            "new_listing_notifications": self.new_listing_notifications,
            "match_notifications": self.match_notifications,
            "urgent_notifications": self.urgent_notifications,
            "authorized": self.authorized
        }


@dataclass
class NotificationContent:
    title: str
    body: str
    type: NotificationType
    data: Dict[str, Any] = field(default_factory=dict)


class NotificationPolicy:
    """
    Decides whether the current user would be notified about an event.
    """

    def __init__(self, notification_settings: Optional[NotificationSettings] = None):
        self.settings = notification_settings or NotificationSettings()

    def should_notify_for_listing(self, listing: Listing, current_user_id: Optional[str]) -> bool:
        """New listing by someone else."""
        return (
            listing.owner_id != current_user_id
            and self.settings.authorized
            and self.settings.new_listing_notifications
        )

    def should_notify_for_match(
        self,
        listing: Listing,
        matched_listing: Listing,
        current_user_id: Optional[str]
    ) -> bool:
        """Match found for one of the current user's own listings."""
        return (
            listing.owner_id == current_user_id
            and self.settings.authorized
            and self.settings.match_notifications
        )

    def should_notify_for_urgent(self, listing: Listing, current_user_id: Optional[str]) -> bool:
        return (
            listing.is_urgent
            and listing.owner_id != current_user_id
            and self.settings.authorized
            and self.settings.urgent_notifications
        )

    def should_notify_match_count(self, previous_count: int, current_count: int) -> bool:
        """Match count went up since the last recomputation."""
        return (
            current_count > previous_count
            and self.settings.authorized
            and self.settings.match_notifications
        )


def new_listing_content(listing: Listing, user_postcode: str) -> NotificationContent:
    return NotificationContent(
        title="New Listing in Your Area!",
        body=f"{listing.title} - {listing.category.value} posted in {user_postcode}",
        type=NotificationType.NEW_LISTING,
        data={
            "listing_id": listing.id,
            "user_id": listing.owner_id,
            "postcode": user_postcode,
            "category": listing.category.value
        }
    )


def match_found_content(listing: Listing, matched_listing: Listing, match_score: int) -> NotificationContent:
    return NotificationContent(
        title="New Match Found!",
        body=f"Your listing '{listing.title}' matches with '{matched_listing.title}'",
        type=NotificationType.MATCH_FOUND,
        data={
            "listing_id": listing.id,
            "matched_listing_id": matched_listing.id,
            "match_score": match_score
        }
    )


def urgent_listing_content(listing: Listing, user_postcode: str) -> NotificationContent:
    return NotificationContent(
        title="URGENT Listing in Your Area!",
        body=f"{listing.title} - {listing.category.value} needs immediate attention",
        type=NotificationType.URGENT_LISTING,
        data={
            "listing_id": listing.id,
            "user_id": listing.owner_id,
            "postcode": user_postcode,
            "is_urgent": True
        }
    )
