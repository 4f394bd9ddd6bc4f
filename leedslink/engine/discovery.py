"""
Discovery helpers.

Browse views over the listing pool: role-complementary filtering, the urgent
board, active and recent listings.
"""

from datetime import datetime, timedelta
from typing import Iterable, List, Optional

from leedslink.models.listing import Listing, ListingCategory, ListingType
from leedslink.models.user import UserRole
from leedslink.utils.timestamps import utc_now
import config.settings as settings


def newest_first(listings: Iterable[Listing]) -> List[Listing]:
    """Sort listings by creation time, newest first."""
    return sorted(listings, key=lambda l: l.created_at, reverse=True)


def complementary_type(role: UserRole) -> ListingType:
    """
    Listing type a role browses.

    Suppliers and service providers see requests they can fulfil;
    customers see offers they can use.
    """
    if UserRole(role) == UserRole.CUSTOMER:
        return ListingType.OFFER
    return ListingType.REQUEST


def filter_listings(
    listings: Iterable[Listing],
    role: Optional[UserRole] = None,
    category: Optional[ListingCategory] = None
) -> List[Listing]:
    """
    Filter listings by viewer role and/or category, newest first.

    Args:
        listings: Listing pool
        role: Viewer role; restricts to the complementary listing type
        category: Restrict to one category
    """
    results = list(listings)

    if role is not None:
        wanted_type = complementary_type(role)
        results = [l for l in results if l.type == wanted_type]

    if category is not None:
        category = ListingCategory(category)
        results = [l for l in results if l.category == category]

    return newest_first(results)


def urgent_listings(listings: Iterable[Listing]) -> List[Listing]:
    """Urgent listings for the community board, newest first."""
    return newest_first(l for l in listings if l.is_urgent)


def active_listings(
    listings: Iterable[Listing],
    limit: int = settings.ACTIVE_LISTINGS_LIMIT
) -> List[Listing]:
    """The most recently created listings."""
    return newest_first(listings)[:limit]


def recent_listings(
    listings: Iterable[Listing],
    window_days: int = settings.RECENT_WINDOW_DAYS,
    now: Optional[datetime] = None
) -> List[Listing]:
    """Listings created within the last `window_days`, newest first."""
    cutoff = (now or utc_now()) - timedelta(days=window_days)
    return newest_first(l for l in listings if l.created_at >= cutoff)
