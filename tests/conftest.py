"""
Shared fixtures for LeedsLink tests.
"""

from datetime import datetime, timedelta, timezone

import pytest

from leedslink.models.listing import Listing, ListingCategory, ListingType


BASE_TIME = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def make_listing():
    """Factory for listings with neutral defaults (nothing in common)."""
    counter = {"n": 0}

    def _make(
        title="",
        category=ListingCategory.OTHER,
        type=ListingType.OFFER,
        tags=(),
        description="",
        is_urgent=False,
        owner_id="owner-x",
        id=None,
        created_at=None
    ):
        counter["n"] += 1
        return Listing(
            id=id or f"listing-{counter['n']}",
            owner_id=owner_id,
            title=title,
            category=category,
            type=type,
            tags=list(tags),
            description=description,
            is_urgent=is_urgent,
            created_at=created_at or BASE_TIME + timedelta(minutes=counter["n"])
        )

    return _make
