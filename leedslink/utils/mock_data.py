"""
Mock data generator.

Seeds a realistic Leeds marketplace: local businesses, their offers and
requests, and a handful of ratings between them.
"""

import logging
import uuid
from datetime import datetime, timedelta
from typing import List, Optional

from leedslink.models.listing import Listing, ListingCategory, ListingType
from leedslink.models.rating import Rating, RatingCategory
from leedslink.models.user import User, UserRole
from leedslink.utils.timestamps import utc_now

logger = logging.getLogger(__name__)

# Stable ids so repeated seeding produces the same records
_NAMESPACE = uuid.UUID("6f1c0b0e-5d1a-4c3e-9a51-1eed5118c0de")


def _stable_id(kind: str, key: str) -> str:
    return str(uuid.uuid5(_NAMESPACE, f"{kind}:{key}"))


# (name, business, role, address, postcode, description)
USER_TEMPLATES = [
    ("Sarah Mitchell", "Sarah's Catering Co.", UserRole.SERVICE_PROVIDER,
     "12 Victoria Road, Headingley", "LS6 3AA",
     "Professional catering services for events and corporate functions"),
    ("James Thompson", "Thompson Plumbing Services", UserRole.SERVICE_PROVIDER,
     "45 Kirkstall Road, Kirkstall", "LS5 3AA",
     "Licensed plumber with 15 years experience in Leeds"),
    ("Emma Wilson", "Wilson's Organic Farm", UserRole.SUPPLIER,
     "Farm House, Meanwood Valley", "LS7 4JY",
     "Local organic produce supplier serving Leeds area"),
    ("David Chen", "Chen Digital Solutions", UserRole.SERVICE_PROVIDER,
     "78 Chapel Allerton Road, Chapel Allerton", "LS7 4PD",
     "Web design and digital marketing services for local businesses"),
    ("Lisa Brown", "Brown & Associates Accounting", UserRole.SERVICE_PROVIDER,
     "23 Roundhay Road, Roundhay", "LS8 1BA",
     "Chartered accountants specializing in small business services"),
    ("Tom Anderson", "Anderson Coffee Roasters", UserRole.SUPPLIER,
     "34 Moortown Lane, Moortown", "LS17 6NY",
     "Artisan coffee roaster supplying local cafes and restaurants"),
    ("Priya Patel", "Corn Exchange Events", UserRole.CUSTOMER,
     "Call Lane, City Centre", "LS1 7BR",
     "Event organiser running corporate functions across Leeds"),
    ("Oliver Hughes", "Kirkgate Cafe", UserRole.CUSTOMER,
     "Kirkgate Market, City Centre", "LS2 7HY",
     "Independent cafe in Kirkgate Market"),
]

# (owner index, title, category, tags, description, type, urgent)
LISTING_TEMPLATES = [
    (6, "Urgent: Need Catering for Corporate Event", ListingCategory.FOOD,
     ["catering", "event", "corporate", "buffet"],
     "Looking for a catering service for a corporate event with 50 guests. "
     "Need vegetarian and vegan options.",
     ListingType.REQUEST, True),
    (1, "Emergency Plumbing Services Available", ListingCategory.CONSTRUCTION,
     ["plumbing", "emergency", "24/7", "repair"],
     "Licensed plumber available for emergency repairs. Fast response time in Leeds area.",
     ListingType.OFFER, True),
    (2, "Fresh Local Produce Delivery", ListingCategory.FOOD,
     ["organic", "local", "vegetables", "delivery"],
     "Farm-fresh organic vegetables delivered to your door. Supporting local farmers.",
     ListingType.OFFER, False),
    (3, "Professional Web Design Services", ListingCategory.TECHNOLOGY,
     ["web design", "responsive", "SEO", "modern"],
     "Creating modern, responsive websites for local businesses. SEO optimization included.",
     ListingType.OFFER, False),
    (4, "Accounting Services for Small Businesses", ListingCategory.PROFESSIONAL,
     ["accounting", "bookkeeping", "tax", "payroll"],
     "Comprehensive accounting services tailored for small businesses in Leeds.",
     ListingType.OFFER, False),
    (7, "Need Logo Design for New Cafe", ListingCategory.TECHNOLOGY,
     ["logo", "design", "branding", "cafe"],
     "Opening a new cafe in Leeds city center. Need professional logo and basic branding.",
     ListingType.REQUEST, False),
    (7, "Wholesale Coffee Supplier Needed", ListingCategory.FOOD,
     ["coffee", "wholesale", "beans", "supplier"],
     "Cafe looking for reliable coffee bean supplier. Need variety of blends and fair trade options.",
     ListingType.REQUEST, False),
    (5, "Wholesale Coffee Beans for Cafes", ListingCategory.FOOD,
     ["coffee", "wholesale", "beans", "roastery"],
     "Freshly roasted coffee beans supplied weekly to Leeds cafes. Fair trade blends available.",
     ListingType.OFFER, False),
    (0, "Wedding Catering Services", ListingCategory.FOOD,
     ["wedding", "catering", "events", "special occasions"],
     "Elegant wedding catering with customizable menus. Serving Leeds and surrounding areas.",
     ListingType.OFFER, False),
    (0, "Corporate Event Catering", ListingCategory.FOOD,
     ["catering", "corporate", "event", "buffet"],
     "Buffet and canape catering for corporate events of any size, vegan options included.",
     ListingType.OFFER, False),
    (6, "Need Hotel for Conference Attendees", ListingCategory.HOSPITALITY,
     ["hotel", "conference", "group booking", "corporate"],
     "Looking for hotel accommodation for 20 conference attendees. Need group booking "
     "with corporate rates.",
     ListingType.REQUEST, False),
    (1, "Bathroom Renovation Services", ListingCategory.CONSTRUCTION,
     ["bathroom", "renovation", "tiling", "plumbing"],
     "Complete bathroom renovations including plumbing, tiling, and fixtures. Free quotes available.",
     ListingType.OFFER, False),
]

# (from index, to index, stars, category, review)
RATING_TEMPLATES = [
    (6, 0, 5, RatingCategory.OVERALL, "Excellent service! Very professional and reliable."),
    (7, 5, 4, RatingCategory.COMMUNICATION, "Good communication throughout the project."),
    (7, 3, 5, RatingCategory.VALUE, "Great value for money. Highly recommended!"),
    (6, 1, 4, RatingCategory.RELIABILITY, "Service was delivered on time and as promised."),
    (7, 0, 5, RatingCategory.SERVICE, "Outstanding quality of work. Will definitely use again."),
]


class MockDataGenerator:
    """
    Generates deterministic mock users, listings and ratings.

    Listings are spaced one hour apart, the first template being the newest.
    """

    def __init__(self, now: Optional[datetime] = None):
        self.now = now or utc_now()

    def generate_users(self) -> List[User]:
        users = []
        for name, business, role, address, postcode, description in USER_TEMPLATES:
            users.append(User(
                id=_stable_id("user", name),
                name=name,
                business_name=business,
                role=role,
                address=address,
                postcode=postcode,
                description=description,
                created_at=self.now - timedelta(days=30)
            ))
        return users

    def generate_listings(self, users: Optional[List[User]] = None) -> List[Listing]:
        users = users or self.generate_users()

        listings = []
        for index, template in enumerate(LISTING_TEMPLATES):
            owner_index, title, category, tags, description, listing_type, urgent = template
            owner = users[owner_index % len(users)]
            listings.append(Listing(
                id=_stable_id("listing", title),
                owner_id=owner.id,
                title=title,
                category=category,
                tags=list(tags),
                description=description,
                type=listing_type,
                is_urgent=urgent,
                availability="Flexible",
                postcode=owner.postcode,
                created_at=self.now - timedelta(hours=index)
            ))

        logger.info(f"Generated {len(listings)} mock listings for {len(users)} users")
        return listings

    def generate_ratings(self, users: Optional[List[User]] = None) -> List[Rating]:
        users = users or self.generate_users()

        ratings = []
        for from_index, to_index, stars, category, review in RATING_TEMPLATES:
            from_user = users[from_index % len(users)]
            to_user = users[to_index % len(users)]
            ratings.append(Rating(
                id=_stable_id("rating", f"{from_user.id}:{to_user.id}"),
                from_user_id=from_user.id,
                to_user_id=to_user.id,
                rating=stars,
                category=category,
                review=review,
                created_at=self.now - timedelta(days=1)
            ))
        return ratings
