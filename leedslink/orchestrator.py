"""
Marketplace Orchestrator.

Wires storage, the rating registry and the matching engine together and
recomputes derived views after every mutation.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from leedslink.engine.aggregation import RatingAggregator
from leedslink.engine.discovery import filter_listings, urgent_listings
from leedslink.engine.matching import TopMatchesResolver, UserMatchAggregator
from leedslink.engine.notifications import NotificationPolicy, NotificationSettings
from leedslink.engine.report import MatchReportGenerator
from leedslink.engine.scorer import ListingMatchScorer
from leedslink.models.listing import Listing, ListingCategory
from leedslink.models.rating import Rating, UserRatingSummary
from leedslink.models.user import User, UserRole
from leedslink.registry.rating_registry import RatingRegistry
from leedslink.utils.mock_data import MockDataGenerator
from leedslink.utils.storage import StorageManager
import config.settings as settings

logger = logging.getLogger(__name__)


@dataclass
class MatchCountUpdate:
    """Outcome of one match recomputation for the signed-in user."""
    previous_count: int
    current_count: int
    new_matches: List[Listing] = field(default_factory=list)
    should_notify: bool = False


class MarketplaceOrchestrator:
    """
    Coordinates the marketplace for the signed-in user.

    Mutations and the recomputation that follows them:
    1. Create listing → 2. Persist → 3. Recompute matches
    1. Delete listing → 2. Persist → 3. Recompute matches
    1. Submit rating → 2. Replace per pair + save registry → 3. Summarize
    """

    def __init__(
        self,
        data_root: str,
        registry_path: str,
        notification_settings: Optional[NotificationSettings] = None
    ):
        """
        Initialize marketplace orchestrator.

        Args:
            data_root: Root directory for user/listing storage
            registry_path: Path to rating registry JSON
            notification_settings: Notification toggles (default: all on)
        """
        self.data_root = data_root
        self.registry_path = registry_path

        logger.info("Initializing marketplace components...")

        self.storage = StorageManager(data_root)
        self.registry = RatingRegistry(registry_path)

        self.scorer = ListingMatchScorer()
        self.resolver = TopMatchesResolver(
            scorer=self.scorer,
            limit=settings.TOP_MATCHES_LIMIT
        )
        self.match_aggregator = UserMatchAggregator(
            resolver=self.resolver,
            badge_threshold=settings.LOCAL_PARTNER_BADGE_THRESHOLD
        )
        self.rating_aggregator = RatingAggregator()
        self.notification_policy = NotificationPolicy(notification_settings)
        self.report_generator = MatchReportGenerator(self.match_aggregator)

        self.current_user_id = self.storage.load_current_user_id()
        self.matches_found_count = 0
        self._matched_ids: List[str] = []

        # Initial counts do not notify
        matches = self.matches_for_user()
        self.matches_found_count = len(matches)
        self._matched_ids = [m.id for m in matches]

        logger.info(
            f"Marketplace initialized (current user: {self.current_user_id}, "
            f"matches: {self.matches_found_count})"
        )

    # Users

    @property
    def current_user(self) -> Optional[User]:
        if self.current_user_id is None:
            return None
        return self.storage.get_user(self.current_user_id)

    def create_user(self, user: User) -> MatchCountUpdate:
        """Register a user and sign them in."""
        self.storage.save_user(user)
        return self.sign_in(user.id)

    def sign_in(self, user_id: str) -> MatchCountUpdate:
        if self.storage.get_user(user_id) is None:
            raise ValueError(f"User not found: {user_id}")

        self.current_user_id = user_id
        self.storage.save_current_user_id(user_id)
        logger.info(f"Signed in as {user_id}")
        return self.update_match_count()

    def sign_out(self) -> None:
        self.current_user_id = None
        self.storage.save_current_user_id(None)
        self.matches_found_count = 0
        self._matched_ids = []

    # Listings

    def create_listing(self, listing: Listing) -> MatchCountUpdate:
        logger.info(f"Adding listing: {listing.title}")
        self.storage.put_listing(listing)
        return self.update_match_count()

    def delete_listing(self, listing_id: str) -> MatchCountUpdate:
        if not self.storage.delete_listing(listing_id):
            raise ValueError(f"Listing not found: {listing_id}")
        return self.update_match_count()

    def get_listing(self, listing_id: str) -> Listing:
        listing = self.storage.get_listing(listing_id)
        if listing is None:
            raise ValueError(f"Listing not found: {listing_id}")
        return listing

    def top_matches(self, listing_id: str, limit: Optional[int] = None) -> List[Tuple[Listing, int]]:
        """Ranked (listing, score) matches for a stored listing."""
        listing = self.get_listing(listing_id)
        return self.resolver.scored_matches(listing, self.storage.get_all_listings(), limit)

    def browse_listings(
        self,
        role: Optional[UserRole] = None,
        category: Optional[ListingCategory] = None,
        urgent_only: bool = False
    ) -> List[Listing]:
        """
        Listings for the discovery view, newest first.

        Args:
            role: Viewer role (default: the signed-in user's role, if any)
            category: Restrict to one category
            urgent_only: Only the urgent board
        """
        if role is None and self.current_user is not None:
            role = self.current_user.role

        results = filter_listings(self.storage.get_all_listings(), role=role, category=category)
        if urgent_only:
            results = urgent_listings(results)
        return results

    # Matches

    def matches_for_user(self, user_id: Optional[str] = None) -> List[Listing]:
        user_id = user_id or self.current_user_id
        return self.match_aggregator.matches_for_user(user_id, self.storage.get_all_listings())

    def update_match_count(self) -> MatchCountUpdate:
        """
        Recompute the signed-in user's matches from the current listing snapshot.
        """
        previous_count = self.matches_found_count
        matches = self.matches_for_user()

        new_matches = [m for m in matches if m.id not in self._matched_ids]
        self.matches_found_count = len(matches)
        self._matched_ids = [m.id for m in matches]

        should_notify = self.notification_policy.should_notify_match_count(
            previous_count, self.matches_found_count
        )
        if self.matches_found_count > previous_count:
            logger.info(f"New matches found! Total matches: {self.matches_found_count}")

        return MatchCountUpdate(
            previous_count=previous_count,
            current_count=self.matches_found_count,
            new_matches=new_matches,
            should_notify=should_notify
        )

    @property
    def has_local_partner_badge(self) -> bool:
        return self.matches_found_count >= self.match_aggregator.badge_threshold

    # Ratings

    def submit_rating(self, rating: Rating) -> UserRatingSummary:
        """
        Store a rating (replacing any earlier one for the pair) and
        return the target's refreshed summary.

        Raises:
            ValueError: If a user tries to rate themselves
        """
        if rating.from_user_id == rating.to_user_id:
            raise ValueError("Users cannot rate themselves")

        previous_ratings = self.registry.get_all_ratings()
        self.registry.submit_rating(rating)
        try:
            saved = self._save_registry()
        except Exception:
            self.registry.ratings = previous_ratings
            raise

        if not saved:
            # Unsaved ratings never reach a summary
            self.registry.ratings = previous_ratings
        return self.rating_summary(rating.to_user_id)

    def can_rate(self, from_user_id: str, to_user_id: str) -> bool:
        return self.rating_aggregator.can_rate(
            from_user_id, to_user_id, self.registry.get_all_ratings()
        )

    def rating_summary(self, user_id: str) -> UserRatingSummary:
        return self.rating_aggregator.summarize(user_id, self.registry.get_all_ratings())

    # Reports and seeding

    def generate_match_report(self, user_id: Optional[str] = None, output_dir: Optional[str] = None) -> str:
        user_id = user_id or self.current_user_id
        if user_id is None:
            raise ValueError("No user given and nobody is signed in")

        return self.report_generator.generate_match_table(
            user_id,
            self.storage.get_all_listings(),
            output_dir=output_dir or str(settings.OUTPUT_ROOT)
        )

    def seed_mock_data(self, generator: Optional[MockDataGenerator] = None) -> bool:
        """
        Load mock users, listings and ratings when storage holds no listings.

        Returns:
            True if mock data was written
        """
        if self.storage.get_all_listings():
            logger.info("Listings already present, skipping mock data")
            return False

        generator = generator or MockDataGenerator()
        users = generator.generate_users()
        for user in users:
            self.storage.save_user(user)

        self.storage.save_listings(generator.generate_listings(users))

        for rating in generator.generate_ratings(users):
            self.registry.submit_rating(rating)
        self._save_registry()

        self.update_match_count()
        logger.info(f"Seeded {len(users)} mock users")
        return True

    def _save_registry(self) -> bool:
        """Save the registry; False if the failure was tolerated."""
        try:
            self.registry.save()
            return True
        except Exception as e:
            logger.error(f"CRITICAL: Failed to save rating registry: {e}")
            if settings.CRASH_ON_REGISTRY_ERROR:
                raise
            return False
