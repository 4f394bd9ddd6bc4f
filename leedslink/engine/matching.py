"""
Top-Matches Resolver and User Match Aggregator.

Ranks opposite-type candidates for a listing and derives per-user match sets.
"""

import logging
from typing import Iterable, List, Optional, Tuple, Union

from leedslink.engine.scorer import ListingMatchScorer
from leedslink.models.listing import Listing
from leedslink.models.user import User
import config.settings as settings

logger = logging.getLogger(__name__)


class TopMatchesResolver:
    """
    Resolves the best matches for a single listing from a candidate pool.

    Offers only match requests and vice versa. Zero-score candidates are
    dropped. Equal scores keep their pool order.
    """

    def __init__(
        self,
        scorer: Optional[ListingMatchScorer] = None,
        limit: int = settings.TOP_MATCHES_LIMIT
    ):
        self.scorer = scorer or ListingMatchScorer()
        self.limit = limit

    def scored_matches(
        self,
        listing: Listing,
        pool: Iterable[Listing],
        limit: Optional[int] = None
    ) -> List[Tuple[Listing, int]]:
        """
        Rank candidates for a listing, keeping their scores.

        Args:
            listing: Query listing
            pool: Candidate listings (may include the query listing)
            limit: Maximum number of matches (default: resolver limit)

        Returns:
            List of (listing, score) tuples, sorted descending by score
        """
        limit = self.limit if limit is None else limit

        scored = []
        for candidate in pool:
            if candidate.id == listing.id or candidate.type == listing.type:
                continue

            score = self.scorer.score(listing, candidate)
            if score > 0:
                scored.append((candidate, score))

        # sorted() is stable, reverse included
        scored = sorted(scored, key=lambda x: x[1], reverse=True)
        return scored[:limit]

    def top_matches(
        self,
        listing: Listing,
        pool: Iterable[Listing],
        limit: Optional[int] = None
    ) -> List[Listing]:
        """Return the highest-scoring opposite-type listings for `listing`."""
        return [candidate for candidate, _ in self.scored_matches(listing, pool, limit)]


class UserMatchAggregator:
    """
    Aggregates top matches across every listing a user owns.
    """

    def __init__(
        self,
        resolver: Optional[TopMatchesResolver] = None,
        badge_threshold: int = settings.LOCAL_PARTNER_BADGE_THRESHOLD
    ):
        self.resolver = resolver or TopMatchesResolver()
        self.badge_threshold = badge_threshold

    def matches_for_user(
        self,
        user: Union[User, str, None],
        all_listings: Iterable[Listing]
    ) -> List[Listing]:
        """
        Compute the deduplicated union of top matches for a user's listings.

        Args:
            user: User (or user id); None means nobody is signed in
            all_listings: Full listing pool, in storage order

        Returns:
            Matched listings, first occurrence kept on duplicate ids
        """
        user_id = self._user_id(user)
        if user_id is None:
            return []

        pool = list(all_listings)
        user_listings = [listing for listing in pool if listing.owner_id == user_id]

        all_matches = []
        for user_listing in user_listings:
            all_matches.extend(self.resolver.top_matches(user_listing, pool))

        seen_ids = set()
        unique_matches = []
        for match in all_matches:
            if match.id not in seen_ids:
                seen_ids.add(match.id)
                unique_matches.append(match)

        logger.debug(
            f"User {user_id}: {len(user_listings)} listings, "
            f"{len(all_matches)} raw matches, {len(unique_matches)} unique"
        )
        return unique_matches

    def match_count(self, user: Union[User, str, None], all_listings: Iterable[Listing]) -> int:
        """Number of unique listings matched across the user's listings."""
        return len(self.matches_for_user(user, all_listings))

    def has_local_partner_badge(
        self,
        user: Union[User, str, None],
        all_listings: Iterable[Listing]
    ) -> bool:
        """Local Partner badge: at least `badge_threshold` unique matches."""
        return self.match_count(user, all_listings) >= self.badge_threshold

    @staticmethod
    def _user_id(user: Union[User, str, None]) -> Optional[str]:
        if user is None:
            return None
        if isinstance(user, User):
            return user.id
        return str(user)
