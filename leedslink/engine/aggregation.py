"""
Rating Aggregator.

Summarizes the ratings a user has received into mean, histogram and
per-category means.
"""

import logging
from typing import Dict, Iterable, List
from collections import Counter, defaultdict

from leedslink.models.rating import Rating, RatingCategory, UserRatingSummary
from leedslink.utils.timestamps import utc_now

logger = logging.getLogger(__name__)


class RatingAggregator:
    """
    Derives UserRatingSummary objects from a raw rating collection.

    Unknown user ids are not an error: they simply have zero ratings.
    """

    def summarize(self, user_id: str, all_ratings: Iterable[Rating]) -> UserRatingSummary:
        """
        Build the rating summary for a user.

        Args:
            user_id: User being rated
            all_ratings: Full rating collection (any target user)

        Returns:
            UserRatingSummary; zero-valued when the user has no ratings
        """
        ratings = [r for r in all_ratings if r.to_user_id == user_id]

        if not ratings:
            return UserRatingSummary(user_id=user_id, last_updated=utc_now())

        values = [r.rating for r in ratings]
        average = sum(values) / len(values)

        # Star histogram
        breakdown = dict(Counter(values))

        # Mean per category, only categories with ratings
        by_category: Dict[RatingCategory, List[int]] = defaultdict(list)
        for rating in ratings:
            by_category[rating.category].append(rating.rating)

        category_ratings = {
            category: sum(by_category[category]) / len(by_category[category])
            for category in RatingCategory
            if by_category[category]
        }

        logger.debug(
            f"Summarized {len(ratings)} ratings for {user_id} "
            f"(average: {average:.2f})"
        )

        return UserRatingSummary(
            user_id=user_id,
            average_rating=average,
            total_ratings=len(ratings),
            rating_breakdown=breakdown,
            category_ratings=category_ratings,
            last_updated=utc_now()
        )

    def can_rate(self, from_user_id: str, to_user_id: str, existing_ratings: Iterable[Rating]) -> bool:
        """A user may rate anyone but themselves, once per target."""
        if from_user_id == to_user_id:
            return False

        return not any(
            r.from_user_id == from_user_id and r.to_user_id == to_user_id
            for r in existing_ratings
        )

    def average_rating(self, user_id: str, all_ratings: Iterable[Rating]) -> float:
        return self.summarize(user_id, all_ratings).average_rating

    def total_ratings(self, user_id: str, all_ratings: Iterable[Rating]) -> int:
        return self.summarize(user_id, all_ratings).total_ratings

    def category_rating(
        self,
        user_id: str,
        category: RatingCategory,
        all_ratings: Iterable[Rating]
    ) -> float:
        """Mean rating for one category, 0.0 if the user has none in it."""
        summary = self.summarize(user_id, all_ratings)
        return summary.category_ratings.get(RatingCategory(category), 0.0)
