"""
Listing Match Scorer.

Computes a non-negative integer affinity between two listings.
"""

import logging
from typing import Set

from leedslink.models.listing import Listing
import config.settings as settings

logger = logging.getLogger(__name__)


def tokenize(text: str) -> Set[str]:
    """
    Split text on whitespace runs and lower-case each token.

    Empty tokens (from repeated or leading whitespace) are never produced.
    """
    if not text:
        return set()
    return set(text.lower().split())


class ListingMatchScorer:
    """
    Scores how well a candidate listing corresponds to a query listing.

    Signals, summed in this order:
    1. Category match (flat bonus)
    2. Shared tags (exact, case-sensitive)
    3. Shared title words
    4. Shared description words (halved, rounded down)
    5. Candidate urgency

    Only the second argument's urgency counts, so score(a, b) and score(b, a)
    differ by the urgency bonus when exactly one listing is urgent. Callers
    always pass the query listing first.
    """

    def __init__(
        self,
        category_weight: int = settings.CATEGORY_MATCH_WEIGHT,
        tag_weight: int = settings.TAG_MATCH_WEIGHT,
        title_word_weight: int = settings.TITLE_WORD_WEIGHT,
        description_divisor: int = settings.DESCRIPTION_WORD_DIVISOR,
        urgency_bonus: int = settings.URGENCY_BONUS
    ):
        self.category_weight = category_weight
        self.tag_weight = tag_weight
        self.title_word_weight = title_word_weight
        self.description_divisor = description_divisor
        self.urgency_bonus = urgency_bonus

    def score(self, listing: Listing, other: Listing) -> int:
        """
        Score `other` as a match for `listing`.

        Args:
            listing: Query listing (first argument)
            other: Candidate listing; its urgency adds the bonus

        Returns:
            Non-negative integer score
        """
        score = 0

        # Category match
        if listing.category == other.category:
            score += self.category_weight

        # Tag overlap
        common_tags = set(listing.tags) & set(other.tags)
        score += len(common_tags) * self.tag_weight

        # Title keyword overlap
        common_title_words = tokenize(listing.title) & tokenize(other.title)
        score += len(common_title_words) * self.title_word_weight

        # Description keyword overlap
        common_desc_words = tokenize(listing.description) & tokenize(other.description)
        score += len(common_desc_words) // self.description_divisor

        # Urgency of the candidate
        if other.is_urgent:
            score += self.urgency_bonus

        logger.debug(f"Scored {listing.id} -> {other.id}: {score}")
        return score
