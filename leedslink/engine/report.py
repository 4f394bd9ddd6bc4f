"""
Match Report Generator.

Exports a user's ranked matches as a CSV table with a metadata sidecar.
"""

import json
import logging
import os
from typing import Iterable, Optional, Union

import pandas as pd

from leedslink.engine.matching import TopMatchesResolver, UserMatchAggregator
from leedslink.models.listing import Listing
from leedslink.models.user import User
from leedslink.utils.timestamps import utc_now, to_iso

logger = logging.getLogger(__name__)

REPORT_COLUMNS = [
    "Listing", "Listing Type", "Match", "Match Type",
    "Category", "Score", "Urgent", "Match ID"
]


class MatchReportGenerator:
    """
    Builds the per-user match table behind the dashboard.
    """

    def __init__(self, aggregator: Optional[UserMatchAggregator] = None):
        self.aggregator = aggregator or UserMatchAggregator()

    @property
    def resolver(self) -> TopMatchesResolver:
        return self.aggregator.resolver

    def build_match_table(
        self,
        user: Union[User, str],
        all_listings: Iterable[Listing]
    ) -> pd.DataFrame:
        """
        One row per (own listing, match) pair, highest score first.

        Rows with equal scores keep listing order, then match rank.
        """
        user_id = user.id if isinstance(user, User) else str(user)
        pool = list(all_listings)

        rows = []
        for listing in pool:
            if listing.owner_id != user_id:
                continue
            for match, score in self.resolver.scored_matches(listing, pool):
                rows.append({
                    "Listing": listing.title,
                    "Listing Type": listing.type.value,
                    "Match": match.title,
                    "Match Type": match.type.value,
                    "Category": match.category.value,
                    "Score": score,
                    "Urgent": match.is_urgent,
                    "Match ID": match.id
                })

        if not rows:
            return pd.DataFrame(columns=REPORT_COLUMNS)

        df = pd.DataFrame(rows, columns=REPORT_COLUMNS)
        return df.sort_values("Score", ascending=False, kind="stable").reset_index(drop=True)

    def generate_match_table(
        self,
        user: Union[User, str],
        all_listings: Iterable[Listing],
        output_dir: str = "output"
    ) -> str:
        """
        Write the match table and its metadata to `output_dir`.

        Returns:
            Path to generated CSV file
        """
        user_id = user.id if isinstance(user, User) else str(user)
        pool = list(all_listings)

        logger.info(f"Generating match table for user {user_id}")
        df = self.build_match_table(user_id, pool)

        if df.empty:
            logger.warning(f"No matches found for {user_id}, creating empty match table")

        os.makedirs(output_dir, exist_ok=True)
        output_path = os.path.join(output_dir, f"matches_{user_id}.csv")
        df.to_csv(output_path, index=False)

        match_count = self.aggregator.match_count(user_id, pool)
        metadata = {
            "user_id": user_id,
            "rows": len(df),
            "match_count": match_count,
            "has_local_partner_badge": match_count >= self.aggregator.badge_threshold,
            "generated_at": to_iso(utc_now())
        }

        metadata_path = os.path.join(output_dir, f"matches_{user_id}_metadata.json")
        with open(metadata_path, 'w') as f:
            json.dump(metadata, f, indent=2)

        logger.info(
            f"Match table saved to {output_path} "
            f"({len(df)} rows, {match_count} unique matches)"
        )
        return output_path
