"""
Rating Registry - Single source of truth for submitted ratings.

Enforces one rating per (rater, target) pair and persists to disk.
"""

import json
import os
import shutil
import logging
from typing import List, Optional

from leedslink.models.rating import Rating
from leedslink.utils.timestamps import utc_now, to_iso

logger = logging.getLogger(__name__)


class RatingRegistry:
    """
    Stores every rating in the marketplace.

    A new rating from the same rater to the same target replaces the old one,
    so aggregators always see at most one rating per pair.
    """

    def __init__(self, registry_path: str):
        """
        Initialize registry from disk or create new empty registry.

        Args:
            registry_path: Path to rating_registry.json file
        """
        self.registry_path = registry_path
        self.ratings: List[Rating] = []
        self.version = "1.0.0"
        self.last_updated = to_iso(utc_now())

        if os.path.exists(registry_path):
            self._load()
        else:
            logger.info(f"No existing registry found at {registry_path}, initializing empty registry")

    def _load(self) -> None:
        """Load registry from disk."""
        try:
            with open(self.registry_path, 'r') as f:
                data = json.load(f)

            # Legacy format (bare list) vs dict with metadata
            if isinstance(data, list):
                ratings_list = data
            else:
                self.version = data.get("version", "1.0.0")
                self.last_updated = data.get("last_updated", self.last_updated)
                ratings_list = data.get("ratings", [])

            self.ratings = [Rating.from_dict(item) for item in ratings_list]
            logger.info(f"Loaded {len(self.ratings)} ratings from registry")

        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse registry JSON: {e}")
            self._try_restore_from_backup()
        except Exception as e:
            logger.error(f"Failed to load registry: {e}")
            self._try_restore_from_backup()

    def _try_restore_from_backup(self) -> None:
        """Attempt to restore from backup file if main registry is corrupted."""
        backup_path = f"{self.registry_path}.backup"
        if os.path.exists(backup_path):
            logger.warning(f"Attempting to restore from backup: {backup_path}")
            try:
                with open(backup_path, 'r') as f:
                    data = json.load(f)
                ratings_list = data if isinstance(data, list) else data.get("ratings", [])
                self.ratings = [Rating.from_dict(item) for item in ratings_list]
                shutil.copy(backup_path, self.registry_path)
                logger.info("Successfully restored from backup")
            except Exception as e:
                logger.error(f"Backup restoration failed: {e}. Starting with empty registry.")
                self.ratings = []
        else:
            logger.warning("No backup file found. Starting with empty registry.")
            self.ratings = []

    def submit_rating(self, rating: Rating) -> Rating:
        """
        Add a rating, replacing any earlier rating for the same pair.

        Args:
            rating: Rating to store (already clamped)

        Returns:
            The stored rating
        """
        before = len(self.ratings)
        self.ratings = [
            r for r in self.ratings
            if not (r.from_user_id == rating.from_user_id and r.to_user_id == rating.to_user_id)
        ]
        if len(self.ratings) < before:
            logger.info(
                f"Replacing existing rating from {rating.from_user_id} to {rating.to_user_id}"
            )

        self.ratings.append(rating)
        logger.info(
            f"Rating submitted: {rating.from_user_id} -> {rating.to_user_id} "
            f"({rating.rating} stars, {rating.category.value})"
        )
        return rating

    def get_rating(self, rating_id: str) -> Optional[Rating]:
        """Retrieve rating by ID. Returns None if not found."""
        for rating in self.ratings:
            if rating.id == rating_id:
                return rating
        return None

    def get_all_ratings(self) -> List[Rating]:
        """Return all ratings in submission order."""
        return list(self.ratings)

    def get_ratings_for_user(self, user_id: str) -> List[Rating]:
        """Ratings received by a user."""
        return [r for r in self.ratings if r.to_user_id == user_id]

    def remove_rating(self, rating_id: str) -> None:
        """
        Remove a rating.

        Raises:
            ValueError: If rating_id doesn't exist
        """
        if self.get_rating(rating_id) is None:
            raise ValueError(f"Rating not found: {rating_id}")

        self.ratings = [r for r in self.ratings if r.id != rating_id]
        logger.info(f"Removed rating {rating_id}")

    def save(self) -> None:
        """
        Persist registry to disk with atomic write pattern.
        Creates backup before write.
        """
        self.last_updated = to_iso(utc_now())

        if os.path.exists(self.registry_path):
            backup_path = f"{self.registry_path}.backup"
            shutil.copy(self.registry_path, backup_path)
            logger.debug(f"Created backup: {backup_path}")

        data = {
            "version": self.version,
            "last_updated": self.last_updated,
            "ratings": [rating.to_dict() for rating in self.ratings]
        }

        directory = os.path.dirname(self.registry_path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        # Write to temp file, then rename
        temp_path = f"{self.registry_path}.tmp"
        try:
            with open(temp_path, 'w') as f:
                json.dump(data, f, indent=2)

            os.replace(temp_path, self.registry_path)
            logger.info(f"Registry saved: {len(self.ratings)} ratings")

        except Exception as e:
            logger.error(f"Failed to save registry: {e}")
            if os.path.exists(temp_path):
                os.remove(temp_path)
            raise
