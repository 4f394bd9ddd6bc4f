"""
Storage utility.

File-backed persistence for users and listings.
"""

import json
import os
import logging
from typing import Dict, List, Optional

from leedslink.models.listing import Listing
from leedslink.models.user import User

logger = logging.getLogger(__name__)


class StorageManager:
    """
    Manages file I/O for users and listings (ratings live in the registry).

    Handles:
    - Users (data/users.json)
    - Listings (data/listings.json), kept in storage order
    - Signed-in user id (data/current_user.json)
    """

    def __init__(self, data_root: str):
        """
        Initialize storage manager.

        Args:
            data_root: Root data directory (e.g., /path/to/data)
        """
        self.data_root = data_root
        self.users_path = os.path.join(data_root, "users.json")
        self.listings_path = os.path.join(data_root, "listings.json")
        self.current_user_path = os.path.join(data_root, "current_user.json")

        os.makedirs(data_root, exist_ok=True)

        logger.info(f"Initialized StorageManager with data_root={data_root}")

    # Users

    def save_user(self, user: User) -> None:
        """Insert or replace a user by id."""
        users = self._load_records(self.users_path)
        self._upsert(users, user.to_dict())
        self._write_records(self.users_path, users)
        logger.info(f"Saved user {user.id} ({user.name})")

    def get_user(self, user_id: str) -> Optional[User]:
        for data in self._load_records(self.users_path):
            if data.get("id") == user_id:
                return User.from_dict(data)
        return None

    def get_all_users(self) -> List[User]:
        return [User.from_dict(data) for data in self._load_records(self.users_path)]

    def save_current_user_id(self, user_id: Optional[str]) -> None:
        """Record the signed-in user (None signs out)."""
        if user_id is None:
            if os.path.exists(self.current_user_path):
                os.remove(self.current_user_path)
            return

        try:
            with open(self.current_user_path, 'w') as f:
                json.dump({"user_id": user_id}, f)
        except Exception as e:
            logger.error(f"Failed to save current user: {e}")
            raise

    def load_current_user_id(self) -> Optional[str]:
        if not os.path.exists(self.current_user_path):
            return None

        try:
            with open(self.current_user_path, 'r') as f:
                return json.load(f).get("user_id")
        except Exception as e:
            logger.error(f"Failed to load current user: {e}")
            return None

    # Listings

    def put_listing(self, listing: Listing) -> None:
        """Insert a listing, or replace the stored listing with the same id."""
        listings = self._load_records(self.listings_path)
        self._upsert(listings, listing.to_dict())
        self._write_records(self.listings_path, listings)
        logger.info(f"Saved listing {listing.id} ('{listing.title}'), {len(listings)} total")

    def save_listings(self, listings: List[Listing]) -> None:
        """Replace the whole listing collection."""
        self._write_records(self.listings_path, [l.to_dict() for l in listings])
        logger.info(f"Saved {len(listings)} listings to {self.listings_path}")

    def get_listing(self, listing_id: str) -> Optional[Listing]:
        for data in self._load_records(self.listings_path):
            if data.get("id") == listing_id:
                return Listing.from_dict(data)
        return None

    def get_all_listings(self) -> List[Listing]:
        """All listings in storage order."""
        listings = []
        for data in self._load_records(self.listings_path):
            try:
                listings.append(Listing.from_dict(data))
            except (KeyError, ValueError) as e:
                logger.warning(f"Skipping invalid listing record {data.get('id')}: {e}")
        return listings

    def get_listings_by_user(self, user_id: str) -> List[Listing]:
        return [l for l in self.get_all_listings() if l.owner_id == user_id]

    def delete_listing(self, listing_id: str) -> bool:
        """
        Delete a listing by id.

        Returns:
            True if a listing was removed
        """
        listings = self._load_records(self.listings_path)
        remaining = [data for data in listings if data.get("id") != listing_id]

        if len(remaining) == len(listings):
            logger.warning(f"Listing {listing_id} not found, nothing deleted")
            return False

        self._write_records(self.listings_path, remaining)
        logger.info(f"Deleted listing {listing_id}")
        return True

    def clear_all_data(self) -> None:
        for path in (self.users_path, self.listings_path, self.current_user_path):
            if os.path.exists(path):
                os.remove(path)
        logger.info(f"Cleared stored data under {self.data_root}")

    # Internal helpers

    def _load_records(self, filepath: str) -> List[Dict]:
        """Load a JSON list; missing or unreadable files read as empty."""
        if not os.path.exists(filepath):
            logger.debug(f"No data file at {filepath}")
            return []

        try:
            with open(filepath, 'r') as f:
                records = json.load(f)
            return records if isinstance(records, list) else []
        except Exception as e:
            logger.error(f"Failed to load {filepath}: {e}")
            return []

    def _write_records(self, filepath: str, records: List[Dict]) -> None:
        try:
            with open(filepath, 'w') as f:
                json.dump(records, f, indent=2)
        except Exception as e:
            logger.error(f"Failed to save {filepath}: {e}")
            raise

    @staticmethod
    def _upsert(records: List[Dict], record: Dict) -> None:
        for index, existing in enumerate(records):
            if existing.get("id") == record["id"]:
                records[index] = record
                return
        records.append(record)
