"""
Configuration settings for LeedsLink.

Centralized configuration for the matching engine, storage and CLI.
"""

import os
from pathlib import Path

# Project paths
PROJECT_ROOT = Path(__file__).parent.parent
DATA_ROOT = Path(os.getenv("LEEDSLINK_DATA_ROOT", str(PROJECT_ROOT / "data")))
OUTPUT_ROOT = PROJECT_ROOT / "output"
REGISTRY_FILENAME = "rating_registry.json"  # Resolved under the data root

# Match scoring weights (composition order is fixed in the scorer)
CATEGORY_MATCH_WEIGHT = 5
TAG_MATCH_WEIGHT = 2  # Per shared tag
TITLE_WORD_WEIGHT = 1  # Per shared title word
DESCRIPTION_WORD_DIVISOR = 2  # Shared description words // divisor
URGENCY_BONUS = 1  # Only the candidate's urgency counts

# Top matches
TOP_MATCHES_LIMIT = 5
LOCAL_PARTNER_BADGE_THRESHOLD = 3

# Discovery
ACTIVE_LISTINGS_LIMIT = 10
RECENT_WINDOW_DAYS = 7

# Pipeline behaviour
CRASH_ON_REGISTRY_ERROR = True  # Re-raise when the rating registry cannot be saved

# Logging
LOG_LEVEL = "INFO"  # DEBUG, INFO, WARNING, ERROR
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FILE = "leedslink.log"
