"""
Configuration settings for RateKeeper.

Centralized configuration for the store, validation limits, activity feed
and logging.
"""

import os
from pathlib import Path

# Project paths
PROJECT_ROOT = Path(__file__).parent.parent
DATA_ROOT = Path(os.getenv("RATEKEEPER_DATA_ROOT", str(PROJECT_ROOT / "data")))
OUTPUT_ROOT = PROJECT_ROOT / "output"
STORE_FILENAME = "user_data.json"

# Rating limits
MIN_RATING = 1
MAX_RATING = 5

# Review limits (UTF-16 code units, not bytes)
MIN_REVIEW_LENGTH = 1
MAX_REVIEW_LENGTH = 1000
REVIEW_PREVIEW_LENGTH = 100  # Truncation applied to reviews in the activity feed
APPROACHING_LIMIT_THRESHOLD = 0.9

# Review input handling
SANITIZE_REVIEW_TEXT = False  # Trim/collapse whitespace, strip tags before validation
REJECT_UNSAFE_REVIEW_CONTENT = False  # Reject HTML/script content with INVALID_REVIEW_CONTENT

# Batch retrieval
BATCH_SIZE = 100  # Max ids resolved per store round-trip

# Activity feed
DEFAULT_ACTIVITY_LIMIT = 10
MAX_ACTIVITY_LIMIT = 100  # Larger limits are clamped

# Placeholder catalog data used when no resolver is configured
PLACEHOLDER_GAME_NAME = "Game {game_id}"
PLACEHOLDER_GAME_IMAGE = "https://example.com/game{game_id}.jpg"

# Persistence
STORE_FORMAT_VERSION = "1.0.0"

# Logging
LOG_LEVEL = os.getenv("RATEKEEPER_LOG_LEVEL", "INFO")  # DEBUG, INFO, WARNING, ERROR
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


# Design Rationale and Trade-offs:
#
# 1. Why module constants instead of a settings object?
#    - One import gives every component the same limits
#    - Tests and the CLI override per instance through constructor args
#    - Trade-off: Changing a limit at runtime needs a new repository
#
# 2. Why count review length in UTF-16 code units?
#    - Matches the length client text fields report for the same text
#    - Emoji outside the BMP count as two units
#    - Trade-off: Differs from Python's len() for non-BMP text
#
# 3. Why are sanitization flags off by default?
#    - Stored text must equal what the user typed
#    - Trade-off: Callers that render HTML must enable rejection themselves
