"""
JSON-file rating/review store.

In-memory store that persists both maps to a single JSON document after
every mutation.
"""

import json
import logging
import os
import shutil
from datetime import datetime, timezone

import config.settings as settings
from ratekeeper.models.user_data import UserRating, UserReview
from ratekeeper.store.base import StoreError
from ratekeeper.store.memory_store import InMemoryRatingReviewStore

logger = logging.getLogger(__name__)


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


class JsonFileRatingReviewStore(InMemoryRatingReviewStore):
    """
    Durable store backed by one JSON file.

    File layout:
        {"version", "last_updated", "ratings": [...], "reviews": [...]}

    Writes go to a temp file that replaces the original, and the previous
    file is kept as <path>.backup for recovery from corruption.

    Saving is synchronous file I/O run inside the put/delete coroutines, so
    every write blocks the event loop until the file is replaced.
    """

    def __init__(self, store_path: str):
        """
        Initialize store from disk or create a new empty one.

        Args:
            store_path: Path to the JSON store file
        """
        super().__init__()
        self.store_path = str(store_path)
        self.version = settings.STORE_FORMAT_VERSION
        self.last_updated = _utc_now_iso()

        directory = os.path.dirname(self.store_path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        if os.path.exists(self.store_path):
            self._load()
        else:
            logger.info(f"No existing store found at {self.store_path}, initializing empty store")

    def _load(self) -> None:
        """Load both maps from disk."""
        try:
            with open(self.store_path, "r", encoding="utf-8") as f:
                data = json.load(f)

            self.version = data.get("version", settings.STORE_FORMAT_VERSION)
            self.last_updated = data.get("last_updated", self.last_updated)

            self._ratings = {}
            for rating_data in data.get("ratings", []):
                rating = UserRating.from_dict(rating_data)
                self._ratings[rating.game_id] = rating

            self._reviews = {}
            for review_data in data.get("reviews", []):
                review = UserReview.from_dict(review_data)
                self._reviews[review.game_id] = review

            logger.info(
                f"Loaded {len(self._ratings)} ratings and {len(self._reviews)} reviews "
                f"from {self.store_path}"
            )

        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse store JSON: {e}")
            self._try_restore_from_backup()
        except (OSError, KeyError, TypeError, ValueError, AttributeError) as e:
            logger.error(f"Failed to load store: {e}")
            self._try_restore_from_backup()

    def _try_restore_from_backup(self) -> None:
        """Restore from the backup file if the main file is corrupted."""
        backup_path = f"{self.store_path}.backup"
        self._ratings = {}
        self._reviews = {}

        if not os.path.exists(backup_path):
            logger.warning("No backup file found. Starting with empty store.")
            return

        logger.warning(f"Attempting to restore from backup: {backup_path}")
        try:
            with open(backup_path, "r", encoding="utf-8") as f:
                data = json.load(f)
            ratings = [UserRating.from_dict(d) for d in data.get("ratings", [])]
            reviews = [UserReview.from_dict(d) for d in data.get("reviews", [])]
        except (OSError, json.JSONDecodeError, KeyError, TypeError, ValueError, AttributeError) as e:
            logger.error(f"Backup restoration failed: {e}. Starting with empty store.")
            return

        self._ratings = {r.game_id: r for r in ratings}
        self._reviews = {r.game_id: r for r in reviews}
        shutil.copy(backup_path, self.store_path)
        logger.info("Successfully restored from backup")

    def save(self) -> None:
        """
        Persist the store to disk with atomic write pattern.
        Creates backup before write.

        Raises:
            StoreError: If the file cannot be written
        """
        self.last_updated = _utc_now_iso()

        data = {
            "version": self.version,
            "last_updated": self.last_updated,
            "ratings": [r.to_dict() for r in sorted(self._ratings.values(), key=lambda r: r.game_id)],
            "reviews": [r.to_dict() for r in sorted(self._reviews.values(), key=lambda r: r.game_id)]
        }

        temp_path = f"{self.store_path}.tmp"
        try:
            if os.path.exists(self.store_path):
                backup_path = f"{self.store_path}.backup"
                shutil.copy(self.store_path, backup_path)
                logger.debug(f"Created backup: {backup_path}")

            with open(temp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)

            os.replace(temp_path, self.store_path)
            logger.debug(
                f"Store saved: {len(self._ratings)} ratings, {len(self._reviews)} reviews"
            )

        except OSError as e:
            logger.error(f"Failed to save store: {e}")
            if os.path.exists(temp_path):
                os.remove(temp_path)
            raise StoreError(f"Failed to save store to {self.store_path}: {e}") from e

    def _persist(self) -> None:
        self.save()


# Design Rationale and Trade-offs:
#
# 1. Why rewrite the whole file on every mutation?
#    - One user's ratings and reviews fit comfortably in one document
#    - Trade-off: Write cost grows with the number of records
#
# 2. Why temp file + os.replace + .backup?
#    - A crash mid-write leaves either the old or the new file
#    - The backup recovers from a file corrupted outside the process
#    - Trade-off: Up to three copies on disk during a save
#
# 3. Why synchronous I/O inside async methods?
#    - Single-user CLI with small files
#    - Trade-off: Blocks the event loop; move save() to asyncio.to_thread
#      if the store is used from a busy server loop
