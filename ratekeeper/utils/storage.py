"""
Storage utility.

Exports user ratings, reviews and statistics as CSV tables with a JSON
metadata sidecar.
"""

import json
import logging
import os
from datetime import datetime, timezone
from typing import Dict, Optional, Sequence

import pandas as pd

from ratekeeper.models.stats import RATING_VALUES, UserRatingStats
from ratekeeper.models.user_data import GameWithUserData

logger = logging.getLogger(__name__)

USER_DATA_COLUMNS = ['GameId', 'Rating', 'Review', 'RatedAt', 'ReviewedAt']
STATS_COLUMNS = ['Rating', 'Count', 'Percentage']


def _format_millis(timestamp: Optional[int]) -> Optional[str]:
    if timestamp is None:
        return None
    return datetime.fromtimestamp(timestamp / 1000, tz=timezone.utc).isoformat()


class ExportManager:
    """
    Writes export files into a single output directory.

    Each export produces <name>.csv and <name>_metadata.json.
    """

    def __init__(self, output_dir: str):
        """
        Initialize export manager.

        Args:
            output_dir: Directory for exported files (created if missing)
        """
        self.output_dir = str(output_dir)
        os.makedirs(self.output_dir, exist_ok=True)

        logger.info(f"Initialized ExportManager with output_dir={self.output_dir}")

    def export_user_data(self, games: Sequence[GameWithUserData], name: str) -> str:
        """
        Export one row per game.

        Rating/Review columns are empty for games without that record.
        Timestamps are written as ISO-8601 UTC strings.

        Args:
            games: Games to export, in the order they should appear
            name: Base file name (without extension)

        Returns:
            Path to the written CSV
        """
        rows = []
        for game in games:
            rating = game.user_rating
            review = game.user_review
            rows.append({
                'GameId': game.game_id,
                'Rating': rating.rating if rating else None,
                'Review': review.review_text if review else None,
                'RatedAt': _format_millis(rating.updated_at) if rating else None,
                'ReviewedAt': _format_millis(review.updated_at) if review else None
            })

        df = pd.DataFrame(rows, columns=USER_DATA_COLUMNS)
        if not df.empty:
            # Nullable ints keep unrated games from turning the column into floats
            df['Rating'] = df['Rating'].astype('Int64')

        output_path = self._write_csv(df, name)
        self._write_metadata(name, {
            "export_type": "user_data",
            "total_games": len(df),
            "rated_games": sum(1 for g in games if g.has_user_rating),
            "reviewed_games": sum(1 for g in games if g.has_user_review),
        })
        return output_path

    def export_stats(self, stats: UserRatingStats, name: str) -> str:
        """
        Export the rating distribution.

        Args:
            stats: Statistics to export
            name: Base file name (without extension)

        Returns:
            Path to the written CSV
        """
        rows = [
            {
                'Rating': value,
                'Count': stats.rating_distribution.get(value, 0),
                'Percentage': round(stats.percentage_for_rating(value), 1)
            }
            for value in RATING_VALUES
        ]
        df = pd.DataFrame(rows, columns=STATS_COLUMNS)

        output_path = self._write_csv(df, name)
        self._write_metadata(name, {
            "export_type": "stats",
            "total_rated_games": stats.total_rated_games,
            "total_reviews": stats.total_reviews,
            "average_rating": round(stats.average_rating, 2),
            "most_common_rating": stats.most_common_rating(),
        })
        return output_path

    def _write_csv(self, df: pd.DataFrame, name: str) -> str:
        output_path = os.path.join(self.output_dir, f"{name}.csv")
        try:
            df.to_csv(output_path, index=False)
        except Exception as e:
            logger.error(f"Failed to write {output_path}: {e}")
            raise
        logger.info(f"Exported {len(df)} rows to {output_path}")
        return output_path

    def _write_metadata(self, name: str, metadata: Dict) -> str:
        metadata_path = os.path.join(self.output_dir, f"{name}_metadata.json")
        metadata = dict(metadata, generated_at=datetime.now(timezone.utc).isoformat())

        with open(metadata_path, 'w', encoding='utf-8') as f:
            json.dump(metadata, f, indent=2)

        logger.debug(f"Metadata saved to {metadata_path}")
        return metadata_path



# Design Rationale and Trade-offs:
#
# 1. Why pandas for two small tables?
#    - DataFrame.to_csv handles quoting of review text with commas and newlines
#    - Nullable Int64 keeps unrated games from turning ratings into floats
#    - Trade-off: Heavy dependency for the export path
#
# 2. Why a metadata JSON next to each CSV?
#    - Totals and generation time stay out of the tabular data
