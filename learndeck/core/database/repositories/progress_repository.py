"""
Progress repository for review state updates and statistics
"""

import logging
from datetime import datetime, timedelta

from ...models import Difficulty, ReviewResult
from ..connection import DatabaseConnection
from ..models import UserStats

logger = logging.getLogger(__name__)


def empty_stats() -> UserStats:
    return {
        "total_words": 0,
        "new_words": 0,
        "learning_words": 0,
        "review_words": 0,
        "mastered_words": 0,
        "failed_words": 0,
        "due_words": 0,
        "total_reviews": 0,
        "total_correct": 0,
        "average_accuracy": 0.0,
        "mastery_rate": 0.0,
    }


class ProgressRepository:
    """Repository for word review progress"""

    def __init__(self, db_connection: DatabaseConnection):
        self.db_connection = db_connection

    def update_word_progress(self, word_id: int, result: ReviewResult) -> bool:
        """Write the outcome of one answer to the word row"""
        update = result.as_update()
        try:
            with self.db_connection.get_connection() as conn:
                cursor = conn.execute(
                    """
                    UPDATE words
                    SET difficulty = ?,
                        next_review = ?,
                        last_reviewed = ?,
                        review_count = ?,
                        correct_count = ?
                    WHERE id = ?
                    """,
                    (
                        update["difficulty"],
                        update["next_review"],
                        update["last_reviewed"],
                        update["review_count"],
                        update["correct_count"],
                        word_id,
                    ),
                )
                conn.commit()

                if cursor.rowcount == 0:
                    logger.warning(f"No word with id {word_id} to update")
                    return False
                return True
        except Exception as e:
            logger.error(f"Error updating progress for word {word_id}: {e}")
            return False

    def reset_word_progress(self, word_id: int) -> bool:
        """Put a word back into the "new" state"""
        try:
            with self.db_connection.get_connection() as conn:
                cursor = conn.execute(
                    """
                    UPDATE words
                    SET difficulty = ?,
                        review_count = 0,
                        correct_count = 0,
                        last_reviewed = NULL,
                        next_review = ?
                    WHERE id = ?
                    """,
                    (Difficulty.NEW.value, datetime.now() + timedelta(days=1), word_id),
                )
                conn.commit()
                return cursor.rowcount > 0
        except Exception as e:
            logger.error(f"Error resetting word progress: {e}")
            return False

    def get_user_stats(self, user_id: int, now: datetime | None = None) -> UserStats:
        """Get word counts per difficulty and overall accuracy"""
        if now is None:
            now = datetime.now()
        try:
            with self.db_connection.get_connection() as conn:
                row = conn.execute(
                    """
                    SELECT
                        COUNT(*) as total_words,
                        SUM(CASE WHEN difficulty = 'new' THEN 1 ELSE 0 END) as new_words,
                        SUM(CASE WHEN difficulty = 'learning' THEN 1 ELSE 0 END) as learning_words,
                        SUM(CASE WHEN difficulty = 'review' THEN 1 ELSE 0 END) as review_words,
                        SUM(CASE WHEN difficulty = 'mastered' THEN 1 ELSE 0 END) as mastered_words,
                        SUM(CASE WHEN difficulty = 'failed' THEN 1 ELSE 0 END) as failed_words,
                        SUM(CASE WHEN next_review <= ? OR last_reviewed IS NULL
                            THEN 1 ELSE 0 END) as due_words,
                        SUM(review_count) as total_reviews,
                        SUM(correct_count) as total_correct
                    FROM words
                    WHERE user_id = ?
                    """,
                    (now, user_id),
                ).fetchone()
        except Exception as e:
            logger.error(f"Error getting stats for user {user_id}: {e}")
            return empty_stats()

        stats = empty_stats()
        if not row or not row["total_words"]:
            return stats

        for key in row.keys():
            stats[key] = row[key] or 0

        stats["average_accuracy"] = (
            stats["total_correct"] / stats["total_reviews"] if stats["total_reviews"] > 0 else 0.0
        )
        stats["mastery_rate"] = stats["mastered_words"] / stats["total_words"]
        return stats
