"""
Word builders shared by tests
"""

from datetime import datetime, timedelta

from learndeck.core.models import Difficulty, Word

NOW = datetime(2026, 1, 15, 12, 0, 0)


def make_word(
    word_id,
    difficulty: Difficulty | str = Difficulty.NEW,
    review_count: int = 0,
    correct_count: int = 0,
    last_reviewed: datetime | None = None,
    next_review: datetime | None = None,
    folders=(),
) -> Word:
    """Build a word with sensible defaults relative to NOW"""
    return Word(
        id=word_id,
        word=f"word{word_id}",
        definition=f"definition {word_id}",
        difficulty=Difficulty.parse(difficulty),
        review_count=review_count,
        correct_count=correct_count,
        last_reviewed=last_reviewed,
        next_review=next_review or NOW + timedelta(days=1),
        folders=frozenset(folders),
        created_at=NOW - timedelta(days=30),
    )
