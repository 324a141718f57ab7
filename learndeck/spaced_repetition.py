"""
Spaced repetition scheduling: difficulty state machine and review intervals
"""

import logging
from datetime import datetime, timedelta

from .core.models import Difficulty, ReviewResult, Word

logger = logging.getLogger(__name__)

# Correct answers needed before a word leaves "learning" / enters "mastered"
LEARNING_GRADUATION_COUNT = 3
MASTERY_COUNT = 10

# (correct, incorrect) interval in days, keyed by the pre-answer difficulty
REVIEW_INTERVALS: dict[Difficulty, tuple[float, float]] = {
    Difficulty.NEW: (1, 0.5),
    Difficulty.LEARNING: (3, 1),
    Difficulty.REVIEW: (7, 2),
    Difficulty.MASTERED: (30, 7),
    Difficulty.FAILED: (1, 1),
}


class SpacedRepetitionSystem:
    """Fixed-interval spaced repetition over five mastery states"""

    def __init__(
        self,
        learning_graduation_count: int = LEARNING_GRADUATION_COUNT,
        mastery_count: int = MASTERY_COUNT,
        intervals: dict[Difficulty, tuple[float, float]] | None = None,
    ):
        self.learning_graduation_count = learning_graduation_count
        self.mastery_count = mastery_count
        self.intervals = dict(intervals or REVIEW_INTERVALS)

    def next_difficulty(
        self,
        current: Difficulty | str,
        is_correct: bool,
        new_correct_count: int,
    ) -> Difficulty:
        """
        Compute the mastery state after an answer

        Args:
            current: Difficulty before the answer
            is_correct: Whether the answer was correct
            new_correct_count: Correct answers including this one

        Returns:
            The next Difficulty
        """
        current = Difficulty.parse(current)

        if is_correct:
            if current == Difficulty.NEW:
                return Difficulty.LEARNING
            if current == Difficulty.LEARNING and new_correct_count >= self.learning_graduation_count:
                return Difficulty.REVIEW
            if current == Difficulty.REVIEW and new_correct_count >= self.mastery_count:
                return Difficulty.MASTERED
            return current

        # Demote by one step; new and learning have nowhere lower to go
        if current == Difficulty.MASTERED:
            return Difficulty.REVIEW
        if current == Difficulty.REVIEW:
            return Difficulty.LEARNING
        return current

    def interval_days(self, current: Difficulty | str, is_correct: bool) -> float:
        """Review interval in days for the pre-answer difficulty"""
        correct_days, incorrect_days = self.intervals[Difficulty.parse(current)]
        return correct_days if is_correct else incorrect_days

    def next_review_date(
        self,
        current: Difficulty | str,
        is_correct: bool,
        now: datetime | None = None,
    ) -> datetime:
        """Compute when the word becomes due again"""
        if now is None:
            now = datetime.now()
        return now + timedelta(days=self.interval_days(current, is_correct))

    def review_word(
        self,
        word: Word,
        is_correct: bool,
        now: datetime | None = None,
    ) -> ReviewResult:
        """
        Apply one answer to a word snapshot

        Scheduling and the state transition both read the pre-answer
        difficulty. The word itself is left untouched.
        """
        if now is None:
            now = datetime.now()

        correct_count = word.correct_count + 1 if is_correct else word.correct_count
        interval = self.interval_days(word.difficulty, is_correct)

        result = ReviewResult(
            difficulty=self.next_difficulty(word.difficulty, is_correct, correct_count),
            next_review=now + timedelta(days=interval),
            last_reviewed=now,
            review_count=word.review_count + 1,
            correct_count=correct_count,
            interval_days=interval,
            is_correct=is_correct,
        )

        logger.debug(
            f"Reviewed word {word.id}: {word.difficulty.value} -> {result.difficulty.value}, "
            f"correct={is_correct}, next in {interval} days"
        )

        return result


# Global instance
_srs_system = None


def get_srs_system() -> SpacedRepetitionSystem:
    """Get global SRS system instance"""
    global _srs_system
    if _srs_system is None:
        _srs_system = SpacedRepetitionSystem()
    return _srs_system


def next_difficulty(
    current: Difficulty | str, is_correct: bool, new_correct_count: int
) -> Difficulty:
    """Convenience function for the difficulty state machine"""
    return get_srs_system().next_difficulty(current, is_correct, new_correct_count)


def next_review_date(
    current: Difficulty | str, is_correct: bool, now: datetime | None = None
) -> datetime:
    """Convenience function for the review scheduler"""
    return get_srs_system().next_review_date(current, is_correct, now)


def review_word(word: Word, is_correct: bool, now: datetime | None = None) -> ReviewResult:
    """Convenience function to apply one answer to a word"""
    return get_srs_system().review_word(word, is_correct, now)
