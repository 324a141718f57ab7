"""
Study order composition: turns a candidate set into the sequence shown in a session
"""

import logging
import random
from collections.abc import Sequence
from datetime import datetime
from enum import Enum

from ..errors import ConfigurationError
from ..models import Difficulty, Word

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 20
PRIORITY_ACCURACY_THRESHOLD = 0.6
OVERDUE_PRIORITY_DAYS = 2
SMALL_SET_SIZE = 5

DIFFICULTY_GROUP_ORDER = (
    Difficulty.FAILED,
    Difficulty.LEARNING,
    Difficulty.NEW,
    Difficulty.REVIEW,
    Difficulty.MASTERED,
)

# Lower sorts first
DUE_PRIORITY_RANK = {
    Difficulty.FAILED: 0,
    Difficulty.NEW: 1,
    Difficulty.LEARNING: 2,
    Difficulty.REVIEW: 3,
    Difficulty.MASTERED: 4,
}


class OrderingPolicy(Enum):
    """Named ways of ordering a study session"""

    DUE_DATE = "due_date"
    PRIORITY_INTERLEAVE = "priority_interleave"
    GROUPED_BY_DIFFICULTY = "grouped_by_difficulty"
    DUE_PRIORITY = "due_priority"

    @classmethod
    def parse(cls, value: "OrderingPolicy | str") -> "OrderingPolicy":
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise ConfigurationError(f"Unknown ordering policy: {value!r}") from None


class PriorityBucket(Enum):
    """Learning priority of a word in the interleaved ordering"""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


def days_since(moment: datetime | None, now: datetime) -> int:
    """Whole days elapsed since a moment, 0 if it never happened"""
    if moment is None:
        return 0
    return (now - moment).days


def classify_priority(
    word: Word,
    now: datetime,
    accuracy_threshold: float = PRIORITY_ACCURACY_THRESHOLD,
    overdue_days: int = OVERDUE_PRIORITY_DAYS,
) -> PriorityBucket:
    """Place a word into the High, Medium or Low bucket"""
    elapsed = days_since(word.last_reviewed, now)
    overdue = word.next_review < now
    low_accuracy = word.review_count > 0 and word.correct_count / word.review_count < accuracy_threshold

    if word.difficulty == Difficulty.FAILED or low_accuracy or (overdue and elapsed > overdue_days):
        return PriorityBucket.HIGH
    if word.difficulty == Difficulty.LEARNING or (overdue and elapsed <= overdue_days):
        return PriorityBucket.MEDIUM
    return PriorityBucket.LOW


class WeightedBucketSampler:
    """
    Interleaves three pre-shuffled buckets into one sequence

    At every output position the sampler prefers High with
    ``high_probability`` while the position is inside the first
    ``high_window`` share of the sequence, and always takes High for the very
    first High pick or once Medium and Low are empty. Otherwise it prefers
    Medium with ``medium_probability`` (or when High and Low are empty), then
    Low, and finally falls through to whichever bucket still has words.

    Every input word is emitted exactly once.
    """

    def __init__(
        self,
        rng: random.Random | None = None,
        high_probability: float = 0.4,
        high_window: float = 0.7,
        medium_probability: float = 0.5,
    ):
        self.rng = rng or random.Random()
        self.high_probability = high_probability
        self.high_window = high_window
        self.medium_probability = medium_probability

    def interleave(self, high: Sequence, medium: Sequence, low: Sequence) -> list:
        result = []
        total = len(high) + len(medium) + len(low)
        hi = mi = lo = 0

        for i in range(total):
            position = i / total
            high_left = hi < len(high)
            medium_left = mi < len(medium)
            low_left = lo < len(low)

            if high_left and (
                (position < self.high_window and self.rng.random() < self.high_probability)
                or hi == 0
                or (not medium_left and not low_left)
            ):
                result.append(high[hi])
                hi += 1
            elif medium_left and (
                self.rng.random() < self.medium_probability or (not high_left and not low_left)
            ):
                result.append(medium[mi])
                mi += 1
            elif low_left:
                result.append(low[lo])
                lo += 1
            elif high_left:
                result.append(high[hi])
                hi += 1
            else:
                result.append(medium[mi])
                mi += 1

        return result


class StudyOrderComposer:
    """Orders candidate words according to an OrderingPolicy"""

    def __init__(
        self,
        rng: random.Random | None = None,
        accuracy_threshold: float = PRIORITY_ACCURACY_THRESHOLD,
        overdue_days: int = OVERDUE_PRIORITY_DAYS,
        small_set_size: int = SMALL_SET_SIZE,
    ):
        self.rng = rng or random.Random()
        self.accuracy_threshold = accuracy_threshold
        self.overdue_days = overdue_days
        self.small_set_size = small_set_size
        self.sampler = WeightedBucketSampler(self.rng)

    def compose(
        self,
        candidates: Sequence[Word],
        now: datetime | None = None,
        limit: int | None = DEFAULT_LIMIT,
        policy: OrderingPolicy | str = OrderingPolicy.PRIORITY_INTERLEAVE,
    ) -> list[Word]:
        """
        Order candidates and take the first ``limit`` words

        Args:
            candidates: Words returned by the selector
            now: Reference time for overdue checks (defaults to now)
            limit: Maximum session length, None for no truncation
            policy: Ordering policy to apply

        Returns:
            Ordered words, at most ``limit`` long
        """
        if now is None:
            now = datetime.now()
        policy = OrderingPolicy.parse(policy)

        if policy == OrderingPolicy.DUE_DATE:
            ordered = self.sort_by_due_date(candidates)
        elif policy == OrderingPolicy.PRIORITY_INTERLEAVE:
            ordered = self.priority_interleave(candidates, now)
        elif policy == OrderingPolicy.GROUPED_BY_DIFFICULTY:
            ordered = self.grouped_by_difficulty(candidates)
        else:
            ordered = self.sort_by_due_priority(candidates)

        if limit is not None:
            ordered = ordered[:limit]

        logger.debug(f"Composed {len(ordered)} of {len(candidates)} words with {policy.value}")
        return ordered

    def sort_by_due_date(self, candidates: Sequence[Word]) -> list[Word]:
        """Earliest next_review first; ties keep input order"""
        return sorted(candidates, key=lambda word: word.next_review)

    def sort_by_due_priority(self, candidates: Sequence[Word]) -> list[Word]:
        """By difficulty rank, then least recently reviewed first"""
        return sorted(
            candidates,
            key=lambda word: (
                DUE_PRIORITY_RANK[word.difficulty],
                word.last_reviewed is not None,
                word.last_reviewed or datetime.min,
            ),
        )

    def shuffle(self, words: Sequence[Word]) -> list[Word]:
        shuffled = list(words)
        self.rng.shuffle(shuffled)
        return shuffled

    def bucketize(self, candidates: Sequence[Word], now: datetime) -> dict[PriorityBucket, list[Word]]:
        buckets = {bucket: [] for bucket in PriorityBucket}
        for word in candidates:
            bucket = classify_priority(word, now, self.accuracy_threshold, self.overdue_days)
            buckets[bucket].append(word)
        return buckets

    def priority_interleave(self, candidates: Sequence[Word], now: datetime) -> list[Word]:
        """Shuffle within priority buckets and interleave, weak words skewed early"""
        if not candidates:
            return []

        buckets = self.bucketize(candidates, now)
        high = self.shuffle(buckets[PriorityBucket.HIGH])
        medium = self.shuffle(buckets[PriorityBucket.MEDIUM])
        low = self.shuffle(buckets[PriorityBucket.LOW])

        if len(candidates) <= self.small_set_size:
            return self.shuffle(high + medium + low)

        return self.sampler.interleave(high, medium, low)

    def grouped_by_difficulty(self, candidates: Sequence[Word]) -> list[Word]:
        """Shuffle within each difficulty, groups in fixed order"""
        groups = {difficulty: [] for difficulty in DIFFICULTY_GROUP_ORDER}
        for word in candidates:
            groups[word.difficulty].append(word)

        ordered = []
        for difficulty in DIFFICULTY_GROUP_ORDER:
            ordered.extend(self.shuffle(groups[difficulty]))
        return ordered


def compose_order(
    candidates: Sequence[Word],
    now: datetime | None = None,
    limit: int | None = DEFAULT_LIMIT,
    policy: OrderingPolicy | str = OrderingPolicy.PRIORITY_INTERLEAVE,
    rng: random.Random | None = None,
) -> list[Word]:
    """Convenience function to order candidates with default thresholds"""
    return StudyOrderComposer(rng).compose(candidates, now, limit, policy)
