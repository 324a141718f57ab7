"""
Statistics model and the word store protocol
"""

from typing import Any, Protocol, TypedDict

from ..models import Folder, ReviewResult, Word


class UserStats(TypedDict):
    """User progress statistics"""
    total_words: int
    new_words: int
    learning_words: int
    review_words: int
    mastered_words: int
    failed_words: int
    due_words: int
    total_reviews: int
    total_correct: int
    average_accuracy: float
    mastery_rate: float


class WordStore(Protocol):
    """What the study core needs from the external word store"""

    def get_words(self, user_id: Any) -> list[Word]:
        ...

    def get_folders(self, user_id: Any) -> list[Folder]:
        ...

    def update_word_progress(self, word_id: Any, result: ReviewResult) -> bool:
        ...
