"""
Study set selection: which words are eligible for a session
"""

import logging
from collections.abc import Collection, Iterable
from datetime import datetime

from ..errors import InvalidConfigError
from ..models import Difficulty, StudyConfig, StudyType, Word

logger = logging.getLogger(__name__)

FAILED_ACCURACY_THRESHOLD = 0.5

STUDY_TYPE_DESCRIPTIONS = {
    StudyType.ALL: "All words in the collection",
    StudyType.NEW: "Words you haven't studied yet",
    StudyType.LEARNING: "Words you're currently learning",
    StudyType.REVIEW: "Words due for review",
    StudyType.MASTERED: "Words you've mastered",
    StudyType.FAILED: "Words with low accuracy rates",
}


def get_study_type_description(study_type: StudyType | str) -> str:
    """Human readable label for a study type"""
    return STUDY_TYPE_DESCRIPTIONS[StudyType.parse(study_type)]


def is_failed(word: Word, threshold: float = FAILED_ACCURACY_THRESHOLD) -> bool:
    """Answered at least once with accuracy below the threshold"""
    return word.review_count > 0 and word.correct_count / word.review_count < threshold


def is_due(word: Word, now: datetime) -> bool:
    """Due for the quick-study queue: scheduled in the past or never reviewed"""
    return word.next_review <= now or word.last_reviewed is None


def filter_by_folder(words: Iterable[Word], folder_id) -> list[Word]:
    """
    Restrict words to a folder

    Folder practice excludes mastered words. Without a folder every word
    is kept, mastered ones included.
    """
    if folder_id is None:
        return list(words)
    return [
        word
        for word in words
        if folder_id in word.folders and word.difficulty != Difficulty.MASTERED
    ]


def matches_study_type(
    word: Word,
    study_type: StudyType,
    now: datetime,
    failed_threshold: float = FAILED_ACCURACY_THRESHOLD,
) -> bool:
    """Check a single word against a study type filter"""
    if study_type == StudyType.ALL:
        return True
    if study_type == StudyType.REVIEW:
        return word.next_review <= now
    if study_type == StudyType.NEW:
        return word.difficulty == Difficulty.NEW
    if study_type == StudyType.LEARNING:
        return word.difficulty == Difficulty.LEARNING
    if study_type == StudyType.MASTERED:
        return word.difficulty == Difficulty.MASTERED
    if study_type == StudyType.FAILED:
        return is_failed(word, failed_threshold)
    raise InvalidConfigError(f"Unknown study type: {study_type!r}")


def validate_config(config: StudyConfig, known_folder_ids: Collection | None = None) -> None:
    """Raise InvalidConfigError if the config cannot be used"""
    if not isinstance(config.study_type, StudyType):
        StudyType.parse(config.study_type)
    if (
        config.folder_id is not None
        and known_folder_ids is not None
        and config.folder_id not in known_folder_ids
    ):
        raise InvalidConfigError(f"Unknown folder: {config.folder_id!r}")


def select_candidates(
    words: Iterable[Word],
    config: StudyConfig,
    now: datetime | None = None,
    known_folder_ids: Collection | None = None,
    failed_threshold: float = FAILED_ACCURACY_THRESHOLD,
) -> list[Word]:
    """
    Select the words eligible for a study session

    Args:
        words: Full word collection of the user
        config: Study scope and type
        now: Reference time for due checks (defaults to now)
        known_folder_ids: Existing folder ids, used to reject unknown folders
        failed_threshold: Accuracy below which an answered word counts as failed

    Returns:
        Matching words in their input order, without duplicates. No limit
        is applied here.
    """
    if now is None:
        now = datetime.now()

    validate_config(config, known_folder_ids)
    study_type = StudyType.parse(config.study_type)

    scoped = filter_by_folder(words, config.folder_id)

    seen = set()
    candidates = []
    for word in scoped:
        if word.id in seen:
            continue
        if matches_study_type(word, study_type, now, failed_threshold):
            seen.add(word.id)
            candidates.append(word)

    logger.debug(
        f"Selected {len(candidates)} candidates for study_type={study_type.value}, "
        f"folder={config.folder_id}"
    )
    return candidates


def select_due_words(words: Iterable[Word], now: datetime | None = None) -> list[Word]:
    """Select words for quick study: due for review or never reviewed"""
    if now is None:
        now = datetime.now()

    seen = set()
    due = []
    for word in words:
        if word.id not in seen and is_due(word, now):
            seen.add(word.id)
            due.append(word)
    return due
