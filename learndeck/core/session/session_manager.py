"""
Session management for LearnDeck study sessions
"""

import logging
import random
from collections.abc import Collection, Sequence
from dataclasses import replace
from datetime import datetime
from enum import Enum

from ...config import Settings, get_settings
from ...spaced_repetition import SpacedRepetitionSystem, get_srs_system
from ...utils import Timer
from ..database.database_manager import DatabaseManager
from ..database.models import WordStore
from ..errors import PersistFailureError, SessionStateError
from ..models import ReviewResult, SessionStats, StudyConfig, Word
from ..study.ordering import OrderingPolicy, StudyOrderComposer
from ..study.selection import select_candidates

logger = logging.getLogger(__name__)


class SessionState(Enum):
    """Lifecycle states of a study session"""
    LOADING = "loading"
    IN_PROGRESS = "in_progress"
    COMPLETE = "complete"
    EMPTY = "empty"


class StudySession:
    """
    A single-pass study session over an ordered word sequence

    Each answer is persisted through the word store before the session
    advances. A word is shown once; wrong answers are not repeated.
    """

    def __init__(
        self,
        session_id: str,
        user_id: int,
        store: WordStore,
        srs_system: SpacedRepetitionSystem | None = None,
        composer: StudyOrderComposer | None = None,
        policy: OrderingPolicy | str = OrderingPolicy.PRIORITY_INTERLEAVE,
        limit: int | None = 20,
        failed_threshold: float = 0.5,
        persist_retry_attempts: int = 1,
    ):
        self.session_id = session_id
        self.user_id = user_id
        self.store = store
        self.srs_system = srs_system or get_srs_system()
        self.composer = composer or StudyOrderComposer()
        self.policy = OrderingPolicy.parse(policy)
        self.limit = limit
        self.failed_threshold = failed_threshold
        self.persist_retry_attempts = persist_retry_attempts

        self.state = SessionState.LOADING
        self.config: StudyConfig | None = None
        self.record_id: int | None = None
        self.words: list[Word] = []
        self.current_word_index = 0
        self._stats = SessionStats()
        self.timer = Timer()
        self.created_at = datetime.now()

    def start(
        self,
        words: Sequence[Word],
        config: StudyConfig,
        now: datetime | None = None,
        known_folder_ids: Collection | None = None,
    ) -> SessionState:
        """Select and order the session's words"""
        if self.state != SessionState.LOADING:
            raise SessionStateError(f"Session {self.session_id} already started ({self.state.value})")

        if now is None:
            now = datetime.now()

        candidates = select_candidates(
            words,
            config,
            now,
            known_folder_ids=known_folder_ids,
            failed_threshold=self.failed_threshold,
        )
        limit = config.word_count or self.limit
        self.config = config
        self.words = self.composer.compose(candidates, now, limit, self.policy)
        self.current_word_index = 0
        self._stats = SessionStats()

        if not self.words:
            self.state = SessionState.EMPTY
            logger.info(
                f"Session {self.session_id}: nothing to study "
                f"(type={config.study_type.value}, folder={config.folder_id})"
            )
        else:
            self.state = SessionState.IN_PROGRESS
            self.timer.start()
            logger.info(
                f"Session {self.session_id} started with {len(self.words)} words "
                f"(type={config.study_type.value}, policy={self.policy.value})"
            )

        return self.state

    def get_current_word(self) -> Word | None:
        """Get the current word being studied"""
        if self.state == SessionState.IN_PROGRESS:
            return self.words[self.current_word_index]
        return None

    def answer(self, is_correct: bool, now: datetime | None = None) -> ReviewResult:
        """
        Record an answer for the current word

        Raises:
            SessionStateError: If the session is not in progress
            PersistFailureError: If the store write failed after retrying;
                the session stays on the same word
        """
        if self.state != SessionState.IN_PROGRESS:
            raise SessionStateError(
                f"Cannot answer in session {self.session_id}: state is {self.state.value}"
            )

        word = self.words[self.current_word_index]
        result = self.srs_system.review_word(word, is_correct, now)

        self._persist(word, result)

        self.words[self.current_word_index] = replace(
            word,
            difficulty=result.difficulty,
            next_review=result.next_review,
            last_reviewed=result.last_reviewed,
            review_count=result.review_count,
            correct_count=result.correct_count,
        )
        self._stats.record(is_correct)

        if self.current_word_index >= len(self.words) - 1:
            self.state = SessionState.COMPLETE
            self.timer.stop()
            logger.info(
                f"Session {self.session_id} complete: "
                f"{self._stats.correct}/{self._stats.total} correct"
            )
        else:
            self.current_word_index += 1

        return result

    def _persist(self, word: Word, result: ReviewResult) -> None:
        """Write the answer to the store, retrying before giving up"""
        attempts = 1 + self.persist_retry_attempts
        last_error = None

        for attempt in range(1, attempts + 1):
            try:
                if self.store.update_word_progress(word.id, result):
                    return
                logger.warning(
                    f"Store rejected progress for word {word.id} (attempt {attempt}/{attempts})"
                )
            except Exception as e:
                last_error = e
                logger.warning(
                    f"Attempt {attempt}/{attempts} to persist word {word.id} failed: {e}"
                )

        logger.error(f"Giving up on persisting word {word.id} in session {self.session_id}")
        raise PersistFailureError(word.id, attempts) from last_error

    def is_complete(self) -> bool:
        return self.state == SessionState.COMPLETE

    def is_empty(self) -> bool:
        return self.state == SessionState.EMPTY

    def is_finished(self) -> bool:
        """Check if there is nothing left to answer"""
        return self.state in (SessionState.COMPLETE, SessionState.EMPTY)

    def stats(self) -> SessionStats:
        return self._stats

    @property
    def accuracy(self) -> float:
        return self._stats.accuracy

    @property
    def progress(self) -> float:
        """Share of words answered so far"""
        if not self.words:
            return 0.0
        return self._stats.total / len(self.words)


class SessionManager:
    """Manages user study sessions"""

    def __init__(
        self,
        db_manager: DatabaseManager,
        srs_system: SpacedRepetitionSystem | None = None,
        settings: Settings | None = None,
    ):
        self.db_manager = db_manager
        self.srs_system = srs_system or get_srs_system()
        self.settings = settings or get_settings()
        self.user_sessions: dict[int, StudySession] = {}

    def start_study_session(
        self,
        user_id: int,
        config: StudyConfig,
        policy: OrderingPolicy | str | None = None,
        now: datetime | None = None,
        rng: random.Random | None = None,
    ) -> StudySession:
        """Load the user's words and start a new study session"""
        words = self.db_manager.get_words(user_id)
        folder_ids = {folder.id for folder in self.db_manager.get_folders(user_id)}

        # Use only last 6 digits of timestamp for uniqueness while staying compact
        timestamp = int(datetime.now().timestamp())
        session_id = f"{user_id}_{timestamp % 1000000}"

        composer = StudyOrderComposer(
            rng,
            accuracy_threshold=self.settings.priority_accuracy_threshold,
            overdue_days=self.settings.overdue_priority_days,
            small_set_size=self.settings.small_session_size,
        )
        session = StudySession(
            session_id,
            user_id,
            self.db_manager,
            srs_system=self.srs_system,
            composer=composer,
            policy=policy or self.settings.default_ordering_policy,
            limit=self.settings.default_session_limit,
            failed_threshold=self.settings.failed_accuracy_threshold,
            persist_retry_attempts=self.settings.persist_retry_attempts,
        )
        session.start(words, config, now, known_folder_ids=folder_ids)

        previous = self.user_sessions.get(user_id)
        if previous is not None:
            logger.info(f"Closing unfinished session {previous.session_id} for user {user_id}")
            self.finish_session(user_id)

        if session.is_empty():
            return session

        record = self.db_manager.create_study_session(
            user_id, config.folder_id, config.study_type
        )
        if record:
            session.record_id = record.id
        self.db_manager.save_study_option(user_id, config.folder_id, config.study_type)

        self.user_sessions[user_id] = session
        return session

    def submit_answer(
        self, user_id: int, is_correct: bool, now: datetime | None = None
    ) -> ReviewResult:
        """Answer the current word of the user's active session"""
        session = self.user_sessions.get(user_id)
        if not session:
            raise SessionStateError(f"No active study session for user {user_id}")

        result = session.answer(is_correct, now)

        if session.is_complete():
            self._finish_session(session)

        return result

    def finish_session(self, user_id: int) -> SessionStats | None:
        """End the user's session early, keeping the answers given so far"""
        session = self.user_sessions.get(user_id)
        if not session:
            return None
        session.timer.stop()
        self._finish_session(session)
        return session.stats()

    def _finish_session(self, session: StudySession) -> None:
        """Store the final statistics and drop the session"""
        stats = session.stats()
        if session.record_id is not None:
            self.db_manager.complete_study_session(
                session.record_id,
                words_studied=stats.total,
                correct_answers=stats.correct,
                total_time_minutes=round(session.timer.get_elapsed_time() / 60, 2),
            )
            session.record_id = None

        if self.user_sessions.get(session.user_id) is session:
            del self.user_sessions[session.user_id]

    def get_session(self, user_id: int) -> StudySession | None:
        """Get active session for user"""
        return self.user_sessions.get(user_id)

    def cleanup_expired_sessions(self, max_age_hours: int | None = None):
        """Close sessions older than the timeout, recording their answers"""
        if max_age_hours is None:
            max_age_hours = self.settings.session_timeout_hours
        current_time = datetime.now()
        expired_sessions = []

        for user_id, session in self.user_sessions.items():
            age = (current_time - session.created_at).total_seconds() / 3600
            if age > max_age_hours:
                expired_sessions.append(user_id)

        for user_id in expired_sessions:
            self.finish_session(user_id)
            logger.info(f"Cleaned up expired session for user {user_id}")
