"""
Unified database manager that coordinates all repositories
"""

import logging
from collections.abc import Iterable
from datetime import datetime
from typing import Any

from ..models import Folder, RecentStudyOption, ReviewResult, StudySessionRecord, StudyType, Word
from .connection import DatabaseConnection
from .models import UserStats
from .repositories.folder_repository import FolderRepository
from .repositories.progress_repository import ProgressRepository
from .repositories.study_session_repository import StudySessionRepository
from .repositories.word_repository import WordRepository

logger = logging.getLogger(__name__)


class DatabaseManager:
    """SQLite word store coordinating all repositories"""

    def __init__(self, db_path: str | None = None):
        self.db_connection = DatabaseConnection(db_path)
        self.word_repo = WordRepository(self.db_connection)
        self.folder_repo = FolderRepository(self.db_connection)
        self.progress_repo = ProgressRepository(self.db_connection)
        self.session_repo = StudySessionRepository(self.db_connection)

    def init_database(self) -> None:
        """Initialize database tables and indexes"""
        self.db_connection.init_database()

    # Word methods
    def add_word(
        self,
        user_id: int,
        word: str,
        definition: str,
        article: str | None = None,
        folder_ids: Iterable[int] = (),
    ) -> Word | None:
        """Add a single word"""
        return self.word_repo.add_word(user_id, word, definition, article, folder_ids)

    def add_words(
        self,
        user_id: int,
        entries: Iterable[dict[str, Any]],
        folder_ids: Iterable[int] = (),
    ) -> int:
        """Add {word, definition, article?} entries and return how many were new"""
        return self.word_repo.add_words(user_id, entries, folder_ids)

    def get_word_by_id(self, word_id: int) -> Word | None:
        """Get word by ID"""
        return self.word_repo.get_word_by_id(word_id)

    def get_words(self, user_id: int) -> list[Word]:
        """Get the full word collection of a user"""
        return self.word_repo.get_words(user_id)

    def delete_word(self, word_id: int) -> bool:
        return self.word_repo.delete_word(word_id)

    # Folder methods
    def create_folder(self, user_id: int, name: str, color: str = "#3B82F6") -> Folder | None:
        return self.folder_repo.create_folder(user_id, name, color)

    def get_folders(self, user_id: int) -> list[Folder]:
        return self.folder_repo.get_folders(user_id)

    def get_folder_by_name(self, user_id: int, name: str) -> Folder | None:
        return self.folder_repo.get_folder_by_name(user_id, name)

    def delete_folder(self, folder_id: int) -> bool:
        """Delete a folder; its words stay in the collection"""
        return self.folder_repo.delete_folder(folder_id)

    def assign_word_to_folder(self, word_id: int, folder_id: int) -> bool:
        return self.word_repo.assign_word_to_folder(word_id, folder_id)

    # Progress methods
    def update_word_progress(self, word_id: int, result: ReviewResult) -> bool:
        """Write the outcome of an answer"""
        return self.progress_repo.update_word_progress(word_id, result)

    def reset_word_progress(self, word_id: int) -> bool:
        return self.progress_repo.reset_word_progress(word_id)

    def get_user_stats(self, user_id: int, now: datetime | None = None) -> UserStats:
        """Get comprehensive user statistics"""
        return self.progress_repo.get_user_stats(user_id, now)

    # Study session methods
    def create_study_session(
        self, user_id: int, folder_id: int | None, study_type: StudyType
    ) -> StudySessionRecord | None:
        return self.session_repo.create_study_session(user_id, folder_id, study_type)

    def complete_study_session(
        self,
        session_id: int,
        words_studied: int,
        correct_answers: int,
        total_time_minutes: float,
    ) -> bool:
        return self.session_repo.complete_study_session(
            session_id, words_studied, correct_answers, total_time_minutes
        )

    def get_study_history(self, user_id: int, limit: int = 20) -> list[StudySessionRecord]:
        return self.session_repo.get_study_history(user_id, limit)

    def save_study_option(
        self, user_id: int, folder_id: int | None, study_type: StudyType
    ) -> bool:
        return self.session_repo.save_study_option(user_id, folder_id, study_type)

    def get_recent_study_options(self, user_id: int) -> list[RecentStudyOption]:
        return self.session_repo.get_recent_study_options(user_id)

    def get_connection(self):
        """Get database connection for direct SQL access in tests"""
        return self.db_connection.get_connection()

