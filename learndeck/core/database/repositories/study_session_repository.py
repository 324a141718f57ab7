"""
Study session repository: session history and recently used study options
"""

import logging
import sqlite3
from datetime import datetime

from ...models import RecentStudyOption, StudySessionRecord, StudyType
from ..connection import DatabaseConnection

logger = logging.getLogger(__name__)


class StudySessionRepository:
    """Repository for study session history"""

    def __init__(self, db_connection: DatabaseConnection):
        self.db_connection = db_connection

    def create_study_session(
        self,
        user_id: int,
        folder_id: int | None,
        study_type: StudyType,
        started_at: datetime | None = None,
    ) -> StudySessionRecord | None:
        """Record the start of a study session"""
        started_at = started_at or datetime.now()
        try:
            with self.db_connection.get_connection() as conn:
                cursor = conn.execute(
                    """
                    INSERT INTO study_sessions (user_id, folder_id, study_type, started_at)
                    VALUES (?, ?, ?, ?)
                    """,
                    (user_id, folder_id, study_type.value, started_at),
                )
                conn.commit()
                return StudySessionRecord(
                    id=cursor.lastrowid,
                    user_id=user_id,
                    folder_id=folder_id,
                    study_type=study_type,
                    started_at=started_at,
                )
        except Exception as e:
            logger.error(f"Error creating study session: {e}")
            return None

    def complete_study_session(
        self,
        session_id: int,
        words_studied: int,
        correct_answers: int,
        total_time_minutes: float,
        completed_at: datetime | None = None,
    ) -> bool:
        """Store the final statistics of a study session"""
        try:
            with self.db_connection.get_connection() as conn:
                cursor = conn.execute(
                    """
                    UPDATE study_sessions
                    SET words_studied = ?,
                        correct_answers = ?,
                        total_time_minutes = ?,
                        completed_at = ?
                    WHERE id = ?
                    """,
                    (
                        words_studied,
                        correct_answers,
                        total_time_minutes,
                        completed_at or datetime.now(),
                        session_id,
                    ),
                )
                conn.commit()
                return cursor.rowcount > 0
        except Exception as e:
            logger.error(f"Error completing study session {session_id}: {e}")
            return False

    def get_study_history(self, user_id: int, limit: int = 20) -> list[StudySessionRecord]:
        """Get completed sessions, most recent first"""
        try:
            with self.db_connection.get_connection() as conn:
                rows = conn.execute(
                    """
                    SELECT * FROM study_sessions
                    WHERE user_id = ? AND completed_at IS NOT NULL
                    ORDER BY completed_at DESC, id DESC
                    LIMIT ?
                    """,
                    (user_id, limit),
                ).fetchall()
                return [self._row_to_record(row) for row in rows]
        except Exception as e:
            logger.error(f"Error getting study history: {e}")
            return []

    def save_study_option(
        self,
        user_id: int,
        folder_id: int | None,
        study_type: StudyType,
        used_at: datetime | None = None,
    ) -> bool:
        """Bump the use count of a folder/study type combination"""
        used_at = used_at or datetime.now()
        try:
            with self.db_connection.get_connection() as conn:
                existing = conn.execute(
                    """
                    SELECT id FROM recent_study_options
                    WHERE user_id = ? AND folder_id IS ? AND study_type = ?
                    """,
                    (user_id, folder_id, study_type.value),
                ).fetchone()

                if existing:
                    conn.execute(
                        """
                        UPDATE recent_study_options
                        SET use_count = use_count + 1, last_used_at = ?
                        WHERE id = ?
                        """,
                        (used_at, existing["id"]),
                    )
                else:
                    conn.execute(
                        """
                        INSERT INTO recent_study_options
                            (user_id, folder_id, study_type, use_count, last_used_at)
                        VALUES (?, ?, ?, 1, ?)
                        """,
                        (user_id, folder_id, study_type.value, used_at),
                    )
                conn.commit()
                return True
        except Exception as e:
            logger.error(f"Error saving study option: {e}")
            return False

    def get_recent_study_options(self, user_id: int) -> list[RecentStudyOption]:
        """
        Recently used options aggregated per folder

        Use counts of all study types in a folder are summed; the study type
        of the most recent use is kept. Newest first.
        """
        try:
            with self.db_connection.get_connection() as conn:
                rows = conn.execute(
                    """
                    SELECT folder_id, study_type, use_count, last_used_at
                    FROM recent_study_options
                    WHERE user_id = ?
                    ORDER BY last_used_at DESC
                    """,
                    (user_id,),
                ).fetchall()
        except Exception as e:
            logger.error(f"Error getting recent study options: {e}")
            return []

        aggregated: dict[int | None, RecentStudyOption] = {}
        for row in rows:
            option = aggregated.get(row["folder_id"])
            if option is None:
                aggregated[row["folder_id"]] = RecentStudyOption(
                    folder_id=row["folder_id"],
                    study_type=StudyType.parse(row["study_type"]),
                    use_count=row["use_count"],
                    last_used_at=row["last_used_at"],
                )
                continue

            option.use_count += row["use_count"]
            if row["last_used_at"] > option.last_used_at:
                option.last_used_at = row["last_used_at"]
                option.study_type = StudyType.parse(row["study_type"])

        return sorted(aggregated.values(), key=lambda option: option.last_used_at, reverse=True)

    def _row_to_record(self, row: sqlite3.Row) -> StudySessionRecord:
        return StudySessionRecord(
            id=row["id"],
            user_id=row["user_id"],
            folder_id=row["folder_id"],
            study_type=StudyType.parse(row["study_type"]),
            words_studied=row["words_studied"],
            correct_answers=row["correct_answers"],
            total_time_minutes=row["total_time_minutes"],
            started_at=row["started_at"],
            completed_at=row["completed_at"],
        )
