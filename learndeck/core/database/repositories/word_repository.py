"""
Word repository for database operations
"""

import logging
import sqlite3
from collections.abc import Iterable
from datetime import datetime, timedelta
from typing import Any

from ...errors import ConfigurationError
from ...models import Difficulty, Word
from ..connection import DatabaseConnection

logger = logging.getLogger(__name__)

# New words become due one day after they are added
NEW_WORD_DELAY = timedelta(days=1)


class WordRepository:
    """Repository for word-related database operations"""

    def __init__(self, db_connection: DatabaseConnection):
        self.db_connection = db_connection

    def add_word(
        self,
        user_id: int,
        word: str,
        definition: str,
        article: str | None = None,
        folder_ids: Iterable[int] = (),
        created_at: datetime | None = None,
    ) -> Word | None:
        """Create a new word in the "new" state"""
        created_at = created_at or datetime.now()
        try:
            with self.db_connection.get_connection() as conn:
                word_id = self._insert_word(conn, user_id, word, definition, article, created_at)
                self._assign_folders(conn, word_id, folder_ids, created_at)
                conn.commit()
        except Exception as e:
            logger.error(f"Error adding word '{word}': {e}")
            return None

        return self.get_word_by_id(word_id)

    def add_words(
        self,
        user_id: int,
        entries: Iterable[dict[str, Any]],
        folder_ids: Iterable[int] = (),
    ) -> int:
        """
        Add words from {word, definition, article?} entries

        Entries without a word or definition, and words the user already
        has, are skipped.
        """
        folder_ids = list(folder_ids)
        created_at = datetime.now()
        added_count = 0
        try:
            with self.db_connection.get_connection() as conn:
                existing = {
                    row["word"].lower()
                    for row in conn.execute("SELECT word FROM words WHERE user_id = ?", (user_id,))
                }
                for entry in entries:
                    word = (entry.get("word") or "").strip()
                    definition = (entry.get("definition") or "").strip()
                    if not word or not definition:
                        logger.warning(f"Skipping incomplete entry: {entry}")
                        continue
                    if word.lower() in existing:
                        logger.debug(f"Word '{word}' already exists for user {user_id}")
                        continue

                    word_id = self._insert_word(
                        conn, user_id, word, definition, entry.get("article"), created_at
                    )
                    self._assign_folders(conn, word_id, folder_ids, created_at)
                    existing.add(word.lower())
                    added_count += 1

                conn.commit()
        except Exception as e:
            logger.error(f"Error adding words for user {user_id}: {e}")
            return 0

        logger.info(f"Added {added_count} words for user {user_id}")
        return added_count

    def get_word_by_id(self, word_id: int) -> Word | None:
        """Get word by ID"""
        try:
            with self.db_connection.get_connection() as conn:
                row = conn.execute("SELECT * FROM words WHERE id = ?", (word_id,)).fetchone()
                if not row:
                    return None
                folders = self._load_folder_ids(conn, [word_id])
                return self._row_to_word(row, folders.get(word_id, ()))
        except Exception as e:
            logger.error(f"Error getting word by ID: {e}")
            return None

    def get_words(self, user_id: int) -> list[Word]:
        """Get all words of a user with their folder membership"""
        try:
            with self.db_connection.get_connection() as conn:
                rows = conn.execute(
                    "SELECT * FROM words WHERE user_id = ? ORDER BY created_at DESC, id DESC",
                    (user_id,),
                ).fetchall()
                folders = self._load_folder_ids(conn, [row["id"] for row in rows])
        except Exception as e:
            logger.error(f"Error getting words for user {user_id}: {e}")
            return []

        words = []
        for row in rows:
            try:
                words.append(self._row_to_word(row, folders.get(row["id"], ())))
            except ConfigurationError as e:
                logger.warning(f"Skipping word {row['id']}: {e}")
        return words

    def delete_word(self, word_id: int) -> bool:
        """Delete a word and its folder assignments"""
        try:
            with self.db_connection.get_connection() as conn:
                cursor = conn.execute("DELETE FROM words WHERE id = ?", (word_id,))
                conn.commit()
                return cursor.rowcount > 0
        except Exception as e:
            logger.error(f"Error deleting word {word_id}: {e}")
            return False

    def assign_word_to_folder(self, word_id: int, folder_id: int) -> bool:
        """Add a word to a folder"""
        try:
            with self.db_connection.get_connection() as conn:
                self._assign_folders(conn, word_id, [folder_id], datetime.now())
                conn.commit()
                return True
        except Exception as e:
            logger.error(f"Error assigning word {word_id} to folder {folder_id}: {e}")
            return False

    def _insert_word(
        self,
        conn: sqlite3.Connection,
        user_id: int,
        word: str,
        definition: str,
        article: str | None,
        created_at: datetime,
    ) -> int:
        cursor = conn.execute(
            """
            INSERT INTO words (
                user_id, word, definition, article, difficulty,
                review_count, correct_count, last_reviewed, next_review, created_at
            )
            VALUES (?, ?, ?, ?, ?, 0, 0, NULL, ?, ?)
            """,
            (
                user_id,
                word,
                definition,
                article or None,
                Difficulty.NEW.value,
                created_at + NEW_WORD_DELAY,
                created_at,
            ),
        )
        return cursor.lastrowid

    def _assign_folders(
        self,
        conn: sqlite3.Connection,
        word_id: int,
        folder_ids: Iterable[int],
        created_at: datetime,
    ) -> None:
        for folder_id in folder_ids:
            conn.execute(
                """
                INSERT OR IGNORE INTO word_folders (word_id, folder_id, created_at)
                VALUES (?, ?, ?)
                """,
                (word_id, folder_id, created_at),
            )

    def _load_folder_ids(
        self, conn: sqlite3.Connection, word_ids: list[int]
    ) -> dict[int, set[int]]:
        if not word_ids:
            return {}
        placeholders = ",".join("?" for _ in word_ids)
        cursor = conn.execute(
            f"SELECT word_id, folder_id FROM word_folders WHERE word_id IN ({placeholders})",  # noqa: S608  # Safe: placeholders contains only ? chars
            word_ids,
        )
        folders: dict[int, set[int]] = {}
        for row in cursor.fetchall():
            folders.setdefault(row["word_id"], set()).add(row["folder_id"])
        return folders

    def _row_to_word(self, row: sqlite3.Row, folder_ids: Iterable[int]) -> Word:
        return Word(
            id=row["id"],
            word=row["word"],
            definition=row["definition"],
            article=row["article"],
            difficulty=Difficulty.parse(row["difficulty"]),
            review_count=row["review_count"],
            correct_count=row["correct_count"],
            last_reviewed=row["last_reviewed"],
            next_review=row["next_review"],
            folders=frozenset(folder_ids),
            created_at=row["created_at"],
        )
