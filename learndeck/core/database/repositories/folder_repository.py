"""
Folder repository for database operations
"""

import logging
import sqlite3
from datetime import datetime

from ...models import Folder
from ..connection import DatabaseConnection

logger = logging.getLogger(__name__)


class FolderRepository:
    """Repository for folder-related database operations"""

    def __init__(self, db_connection: DatabaseConnection):
        self.db_connection = db_connection

    def create_folder(self, user_id: int, name: str, color: str = "#3B82F6") -> Folder | None:
        """Create a new folder"""
        now = datetime.now()
        try:
            with self.db_connection.get_connection() as conn:
                cursor = conn.execute(
                    """
                    INSERT INTO folders (user_id, name, color, created_at, updated_at)
                    VALUES (?, ?, ?, ?, ?)
                    """,
                    (user_id, name, color, now, now),
                )
                conn.commit()
                return Folder(id=cursor.lastrowid, name=name, color=color, created_at=now)
        except sqlite3.IntegrityError:
            logger.warning(f"Folder '{name}' already exists for user {user_id}")
            return self.get_folder_by_name(user_id, name)
        except Exception as e:
            logger.error(f"Error creating folder: {e}")
            return None

    def get_folder_by_name(self, user_id: int, name: str) -> Folder | None:
        """Get folder by name"""
        try:
            with self.db_connection.get_connection() as conn:
                row = conn.execute(
                    "SELECT * FROM folders WHERE user_id = ? AND name = ?",
                    (user_id, name),
                ).fetchone()
                return self._row_to_folder(row) if row else None
        except Exception as e:
            logger.error(f"Error getting folder by name: {e}")
            return None

    def get_folders(self, user_id: int) -> list[Folder]:
        """Get all folders of a user"""
        try:
            with self.db_connection.get_connection() as conn:
                rows = conn.execute(
                    "SELECT * FROM folders WHERE user_id = ? ORDER BY name",
                    (user_id,),
                ).fetchall()
                return [self._row_to_folder(row) for row in rows]
        except Exception as e:
            logger.error(f"Error getting folders for user {user_id}: {e}")
            return []

    def delete_folder(self, folder_id: int) -> bool:
        """Delete a folder; its words stay in the collection"""
        try:
            with self.db_connection.get_connection() as conn:
                cursor = conn.execute("DELETE FROM folders WHERE id = ?", (folder_id,))
                conn.commit()
                return cursor.rowcount > 0
        except Exception as e:
            logger.error(f"Error deleting folder {folder_id}: {e}")
            return False

    def _row_to_folder(self, row: sqlite3.Row) -> Folder:
        return Folder(
            id=row["id"],
            name=row["name"],
            color=row["color"],
            created_at=row["created_at"],
        )
