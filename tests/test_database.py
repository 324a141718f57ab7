"""
Tests for the SQLite word store
"""

from datetime import datetime, timedelta

import pytest

from learndeck.core.models import Difficulty, ReviewResult, StudyType
from tests.factories import NOW


@pytest.fixture
def folder(db_manager):
    return db_manager.create_folder(1, "Kapitel 1")


class TestWordOperations:
    """Test word CRUD"""

    def test_add_word_defaults(self, db_manager):
        """New words start in the new state and are due a day later"""
        before = datetime.now()
        word = db_manager.add_word(1, "Haus", "house", article="das")

        assert word is not None
        assert word.difficulty == Difficulty.NEW
        assert word.review_count == 0
        assert word.correct_count == 0
        assert word.last_reviewed is None
        assert word.display_word == "das Haus"
        assert word.next_review - word.created_at == timedelta(days=1)
        assert word.created_at >= before

    def test_add_words_skips_duplicates_and_incomplete(self, db_manager):
        db_manager.add_word(1, "Haus", "house")
        entries = [
            {"word": "haus", "definition": "house again"},
            {"word": "Baum", "definition": "tree"},
            {"word": "Baum", "definition": "tree twice"},
            {"word": "", "definition": "nothing"},
            {"word": "Katze"},
            {"word": "Hund", "definition": "dog", "article": "der"},
        ]

        assert db_manager.add_words(1, entries) == 2

        words = {word.word: word for word in db_manager.get_words(1)}
        assert set(words) == {"Haus", "Baum", "Hund"}
        assert words["Hund"].article == "der"

    def test_same_word_for_different_users(self, db_manager):
        assert db_manager.add_words(1, [{"word": "Haus", "definition": "house"}]) == 1
        assert db_manager.add_words(2, [{"word": "Haus", "definition": "house"}]) == 1
        assert len(db_manager.get_words(1)) == 1
        assert len(db_manager.get_words(2)) == 1

    def test_get_word_by_id_missing(self, db_manager):
        assert db_manager.get_word_by_id(12345) is None

    def test_delete_word(self, db_manager):
        word = db_manager.add_word(1, "Haus", "house")
        assert db_manager.delete_word(word.id)
        assert db_manager.get_words(1) == []
        assert not db_manager.delete_word(word.id)

    def test_unknown_difficulty_row_is_skipped(self, db_manager):
        good = db_manager.add_word(1, "Haus", "house")
        bad = db_manager.add_word(1, "Baum", "tree")
        with db_manager.get_connection() as conn:
            conn.execute("UPDATE words SET difficulty = 'expert' WHERE id = ?", (bad.id,))
            conn.commit()

        assert [word.id for word in db_manager.get_words(1)] == [good.id]


class TestFolderOperations:
    """Test folders and word membership"""

    def test_create_and_find_folder(self, db_manager, folder):
        assert folder.name == "Kapitel 1"
        assert db_manager.get_folder_by_name(1, "Kapitel 1") == folder
        assert db_manager.get_folders(1) == [folder]
        assert db_manager.get_folders(2) == []

    def test_duplicate_folder_returns_existing(self, db_manager, folder):
        assert db_manager.create_folder(1, "Kapitel 1").id == folder.id

    def test_word_membership(self, db_manager, folder):
        other = db_manager.create_folder(1, "Kapitel 2")
        word = db_manager.add_word(1, "Haus", "house", folder_ids=[folder.id])
        assert db_manager.assign_word_to_folder(word.id, other.id)

        assert db_manager.get_word_by_id(word.id).folders == {folder.id, other.id}

    def test_add_words_into_folder(self, db_manager, folder):
        db_manager.add_words(1, [{"word": "Haus", "definition": "house"}], folder_ids=[folder.id])
        assert db_manager.get_words(1)[0].folders == {folder.id}

    def test_delete_folder_keeps_words(self, db_manager, folder):
        word = db_manager.add_word(1, "Haus", "house", folder_ids=[folder.id])

        assert db_manager.delete_folder(folder.id)

        assert db_manager.get_folders(1) == []
        assert db_manager.get_word_by_id(word.id).folders == frozenset()


class TestProgressOperations:
    """Test review progress writes and statistics"""

    def make_result(self, difficulty=Difficulty.LEARNING, review_count=1, correct_count=1):
        return ReviewResult(
            difficulty=difficulty,
            next_review=NOW + timedelta(days=1),
            last_reviewed=NOW,
            review_count=review_count,
            correct_count=correct_count,
            interval_days=1,
            is_correct=True,
        )

    def test_update_word_progress(self, db_manager):
        word = db_manager.add_word(1, "Haus", "house")

        assert db_manager.update_word_progress(word.id, self.make_result())

        stored = db_manager.get_word_by_id(word.id)
        assert stored.difficulty == Difficulty.LEARNING
        assert stored.review_count == 1
        assert stored.correct_count == 1
        assert stored.last_reviewed == NOW
        assert stored.next_review == NOW + timedelta(days=1)

    def test_update_missing_word(self, db_manager):
        assert not db_manager.update_word_progress(999, self.make_result())

    def test_counters_must_stay_consistent(self, db_manager):
        """correct_count can never exceed review_count"""
        word = db_manager.add_word(1, "Haus", "house")
        assert not db_manager.update_word_progress(word.id, self.make_result(review_count=1, correct_count=2))
        assert db_manager.get_word_by_id(word.id).review_count == 0

    def test_reset_word_progress(self, db_manager):
        word = db_manager.add_word(1, "Haus", "house")
        db_manager.update_word_progress(word.id, self.make_result(Difficulty.REVIEW, 5, 4))

        assert db_manager.reset_word_progress(word.id)

        stored = db_manager.get_word_by_id(word.id)
        assert stored.difficulty == Difficulty.NEW
        assert stored.review_count == 0
        assert stored.last_reviewed is None

    def test_user_stats(self, db_manager):
        first = db_manager.add_word(1, "Haus", "house")
        second = db_manager.add_word(1, "Baum", "tree")
        db_manager.add_word(1, "Hund", "dog")
        db_manager.update_word_progress(first.id, self.make_result(Difficulty.REVIEW, 4, 3))
        db_manager.update_word_progress(second.id, self.make_result(Difficulty.MASTERED, 4, 1))

        stats = db_manager.get_user_stats(1, now=NOW)

        assert stats["total_words"] == 3
        assert stats["new_words"] == 1
        assert stats["review_words"] == 1
        assert stats["mastered_words"] == 1
        assert stats["total_reviews"] == 8
        assert stats["total_correct"] == 4
        assert stats["average_accuracy"] == 0.5
        assert stats["mastery_rate"] == pytest.approx(1 / 3)
        # Only the never-reviewed word is due at NOW
        assert stats["due_words"] == 1

    def test_stats_for_empty_collection(self, db_manager):
        stats = db_manager.get_user_stats(1)
        assert stats["total_words"] == 0
        assert stats["average_accuracy"] == 0.0


class TestStudySessionHistory:
    """Test study session records and recent options"""

    def test_history_contains_completed_sessions_only(self, db_manager):
        done = db_manager.create_study_session(1, None, StudyType.ALL)
        db_manager.create_study_session(1, None, StudyType.NEW)
        assert db_manager.complete_study_session(done.id, 10, 7, 3.5)

        history = db_manager.get_study_history(1)

        assert [record.id for record in history] == [done.id]
        assert history[0].words_studied == 10
        assert history[0].correct_answers == 7
        assert history[0].total_time_minutes == 3.5

    def test_recent_options_aggregate_per_folder(self, db_manager, folder):
        repo = db_manager.session_repo
        repo.save_study_option(1, folder.id, StudyType.NEW, used_at=NOW - timedelta(hours=3))
        repo.save_study_option(1, folder.id, StudyType.NEW, used_at=NOW - timedelta(hours=2))
        repo.save_study_option(1, folder.id, StudyType.REVIEW, used_at=NOW - timedelta(hours=1))
        repo.save_study_option(1, None, StudyType.ALL, used_at=NOW)

        options = db_manager.get_recent_study_options(1)

        assert [option.folder_id for option in options] == [None, folder.id]
        folder_option = options[1]
        assert folder_option.use_count == 3
        assert folder_option.study_type == StudyType.REVIEW
        assert folder_option.last_used_at == NOW - timedelta(hours=1)

    def test_recent_options_are_per_user(self, db_manager):
        db_manager.save_study_option(1, None, StudyType.ALL)
        assert db_manager.get_recent_study_options(2) == []
