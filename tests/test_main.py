"""
Tests for the command line study loop
"""

import logging
import os
import tempfile
from unittest.mock import patch

import pytest

from learndeck.config import Settings
from learndeck.core.database.database_manager import DatabaseManager
from learndeck.core.models import Difficulty
from main import run


class TestCommandLine:
    """Test the CLI with scripted input"""

    @pytest.fixture
    def db_path(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            path = os.path.join(temp_dir, "cli.db")
            db = DatabaseManager(path)
            db.init_database()
            folder = db.create_folder(1, "Kapitel 1")
            db.add_words(
                1,
                [
                    {"word": "Haus", "definition": "house", "article": "das"},
                    {"word": "Baum", "definition": "tree", "article": "der"},
                ],
                folder_ids=[folder.id],
            )
            yield path

    def scripted(self, answers):
        answers = iter(answers)
        return lambda prompt: next(answers)

    def test_study_session_answers_all_words(self, db_path):
        output = []

        code = run(
            ["--db", db_path, "study", "--type", "new"],
            input_fn=self.scripted(["", "y", "", "maybe", "n"]),
            print_fn=output.append,
        )

        assert code == 0
        assert any("Session complete" in line for line in output)
        assert any("Correct answers: 1/2" in line for line in output)

        words = DatabaseManager(db_path).get_words(1)
        assert sorted(word.review_count for word in words) == [1, 1]
        assert {word.difficulty for word in words} == {Difficulty.NEW, Difficulty.LEARNING}

    def test_quit_stops_session(self, db_path):
        output = []

        code = run(
            ["--db", db_path, "study"],
            input_fn=self.scripted(["q"]),
            print_fn=output.append,
        )

        assert code == 0
        assert output[-1] == "Stopped after 0 words."
        assert all(word.review_count == 0 for word in DatabaseManager(db_path).get_words(1))

    def test_nothing_to_study(self, db_path):
        output = []

        code = run(["--db", db_path, "study", "--type", "mastered"], print_fn=output.append)

        assert code == 0
        assert output == ["Nothing to study: words you've mastered."]

    def test_folder_study(self, db_path):
        output = []

        code = run(
            ["--db", db_path, "study", "--folder", "Kapitel 1", "--limit", "1"],
            input_fn=self.scripted(["", "y"]),
            print_fn=output.append,
        )

        assert code == 0
        assert output[0].startswith("=== Kapitel 1")
        assert any("Words studied: 1" in line for line in output)

    def test_unknown_folder(self, db_path):
        output = []
        assert run(["--db", db_path, "study", "--folder", "Nope"], print_fn=output.append) == 2
        assert output == ["Unknown folder: Nope"]

    def test_due_lists_new_words(self, db_path):
        output = []
        assert run(["--db", db_path, "due"], print_fn=output.append) == 0
        assert output[0] == "2 words due"
        assert "• das Haus (new)" in output

    def test_stats(self, db_path):
        output = []
        assert run(["--db", db_path, "stats"], print_fn=output.append) == 0
        assert "Total words: 2" in output[0]

    def test_reveal_shows_word_details(self, db_path):
        output = []

        run(
            ["--db", db_path, "study", "--folder", "Kapitel 1", "--limit", "1"],
            input_fn=self.scripted(["", "y"]),
            print_fn=output.append,
        )

        assert any(line.startswith("📘 ") and "📝 " in line for line in output)

    def test_interrupt_records_session(self, db_path):
        """Ctrl-C mid session still stores the answers given so far"""
        answers = iter(["", "y"])

        def interrupting_input(prompt):
            try:
                return next(answers)
            except StopIteration:
                raise KeyboardInterrupt from None

        code = run(["--db", db_path, "study"], input_fn=interrupting_input, print_fn=lambda line: None)

        assert code == 130
        history = DatabaseManager(db_path).get_study_history(1)
        assert len(history) == 1
        assert history[0].words_studied == 1
        assert history[0].correct_answers == 1
        assert history[0].completed_at is not None

    def test_debug_enables_debug_logging(self, db_path):
        with patch("main.get_settings", return_value=Settings(debug=True, log_level="WARNING")), \
                patch("main.logging.basicConfig") as basic_config:
            run(["--db", db_path, "stats"], print_fn=lambda line: None)

        assert basic_config.call_args.kwargs["level"] == logging.DEBUG

    def test_log_level_without_debug(self, db_path):
        with patch("main.get_settings", return_value=Settings(debug=False, log_level="warning")), \
                patch("main.logging.basicConfig") as basic_config:
            run(["--db", db_path, "stats"], print_fn=lambda line: None)

        assert basic_config.call_args.kwargs["level"] == logging.WARNING
