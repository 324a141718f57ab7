"""
Tests for the import and export scripts
"""

import json
import os
import tempfile

import pytest

from learndeck.core.database.database_manager import DatabaseManager
from scripts.export_words import export_words_data
from scripts.import_words import import_words_data, load_entries


class TestImportExport:
    """Test moving words in and out of the database"""

    @pytest.fixture
    def temp_dir(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            yield temp_dir

    def write_json(self, path, data):
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(data, f)

    def test_load_entries_from_list_or_document(self, temp_dir):
        list_path = os.path.join(temp_dir, "list.json")
        doc_path = os.path.join(temp_dir, "doc.json")
        self.write_json(list_path, [{"word": "Haus", "definition": "house"}, "junk"])
        self.write_json(doc_path, {"words": [{"word": "Baum", "definition": "tree"}]})

        assert load_entries(list_path) == [{"word": "Haus", "definition": "house"}]
        assert load_entries(doc_path) == [{"word": "Baum", "definition": "tree"}]

    def test_import_into_folder(self, temp_dir):
        json_path = os.path.join(temp_dir, "words.json")
        db_path = os.path.join(temp_dir, "words.db")
        self.write_json(
            json_path,
            [
                {"word": "Haus", "definition": "house", "article": "das"},
                {"word": "Haus", "definition": "house"},
                {"word": "Baum"},
            ],
        )

        assert import_words_data(json_path, db_path, 1, "Kapitel 1") == 1

        db = DatabaseManager(db_path)
        folder = db.get_folder_by_name(1, "Kapitel 1")
        words = db.get_words(1)
        assert [word.display_word for word in words] == ["das Haus"]
        assert words[0].folders == {folder.id}

    def test_import_missing_file(self, temp_dir):
        missing = os.path.join(temp_dir, "missing.json")
        assert import_words_data(missing, os.path.join(temp_dir, "words.db"), 1) is None

    def test_export(self, temp_dir):
        db_path = os.path.join(temp_dir, "words.db")
        output_path = os.path.join(temp_dir, "out", "export.json")
        db = DatabaseManager(db_path)
        db.init_database()
        db.add_word(1, "Haus", "house")
        db.create_folder(1, "Kapitel 1")

        assert export_words_data(db_path, output_path, 1)

        with open(output_path, encoding='utf-8') as f:
            data = json.load(f)
        assert data["export_info"]["user_id"] == 1
        assert data["words"][0]["word"] == "Haus"
        assert data["words"][0]["difficulty"] == "new"
        assert data["folders"][0]["name"] == "Kapitel 1"
        assert data["statistics"]["total_words"] == 1
