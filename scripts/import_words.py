#!/usr/bin/env python3
"""
Import extracted {word, definition, article?} entries from JSON into a user's collection
"""

import json
import os
import sys
from pathlib import Path

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from learndeck.core.database.database_manager import DatabaseManager  # noqa: E402


def load_entries(json_path: str) -> list[dict]:
    """Load entries from a bare list or from a {"words": [...]} document"""
    with open(json_path, 'r', encoding='utf-8') as f:
        data = json.load(f)

    if isinstance(data, dict):
        data = data.get('words', [])
    if not isinstance(data, list):
        raise ValueError("Expected a list of word entries")
    return [entry for entry in data if isinstance(entry, dict)]


def import_words_data(
    json_path: str, db_path: str, user_id: int, folder_name: str | None = None
) -> int | None:
    """Import entries and return the number of words added, None on failure"""
    try:
        print(f"📖 Loading data from {json_path}")
        entries = load_entries(json_path)
        print(f"  📝 Loaded {len(entries)} entries")

        db_manager = DatabaseManager(db_path)
        db_manager.init_database()

        folder_ids = []
        if folder_name:
            folder = db_manager.create_folder(user_id, folder_name)
            if folder is None:
                print(f"❌ Could not create folder {folder_name}")
                return None
            folder_ids.append(folder.id)
            print(f"  📁 Importing into folder '{folder.name}'")

        added = db_manager.add_words(user_id, entries, folder_ids)

        print(f"✅ Successfully imported data to {db_path}")
        print("📊 Import summary:")
        print(f"   • Added: {added}")
        print(f"   • Skipped: {len(entries) - added}")

        return added

    except Exception as e:
        print(f"❌ Import failed: {e}")
        return None


def main():
    """Main import function"""
    if len(sys.argv) not in (4, 5):
        print("Usage: python import_words.py <input_json_path> <database_path> <user_id> [folder]")
        print("Example: python import_words.py data/extracted.json data/learndeck.db 1 Chapter1")
        sys.exit(1)

    json_path = sys.argv[1]
    db_path = sys.argv[2]
    user_id = int(sys.argv[3])
    folder_name = sys.argv[4] if len(sys.argv) == 5 else None

    if not Path(json_path).exists():
        print(f"❌ JSON file not found: {json_path}")
        sys.exit(1)

    print(f"🚀 Starting import from {json_path} to {db_path}")

    if import_words_data(json_path, db_path, user_id, folder_name) is not None:
        print("🎉 Import completed successfully!")
        sys.exit(0)
    else:
        print("💥 Import failed!")
        sys.exit(1)


if __name__ == "__main__":
    main()
