#!/usr/bin/env python3
"""
Export a user's words, folders and study history to JSON
"""

import json
import os
import sys
from dataclasses import asdict
from datetime import datetime
from pathlib import Path

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from learndeck.core.database.database_manager import DatabaseManager  # noqa: E402


def build_export(db_manager: DatabaseManager, user_id: int) -> dict:
    """Collect everything stored for a user"""
    words = []
    for word in db_manager.get_words(user_id):
        row = asdict(word)
        row["difficulty"] = word.difficulty.value
        row["folders"] = sorted(word.folders)
        words.append(row)

    folders = [asdict(folder) for folder in db_manager.get_folders(user_id)]

    history = []
    for record in db_manager.get_study_history(user_id, limit=1000):
        row = asdict(record)
        row["study_type"] = record.study_type.value
        history.append(row)

    return {
        "export_info": {
            "exported_at": datetime.now().isoformat(),
            "user_id": user_id,
        },
        "words": words,
        "folders": folders,
        "study_sessions": history,
        "statistics": db_manager.get_user_stats(user_id),
    }


def export_words_data(db_path: str, output_path: str, user_id: int) -> bool:
    """Export all words and study history of a user to JSON"""
    try:
        print(f"📖 Exporting words data from {db_path}")
        export_data = build_export(DatabaseManager(db_path), user_id)

        output_file = Path(output_path)
        output_file.parent.mkdir(parents=True, exist_ok=True)

        with open(output_file, 'w', encoding='utf-8') as f:
            json.dump(export_data, f, indent=2, ensure_ascii=False, default=str)

        print(f"✅ Successfully exported data to {output_path}")
        print("📊 Export summary:")
        print(f"   • Words: {len(export_data['words'])}")
        print(f"   • Folders: {len(export_data['folders'])}")
        print(f"   • Study sessions: {len(export_data['study_sessions'])}")

        return True

    except Exception as e:
        print(f"❌ Export failed: {e}")
        return False


def main():
    """Main export function"""
    if len(sys.argv) != 4:
        print("Usage: python export_words.py <database_path> <output_json_path> <user_id>")
        print("Example: python export_words.py data/learndeck.db data/words.json 1")
        sys.exit(1)

    db_path = sys.argv[1]
    output_path = sys.argv[2]
    user_id = int(sys.argv[3])

    if not Path(db_path).exists():
        print(f"❌ Database file not found: {db_path}")
        sys.exit(1)

    print(f"🚀 Starting export from {db_path} to {output_path}")

    if export_words_data(db_path, output_path, user_id):
        print("🎉 Export completed successfully!")
        sys.exit(0)
    else:
        print("💥 Export failed!")
        sys.exit(1)


if __name__ == "__main__":
    main()
