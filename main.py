#!/usr/bin/env python3
"""
LearnDeck vocabulary trainer
Main application entry point
"""

import argparse
import logging
import sys
from collections.abc import Callable

from learndeck.config import get_settings
from learndeck.core.database.database_manager import DatabaseManager
from learndeck.core.errors import LearnDeckError, PersistFailureError
from learndeck.core.models import StudyConfig, StudyType
from learndeck.core.session.session_manager import SessionManager
from learndeck.core.study.ordering import OrderingPolicy
from learndeck.core.study.selection import get_study_type_description, select_due_words
from learndeck.utils import (
    format_date_relative,
    format_progress_stats,
    format_session_summary,
    format_study_card,
    format_word_display,
)

InputFn = Callable[[str], str]
PrintFn = Callable[[str], None]

YES_ANSWERS = {"y", "yes", "1"}
NO_ANSWERS = {"n", "no", "0"}
QUIT_ANSWERS = {"q", ":q", "quit"}

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="learndeck", description="Vocabulary flashcards")
    parser.add_argument("--user", type=int, default=1, help="User id (default: 1)")
    parser.add_argument("--db", default=None, help="SQLite database path")
    subparsers = parser.add_subparsers(dest="command")

    study = subparsers.add_parser("study", help="Run a flashcard session")
    study.add_argument("--type", default="all", choices=[t.value for t in StudyType])
    study.add_argument("--folder", default=None, help="Folder name to practice")
    study.add_argument("--limit", type=int, default=None)
    study.add_argument("--policy", default=None, choices=[p.value for p in OrderingPolicy])

    subparsers.add_parser("due", help="List words due for study")
    subparsers.add_parser("stats", help="Show progress statistics")
    return parser


def run_study(
    session_manager: SessionManager,
    user_id: int,
    config: StudyConfig,
    policy: str | None,
    input_fn: InputFn = input,
    print_fn: PrintFn = print,
) -> int:
    """Run an interactive flashcard session in the terminal"""
    session = session_manager.start_study_session(user_id, config, policy=policy)
    if session.is_empty():
        print_fn(f"Nothing to study: {get_study_type_description(config.study_type).lower()}.")
        return 0

    print_fn(f"=== {config.folder_name}: {get_study_type_description(config.study_type)} ===")
    while not session.is_complete():
        word = session.get_current_word()
        print_fn(format_study_card(word, session.current_word_index + 1, len(session.words)))
        if input_fn("Press Enter to show the answer (q to stop) ").strip().lower() in QUIT_ANSWERS:
            stats = session_manager.finish_session(user_id)
            print_fn(f"Stopped after {stats.total} words.")
            return 0
        print_fn(format_word_display(word))

        answer = input_fn("Did you know it? [y/n] ").strip().lower()
        while answer not in YES_ANSWERS | NO_ANSWERS:
            answer = input_fn("Please answer y or n: ").strip().lower()

        try:
            result = session_manager.submit_answer(user_id, answer in YES_ANSWERS)
        except PersistFailureError as e:
            print_fn(f"⚠️ Could not save your answer ({e}). Please answer again.")
            continue
        print_fn(f"Next review: {format_date_relative(result.next_review)} ({result.difficulty.value})")

    print_fn(
        format_session_summary(session.stats(), len(session.words), session.timer.get_elapsed_time())
    )
    return 0


def run(argv: list[str] | None = None, input_fn: InputFn = input, print_fn: PrintFn = print) -> int:
    """Main application entry point"""
    settings = get_settings()

    log_level = "DEBUG" if settings.debug else settings.log_level.upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    args = build_parser().parse_args(argv)
    db_manager = DatabaseManager(args.db)
    db_manager.init_database()
    session_manager = SessionManager(db_manager, settings=settings)

    try:
        if args.command == "due":
            due = select_due_words(db_manager.get_words(args.user))
            print_fn(f"{len(due)} words due")
            for word in due:
                print_fn(f"• {word.display_word} ({word.difficulty.value})")
            return 0

        if args.command == "stats":
            print_fn(format_progress_stats(db_manager.get_user_stats(args.user)))
            return 0

        folder_id = None
        folder_name = None
        if getattr(args, "folder", None):
            folder = db_manager.get_folder_by_name(args.user, args.folder)
            if folder is None:
                print_fn(f"Unknown folder: {args.folder}")
                return 2
            folder_id, folder_name = folder.id, folder.name

        config = StudyConfig.from_values(
            getattr(args, "type", "all"),
            folder_id=folder_id,
            folder_name=folder_name,
            word_count=getattr(args, "limit", None),
        )
        return run_study(
            session_manager, args.user, config, getattr(args, "policy", None), input_fn, print_fn
        )
    except LearnDeckError as e:
        logger.error(f"Study session failed: {e}")
        print_fn(f"Error: {e}")
        return 1
    except (KeyboardInterrupt, EOFError):
        logger.info("Interrupted, stopping...")
        session_manager.finish_session(args.user)
        return 130


if __name__ == "__main__":
    sys.exit(run())
