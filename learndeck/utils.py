"""
Utility functions for LearnDeck
"""

import time
from datetime import datetime
from typing import Any

from .core.models import SessionStats, Word


def format_word_display(word: Word) -> str:
    """Format a word with its definition for display"""
    result = f"📘 {word.display_word}\n"
    if word.definition:
        result += f"📝 {word.definition}\n"
    result += f"🏷️ {word.difficulty.value}"
    return result


def format_study_card(word: Word, current_index: int = 0, total_words: int = 0) -> str:
    """Format word as study flashcard (front side)"""
    progress_info = f"{current_index}/{total_words}. " if total_words > 0 else ""
    return f"{progress_info}What does '{word.display_word}' mean?"


def format_progress_stats(stats: dict[str, Any]) -> str:
    """Format user progress statistics"""
    result = "📊 Your progress:\n\n"
    result += f"📚 Total words: {stats.get('total_words', 0)}\n"
    result += f"🔄 Due now: {stats.get('due_words', 0)}\n"
    result += f"🆕 New: {stats.get('new_words', 0)}\n"
    result += f"🧠 Learning: {stats.get('learning_words', 0)}\n"
    result += f"🔁 Review: {stats.get('review_words', 0)}\n"
    result += f"🏆 Mastered: {stats.get('mastered_words', 0)}\n"
    result += f"✅ Accuracy: {stats.get('average_accuracy', 0.0):.1%}\n"

    return result


def format_session_summary(stats: SessionStats, words_count: int, elapsed_seconds: float) -> str:
    """Format the end-of-session report"""
    return (
        "✅ Session complete!\n\n"
        f"• Words studied: {words_count}\n"
        f"• Correct answers: {stats.correct}/{stats.total}\n"
        f"• Accuracy: {calculate_success_rate(stats.correct, stats.total):.1f}%\n"
        f"• Time: {format_duration(int(elapsed_seconds))}"
    )


def format_date_relative(target: datetime, now: datetime | None = None) -> str:
    """Format a review date relative to now"""
    now = now or datetime.now()
    delta = (target.date() - now.date()).days

    if target <= now:
        return "now"
    elif delta == 0:
        return "today"
    elif delta == 1:
        return "tomorrow"
    else:
        return f"in {delta} days"


def calculate_success_rate(correct: int, total: int) -> float:
    """Calculate success rate as percentage"""
    if total == 0:
        return 0.0
    return (correct / total) * 100.0


def format_duration(seconds: int) -> str:
    """Format duration in human-readable format"""
    if seconds < 60:
        return f"{seconds}s"
    elif seconds < 3600:
        minutes = seconds // 60
        return f"{minutes}m"
    else:
        hours = seconds // 3600
        minutes = (seconds % 3600) // 60
        return f"{hours}h {minutes}m"


class Timer:
    """Simple timer for measuring duration"""

    def __init__(self):
        self.start_time = None
        self.end_time = None

    def start(self):
        """Start the timer"""
        self.start_time = time.time()
        self.end_time = None

    def stop(self):
        """Stop the timer"""
        if self.start_time is not None and self.end_time is None:
            self.end_time = time.time()

    def elapsed(self) -> float | None:
        """Get elapsed time in seconds"""
        if self.start_time is None:
            return None

        end = self.end_time or time.time()
        return end - self.start_time

    def get_elapsed_time(self) -> float:
        """Get elapsed time in seconds, 0 if never started"""
        return self.elapsed() or 0.0
