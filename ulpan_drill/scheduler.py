import dataclasses
import datetime
from typing import Any, Tuple

from .structured import ReviewState, Word, WordStats

MIN_LEVEL = 1
MAX_LEVEL = 5

# Review interval per level, in milliseconds.
SR_INTERVALS_MS: Tuple[int, ...] = (
    10 * 1000,  # level 1 -> 10 seconds
    60 * 1000,  # level 2 -> 1 minute
    10 * 60 * 1000,  # level 3 -> 10 minutes
    60 * 60 * 1000,  # level 4 -> 1 hour
    24 * 60 * 60 * 1000,  # level 5 -> 1 day
)


def now_ms() -> int:
    """Current wall-clock time as epoch milliseconds.

    Only the environment (store, CLI, web app) reads the clock; the
    scheduling functions below always receive ``now`` explicitly.
    """
    return int(datetime.datetime.now(datetime.timezone.utc).timestamp() * 1000)


def _valid_level(level: Any) -> int:
    if isinstance(level, bool) or not isinstance(level, int):
        return MIN_LEVEL
    if level < MIN_LEVEL or level > MAX_LEVEL:
        return MIN_LEVEL
    return level


def interval_for(level: Any) -> int:
    """Interval in milliseconds for ``level``; unknown levels use the first interval."""
    return SR_INTERVALS_MS[_valid_level(level) - 1]


def advance(current_level: Any, was_correct: bool, now: int) -> Tuple[int, int]:
    """
    Five-level review clock.

    A correct answer moves the word up one level (capped at 5), a wrong
    answer resets it to level 1. The word becomes due again after the
    interval of its new level:

      level 1 -> 10 s, 2 -> 1 min, 3 -> 10 min, 4 -> 1 h, 5 -> 1 day

    A corrupted level (outside 1..5) is treated as level 1.

    Returns:
        (new_level, due_at) with ``due_at`` in epoch milliseconds.
    """
    level = _valid_level(current_level)
    if was_correct:
        new_level = min(level + 1, MAX_LEVEL)
    else:
        new_level = MIN_LEVEL
    return new_level, now + interval_for(new_level)


def advance_review(review: Any, was_correct: bool, now: int) -> ReviewState:
    """Apply :func:`advance` to a ``ReviewState`` and return the new state."""
    level = getattr(review, "level", MIN_LEVEL)
    new_level, due_at = advance(level, was_correct, now)
    return ReviewState(level=new_level, due_at=due_at)


def is_due(review: Any, now: int) -> bool:
    """A missing or zero ``due_at`` counts as due."""
    due_at = getattr(review, "due_at", 0)
    if not due_at:
        return True
    return bool(due_at <= now)


def apply_answer(word: Word, was_correct: bool, now: int) -> Word:
    """Return ``word`` with its answer counter bumped and its review advanced.

    The input word is left untouched; the caller persists the result.
    """
    stats = word.stats
    if was_correct:
        new_stats = WordStats(correct=stats.correct + 1, wrong=stats.wrong)
    else:
        new_stats = WordStats(correct=stats.correct, wrong=stats.wrong + 1)
    return dataclasses.replace(
        word,
        stats=new_stats,
        review=advance_review(word.review, was_correct, now),
    )
