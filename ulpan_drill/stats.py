import math
from dataclasses import dataclass
from typing import Any, Dict, Iterable

from .structured import Word


@dataclass
class CollectionStats:
    total_correct: int
    total_wrong: int
    total_answers: int
    accuracy_percent: int


def _percent(correct: int, total: int) -> int:
    # Half-up rounding (12.5 -> 13), not Python's round-half-even
    if not total:
        return 0
    return int(math.floor(100 * correct / total + 0.5))


def word_accuracy(word: Word) -> int:
    correct = word.stats.correct
    return _percent(correct, correct + word.stats.wrong)


def collection_accuracy(collection: Iterable[Word]) -> CollectionStats:
    """Sum the answer counters of every word and compute overall accuracy."""
    total_correct = 0
    total_wrong = 0
    for word in collection:
        total_correct += word.stats.correct
        total_wrong += word.stats.wrong
    total = total_correct + total_wrong
    return CollectionStats(
        total_correct=total_correct,
        total_wrong=total_wrong,
        total_answers=total,
        accuracy_percent=_percent(total_correct, total),
    )


def accuracy_band(percent: int) -> str:
    """Colour bucket for a progress bar: good from 70 %, fair from 40 %."""
    if percent >= 70:
        return "good"
    elif percent >= 40:
        return "fair"
    else:
        return "poor"


def word_progress(word: Word) -> Dict[str, Any]:
    percent = word_accuracy(word)
    return {
        "correct": word.stats.correct,
        "wrong": word.stats.wrong,
        "total": word.stats.correct + word.stats.wrong,
        "percent": percent,
        "band": accuracy_band(percent),
    }
