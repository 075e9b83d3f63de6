from typing import Any

from .exercises import answer_text, answer_variants, correct_option
from .normalize import normalize
from .structured import Evaluation, Word


def evaluate_typed(word: Word, direction: str, raw_answer: Any) -> Evaluation:
    """Check a typed answer against every accepted variant for ``direction``.

    Comparison is case- and whitespace-insensitive. On failure the learner
    is shown the answer side exactly as it was entered in the dictionary.
    """
    answer = normalize(raw_answer)
    correct = answer in answer_variants(word, direction)
    return Evaluation(correct=correct, expected_display_text=answer_text(word, direction))


def evaluate_choice(word: Word, direction: str, chosen_option: Any) -> Evaluation:
    """Check a selected multiple-choice option against the canonical first variant."""
    expected = correct_option(word, direction)
    correct = normalize(chosen_option) == normalize(expected)
    return Evaluation(correct=correct, expected_display_text=expected)


def evaluate_flashcard(word: Word, direction: str, knew_it: bool) -> Evaluation:
    """Flashcards are self-graded: the learner says whether they knew the word."""
    return Evaluation(correct=bool(knew_it), expected_display_text=answer_text(word, direction))
