import random
from typing import Any, List, Sequence, Union

from .normalize import normalize
from .scheduler import is_due
from .structured import (
    DIRECTIONS,
    MODE_ADAPTIVE_REVIEW,
    MODE_MULTIPLE_CHOICE,
    MODES,
    PRIMARY_TO_TARGET,
    TARGET_TO_PRIMARY,
    EmptyCollection,
    NothingDueNow,
    Question,
    Word,
)

OPTION_COUNT = 4
PLACEHOLDER = "—"

QuestionResult = Union[Question, EmptyCollection, NothingDueNow]


def _check_direction(direction: str) -> None:
    if direction not in DIRECTIONS:
        raise ValueError(f"Unknown direction: {direction!r}")


def answer_text(word: Word, direction: str) -> str:
    """Raw text of the side the learner has to produce."""
    _check_direction(direction)
    return word.target_text if direction == PRIMARY_TO_TARGET else word.primary_text


def answer_variants(word: Word, direction: str) -> List[str]:
    """Accepted normalized answers for ``direction``, never empty."""
    _check_direction(direction)
    variants = word.target_variants if direction == PRIMARY_TO_TARGET else word.primary_variants
    if variants:
        return list(variants)
    # Inconsistent external data: fall back to the whole text
    return [normalize(answer_text(word, direction))]


def correct_option(word: Word, direction: str) -> str:
    """Canonical multiple-choice answer: the first listed variant."""
    return answer_variants(word, direction)[0]


def prompt_text(word: Word, direction: str) -> str:
    """What to show the learner. Target text carries its transcription when there is one."""
    _check_direction(direction)
    if direction == PRIMARY_TO_TARGET:
        return word.primary_text
    if word.transcription:
        return f"{word.target_text} [{word.transcription}]"
    return word.target_text


def pick_direction(rng: Any = random) -> str:
    return PRIMARY_TO_TARGET if rng.random() < 0.5 else TARGET_TO_PRIMARY


def build_options(word: Word, direction: str, collection: Sequence[Word], rng: Any = random) -> List[str]:
    """
    Assemble the four multiple-choice slots for ``word``.

    The correct answer is the first variant of the answer side. Distractors
    are the same-side first variants of every other word, drawn at random
    without replacement and skipped when already present. Missing slots are
    padded with ``PLACEHOLDER`` and the result is shuffled.
    """
    correct = correct_option(word, direction)
    options = [correct]

    pool = [correct_option(other, direction) for other in collection if other.id != word.id]
    while len(options) < OPTION_COUNT and pool:
        candidate = pool.pop(rng.randrange(len(pool)))
        if candidate not in options:
            options.append(candidate)

    while len(options) < OPTION_COUNT:
        options.append(PLACEHOLDER)

    rng.shuffle(options)
    return options


def build_question(collection: Sequence[Word], mode: str, now: int, rng: Any = random) -> QuestionResult:
    """Pick the next word, direction and (for multiple choice) options.

    Args:
        collection: current words, owned by the caller
        mode: one of ``MODES``
        now: current time in epoch milliseconds
        rng: random source with ``choice``, ``random``, ``randrange`` and ``shuffle``

    Returns:
        A :class:`Question`, or :class:`EmptyCollection` when there are no
        words, or :class:`NothingDueNow` when adaptive review has nothing due.

    Raises:
        ValueError: If ``mode`` is not a known mode
    """
    if mode not in MODES:
        raise ValueError(f"Unknown quiz mode: {mode!r}")

    if not collection:
        return EmptyCollection()

    pool = list(collection)
    if mode == MODE_ADAPTIVE_REVIEW:
        pool = [w for w in pool if is_due(w.review, now)]
        if not pool:
            return NothingDueNow()

    word = rng.choice(pool)
    direction = pick_direction(rng)

    if mode == MODE_MULTIPLE_CHOICE:
        options = build_options(word, direction, collection, rng)
        return Question(word=word, mode=mode, direction=direction, options=options)

    return Question(word=word, mode=mode, direction=direction)


def question_to_dict(question: Question) -> dict[str, Any]:
    """JSON-friendly view of a question. The answer is never included."""
    data: dict[str, Any] = {
        "word_id": question.word.id,
        "mode": question.mode,
        "direction": question.direction,
        "prompt": prompt_text(question.word, question.direction),
    }
    if question.options is not None:
        data["options"] = list(question.options)
    return data
