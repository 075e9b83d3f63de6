import dataclasses
import uuid
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional

from .normalize import normalize, parse_variants

# Quiz modes
MODE_INPUT = "input"
MODE_MULTIPLE_CHOICE = "multiple_choice"
MODE_FLASHCARD = "flashcard"
MODE_ADAPTIVE_REVIEW = "adaptive_review"
MODES = (MODE_INPUT, MODE_MULTIPLE_CHOICE, MODE_FLASHCARD, MODE_ADAPTIVE_REVIEW)

# Quiz directions
PRIMARY_TO_TARGET = "primary_to_target"
TARGET_TO_PRIMARY = "target_to_primary"
DIRECTIONS = (PRIMARY_TO_TARGET, TARGET_TO_PRIMARY)

# Column names used by the legacy dictionary export
LEGACY_PRIMARY_KEY = "Russian text"
LEGACY_TARGET_KEY = "Hebrew text"
LEGACY_TRANSCRIPTION_KEY = "transcription text"


@dataclass
class WordStats:
    correct: int = 0
    wrong: int = 0


@dataclass
class ReviewState:
    level: int = 1
    due_at: int = 0  # epoch ms; 0 means due immediately


@dataclass
class Word:
    id: str
    primary_text: str
    target_text: str
    transcription: str = ""
    primary_variants: List[str] = field(default_factory=list)
    target_variants: List[str] = field(default_factory=list)
    stats: WordStats = field(default_factory=WordStats)
    review: ReviewState = field(default_factory=ReviewState)


@dataclass
class Question:
    word: Word
    mode: str
    direction: str
    options: Optional[List[str]] = None


@dataclass
class Evaluation:
    correct: bool
    expected_display_text: str


@dataclass(frozen=True)
class EmptyCollection:
    """No words exist yet. The caller should show an idle / add-words state."""
    status: str = "empty"
    message: str = "The dictionary is empty. Add at least one word."


@dataclass(frozen=True)
class NothingDueNow:
    """Adaptive review found no due words. The caller should ask to come back later."""
    status: str = "nothing_due"
    message: str = "No words are due for review right now. Come back later."


def variants_for(text: str) -> List[str]:
    """Accepted variants for ``text``, never empty."""
    return parse_variants(text) or [normalize(text)]


def new_word_id() -> str:
    return uuid.uuid4().hex


def _clamp_level(level: Any) -> int:
    try:
        value = int(level)
    except (TypeError, ValueError):
        return 1
    return max(1, min(5, value))


def _count(value: Any) -> int:
    try:
        return max(0, int(value or 0))
    except (TypeError, ValueError):
        return 0


def make_word(primary_text: str, target_text: str, transcription: str = "",
              word_id: Optional[str] = None) -> Word:
    """Shape of a freshly added word: level 1, due immediately, no answers yet."""
    return Word(
        id=word_id or new_word_id(),
        primary_text=primary_text,
        target_text=target_text,
        transcription=transcription or "",
        primary_variants=variants_for(primary_text),
        target_variants=variants_for(target_text),
    )


def edit_word(word: Word, primary_text: str, target_text: str, transcription: str = "") -> Word:
    """Return ``word`` with new texts and recomputed variants; progress is kept."""
    return dataclasses.replace(
        word,
        primary_text=primary_text,
        target_text=target_text,
        transcription=transcription or "",
        primary_variants=variants_for(primary_text),
        target_variants=variants_for(target_text),
    )


def word_from_record(record: Mapping[str, Any]) -> Word:
    """Map a raw Word Store record onto a :class:`Word`.

    Accepts both the store's own column names and the legacy export
    column names. Missing texts become ``""`` and a missing id gets a
    freshly generated one.
    """
    primary = record.get("primary_text")
    if primary is None:
        primary = record.get(LEGACY_PRIMARY_KEY)
    target = record.get("target_text")
    if target is None:
        target = record.get(LEGACY_TARGET_KEY)
    transcription = record.get("transcription")
    if transcription is None:
        transcription = record.get(LEGACY_TRANSCRIPTION_KEY)

    raw_id = record.get("id")
    word_id = str(raw_id) if raw_id not in (None, "") else new_word_id()

    word = make_word(str(primary or ""), str(target or ""), str(transcription or ""), word_id=word_id)
    word.stats = WordStats(correct=_count(record.get("correct")), wrong=_count(record.get("wrong")))
    word.review = ReviewState(level=_clamp_level(record.get("level", 1)), due_at=_count(record.get("due_at")))
    return word


def word_to_dict(word: Word) -> dict[str, Any]:
    """JSON-friendly view of a word, used by the web app and the CLI."""
    return {
        "id": word.id,
        "primary_text": word.primary_text,
        "target_text": word.target_text,
        "transcription": word.transcription,
        "primary_variants": list(word.primary_variants),
        "target_variants": list(word.target_variants),
        "correct": word.stats.correct,
        "wrong": word.stats.wrong,
        "level": word.review.level,
        "due_at": word.review.due_at,
    }
