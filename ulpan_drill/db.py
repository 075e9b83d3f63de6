from __future__ import annotations
from sqlalchemy import create_engine, BigInteger, DateTime, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, sessionmaker, Session, Mapped, mapped_column
import datetime
import os
import threading
from typing import Optional, List, Any, Dict

from .scheduler import apply_answer, now_ms
from .structured import (
    LEGACY_PRIMARY_KEY,
    LEGACY_TARGET_KEY,
    LEGACY_TRANSCRIPTION_KEY,
    Word,
    edit_word,
    make_word,
    word_from_record,
)

DEBUG_MODE = os.getenv("DEBUG", "0") == "1"


class Base(DeclarativeBase):
    pass
DB_PATH: str = os.environ.get("ULPAN_DB", "ulpan_dictionary.db")
engine = create_engine(f"sqlite:///{DB_PATH}")
# Prevent attribute expiration on commit so returned objects remain accessible
SessionLocal = sessionmaker(bind=engine, expire_on_commit=False)

# Answer recording is a read-modify-write on one row; serialize it
_write_lock = threading.Lock()


class WordRow(Base):
    __tablename__ = "words"
    id: Mapped[str] = mapped_column(String, primary_key=True)
    position: Mapped[int] = mapped_column(Integer, default=0)  # insertion order
    primary_text: Mapped[str] = mapped_column(Text, nullable=False, default="")
    target_text: Mapped[str] = mapped_column(Text, nullable=False, default="")
    transcription: Mapped[str] = mapped_column(Text, nullable=False, default="")
    # Progress and scheduling state
    correct: Mapped[int] = mapped_column(Integer, default=0)
    wrong: Mapped[int] = mapped_column(Integer, default=0)
    level: Mapped[int] = mapped_column(Integer, default=1)
    due_at: Mapped[int] = mapped_column(BigInteger, default=0)  # epoch ms, 0 = due now
    created_at: Mapped[datetime.datetime] = mapped_column(DateTime, default=lambda: datetime.datetime.now(datetime.UTC))


def is_db_initialized() -> bool:
    """Check if the database is already initialized by checking if tables exist."""
    from sqlalchemy import inspect
    inspector = inspect(engine)
    return "words" in set(inspector.get_table_names())


def init_db() -> None:
    """Initialize the database by creating all tables."""
    Base.metadata.create_all(bind=engine)


def use_database(path: str) -> None:
    """Point the store at another SQLite file."""
    global DB_PATH, engine, SessionLocal
    DB_PATH = path
    engine = create_engine(f"sqlite:///{path}")
    SessionLocal = sessionmaker(bind=engine, expire_on_commit=False)


def get_session() -> Session:
    return SessionLocal()


def _next_position(session: Session) -> int:
    from sqlalchemy import func
    current = session.query(func.max(WordRow.position)).scalar()
    return (current or 0) + 1


def _row_to_record(row: WordRow) -> Dict[str, Any]:
    return {
        "id": row.id,
        "primary_text": row.primary_text,
        "target_text": row.target_text,
        "transcription": row.transcription,
        "correct": row.correct,
        "wrong": row.wrong,
        "level": row.level,
        "due_at": row.due_at,
    }


def _copy_word_to_row(word: Word, row: WordRow) -> None:
    row.primary_text = word.primary_text
    row.target_text = word.target_text
    row.transcription = word.transcription
    row.correct = word.stats.correct
    row.wrong = word.stats.wrong
    row.level = word.review.level
    row.due_at = word.review.due_at


def load_records() -> List[Dict[str, Any]]:
    """Raw records in insertion order."""
    session: Session = get_session()
    rows = session.query(WordRow).order_by(WordRow.position.asc(), WordRow.created_at.asc()).all()
    records = [_row_to_record(row) for row in rows]
    session.close()
    return records


def load_words() -> List[Word]:
    """Load the whole dictionary as :class:`Word` objects."""
    words = [word_from_record(record) for record in load_records()]
    if DEBUG_MODE:
        print(f"📚 Loaded {len(words)} words from {DB_PATH}")
    return words


def get_word(word_id: str) -> Optional[Word]:
    session: Session = get_session()
    row: Optional[WordRow] = session.get(WordRow, str(word_id))
    session.close()
    if row is None:
        return None
    return word_from_record(_row_to_record(row))


def add_word(primary_text: str, target_text: str, transcription: str = "") -> Optional[Word]:
    """Add a word pair. Returns the new word, or None if either side is blank."""
    if not (primary_text or "").strip() or not (target_text or "").strip():
        print("⚠️ Both the primary and the target text are required")
        return None

    word = make_word(primary_text, target_text, transcription)
    session: Session = get_session()
    row = WordRow(id=word.id, position=_next_position(session))
    _copy_word_to_row(word, row)
    session.add(row)
    session.commit()
    session.close()
    if DEBUG_MODE:
        print(f"✅ Added word {word.id}: {primary_text} / {target_text}")
    return word


def update_word(word_id: str, primary_text: str, target_text: str, transcription: str = "") -> Optional[Word]:
    """Edit the texts of a word, keeping its progress. Returns None if not found or blank."""
    if not (primary_text or "").strip() or not (target_text or "").strip():
        print("⚠️ Both the primary and the target text are required")
        return None

    session: Session = get_session()
    row: Optional[WordRow] = session.get(WordRow, str(word_id))
    if row is None:
        session.close()
        return None
    updated = edit_word(word_from_record(_row_to_record(row)), primary_text, target_text, transcription)
    _copy_word_to_row(updated, row)
    session.commit()
    session.close()
    return updated


def delete_word(word_id: str) -> bool:
    session: Session = get_session()
    row: Optional[WordRow] = session.get(WordRow, str(word_id))
    if row is None:
        session.close()
        return False
    session.delete(row)
    session.commit()
    session.close()
    if DEBUG_MODE:
        print(f"🗑️ Deleted word {word_id}")
    return True


def save_word(word: Word) -> None:
    """Persist the full state of ``word``, inserting it if it is new."""
    session: Session = get_session()
    row: Optional[WordRow] = session.get(WordRow, word.id)
    if row is None:
        row = WordRow(id=word.id, position=_next_position(session))
        session.add(row)
    _copy_word_to_row(word, row)
    session.commit()
    session.close()


def record_answer(word_id: str, was_correct: bool, now: Optional[int] = None) -> Optional[Word]:
    """Count an answer for a word and reschedule its next review.

    Returns the updated word, or None if the word no longer exists.
    """
    if now is None:
        now = now_ms()
    with _write_lock:
        session: Session = get_session()
        row: Optional[WordRow] = session.get(WordRow, str(word_id))
        if row is None:
            session.close()
            return None
        updated = apply_answer(word_from_record(_row_to_record(row)), was_correct, now)
        _copy_word_to_row(updated, row)
        session.commit()
        session.close()
    if DEBUG_MODE:
        print(f"📅 Word {word_id}: level {updated.review.level}, due at {updated.review.due_at}")
    return updated


def import_words_csv(csv_path: str) -> int:
    """Import word pairs from CSV. Skips pairs that already exist.
    Returns the number of newly imported rows.

    Columns: ``primary``, ``target`` and optional ``transcription``, or the
    legacy export names (``Russian text``, ``Hebrew text``, ``transcription text``).
    """
    import csv

    session: Session = get_session()
    existing = {(r.primary_text, r.target_text) for r in session.query(WordRow).all()}
    imported = 0
    position = _next_position(session)

    with open(csv_path, "r", encoding="utf-8-sig") as f:
        reader = csv.DictReader(f)
        for row in reader:
            primary = (row.get("primary") or row.get(LEGACY_PRIMARY_KEY) or "").strip()
            target = (row.get("target") or row.get(LEGACY_TARGET_KEY) or "").strip()
            transcription = (row.get("transcription") or row.get(LEGACY_TRANSCRIPTION_KEY) or "").strip()
            if not primary or not target:
                continue
            if (primary, target) in existing:
                continue

            word = make_word(primary, target, transcription)
            entry = WordRow(id=word.id, position=position)
            _copy_word_to_row(word, entry)
            session.add(entry)
            existing.add((primary, target))
            position += 1
            imported += 1

    session.commit()
    session.close()
    print(f"✅ Imported {imported} words")
    return imported
