"""
Tests for the Ulpan Drill web API.
"""

import os
from typing import Any, Generator

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

os.environ["TEST_MODE"] = "1"

from ulpan_drill import db, pronunciation


@pytest.fixture
def client(tmp_path: Any) -> Generator[Any, None, None]:
    """Create a Flask test client backed by a transient SQLite DB."""
    db_path = str(tmp_path / "test_app.db")
    db.engine = create_engine(f"sqlite:///{db_path}")
    db.SessionLocal = sessionmaker(bind=db.engine, expire_on_commit=False)
    db.Base.metadata.create_all(bind=db.engine)
    pronunciation.set_client(None)

    # Import app after setting TEST_MODE
    import app as flask_app
    flask_app.app.config["TESTING"] = True
    with flask_app.app.test_client() as c:
        with flask_app.app.app_context():
            yield c


def _add(client: Any, primary: str, target: str, transcription: str = "") -> dict:
    resp = client.post("/api/words", json={
        "primary_text": primary,
        "target_text": target,
        "transcription": transcription,
    })
    assert resp.status_code == 201
    return resp.get_json()["word"]


def test_index_on_empty_dictionary(client: Any) -> None:
    resp = client.get("/")
    assert resp.status_code == 200
    data = resp.get_json()
    assert data["status"] == "success"
    assert data["word_count"] == 0
    assert data["stats"]["accuracy_percent"] == 0


def test_word_crud(client: Any) -> None:
    word = _add(client, "дом, здание", "בית", "bayit")
    assert word["primary_variants"] == ["дом", "здание"]
    assert word["progress"]["total"] == 0

    resp = client.put(f"/api/words/{word['id']}", json={"target_text": "בית, בניין"})
    assert resp.status_code == 200
    assert resp.get_json()["word"]["target_variants"] == ["בית", "בניין"]

    listing = client.get("/api/words").get_json()["words"]
    assert [w["id"] for w in listing] == [word["id"]]

    assert client.delete(f"/api/words/{word['id']}").status_code == 200
    assert client.delete(f"/api/words/{word['id']}").status_code == 404
    assert client.get("/api/words").get_json()["words"] == []


def test_add_word_validation(client: Any) -> None:
    resp = client.post("/api/words", json={"primary_text": "дом"})
    assert resp.status_code == 400
    assert resp.get_json()["status"] == "error"


def test_non_string_fields_are_coerced(client: Any) -> None:
    resp = client.post("/api/words", json={"primary_text": 5, "target_text": "בית"})
    assert resp.status_code == 201
    word = resp.get_json()["word"]
    assert word["primary_text"] == "5"
    assert word["primary_variants"] == ["5"]

    resp = client.put(f"/api/words/{word['id']}", json={"target_text": 12, "transcription": None})
    assert resp.status_code == 200
    assert resp.get_json()["word"]["target_text"] == "12"
    assert resp.get_json()["word"]["transcription"] == ""


def test_null_field_is_blank(client: Any) -> None:
    resp = client.post("/api/words", json={"primary_text": None, "target_text": "בית"})
    assert resp.status_code == 400


def test_app_has_no_session_secret(client: Any) -> None:
    import app as flask_app
    assert flask_app.app.secret_key is None


def test_question_on_empty_dictionary(client: Any) -> None:
    data = client.get("/api/question?mode=input").get_json()
    assert data["status"] == "empty"


def test_question_unknown_mode(client: Any) -> None:
    resp = client.get("/api/question?mode=quiz4")
    assert resp.status_code == 400


def test_multiple_choice_question(client: Any) -> None:
    _add(client, "дом", "בית")
    data = client.get("/api/question?mode=multiple_choice").get_json()
    assert data["status"] == "success"
    question = data["question"]
    assert len(question["options"]) == 4
    assert question["options"].count("—") == 3


def test_answer_flow_and_adaptive_review(client: Any) -> None:
    word = _add(client, "вода", "מים", "mayim")

    question = client.get("/api/question?mode=adaptive_review").get_json()
    assert question["status"] == "success"
    assert question["question"]["word_id"] == word["id"]

    resp = client.post("/api/answer", json={
        "word_id": word["id"],
        "mode": "input",
        "direction": "primary_to_target",
        "answer": "  מים ",
    })
    data = resp.get_json()
    assert data["status"] == "success"
    assert data["correct"] is True
    assert data["word"]["level"] == 2
    assert data["word"]["progress"]["correct"] == 1
    assert data["speech_url"] is None

    # Just answered, so nothing is due any more
    data = client.get("/api/question?mode=adaptive_review").get_json()
    assert data["status"] == "nothing_due"


def test_wrong_answer_shows_expected(client: Any) -> None:
    word = _add(client, "мой, моя", "שלי")
    data = client.post("/api/answer", json={
        "word_id": word["id"],
        "mode": "multiple_choice",
        "direction": "target_to_primary",
        "option": "моя",
    }).get_json()
    assert data["correct"] is False
    assert data["expected"] == "мой"
    assert data["word"]["level"] == 1
    assert data["word"]["wrong"] == 1


def test_flashcard_answer(client: Any) -> None:
    word = _add(client, "хлеб", "לחם")
    data = client.post("/api/answer", json={
        "word_id": word["id"],
        "mode": "flashcard",
        "direction": "target_to_primary",
        "knew": True,
    }).get_json()
    assert data["correct"] is True
    assert data["expected"] == "хлеб"


def test_answer_validation(client: Any) -> None:
    word = _add(client, "хлеб", "לחם")
    resp = client.post("/api/answer", json={"word_id": word["id"], "mode": "input", "direction": "ru-he"})
    assert resp.status_code == 400
    resp = client.post("/api/answer", json={"word_id": "missing", "mode": "input", "direction": "primary_to_target"})
    assert resp.status_code == 404


def test_stats_endpoint(client: Any) -> None:
    first = _add(client, "дом", "בית")
    _add(client, "вода", "מים")
    for answer in ("בית", "בית", "בית", "xxx"):
        client.post("/api/answer", json={
            "word_id": first["id"],
            "mode": "input",
            "direction": "primary_to_target",
            "answer": answer,
        })
    stats = client.get("/api/stats").get_json()["stats"]
    assert stats == {
        "total_correct": 3,
        "total_wrong": 1,
        "total_answers": 4,
        "accuracy_percent": 75,
    }


def test_speak_without_tts(client: Any) -> None:
    word = _add(client, "дом", "בית")
    resp = client.get(f"/api/speak/{word['id']}")
    assert resp.status_code == 503


def test_speak_with_tts(client: Any) -> None:
    from unittest.mock import MagicMock

    fake = MagicMock()
    fake.audio.speech.create.return_value.read.return_value = b"ID3fake"
    pronunciation.set_client(fake)
    try:
        word = _add(client, "дом", "בית")
        resp = client.get(f"/api/speak/{word['id']}")
        assert resp.status_code == 200
        assert resp.mimetype == "audio/mpeg"
        assert resp.data == b"ID3fake"
        kwargs = fake.audio.speech.create.call_args.kwargs
        assert kwargs["input"] == "בית"
    finally:
        pronunciation.set_client(None)
