from ulpan_drill.structured import (
    ReviewState,
    WordStats,
    edit_word,
    make_word,
    word_from_record,
    word_to_dict,
)


def test_make_word_defaults():
    word = make_word("дом, здание", "בית")
    assert word.primary_variants == ["дом", "здание"]
    assert word.target_variants == ["בית"]
    assert word.transcription == ""
    assert word.stats == WordStats(0, 0)
    assert word.review == ReviewState(level=1, due_at=0)
    assert word.id


def test_make_word_ids_are_unique():
    assert make_word("a", "b").id != make_word("a", "b").id


def test_variants_never_empty():
    word = make_word(" , ", "")
    assert word.primary_variants == [","]
    assert word.target_variants == [""]


def test_edit_word_keeps_progress():
    word = make_word("дом", "בית", word_id="w")
    word.stats = WordStats(4, 2)
    word.review = ReviewState(3, 12345)

    edited = edit_word(word, "здание, дом", "בניין", "binyan")
    assert edited.id == "w"
    assert edited.primary_variants == ["здание", "дом"]
    assert edited.target_variants == ["בניין"]
    assert edited.transcription == "binyan"
    assert edited.stats == WordStats(4, 2)
    assert edited.review == ReviewState(3, 12345)
    # Input word untouched
    assert word.primary_text == "дом"


def test_word_from_legacy_record():
    record = {
        "id": 17,
        "Russian text": "вода",
        "Hebrew text": "מים",
        "transcription text": "mayim",
    }
    word = word_from_record(record)
    assert word.id == "17"
    assert word.primary_text == "вода"
    assert word.target_variants == ["מים"]
    assert word.transcription == "mayim"
    assert word.review == ReviewState(1, 0)


def test_word_from_record_missing_fields():
    word = word_from_record({})
    assert word.primary_text == ""
    assert word.target_text == ""
    assert word.transcription == ""
    assert word.id
    assert word_from_record({}).id != word.id


def test_word_from_record_clamps_state():
    word = word_from_record({
        "id": "x",
        "primary_text": "хлеб",
        "target_text": "לחם",
        "correct": -2,
        "wrong": "3",
        "level": 9,
        "due_at": None,
    })
    assert word.stats == WordStats(correct=0, wrong=3)
    assert word.review == ReviewState(level=5, due_at=0)
    assert word_from_record({"level": 0}).review.level == 1
    assert word_from_record({"level": "junk"}).review.level == 1


def test_word_to_dict_round_trips_through_record():
    word = make_word("книга", "ספר", "sefer", word_id="b1")
    word.stats = WordStats(1, 1)
    word.review = ReviewState(2, 777)
    assert word_from_record(word_to_dict(word)) == word
