from unittest.mock import MagicMock

import pytest

from ulpan_drill import pronunciation
from ulpan_drill.structured import make_word


@pytest.fixture
def fake_client():
    client = MagicMock()
    client.audio.speech.create.return_value.read.return_value = b"mp3-bytes"
    pronunciation.set_client(client)
    yield client
    pronunciation.set_client(None)


def test_speak_without_client_returns_none():
    pronunciation.set_client(None)
    assert pronunciation.is_available() is False
    assert pronunciation.speak("שלום") is None


def test_speak_word_uses_target_text(fake_client):
    word = make_word("привет", "שלום", "shalom")
    assert pronunciation.speak_word(word) == b"mp3-bytes"
    kwargs = fake_client.audio.speech.create.call_args.kwargs
    assert kwargs["input"] == "שלום"
    assert kwargs["model"] == pronunciation.TTS_MODEL
    assert pronunciation.TARGET_LANG in kwargs["instructions"]


def test_speak_blank_text_skips_request(fake_client):
    assert pronunciation.speak("   ") is None
    fake_client.audio.speech.create.assert_not_called()


def test_speak_propagates_errors(fake_client):
    fake_client.audio.speech.create.side_effect = RuntimeError("boom")
    with pytest.raises(RuntimeError):
        pronunciation.speak("שלום")
