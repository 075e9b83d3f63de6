"""
Text-to-speech for the target language.

The drill core never calls this module. The CLI and the web app speak the
target-language side of a word after an answer has been evaluated, or when
the learner asks for it.
"""
import os
from typing import Any, Optional

from openai import OpenAI

from .structured import Word

DEBUG_MODE = os.getenv("DEBUG", "0") == "1"
TEST_MODE = os.environ.get("TEST_MODE", "0") == "1"

TTS_MODEL = os.environ.get("ULPAN_TTS_MODEL", "gpt-4o-mini-tts")
TTS_VOICE = os.environ.get("ULPAN_TTS_VOICE", "alloy")
TARGET_LANG = os.environ.get("ULPAN_TARGET_LANG", "he-IL")

# Initialize OpenAI client (only if API key is present)
_client: Optional[Any] = None
if "OPENAI_API_KEY" in os.environ and not TEST_MODE:
    _client = OpenAI(api_key=os.environ["OPENAI_API_KEY"])


def set_client(client: Optional[Any]) -> None:
    """Replace the speech client (``None`` disables speech)."""
    global _client
    _client = client


def is_available() -> bool:
    return _client is not None


def speak(text: str, lang: str = TARGET_LANG) -> Optional[bytes]:
    """Synthesize ``text`` and return MP3 bytes, or None when speech is not configured."""
    if _client is None or not (text or "").strip():
        return None

    if DEBUG_MODE:
        print(f"🔊 TTS request: model={TTS_MODEL}, voice={TTS_VOICE}, lang={lang}, {len(text)} chars")

    try:
        response = _client.audio.speech.create(
            model=TTS_MODEL,
            voice=TTS_VOICE,
            input=text,
            instructions=f"Pronounce clearly in {lang}.",
            response_format="mp3",
        )
        return bytes(response.read())
    except Exception as e:
        print(f"❌ Speech synthesis failed: {str(e)} ({type(e).__name__})")
        raise


def speak_word(word: Word) -> Optional[bytes]:
    """Always the target-language side, whatever direction was asked."""
    return speak(word.target_text, TARGET_LANG)
