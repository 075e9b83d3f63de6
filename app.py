#!/usr/bin/env python3
"""
Ulpan Drill - Flask Web Application
JSON API for drilling bilingual vocabulary with a five-level review clock.
"""

import os
import sys
import traceback
import argparse
from typing import Any, Dict, Optional

from flask import Flask, Response, jsonify, request

# Check for test mode
TEST_MODE = os.environ.get("TEST_MODE", "0") == "1"

# Add the current directory to the path so we can import our modules
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from ulpan_drill import db, evaluation, exercises, pronunciation, stats
from ulpan_drill.scheduler import is_due, now_ms
from ulpan_drill.structured import (
    DIRECTIONS,
    MODE_FLASHCARD,
    MODE_INPUT,
    MODE_MULTIPLE_CHOICE,
    MODES,
    Question,
    word_to_dict,
)

# Check for debug mode
DEBUG = os.environ.get("DEBUG", "0") == "1"

app = Flask(__name__)


@app.before_request
def initialize_app() -> None:
    """Initialize the database if needed."""
    if not hasattr(app, '_database_initialized'):
        try:
            if not db.is_db_initialized():
                db.init_db()
                print("✅ Database initialized on startup")
        except Exception as e:
            print(f"❌ Database startup check failed: {str(e)}")
        setattr(app, "_database_initialized", True)


def _error(message: str, code: int = 200) -> Any:
    return jsonify({'status': 'error', 'message': message}), code


def _word_payload(word: Any) -> Dict[str, Any]:
    data = word_to_dict(word)
    data['progress'] = stats.word_progress(word)
    return data


def _stats_payload(words: Any) -> Dict[str, Any]:
    totals = stats.collection_accuracy(words)
    return {
        'total_correct': totals.total_correct,
        'total_wrong': totals.total_wrong,
        'total_answers': totals.total_answers,
        'accuracy_percent': totals.accuracy_percent,
    }


@app.route('/')
def index() -> Any:
    """Dashboard summary."""
    try:
        words = db.load_words()
        now = now_ms()
        due_count = sum(1 for w in words if is_due(w.review, now))
        return jsonify({
            'status': 'success',
            'word_count': len(words),
            'due_count': due_count,
            'modes': list(MODES),
            'stats': _stats_payload(words),
        })
    except Exception as e:
        if DEBUG:
            print(f"Error getting stats: {e}")
            traceback.print_exc()
        return _error(f'Error: {str(e)}')


@app.route('/api/words', methods=['GET'])
def api_list_words() -> Any:
    """Whole dictionary with per-word progress."""
    words = db.load_words()
    return jsonify({'status': 'success', 'words': [_word_payload(w) for w in words]})


def _text_field(data: Dict[str, Any], key: str, default: str = '') -> str:
    value = data.get(key, default)
    return '' if value is None else str(value)


@app.route('/api/words', methods=['POST'])
def api_add_word() -> Any:
    try:
        data = request.get_json(silent=True) or {}
        word = db.add_word(
            _text_field(data, 'primary_text'),
            _text_field(data, 'target_text'),
            _text_field(data, 'transcription'),
        )
        if word is None:
            return _error('Both primary_text and target_text are required', 400)
        return jsonify({'status': 'success', 'word': _word_payload(word)}), 201
    except Exception as e:
        if DEBUG:
            print(f"Error adding word: {e}")
            traceback.print_exc()
        return _error(f'Error: {str(e)}')


@app.route('/api/words/<word_id>', methods=['PUT'])
def api_edit_word(word_id: str) -> Any:
    try:
        data = request.get_json(silent=True) or {}
        current = db.get_word(word_id)
        if current is None:
            return _error('Word not found', 404)
        word = db.update_word(
            word_id,
            _text_field(data, 'primary_text', current.primary_text),
            _text_field(data, 'target_text', current.target_text),
            _text_field(data, 'transcription', current.transcription),
        )
        if word is None:
            return _error('Both primary_text and target_text are required', 400)
        return jsonify({'status': 'success', 'word': _word_payload(word)})
    except Exception as e:
        if DEBUG:
            print(f"Error editing word: {e}")
            traceback.print_exc()
        return _error(f'Error: {str(e)}')


@app.route('/api/words/<word_id>', methods=['DELETE'])
def api_delete_word(word_id: str) -> Any:
    if not db.delete_word(word_id):
        return _error('Word not found', 404)
    return jsonify({'status': 'success'})


@app.route('/api/question')
def api_question() -> Any:
    """Build the next question for the requested mode."""
    mode = request.args.get('mode', MODE_INPUT, type=str)
    if mode not in MODES:
        return _error(f'Unknown mode: {mode}', 400)
    try:
        words = db.load_words()
        question = exercises.build_question(words, mode, now_ms())
        if not isinstance(question, Question):
            return jsonify({'status': question.status, 'message': question.message})
        return jsonify({'status': 'success', 'question': exercises.question_to_dict(question)})
    except Exception as e:
        if DEBUG:
            print(f"Error building question: {e}")
            traceback.print_exc()
        return _error(f'Error: {str(e)}')


@app.route('/api/answer', methods=['POST'])
def api_answer() -> Any:
    """Evaluate an answer, count it and reschedule the word."""
    try:
        data = request.get_json(silent=True) or {}
        word_id = str(data.get('word_id', ''))
        mode = data.get('mode', MODE_INPUT)
        direction = data.get('direction')
        if mode not in MODES:
            return _error(f'Unknown mode: {mode}', 400)
        if direction not in DIRECTIONS:
            return _error(f'Unknown direction: {direction}', 400)

        word = db.get_word(word_id)
        if word is None:
            return _error('Word not found', 404)

        if mode == MODE_MULTIPLE_CHOICE:
            result = evaluation.evaluate_choice(word, direction, data.get('option', ''))
        elif mode == MODE_FLASHCARD:
            result = evaluation.evaluate_flashcard(word, direction, bool(data.get('knew')))
        else:
            result = evaluation.evaluate_typed(word, direction, data.get('answer', ''))

        updated = db.record_answer(word.id, result.correct)
        if updated is None:
            return _error('Word not found', 404)

        return jsonify({
            'status': 'success',
            'correct': result.correct,
            'expected': result.expected_display_text,
            'word': _word_payload(updated),
            'speech_url': f'/api/speak/{updated.id}' if pronunciation.is_available() else None,
        })
    except Exception as e:
        if DEBUG:
            print(f"Error submitting answer: {e}")
            traceback.print_exc()
        return _error(f'Error: {str(e)}')


@app.route('/api/stats')
def api_stats() -> Any:
    words = db.load_words()
    return jsonify({'status': 'success', 'stats': _stats_payload(words)})


@app.route('/api/speak/<word_id>')
def api_speak(word_id: str) -> Any:
    """Target-language pronunciation of a word as MP3."""
    word = db.get_word(word_id)
    if word is None:
        return _error('Word not found', 404)
    try:
        audio: Optional[bytes] = pronunciation.speak_word(word)
    except Exception as e:
        return _error(f'Speech synthesis failed: {str(e)}', 502)
    if audio is None:
        return _error('Speech synthesis is not configured', 503)
    return Response(audio, mimetype='audio/mpeg')


if __name__ == '__main__':
    parser = argparse.ArgumentParser(description='Ulpan Drill')
    parser.add_argument('--host', default='127.0.0.1', help='Host IP to bind to (default: 127.0.0.1)')
    parser.add_argument('--port', type=int, default=5000, help='Port to bind to (default: 5000)')
    parser.add_argument('--db', help='SQLite database path (overrides ULPAN_DB)')
    args = parser.parse_args()

    if args.db:
        db.use_database(args.db)

    db.init_db()
    print(f"🚀 Starting Ulpan Drill on http://{args.host}:{args.port}")
    app.run(debug=DEBUG, host=args.host, port=args.port)
