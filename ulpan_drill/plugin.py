from . import db
from typing import Any

import llm  # type: ignore

hookimpl = llm.hookimpl  # type: ignore


@hookimpl  # type: ignore[misc]
def register_commands(cli: Any) -> None:
    import click
    from . import exercises, evaluation, stats
    from .scheduler import is_due, now_ms
    from .structured import MODES, MODE_INPUT, MODE_MULTIPLE_CHOICE, MODE_FLASHCARD, Question

    @cli.command("ud-init-db")  # type: ignore[misc]
    def init_db() -> None:
        """Initialize the dictionary database."""
        db.init_db()
        click.echo("Database initialized.")

    @cli.command("ud-add-word")  # type: ignore[misc]
    @click.argument("primary")
    @click.argument("target")
    @click.option("--transcription", default="", help="Pronunciation aid for the target text")
    def add_word(primary: str, target: str, transcription: str) -> None:
        """Add a word pair. Separate alternative answers with commas."""
        db.init_db()
        word = db.add_word(primary, target, transcription)
        if word:
            click.echo(f"Word '{primary}' / '{target}' added (id {word.id}).")
        else:
            click.echo("Both sides of the word pair are required.")

    @cli.command("ud-edit-word")  # type: ignore[misc]
    @click.argument("word_id")
    @click.option("--primary", default=None, help="New primary text")
    @click.option("--target", default=None, help="New target text")
    @click.option("--transcription", default=None, help="New transcription")
    def edit_word(word_id: str, primary: Any, target: Any, transcription: Any) -> None:
        """Edit a word's texts. Progress and review state are kept."""
        db.init_db()
        current = db.get_word(word_id)
        if current is None:
            click.echo(f"Word '{word_id}' not found.")
            return
        updated = db.update_word(
            word_id,
            primary if primary is not None else current.primary_text,
            target if target is not None else current.target_text,
            transcription if transcription is not None else current.transcription,
        )
        if updated:
            click.echo(f"Word {word_id} updated: '{updated.primary_text}' / '{updated.target_text}'.")
        else:
            click.echo("Both sides of the word pair are required.")

    @cli.command("ud-delete-word")  # type: ignore[misc]
    @click.argument("word_id")
    @click.option("--yes", is_flag=True, help="Do not ask for confirmation")
    def delete_word(word_id: str, yes: bool) -> None:
        """Delete a word from the dictionary."""
        db.init_db()
        if not yes and not click.confirm(f"Delete word {word_id}?"):
            click.echo("Cancelled.")
            return
        if db.delete_word(word_id):
            click.echo(f"Word {word_id} deleted.")
        else:
            click.echo(f"Word '{word_id}' not found.")

    @cli.command("ud-list")  # type: ignore[misc]
    def list_words() -> None:
        """Show the dictionary with per-word progress."""
        db.init_db()
        words = db.load_words()
        click.echo(f"Dictionary ({len(words)} words)")
        for word in words:
            progress = stats.word_progress(word)
            line = f"  {word.id}  {word.primary_text} — {word.target_text}"
            if word.transcription:
                line += f" [{word.transcription}]"
            click.echo(line)
            if progress["total"] == 0:
                click.echo("      no answers yet")
            else:
                click.echo(
                    f"      correct: {progress['correct']}, wrong: {progress['wrong']} "
                    f"({progress['percent']}%, {progress['band']}), level {word.review.level}"
                )

    @cli.command("ud-stats")  # type: ignore[misc]
    def show_stats() -> None:
        """Show overall answer accuracy."""
        db.init_db()
        words = db.load_words()
        now = now_ms()
        totals = stats.collection_accuracy(words)
        due = sum(1 for w in words if is_due(w.review, now))
        click.echo(f"Words: {len(words)} ({due} due for review)")
        click.echo(f"  Correct answers: {totals.total_correct}")
        click.echo(f"  Wrong answers: {totals.total_wrong}")
        click.echo(f"  Accuracy: {totals.accuracy_percent}%")

    @cli.command("ud-import-csv")  # type: ignore[misc]
    @click.argument("csv_path", type=click.Path(exists=True, dir_okay=False))
    def import_csv(csv_path: str) -> None:
        """Import word pairs from a CSV file (primary, target, transcription)."""
        db.init_db()
        count = db.import_words_csv(csv_path)
        click.echo(f"Imported {count} words.")

    def _ask(question: Question) -> Any:
        """Prompt for one question and return its evaluation."""
        word, direction = question.word, question.direction
        click.echo("")
        click.echo(f"Translate: {exercises.prompt_text(word, direction)}")

        if question.mode == MODE_MULTIPLE_CHOICE:
            options = question.options or []
            for index, option in enumerate(options, start=1):
                click.echo(f"  {index}. {option}")
            choice = click.prompt("Your choice", type=click.IntRange(1, len(options)))
            return evaluation.evaluate_choice(word, direction, options[choice - 1])

        if question.mode == MODE_FLASHCARD:
            click.prompt("Press Enter to flip the card", default="", show_default=False)
            click.echo(f"Answer: {exercises.answer_text(word, direction)}")
            knew_it = click.confirm("Did you know it?", default=False)
            return evaluation.evaluate_flashcard(word, direction, knew_it)

        answer = click.prompt("Your answer", type=str)
        return evaluation.evaluate_typed(word, direction, answer)

    @cli.command("ud-drill")  # type: ignore[misc]
    @click.option("--mode", type=click.Choice(MODES), default=MODE_INPUT, help="Quiz mode")
    @click.option("--rounds", type=int, default=10, help="Number of questions")
    def drill(mode: str, rounds: int) -> None:
        """Run a drill session and reschedule every answered word."""
        db.init_db()
        answered = 0
        for _ in range(rounds):
            words = db.load_words()
            question = exercises.build_question(words, mode, now_ms())
            if not isinstance(question, Question):
                click.echo(question.message)
                break

            result = _ask(question)
            db.record_answer(question.word.id, result.correct)
            answered += 1
            if result.correct:
                click.echo("✔ Correct!")
            elif mode != MODE_FLASHCARD:
                click.echo(f"✘ Wrong. Correct answer: {result.expected_display_text}")

        if answered:
            totals = stats.collection_accuracy(db.load_words())
            click.echo(f"\nSession over: {answered} answered. Overall accuracy {totals.accuracy_percent}%.")
