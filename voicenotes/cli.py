"""Command line interface for the voicenotes pipeline."""

import json
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Iterator, Optional

import typer

from voicenotes import __version__
from voicenotes.models.records import Note
from voicenotes.pipeline import VoiceNotePipeline
from voicenotes.transcription import DEFAULT_MIME_TYPE
from voicenotes.utils.config import get_settings
from voicenotes.utils.exceptions import VoiceNotesError
from voicenotes.utils.logger import setup_logging_from_settings
from voicenotes.utils.text import folder_key

app = typer.Typer(add_completion=False, help="Route voice notes into notes, todos and folders.")

AUDIO_MIME_TYPES = {
    ".wav": "audio/wav",
    ".mp3": "audio/mpeg",
    ".m4a": "audio/mp4",
    ".webm": "audio/webm",
    ".ogg": "audio/ogg",
    ".flac": "audio/flac",
}


def _build_pipeline() -> VoiceNotePipeline:
    return VoiceNotePipeline()


def _format_timestamp(value: datetime) -> str:
    return value.astimezone().strftime("%Y-%m-%d %H:%M")


@contextmanager
def _report_errors() -> Iterator[None]:
    try:
        yield
    except VoiceNotesError as exc:
        typer.secho(f"Error: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc


def _print_notes(notes: list[Note], empty_message: str) -> None:
    if not notes:
        typer.echo(empty_message)
        return
    header = f"{'ID':<32}  {'Created':<16}  Content"
    typer.echo(header)
    typer.echo("-" * len(header))
    for note in notes:
        typer.echo(f"{note.id:<32}  {_format_timestamp(note.created_at):<16}  {note.content}")


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: bool = typer.Option(False, "--version", "-v", help="Show version and exit"),
) -> None:
    if version:
        typer.echo(f"voicenotes v{__version__}")
        raise typer.Exit()

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()

    setup_logging_from_settings()


@app.command()
def process(
    audio: Path = typer.Argument(..., exists=True, readable=True, help="Path to the audio file."),
    mime: Optional[str] = typer.Option(None, "--mime", help="MIME type; guessed from the extension."),
) -> None:
    """Create a placeholder for a recording, then transcribe, classify and route it."""

    mime_type = mime or AUDIO_MIME_TYPES.get(audio.suffix.lower(), DEFAULT_MIME_TYPE)
    with _report_errors(), _build_pipeline() as pipeline:
        outcome = pipeline.capture(audio.read_bytes(), mime_type)

    if outcome.todo_id:
        typer.secho(f"Added todo {outcome.todo_id}.", fg=typer.colors.GREEN)
        return
    if outcome.folder_created:
        typer.secho(f"Created folder {outcome.folder_id}.", fg=typer.colors.BLUE)
    where = f" in folder {outcome.folder_id}" if outcome.folder_id else ""
    typer.secho(f"Saved note {outcome.note_id}{where}.", fg=typer.colors.GREEN)


@app.command()
def classify(text: str = typer.Argument(..., help="Transcript text to classify.")) -> None:
    """Print the decision for a piece of text without storing anything."""

    with _report_errors(), _build_pipeline() as pipeline:
        decision = pipeline.classify(text)
    typer.echo(json.dumps(decision.to_payload(), indent=2))


@app.command()
def notes(
    folder: Optional[str] = typer.Option(None, "--folder", help="Only show notes in this folder."),
) -> None:
    """List finalized notes, newest first."""

    with _report_errors():
        store = _build_pipeline().store
        folder_id = None
        if folder is not None:
            key = folder_key(folder)
            matches = [f for f in store.list_folders() if folder_key(f.name) == key]
            if not matches:
                typer.secho(f"No folder named {folder!r}.", fg=typer.colors.RED, err=True)
                raise typer.Exit(code=1)
            folder_id = matches[0].id
        rows = [note for note in store.list_notes(folder_id) if not note.is_pending]

    _print_notes(rows, "No notes found.")


@app.command()
def pending() -> None:
    """List placeholders left behind by failed runs."""

    with _report_errors():
        rows = _build_pipeline().store.list_pending()
    _print_notes(rows, "No pending placeholders.")


@app.command()
def todos() -> None:
    """List todos, newest first."""

    with _report_errors():
        rows = _build_pipeline().store.list_todos()

    if not rows:
        typer.echo("No todos found.")
        return
    for todo in rows:
        mark = "x" if todo.done else " "
        typer.echo(f"[{mark}] {todo.id}  {todo.text}")


@app.command()
def folders() -> None:
    """List folders, newest first."""

    with _report_errors():
        rows = _build_pipeline().store.list_folders()

    if not rows:
        typer.echo("No folders found.")
        return
    for folder in rows:
        typer.echo(f"{folder.id}  {folder.name}")


@app.command()
def toggle(todo_id: str = typer.Argument(..., help="Todo to mark done or not done.")) -> None:
    """Flip a todo between done and not done."""

    with _report_errors():
        todo = _build_pipeline().store.toggle_todo(todo_id)
    state = "done" if todo.done else "not done"
    typer.secho(f"Todo {todo.id} marked {state}.", fg=typer.colors.GREEN)


@app.command("delete-todo")
def delete_todo(todo_id: str = typer.Argument(..., help="Todo to delete.")) -> None:
    """Delete a todo."""

    with _report_errors():
        _build_pipeline().store.delete_todo(todo_id)
    typer.secho(f"Deleted todo {todo_id}.", fg=typer.colors.GREEN)


@app.command("delete-note")
def delete_note(note_id: str = typer.Argument(..., help="Note or placeholder to delete.")) -> None:
    """Delete a note, including an orphaned placeholder."""

    with _report_errors():
        _build_pipeline().store.delete_note(note_id)
    typer.secho(f"Deleted note {note_id}.", fg=typer.colors.GREEN)


@app.command()
def check() -> None:
    """Report missing configuration."""

    settings = get_settings()
    missing = settings.validate_required()
    typer.echo(f"Store backend:      {settings.store.backend.value}")
    typer.echo(f"Classifier backend: {settings.classifier.backend.value}")
    if missing:
        typer.secho(
            "Missing configuration: " + ", ".join(missing),
            fg=typer.colors.RED,
            err=True,
        )
        raise typer.Exit(code=1)
    typer.secho("Configuration OK.", fg=typer.colors.GREEN)


if __name__ == "__main__":  # pragma: no cover
    app()
