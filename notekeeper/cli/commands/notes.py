"""
Note Commands.

List, show, add, edit, delete and refresh notes through the cached store.
"""

from typing import Optional

import typer
from rich.panel import Panel
from rich.table import Table

from notekeeper.backend.core.dependencies import build_note_store
from notekeeper.backend.core.exceptions import NotFoundError
from notekeeper.backend.schemas.note import Note
from notekeeper.backend.services.note_store import DeleteOutcome
from notekeeper.cli.runtime import backend_from, console, run_command

app = typer.Typer(help="Note commands")

_PREVIEW_LENGTH = 60


def _preview(text: str) -> str:
    first_line = text.strip().splitlines()[0] if text.strip() else ""
    if len(first_line) > _PREVIEW_LENGTH:
        return first_line[: _PREVIEW_LENGTH - 1] + "…"
    return first_line


def _display_notes(notes: list[Note]) -> None:
    if not notes:
        console.print("[dim]No notes.[/dim]")
        return

    table = Table(title="Notes", show_header=True)
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Title")
    table.add_column("Updated (UTC)", style="dim")
    table.add_column("Preview")

    for note in notes:
        marker = "📌 " if note.is_pinned else ""
        table.add_row(
            note.id,
            f"{marker}{note.title or ''}",
            f"{note.updated_at:%Y-%m-%d %H:%M:%S}" if note.updated_at else "",
            _preview(note.text),
        )

    console.print(table)


def _display_note(note: Note) -> None:
    console.print(
        Panel(
            note.text or "[dim](empty)[/dim]",
            title=note.title or note.id,
            subtitle=f"{note.storage_key} · {note.updated_at:%Y-%m-%d %H:%M:%S}",
        )
    )


@app.command("list")
def list_notes(ctx: typer.Context) -> None:
    """
    List notes, newest first.

    Examples:
        notekeeper notes list
        notekeeper --backend sqlite notes list
    """
    run_command(_list(backend_from(ctx)))


async def _list(backend: str | None) -> None:
    store = await build_note_store(backend)
    _display_notes(await store.list_notes())


@app.command()
def show(
    ctx: typer.Context,
    note_id: str = typer.Argument(..., help="Note ID"),
) -> None:
    """Show one note in full."""
    run_command(_show(backend_from(ctx), note_id))


async def _show(backend: str | None, note_id: str) -> None:
    store = await build_note_store(backend)
    note = await store.get_by_id(note_id)
    if note is None:
        raise NotFoundError(f"Note {note_id} not found")
    _display_note(note)


@app.command()
def add(
    ctx: typer.Context,
    text: str = typer.Option(..., "--text", "-t", help="Note content"),
    title: Optional[str] = typer.Option(None, "--title", help="Optional title"),
    pinned: bool = typer.Option(False, "--pinned", help="Pin the note"),
) -> None:
    """
    Add a new note.

    Examples:
        notekeeper notes add -t "Buy milk"
        notekeeper notes add -t "Agenda" --title "Monday meeting" --pinned
    """
    run_command(_add(backend_from(ctx), Note(text=text, title=title, is_pinned=pinned)))


async def _add(backend: str | None, note: Note) -> None:
    store = await build_note_store(backend)
    saved = await store.add(note)
    console.print(f"[green]Added note {saved.id}[/green] [dim]({saved.storage_key})[/dim]")


@app.command()
def edit(
    ctx: typer.Context,
    note_id: str = typer.Argument(..., help="Note ID"),
    text: str = typer.Option(..., "--text", "-t", help="New content"),
    title: Optional[str] = typer.Option(None, "--title", help="New title"),
) -> None:
    """Replace the content of a note."""
    run_command(_edit(backend_from(ctx), note_id, text, title))


async def _edit(backend: str | None, note_id: str, text: str, title: str | None) -> None:
    store = await build_note_store(backend)
    current = await store.get_by_id(note_id)
    if current is None:
        raise NotFoundError(f"Note {note_id} not found")

    changes: dict = {"text": text}
    if title is not None:
        changes["title"] = title
    updated = await store.update(current.model_copy(update=changes))
    if updated is None:
        raise NotFoundError(f"Note {note_id} not found")
    console.print(f"[green]Updated note {updated.id}[/green]")


@app.command()
def delete(
    ctx: typer.Context,
    note_id: str = typer.Argument(..., help="Note ID"),
) -> None:
    """Delete a note."""
    run_command(_delete(backend_from(ctx), note_id))


async def _delete(backend: str | None, note_id: str) -> None:
    store = await build_note_store(backend)
    outcome = await store.delete(note_id)
    if outcome is DeleteOutcome.NOT_FOUND:
        console.print(f"[yellow]Note {note_id} not found[/yellow]")
        return
    console.print(f"[green]Deleted note {note_id}[/green]")


@app.command()
def refresh(ctx: typer.Context) -> None:
    """Reload notes from storage, bypassing the cache."""
    run_command(_refresh(backend_from(ctx)))


async def _refresh(backend: str | None) -> None:
    store = await build_note_store(backend)
    _display_notes(await store.force_refresh())
