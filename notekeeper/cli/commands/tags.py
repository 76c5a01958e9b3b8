"""
Tag Commands.

Create tags and attach them to notes. Tags live in the relational
backend only, so these commands always use the SQLite database.
"""

from collections.abc import Awaitable, Callable
from typing import TypeVar

import typer
from pydantic import ValidationError as PydanticValidationError
from rich.table import Table

from notekeeper.backend.core.database import get_session_factory, init_database
from notekeeper.backend.core.exceptions import NotFoundError
from notekeeper.backend.models.tag import DEFAULT_TAG_COLOR, Tag
from notekeeper.backend.schemas.tag import TagCreate
from notekeeper.backend.services.tag import TagService
from notekeeper.cli.runtime import console, run_command

app = typer.Typer(help="Tag commands (SQLite backend)")

T = TypeVar("T")


async def _with_service(work: Callable[[TagService], Awaitable[T]]) -> T:
    """Run work against a TagService in one committed transaction."""
    await init_database()
    async with get_session_factory()() as session:
        async with session.begin():
            return await work(TagService(session))


async def _require_tag(service: TagService, name: str) -> Tag:
    tag = await service.get_tag_by_name(name)
    if tag is None:
        raise NotFoundError(f"Tag {name!r} not found")
    return tag


def _display_tags(tags: list[Tag], title: str) -> None:
    if not tags:
        console.print("[dim]No tags.[/dim]")
        return

    table = Table(title=title, show_header=True)
    table.add_column("Name", style="cyan")
    table.add_column("Color")
    table.add_column("ID", style="dim")
    for tag in tags:
        table.add_row(tag.name, f"[{tag.color}]■[/] {tag.color}", tag.id)
    console.print(table)


@app.command("list")
def list_tags() -> None:
    """List all tags."""
    tags = run_command(_with_service(lambda service: service.list_tags()))
    _display_tags(tags, "Tags")


@app.command()
def create(
    name: str = typer.Argument(..., help="Tag name"),
    color: str = typer.Option(DEFAULT_TAG_COLOR, "--color", "-c", help="Color as #RRGGBB"),
) -> None:
    """
    Create a tag.

    Examples:
        notekeeper tags create work
        notekeeper tags create urgent -c "#D32F2F"
    """
    try:
        data = TagCreate(name=name, color=color)
    except PydanticValidationError as e:
        console.print(f"[red]Error: {e.errors()[0]['msg']}[/red]")
        raise typer.Exit(1)

    tag = run_command(_with_service(lambda service: service.create_tag(data)))
    console.print(f"[green]Created tag {tag.name}[/green] [dim]({tag.id})[/dim]")


@app.command()
def attach(
    note_id: str = typer.Argument(..., help="Note ID"),
    name: str = typer.Argument(..., help="Tag name"),
) -> None:
    """Attach a tag to a note."""

    async def work(service: TagService) -> bool:
        tag = await _require_tag(service, name)
        if not await service.note_exists(note_id):
            raise NotFoundError(f"Note {note_id} not found")
        return await service.add_tag_to_note(note_id, tag.id)

    if run_command(_with_service(work)):
        console.print(f"[green]Tagged {note_id} with {name}[/green]")
    else:
        console.print(f"[yellow]{note_id} already has tag {name}[/yellow]")


@app.command()
def detach(
    note_id: str = typer.Argument(..., help="Note ID"),
    name: str = typer.Argument(..., help="Tag name"),
) -> None:
    """Remove a tag from a note."""

    async def work(service: TagService) -> bool:
        tag = await _require_tag(service, name)
        return await service.remove_tag_from_note(note_id, tag.id)

    if run_command(_with_service(work)):
        console.print(f"[green]Removed tag {name} from {note_id}[/green]")
    else:
        console.print(f"[yellow]{note_id} does not have tag {name}[/yellow]")


@app.command("note")
def note_tags(note_id: str = typer.Argument(..., help="Note ID")) -> None:
    """Show the tags of a note."""
    tags = run_command(_with_service(lambda service: service.tags_for_note(note_id)))
    _display_tags(tags, f"Tags on {note_id}")


@app.command()
def show(name: str = typer.Argument(..., help="Tag name")) -> None:
    """List the notes carrying a tag."""

    async def work(service: TagService):
        tag = await _require_tag(service, name)
        return await service.notes_for_tag(tag.id)

    notes = run_command(_with_service(work))
    if not notes:
        console.print(f"[dim]No notes tagged {name}.[/dim]")
        return

    table = Table(title=f"Notes tagged {name}", show_header=True)
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Title")
    table.add_column("Updated (UTC)", style="dim")
    for note in notes:
        table.add_row(note.id, note.title or "", f"{note.updated_at:%Y-%m-%d %H:%M:%S}")
    console.print(table)
