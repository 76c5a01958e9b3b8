"""
CLI Entry Point.

Command-line shell over the note store.
Built with Typer for type-safe commands and Rich for formatted output.

Usage:
    notekeeper --help                              # Show help

    # Notes
    notekeeper notes list                          # List notes, newest first
    notekeeper notes add -t "Buy milk"             # Add a note
    notekeeper notes edit <id> -t "Buy oat milk"   # Replace a note's text
    notekeeper notes delete <id>                   # Delete a note
    notekeeper notes refresh                       # Reload, bypassing the cache

    # Tags (SQLite backend)
    notekeeper tags create work                    # Create a tag
    notekeeper tags attach <note-id> work          # Tag a note

Options:
    --backend         Override storage.yaml backend (file or sqlite)
    --verbose, -v     Enable verbose output
    --debug           Enable debug mode (detailed logging)
"""

from typing import Optional

import typer

from notekeeper.backend.core.config import validate_project_root
from notekeeper.backend.core.logging import setup_logging
from notekeeper.cli.commands import notes_app, tags_app

app = typer.Typer(
    name="notekeeper",
    help="Notes with a cached store over file or SQLite storage.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

app.add_typer(notes_app, name="notes")
app.add_typer(tags_app, name="tags")


@app.callback()
def main(
    ctx: typer.Context,
    backend: Optional[str] = typer.Option(
        None,
        "--backend",
        help="Storage backend: file or sqlite (default from storage.yaml)",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose output"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
) -> None:
    """Notes with a cached store over file or SQLite storage."""
    validate_project_root()

    if backend is not None and backend not in ("file", "sqlite"):
        raise typer.BadParameter("must be 'file' or 'sqlite'", param_hint="--backend")

    if debug:
        setup_logging(level="DEBUG", format_type="console")
    elif verbose:
        setup_logging(level="INFO", format_type="console")
    else:
        setup_logging(level="WARNING")

    ctx.obj = {"backend": backend}


if __name__ == "__main__":
    app()
