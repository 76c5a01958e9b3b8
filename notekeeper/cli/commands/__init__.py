"""
CLI Commands.

Organized by domain/feature area.
"""

from notekeeper.cli.commands.notes import app as notes_app
from notekeeper.cli.commands.tags import app as tags_app

__all__ = [
    "notes_app",
    "tags_app",
]
