"""
notekeeper.

- backend/: Note store, backing media, tags, configuration
- cli/: Command-line shell (Typer + Rich)
"""
