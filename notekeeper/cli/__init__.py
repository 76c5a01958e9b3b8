"""
CLI Module.

Command-line shell built with Typer over the note store.

Architecture:
- CLI is a thin presentation layer
- All logic lives in notekeeper.backend
- Each command builds a store, runs one operation, and exits

Usage:
    notekeeper --help
    notekeeper notes list
    notekeeper tags list
"""
