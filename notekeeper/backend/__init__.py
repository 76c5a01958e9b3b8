"""
Backend.

- core/: Configuration, logging, exceptions, database, thread pool
- models/: SQLAlchemy tables
- schemas/: Pydantic note and tag schemas
- repositories/: SQLAlchemy data access
- storage/: Backing media (file, SQLite)
- services/: NoteStore and TagService
"""
