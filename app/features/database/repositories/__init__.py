"""Database Repositories - Organized data access."""

from app.features.database.repositories.journals import JournalsRepository

__all__ = [
    "JournalsRepository",
]
