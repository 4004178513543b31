"""
Database Feature Module - journal data access over Supabase.

Usage:
    from app.features.database import JournalsRepository, create_user_client

    journals = JournalsRepository.for_user(access_token)
    entry = journals.get_by_id(journal_id)
"""

from app.features.database.client import create_user_client
from app.features.database.repositories.journals import JournalsRepository

__all__ = [
    "JournalsRepository",
    "create_user_client",
]
