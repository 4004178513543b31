"""
Journals Repository - Journal data access operations.

Handles the journal operations the analysis pipeline and the edit flow need:
- Reading one journal (the authoritative record after an edit or analysis)
- Creating an entry and editing its text
- Writing a complete analysis result
- Acknowledging that the therapy note was read

Text writes and analysis writes are separate commits. Errors are raised as
PersistenceFailure with the underlying message.
"""

import logging
from typing import Any, Callable, Optional

from pydantic import ValidationError

from app.features.analysis.models import AnalysisResult, JournalEntry
from app.features.database.client import create_user_client
from app.shared.errors import PersistenceFailure

logger = logging.getLogger("Journal.Database.Journals")

TABLE = "journals"


class JournalsRepository:
    """Repository for journal operations."""

    def __init__(self, client=None, client_factory: Optional[Callable[[], Any]] = None):
        """
        Initialize with a user-scoped Supabase client, or a factory for one.

        With a factory the client is only built on first query, so requests
        rejected before touching the table never need Supabase.
        """
        if client is None and client_factory is None:
            raise ValueError("client or client_factory is required")
        self._client = client
        self._client_factory = client_factory

    @classmethod
    def for_user(cls, access_token: str) -> "JournalsRepository":
        """Repository acting as ``access_token``'s user, connecting lazily."""
        return cls(client_factory=lambda: create_user_client(access_token))

    @property
    def client(self):
        if self._client is None:
            self._client = self._client_factory()
        return self._client

    def get_by_id(self, journal_id: str) -> Optional[JournalEntry]:
        """Get a journal by ID; None if it does not exist or is not visible."""
        try:
            result = self.client.table(TABLE).select("*").eq("id", journal_id).execute()
        except Exception as e:
            logger.error(f"Error getting journal {journal_id}: {e}")
            raise PersistenceFailure(str(e), operation="select") from e
        return _to_entry(result.data[0], "select") if result.data else None

    def create(self, user_id: str, entry_text: str) -> JournalEntry:
        """Insert a new, unanalysed entry."""
        try:
            result = self.client.table(TABLE).insert({
                "user_id": user_id,
                "entry_text": entry_text,
            }).execute()
        except Exception as e:
            logger.error(f"Error creating journal: {e}")
            raise PersistenceFailure(str(e), operation="insert") from e

        if not result.data:
            raise PersistenceFailure("Journal insert returned no row", operation="insert")
        entry = _to_entry(result.data[0], "insert")
        logger.info(f"Journal created: {entry.id}")
        return entry

    def update_text(self, journal_id: str, entry_text: str) -> JournalEntry:
        """Replace the entry text; existing analysis stays until a new one lands."""
        try:
            result = self.client.table(TABLE).update(
                {"entry_text": entry_text}
            ).eq("id", journal_id).execute()
        except Exception as e:
            logger.error(f"Error updating journal text {journal_id}: {e}")
            raise PersistenceFailure(str(e), operation="update") from e

        if not result.data:
            raise PersistenceFailure(f"Journal {journal_id} not found", operation="update")
        logger.info(f"Updated journal text {journal_id}")
        return _to_entry(result.data[0], "update")

    def write_analysis(self, journal_id: str, analysis: AnalysisResult) -> None:
        """Write all analysis fields in a single update."""
        try:
            result = self.client.table(TABLE).update(
                analysis.to_record()
            ).eq("id", journal_id).execute()
        except Exception as e:
            logger.error(f"Error writing analysis for journal {journal_id}: {e}")
            raise PersistenceFailure(str(e), operation="update") from e

        if not result.data:
            # Deleted meanwhile, or not owned by the caller; RLS filters silently
            logger.warning(f"Analysis write matched no journal row: {journal_id}")
            return
        logger.info(f"Analysis written for journal {journal_id}")

    def mark_note_viewed(self, journal_id: str) -> None:
        """Record that the reader has seen the current therapy note."""
        try:
            self.client.table(TABLE).update(
                {"therapy_note_viewed": True}
            ).eq("id", journal_id).execute()
        except Exception as e:
            logger.error(f"Error marking note viewed for journal {journal_id}: {e}")
            raise PersistenceFailure(str(e), operation="update") from e


def _to_entry(row: dict, operation: str) -> JournalEntry:
    try:
        return JournalEntry.model_validate(row)
    except ValidationError as e:
        logger.error(f"Journal row failed validation: {e}")
        raise PersistenceFailure(f"Invalid journal row: {e}", operation=operation) from e
