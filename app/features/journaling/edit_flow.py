"""
Client-side coordination of journal edits and re-analysis.

Per journal entry the reader moves through:

    VIEWING --start_editing--> EDITING --save (non-blank)--> SAVING --> ANALYZING --> VIEWING
                               EDITING --cancel_editing--> VIEWING

Saving commits the new text on its own before analysis starts, so a reader
may briefly see new text with old scores but never new scores on old text.
When analysis finishes, successfully or not, the authoritative record is
reloaded. A record that disappears meanwhile closes the flow for good; it is
never re-created.

``JournalComposer`` covers the other entry point: writing a brand-new entry,
which is saved first and analysed afterwards in the same way.
"""

import logging
from enum import Enum
from typing import Optional, Tuple

from app.features.analysis.models import JournalEntry
from app.features.journaling.analysis_task import (
    AnalysisInvoker,
    AnalysisOutcome,
    AnalysisTask,
    run_analysis,
)
from app.shared.errors import InputValidationFailure, PersistenceFailure

logger = logging.getLogger("Journal.Journaling.EditFlow")


class FlowState(str, Enum):
    VIEWING = "viewing"
    EDITING = "editing"
    SAVING = "saving"
    ANALYZING = "analyzing"
    CLOSED = "closed"  # record deleted; terminal


class FlowStateError(RuntimeError):
    """An action was requested in a state that does not allow it."""


async def _reload_after_analysis(repository, outcome: AnalysisOutcome) -> AnalysisOutcome:
    try:
        journal = repository.get_by_id(outcome.journal_id)
    except Exception as exc:
        # Keep the local copy; the next load() picks up the stored record
        logger.warning(f"Reload after analysis failed for {outcome.journal_id}: {exc}")
        return outcome
    outcome.journal = journal
    outcome.record_deleted = journal is None
    return outcome


class EditReanalysisFlow:
    """
    Edit / re-analysis state machine for one journal entry.

    Args:
        journal_id: Entry to coordinate
        repository: JournalsRepository (or compatible) scoped to the reader
        invoke_analysis: async ``(entry_text, journal_id) -> AnalysisResponse``
    """

    def __init__(self, journal_id: str, repository, invoke_analysis: AnalysisInvoker):
        self.journal_id = journal_id
        self.repository = repository
        self.invoke_analysis = invoke_analysis

        self.state = FlowState.VIEWING
        self.journal: Optional[JournalEntry] = None
        self.draft = ""
        self.analysis_task: Optional[AnalysisTask] = None
        self.last_outcome: Optional[AnalysisOutcome] = None

    # -------------------------------------------------------------------------
    # Reading
    # -------------------------------------------------------------------------

    async def load(self) -> Optional[JournalEntry]:
        """Fetch the authoritative record; closes the flow if it is gone."""
        self._require_open()
        journal = self.repository.get_by_id(self.journal_id)
        if journal is None:
            self._close()
            return None
        self.journal = journal
        if self.state != FlowState.EDITING:
            self.draft = journal.entry_text
        return journal

    @property
    def has_new_insight(self) -> bool:
        return self.journal is not None and self.journal.has_new_insight

    async def acknowledge_note(self) -> bool:
        """
        Mark the current therapy note as viewed.

        Returns:
            True if the flag was written, False if there was nothing to
            acknowledge or the write failed (the flag stays unset locally).
        """
        if self.journal is None or not self.journal.has_new_insight:
            return False
        try:
            self.repository.mark_note_viewed(self.journal_id)
        except PersistenceFailure as exc:
            logger.warning(f"Failed to mark therapy note viewed: {exc.message}")
            return False
        self.journal = self.journal.model_copy(update={"therapy_note_viewed": True})
        return True

    # -------------------------------------------------------------------------
    # Editing
    # -------------------------------------------------------------------------

    def start_editing(self) -> None:
        self._require(FlowState.VIEWING)
        if self.journal is None:
            raise FlowStateError("Journal not loaded")
        self.draft = self.journal.entry_text
        self.state = FlowState.EDITING

    def update_draft(self, text: str) -> None:
        self._require(FlowState.EDITING)
        self.draft = text

    def cancel_editing(self) -> None:
        self._require(FlowState.EDITING)
        self.draft = self.journal.entry_text
        self.state = FlowState.VIEWING

    async def save(self) -> AnalysisTask:
        """
        Commit the draft text, then start re-analysis.

        Returns:
            The in-flight analysis handle

        Raises:
            InputValidationFailure: the draft is blank (stays in EDITING)
            PersistenceFailure: the text write failed (back to EDITING, draft kept)
        """
        self._require(FlowState.EDITING)
        text = self.draft
        if not text.strip():
            raise InputValidationFailure("entry_text is required")

        self.state = FlowState.SAVING
        try:
            self.repository.update_text(self.journal_id, text)
        except PersistenceFailure:
            self.state = FlowState.EDITING
            raise

        # Optimistic: keep the old analysis until the new one lands
        self.journal = self.journal.model_copy(update={"entry_text": text})
        logger.info(f"Entry text saved, analyzing journal {self.journal_id}")
        return self._start_analysis(text)

    def retry_analysis(self) -> AnalysisTask:
        """Run analysis again on the current text, e.g. after a failure."""
        self._require(FlowState.VIEWING)
        if self.journal is None:
            raise FlowStateError("Journal not loaded")
        return self._start_analysis(self.journal.entry_text)

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _start_analysis(self, text: str) -> AnalysisTask:
        self.state = FlowState.ANALYZING
        self.analysis_task = AnalysisTask(self.journal_id, self._analyze_and_reload(text))
        return self.analysis_task

    async def _analyze_and_reload(self, text: str) -> AnalysisOutcome:
        outcome = None
        try:
            outcome = await run_analysis(self.invoke_analysis, text, self.journal_id)
            outcome = await _reload_after_analysis(self.repository, outcome)
        finally:
            self._finish_analysis(outcome)
        return outcome

    def _finish_analysis(self, outcome: Optional[AnalysisOutcome]) -> None:
        if outcome is not None and outcome.record_deleted:
            logger.info(f"Journal {self.journal_id} was deleted during analysis")
            self._close()
        else:
            if outcome is not None and outcome.journal is not None:
                self.journal = outcome.journal
                self.draft = outcome.journal.entry_text
            self.state = FlowState.VIEWING
        self.last_outcome = outcome

    def _close(self) -> None:
        self.state = FlowState.CLOSED
        self.journal = None
        self.draft = ""

    def _require_open(self) -> None:
        if self.state == FlowState.CLOSED:
            raise FlowStateError("Journal no longer exists")

    def _require(self, state: FlowState) -> None:
        self._require_open()
        if self.state != state:
            raise FlowStateError(f"Cannot do this while {self.state.value}; expected {state.value}")


class JournalComposer:
    """Writes new entries: saved first, analysed afterwards."""

    def __init__(self, user_id: str, repository, invoke_analysis: AnalysisInvoker):
        self.user_id = user_id
        self.repository = repository
        self.invoke_analysis = invoke_analysis

    async def submit_entry(self, entry_text: str) -> Tuple[JournalEntry, AnalysisTask]:
        """
        Save a new entry and start its analysis.

        Returns:
            (saved entry, analysis handle). The entry exists even if analysis
            later fails.

        Raises:
            InputValidationFailure: blank text, nothing is saved
            PersistenceFailure: the insert failed
        """
        if not entry_text or not entry_text.strip():
            raise InputValidationFailure("entry_text is required")

        entry = self.repository.create(self.user_id, entry_text)
        task = AnalysisTask(entry.id, self._analyze_and_reload(entry))
        return entry, task

    async def _analyze_and_reload(self, entry: JournalEntry) -> AnalysisOutcome:
        outcome = await run_analysis(self.invoke_analysis, entry.entry_text, entry.id)
        return await _reload_after_analysis(self.repository, outcome)
