"""
Request-scoped journal analysis.

One invocation = one inference, normalize, score, note, write sequence. The
write goes through a repository bound to the caller's own token, so the
database's row-level security decides whether the caller may touch the record;
nothing here re-checks ownership.
"""

import logging

from app.core.logging_utils import preview_text
from app.features.analysis.inference import InferenceClient
from app.features.analysis.models import AnalysisResponse, AnalysisResult
from app.features.analysis.notes import generate_therapy_note
from app.features.analysis.scoring import calculate_scores
from app.shared.errors import InputValidationFailure, PersistenceFailure

logger = logging.getLogger("Journal.Analysis.Orchestrator")


class AnalysisOrchestrator:
    """Drives the analysis pipeline for one journal record."""

    def __init__(self, inference_client: InferenceClient, repository):
        """
        Args:
            inference_client: Classifier client
            repository: Anything with ``write_analysis(journal_id, AnalysisResult)``
                        that raises PersistenceFailure on error
        """
        self.inference_client = inference_client
        self.repository = repository

    async def analyze(self, entry_text: str, journal_id: str) -> AnalysisResponse:
        """
        Analyse ``entry_text`` and store the result on ``journal_id``.

        Raises:
            InputValidationFailure: blank text or missing id (no external call made)
            PersistenceFailure: the write failed; nothing was stored
        """
        if not entry_text or not entry_text.strip():
            raise InputValidationFailure("entry_text is required")
        if not journal_id or not journal_id.strip():
            raise InputValidationFailure("journal_id is required")

        logger.info(
            "Analyzing journal entry",
            extra={"journal_id": journal_id, "preview": preview_text(entry_text)},
        )

        outcome = await self.inference_client.analyze(entry_text)
        scores = calculate_scores(outcome.sentiment, outcome.emotions)
        therapy_note = generate_therapy_note(
            scores.dominant_emotion,
            scores.stress_score,
            scores.happiness_score,
            entry_text,
        )

        logger.info(
            "Scores computed",
            extra={
                "journal_id": journal_id,
                "inference_source": outcome.source,
                "dominant_emotion": scores.dominant_emotion,
                "sentiment": outcome.sentiment.label.value,
                "stress_score": scores.stress_score,
            },
        )

        result = AnalysisResult(
            stress_score=scores.stress_score,
            therapy_note=therapy_note,
            therapy_note_viewed=False,
        )
        try:
            self.repository.write_analysis(journal_id, result)
        except PersistenceFailure as exc:
            logger.error(
                f"Error updating journal: {exc.message}",
                extra={"journal_id": journal_id},
            )
            raise

        logger.info("Journal analysis stored", extra={"journal_id": journal_id})
        return AnalysisResponse(
            stress_score=scores.stress_score,
            happiness_score=scores.happiness_score,
            therapy_note=therapy_note,
        )
