"""
Journal Analysis API Routes

``POST /analyze-journal`` analyses one entry and writes the result back to the
caller's journal record. Failures are answered with ``{"error": "..."}`` by the
exception handlers registered in main.py.
"""

import logging

from fastapi import APIRouter, Depends

from app.api.dependencies import get_orchestrator
from app.features.analysis import AnalysisOrchestrator
from app.features.analysis.models import AnalysisResponse, AnalyzeJournalRequest

router = APIRouter(tags=["Analysis"])
logger = logging.getLogger("Journal.Analysis.API")


@router.post("/analyze-journal", response_model=AnalysisResponse)
async def analyze_journal(
    request: AnalyzeJournalRequest,
    orchestrator: AnalysisOrchestrator = Depends(get_orchestrator),
) -> AnalysisResponse:
    """
    Analyse a journal entry.

    Computes the stress score and therapy note, stores them on the journal
    (resetting the viewed flag) and returns them. ``happiness_score`` is
    returned for older clients but no longer stored.
    """
    return await orchestrator.analyze(request.entry_text or "", request.journal_id or "")
