"""
Journaling feature module.

Client-side coordination around the analysis service:
- Edit / re-analysis state machine for an existing entry
- New-entry submission followed by analysis
- Analysis task handles and the HTTP invoker
"""

from app.features.journaling.analysis_task import (
    AnalysisInvocationError,
    AnalysisOutcome,
    AnalysisTask,
    HttpAnalysisInvoker,
)
from app.features.journaling.edit_flow import (
    EditReanalysisFlow,
    FlowState,
    FlowStateError,
    JournalComposer,
)

__all__ = [
    "AnalysisInvocationError",
    "AnalysisOutcome",
    "AnalysisTask",
    "HttpAnalysisInvoker",
    "EditReanalysisFlow",
    "FlowState",
    "FlowStateError",
    "JournalComposer",
]
