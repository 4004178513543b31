"""
Analysis Feature Module - journal text to stress score and supportive note.

Pipeline, leaves first:
- inference: sentiment + emotion classifier calls with neutral fallbacks
- normalizer: classifier payload shapes -> canonical Sentiment / EmotionSet
- scoring: bounded stress (and deprecated happiness) scores
- notes: rule-based supportive note
- orchestrator: one analysis run, written back to the journal record
"""

from app.features.analysis.inference import InferenceClient, InferenceConfig, InferenceOutcome
from app.features.analysis.orchestrator import AnalysisOrchestrator

__all__ = [
    "InferenceClient",
    "InferenceConfig",
    "InferenceOutcome",
    "AnalysisOrchestrator",
]
