"""
Domain models for journal analysis.

Canonical classifier output (Sentiment, EmotionSet), the computed scores, the
persisted analysis fields, and the journal record as read back from the
database.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


NEUTRAL_EMOTION = "neutral"


class SentimentCategory(str, Enum):
    """Closed set of sentiment labels after normalization."""
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


class Sentiment(BaseModel):
    """Canonical sentiment: one category plus its confidence."""
    label: SentimentCategory
    score: float = Field(ge=0.0, le=1.0)
    raw_label: Optional[str] = None  # provider label, kept for diagnostics

    @classmethod
    def neutral(cls) -> "Sentiment":
        return cls(label=SentimentCategory.NEUTRAL, score=0.0, raw_label="NEUTRAL")


class EmotionScore(BaseModel):
    label: str
    score: float = Field(ge=0.0, le=1.0)


class EmotionSet(BaseModel):
    """Ordered emotion candidates as returned by the classifier."""
    emotions: List[EmotionScore] = Field(min_length=1)

    @classmethod
    def neutral(cls) -> "EmotionSet":
        return cls(emotions=[EmotionScore(label=NEUTRAL_EMOTION, score=1.0)])

    def dominant(self) -> EmotionScore:
        """Highest-confidence emotion; the first one seen wins a tie."""
        best = self.emotions[0]
        for emotion in self.emotions[1:]:
            if emotion.score > best.score:
                best = emotion
        return best


class Scores(BaseModel):
    """Output of the score calculator, both values in [1, 10]."""
    stress_score: int = Field(ge=1, le=10)
    happiness_score: int = Field(ge=1, le=10)
    dominant_emotion: str


class AnalysisResult(BaseModel):
    """
    The analysis fields of a journal record.

    Always written as a whole: a new note resets the viewed flag, and the
    deprecated happiness column is cleared.
    """
    stress_score: Optional[int] = Field(default=None, ge=1, le=10)
    therapy_note: Optional[str] = None
    therapy_note_viewed: bool = False

    def to_record(self) -> Dict[str, Any]:
        return {
            "stress_score": self.stress_score,
            "happiness_score": None,
            "therapy_note": self.therapy_note,
            "therapy_note_viewed": self.therapy_note_viewed,
        }


class JournalEntry(BaseModel):
    """A row of the journals table."""
    id: str
    user_id: str
    entry_text: str
    created_at: Optional[datetime] = None
    stress_score: Optional[int] = Field(default=None, ge=1, le=10)
    happiness_score: Optional[int] = Field(default=None, ge=1, le=10)
    therapy_note: Optional[str] = None
    therapy_note_viewed: Optional[bool] = False

    @property
    def has_new_insight(self) -> bool:
        """A note exists that the reader has not acknowledged yet."""
        return bool(self.therapy_note) and not self.therapy_note_viewed


# =============================================================================
# API MODELS
# =============================================================================

class AnalyzeJournalRequest(BaseModel):
    """Invocation body. Fields are optional so blanks surface as a 400, not a 422."""
    entry_text: Optional[str] = None
    journal_id: Optional[str] = None


class AnalysisResponse(BaseModel):
    stress_score: int = Field(ge=1, le=10)
    happiness_score: Optional[int] = Field(default=None, ge=1, le=10)
    therapy_note: str
