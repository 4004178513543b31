"""
Stress and happiness scoring.

Both scores start at a baseline of 5 on a 1-10 scale and move with the
classifier's confidence:

    dominant emotion anger/fear/sadness  ->  stress = 5 + c * 5
    dominant emotion joy/neutral         ->  stress = 5 - c * 4
    positive sentiment                   ->  happiness = 5 + c * 5
    negative sentiment                   ->  happiness = 5 - c * 4

Values are rounded half-up and clamped to [1, 10] after the arithmetic.
Happiness is no longer persisted; it is still returned to API callers.
"""

import math

from app.features.analysis.models import (
    EmotionScore,
    EmotionSet,
    Scores,
    Sentiment,
    SentimentCategory,
)

BASELINE_SCORE = 5
MIN_SCORE = 1
MAX_SCORE = 10

STRESS_EMOTIONS = frozenset({"anger", "fear", "sadness"})
CALM_EMOTIONS = frozenset({"joy", "neutral"})


def round_half_up(value: float) -> int:
    # Python's round() is banker's rounding; 9.5 must become 10 and 2.5 must become 3
    return int(math.floor(value + 0.5))


def clamp_score(value: int) -> int:
    return max(MIN_SCORE, min(MAX_SCORE, value))


def dominant_emotion(emotions: EmotionSet) -> EmotionScore:
    return emotions.dominant()


def stress_from_emotion(emotion: EmotionScore) -> int:
    """Unclamped stress score for the dominant emotion."""
    if emotion.label in STRESS_EMOTIONS:
        return round_half_up(BASELINE_SCORE + emotion.score * 5)
    if emotion.label in CALM_EMOTIONS:
        return round_half_up(BASELINE_SCORE - emotion.score * 4)
    return BASELINE_SCORE


def happiness_from_sentiment(sentiment: Sentiment) -> int:
    """Unclamped happiness score for the overall sentiment."""
    if sentiment.label == SentimentCategory.POSITIVE:
        return BASELINE_SCORE + round_half_up(sentiment.score * 5)
    if sentiment.label == SentimentCategory.NEGATIVE:
        return BASELINE_SCORE - round_half_up(sentiment.score * 4)
    return BASELINE_SCORE


def calculate_scores(sentiment: Sentiment, emotions: EmotionSet) -> Scores:
    """Pure mapping of classifier output to bounded scores."""
    dominant = dominant_emotion(emotions)
    return Scores(
        stress_score=clamp_score(stress_from_emotion(dominant)),
        happiness_score=clamp_score(happiness_from_sentiment(sentiment)),
        dominant_emotion=dominant.label,
    )
