"""
Classifier payload normalization.

Hosted text-classification endpoints answer in several shapes depending on the
model, the pipeline options and the provider:

    [[{"label": "POSITIVE", "score": 0.99}, {"label": "NEGATIVE", "score": 0.01}]]
    [{"label": "joy", "score": 0.9}, {"label": "sadness", "score": 0.05}]
    {"label": "LABEL_1", "score": 0.8}

``classify_payload`` maps a raw JSON value onto exactly one of the variants
below, and the ``normalize_*`` functions turn a variant into the canonical
Sentiment / EmotionSet. Anything unrecognized yields None; callers fall back to
the neutral default.
"""

import re
from dataclasses import dataclass
from typing import Any, NamedTuple, Optional, Tuple, Union

from app.features.analysis.models import (
    EmotionScore,
    EmotionSet,
    Sentiment,
    SentimentCategory,
)


class Candidate(NamedTuple):
    label: str
    score: float


@dataclass(frozen=True)
class SingletonList:
    """``[[candidate, ...]]``: the real list wrapped in a one-element list."""
    candidates: Tuple[Candidate, ...]


@dataclass(frozen=True)
class FlatList:
    """``[candidate, ...]``"""
    candidates: Tuple[Candidate, ...]


@dataclass(frozen=True)
class SingleObject:
    """A bare ``{label, score}`` object."""
    candidate: Candidate


@dataclass(frozen=True)
class Unrecognized:
    reason: str


ClassifierPayload = Union[SingletonList, FlatList, SingleObject, Unrecognized]

_TRAILING_CODE = re.compile(r"(?:^|_)([01])$")


def _as_candidate(item: Any) -> Optional[Candidate]:
    if not isinstance(item, dict):
        return None
    label = item.get("label")
    score = item.get("score")
    if not isinstance(label, str) or isinstance(score, bool) or not isinstance(score, (int, float)):
        return None
    if not 0.0 <= score <= 1.0:
        return None
    return Candidate(label=label, score=float(score))


def _as_candidates(items: list) -> Optional[Tuple[Candidate, ...]]:
    candidates = tuple(_as_candidate(item) for item in items)
    if not candidates or any(c is None for c in candidates):
        return None
    return candidates


def classify_payload(raw: Any) -> ClassifierPayload:
    """Decide which shape a raw classifier response has."""
    if isinstance(raw, dict):
        if "error" in raw:
            return Unrecognized(reason=f"provider error: {raw['error']}")
        candidate = _as_candidate(raw)
        if candidate is None:
            return Unrecognized(reason="object without label/score")
        return SingleObject(candidate=candidate)

    if not isinstance(raw, list):
        return Unrecognized(reason=f"unexpected payload type {type(raw).__name__}")
    if not raw:
        return Unrecognized(reason="empty list")

    first = raw[0]
    if isinstance(first, list):
        # Unwrap once; a batch response only carries our single input
        candidates = _as_candidates(first)
        if candidates is None:
            return Unrecognized(reason="nested list without label/score candidates")
        return SingletonList(candidates=candidates)

    candidates = _as_candidates(raw)
    if candidates is None:
        return Unrecognized(reason="list without label/score candidates")
    return FlatList(candidates=candidates)


def candidates_of(payload: ClassifierPayload) -> Optional[Tuple[Candidate, ...]]:
    """All candidates carried by a payload variant, or None if unrecognized."""
    if isinstance(payload, (SingletonList, FlatList)):
        return payload.candidates
    if isinstance(payload, SingleObject):
        return (payload.candidate,)
    return None


def interpret_sentiment_label(label: str) -> SentimentCategory:
    """
    Map a provider label onto positive / negative / neutral.

    Case-insensitive. "POSITIVE", "pos_strong" and "LABEL_1" are positive;
    "NEGATIVE" and "LABEL_0" are negative; everything else is neutral.
    """
    upper = str(label).strip().upper()
    match = _TRAILING_CODE.search(upper)
    code = int(match.group(1)) if match else None

    if "POS" in upper or code == 1:
        return SentimentCategory.POSITIVE
    if "NEG" in upper or code == 0:
        return SentimentCategory.NEGATIVE
    return SentimentCategory.NEUTRAL


def normalize_sentiment(raw: Any) -> Optional[Sentiment]:
    """Pick the most confident sentiment candidate from a raw payload."""
    candidates = candidates_of(classify_payload(raw))
    if not candidates:
        return None

    best = candidates[0]
    for candidate in candidates[1:]:
        if candidate.score > best.score:
            best = candidate

    return Sentiment(
        label=interpret_sentiment_label(best.label),
        score=best.score,
        raw_label=best.label,
    )


def normalize_emotions(raw: Any) -> Optional[EmotionSet]:
    """Keep every emotion candidate, in provider order, with lower-cased labels."""
    candidates = candidates_of(classify_payload(raw))
    if not candidates:
        return None

    return EmotionSet(
        emotions=[
            EmotionScore(label=candidate.label.strip().lower(), score=candidate.score)
            for candidate in candidates
        ]
    )
