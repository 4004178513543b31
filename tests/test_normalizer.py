"""Tests for classifier payload normalization."""

import pytest

from app.features.analysis.models import SentimentCategory
from app.features.analysis.normalizer import (
    FlatList,
    SingleObject,
    SingletonList,
    Unrecognized,
    classify_payload,
    interpret_sentiment_label,
    normalize_emotions,
    normalize_sentiment,
)

EMOTIONS = [
    {"label": "sadness", "score": 0.6},
    {"label": "joy", "score": 0.3},
    {"label": "fear", "score": 0.1},
]


class TestClassifyPayload:
    def test_nested_list_is_singleton_list(self):
        payload = classify_payload([EMOTIONS])
        assert isinstance(payload, SingletonList)
        assert [c.label for c in payload.candidates] == ["sadness", "joy", "fear"]

    def test_flat_list(self):
        assert isinstance(classify_payload(EMOTIONS), FlatList)

    def test_single_object(self):
        payload = classify_payload({"label": "LABEL_1", "score": 0.8})
        assert isinstance(payload, SingleObject)
        assert payload.candidate.score == 0.8

    @pytest.mark.parametrize("raw", [
        None,
        "POSITIVE",
        42,
        [],
        [[]],
        {"error": "Model is currently loading", "estimated_time": 20.0},
        {"label": "joy"},
        [{"label": "joy", "score": "high"}],
        [{"label": "joy", "score": 1.7}],
        [{"label": "joy", "score": True}],
        [["joy", 0.9]],
    ])
    def test_unrecognized_shapes(self, raw):
        assert isinstance(classify_payload(raw), Unrecognized)

    def test_provider_error_reason_is_kept(self):
        payload = classify_payload({"error": "Model is currently loading"})
        assert "Model is currently loading" in payload.reason


class TestSentimentLabels:
    @pytest.mark.parametrize("label", ["POSITIVE", "positive", "LABEL_1", "pos_strong", "1"])
    def test_positive(self, label):
        assert interpret_sentiment_label(label) == SentimentCategory.POSITIVE

    @pytest.mark.parametrize("label", ["NEGATIVE", "negative", "LABEL_0", "0", "very_neg"])
    def test_negative(self, label):
        assert interpret_sentiment_label(label) == SentimentCategory.NEGATIVE

    @pytest.mark.parametrize("label", ["NEUTRAL", "LABEL_2", "mixed", "", "LABEL_10", "1.0", "0.5", "LABEL_01", "v1"])
    def test_neutral(self, label):
        assert interpret_sentiment_label(label) == SentimentCategory.NEUTRAL


class TestNormalizeSentiment:
    def test_selects_highest_confidence(self):
        sentiment = normalize_sentiment([[
            {"label": "NEGATIVE", "score": 0.2},
            {"label": "POSITIVE", "score": 0.8},
        ]])
        assert sentiment.label == SentimentCategory.POSITIVE
        assert sentiment.score == 0.8
        assert sentiment.raw_label == "POSITIVE"

    def test_tie_keeps_first_seen(self):
        sentiment = normalize_sentiment([
            {"label": "LABEL_0", "score": 0.5},
            {"label": "LABEL_1", "score": 0.5},
        ])
        assert sentiment.label == SentimentCategory.NEGATIVE

    def test_single_object(self):
        sentiment = normalize_sentiment({"label": "LABEL_1", "score": 0.7})
        assert sentiment.label == SentimentCategory.POSITIVE

    def test_unrecognized_yields_none(self):
        assert normalize_sentiment({"error": "boom"}) is None

    def test_nested_and_flat_are_identical(self):
        flat = [{"label": "NEGATIVE", "score": 0.95}, {"label": "POSITIVE", "score": 0.05}]
        assert normalize_sentiment([flat]) == normalize_sentiment(flat)


class TestNormalizeEmotions:
    def test_keeps_all_candidates_in_order(self):
        emotions = normalize_emotions([EMOTIONS])
        assert [e.label for e in emotions.emotions] == ["sadness", "joy", "fear"]
        assert emotions.dominant().label == "sadness"

    def test_nested_and_flat_are_identical(self):
        assert normalize_emotions([EMOTIONS]) == normalize_emotions(EMOTIONS)

    def test_labels_are_lower_cased(self):
        emotions = normalize_emotions([{"label": "Anger", "score": 0.9}])
        assert emotions.dominant().label == "anger"

    def test_single_object_becomes_one_member_set(self):
        emotions = normalize_emotions({"label": "fear", "score": 0.4})
        assert len(emotions.emotions) == 1

    def test_unrecognized_yields_none(self):
        assert normalize_emotions([]) is None
