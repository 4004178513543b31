"""Shared fixtures: an in-memory journals table and fake classifier endpoints."""

import json
from typing import Callable, Dict, List, Optional, Tuple

import httpx
import pytest

from app.features.analysis.inference import InferenceClient, InferenceConfig
from app.features.analysis.models import AnalysisResult, JournalEntry
from app.shared.errors import PersistenceFailure

SENTIMENT_URL = "https://inference.test/models/sentiment"
EMOTION_URL = "https://inference.test/models/emotion"


def hf_payload(*pairs: Tuple[str, float]) -> list:
    """Classifier response in the return_all_scores shape: [[{label, score}, ...]]."""
    return [[{"label": label, "score": score} for label, score in pairs]]


class FakeJournalsRepository:
    """In-memory stand-in for JournalsRepository that records every call."""

    def __init__(self, entries: Optional[List[JournalEntry]] = None):
        self.entries: Dict[str, JournalEntry] = {e.id: e for e in entries or []}
        self.calls: List[Tuple[str, str]] = []
        self.fail_on: set = set()
        self._next_id = 1

    def _record(self, operation: str, journal_id: str) -> None:
        self.calls.append((operation, journal_id))
        if operation in self.fail_on:
            raise PersistenceFailure(f"{operation} failed", operation=operation)

    def operations(self) -> List[str]:
        return [operation for operation, _ in self.calls]

    def get_by_id(self, journal_id: str) -> Optional[JournalEntry]:
        self._record("get_by_id", journal_id)
        return self.entries.get(journal_id)

    def create(self, user_id: str, entry_text: str) -> JournalEntry:
        journal_id = f"journal-{self._next_id}"
        self._next_id += 1
        self._record("create", journal_id)
        entry = JournalEntry(id=journal_id, user_id=user_id, entry_text=entry_text)
        self.entries[journal_id] = entry
        return entry

    def update_text(self, journal_id: str, entry_text: str) -> JournalEntry:
        self._record("update_text", journal_id)
        if journal_id not in self.entries:
            raise PersistenceFailure(f"Journal {journal_id} not found", operation="update")
        self.entries[journal_id] = self.entries[journal_id].model_copy(update={"entry_text": entry_text})
        return self.entries[journal_id]

    def write_analysis(self, journal_id: str, analysis: AnalysisResult) -> None:
        self._record("write_analysis", journal_id)
        if journal_id in self.entries:
            self.entries[journal_id] = self.entries[journal_id].model_copy(update=analysis.to_record())

    def mark_note_viewed(self, journal_id: str) -> None:
        self._record("mark_note_viewed", journal_id)
        if journal_id in self.entries:
            self.entries[journal_id] = self.entries[journal_id].model_copy(update={"therapy_note_viewed": True})

    def delete(self, journal_id: str) -> None:
        self.entries.pop(journal_id, None)


class FakeClassifiers:
    """httpx handler serving canned sentiment / emotion responses."""

    def __init__(self, sentiment=None, emotion=None):
        # Each value is a JSON payload, an httpx.Response, or an exception to raise
        self.sentiment = sentiment if sentiment is not None else hf_payload(("POSITIVE", 0.9), ("NEGATIVE", 0.1))
        self.emotion = emotion if emotion is not None else hf_payload(("joy", 0.9), ("neutral", 0.1))
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        answer = self.sentiment if request.url.path.endswith("/sentiment") else self.emotion
        if isinstance(answer, Exception):
            raise answer
        if isinstance(answer, httpx.Response):
            return answer
        return httpx.Response(200, json=answer)

    def calls_to(self, name: str) -> int:
        return sum(1 for r in self.requests if r.url.path.endswith(f"/{name}"))

    def bodies(self) -> List[dict]:
        return [json.loads(r.content) for r in self.requests]


def make_inference_client(handler: Callable, api_token: Optional[str] = "hf_test_token") -> InferenceClient:
    config = InferenceConfig(
        sentiment_url=SENTIMENT_URL,
        emotion_url=EMOTION_URL,
        api_token=api_token,
        timeout_seconds=5.0,
    )
    return InferenceClient(config, http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))


@pytest.fixture
def classifiers() -> FakeClassifiers:
    return FakeClassifiers()


@pytest.fixture
def inference_client(classifiers) -> InferenceClient:
    return make_inference_client(classifiers)


@pytest.fixture
def journal() -> JournalEntry:
    return JournalEntry(
        id="journal-abc",
        user_id="user-1",
        entry_text="I feel wonderful and calm today",
    )


@pytest.fixture
def repository(journal) -> FakeJournalsRepository:
    return FakeJournalsRepository([journal])
