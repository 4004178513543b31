"""Tests for the Supabase-backed journals repository."""

import logging
from types import SimpleNamespace

import pytest

from app.core.config import settings
from app.features.analysis.models import AnalysisResult
from app.features.database import JournalsRepository
from app.shared.errors import PersistenceFailure

ROW = {
    "id": "journal-abc",
    "user_id": "user-1",
    "entry_text": "I feel wonderful and calm today",
    "created_at": "2024-05-01T09:30:00+00:00",
    "stress_score": None,
    "happiness_score": None,
    "therapy_note": None,
    "therapy_note_viewed": False,
}


class StubQuery:
    """Mimics the postgrest builder chain: table().op().eq().execute()."""

    def __init__(self, client, table):
        self.client = client
        self.table = table
        self.operation = None
        self.payload = None
        self.filters = []

    def select(self, columns):
        self.operation, self.payload = "select", columns
        return self

    def insert(self, row):
        self.operation, self.payload = "insert", row
        return self

    def update(self, values):
        self.operation, self.payload = "update", values
        return self

    def eq(self, column, value):
        self.filters.append((column, value))
        return self

    def execute(self):
        self.client.executed.append(self)
        if self.client.error is not None:
            raise self.client.error
        return SimpleNamespace(data=self.client.data)


class StubSupabase:
    def __init__(self, data=None, error=None):
        self.data = data if data is not None else []
        self.error = error
        self.executed = []

    def table(self, name):
        return StubQuery(self, name)


def test_get_by_id_returns_entry():
    client = StubSupabase(data=[ROW])

    entry = JournalsRepository(client).get_by_id("journal-abc")

    assert entry.id == "journal-abc"
    assert entry.entry_text == ROW["entry_text"]
    query = client.executed[0]
    assert (query.table, query.operation) == ("journals", "select")
    assert query.filters == [("id", "journal-abc")]


def test_get_by_id_missing_is_none():
    assert JournalsRepository(StubSupabase(data=[])).get_by_id("journal-abc") is None


def test_invalid_row_is_persistence_failure():
    client = StubSupabase(data=[{**ROW, "stress_score": 42}])

    with pytest.raises(PersistenceFailure) as exc_info:
        JournalsRepository(client).get_by_id("journal-abc")

    assert exc_info.value.operation == "select"


@pytest.mark.parametrize("call", [
    lambda repo: repo.get_by_id("journal-abc"),
    lambda repo: repo.create("user-1", "text"),
    lambda repo: repo.update_text("journal-abc", "text"),
    lambda repo: repo.write_analysis("journal-abc", AnalysisResult(stress_score=3, therapy_note="note")),
    lambda repo: repo.mark_note_viewed("journal-abc"),
])
def test_client_errors_are_wrapped(call):
    repo = JournalsRepository(StubSupabase(error=RuntimeError("connection reset")))

    with pytest.raises(PersistenceFailure) as exc_info:
        call(repo)

    assert exc_info.value.message == "connection reset"
    assert isinstance(exc_info.value.__cause__, RuntimeError)


def test_create_inserts_unanalysed_entry():
    client = StubSupabase(data=[ROW])

    entry = JournalsRepository(client).create("user-1", ROW["entry_text"])

    assert entry.id == "journal-abc"
    assert client.executed[0].payload == {"user_id": "user-1", "entry_text": ROW["entry_text"]}


def test_create_without_returned_row_fails():
    with pytest.raises(PersistenceFailure):
        JournalsRepository(StubSupabase(data=[])).create("user-1", "text")


def test_update_text_writes_only_text():
    client = StubSupabase(data=[{**ROW, "entry_text": "edited"}])

    entry = JournalsRepository(client).update_text("journal-abc", "edited")

    assert entry.entry_text == "edited"
    assert client.executed[0].payload == {"entry_text": "edited"}
    assert client.executed[0].filters == [("id", "journal-abc")]


def test_update_text_not_found_raises():
    with pytest.raises(PersistenceFailure) as exc_info:
        JournalsRepository(StubSupabase(data=[])).update_text("journal-gone", "edited")

    assert "journal-gone" in exc_info.value.message


def test_write_analysis_sends_every_field():
    client = StubSupabase(data=[ROW])
    result = AnalysisResult(stress_score=8, therapy_note="Take a breath.")

    JournalsRepository(client).write_analysis("journal-abc", result)

    assert len(client.executed) == 1
    assert client.executed[0].payload == {
        "stress_score": 8,
        "happiness_score": None,
        "therapy_note": "Take a breath.",
        "therapy_note_viewed": False,
    }


def test_write_analysis_matching_no_row_succeeds(caplog):
    result = AnalysisResult(stress_score=8, therapy_note="Take a breath.")

    with caplog.at_level(logging.WARNING, logger="Journal.Database.Journals"):
        JournalsRepository(StubSupabase(data=[])).write_analysis("journal-gone", result)

    assert "matched no journal row" in caplog.text


def test_mark_note_viewed():
    client = StubSupabase(data=[ROW])

    JournalsRepository(client).mark_note_viewed("journal-abc")

    assert client.executed[0].payload == {"therapy_note_viewed": True}


def test_client_is_created_on_first_query():
    built = []

    def factory():
        built.append(True)
        return StubSupabase(data=[ROW])

    repo = JournalsRepository(client_factory=factory)
    assert built == []

    repo.get_by_id("journal-abc")
    repo.get_by_id("journal-abc")
    assert built == [True]


def test_unconfigured_supabase_fails_on_first_query(monkeypatch):
    monkeypatch.setattr(settings, "SUPABASE_URL", None)

    repo = JournalsRepository.for_user("user-jwt")

    with pytest.raises(PersistenceFailure) as exc_info:
        repo.get_by_id("journal-abc")
    assert exc_info.value.message == "Supabase is not configured"


def test_requires_client_or_factory():
    with pytest.raises(ValueError):
        JournalsRepository()
