"""
Client-side analysis invocation.

The UI does not wait for analysis: it saves the entry, starts analysis and
moves on. ``AnalysisTask`` makes that explicit. It is a handle around an
``asyncio.Task`` that resolves to an ``AnalysisOutcome`` (never raises for an
analysis failure) and accepts completion callbacks, so callers can await it,
attach a toast, or drop it and let it finish on its own.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, List, Optional

import httpx

from app.core.config import settings
from app.features.analysis.models import AnalysisResponse, JournalEntry
from app.shared.correlation import propagate_correlation_headers

logger = logging.getLogger("Journal.Journaling.AnalysisTask")

# (entry_text, journal_id) -> analysis result
AnalysisInvoker = Callable[[str, str], Awaitable[AnalysisResponse]]


class AnalysisInvocationError(Exception):
    """The analysis endpoint answered with an error status."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


@dataclass
class AnalysisOutcome:
    """What happened to one analysis run, as seen by the client."""
    journal_id: str
    response: Optional[AnalysisResponse] = None
    error: Optional[str] = None
    journal: Optional[JournalEntry] = None  # authoritative record after reload
    record_deleted: bool = False

    @property
    def succeeded(self) -> bool:
        return self.error is None and self.response is not None


async def run_analysis(invoke: AnalysisInvoker, entry_text: str, journal_id: str) -> AnalysisOutcome:
    """Invoke analysis and capture failure in the outcome instead of raising."""
    try:
        response = await invoke(entry_text, journal_id)
    except Exception as exc:
        logger.warning(f"Analysis error for journal {journal_id}: {exc}")
        return AnalysisOutcome(journal_id=journal_id, error=str(exc) or type(exc).__name__)
    return AnalysisOutcome(journal_id=journal_id, response=response)


class AnalysisTask:
    """Handle for one in-flight analysis."""

    def __init__(self, journal_id: str, work: Awaitable[AnalysisOutcome]):
        """
        Schedule ``work`` on the running event loop.

        Args:
            journal_id: Record being analysed
            work: Coroutine producing the outcome
        """
        self.journal_id = journal_id
        self._callbacks: List[Callable[[AnalysisOutcome], None]] = []
        self._task: asyncio.Task = asyncio.ensure_future(work)
        self._task.add_done_callback(self._dispatch)

    def _dispatch(self, task: asyncio.Task) -> None:
        if task.cancelled():
            logger.warning(f"Analysis for journal {self.journal_id} was cancelled")
            return
        exc = task.exception()
        if exc is not None:
            logger.error(f"Analysis task for journal {self.journal_id} failed: {exc}", exc_info=exc)
            return
        outcome = task.result()
        for callback in self._callbacks:
            callback(outcome)

    def add_done_callback(self, callback: Callable[[AnalysisOutcome], None]) -> None:
        """Call ``callback(outcome)`` on completion, immediately if already done."""
        if self._task.done():
            if not self._task.cancelled() and self._task.exception() is None:
                callback(self._task.result())
            return
        self._callbacks.append(callback)

    async def wait(self) -> AnalysisOutcome:
        return await self._task

    def __await__(self):
        return self._task.__await__()


class HttpAnalysisInvoker:
    """Calls the service's ``/analyze-journal`` endpoint as the signed-in user."""

    def __init__(
        self,
        access_token: str,
        base_url: str = settings.ANALYSIS_SERVICE_URL,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: float = 60.0,
    ):
        self.access_token = access_token
        self.url = f"{base_url.rstrip('/')}/api/v1/analyze-journal"
        self._http_client = http_client
        self.timeout = timeout

    async def __call__(self, entry_text: str, journal_id: str) -> AnalysisResponse:
        headers = propagate_correlation_headers({"Authorization": f"Bearer {self.access_token}"})
        body = {"entry_text": entry_text, "journal_id": journal_id}

        if self._http_client is not None:
            response = await self._http_client.post(self.url, json=body, headers=headers, timeout=self.timeout)
        else:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(self.url, json=body, headers=headers)

        if not response.is_success:
            raise AnalysisInvocationError(_error_message(response), status_code=response.status_code)
        return AnalysisResponse.model_validate(response.json())


def _error_message(response: httpx.Response) -> str:
    try:
        message = response.json().get("error")
    except (ValueError, AttributeError):
        message = None
    return message or f"Analysis failed with HTTP {response.status_code}"
