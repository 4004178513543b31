"""
Inference client for the sentiment and emotion classifiers.

Two independent calls per entry, run concurrently:

- sentiment: a binary/ternary sentiment model (SST-2 by default)
- emotion:   a fine-grained emotion model (joy, sadness, anger, fear, ...)

Analysis must never be blocked by the classifiers. Without a credential no call
is made at all; with one, each call that fails (transport error, timeout,
non-2xx status, unreadable or unrecognized payload) is logged and replaced by
its neutral default while the other call's result is kept. There are no
retries.

Usage:
    client = InferenceClient(InferenceConfig.from_settings())
    outcome = await client.analyze("Today was long but good.")
    outcome.sentiment, outcome.emotions
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional, TypeVar

import httpx

from app.core.config import Config, settings
from app.features.analysis.models import EmotionSet, Sentiment
from app.features.analysis.normalizer import (
    classify_payload,
    normalize_emotions,
    normalize_sentiment,
)
from app.core.logging_utils import sanitize_for_logging
from app.services.http_client import http_client_manager
from app.shared.correlation import propagate_correlation_headers
from app.shared.errors import ExternalServiceUnavailable, MalformedResponse

logger = logging.getLogger("Journal.Analysis.Inference")

T = TypeVar("T")

SENTIMENT_SERVICE = "sentiment"
EMOTION_SERVICE = "emotion"


@dataclass(frozen=True)
class InferenceConfig:
    """Endpoints and credential for the classifiers."""
    sentiment_url: str
    emotion_url: str
    api_token: Optional[str] = None
    timeout_seconds: float = 30.0
    wait_for_model: bool = True

    @property
    def has_credential(self) -> bool:
        return bool(self.api_token)

    @classmethod
    def from_settings(cls, config: Config = settings) -> "InferenceConfig":
        return cls(
            sentiment_url=config.SENTIMENT_MODEL_URL,
            emotion_url=config.EMOTION_MODEL_URL,
            api_token=config.HUGGING_FACE_ACCESS_TOKEN,
            timeout_seconds=config.INFERENCE_TIMEOUT_SECONDS,
        )


@dataclass
class InferenceOutcome:
    """Canonical classifier output plus where each half came from."""
    sentiment: Sentiment
    emotions: EmotionSet
    sentiment_from_service: bool = False
    emotions_from_service: bool = False

    @classmethod
    def neutral(cls) -> "InferenceOutcome":
        return cls(sentiment=Sentiment.neutral(), emotions=EmotionSet.neutral())

    @property
    def source(self) -> str:
        if self.sentiment_from_service and self.emotions_from_service:
            return "service"
        if self.sentiment_from_service or self.emotions_from_service:
            return "partial"
        return "fallback"


class InferenceClient:
    """Calls the classifiers and returns canonical, never-failing output."""

    def __init__(self, config: InferenceConfig, http_client: Optional[httpx.AsyncClient] = None):
        """
        Args:
            config: Endpoints, credential and timeout
            http_client: Client to send requests with. Defaults to the shared
                         pooled client; tests pass one with a mock transport.
        """
        self.config = config
        self._http_client = http_client

    async def analyze(self, text: str) -> InferenceOutcome:
        """Classify ``text`` for sentiment and emotion."""
        if not self.config.has_credential:
            logger.warning("Inference credential not configured; using neutral defaults")
            return InferenceOutcome.neutral()

        client = self._http_client or await http_client_manager.get_client()

        sentiment, emotions = await asyncio.gather(
            self._classify(client, SENTIMENT_SERVICE, self.config.sentiment_url, text, normalize_sentiment),
            self._classify(client, EMOTION_SERVICE, self.config.emotion_url, text, normalize_emotions),
        )

        return InferenceOutcome(
            sentiment=sentiment if sentiment is not None else Sentiment.neutral(),
            emotions=emotions if emotions is not None else EmotionSet.neutral(),
            sentiment_from_service=sentiment is not None,
            emotions_from_service=emotions is not None,
        )

    async def _classify(
        self,
        client: httpx.AsyncClient,
        service: str,
        url: str,
        text: str,
        normalize: Callable[[Any], Optional[T]],
    ) -> Optional[T]:
        """One classifier call; None means "use the neutral default"."""
        try:
            raw = await self._post(client, service, url, text)
            result = normalize(raw)
            if result is None:
                reason = getattr(classify_payload(raw), "reason", "unrecognized payload")
                raise MalformedResponse(service, f"{service} payload not recognized: {reason}")
            logger.debug(
                f"{service} classification received",
                extra={"service": service, "payload": sanitize_for_logging(raw)},
            )
            return result
        except (ExternalServiceUnavailable, MalformedResponse) as exc:
            logger.warning(
                f"{service} classification failed, falling back to neutral: {exc.message}",
                extra={"service": service, "error_code": exc.code.value},
            )
            return None

    async def _post(self, client: httpx.AsyncClient, service: str, url: str, text: str) -> Any:
        headers = propagate_correlation_headers({
            "Authorization": f"Bearer {self.config.api_token}",
            "Content-Type": "application/json",
        })
        body = {
            "inputs": text,
            "parameters": {"return_all_scores": True},
            "options": {"wait_for_model": self.config.wait_for_model},
        }

        try:
            response = await client.post(
                url,
                json=body,
                headers=headers,
                timeout=self.config.timeout_seconds,
            )
        except httpx.TimeoutException as exc:
            raise ExternalServiceUnavailable(service, f"{service} request timed out") from exc
        except httpx.HTTPError as exc:
            raise ExternalServiceUnavailable(service, f"{service} request failed: {exc}") from exc

        if not response.is_success:
            raise ExternalServiceUnavailable(
                service,
                f"{service} returned HTTP {response.status_code}: {response.text[:200]}",
            )

        try:
            return response.json()
        except ValueError as exc:
            raise MalformedResponse(service, f"{service} returned non-JSON body") from exc
