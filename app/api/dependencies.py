from functools import lru_cache
from typing import Optional

from fastapi import Depends, Header

from app.features.analysis import AnalysisOrchestrator, InferenceClient, InferenceConfig
from app.features.database import JournalsRepository
from app.shared.errors import MissingCallerIdentity


@lru_cache(maxsize=1)
def get_inference_client() -> InferenceClient:
    """Provide a singleton inference client configured from the environment."""
    return InferenceClient(InferenceConfig.from_settings())


def get_access_token(authorization: Optional[str] = Header(default=None)) -> str:
    """Extract the caller's bearer token; the write is scoped by it."""
    if not authorization:
        raise MissingCallerIdentity()
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise MissingCallerIdentity("Authorization header must be 'Bearer <token>'")
    return token.strip()


def get_journals_repository(access_token: str = Depends(get_access_token)) -> JournalsRepository:
    """Journal repository acting as the calling user; connects on first query."""
    return JournalsRepository.for_user(access_token)


def get_orchestrator(
    inference_client: InferenceClient = Depends(get_inference_client),
    repository: JournalsRepository = Depends(get_journals_repository),
) -> AnalysisOrchestrator:
    """Request-scoped orchestrator."""
    return AnalysisOrchestrator(inference_client, repository)
