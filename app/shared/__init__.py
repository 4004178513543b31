# Shared error taxonomy, logging and correlation utilities
from .errors import (
    AnalysisError,
    ExternalServiceUnavailable,
    InputValidationFailure,
    MalformedResponse,
    PersistenceFailure,
)

__all__ = [
    "AnalysisError",
    "ExternalServiceUnavailable",
    "InputValidationFailure",
    "MalformedResponse",
    "PersistenceFailure",
]
