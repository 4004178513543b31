"""
Logging utilities for journal text and classifier payloads.

Journal entries are personal; only short, redacted previews may reach the logs.
"""
import re
from typing import Any


# Keys whose values are never logged
SENSITIVE_KEYS = [
    "api_key", "token", "password", "secret", "auth",
    "email", "phone", "access_token", "refresh_token",
    "bearer", "authorization",
]

_EMAIL_PATTERN = r'\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Z|a-z]{2,}\b'
_PHONE_PATTERN = r'\+?\d{1,3}[-.\s]?\(?\d{3}\)?[-.\s]?\d{3}[-.\s]?\d{4}'


def sanitize_for_logging(data: Any, max_len: int = 100) -> Any:
    """
    Sanitize data for safe logging - redacts secrets and truncates text.

    Args:
        data: dict, list, str, or scalar
        max_len: Maximum length for string values before truncation

    Returns:
        Sanitized copy of the data
    """
    if data is None:
        return "None"

    if isinstance(data, dict):
        sanitized = {}
        for k, v in data.items():
            if any(sensitive in str(k).lower() for sensitive in SENSITIVE_KEYS):
                sanitized[k] = "***REDACTED***"
            else:
                sanitized[k] = sanitize_for_logging(v, max_len)
        return sanitized

    if isinstance(data, list):
        return [sanitize_for_logging(item, max_len) for item in data]

    if isinstance(data, (int, float, bool)):
        return data

    return preview_text(str(data), max_len)


def preview_text(text: str, max_len: int = 60) -> str:
    """
    Single-line, PII-redacted preview of journal text.

    Args:
        text: Entry text
        max_len: Maximum preview length

    Returns:
        Redacted, truncated preview
    """
    cleaned = re.sub(_EMAIL_PATTERN, '[EMAIL_REDACTED]', text)
    cleaned = re.sub(_PHONE_PATTERN, '[PHONE_REDACTED]', cleaned)
    cleaned = re.sub(r'[\x00-\x1F\x7F]', ' ', cleaned)
    if len(cleaned) > max_len:
        return cleaned[:max_len] + "..."
    return cleaned
