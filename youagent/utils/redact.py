"""Logging filter that masks secrets before records reach a handler."""

import logging
import re
from typing import Any

SECRET_KEYS = ("token", "apikey", "api_key", "password", "secret")

# key=value, key: value and "key": "value" forms
_SECRET_PATTERN = re.compile(
    r"""(?P<key>["']?\w*(?:%s)\w*["']?\s*[:=]\s*)(?P<quote>["']?)(?P<value>[^\s"',}]+)"""
    % "|".join(SECRET_KEYS),
    re.IGNORECASE,
)
_BEARER_PATTERN = re.compile(r"(Bearer\s+)[A-Za-z0-9._\-]+", re.IGNORECASE)

REDACTED = "[REDACTED]"


def redact(text: str) -> str:
    """Mask values of secret-looking keys and bearer tokens in free text."""
    text = _SECRET_PATTERN.sub(
        lambda m: f"{m.group('key')}{m.group('quote')}{REDACTED}", text
    )
    return _BEARER_PATTERN.sub(rf"\1{REDACTED}", text)


def redact_mapping(data: dict[str, Any]) -> dict[str, Any]:
    """Copy of data with secret keys masked, recursing into nested dicts."""
    clean: dict[str, Any] = {}
    for key, value in data.items():
        if any(s in key.lower() for s in SECRET_KEYS):
            clean[key] = REDACTED
        elif isinstance(value, dict):
            clean[key] = redact_mapping(value)
        else:
            clean[key] = value
    return clean


class RedactSecretsFilter(logging.Filter):
    """Rewrites the formatted message so args cannot leak secrets either."""

    def filter(self, record: logging.LogRecord) -> bool:
        try:
            message = record.getMessage()
        except (TypeError, ValueError):
            return True
        cleaned = redact(message)
        if cleaned != message:
            record.msg = cleaned
            record.args = None
        return True
