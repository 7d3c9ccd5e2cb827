"""Scrub secret-shaped substrings from text before it is stored, logged or rendered."""

from __future__ import annotations

import re
from collections.abc import Iterable

PLACEHOLDER = "•••"

# Applied in order, each over the whole string.
REDACT_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"AKIA[0-9A-Z]{16}"),
    re.compile(r"sk-[A-Za-z0-9]{16,}"),
    re.compile(r"Bearer\s+[A-Za-z0-9\-_.]+", re.IGNORECASE),
    re.compile(r"-----BEGIN[^-]+-----.*?-----END[^-]+-----", re.DOTALL),
    re.compile(r"[A-Za-z0-9]{24,}"),
)


def redact(text: str) -> str:
    """Replace every secret-shaped match with PLACEHOLDER. Idempotent."""
    if not text:
        return text
    result = text
    for pattern in REDACT_PATTERNS:
        result = pattern.sub(PLACEHOLDER, result)
    return result


def redact_all(values: Iterable[str]) -> list[str]:
    return [redact(v) for v in values]
