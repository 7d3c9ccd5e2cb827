"""Shared utilities: redaction, ignore patterns, time windows."""

from intern_daily.utils.ignore import build_spec, default_spec, is_ignored, load_patterns, spec_from_config
from intern_daily.utils.redact import redact, redact_all

__all__ = [
    "build_spec",
    "default_spec",
    "is_ignored",
    "load_patterns",
    "redact",
    "redact_all",
    "spec_from_config",
]
