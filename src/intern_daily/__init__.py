"""intern-daily: turn a day's git commits into a Markdown activity report."""

from __future__ import annotations

__version__ = "0.1.0"
