"""LLM integration (Ollama client, daily report prompt)."""

from __future__ import annotations

from intern_daily.analysis.models import SummarizeInput
from intern_daily.llm.ollama import (
    ContextOverflowException,
    OllamaConnectionError,
    SummarizationError,
    generate as _generate,
)
from intern_daily.llm.prompts import PROMPT_VERSION, SYSTEM_PROMPT, daily_report_prompt


def summarize_day(
    summarize_input: SummarizeInput,
    model: str,
    host: str | None = None,
) -> tuple[str, str | None]:
    """
    Write the daily report from aggregated, redacted statistics.
    Returns (markdown, model_version). Raises ContextOverflowException,
    OllamaConnectionError or SummarizationError.
    """
    return _generate(daily_report_prompt(summarize_input), model, system=SYSTEM_PROMPT, host=host)


__all__ = [
    "ContextOverflowException",
    "OllamaConnectionError",
    "PROMPT_VERSION",
    "SYSTEM_PROMPT",
    "SummarizationError",
    "daily_report_prompt",
    "summarize_day",
]
