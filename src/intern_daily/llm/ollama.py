"""Thin Ollama wrapper for the daily summary: num_ctx sizing and error mapping."""

from __future__ import annotations

import logging
from typing import Any

import ollama

logger = logging.getLogger(__name__)

# Power-of-2 context sizes between 8k and 64k tokens.
CONTEXT_MIN = 2**13
CONTEXT_MAX = 2**16
# Chars per token estimate; the payload is mostly CJK text and JSON punctuation.
CHARS_PER_TOKEN = 2
RESPONSE_TOKENS = 2048


class OllamaConnectionError(Exception):
    """The Ollama server could not be reached."""


class ContextOverflowException(Exception):
    """Raised when the estimated prompt + response tokens exceed CONTEXT_MAX."""


class SummarizationError(Exception):
    """Raised when the model returns no usable text."""


def get_context_size(prompt: str) -> int:
    """Smallest power-of-2 num_ctx in [CONTEXT_MIN, CONTEXT_MAX] fitting prompt + response."""
    needed = len(prompt) // CHARS_PER_TOKEN + RESPONSE_TOKENS
    size = CONTEXT_MIN
    while size < needed:
        size *= 2
    if size > CONTEXT_MAX:
        raise ContextOverflowException(
            f"Estimated tokens ({needed}) exceeds maximum context ({CONTEXT_MAX})"
        )
    return size


def generate(
    prompt: str,
    model: str,
    system: str | None = None,
    host: str | None = None,
    options: dict[str, Any] | None = None,
) -> tuple[str, str | None]:
    """
    Run one non-streaming generation and return (text, model name reported by the server).

    Raises ContextOverflowException, OllamaConnectionError, or SummarizationError
    when the response is empty.
    """
    opts = dict(options) if options else {}
    opts["num_ctx"] = get_context_size((system or "") + prompt)
    opts.setdefault("temperature", 0.2)
    client = ollama.Client(host=host) if host else ollama.Client()
    logger.debug("Ollama generate: model=%s num_ctx=%s", model, opts["num_ctx"])
    try:
        response = client.generate(model=model, prompt=prompt, system=system, options=opts)
    except (ConnectionError, TimeoutError, OSError) as e:
        raise OllamaConnectionError(f"Ollama unreachable: {e}") from e
    except ollama.ResponseError as e:
        raise SummarizationError(f"Ollama error for model {model}: {e}") from e
    text = (response.get("response") or "").strip()
    if not text:
        raise SummarizationError(f"Model {model} returned an empty response")
    return text, response.get("model")
