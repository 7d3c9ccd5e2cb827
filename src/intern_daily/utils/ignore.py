"""Ignore patterns (gitignore syntax): build artifacts, env/secret files, VCS internals."""

from __future__ import annotations

import functools
from typing import Any

from pathspec import GitIgnoreSpec, PathSpec

# Paths matching these never reach classification.
BUILTIN_PATTERNS: tuple[str, ...] = (
    ".git/",
    "node_modules/",
    ".next/",
    ".turbo/",
    "*.env*",
    ".envrc",
    "*.pem",
    "*.key",
)


def load_patterns(config: dict[str, Any] | None = None) -> list[tuple[str, str]]:
    """
    Build combined pattern list: builtin patterns plus config ignore.additional_patterns.

    Returns list of (pattern, source) where source is 'builtin' or 'additional'.
    """
    result: list[tuple[str, str]] = [(p, "builtin") for p in BUILTIN_PATTERNS]
    ignore_cfg = (config or {}).get("ignore") or {}
    for p in ignore_cfg.get("additional_patterns") or []:
        if isinstance(p, str) and p.strip():
            result.append((p.strip(), "additional"))
    return result


def build_spec(patterns: list[str]) -> PathSpec:
    """Build a PathSpec from pattern strings (gitignore-style)."""
    return GitIgnoreSpec.from_lines(patterns)


@functools.lru_cache(maxsize=None)
def default_spec() -> PathSpec:
    """Spec containing only the builtin patterns (built once per process)."""
    return build_spec(list(BUILTIN_PATTERNS))


def spec_from_config(config: dict[str, Any] | None) -> PathSpec:
    return build_spec([p for p, _ in load_patterns(config)])


def is_ignored(path: str, spec: PathSpec) -> bool:
    """
    Return True if a repo-relative posix path is ignored by spec.

    Also tries the path with a trailing slash so directory-only patterns
    (e.g. "node_modules/") match the directory entry itself.
    """
    rel = path.lstrip("/")
    if not rel:
        return False
    if spec.match_file(rel):
        return True
    if not rel.endswith("/") and spec.match_file(rel + "/"):
        return True
    return False
