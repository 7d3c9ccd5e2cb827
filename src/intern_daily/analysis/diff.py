"""Unified diff parsing: raw `git show` text -> per-file added/removed line lists."""

from __future__ import annotations

import re

from intern_daily.analysis.models import ParsedFileDiff

DIFF_HEADER = re.compile(r"^diff --git a/(.+) b/(.+)$")
_LINE_SPLIT = re.compile(r"\r?\n")


def parse_unified_diff(diff_text: str) -> list[ParsedFileDiff]:
    """
    Parse unified diff text into one ParsedFileDiff per `diff --git` block.

    The path defaults to the header's b/ side and is overridden by a `+++` line
    unless that targets /dev/null. A malformed header drops lines until the next
    valid one. Blocks for the same path are never merged. Never raises.
    """
    results: list[ParsedFileDiff] = []
    current: ParsedFileDiff | None = None

    for line in _LINE_SPLIT.split(diff_text or ""):
        if line.startswith("diff --git"):
            match = DIFF_HEADER.match(line)
            if match:
                current = ParsedFileDiff(path=match.group(2))
                results.append(current)
            else:
                current = None
            continue

        if current is None:
            continue

        if line.startswith("+++ "):
            target = line[4:].strip()
            if not target.startswith("/dev/null"):
                current.path = target[2:] if target.startswith("b/") else target
            continue

        if line.startswith("--- ") or line.startswith("@@"):
            continue

        if line.startswith("+"):
            current.added.append(line[1:])
        elif line.startswith("-"):
            current.removed.append(line[1:])

    return results


def index_by_path(diffs: list[ParsedFileDiff]) -> dict[str, ParsedFileDiff]:
    """Map path -> diff; a later block for the same path replaces an earlier one."""
    return {d.path: d for d in diffs}
