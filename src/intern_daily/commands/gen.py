"""Generate the Markdown report for a day (or a --since/--until window)."""

from __future__ import annotations

import asyncio
import logging
import subprocess
import sys
from argparse import Namespace
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from intern_daily import git
from intern_daily.analysis.aggregate import CollectResult, collect_day_stats
from intern_daily.analysis.models import TimeWindow
from intern_daily.config import load_config
from intern_daily.llm import (
    ContextOverflowException,
    OllamaConnectionError,
    SummarizationError,
    summarize_day,
)
from intern_daily.render import render_rule_markdown
from intern_daily.utils.ignore import spec_from_config
from intern_daily.utils.timewindow import TimeWindowError, resolve_time_window

logger = logging.getLogger(__name__)

NOTE_SEPARATOR = "；"


@dataclass
class GenerateResult:
    markdown: str
    used_ai: bool
    output_path: Path
    window: TimeWindow
    note: str | None = None
    model_version: str | None = None


def _build_note(messages: list[str]) -> str | None:
    filtered = [m for m in messages if m]
    return NOTE_SEPARATOR.join(filtered) if filtered else None


def resolve_output_path(
    repo_path: Path,
    date_label: str,
    config: dict[str, Any],
    explicit: Path | None,
) -> Path:
    if explicit is not None:
        return explicit.resolve()
    output_dir = config.get("output_dir") or ".internlog"
    return (repo_path / output_dir / f"daily-{date_label}.md").resolve()


def open_command(path: Path) -> list[str]:
    """Platform command that opens path with its default application."""
    target = str(path)
    if sys.platform == "darwin":
        return ["open", target]
    if sys.platform == "win32":
        return ["cmd", "/c", "start", "", target]
    return ["xdg-open", target]


def open_report(path: Path) -> bool:
    """Open the written report; a missing opener only warns."""
    try:
        subprocess.run(
            open_command(path),
            check=False,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
        )
    except OSError as e:
        logger.debug("Opener failed for %s", path, exc_info=True)
        print(f"Warning: could not open {path}: {e}", file=sys.stderr)
        return False
    return True


async def _collect(
    repo_path: Path,
    window: TimeWindow,
    max_commits: int,
    include_unstaged: bool,
    config: dict[str, Any],
) -> CollectResult:
    await git.ensure_repo(str(repo_path))
    return await collect_day_stats(
        str(repo_path),
        window,
        max_commits=max_commits,
        include_unstaged=include_unstaged,
        ignore_spec=spec_from_config(config),
    )


def generate_report(args: Namespace) -> GenerateResult:
    """
    Collect stats, try the AI summary, and fall back to the rule renderer.

    Raises GitError or TimeWindowError; AI failures only add a note.
    """
    repo_path = Path(getattr(args, "repo", None) or ".").resolve()
    config = load_config(repo_path)

    window = resolve_time_window(
        date_str=getattr(args, "date", None),
        since=getattr(args, "since", None),
        until=getattr(args, "until", None),
        tz=getattr(args, "tz", None) or config.get("timezone"),
    )
    max_commits = getattr(args, "max_commits", None)
    if max_commits is None:
        max_commits = int(config.get("max_commits") or 0)

    result = asyncio.run(
        _collect(
            repo_path,
            window,
            max_commits,
            bool(getattr(args, "include_unstaged", False)),
            config,
        )
    )
    stats = result.stats

    notes: list[str] = []
    markdown = ""
    used_ai = False
    model_version = None

    ai_enabled = bool((config.get("ai") or {}).get("enabled", True))
    if getattr(args, "no_ai", False):
        notes.append("已跳过 AI 总结 (--no-ai)")
    elif not ai_enabled:
        notes.append("配置中已禁用 AI，使用规则摘要")
    else:
        model = getattr(args, "model", None) or config.get("default_model")
        try:
            markdown, model_version = summarize_day(
                result.summarize_input, model, host=config.get("ollama_host")
            )
            used_ai = True
        except (OllamaConnectionError, ContextOverflowException, SummarizationError) as e:
            logger.warning("AI summary failed, falling back to rule-based report: %s", e)
            notes.append(f"AI 摘要失败（{e}）")

    if not markdown:
        if not stats.commits:
            notes.append("今日无提交，输出基础骨架")
        markdown = render_rule_markdown(
            stats, date=window.date_label, tz=window.tz, note=_build_note(notes)
        )

    return GenerateResult(
        markdown=markdown,
        used_ai=used_ai,
        output_path=resolve_output_path(
            repo_path, window.date_label, config, getattr(args, "output", None)
        ),
        window=window,
        note=_build_note(notes),
        model_version=model_version,
    )


def run(args: Namespace) -> None:
    """Run the gen command."""
    try:
        result = generate_report(args)
    except (git.GitError, TimeWindowError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if getattr(args, "stdout", False):
        sys.stdout.write(result.markdown)
    else:
        result.output_path.parent.mkdir(parents=True, exist_ok=True)
        result.output_path.write_text(result.markdown, encoding="utf-8")
        print(f"Report written: {result.output_path}")
        if getattr(args, "open", False):
            open_report(result.output_path)
    if result.used_ai:
        print(f"AI summary by {result.model_version or 'ollama'}.", file=sys.stderr)
    if result.note:
        print(f"Note: {result.note}", file=sys.stderr)
