"""Day aggregation: classify each commit's files, merge per path, build overview and highlights."""

from __future__ import annotations

import asyncio
import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass

from pathspec import PathSpec

from intern_daily import git
from intern_daily.analysis.classify import build_file_change
from intern_daily.analysis.diff import index_by_path, parse_unified_diff
from intern_daily.analysis.models import (
    AggregateEntry,
    Commit,
    DayOverview,
    DayStats,
    FileChange,
    FileKind,
    Leverage,
    LeverageSummary,
    ModuleSummary,
    SkillTag,
    SummarizeInput,
    TimeWindow,
    UnstagedInfo,
)
from intern_daily.utils.ignore import default_spec
from intern_daily.utils.redact import redact

logger = logging.getLogger(__name__)

HIGH_SUBJECT_REGEX = re.compile(
    r"(feat|feature|refactor|support|integrat|optimi[sz]e|a11y|accessib|hook|api|data|backend)",
    re.IGNORECASE,
)
LOW_SUBJECT_REGEX = re.compile(
    r"(fix|tweak|update|adjust)\s*(ui|style|copy|padding|margin)?", re.IGNORECASE
)

SMALL_COMMIT_MAX_LINES = 20
TOP_SKILLS_LIMIT = 3
MODULE_HINTS_LIMIT = 4

# Ties between tiers resolve in this order.
TIE_BREAK_ORDER = (Leverage.HIGH, Leverage.NEUTRAL, Leverage.LOW)

LEVERAGE_LABELS = {
    Leverage.HIGH: "高杠杆",
    Leverage.LOW: "疑似低杠杆",
}
HIGH_FILE_FALLBACK = "跨层/高杠杆改动"
LOW_FILE_FALLBACK = "样式或重复性微调"
SMALL_COMMIT_REASON = "改动规模较小"
STYLE_COMMIT_REASON = "样式类微调"


def merge_file_change(aggregate: dict[str, AggregateEntry], change: FileChange) -> AggregateEntry:
    """Fold one FileChange into the per-path accumulator (creating it on first sight)."""
    entry = aggregate.get(change.path)
    if entry is None:
        entry = AggregateEntry(path=change.path, kind=change.kind, module=change.module)
        aggregate[change.path] = entry
    entry.adds += change.adds
    entry.dels += change.dels
    entry.hints.update(dict.fromkeys(change.hints))
    entry.skill_tags.update(dict.fromkeys(change.skill_tags))
    entry.leverage_scores[change.leverage] = entry.leverage_scores.get(change.leverage, 0) + 1
    entry.leverage_signals.update(dict.fromkeys(change.leverage_signals))
    return entry


def select_leverage(scores: dict[Leverage, int]) -> Leverage:
    """
    Pick the tier with the strictly highest count.

    Exact ties go to high, then neutral, then low. If the winning count is not
    positive the result is neutral.
    """
    best = Leverage.NEUTRAL
    best_score: int | None = None
    for level in TIE_BREAK_ORDER:
        score = scores.get(level, 0)
        if best_score is None or score > best_score:
            best, best_score = level, score
    if best_score is None or best_score <= 0:
        return Leverage.NEUTRAL
    return best


def to_file_changes(aggregate: dict[str, AggregateEntry]) -> list[FileChange]:
    return [
        FileChange(
            path=entry.path,
            adds=entry.adds,
            dels=entry.dels,
            kind=entry.kind,
            module=entry.module,
            hints=list(entry.hints),
            skill_tags=list(entry.skill_tags),
            leverage=select_leverage(entry.leverage_scores),
            leverage_signals=list(entry.leverage_signals),
        )
        for entry in aggregate.values()
    ]


def compute_top_skills(files: Iterable[FileChange], limit: int = TOP_SKILLS_LIMIT) -> list[SkillTag]:
    """Skill tags by frequency weighted with max(1, adds + dels); ties keep first-seen order."""
    scores: dict[SkillTag, int] = {}
    for f in files:
        weight = max(1, f.total_lines)
        for tag in f.skill_tags:
            scores[tag] = scores.get(tag, 0) + weight
    ranked = sorted(scores.items(), key=lambda item: item[1], reverse=True)
    return [tag for tag, _ in ranked[:limit]]


def build_overview(files: list[FileChange], commits: list[Commit]) -> DayOverview:
    by_kind = {kind.value: 0 for kind in FileKind}
    leverage = {level.value: 0 for level in Leverage}
    for f in files:
        by_kind[f.kind.value] += 1
        leverage[f.leverage.value] += 1
    return DayOverview(
        commit_count=len(commits),
        file_count=len(files),
        by_kind=by_kind,
        top_skills=[tag.value for tag in compute_top_skills(files)],
        leverage=leverage,
    )


def _signal_detail(signals: Iterable[str]) -> str:
    text = "、".join(signals)
    return f"（{text}）" if text else ""


def format_highlight(change: FileChange) -> str:
    """`path (+a/-d)；涉及：…；关键词：…；杠杆判定：…` (unredacted)."""
    parts = [f"{change.path} (+{change.adds}/-{change.dels})"]
    tags = "、".join(tag.value for tag in change.skill_tags)
    if tags:
        parts.append(f"涉及：{tags}")
    hints = "、".join(change.hints[:MODULE_HINTS_LIMIT])
    if hints:
        parts.append(f"关键词：{hints}")
    label = LEVERAGE_LABELS.get(change.leverage)
    if label:
        parts.append(f"杠杆判定：{label}{_signal_detail(change.leverage_signals)}")
    return "；".join(parts)


def build_module_summaries(files: list[FileChange]) -> list[ModuleSummary]:
    modules: dict[str, ModuleSummary] = {}
    evidence: dict[str, dict[str, None]] = {}
    for f in files:
        summary = modules.get(f.module)
        if summary is None:
            summary = modules[f.module] = ModuleSummary(name=f.module)
            evidence[f.module] = {}
        summary.highlights.append(redact(format_highlight(f)))
        bucket = evidence[f.module]
        bucket[redact(f.path)] = None
        for hint in f.hints:
            bucket[redact(hint)] = None
        for signal in f.leverage_signals:
            bucket[redact(signal)] = None
    for name, summary in modules.items():
        summary.evidence = list(evidence[name])
    return list(modules.values())


def _file_highlights(files: list[FileChange], level: Leverage, fallback: str) -> list[str]:
    return [
        redact(f"{f.path}：{'、'.join(f.leverage_signals) if f.leverage_signals else fallback}")
        for f in files
        if f.leverage is level
    ]


def build_notes(summary: LeverageSummary) -> list[str]:
    notes: list[str] = []
    if summary.high_files:
        notes.append(f"识别到 {len(summary.high_files)} 个高杠杆改动，建议记录复盘。")
    if summary.low_files:
        notes.append(
            f"检测到 {len(summary.low_files)} 个疑似低杠杆改动，可考虑抽象/合并以提升杠杆。"
        )
    if summary.high_commits:
        notes.append(f"高杠杆提交 {len(summary.high_commits)} 条。")
    if summary.low_commits:
        notes.append(f"疑似低杠杆提交 {len(summary.low_commits)} 条，留意样式类重复劳动。")
    return notes


@dataclass
class CommitVerdict:
    """Commit-level labelling result; `line` is None when the commit is neither high nor low."""

    leverage: Leverage
    line: str | None


def judge_commit(
    commit: Commit,
    changes: list[FileChange],
    total_lines: int,
) -> CommitVerdict:
    """
    Label a commit high, low or neither from its classified files and subject.

    File-level high wins; then a feature-ish subject; then low file signals,
    small size, or a trivial-ish subject.
    """
    has_high = False
    has_low = False
    high_signals: dict[str, None] = {}
    low_signals: dict[str, None] = {}
    for change in changes:
        if change.leverage is Leverage.HIGH:
            has_high = True
            high_signals.update(dict.fromkeys(redact(s) for s in change.leverage_signals))
        elif change.leverage is Leverage.LOW:
            has_low = True
            low_signals.update(dict.fromkeys(redact(s) for s in change.leverage_signals))

    label = f"[{commit.sha7}] {redact(commit.subject)}"
    if not has_high and HIGH_SUBJECT_REGEX.search(commit.subject):
        has_high = True
    if has_high:
        return CommitVerdict(Leverage.HIGH, f"{label}{_signal_detail(high_signals)}")

    if not has_low and (
        low_signals
        or total_lines <= SMALL_COMMIT_MAX_LINES
        or LOW_SUBJECT_REGEX.search(commit.subject)
    ):
        has_low = True
    if has_low:
        if low_signals:
            reasons: Iterable[str] = low_signals
        elif total_lines <= SMALL_COMMIT_MAX_LINES:
            reasons = [SMALL_COMMIT_REASON]
        else:
            reasons = [STYLE_COMMIT_REASON]
        return CommitVerdict(Leverage.LOW, f"{label}{_signal_detail(reasons)}")
    return CommitVerdict(Leverage.NEUTRAL, None)


def build_summarize_input(stats: DayStats, window: TimeWindow) -> SummarizeInput:
    return SummarizeInput(
        date=window.date_label,
        tz=window.tz,
        overview=stats.overview,
        modules=stats.modules,
        commits=[{"sha7": c.sha7, "subject": redact(c.subject)} for c in stats.commits],
        leverage=stats.leverage_summary,
        unstaged=stats.unstaged,
    )


@dataclass
class CollectResult:
    stats: DayStats
    summarize_input: SummarizeInput


async def collect_day_stats(
    repo_path: str,
    window: TimeWindow,
    max_commits: int,
    include_unstaged: bool = False,
    ignore_spec: PathSpec | None = None,
) -> CollectResult:
    """
    Build DayStats for the window.

    Commits are processed one at a time; each commit's numstat and diff are
    fetched concurrently. Any git failure propagates (no partial result).
    """
    commits = await git.get_commits(repo_path, window.since, window.until, max_commits)
    logger.debug("Collected %d commits for %s", len(commits), window.date_label)

    spec = ignore_spec if ignore_spec is not None else default_spec()
    aggregate: dict[str, AggregateEntry] = {}
    summary = LeverageSummary()

    for commit in commits:
        file_stats, diff_text = await asyncio.gather(
            git.get_commit_file_stats(repo_path, commit.sha),
            git.get_commit_diff(repo_path, commit.sha),
        )
        diffs = index_by_path(parse_unified_diff(diff_text))

        total_lines = 0
        changes: list[FileChange] = []
        for stat in file_stats:
            total_lines += stat.adds + stat.dels
            change = build_file_change(
                stat.path, stat.adds, stat.dels, diffs.get(stat.path), spec
            )
            if change is None:
                continue
            changes.append(change)
            merge_file_change(aggregate, change)

        verdict = judge_commit(commit, changes, total_lines)
        if verdict.leverage is Leverage.HIGH:
            summary.high_commits.append(verdict.line)
        elif verdict.leverage is Leverage.LOW:
            summary.low_commits.append(verdict.line)
        logger.debug(
            "Commit %s: %d files classified, %d lines, %s",
            commit.sha7,
            len(changes),
            total_lines,
            verdict.leverage.value,
        )

    files = to_file_changes(aggregate)
    summary.high_files = _file_highlights(files, Leverage.HIGH, HIGH_FILE_FALLBACK)
    summary.low_files = _file_highlights(files, Leverage.LOW, LOW_FILE_FALLBACK)
    summary.notes = build_notes(summary)

    stats = DayStats(
        commits=commits,
        files=files,
        overview=build_overview(files, commits),
        modules=build_module_summaries(files),
        leverage_summary=summary,
    )

    if include_unstaged:
        unstaged_count = await git.get_unstaged_count(repo_path)
        if unstaged_count > 0:
            stats.unstaged = UnstagedInfo(file_count=unstaged_count)

    return CollectResult(stats=stats, summarize_input=build_summarize_input(stats, window))
