"""Diff parsing, file classification and day aggregation."""

from intern_daily.analysis.aggregate import CollectResult, collect_day_stats
from intern_daily.analysis.classify import build_file_change
from intern_daily.analysis.diff import parse_unified_diff
from intern_daily.analysis.models import (
    Commit,
    DayOverview,
    DayStats,
    FileChange,
    FileKind,
    Leverage,
    LeverageSummary,
    ModuleSummary,
    ParsedFileDiff,
    SkillTag,
    SummarizeInput,
    TimeWindow,
)

__all__ = [
    "CollectResult",
    "Commit",
    "DayOverview",
    "DayStats",
    "FileChange",
    "FileKind",
    "Leverage",
    "LeverageSummary",
    "ModuleSummary",
    "ParsedFileDiff",
    "SkillTag",
    "SummarizeInput",
    "TimeWindow",
    "build_file_change",
    "collect_day_stats",
    "parse_unified_diff",
]
