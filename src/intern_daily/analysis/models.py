"""Data models for commit classification and day-level aggregation."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Optional


class FileKind(Enum):
    """Coarse file category, checked in order style > config > ts_tsx > other."""

    TS_TSX = "ts_tsx"
    STYLE = "style"
    CONFIG = "config"
    OTHER = "other"


class SkillTag(Enum):
    """Skill areas a change touches; one file may carry several."""

    UI_STYLE = "UI样式"
    REACT_COMPONENT = "React组件改造"
    STATE_EFFECT = "状态/副作用"
    DATA_API_RTC = "数据/接口/RTC"
    ACCESSIBILITY = "可访问性"
    TESTING = "测试"
    TOOLING_CONFIG = "工程化/配置"


class Leverage(Enum):
    """How much a change is judged to be worth."""

    HIGH = "high"
    LOW = "low"
    NEUTRAL = "neutral"


@dataclass(frozen=True)
class Commit:
    """One `git log` entry."""

    sha: str
    date: str
    subject: str

    @property
    def sha7(self) -> str:
        return self.sha[:7]


@dataclass
class FileStat:
    """One `git diff-tree --numstat` row."""

    path: str
    adds: int
    dels: int


@dataclass
class ParsedFileDiff:
    """Added/removed lines for one file in one commit (diff markers stripped)."""

    path: str
    added: list[str] = field(default_factory=list)
    removed: list[str] = field(default_factory=list)


@dataclass
class FileChange:
    """Classification of one path within one commit (or merged across a day)."""

    path: str
    adds: int
    dels: int
    kind: FileKind
    module: str
    hints: list[str] = field(default_factory=list)
    skill_tags: list[SkillTag] = field(default_factory=list)
    leverage: Leverage = Leverage.NEUTRAL
    leverage_signals: list[str] = field(default_factory=list)

    @property
    def total_lines(self) -> int:
        return self.adds + self.dels


@dataclass
class AggregateEntry:
    """Mutable per-path accumulator used while merging a day's commits."""

    path: str
    kind: FileKind
    module: str
    adds: int = 0
    dels: int = 0
    # Ordered sets: dict keys keep first-seen order.
    hints: dict[str, None] = field(default_factory=dict)
    skill_tags: dict[SkillTag, None] = field(default_factory=dict)
    leverage_scores: dict[Leverage, int] = field(
        default_factory=lambda: {level: 0 for level in Leverage}
    )
    leverage_signals: dict[str, None] = field(default_factory=dict)


@dataclass
class ModuleSummary:
    """Highlights and evidence for one module (all strings redacted)."""

    name: str
    highlights: list[str] = field(default_factory=list)
    evidence: list[str] = field(default_factory=list)


@dataclass
class DayOverview:
    commit_count: int
    file_count: int
    by_kind: dict[str, int]
    top_skills: list[str]
    leverage: dict[str, int]


@dataclass
class LeverageSummary:
    """File and commit highlight lists per leverage tier, plus free-text notes."""

    high_files: list[str] = field(default_factory=list)
    # Reserved for three-way reporting; never populated.
    neutral_files: list[str] = field(default_factory=list)
    low_files: list[str] = field(default_factory=list)
    high_commits: list[str] = field(default_factory=list)
    low_commits: list[str] = field(default_factory=list)
    notes: list[str] = field(default_factory=list)


@dataclass
class UnstagedInfo:
    file_count: int


@dataclass
class DayStats:
    """Full result of aggregating one report window."""

    commits: list[Commit]
    files: list[FileChange]
    overview: DayOverview
    modules: list[ModuleSummary]
    leverage_summary: LeverageSummary
    unstaged: Optional[UnstagedInfo] = None


@dataclass
class SummarizeInput:
    """Redaction-safe projection of DayStats for the LLM summarizer (no raw diff text)."""

    date: str
    tz: str
    overview: DayOverview
    modules: list[ModuleSummary]
    commits: list[dict[str, str]]
    leverage: LeverageSummary
    unstaged: Optional[UnstagedInfo] = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dict."""
        return asdict(self)


@dataclass
class TimeWindow:
    """Resolved report window; since/until are ISO-8601 with offset."""

    since: str
    until: str
    date_label: str
    tz: str
