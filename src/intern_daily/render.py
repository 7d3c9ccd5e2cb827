"""Rule-based Markdown rendering of DayStats (fallback when no AI summary is used)."""

from __future__ import annotations

from intern_daily.analysis.models import DayStats
from intern_daily.utils.redact import redact

# Hard cap on examples per list in the leverage section.
MAX_EXAMPLES = 3
ATTRIBUTION = "> 由 intern-daily 自动生成"

NO_SKILLS = "暂无统计"
NO_LEVERAGE = "- 暂无杠杆分析"
NO_MODULES = "- 暂无模块改动记录"
NO_HIGHLIGHTS = "- 暂无亮点"
NO_COMMITS = "- 今日无提交"


def format_overview(stats: DayStats) -> str:
    overview = stats.overview
    by_kind = overview.by_kind
    top_skills = "、".join(overview.top_skills) if overview.top_skills else NO_SKILLS
    lines = [
        f"- 提交数：{overview.commit_count}",
        (
            f"- 影响文件：{overview.file_count}（TS/TSX: {by_kind.get('ts_tsx', 0)}，"
            f"样式: {by_kind.get('style', 0)}，配置: {by_kind.get('config', 0)}，"
            f"其他: {by_kind.get('other', 0)}）"
        ),
        f"- 技能标签：{top_skills}",
        (
            f"- 杠杆评估：高 {overview.leverage.get('high', 0)}，"
            f"中性 {overview.leverage.get('neutral', 0)}，低 {overview.leverage.get('low', 0)}"
        ),
    ]
    if stats.unstaged and stats.unstaged.file_count:
        lines.append(f"- 工作区未暂存变更：{stats.unstaged.file_count} 文件（不计入提交）")
    return "\n".join(lines)


def format_leverage(stats: DayStats) -> str:
    summary = stats.leverage_summary
    lines = [f"- {note}" for note in summary.notes]
    for title, items in (
        ("高杠杆改动", summary.high_files),
        ("低杠杆改动", summary.low_files),
        ("高杠杆提交", summary.high_commits),
        ("低杠杆提交", summary.low_commits),
    ):
        if items:
            lines.append(f"- {title}：{'；'.join(items[:MAX_EXAMPLES])}")
    return "\n".join(lines) if lines else NO_LEVERAGE


def format_modules(stats: DayStats) -> str:
    if not stats.modules:
        return NO_MODULES
    blocks = []
    for module in stats.modules:
        if module.highlights:
            bullets = "\n".join(f"- {h}" for h in module.highlights)
        else:
            bullets = NO_HIGHLIGHTS
        blocks.append(f"### {module.name}\n{bullets}")
    return "\n\n".join(blocks)


def format_commits(stats: DayStats) -> str:
    if not stats.commits:
        return NO_COMMITS
    return "\n".join(f"- [{c.sha7}] {redact(c.subject)}" for c in stats.commits)


def render_rule_markdown(stats: DayStats, date: str, tz: str, note: str | None = None) -> str:
    """Render the full report. Never raises on empty data."""
    pieces = [f"# 日报 · {date}（{tz}）"]
    if note:
        pieces.append(f"> {note}")
    pieces.append("\n## 今日总体概览\n" + format_overview(stats))
    pieces.append("\n## 杠杆分析\n" + format_leverage(stats))
    pieces.append("\n## 关键改动摘要（按模块）\n" + format_modules(stats))
    pieces.append("\n## 详细提交\n" + format_commits(stats))
    pieces.append("\n---\n\n" + ATTRIBUTION)
    return "\n\n".join(pieces) + "\n"
