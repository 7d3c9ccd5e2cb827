"""
Rule-based file classification: kind, module, hints, skill tags and leverage.

Works on filename patterns and unified-diff line heuristics only; nothing here
parses source code. Leverage rules are ordered (signal, predicate) pairs per
tier. Every matching pair in a tier contributes its signal, and the high tier
is checked before the low tier.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from pathspec import PathSpec

from intern_daily.analysis.models import (
    FileChange,
    FileKind,
    Leverage,
    ParsedFileDiff,
    SkillTag,
)
from intern_daily.utils.ignore import default_spec, is_ignored

STYLE_EXTENSIONS = (".css", ".scss", ".sass", ".less", ".styl", ".pcss")
CONFIG_PATTERNS = tuple(
    re.compile(p)
    for p in (
        r"(^|/)next\.config\.[^/]+$",
        r"(^|/)postcss\.config\.[^/]+$",
        r"(^|/)tailwind\.config\.[^/]+$",
        r"(^|/)eslint\.[^/]+$",
        r"(^|/)babel\.config\.[^/]+$",
        r"(^|/)tsconfig\.[^/]+$",
        r"(^|/)package\.json$",
        r"(^|/)pnpm-lock\.yaml$",
        r"(^|/)vite\.config\.[^/]+$",
    )
)

STATE_HOOKS = ("useState", "useReducer", "useEffect", "useRef", "useMemo", "useCallback")
DATA_KEYWORDS = ("fetch", "axios", "swr", "webrtc", "rtc", "socket", "graphql", "prisma")
ACCESSIBILITY_KEYWORDS = (
    "aria-",
    "role=",
    "arialabel",
    "ariadescribedby",
    "ariahidden",
    "arialive",
    "alt=",
)
# Hint names as recorded (value suffix stripped).
ACCESSIBILITY_HINTS = frozenset(k.split("=", 1)[0] for k in ACCESSIBILITY_KEYWORDS)
TEST_MARKERS = ("describe(", "it(", "test(", "expect(")

MODULE_HINT_PREFIX = "module:"
HINT_MODULE_DATA = "module:data"
HINT_MODULE_TEST = "module:test"
HINT_MODULE_CONFIG = "module:config"

_JSX_TAG = re.compile(r"<\w+")
_ARROW = re.compile(r"=>")
_CODE_KEYWORD = re.compile(r"\b(function|const|let|return|if|else|switch|case|for|while)\b")
_FUNCTION_DECL = re.compile(r"\b(export\s+)?(async\s+)?function\b")
_ARROW_ASSIGN = re.compile(r"\bconst\s+\w+\s*=\s*(async\s*)?\(.*\)\s*=>")
_NEW_HOOK = re.compile(r"\buse(Form|Mutation|Query|Context|Memo|Callback)")
_NETWORK_CALL = re.compile(r"\b(fetch|axios|client|socket|subscribe)\b")
_PERFORMANCE = re.compile(r"performance|memo|cache|debounce|throttle", re.IGNORECASE)

# Thresholds on adds + dels.
UI_TWEAK_MAX_LINES = 40
TINY_CHANGE_MAX_LINES = 10


def should_ignore_path(path: str, spec: PathSpec | None = None) -> bool:
    return is_ignored(path, spec if spec is not None else default_spec())


def is_config_path(path: str) -> bool:
    return any(p.search(path) for p in CONFIG_PATTERNS)


def detect_kind(path: str) -> FileKind:
    lower = path.lower()
    if lower.endswith(STYLE_EXTENSIONS):
        return FileKind.STYLE
    if is_config_path(path):
        return FileKind.CONFIG
    if lower.endswith(".ts") or lower.endswith(".tsx"):
        return FileKind.TS_TSX
    return FileKind.OTHER


def derive_module(path: str) -> str:
    """
    Module name from path segments.

    app/api/<x>/... keeps three segments, anything else with two or more keeps
    two, and a single segment is kept whole.
    """
    parts = [p for p in path.split("/") if p]
    if not parts:
        return path
    if len(parts) >= 3 and parts[0] == "app" and parts[1] == "api":
        return "/".join(parts[:3])
    if len(parts) >= 2:
        return "/".join(parts[:2])
    return parts[0]


def _diff_lines(diff: ParsedFileDiff | None) -> list[str]:
    if diff is None:
        return []
    return [*diff.added, *diff.removed]


def collect_hints(path: str, diff: ParsedFileDiff | None = None) -> list[str]:
    """Ordered, de-duplicated hints from diff lines plus path-based module: hints."""
    hints: dict[str, None] = {}
    for line in _diff_lines(diff):
        lowered = line.lower()
        for hook in STATE_HOOKS:
            if hook in line:
                hints[hook] = None
        for keyword in DATA_KEYWORDS:
            if keyword in lowered:
                hints[keyword] = None
        for keyword in ACCESSIBILITY_KEYWORDS:
            if keyword in lowered:
                hints[keyword.split("=", 1)[0]] = None
        if any(marker in line for marker in TEST_MARKERS):
            hints["test"] = None
        if "className" in line or "class=" in line:
            hints["className"] = None
        if "style=" in line:
            hints["style"] = None
        if "props" in line:
            hints["props"] = None
        if "children" in line:
            hints["children"] = None

    if path.startswith("app/api") or path.startswith("lib/"):
        hints[HINT_MODULE_DATA] = None
    if "test" in path or "__tests__" in path:
        hints[HINT_MODULE_TEST] = None
    if is_config_path(path):
        hints[HINT_MODULE_CONFIG] = None
    return list(hints)


def touches_only_styling(diff: ParsedFileDiff | None) -> bool:
    """
    True when every non-blank changed line looks like a class/style tweak.

    Shared by skill tagging (UI样式 on ts/tsx) and low-leverage detection.
    """
    lines = _diff_lines(diff)
    if not lines:
        return False
    for line in lines:
        trimmed = line.strip()
        if not trimmed:
            continue
        lowered = trimmed.lower()
        if lowered.startswith("import"):
            return False
        if _ARROW.search(trimmed):
            return False
        if _CODE_KEYWORD.search(trimmed):
            return False
        if "class" not in lowered and "style" not in lowered:
            return False
    return True


def _has_jsx(diff: ParsedFileDiff | None) -> bool:
    return any(_JSX_TAG.search(line) for line in _diff_lines(diff))


def detect_skill_tags(
    path: str,
    kind: FileKind,
    hints: Iterable[str],
    diff: ParsedFileDiff | None = None,
) -> list[SkillTag]:
    hint_set = set(hints)
    tags: dict[SkillTag, None] = {}

    if kind is FileKind.STYLE or "className" in hint_set or "style" in hint_set:
        tags[SkillTag.UI_STYLE] = None
    if kind is FileKind.TS_TSX and touches_only_styling(diff):
        tags[SkillTag.UI_STYLE] = None

    if kind is FileKind.TS_TSX:
        first_segment = path.split("/")[0]
        if (
            "props" in hint_set
            or "children" in hint_set
            or _has_jsx(diff)
            or first_segment in ("components", "app")
        ):
            tags[SkillTag.REACT_COMPONENT] = None

    if hint_set & set(STATE_HOOKS):
        tags[SkillTag.STATE_EFFECT] = None
    if hint_set & set(DATA_KEYWORDS) or HINT_MODULE_DATA in hint_set:
        tags[SkillTag.DATA_API_RTC] = None
    if hint_set & ACCESSIBILITY_HINTS:
        tags[SkillTag.ACCESSIBILITY] = None
    if "test" in hint_set or HINT_MODULE_TEST in hint_set:
        tags[SkillTag.TESTING] = None
    if kind is FileKind.CONFIG or HINT_MODULE_CONFIG in hint_set:
        tags[SkillTag.TOOLING_CONFIG] = None

    return list(tags)


@dataclass(frozen=True)
class LeverageContext:
    """Inputs the leverage predicates look at."""

    kind: FileKind
    skill_tags: frozenset[SkillTag]
    diff: ParsedFileDiff | None
    adds: int
    dels: int

    @property
    def total_lines(self) -> int:
        return self.adds + self.dels

    @property
    def added(self) -> list[str]:
        return self.diff.added if self.diff is not None else []


LeverageRule = tuple[str, Callable[[LeverageContext], bool]]


def _added_matches(*patterns: re.Pattern[str]) -> Callable[[LeverageContext], bool]:
    return lambda ctx: any(p.search(line) for line in ctx.added for p in patterns)


def _has_tag(tag: SkillTag) -> Callable[[LeverageContext], bool]:
    return lambda ctx: tag in ctx.skill_tags


HIGH_LEVERAGE_RULES: tuple[LeverageRule, ...] = (
    ("涉及状态或副作用调整", _has_tag(SkillTag.STATE_EFFECT)),
    ("涉及数据/接口/RTC 调用", _has_tag(SkillTag.DATA_API_RTC)),
    ("可访问性优化", _has_tag(SkillTag.ACCESSIBILITY)),
    ("补充测试覆盖", _has_tag(SkillTag.TESTING)),
    ("工程化/配置提升", _has_tag(SkillTag.TOOLING_CONFIG)),
    ("新增函数/组件实现", _added_matches(_FUNCTION_DECL, _ARROW_ASSIGN)),
    ("引入新的 Hook", _added_matches(_NEW_HOOK)),
    ("新增数据/接口调用", _added_matches(_NETWORK_CALL)),
    ("性能相关优化", _added_matches(_PERFORMANCE)),
)

LOW_LEVERAGE_RULES: tuple[LeverageRule, ...] = (
    (
        "仅样式或排版调整",
        lambda ctx: ctx.kind is FileKind.STYLE or touches_only_styling(ctx.diff),
    ),
    (
        "UI 样式微调",
        lambda ctx: ctx.skill_tags == {SkillTag.UI_STYLE}
        and ctx.total_lines < UI_TWEAK_MAX_LINES,
    ),
    ("改动规模极小", lambda ctx: ctx.total_lines <= TINY_CHANGE_MAX_LINES),
)


def _matching_signals(rules: tuple[LeverageRule, ...], ctx: LeverageContext) -> list[str]:
    return [signal for signal, predicate in rules if predicate(ctx)]


def detect_leverage(ctx: LeverageContext) -> tuple[Leverage, list[str]]:
    """High tier first; low tier only if no high signal; otherwise neutral."""
    high = _matching_signals(HIGH_LEVERAGE_RULES, ctx)
    if high:
        return Leverage.HIGH, high
    low = _matching_signals(LOW_LEVERAGE_RULES, ctx)
    if low:
        return Leverage.LOW, low
    return Leverage.NEUTRAL, []


def build_file_change(
    path: str,
    adds: int,
    dels: int,
    diff: ParsedFileDiff | None = None,
    ignore_spec: PathSpec | None = None,
) -> FileChange | None:
    """Classify one path within one commit. Returns None for ignored paths."""
    if should_ignore_path(path, ignore_spec):
        return None

    kind = detect_kind(path)
    hints = collect_hints(path, diff)
    skill_tags = detect_skill_tags(path, kind, hints, diff)
    level, signals = detect_leverage(
        LeverageContext(
            kind=kind,
            skill_tags=frozenset(skill_tags),
            diff=diff,
            adds=adds,
            dels=dels,
        )
    )
    return FileChange(
        path=path,
        adds=adds,
        dels=dels,
        kind=kind,
        module=derive_module(path),
        hints=[h for h in hints if not h.startswith(MODULE_HINT_PREFIX)],
        skill_tags=skill_tags,
        leverage=level,
        leverage_signals=signals,
    )
