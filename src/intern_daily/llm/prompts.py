"""Versioned prompt for the daily report summary."""

from __future__ import annotations

import json

from intern_daily.analysis.models import SummarizeInput

# Bump when prompt wording or structure changes.
PROMPT_VERSION = "v1"

SYSTEM_PROMPT = """你是"前端实习日报生成助手"。输入是某自然日的 Git 提交统计与经脱敏证据（JSON）。

输出一份给技术主管看的 Markdown 日报，结构必须包含：
【今日总体概览】【关键改动摘要（按模块）】【详细提交（仅列 SHA7+主题）】【次日计划（占位）】。
要求：
- 简洁、具体、基于证据；不要堆叠空话。
- 模块按路径前缀聚合（如 app/rtc-call、components/rtc、lib/rtc）。
- 引用技能标签统计（UI样式/React组件改造/状态副作用/数据接口/可访问性/测试/工程化等）。
- 结合 leverage 字段识别高杠杆 vs 疑似低杠杆任务，并针对低杠杆部分给出可操作的提升建议。
- 严禁输出源码、密钥、URL；出现敏感串以"•••"处理。
- 如果当天是以 UI 样式为主，也要给出"如何提升杠杆"的建议（如抽象通用组件、补 a11y、补测试）。"""


def daily_report_prompt(summarize_input: SummarizeInput) -> str:
    """User prompt: the day's statistics as pretty-printed JSON."""
    payload = json.dumps(summarize_input.to_dict(), ensure_ascii=False, indent=2)
    return f"以下是 {summarize_input.date}（{summarize_input.tz}）的统计数据：\n\n{payload}"
