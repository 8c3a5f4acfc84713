"""模拟汇总输出 - Strategy 模式

每种输出格式实现 SummaryFormatter 接口，通过注册制工厂调用。
新增格式只需继承 SummaryFormatter 并注册即可。
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod

from libsim.core.exceptions import ValidationError
from libsim.core.models import RunSummary


class SummaryFormatter(ABC):
    """汇总格式化策略基类"""

    @abstractmethod
    def format(self, summary: RunSummary) -> str:
        """将汇总格式化为字符串"""


class TextFormatter(SummaryFormatter):
    def format(self, summary: RunSummary) -> str:
        lines = [
            "=== 模拟汇总 ===",
            f"副本: {summary.capacity}  学生: {summary.actors}  耗时: {summary.duration:.1f}s",
            f"归还: {summary.returned}  未借到: {summary.aborted}  未归还: {summary.abandoned}",
            f"借出: {summary.acquires}  归还次数: {summary.releases}  "
            f"丢失副本: {summary.units_lost}  峰值在借: {summary.peak_in_use}",
        ]
        for r in summary.results:
            line = f"  {r.name:16s} {r.state.value:24s} 等待 {r.waited:.2f}s  持有 {r.held:.2f}s"
            if r.message:
                line += f"  ({r.message})"
            lines.append(line)
        lines.append(f"一致性: {'通过' if summary.consistent else '失败'}")
        return "\n".join(lines)


class JSONFormatter(SummaryFormatter):
    def format(self, summary: RunSummary) -> str:
        return json.dumps(summary.to_dict(), indent=2, ensure_ascii=False)


_formatters: dict[str, type[SummaryFormatter]] = {
    "text": TextFormatter,
    "json": JSONFormatter,
}


def register_formatter(name: str, cls: type[SummaryFormatter]) -> None:
    """注册自定义输出格式"""
    _formatters[name] = cls


def available_formats() -> list[str]:
    return list(_formatters)


def format_summary(summary: RunSummary, fmt: str = "text") -> str:
    """按指定格式输出汇总"""
    formatter_cls = _formatters.get(fmt)
    if formatter_cls is None:
        raise ValidationError(
            f"不支持的格式: {fmt}（可用: {available_formats()}）",
            details=[fmt],
        )
    return formatter_cls().format(summary)
