#!/usr/bin/env python3
"""
Snapshot assembly and rendering.

Builds the Snapshot published each run, its JSON encodings, and the short
markdown summary spliced into the README.
"""

import json
from typing import List, Optional, Sequence

from .models import Entry, LeaderboardCounts, Snapshot
from .ranking import Rankings

CATEGORY_LABELS = (
    ("latest_sleep", "最晚睡"),
    ("earliest_wake", "最早起"),
    ("longest_sleep", "睡得最长"),
    ("shortest_sleep", "睡得最短"),
)
NONE_PLACEHOLDER = "暂无"


def build_snapshot(
    date: str,
    cutoff: str,
    generated_at: str,
    top_n: int,
    open_issue_count: int,
    complete_records: int,
    rankings: Rankings,
) -> Snapshot:
    """Combine run metadata, counts and rankings into a Snapshot."""
    return Snapshot(
        date=date,
        cutoff=cutoff,
        generated_at=generated_at,
        top_n=top_n,
        counts=LeaderboardCounts(
            open_sleep_log_issues=open_issue_count,
            complete_records=complete_records,
        ),
        latest_sleep=tuple(rankings.latest_sleep),
        earliest_wake=tuple(rankings.earliest_wake),
        longest_sleep=tuple(rankings.longest_sleep),
        shortest_sleep=tuple(rankings.shortest_sleep),
    )


def dump_snapshot(snapshot: Snapshot) -> str:
    """Indented JSON for the latest snapshot file."""
    return json.dumps(snapshot.to_dict(), indent=2, ensure_ascii=False) + "\n"


def dump_history_line(snapshot: Snapshot) -> str:
    """One compact JSON line for the history log."""
    return json.dumps(snapshot.to_dict(), ensure_ascii=False, separators=(",", ":")) + "\n"


def _first(entries: Sequence[Entry]) -> Optional[Entry]:
    return entries[0] if entries else None


def format_entry_line(label: str, entry: Optional[Entry]) -> str:
    if entry is None:
        return f"- {label}：{NONE_PLACEHOLDER}"
    return (
        f"- {label}：[@{entry.user}]({entry.user_url})"
        f"（{entry.duration}，sleep {entry.sleep} / wake {entry.wake}）"
    )


def render_summary_block(snapshot: Snapshot, dashboard_url: str = "") -> str:
    """Markdown block with the top entry of each ranking."""
    lines: List[str] = [
        f"## 昨日榜单（{snapshot.date}）",
        "",
        "> 仅统计 open 的 `sleep-log` issue 用户；只统计完整记录（Sleep/Wake/Duration 都存在）；"
        f"cutoff={snapshot.cutoff}。",
        "",
    ]
    for attr, label in CATEGORY_LABELS:
        lines.append(format_entry_line(label, _first(getattr(snapshot, attr))))
    lines.append("")
    lines.append(f"完整榜单见：{dashboard_url}" if dashboard_url else "")

    return "\n".join(line for line in lines if line)
