#!/usr/bin/env python3
"""
Data models for the sleep leaderboard.

Contains the core data classes used throughout the application.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Optional, Tuple

GITHUB_PROFILE_URL = "https://github.com"


@dataclass(frozen=True)
class Issue:
    """An open sleep-log issue as returned by the GitHub issues API."""
    number: int
    url: str
    author_login: Optional[str]
    body: str
    labels: Tuple[str, ...] = ()

    @classmethod
    def from_github_entry(cls, entry: Dict[str, Any]) -> 'Issue':
        """Create an Issue from a GitHub API response entry."""
        user = entry.get("user") or {}
        labels = tuple(
            label.get("name", "") if isinstance(label, dict) else str(label)
            for label in entry.get("labels") or []
        )
        return cls(
            number=int(entry["number"]),
            url=entry.get("html_url", ""),
            author_login=user.get("login"),
            body=entry.get("body") or "",
            labels=labels,
        )


@dataclass(frozen=True)
class DailyRecord:
    """One user's complete self-report for a single date."""
    date: str
    sleep_at: str
    wake_at: str
    duration: str
    duration_minutes: int
    source: str

    def __str__(self) -> str:
        return f"{self.date} sleep={self.sleep_at} wake={self.wake_at} {self.duration}"


@dataclass(frozen=True)
class Entry:
    """A ranking-ready record joined with the identity of its issue."""
    user: str
    user_url: str
    issue_number: int
    issue_url: str
    sleep: str
    wake: str
    duration: str
    minutes: int

    @classmethod
    def from_record(cls, issue: Issue, record: DailyRecord) -> 'Entry':
        """Combine an issue and its extracted record into an Entry."""
        user = issue.author_login or ""
        return cls(
            user=user,
            user_url=f"{GITHUB_PROFILE_URL}/{user}" if user else "",
            issue_number=issue.number,
            issue_url=issue.url,
            sleep=record.sleep_at,
            wake=record.wake_at,
            duration=record.duration,
            minutes=record.duration_minutes,
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class LeaderboardCounts:
    open_sleep_log_issues: int
    complete_records: int


@dataclass(frozen=True)
class Snapshot:
    """One run's leaderboard result."""
    date: str
    cutoff: str
    generated_at: str
    top_n: int
    counts: LeaderboardCounts
    latest_sleep: Tuple[Entry, ...] = field(default_factory=tuple)
    earliest_wake: Tuple[Entry, ...] = field(default_factory=tuple)
    longest_sleep: Tuple[Entry, ...] = field(default_factory=tuple)
    shortest_sleep: Tuple[Entry, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        """Plain dict in serialization key order."""
        return {
            "date": self.date,
            "cutoff": self.cutoff,
            "generated_at": self.generated_at,
            "top_n": self.top_n,
            "counts": asdict(self.counts),
            "latest_sleep": [entry.to_dict() for entry in self.latest_sleep],
            "earliest_wake": [entry.to_dict() for entry in self.earliest_wake],
            "longest_sleep": [entry.to_dict() for entry in self.longest_sleep],
            "shortest_sleep": [entry.to_dict() for entry in self.shortest_sleep],
        }
