#!/usr/bin/env python3
"""
Ranking of leaderboard entries.

Sleep and wake values are 'YYYY-MM-DD HH:MM' strings. They are compared as
strings, which matches chronological order only while the format stays fixed
width and zero padded.
"""

from typing import Any, Callable, List, NamedTuple, Sequence

from .models import Entry


class Rankings(NamedTuple):
    latest_sleep: List[Entry]
    earliest_wake: List[Entry]
    longest_sleep: List[Entry]
    shortest_sleep: List[Entry]


def top_n(entries: Sequence[Entry], key: Callable[[Entry], Any], n: int, reverse: bool = False) -> List[Entry]:
    """
    Return the first n entries ordered by key, without touching the input.

    Entries with equal keys keep issue-number order.
    """
    if n < 0:
        raise ValueError(f"n must be >= 0, got {n}")
    by_issue = sorted(entries, key=lambda entry: entry.issue_number)
    # sorted() stays stable with reverse=True
    return sorted(by_issue, key=key, reverse=reverse)[:n]


def latest_sleep(entries: Sequence[Entry], n: int) -> List[Entry]:
    return top_n(entries, lambda entry: entry.sleep, n, reverse=True)


def earliest_wake(entries: Sequence[Entry], n: int) -> List[Entry]:
    return top_n(entries, lambda entry: entry.wake, n)


def longest_sleep(entries: Sequence[Entry], n: int) -> List[Entry]:
    return top_n(entries, lambda entry: entry.minutes, n, reverse=True)


def shortest_sleep(entries: Sequence[Entry], n: int) -> List[Entry]:
    return top_n(entries, lambda entry: entry.minutes, n)


def rank_entries(entries: Sequence[Entry], n: int) -> Rankings:
    """Build all four top-n rankings."""
    return Rankings(
        latest_sleep=latest_sleep(entries, n),
        earliest_wake=earliest_wake(entries, n),
        longest_sleep=longest_sleep(entries, n),
        shortest_sleep=shortest_sleep(entries, n),
    )
