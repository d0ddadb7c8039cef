"""
Sleep Leaderboard

A daily leaderboard built from self-reported sleep tables in GitHub issues.
It ranks users by latest sleep, earliest wake, longest and shortest sleep,
and publishes a JSON snapshot, an NDJSON history log and a README summary.
"""

__version__ = "1.0.0"

from .app import LeaderboardJob, build_entries, run_leaderboard
from .config import ConfigurationError, LeaderboardConfig, load_configuration
from .extractor import extract_daily_record
from .models import DailyRecord, Entry, Issue, Snapshot

__all__ = [
    "LeaderboardJob",
    "build_entries",
    "run_leaderboard",
    "ConfigurationError",
    "LeaderboardConfig",
    "load_configuration",
    "extract_daily_record",
    "DailyRecord",
    "Entry",
    "Issue",
    "Snapshot",
]
