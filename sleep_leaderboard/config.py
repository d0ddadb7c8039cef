#!/usr/bin/env python3
"""
Configuration for the sleep leaderboard job.

Configuration is read from environment variables exactly once, at process
entry, into an immutable LeaderboardConfig that is passed to every component.
"""

import os
import re
from dataclasses import dataclass
from typing import Mapping, Optional

SLEEP_LOG_LABEL = "sleep-log"
DEFAULT_PAGE_SIZE = 100
DEFAULT_MAX_PAGES = 50
REQUEST_TIMEOUT = 30

DEFAULT_TOP_N = 5
DEFAULT_CUTOFF_HOUR = 4
DEFAULT_API_URL = "https://api.github.com"

REPO_PATTERN = re.compile(r"^[^/\s]+/[^/\s]+$")


class ConfigurationError(ValueError):
    """Raised when required configuration is missing or malformed."""


def _env_int(environ: Mapping[str, str], name: str, default: int) -> int:
    value = environ.get(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value.strip())
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")


def _env_bool(environ: Mapping[str, str], name: str) -> bool:
    return environ.get(name, "").strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class LeaderboardConfig:
    """Settings for one leaderboard run."""
    repo: str
    token: str
    top_n: int = DEFAULT_TOP_N
    cutoff_hour: int = DEFAULT_CUTOFF_HOUR
    dashboard_url: str = ""
    api_url: str = DEFAULT_API_URL
    label: str = SLEEP_LOG_LABEL
    page_size: int = DEFAULT_PAGE_SIZE
    max_pages: int = DEFAULT_MAX_PAGES
    output_root: str = "."
    latest_path: str = "docs/leaderboard-latest.json"
    history_path: str = "docs/leaderboard-history.ndjson"
    readme_path: str = "README.md"
    use_firestore: bool = False
    firestore_collection: str = "sleep_leaderboard"

    def __post_init__(self):
        if not self.token:
            raise ConfigurationError("GITHUB_TOKEN environment variable not set.")
        if not REPO_PATTERN.match(self.repo or ""):
            raise ConfigurationError(f"Invalid REPO: {self.repo!r} (expected owner/repo)")
        if self.top_n < 0:
            raise ConfigurationError(f"TOP_N must be >= 0, got {self.top_n}")
        if not 0 <= self.cutoff_hour <= 23:
            raise ConfigurationError(f"CUTOFF_HOUR must be between 0 and 23, got {self.cutoff_hour}")
        paths = [p for p in (self.latest_path, self.history_path, self.readme_path) if p]
        if len(set(paths)) != len(paths):
            raise ConfigurationError(
                "LEADERBOARD_LATEST_PATH, LEADERBOARD_HISTORY_PATH and README_PATH must differ"
            )

    @property
    def owner(self) -> str:
        return self.repo.split("/", 1)[0]

    @property
    def name(self) -> str:
        return self.repo.split("/", 1)[1]


def load_configuration(environ: Optional[Mapping[str, str]] = None) -> LeaderboardConfig:
    """Load configuration from environment variables."""
    if environ is None:
        environ = os.environ

    repo = environ.get("REPO", "").strip()
    if not repo:
        raise ConfigurationError("REPO environment variable not set (owner/repo).")

    token = environ.get("GITHUB_TOKEN", "").strip()
    if not token:
        raise ConfigurationError("GITHUB_TOKEN environment variable not set.")

    cutoff_name = "CUTOFF_HOUR" if environ.get("CUTOFF_HOUR") else "CUTOFF_HOUR_BJ"

    return LeaderboardConfig(
        repo=repo,
        token=token,
        top_n=_env_int(environ, "TOP_N", DEFAULT_TOP_N),
        cutoff_hour=_env_int(environ, cutoff_name, DEFAULT_CUTOFF_HOUR),
        dashboard_url=environ.get("PWA_URL", "").strip(),
        api_url=(environ.get("GITHUB_API_URL") or DEFAULT_API_URL).rstrip("/"),
        output_root=environ.get("LEADERBOARD_OUTPUT_ROOT") or ".",
        latest_path=environ.get("LEADERBOARD_LATEST_PATH") or "docs/leaderboard-latest.json",
        history_path=environ.get("LEADERBOARD_HISTORY_PATH") or "docs/leaderboard-history.ndjson",
        readme_path=environ.get("README_PATH", "README.md"),
        use_firestore=(
            _env_bool(environ, "USE_FIRESTORE")
            or environ.get("GAE_ENV", "").startswith("standard")
        ),
        firestore_collection=environ.get("FIRESTORE_COLLECTION") or "sleep_leaderboard",
    )
