#!/usr/bin/env python3
"""
Sleep Leaderboard

Scans open sleep-log issues of a GitHub repository, extracts each user's
record for the report date, ranks them and publishes the result.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Iterable, List, Optional

from . import clock
from .config import LeaderboardConfig
from .extractor import extract_daily_record
from .github_client import GitHubIssueSource
from .models import Entry, Issue, Snapshot
from .publisher import Publisher
from .ranking import rank_entries
from .report import build_snapshot, render_summary_block
from .store_factory import get_blob_store

logger = logging.getLogger(__name__)


def build_entries(issues: Iterable[Issue], target_date: str) -> List[Entry]:
    """Turn each issue into zero or one Entry for target_date."""
    entries = []
    for issue in issues:
        record = extract_daily_record(issue.body, target_date)
        if record is None:
            logger.debug(f"No complete record for {target_date} in issue #{issue.number}")
            continue
        logger.debug(f"Issue #{issue.number}: {record}")
        entries.append(Entry.from_record(issue, record))
    return entries


@dataclass(frozen=True)
class LeaderboardResult:
    snapshot: Snapshot
    block: str


class LeaderboardJob:
    """Computes and publishes one leaderboard run."""

    def __init__(
        self,
        config: LeaderboardConfig,
        source,
        publisher: Optional[Publisher] = None,
        now: Optional[Callable[[], datetime]] = None,
    ):
        """
        Initialize the job.

        Args:
            config: Run configuration
            source: Issue source with list_open_issues(label)
            publisher: Publisher for the results, None for a dry run
            now: Clock returning the current UTC instant
        """
        self.config = config
        self.source = source
        self.publisher = publisher
        self.now = now or clock.utc_now
        self.logger = logging.getLogger(__name__)

    def compute(self) -> LeaderboardResult:
        """Fetch issues and build the snapshot and summary block."""
        started = self.now()
        date = clock.format_report_date(clock.resolve_report_date(started, self.config.cutoff_hour))
        cutoff = clock.cutoff_description(self.config.cutoff_hour)
        self.logger.info(f"Building leaderboard for {date} (cutoff {cutoff})")

        issues = self.source.list_open_issues(self.config.label)
        entries = build_entries(issues, date)
        self.logger.info(f"Found {len(entries)} complete records in {len(issues)} issues")

        snapshot = build_snapshot(
            date=date,
            cutoff=cutoff,
            generated_at=clock.generated_at(started),
            top_n=self.config.top_n,
            open_issue_count=len(issues),
            complete_records=len(entries),
            rankings=rank_entries(entries, self.config.top_n),
        )
        block = render_summary_block(snapshot, self.config.dashboard_url)
        return LeaderboardResult(snapshot, block)

    def run(self) -> LeaderboardResult:
        """Compute the leaderboard and publish it unless this is a dry run."""
        result = self.compute()
        if self.publisher is None:
            self.logger.info("Dry run, nothing published")
        else:
            self.publisher.publish(result.snapshot, result.block)

        counts = result.snapshot.counts
        self.logger.info(
            f"Done. date={result.snapshot.date}, entries={counts.complete_records}, "
            f"issues={counts.open_sleep_log_issues}"
        )
        return result


def run_leaderboard(config: LeaderboardConfig, dry_run: bool = False) -> LeaderboardResult:
    """Run the leaderboard job against GitHub and the configured store."""
    with GitHubIssueSource(
        config.token,
        config.repo,
        api_url=config.api_url,
        page_size=config.page_size,
        max_pages=config.max_pages,
    ) as source:
        if dry_run:
            return LeaderboardJob(config, source).run()

        with get_blob_store(config) as store:
            publisher = Publisher(store, config.latest_path, config.history_path, config.readme_path)
            return LeaderboardJob(config, source, publisher).run()


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )
