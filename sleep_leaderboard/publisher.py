#!/usr/bin/env python3
"""
Publishing of the leaderboard artifacts.

Writes the latest snapshot, appends to the history log and refreshes the
README block. All payloads are prepared before the first write.
"""

import logging

from .models import Snapshot
from .report import dump_history_line, dump_snapshot
from .splice import splice_block


class Publisher:
    """Persists a Snapshot and its summary block to a blob store."""

    def __init__(self, store, latest_key: str, history_key: str, readme_key: str = "README.md"):
        """
        Initialize the publisher.

        Args:
            store: Blob store with read_text, write_text and append_text
            latest_key: Key of the overwritten snapshot
            history_key: Key of the append-only history log
            readme_key: Key of the document to splice into, "" to skip
        """
        keys = [key for key in (latest_key, history_key, readme_key) if key]
        if len(set(keys)) != len(keys):
            raise ValueError(f"Publisher keys must be distinct, got {keys}")

        self.store = store
        self.latest_key = latest_key
        self.history_key = history_key
        self.readme_key = readme_key
        self.logger = logging.getLogger(__name__)

    def publish(self, snapshot: Snapshot, block: str) -> None:
        latest = dump_snapshot(snapshot)
        history_line = dump_history_line(snapshot)

        readme = None
        if self.readme_key:
            current = self.store.read_text(self.readme_key)
            if current is None:
                self.logger.warning(f"{self.readme_key} not found, starting from an empty document")
                current = ""
            readme = splice_block(current, block)

        self.store.write_text(self.latest_key, latest)
        self.store.append_text(self.history_key, history_line)
        if readme is not None:
            self.store.write_text(self.readme_key, readme)

        self.logger.info(f"Published leaderboard for {snapshot.date}")
