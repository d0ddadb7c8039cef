#!/usr/bin/env python3
"""
Filesystem blob store for published leaderboard artifacts.
"""

import logging
import os
from typing import Optional


class LocalBlobStore:
    """Stores text blobs as files below a root directory."""

    def __init__(self, root: str = "."):
        """
        Initialize the store.

        Args:
            root: Directory that keys are resolved against.
        """
        self.root = os.path.abspath(root)
        self.logger = logging.getLogger(__name__)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        pass

    def _path(self, key: str) -> str:
        return os.path.join(self.root, key)

    def _ensure_parent(self, path: str) -> None:
        parent_dir = os.path.dirname(path) or "."
        os.makedirs(parent_dir, exist_ok=True)

    def read_text(self, key: str) -> Optional[str]:
        """Return the blob content, or None if it does not exist."""
        path = self._path(key)
        if not os.path.exists(path):
            return None
        with open(path, "r", encoding="utf-8", newline="") as f:
            return f.read()

    def write_text(self, key: str, text: str) -> None:
        """Overwrite the blob."""
        path = self._path(key)
        self._ensure_parent(path)
        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write(text)
        self.logger.info(f"Wrote {path}")

    def append_text(self, key: str, text: str) -> None:
        """Append to the blob, creating it if needed."""
        path = self._path(key)
        self._ensure_parent(path)
        with open(path, "a", encoding="utf-8", newline="") as f:
            f.write(text)
        self.logger.info(f"Appended to {path}")
