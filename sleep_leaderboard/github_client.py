#!/usr/bin/env python3
"""
GitHub issue source.

Fetches the open issues carrying the sleep-log label, page by page.
"""

import logging
from dataclasses import dataclass, replace
from typing import Dict, List, Optional

import requests

from .config import DEFAULT_API_URL, DEFAULT_MAX_PAGES, DEFAULT_PAGE_SIZE, REQUEST_TIMEOUT
from .models import Issue


class SourceFetchError(RuntimeError):
    """Raised when the GitHub API returns a non-success response."""

    def __init__(self, method: str, path: str, status: Optional[int], detail: str):
        self.method = method
        self.path = path
        self.status = status
        self.detail = detail
        super().__init__(f"GitHub API {method} {path} failed: {status} {detail}".rstrip())


@dataclass(frozen=True)
class PageCursor:
    """Position in a paginated listing, with a hard cap on the page count."""
    page: int = 1
    per_page: int = DEFAULT_PAGE_SIZE
    max_pages: int = DEFAULT_MAX_PAGES

    @property
    def at_cap(self) -> bool:
        return self.page >= self.max_pages

    def advance(self, received: int) -> Optional['PageCursor']:
        """Return the cursor for the next page, or None when listing is done."""
        if received < self.per_page or self.at_cap:
            return None
        return replace(self, page=self.page + 1)


class GitHubIssueSource:
    """Lists open issues of a single repository."""

    def __init__(
        self,
        token: str,
        repo: str,
        api_url: str = DEFAULT_API_URL,
        page_size: int = DEFAULT_PAGE_SIZE,
        max_pages: int = DEFAULT_MAX_PAGES,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the issue source.

        Args:
            token: GitHub access token
            repo: Repository in owner/name form
            api_url: Base URL of the GitHub REST API
            page_size: Issues requested per page
            max_pages: Safety cap on the number of pages fetched
            session: Optional preconfigured requests session
        """
        self.repo = repo
        self.api_url = api_url.rstrip("/")
        self.page_size = page_size
        self.max_pages = max_pages
        self.session = session or requests.Session()
        self.session.headers.update({
            "Authorization": f"Bearer {token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        })
        self.logger = logging.getLogger(__name__)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self) -> None:
        self.session.close()

    def _get(self, path: str, params: Dict) -> List[Dict]:
        """GET a JSON list from the API, raising SourceFetchError on failure."""
        url = f"{self.api_url}{path}"
        try:
            response = self.session.get(url, params=params, timeout=REQUEST_TIMEOUT)
        except requests.RequestException as e:
            self.logger.error(f"Error fetching {path}: {e}")
            raise SourceFetchError("GET", path, None, str(e)) from e

        if not response.ok:
            self.logger.error(f"GitHub API returned {response.status_code} for {path}")
            raise SourceFetchError("GET", path, response.status_code, response.text)

        try:
            return response.json() or []
        except ValueError as e:
            self.logger.error(f"Invalid JSON from GitHub API for {path}: {e}")
            raise SourceFetchError("GET", path, response.status_code, f"invalid JSON: {e}") from e

    def list_open_issues(self, label: str) -> List[Issue]:
        """Fetch every open issue with the given label, excluding pull requests."""
        path = f"/repos/{self.repo}/issues"
        cursor: Optional[PageCursor] = PageCursor(per_page=self.page_size, max_pages=self.max_pages)
        issues: List[Issue] = []

        while cursor is not None:
            params = {
                "state": "open",
                "labels": label,
                "per_page": cursor.per_page,
                "page": cursor.page,
            }
            data = self._get(path, params)
            self.logger.debug(f"Fetched page {cursor.page} of {path}: {len(data)} items")

            issues.extend(
                Issue.from_github_entry(item) for item in data if "pull_request" not in item
            )

            next_cursor = cursor.advance(len(data))
            if next_cursor is None and cursor.at_cap and len(data) >= cursor.per_page:
                self.logger.warning(
                    f"Stopped after {cursor.max_pages} pages; more issues may exist for {self.repo}"
                )
            cursor = next_cursor

        self.logger.info(f"Found {len(issues)} open '{label}' issues in {self.repo}")
        return issues
