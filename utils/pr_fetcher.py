#!/usr/bin/env python3
"""Fetch merged, labelled pull requests for a release window.

This module wraps GitHubClient: it runs the merged-PR search, fetches each
pull for its body and merge timestamp, and normalizes the results into
PullRequestRecord instances ready for the release pipeline.
"""

import logging
import time
from typing import Callable, List, Optional

from clients.github_client import GitHubClient, GithubApiError, GithubAuthError
from configs.config import Config, PipelineConfig
from utils.classifier import should_exclude_title
from utils.pr_models import PullRequestRecord, repo_from_search_item

# Set up logging
logger = logging.getLogger(__name__)


class PRFetchError(Exception):
    """Raised when PR fetching operations fail with a typed code for friendly handling."""
    def __init__(self, message: str, code: str = "UNKNOWN") -> None:
        super().__init__(message)
        self.code = code


class ReleasePRFetcher:
    """Collects the pull requests that shipped in a release window."""

    def __init__(
        self,
        client: GitHubClient,
        config: Optional[PipelineConfig] = None,
        *,
        delay_s: Optional[float] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """Initialize the fetcher.

        Args:
            client: GitHub REST client
            config: Repository set and label (defaults to Config.get_pipeline_config())
            delay_s: Pause between individual pull fetches (defaults to Config.PR_FETCH_DELAY_S)
            sleep: Sleep function, replaceable in tests
        """
        self.client = client
        self.config = config or Config.get_pipeline_config()
        self.delay_s = Config.PR_FETCH_DELAY_S if delay_s is None else delay_s
        self._sleep = sleep

    def fetch_records(self, *, since: Optional[str] = None, until: Optional[str] = None) -> List[PullRequestRecord]:
        """Fetch merged pull requests for the configured repositories.

        Pulls that are unmerged, belong to another org or repository, or carry
        an excluded title are skipped. A pull that fails to fetch is logged
        and skipped.

        Raises:
            PRFetchError: If the search itself fails
        """
        try:
            items = self.client.search_merged_pull_requests(
                self.config.org, self.config.repositories, self.config.label, since=since, until=until
            )
        except GithubAuthError as e:
            raise PRFetchError(self._friendly_message_from_code("UNAUTHORIZED", fallback=str(e)), code="UNAUTHORIZED") from e
        except GithubApiError as e:
            raise PRFetchError(self._friendly_message_from_code(e.code, fallback=f"Search failed: {e}"), code=e.code) from e

        logger.info(f"Found {len(items)} PRs")
        records: List[PullRequestRecord] = []
        for item in items:
            owner_repo = repo_from_search_item(item)
            if owner_repo is None:
                continue
            owner, repo = owner_repo
            if owner != self.config.org or repo not in self.config.repositories:
                continue

            try:
                pr_data = self.client.get_pull_request(owner, repo, item["number"])
            except GithubAuthError as e:
                raise PRFetchError(self._friendly_message_from_code("UNAUTHORIZED", fallback=str(e)), code="UNAUTHORIZED") from e
            except GithubApiError as e:
                logger.warning(f"Warning: failed to fetch {repo}#{item.get('number')}: {e}")
                continue
            finally:
                if self.delay_s:
                    self._sleep(self.delay_s)

            if not pr_data.get("merged_at"):
                continue
            if should_exclude_title(pr_data.get("title") or ""):
                logger.debug(f"Skipping staging PR {repo}#{pr_data.get('number')}")
                continue
            records.append(PullRequestRecord.from_api(repo, pr_data))

        logger.info(f"✓ Collected {len(records)} merged PRs")
        return records

    def _friendly_message_from_code(self, code: str, *, fallback: str) -> str:
        mapping = {
            "TIMEOUT": "Timeout while fetching data. Please retry or increase HTTP_TIMEOUT_S.",
            "UNAUTHORIZED": "Access denied. Please check your GitHub token and its scopes.",
            "RATE_LIMIT": "Rate limit exceeded. Please wait a few minutes and retry.",
            "NETWORK": "Network error while contacting GitHub. Please retry.",
        }
        return mapping.get(code, fallback)
