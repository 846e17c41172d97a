#!/usr/bin/env python3
"""GitHub REST client for release note generation.

Searches merged pull requests across a repository set, fetches individual
pulls, and lists release versions. Primary rate limits are waited out until
the advertised reset; secondary limits back off exponentially.
"""

import logging
import re
import time
from typing import Any, Callable, Dict, Iterable, List, Optional
from urllib.parse import quote

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from configs.config import Config
from utils.release_notes_models import ReleaseVersion

# Set up logging
logger = logging.getLogger(__name__)

PER_PAGE = 100
RATE_LIMIT_BUFFER_S = 5
SECONDARY_BACKOFF_BASE_S = 10
SEMVER_TAG_RE = re.compile(r"^v?\d+\.\d+\.\d+")


class GithubAuthError(Exception):
    """Raised when GitHub API authentication fails."""
    pass


class GithubApiError(Exception):
    """Raised when GitHub API operations fail with a typed code."""
    def __init__(self, message: str, code: str = "UNKNOWN") -> None:
        super().__init__(message)
        self.code = code


class GitHubClient:
    """Thin GitHub REST client with rate-limit aware retries."""

    def __init__(
        self,
        token: Optional[str] = None,
        timeout_s: Optional[int] = None,
        *,
        max_retries: Optional[int] = None,
        session: Optional[requests.Session] = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.time,
    ):
        """Initialize the GitHub client.

        Args:
            token: GitHub Personal Access Token (defaults to Config.GITHUB_TOKEN)
            timeout_s: Request timeout in seconds (defaults to Config.HTTP_TIMEOUT_S)
            max_retries: Rate-limit retries per request (defaults to Config.GITHUB_MAX_RETRIES)
            session: Pre-built session, mainly for tests
            sleep: Sleep function used while rate limited
            clock: Wall clock in epoch seconds

        Raises:
            GithubAuthError: If no valid token is provided
        """
        github_config = Config.get_github_config()
        self.token = token or github_config["token"]
        self.timeout_s = timeout_s or github_config["timeout_s"]
        self.max_retries = github_config["max_retries"] if max_retries is None else max_retries
        self.base_url = github_config["api_url"]
        self._sleep = sleep
        self._clock = clock

        if not self.token:
            raise GithubAuthError("GitHub token is required (GITHUB_TOKEN or GITHUB_PAT env var)")

        if session is None:
            session = requests.Session()
            # Transient server failures only; rate limits are handled in get_json
            retry_strategy = Retry(
                total=3,
                status_forcelist=[500, 502, 503, 504],
                backoff_factor=1,
                allowed_methods=["HEAD", "GET", "OPTIONS"],
            )
            session.mount("https://", HTTPAdapter(max_retries=retry_strategy))
        self.session = session
        self.session.headers.update({
            'Authorization': f'Bearer {self.token}',
            'Accept': 'application/vnd.github+json',
            'X-GitHub-Api-Version': '2022-11-28',
            'User-Agent': 'release-notes-docs/1.0',
        })

        logger.info("GitHub client initialized")

    def get_json(self, url: str) -> Any:
        """GET a URL and decode JSON, waiting out rate limits.

        Raises:
            GithubAuthError: On 401
            GithubApiError: On any other failure or when retries are exhausted
        """
        for attempt in range(self.max_retries + 1):
            try:
                response = self.session.get(url, timeout=self.timeout_s)
            except requests.Timeout as e:
                raise GithubApiError(f"Timeout fetching {url}: {e}", code="TIMEOUT") from e
            except requests.RequestException as e:
                raise GithubApiError(f"Network error fetching {url}: {e}", code="NETWORK") from e

            status = response.status_code
            if status == 200:
                return response.json()
            if status == 401:
                raise GithubAuthError("Invalid GitHub token or insufficient permissions")
            if status in (403, 429):
                self._wait_for_rate_limit(response, attempt)
                continue
            if status == 404:
                raise GithubApiError(f"GitHub API error 404 for {url}", code="NOT_FOUND")
            raise GithubApiError(f"GitHub API error {status} for {url}: {response.text}", code="HTTP")
        raise GithubApiError(f"GitHub API failed after {self.max_retries} retries for {url}", code="RATE_LIMIT")

    def _wait_for_rate_limit(self, response: requests.Response, attempt: int) -> None:
        reset_header = response.headers.get("x-ratelimit-reset")
        remaining = response.headers.get("x-ratelimit-remaining")
        if reset_header and remaining in ("0", None):
            wait_s = max(int(reset_header) - self._clock(), 0) + RATE_LIMIT_BUFFER_S
            logger.warning(f"⏳ Rate limited. Waiting {wait_s / 60:.0f} min until reset...")
        else:
            wait_s = (2 ** attempt) * SECONDARY_BACKOFF_BASE_S
            logger.warning(f"⏳ Rate limited (no reset header). Waiting {wait_s:.0f}s...")
        self._sleep(wait_s)

    def paginate(self, url: str) -> List[Any]:
        """Collect every page of a list endpoint."""
        items: List[Any] = []
        page = 1
        sep = "&" if "?" in url else "?"
        while True:
            data = self.get_json(f"{url}{sep}per_page={PER_PAGE}&page={page}")
            if not isinstance(data, list) or not data:
                break
            items.extend(data)
            if len(data) < PER_PAGE:
                break
            page += 1
        return items

    def search_merged_pull_requests(
        self,
        org: str,
        repos: Iterable[str],
        label: str,
        *,
        since: Optional[str] = None,
        until: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """Search merged, labelled pull requests across repositories.

        Args:
            org: Organization owning the repositories
            repos: Repository names
            label: Label marking released pull requests
            since: Optional lower merge bound (ISO date or timestamp)
            until: Optional upper merge bound (ISO date or timestamp)

        Returns:
            Raw search result items (first page, up to 100)
        """
        q_parts = [" ".join(f"repo:{org}/{r}" for r in repos), "is:pr", "is:merged", f"label:{label}"]
        if since:
            q_parts.append(f"merged:>={since[:10]}")
        if until:
            q_parts.append(f"merged:<={until[:10]}")
        query = " ".join(q_parts)
        logger.info(f"Searching merged pull requests: {query}")
        data = self._search(query)
        items = data.get("items") or []
        logger.debug(f"✓ Search returned {len(items)} items")
        return items

    def _search(self, query: str) -> Dict[str, Any]:
        encoded = quote(query, safe="")
        return self.get_json(f"{self.base_url}/search/issues?q={encoded}&per_page={PER_PAGE}")

    def get_pull_request(self, owner: str, repo: str, number: int) -> Dict[str, Any]:
        """Fetch pull request metadata via GitHub REST API."""
        logger.debug(f"Fetching PR: {owner}/{repo}#{number}")
        return self.get_json(f"{self.base_url}/repos/{owner}/{repo}/pulls/{number}")

    def list_release_versions(self, owner: str, repo: str) -> List[ReleaseVersion]:
        """Published releases newest first, or semver tags when there are no releases."""
        logger.info(f"Fetching releases from {owner}/{repo}...")
        releases = self.paginate(f"{self.base_url}/repos/{owner}/{repo}/releases")
        if not releases:
            logger.info("No releases found, trying tags...")
            tags = self.paginate(f"{self.base_url}/repos/{owner}/{repo}/tags")
            return [ReleaseVersion(tag=t["name"]) for t in tags if SEMVER_TAG_RE.match(t.get("name") or "")]

        versions = [
            ReleaseVersion(tag=r["tag_name"], date=r.get("published_at") or r.get("created_at"))
            for r in releases
            if not r.get("draft")
        ]
        return sorted(versions, key=lambda v: v.date or "", reverse=True)

    def close(self) -> None:
        self.session.close()
