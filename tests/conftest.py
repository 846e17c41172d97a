from __future__ import annotations

from pathlib import Path
import sys

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from configs.config import PipelineConfig
from utils.pr_models import PullRequestRecord


@pytest.fixture
def pipeline_config() -> PipelineConfig:
    return PipelineConfig()


@pytest.fixture
def make_record():
    def _make(number: int = 1, title: str = "Add export button", body=None, repository: str = "revive-api",
              merged_at: str = "2025-06-01T10:00:00Z") -> PullRequestRecord:
        return PullRequestRecord(
            number=number,
            title=title,
            body=body,
            url=f"https://github.com/Revive-Home/{repository}/pull/{number}",
            merged_at=merged_at,
            repository=repository,
        )

    return _make


class FakeGitHubClient:
    """In-memory stand-in for GitHubClient."""

    def __init__(self) -> None:
        self.search_items = []
        self.pulls = {}
        self.failing = set()
        self.releases = []
        self.search_calls = []
        self.closed = False

    def add_pull(self, repo: str, number: int, title: str, *, body=None, merged_at="2025-06-01T10:00:00Z",
                 org: str = "Revive-Home") -> None:
        self.search_items.append({
            "number": number,
            "repository_url": f"https://api.github.com/repos/{org}/{repo}",
        })
        self.pulls[(org, repo, number)] = {
            "number": number,
            "title": title,
            "body": body,
            "html_url": f"https://github.com/{org}/{repo}/pull/{number}",
            "merged_at": merged_at,
        }

    def search_merged_pull_requests(self, org, repos, label, *, since=None, until=None):
        self.search_calls.append({"org": org, "repos": tuple(repos), "label": label, "since": since, "until": until})
        return list(self.search_items)

    def get_pull_request(self, owner, repo, number):
        from clients.github_client import GithubApiError

        if (owner, repo, number) in self.failing:
            raise GithubApiError(f"boom {repo}#{number}", code="HTTP")
        return self.pulls[(owner, repo, number)]

    def list_release_versions(self, owner, repo):
        return list(self.releases)

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_client() -> FakeGitHubClient:
    return FakeGitHubClient()
