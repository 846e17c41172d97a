from __future__ import annotations

import pytest
import requests

from clients.github_client import GitHubClient, GithubApiError, GithubAuthError
from configs.config import Config


class FakeResponse:
    def __init__(self, status_code=200, payload=None, headers=None, text=""):
        self.status_code = status_code
        self._payload = payload
        self.headers = headers or {}
        self.text = text

    def json(self):
        return self._payload


class FakeSession:
    def __init__(self, responses=None):
        self.responses = list(responses or [])
        self.headers = {}
        self.urls = []
        self.closed = False

    def get(self, url, timeout=None):
        self.urls.append(url)
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    def close(self):
        self.closed = True


def _client(responses, *, max_retries=3, clock=lambda: 990.0):
    sleeps = []
    session = FakeSession(responses)
    client = GitHubClient(
        token="test-token",
        timeout_s=5,
        max_retries=max_retries,
        session=session,
        sleep=sleeps.append,
        clock=clock,
    )
    return client, session, sleeps


def test_missing_token_raises(monkeypatch) -> None:
    monkeypatch.setattr(Config, "GITHUB_TOKEN", None)

    with pytest.raises(GithubAuthError):
        GitHubClient(session=FakeSession())


def test_session_headers() -> None:
    _, session, _ = _client([])

    assert session.headers["Authorization"] == "Bearer test-token"
    assert session.headers["X-GitHub-Api-Version"] == "2022-11-28"


def test_primary_rate_limit_waits_until_reset() -> None:
    limited = FakeResponse(403, headers={"x-ratelimit-reset": "1000", "x-ratelimit-remaining": "0"})
    client, _, sleeps = _client([limited, FakeResponse(200, {"ok": True})])

    assert client.get_json("https://api.test/x") == {"ok": True}
    assert sleeps == [15]


def test_secondary_rate_limit_backs_off() -> None:
    client, _, sleeps = _client([FakeResponse(429), FakeResponse(200, [])])

    assert client.get_json("https://api.test/x") == []
    assert sleeps == [10]


def test_rate_limit_retries_exhausted() -> None:
    client, _, sleeps = _client([FakeResponse(403), FakeResponse(403)], max_retries=1)

    with pytest.raises(GithubApiError) as exc:
        client.get_json("https://api.test/x")

    assert exc.value.code == "RATE_LIMIT"
    assert sleeps == [10, 20]


@pytest.mark.parametrize(
    "response, error, code",
    [
        (FakeResponse(404), GithubApiError, "NOT_FOUND"),
        (FakeResponse(500, text="oops"), GithubApiError, "HTTP"),
        (requests.Timeout("slow"), GithubApiError, "TIMEOUT"),
        (requests.ConnectionError("down"), GithubApiError, "NETWORK"),
    ],
)
def test_error_codes(response, error, code) -> None:
    client, _, _ = _client([response])

    with pytest.raises(error) as exc:
        client.get_json("https://api.test/x")

    assert exc.value.code == code


def test_unauthorized() -> None:
    client, _, _ = _client([FakeResponse(401)])

    with pytest.raises(GithubAuthError):
        client.get_json("https://api.test/x")


def test_paginate_follows_full_pages() -> None:
    client, session, _ = _client([FakeResponse(200, list(range(100))), FakeResponse(200, [1, 2, 3])])

    items = client.paginate("https://api.test/repos/o/r/releases")

    assert len(items) == 103
    assert session.urls == [
        "https://api.test/repos/o/r/releases?per_page=100&page=1",
        "https://api.test/repos/o/r/releases?per_page=100&page=2",
    ]


def test_search_query_is_encoded() -> None:
    client, session, _ = _client([FakeResponse(200, {"items": [{"number": 1}]})])

    items = client.search_merged_pull_requests(
        "Revive-Home", ["revive-api", "revive-mobile"], "released",
        since="2025-06-01T10:00:00Z", until="2025-07-01",
    )

    assert items == [{"number": 1}]
    url = session.urls[0]
    assert url.startswith(f"{client.base_url}/search/issues?q=")
    assert "repo%3ARevive-Home%2Frevive-api%20repo%3ARevive-Home%2Frevive-mobile%20is%3Apr%20is%3Amerged" in url
    assert "label%3Areleased%20merged%3A%3E%3D2025-06-01%20merged%3A%3C%3D2025-07-01" in url
    assert url.endswith("&per_page=100")


def test_release_versions_newest_first_without_drafts() -> None:
    releases = [
        {"tag_name": "v1.0.0", "published_at": "2025-01-01T00:00:00Z"},
        {"tag_name": "v1.1.0", "published_at": "2025-03-01T00:00:00Z"},
        {"tag_name": "v1.2.0-rc", "draft": True, "created_at": "2025-04-01T00:00:00Z"},
    ]
    client, _, _ = _client([FakeResponse(200, releases)])

    versions = client.list_release_versions("Revive-Home", "revive-api")

    assert [v.tag for v in versions] == ["v1.1.0", "v1.0.0"]
    assert versions[0].year == 2025


def test_release_versions_fall_back_to_semver_tags() -> None:
    tags = [{"name": "v2.0.0"}, {"name": "nightly"}, {"name": "1.9.3"}]
    client, session, _ = _client([FakeResponse(200, []), FakeResponse(200, tags)])

    versions = client.list_release_versions("Revive-Home", "revive-api")

    assert [v.tag for v in versions] == ["v2.0.0", "1.9.3"]
    assert all(v.date is None for v in versions)
    assert session.urls[1].startswith(f"{client.base_url}/repos/Revive-Home/revive-api/tags")


def test_close_closes_session() -> None:
    client, session, _ = _client([])

    client.close()

    assert session.closed
