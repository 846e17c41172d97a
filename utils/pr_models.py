#!/usr/bin/env python3
"""Pydantic models for merged pull request records.

This module defines the immutable input record consumed by the release
pipeline, plus small helpers for pulling fields out of raw GitHub payloads.
"""

from typing import Any, Dict, Optional
from pydantic import BaseModel, Field


class PullRequestRecord(BaseModel):
    """One merged pull request as handed to the release pipeline."""

    number: int = Field(..., description="Pull request number")
    title: str = Field("", description="Original pull request title")
    body: Optional[str] = Field(None, description="Pull request body/description")
    url: str = Field("", description="GitHub URL for the PR")
    merged_at: Optional[str] = Field(None, description="Merge timestamp (ISO 8601)")
    repository: str = Field(..., description="Repository name without the owner")

    model_config = {"extra": "ignore", "frozen": True}

    @classmethod
    def from_api(cls, repository: str, pr_data: Dict[str, Any]) -> "PullRequestRecord":
        """Create a record from a GitHub pull request payload.

        Args:
            repository: Repository name the pull belongs to
            pr_data: Raw pull request payload from the REST API

        Returns:
            Normalized PullRequestRecord
        """
        return cls(
            number=pr_data.get("number", 0),
            title=pr_data.get("title") or "",
            body=pr_data.get("body"),
            url=pr_data.get("html_url") or "",
            merged_at=pr_data.get("merged_at"),
            repository=repository,
        )


def repo_from_search_item(item: Dict[str, Any]) -> Optional[tuple]:
    """Split a search result's repository_url into (owner, repo).

    Example:
        "https://api.github.com/repos/Revive-Home/revive-api" -> ("Revive-Home", "revive-api")
    """
    repository_url = item.get("repository_url") or ""
    if "/repos/" not in repository_url:
        return None
    full_name = repository_url.split("/repos/", 1)[1]
    owner, _, repo = full_name.partition("/")
    if not owner or not repo:
        return None
    return owner, repo


def safe_extract(data: Dict, *keys, default=None):
    """Safely extract nested dictionary values.

    Args:
        data: Dictionary to extract from
        *keys: Sequence of keys to traverse
        default: Default value if path doesn't exist

    Returns:
        Value at the nested path or default
    """
    current = data
    for key in keys:
        if not isinstance(current, dict) or key not in current:
            return default
        current = current[key]
    return current
