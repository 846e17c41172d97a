#!/usr/bin/env python3
"""Classify pull requests from their original, uncleaned titles."""

from __future__ import annotations

import re
from dataclasses import dataclass

from utils.release_notes_models import ChangeCategory

FIX_PREFIX_RE = re.compile(r"^fix", re.IGNORECASE)
FIX_WORD_RE = re.compile(r"\bfix\b", re.IGNORECASE)
SPRINT_RE = re.compile(r"^sprint\s+\d+", re.IGNORECASE)
SPRINT_ONLY_RE = re.compile(r"^Sprint\s+\d+$", re.IGNORECASE)

EXCLUDE_TITLE_PATTERNS = [
    re.compile(r"\bstaging\b", re.IGNORECASE),
    re.compile(r"^update staging\b", re.IGNORECASE),
    re.compile(r"^staging\b", re.IGNORECASE),
]

SPRINT_SUFFIX = "release bundle"


@dataclass(frozen=True)
class Classification:
    is_fix: bool
    is_sprint: bool
    excluded: bool

    @property
    def category(self) -> ChangeCategory:
        if self.is_fix:
            return ChangeCategory.FIX
        if self.is_sprint:
            return ChangeCategory.MAINTENANCE
        return ChangeCategory.FEATURE


def is_fix_title(title: str) -> bool:
    return bool(FIX_PREFIX_RE.match(title) or FIX_WORD_RE.search(title))


def is_sprint_title(title: str) -> bool:
    return bool(SPRINT_RE.match(title))


def should_exclude_title(title: str) -> bool:
    """Staging-only changes never reach production release notes."""
    return any(pattern.search(title) for pattern in EXCLUDE_TITLE_PATTERNS)


def classify(title: str) -> Classification:
    title = title or ""
    return Classification(
        is_fix=is_fix_title(title),
        is_sprint=is_sprint_title(title),
        excluded=should_exclude_title(title),
    )


def annotate_sprint_title(title: str) -> str:
    """Expand a bare "Sprint 12" title to "Sprint 12 release bundle"."""
    if SPRINT_ONLY_RE.match(title):
        return f"{title} {SPRINT_SUFFIX}"
    return title
