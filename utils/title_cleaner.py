#!/usr/bin/env python3
"""Turn raw pull request titles into readable release-note phrases.

Titles arrive in many shapes: conventional commits ("feat(auth): ..."),
branch names ("TEC-7097/Weekly-Update-Character-Limit/Carlo-Sanchez") or
shouted all-caps text. Each heuristic below is a small pure function so it
can be exercised on its own.
"""

from __future__ import annotations

import re
from typing import List, Tuple

CONVENTIONAL_PREFIX_RE = re.compile(
    r"^(?:feat|fix|chore|refactor|docs|ci|style|perf|test|build)\s*(?:\([^)]*\))?\s*:\s*",
    re.IGNORECASE,
)
TICKET_BRANCH_RE = re.compile(r"^[A-Z]{2,}-\d+/")
TICKET_TOKEN_RE = re.compile(r"^[A-Z]{2,}-\d+$")
AUTHOR_SEGMENT_RE = re.compile(r"^[A-Z][a-z]+-[A-Z][a-z]+$")
TITLE_CASE_WORD_RE = re.compile(r"^[A-Z][a-z]+$")


def strip_conventional_prefix(title: str) -> str:
    """Drop a leading "type(scope):" conventional-commit prefix."""
    return CONVENTIONAL_PREFIX_RE.sub("", title, count=1)


def is_ticket_branch(title: str) -> bool:
    return bool(TICKET_BRANCH_RE.match(title))


def is_ticket_token(segment: str) -> bool:
    return bool(TICKET_TOKEN_RE.match(segment))


def is_author_segment(segment: str) -> bool:
    return bool(AUTHOR_SEGMENT_RE.match(segment))


def strip_branch_segments(title: str) -> Tuple[str, bool]:
    """Reduce a ticket-prefixed branch name to its descriptive segments.

    Returns the rewritten title and whether the branch pattern applied.
    Ticket tokens are dropped anywhere; an "Author-Name" segment is dropped
    only in the last position. When nothing survives the title is kept.
    """
    if not is_ticket_branch(title):
        return title, False
    segments = title.split("/")
    last = len(segments) - 1
    meaningful: List[str] = []
    for idx, segment in enumerate(segments):
        if is_ticket_token(segment):
            continue
        if idx == last and is_author_segment(segment):
            continue
        meaningful.append(segment)
    if not meaningful:
        return title, False
    return " ".join(meaningful), True


def dehyphenate(title: str) -> str:
    return re.sub(r"\s+", " ", title.replace("-", " ")).strip()


def sentence_case_words(title: str) -> str:
    """Lower-case Title-Case words after the first one; acronyms are kept."""
    words = title.split(" ")
    return " ".join([words[0]] + [w.lower() if TITLE_CASE_WORD_RE.match(w) else w for w in words[1:]])


def apply_title_casing(title: str) -> str:
    if not title:
        return title
    if title == title.upper() and len(title) > 3:
        return title[0].upper() + title[1:].lower()
    return title[0].upper() + title[1:]


def clean_pr_title(raw: str) -> str:
    """Convert a raw pull request title into a readable phrase.

    Example:
        clean_pr_title("feat(auth): Allow deleting L4 items") -> "Allow deleting L4 items"
    """
    title = (raw or "").strip()
    title = strip_conventional_prefix(title)
    title, from_branch = strip_branch_segments(title)
    title = dehyphenate(title)
    if from_branch and title:
        title = sentence_case_words(title)
    title = apply_title_casing(title)
    # A title made only of the prefix ("fix:") still has to say something
    if not title and raw and raw.strip():
        return apply_title_casing(dehyphenate(raw.strip())) or raw.strip()
    return title
