#!/usr/bin/env python3
"""Locate a named heading in a pull request body and return the text below it."""

from __future__ import annotations

import re
from typing import Callable, List, Optional, Tuple

from utils.normalization import normalize_summary_text

HeadingPredicate = Callable[[str], bool]

MARKDOWN_HEADING_RE = re.compile(r"^#{2,6}\s+")


def _heading_pattern(name: str) -> re.Pattern:
    return re.compile(r"^(?:#{2,3}\s*)?" + re.escape(name) + r"\s*$", re.IGNORECASE)


# Tried in this order; the first non-empty section wins
SUMMARY_HEADING_PATTERNS: List[Tuple[str, re.Pattern]] = [
    ("summary", _heading_pattern("summary")),
    ("tldr", _heading_pattern("tldr")),
    ("tl;dr", _heading_pattern("tl;dr")),
    ("overview", _heading_pattern("overview")),
]


def split_lines(body: Optional[str]) -> List[str]:
    if not body:
        return []
    return body.replace("\r\n", "\n").split("\n")


def is_markdown_heading(line: str) -> bool:
    """True for a level 2-6 markdown heading (line already trimmed)."""
    return bool(MARKDOWN_HEADING_RE.match(line))


def heading_predicate(pattern: re.Pattern) -> HeadingPredicate:
    return lambda line: bool(pattern.match(line))


def is_summary_heading(line: str) -> bool:
    """True when a trimmed line is any of the recognized summary headings."""
    return any(pattern.match(line) for _, pattern in SUMMARY_HEADING_PATTERNS)


def extract_section_under_heading(body: Optional[str], heading_match: HeadingPredicate) -> str:
    """Return the raw lines between the first matching heading and the next heading.

    The heading line itself is excluded. The section ends at the next level
    2-6 markdown heading or at the end of the body. Returns "" when no line
    matches.
    """
    lines = split_lines(body)
    start = -1
    for idx, line in enumerate(lines):
        if heading_match(line.strip()):
            start = idx + 1
            break
    if start == -1:
        return ""
    end = len(lines)
    for idx in range(start, len(lines)):
        if is_markdown_heading(lines[idx].strip()):
            end = idx
            break
    return "\n".join(lines[start:end])


def first_matching_heading_section(body: Optional[str]) -> str:
    """Normalized text of the highest-priority summary heading that has content."""
    for _, pattern in SUMMARY_HEADING_PATTERNS:
        section = normalize_summary_text(extract_section_under_heading(body, heading_predicate(pattern)))
        if section:
            return section
    return ""
