#!/usr/bin/env python3
from __future__ import annotations

import re
from typing import Optional

ELLIPSIS = "…"

_CRLF_RE = re.compile(r"\r+\n")
# Stacked markers ("- 1. foo") are stripped together
_LIST_MARKER_RE = re.compile(r"^(?:[-*]\s+|\d+\.\s+)+", re.MULTILINE)
_BLANK_RUN_RE = re.compile(r"\n{3,}")
_WHITESPACE_RE = re.compile(r"\s+")


def collapse_spaces(s: Optional[str]) -> str:
	if not s:
		return ""
	return _WHITESPACE_RE.sub(" ", s).strip()


def normalize_summary_text(text: Optional[str]) -> str:
	"""Canonicalize a summary fragment.

	Line endings become LF, bullet and ordered-list markers are dropped,
	blank-line runs shrink to a single blank line and the result is trimmed.
	Applying it twice gives the same result as applying it once.
	"""
	if not text:
		return ""
	out = _CRLF_RE.sub("\n", text).strip()
	out = _LIST_MARKER_RE.sub("", out)
	out = _BLANK_RUN_RE.sub("\n\n", out)
	return out.strip()


def to_single_line_summary(text: Optional[str], max_len: int = 200) -> str:
	"""Flatten text onto one line and bound it to max_len characters.

	Truncation prefers the last word boundary when it lies beyond 60% of
	max_len and always ends with a single-character ellipsis.
	"""
	if max_len <= 0:
		return ""
	one_line = _WHITESPACE_RE.sub(" ", normalize_summary_text(text))
	if not one_line:
		return ""
	if len(one_line) <= max_len:
		return one_line
	truncated = one_line[:max_len]
	last_space = truncated.rfind(" ")
	if last_space > max_len * 0.6:
		return truncated[:last_space] + ELLIPSIS
	return truncated[:max_len - 1] + ELLIPSIS
