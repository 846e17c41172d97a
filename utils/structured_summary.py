#!/usr/bin/env python3
"""Condense a CodeRabbit "Summary by CodeRabbit" block into one sentence.

CodeRabbit appends a release-notes style block to many pull request bodies:

    ## Summary by CodeRabbit

    - **New Features**
      - Added dark mode
    - **Bug Fixes**
      - Fixed crash on save

The block is captured, split into categorized items, ranked by category,
capped, and rendered as a single prose sentence. Blocks without category
labels are returned as normalized free text.
"""

from __future__ import annotations

import logging
import re
from typing import Dict, List, Optional

from utils.normalization import normalize_summary_text
from utils.release_notes_models import SummaryItem, SummarySection
from utils.section_extractor import is_markdown_heading, split_lines

logger = logging.getLogger(__name__)

CODERABBIT_MARKER_RE = re.compile(r"^[\s*_#-]*summary\s+by\s+coderabbit[\s*_]*$", re.IGNORECASE)
END_OF_AUTOGENERATED = "end of auto-generated"
IMAGE_ARTIFACT = "image"

MAX_FRAGMENT_CHARS = 80
FRAGMENT_CUT_AT = 77
MIN_WORD_BOUNDARY = 40


def is_coderabbit_marker(line: str) -> bool:
    return bool(CODERABBIT_MARKER_RE.match(line.strip()))


def section_title(line: str) -> Optional[SummarySection]:
    """Return the category label a line announces, if any.

    Emphasis, heading and list characters around the label are ignored, so
    "- **Bug Fixes**" and "### Bug Fixes" both announce Bug Fixes.
    """
    cleaned = re.sub(r"^[\s*_#-]+", "", line)
    cleaned = re.sub(r"[\s*_#]+$", "", cleaned)
    return SummarySection.from_label(cleaned)


def capture_block(body: Optional[str]) -> List[str]:
    """Lines of the structured block following the marker, blanks preserved."""
    lines = split_lines(body)
    start = next((idx for idx, line in enumerate(lines) if is_coderabbit_marker(line)), -1)
    if start == -1:
        return []
    block: List[str] = []
    for raw in lines[start + 1:]:
        line = raw.strip()
        if not line:
            block.append("")
            continue
        if line.startswith("<!--"):
            if END_OF_AUTOGENERATED in line:
                break
            continue
        if is_coderabbit_marker(line) or is_markdown_heading(line):
            break
        if line.lower() == IMAGE_ARTIFACT:
            break
        block.append(raw)
    return block


def parse_items(block: List[str]) -> List[SummaryItem]:
    """Assign every non-empty line to the most recent category label.

    Lines before the first label are discarded.
    """
    items: List[SummaryItem] = []
    current: Optional[SummarySection] = None
    for raw in block:
        line = raw.strip()
        if not line:
            continue
        section = section_title(line)
        if section is not None:
            current = section
            continue
        if current is None:
            continue
        text = re.sub(r"^[\s*_-]+", "", line)
        text = re.sub(r"[\s*_]+$", "", text).strip()
        if text:
            items.append(SummaryItem(section=current, text=text))
    return items


def rank_items(items: List[SummaryItem]) -> List[SummaryItem]:
    # sorted() is stable, so source order survives within a rank
    return sorted(items, key=lambda it: it.section.rank)


def select_items(items: List[SummaryItem], *, max_items: int = 4, per_section_cap: int = 2) -> List[SummaryItem]:
    selected: List[SummaryItem] = []
    per_section: Dict[SummarySection, int] = {}
    for item in rank_items(items):
        if len(selected) >= max_items:
            break
        if per_section.get(item.section, 0) >= per_section_cap:
            continue
        per_section[item.section] = per_section.get(item.section, 0) + 1
        selected.append(item)
    return selected


def shorten_fragment(text: str) -> str:
    if len(text) <= MAX_FRAGMENT_CHARS:
        return text
    cut = text.rfind(" ", 0, FRAGMENT_CUT_AT + 1)
    return text[:cut if cut > MIN_WORD_BOUNDARY else FRAGMENT_CUT_AT] + "..."


def render_fragment(item: SummaryItem, *, dedupe_verb_prefix: bool = False) -> str:
    text = item.text[:1].lower() + item.text[1:]
    text = shorten_fragment(text)
    prefix = item.section.verb_prefix
    if dedupe_verb_prefix and prefix and text.startswith(prefix):
        return text
    return item.section.render(text)


def join_fragments(parts: List[str]) -> str:
    """Join fragments as "A", "A and B" or "A, B, and C"; the first is capitalized."""
    if not parts:
        return ""
    first = parts[0][:1].upper() + parts[0][1:]
    if len(parts) == 1:
        return first
    if len(parts) == 2:
        return f"{first} and {parts[1]}"
    return f"{first}, " + ", ".join(parts[1:-1]) + f", and {parts[-1]}"


def extract_structured_summary(
    body: Optional[str],
    *,
    max_items: int = 4,
    per_section_cap: int = 2,
    dedupe_verb_prefix: bool = False,
) -> str:
    """Return a one-sentence synopsis of the CodeRabbit block, or "" if there is none."""
    block = capture_block(body)
    if not "\n".join(block).strip():
        return ""

    if not any(section_title(line.strip()) is not None for line in block):
        return normalize_summary_text("\n".join(block))

    items = parse_items(block)
    if not items:
        return ""
    selected = select_items(items, max_items=max_items, per_section_cap=per_section_cap)
    logger.debug(f"Structured summary: {len(items)} items, {len(selected)} selected")
    parts = [render_fragment(item, dedupe_verb_prefix=dedupe_verb_prefix) for item in selected]
    return normalize_summary_text(join_fragments(parts))
