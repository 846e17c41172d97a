#!/usr/bin/env python3
"""Pick the best available summary for a pull request body.

Strategies are tried in order and the first non-empty result wins:
the CodeRabbit structured summary, then the Summary / TLDR / TL;DR /
Overview heading sections. When none yields text the caller falls back to
the cleaned pull request title.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

from configs.config import PipelineConfig
from utils.normalization import normalize_summary_text
from utils.section_extractor import SUMMARY_HEADING_PATTERNS, extract_section_under_heading, heading_predicate
from utils.structured_summary import extract_structured_summary

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SummaryStrategy:
    name: str
    extract: Callable[[str], str]

    def __call__(self, body: str) -> Optional[str]:
        text = self.extract(body)
        return text or None


@dataclass(frozen=True)
class SelectedSummary:
    source: str
    text: str


def _heading_strategy(name: str, pattern) -> SummaryStrategy:
    predicate = heading_predicate(pattern)
    return SummaryStrategy(
        name=f"heading:{name}",
        extract=lambda body: normalize_summary_text(extract_section_under_heading(body, predicate)),
    )


def default_strategies(config: Optional[PipelineConfig] = None) -> List[SummaryStrategy]:
    config = config or PipelineConfig()
    structured = SummaryStrategy(
        name="coderabbit",
        extract=lambda body: extract_structured_summary(
            body,
            max_items=config.structured_max_items,
            per_section_cap=config.structured_per_section_cap,
            dedupe_verb_prefix=config.dedupe_verb_prefix,
        ),
    )
    return [structured] + [_heading_strategy(name, pattern) for name, pattern in SUMMARY_HEADING_PATTERNS]


class SummarySelector:
    """Runs summary strategies in order and keeps the first hit."""

    def __init__(self, strategies: Optional[List[SummaryStrategy]] = None, config: Optional[PipelineConfig] = None):
        self.strategies = strategies if strategies is not None else default_strategies(config)

    def select(self, body: Optional[str]) -> Optional[SelectedSummary]:
        if not body:
            return None
        for strategy in self.strategies:
            text = strategy(body)
            if text:
                logger.debug(f"Summary selected from {strategy.name}")
                return SelectedSummary(source=strategy.name, text=text)
        return None


_DEFAULT_SELECTOR = SummarySelector()


def select_summary(body: Optional[str]) -> str:
    """Preferred summary text for a body with default settings, or ""."""
    selected = _DEFAULT_SELECTOR.select(body)
    return selected.text if selected else ""
