#!/usr/bin/env python3
"""Turn merged pull request records into grouped release document entries.

The pipeline is pure: it performs no I/O and keeps no state between calls,
so one instance can serve any number of releases.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional

from configs.config import PipelineConfig
from utils.classifier import classify
from utils.markdown_renderer import render_release_notes_mdx
from utils.normalization import to_single_line_summary
from utils.pr_models import PullRequestRecord
from utils.release_notes_models import ChangeCategory, DisplayEntry, ReleaseDocument
from utils.summary_selector import SummarySelector
from utils.title_cleaner import clean_pr_title

logger = logging.getLogger(__name__)


class ReleaseNotesPipeline:
    """Classifies, summarizes, groups and renders pull requests for one repository set."""

    def __init__(self, config: Optional[PipelineConfig] = None, selector: Optional[SummarySelector] = None):
        self.config = config or PipelineConfig()
        self.selector = selector or SummarySelector(config=self.config)

    def display_summary(self, record: PullRequestRecord) -> str:
        """One-line display text: body summary, else cleaned title, else "Pull request #N"."""
        max_len = self.config.max_summary_chars
        selected = self.selector.select(record.body)
        summary = to_single_line_summary(selected.text if selected else "", max_len)
        if summary:
            return summary
        return to_single_line_summary(clean_pr_title(record.title), max_len) or f"Pull request #{record.number}"

    def build_display_entry(self, record: PullRequestRecord) -> Optional[DisplayEntry]:
        """Build the display entry for a record, or None when its title is excluded.

        Classification only ever looks at the original title.
        """
        classification = classify(record.title)
        if classification.excluded:
            logger.debug(f"Excluding {record.repository}#{record.number}: {record.title}")
            return None
        return DisplayEntry(
            number=record.number,
            title=self.display_summary(record),
            url=record.url,
            merged_at=record.merged_at,
            repository=record.repository,
            category=classification.category,
        )

    def group_entries(self, entries: Iterable[DisplayEntry]) -> Dict[str, List[DisplayEntry]]:
        """Group entries by configured repository, newest merge first.

        Every configured repository gets a (possibly empty) group. Ties keep
        their incoming order.
        """
        grouped: Dict[str, List[DisplayEntry]] = {repo: [] for repo in self.config.repositories}
        for entry in entries:
            if entry.repository not in grouped:
                logger.warning(f"Skipping {entry.repository}#{entry.number}: repository not configured")
                continue
            grouped[entry.repository].append(entry)
        for repo, items in grouped.items():
            grouped[repo] = sorted(items, key=lambda e: e.merged_at or "", reverse=True)
        return grouped

    def build_grouped(self, records: Iterable[PullRequestRecord]) -> Dict[str, List[DisplayEntry]]:
        entries = [entry for entry in (self.build_display_entry(r) for r in records) if entry is not None]
        return self.group_entries(entries)

    def build_release_document(self, version: str, grouped: Dict[str, List[DisplayEntry]]) -> ReleaseDocument:
        groups = {repo: list(grouped.get(repo) or []) for repo in self.config.repositories}
        all_entries = [entry for repo in self.config.repositories for entry in groups[repo]]
        features = [e for e in all_entries if e.category == ChangeCategory.FEATURE]
        fixes = [e for e in all_entries if e.category == ChangeCategory.FIX]
        return ReleaseDocument(
            version=version,
            description=self.config.release_description,
            groups=groups,
            highlights=features[:self.config.highlight_count],
            fixes=fixes,
        )

    def assemble_release_document(self, version: str, grouped: Dict[str, List[DisplayEntry]]) -> str:
        """Render the full release page body for a version."""
        return render_release_notes_mdx(self.build_release_document(version, grouped))
