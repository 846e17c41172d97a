#!/usr/bin/env python3
"""Keep the docs navigation JSON in sync with generated release pages.

Only the pages of the "Releases" group are rewritten; every other field of
the navigation document is left as it was.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional, Sequence

from utils.pr_models import safe_extract
from utils.release_notes_models import ReleaseVersion
from utils.release_writer import atomic_write

logger = logging.getLogger(__name__)

RELEASES_GROUP = "Releases"
UNKNOWN_YEAR = "Unknown"


class DocsNavError(Exception):
    def __init__(self, message: str, code: str = "UNKNOWN"):
        super().__init__(message)
        self.code = code


def find_releases_group(config: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    for tab in safe_extract(config, "navigation", "tabs", default=None) or []:
        for group in tab.get("groups") or []:
            if group.get("group") == RELEASES_GROUP:
                return group
    return None


def year_groups(versions: Sequence[ReleaseVersion]) -> List[Dict[str, Any]]:
    """Group release pages by year, newest year first; page order is kept."""
    by_year: Dict[str, List[str]] = {}
    for version in versions:
        year = str(version.year) if version.year is not None else UNKNOWN_YEAR
        by_year.setdefault(year, []).append(f"release-notes/{version.tag}")
    return [
        {"group": f"{year} Release Notes", "pages": pages}
        for year, pages in sorted(by_year.items(), key=lambda kv: kv[0], reverse=True)
    ]


def update_docs_nav(config: Dict[str, Any], versions: Sequence[ReleaseVersion]) -> Dict[str, Any]:
    """Rewrite the Releases group pages in place and return the config.

    Plain string pages (e.g. the index page) are kept ahead of the year groups.

    Raises:
        DocsNavError: If the navigation has no Releases group
    """
    group = find_releases_group(config)
    if group is None:
        raise DocsNavError(f'Could not find "{RELEASES_GROUP}" group in docs.json', code="NAV_FORMAT")
    plain_pages = [p for p in group.get("pages") or [] if isinstance(p, str)]
    group["pages"] = plain_pages + year_groups(versions)
    return config


def update_docs_json(path: str, versions: Sequence[ReleaseVersion]) -> None:
    with open(path, "r", encoding="utf-8") as f:
        config = json.load(f)
    update_docs_nav(config, versions)
    atomic_write(path, json.dumps(config, indent=2, ensure_ascii=False) + "\n")
    logger.info(f"Updated {path}")
