from __future__ import annotations

import pytest

from configs.config import PipelineConfig
from utils.markdown_renderer import IndexUpdateError, insert_index_card, render_index_mdx
from utils.release_notes_models import ChangeCategory, DisplayEntry, ReleaseVersion
from utils.release_pipeline import ReleaseNotesPipeline


def _entry(number, title, repository, category, merged_at="2025-06-01T00:00:00Z"):
    return DisplayEntry(
        number=number,
        title=title,
        url=f"https://github.com/Revive-Home/{repository}/pull/{number}",
        merged_at=merged_at,
        repository=repository,
        category=category,
    )


EXPECTED_PAGE = """---
title: "v1.2.0"
description: "Revive platform production release"
---

## Highlights

- Added export

## Changes shipped to production

### revive-dashboard

- Fixed login loop ([#3](https://github.com/Revive-Home/revive-dashboard/pull/3))

### revive-admin

No updates in this release.

### revive-mobile

No updates in this release.

### revive-api

- Added export ([#10](https://github.com/Revive-Home/revive-api/pull/10))
- Sprint 4 release bundle ([#11](https://github.com/Revive-Home/revive-api/pull/11))

## Fixes

- Fixed login loop ([#3](https://github.com/Revive-Home/revive-dashboard/pull/3))

## Breaking changes

No breaking changes.
"""


def test_full_release_page() -> None:
    pipeline = ReleaseNotesPipeline()
    grouped = pipeline.group_entries([
        _entry(11, "Sprint 4", "revive-api", ChangeCategory.MAINTENANCE, merged_at="2025-06-01T00:00:00Z"),
        _entry(3, "Fixed login loop", "revive-dashboard", ChangeCategory.FIX),
        _entry(10, "Added export", "revive-api", ChangeCategory.FEATURE, merged_at="2025-06-02T00:00:00Z"),
    ])

    assert pipeline.assemble_release_document("v1.2.0", grouped) == EXPECTED_PAGE


def _highlights(pipeline, entries):
    body = pipeline.assemble_release_document("v1.0.0", pipeline.group_entries(entries))
    lines = body.split("\n")
    start = lines.index("## Highlights")
    return lines[start + 2]


def test_highlights_fall_back_to_fixes_line() -> None:
    pipeline = ReleaseNotesPipeline()
    line = _highlights(pipeline, [_entry(1, "Fixed it", "revive-api", ChangeCategory.FIX)])

    assert line == "- Bug fixes and stability improvements"


def test_highlights_fall_back_to_maintenance_line() -> None:
    pipeline = ReleaseNotesPipeline()

    assert _highlights(pipeline, []) == "- Routine maintenance release"
    assert "No bug fixes in this release." in pipeline.assemble_release_document("v1.0.0", pipeline.group_entries([]))


INDEX = """---
title: "Releases"
---

<CardGroup cols={1}>
  <Card title="v1.0.0" icon="rocket" href="/release-notes/v1.0.0">
    Production release notes.
  </Card>
</CardGroup>
"""


def test_insert_index_card_prepends_new_version() -> None:
    updated = insert_index_card(INDEX, "v1.1.0")

    assert updated.index('href="/release-notes/v1.1.0"') < updated.index('href="/release-notes/v1.0.0"')
    assert '<CardGroup cols={1}>\n  <Card title="v1.1.0" icon="rocket" href="/release-notes/v1.1.0">' in updated


def test_insert_index_card_is_idempotent() -> None:
    once = insert_index_card(INDEX, "v1.1.0")

    assert insert_index_card(once, "v1.1.0") == once
    assert insert_index_card(INDEX, "v1.0.0") == INDEX


def test_insert_index_card_requires_card_group() -> None:
    with pytest.raises(IndexUpdateError) as exc:
        insert_index_card("# Releases\n", "v1.1.0")

    assert exc.value.code == "INDEX_FORMAT"


def test_render_index_lists_latest_versions() -> None:
    config = PipelineConfig(repositories=("revive-api", "revive-mobile"))
    versions = [ReleaseVersion(tag=f"v1.{i}.0", date=f"2025-0{9 - i}-01T00:00:00Z") for i in range(3)]

    page = render_index_mdx(versions, config, latest_count=2)

    assert 'href="/release-notes/v1.0.0"' in page
    assert 'href="/release-notes/v1.1.0"' in page
    assert "v1.2.0" not in page
    assert "- **revive-api**\n- **revive-mobile**" in page
    assert "labeled `released`" in page
    assert page.endswith("</CardGroup>\n")
