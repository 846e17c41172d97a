#!/usr/bin/env python3
from __future__ import annotations

from typing import List, Sequence

from configs.config import PipelineConfig
from utils.classifier import annotate_sprint_title
from utils.release_notes_models import ChangeCategory, DisplayEntry, ReleaseDocument, ReleaseVersion

NO_UPDATES_LINE = "No updates in this release."
NO_FIXES_LINE = "No bug fixes in this release."
NO_BREAKING_LINE = "No breaking changes."
FIXES_HIGHLIGHT_LINE = "Bug fixes and stability improvements"
MAINTENANCE_HIGHLIGHT_LINE = "Routine maintenance release"

CARD_GROUP_TAG = "<CardGroup cols={1}>"


class IndexUpdateError(Exception):
	def __init__(self, message: str, code: str = "UNKNOWN"):
		super().__init__(message)
		self.code = code


def display_title(entry: DisplayEntry) -> str:
	if entry.category == ChangeCategory.MAINTENANCE:
		return annotate_sprint_title(entry.title)
	return entry.title


def entry_line(entry: DisplayEntry) -> str:
	return f"- {display_title(entry)} ([#{entry.number}]({entry.url}))"


def bullet_lines(entries: Sequence[DisplayEntry]) -> List[str]:
	return [entry_line(e) for e in entries or []]


def _front_matter(title: str, description: str) -> List[str]:
	return ["---", f'title: "{title}"', f'description: "{description}"', "---", ""]


def render_release_notes_mdx(doc: ReleaseDocument) -> str:
	lines: List[str] = _front_matter(doc.version, doc.description)

	lines += ["## Highlights", ""]
	if doc.highlights:
		lines += [f"- {display_title(e)}" for e in doc.highlights]
	elif doc.fixes:
		lines.append(f"- {FIXES_HIGHLIGHT_LINE}")
	else:
		lines.append(f"- {MAINTENANCE_HIGHLIGHT_LINE}")
	lines.append("")

	lines += ["## Changes shipped to production", ""]
	for repo, entries in doc.groups.items():
		lines += [f"### {repo}", ""]
		if not entries:
			lines += [NO_UPDATES_LINE, ""]
			continue
		lines += bullet_lines(entries)
		lines.append("")

	lines += ["## Fixes", ""]
	if doc.fixes:
		lines += bullet_lines(doc.fixes)
	else:
		lines.append(NO_FIXES_LINE)
	lines.append("")

	# Breaking changes are not detected automatically
	lines += ["## Breaking changes", "", NO_BREAKING_LINE, ""]
	return "\n".join(lines)


def release_href(version: str) -> str:
	return f"/release-notes/{version}"


def insert_index_card(index_text: str, version: str) -> str:
	"""Insert a card for version at the top of the index card group.

	Returns the text unchanged when the version already has a card.
	"""
	href = release_href(version)
	if f'href="{href}"' in index_text:
		return index_text
	idx = index_text.find(CARD_GROUP_TAG)
	if idx == -1:
		raise IndexUpdateError(f"Could not find {CARD_GROUP_TAG} in release notes index", code="INDEX_FORMAT")
	insert_at = idx + len(CARD_GROUP_TAG)
	card = f'\n  <Card title="{version}" icon="rocket" href="{href}">\n    Production release notes.\n  </Card>'
	return index_text[:insert_at] + card + index_text[insert_at:]


def render_index_mdx(versions: Sequence[ReleaseVersion], config: PipelineConfig, *, latest_count: int = 10) -> str:
	"""Full release notes landing page listing the latest versions."""
	cards = "\n".join(
		f'  <Card title="{v.tag}" icon="rocket" href="{release_href(v.tag)}">\n    See what shipped in {v.tag}.\n  </Card>'
		for v in list(versions)[:latest_count]
	)
	repo_list = "\n".join(f"- **{repo}**" for repo in config.repositories)
	return (
		"---\n"
		'title: "Releases"\n'
		'description: "What changed across the Revive platform"\n'
		"---\n"
		"\n"
		"Track changes shipped to **Production** across the Revive platform:\n"
		"\n"
		f"{repo_list}\n"
		"\n"
		f"Release notes are generated automatically from merged pull requests labeled `{config.label}`. "
		"Each entry is a versioned page created by the **Generate release notes** GitHub Action.\n"
		"\n"
		"## Latest\n"
		"\n"
		f"{CARD_GROUP_TAG}\n"
		f"{cards}\n"
		"</CardGroup>\n"
	)
