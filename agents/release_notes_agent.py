#!/usr/bin/env python3
"""Release notes agent for generating versioned release pages.

This agent collects merged, labelled pull requests across the configured
repositories, condenses each one into a single display line, and writes a
release page plus the navigation entries that point to it.
"""

import json
import logging
import os
import sys
import time
from typing import Callable, Dict, List, Optional, Tuple

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

from clients.github_client import GitHubClient, GithubApiError, GithubAuthError  # noqa: E402
from configs.config import Config, PipelineConfig  # noqa: E402
from utils.docs_nav import DocsNavError, update_docs_json  # noqa: E402
from utils.markdown_renderer import IndexUpdateError, insert_index_card, render_index_mdx  # noqa: E402
from utils.pr_fetcher import PRFetchError, ReleasePRFetcher  # noqa: E402
from utils.pr_models import PullRequestRecord  # noqa: E402
from utils.release_notes_models import ReleaseVersion  # noqa: E402
from utils.release_pipeline import ReleaseNotesPipeline  # noqa: E402
from utils.release_writer import ReleaseNotesWriter, ReleaseWriteError  # noqa: E402
from utils.section_extractor import split_lines  # noqa: E402

# Set up logging
logger = logging.getLogger(__name__)

DEBUG_KEYWORDS = ("coderabbit", "summary", "release notes")


class ReleaseNotesAgent:
	"""Agent that turns merged pull requests into release pages."""

	def __init__(
		self,
		client: Optional[GitHubClient] = None,
		config: Optional[PipelineConfig] = None,
		*,
		writer: Optional[ReleaseNotesWriter] = None,
		docs_json_path: Optional[str] = None,
		version_source_repo: Optional[str] = None,
		release_delay_s: Optional[float] = None,
		pr_fetch_delay_s: Optional[float] = None,
		sleep: Callable[[float], None] = time.sleep,
	):
		"""Initialize the release notes agent.

		Args:
			client: Optional GitHubClient. If None, one is created on first use.
			config: Repository set and summary settings (defaults to Config.get_pipeline_config())
			writer: Output writer (defaults to Config.RELEASE_NOTES_DIR)
			docs_json_path: Navigation JSON updated by backfill
			version_source_repo: Repository whose releases define the versions
			release_delay_s: Pause between releases during backfill
			pr_fetch_delay_s: Pause between individual pull fetches
			sleep: Sleep function, replaceable in tests
		"""
		self.config = config or Config.get_pipeline_config()
		self.pipeline = ReleaseNotesPipeline(self.config)
		self.writer = writer or ReleaseNotesWriter()
		self.docs_json_path = docs_json_path or Config.DOCS_JSON_PATH
		self.version_source_repo = version_source_repo or Config.VERSION_SOURCE_REPO
		self.release_delay_s = Config.RELEASE_DELAY_S if release_delay_s is None else release_delay_s
		self.pr_fetch_delay_s = pr_fetch_delay_s
		self._sleep = sleep
		# Lazy-init client to avoid requiring a GitHub token unless actually used
		self._client = client
		self._fetcher: Optional[ReleasePRFetcher] = None
		logger.info("Release notes agent initialized")

	@property
	def client(self) -> GitHubClient:
		if self._client is None:
			self._client = GitHubClient()
		return self._client

	@property
	def fetcher(self) -> ReleasePRFetcher:
		if self._fetcher is None:
			self._fetcher = ReleasePRFetcher(self.client, self.config, delay_s=self.pr_fetch_delay_s, sleep=self._sleep)
		return self._fetcher

	def render_release(self, version: str, *, since: Optional[str] = None, until: Optional[str] = None) -> str:
		"""Fetch the pull requests of a release window and render its page."""
		records = self.fetcher.fetch_records(since=since, until=until)
		grouped = self.pipeline.build_grouped(records)
		counts = ", ".join(f"{repo}={len(entries)}" for repo, entries in grouped.items())
		logger.info(f"Grouped entries for {version}: {counts}")
		return self.pipeline.assemble_release_document(version, grouped)

	def generate(self, version: str, *, since: Optional[str] = None, overwrite: bool = False) -> str:
		"""Generate a single release page and add it to the index.

		Returns:
			Path of the written page

		Raises:
			ReleaseWriteError: If the page exists and overwrite is off, or the index is missing
			IndexUpdateError: If the index has no card group
			PRFetchError: If pull requests cannot be fetched
		"""
		if self.writer.exists(version) and not overwrite:
			raise ReleaseWriteError(
				f"Release notes already exist: {self.writer.page_path(version)}. "
				"Set RELEASE_OVERWRITE=true to regenerate.",
				code="EXISTS",
			)
		content = self.render_release(version, since=since)
		path = self.writer.write_release(version, content, overwrite=overwrite)
		self.writer.write_index(insert_index_card(self.writer.read_index(), version))
		return path

	def backfill(self, years: Optional[Tuple[int, int]] = None) -> List[ReleaseVersion]:
		"""Generate pages for every release in the year range that has none yet.

		Existing pages are kept. The navigation JSON and the index page are
		rebuilt from every generated or already present version.
		"""
		start_year, end_year = years or Config.get_backfill_years()
		releases = self.client.list_release_versions(self.config.org, self.version_source_repo)
		logger.info(f"Found {len(releases)} releases")

		# Undated tags are attempted anyway
		targets = [r for r in releases if r.year is None or start_year <= r.year <= end_year]
		logger.info(f"Processing {len(targets)} releases from {start_year}-{end_year}")

		generated: List[ReleaseVersion] = []
		skipped = 0
		for idx, release in enumerate(targets):
			if self.writer.exists(release.tag):
				generated.append(release)
				skipped += 1
				continue

			previous = self._previous_release(releases, targets, idx)
			since = previous.date if previous else None
			logger.info(f"── {release.tag} ({(release.date or 'unknown date')[:10]}) ──")
			logger.info(f"PRs merged: {(since or 'beginning')[:10]} → {(release.date or 'now')[:10]}")
			try:
				content = self.render_release(release.tag, since=since, until=release.date)
				self.writer.write_release(release.tag, content)
				generated.append(release)
			except (PRFetchError, ReleaseWriteError) as e:
				logger.error(f"Error processing {release.tag}: {e}")

			if self.release_delay_s:
				self._sleep(self.release_delay_s)

		if skipped:
			logger.info(f"Skipped {skipped} releases (already generated)")

		generated.sort(key=lambda v: v.date or "", reverse=True)
		try:
			update_docs_json(self.docs_json_path, generated)
		except (DocsNavError, FileNotFoundError) as e:
			logger.error(f"Could not update navigation: {e}")
		self.writer.write_index(render_index_mdx(generated, self.config, latest_count=Config.INDEX_LATEST_COUNT))
		logger.info(f"Done! Generated {len(generated)} release notes.")
		return generated

	@staticmethod
	def _previous_release(releases: List[ReleaseVersion], targets: List[ReleaseVersion], idx: int) -> Optional[ReleaseVersion]:
		if idx + 1 < len(targets):
			return targets[idx + 1]
		pos = releases.index(targets[idx]) + 1
		return releases[pos] if pos < len(releases) else None

	def debug_body(self, repo: str, number: int) -> Dict[str, object]:
		"""Fetch one pull and report which lines look like summary markers."""
		pr = self.client.get_pull_request(self.config.org, repo, number)
		body = pr.get("body") or ""
		hits = [
			(idx, line.strip()[:200])
			for idx, line in enumerate(split_lines(body))
			if any(k in line.strip().lower() for k in DEBUG_KEYWORDS)
		]
		selected = self.pipeline.selector.select(body)
		return {
			"title": pr.get("title"),
			"body": body,
			"marker_lines": hits,
			"summary_source": selected.source if selected else "title",
			"display_summary": self.pipeline.display_summary(PullRequestRecord.from_api(repo, pr)),
		}

	def close(self) -> None:
		"""Close the agent and cleanup resources."""
		if self._client:
			self._client.close()
		logger.info("Release notes agent closed")


def print_debug_report(report: Dict[str, object]) -> None:
	body = str(report["body"] or "(empty body)")
	print("=== PR TITLE ===")
	print(report["title"])
	print("\n=== PR BODY (first 3000 chars) ===")
	print(body[:3000])
	print("\n=== SEARCHING FOR CODERABBIT MARKERS ===")
	for idx, line in report["marker_lines"]:
		print(f"Line {idx}: {line}")
	print(f"\nSummary source: {report['summary_source']}")
	print(f"Display summary: {report['display_summary']}")


def _env_flag(name: str) -> bool:
	return (os.getenv(name) or "").lower() == "true"


def main():
	"""CLI entry point for the release notes agent."""
	import argparse

	parser = argparse.ArgumentParser(
		description="Release Notes Agent - Generate release pages from merged pull requests",
		formatter_class=argparse.RawDescriptionHelpFormatter,
		epilog="""
Examples:
  RELEASE_VERSION=v1.4.0 python -m agents.release_notes_agent generate
  python -m agents.release_notes_agent generate --version v1.4.0 --since 2025-06-01 --overwrite
  python -m agents.release_notes_agent backfill --years 2025-2026
  python -m agents.release_notes_agent debug-body revive-api 1861
		"""
	)
	parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
	sub = parser.add_subparsers(dest="command", required=True)

	gen = sub.add_parser("generate", help="Generate release notes for one version")
	gen.add_argument("--version", default=os.getenv("RELEASE_VERSION"), help="Release version (RELEASE_VERSION)")
	gen.add_argument("--since", default=os.getenv("RELEASE_SINCE"), help="ISO date or YYYY-MM-DD (RELEASE_SINCE)")
	gen.add_argument("--overwrite", action="store_true", default=_env_flag("RELEASE_OVERWRITE"))

	bf = sub.add_parser("backfill", help="Generate release notes for every past release")
	bf.add_argument("--years", default=Config.BACKFILL_YEARS, help="Inclusive year range, e.g. 2025-2026")

	dbg = sub.add_parser("debug-body", help="Print a PR body and its summary marker lines")
	dbg.add_argument("repo", nargs="?", default=Config.VERSION_SOURCE_REPO)
	dbg.add_argument("pr", nargs="?", type=int, default=1861)
	dbg.add_argument("--json", action="store_true", help="Output JSON instead of text")

	args = parser.parse_args()

	# Set up logging
	log_level = logging.DEBUG if args.verbose else logging.INFO
	logging.basicConfig(
		level=log_level,
		format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
	)

	# Suppress verbose logs from libraries unless in debug mode
	if not args.verbose:
		logging.getLogger("clients.github_client").setLevel(logging.WARNING)
		logging.getLogger("urllib3").setLevel(logging.WARNING)

	agent = None
	try:
		agent = ReleaseNotesAgent()
		if args.command == "generate":
			if not args.version:
				print("Error: Missing required env var: RELEASE_VERSION", file=sys.stderr)
				sys.exit(1)
			path = agent.generate(args.version, since=args.since, overwrite=args.overwrite)
			print(f"Generated: {path}")
		elif args.command == "backfill":
			first, _, last = args.years.partition("-")
			generated = agent.backfill((int(first), int(last or first)))
			print(f"Done! Generated {len(generated)} release notes.")
		elif args.command == "debug-body":
			report = agent.debug_body(args.repo, args.pr)
			if args.json:
				print(json.dumps(report, indent=2, default=str))
			else:
				print_debug_report(report)
		sys.exit(0)
	except (GithubAuthError, GithubApiError, PRFetchError, ReleaseWriteError, IndexUpdateError) as e:
		print(f"Error: {e}", file=sys.stderr)
		sys.exit(1)
	finally:
		if agent:
			agent.close()


if __name__ == "__main__":
	main()
