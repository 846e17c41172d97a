import os
from typing import Dict, Any, List, Tuple

from pydantic import BaseModel, ConfigDict, Field


def _split_csv(raw: str) -> List[str]:
	return [part.strip() for part in (raw or "").split(",") if part.strip()]


class PipelineConfig(BaseModel):
	"""Settings handed to the summary/assembly pipeline at construction time."""

	model_config = ConfigDict(frozen=True, extra="forbid")

	org: str = "Revive-Home"
	repositories: Tuple[str, ...] = ("revive-dashboard", "revive-admin", "revive-mobile", "revive-api")
	label: str = "released"
	release_description: str = "Revive platform production release"
	max_summary_chars: int = Field(default=200, ge=40)
	highlight_count: int = Field(default=6, ge=0)
	structured_max_items: int = Field(default=4, ge=1)
	structured_per_section_cap: int = Field(default=2, ge=1)
	# Skip the "fixed "/"improved " prefix when the bullet already starts with it
	dedupe_verb_prefix: bool = False


class Config:
	"""Configuration for the release notes generator."""

	# Repository set
	RELEASE_ORG = os.getenv("RELEASE_ORG", "Revive-Home")
	RELEASE_REPOS = _split_csv(os.getenv("RELEASE_REPOS", "revive-dashboard,revive-admin,revive-mobile,revive-api"))
	VERSION_SOURCE_REPO = os.getenv("VERSION_SOURCE_REPO", "revive-api")
	RELEASE_LABEL = os.getenv("RELEASE_LABEL", "released")
	RELEASE_DESCRIPTION = os.getenv("RELEASE_DESCRIPTION", "Revive platform production release")

	# Summary extraction
	SUMMARY_MAX_CHARS = int(os.getenv("SUMMARY_MAX_CHARS", "200"))
	HIGHLIGHT_COUNT = int(os.getenv("HIGHLIGHT_COUNT", "6"))
	STRUCTURED_MAX_ITEMS = int(os.getenv("STRUCTURED_MAX_ITEMS", "4"))
	STRUCTURED_PER_SECTION_CAP = int(os.getenv("STRUCTURED_PER_SECTION_CAP", "2"))
	DEDUPE_VERB_PREFIX = os.getenv("DEDUPE_VERB_PREFIX", "false").lower() in ("1", "true", "yes")

	# GitHub REST
	GITHUB_API_URL = os.getenv("GITHUB_API_URL", "https://api.github.com").rstrip('/')
	GITHUB_TOKEN = os.getenv("GITHUB_TOKEN") or os.getenv("GITHUB_PAT")
	HTTP_TIMEOUT_S = int(os.getenv("HTTP_TIMEOUT_S", "30"))
	GITHUB_MAX_RETRIES = int(os.getenv("GITHUB_MAX_RETRIES", "3"))
	PR_FETCH_DELAY_S = float(os.getenv("PR_FETCH_DELAY_S", "0.15"))
	RELEASE_DELAY_S = float(os.getenv("RELEASE_DELAY_S", "2.0"))

	# Output
	RELEASE_NOTES_DIR = os.getenv("RELEASE_NOTES_DIR", "release-notes")
	DOCS_JSON_PATH = os.getenv("DOCS_JSON_PATH", "docs.json")
	INDEX_LATEST_COUNT = int(os.getenv("INDEX_LATEST_COUNT", "10"))
	BACKFILL_YEARS = os.getenv("BACKFILL_YEARS", "2025-2026")

	@classmethod
	def get_pipeline_config(cls) -> PipelineConfig:
		"""Build the pipeline settings from the environment-backed defaults."""
		return PipelineConfig(
			org=cls.RELEASE_ORG,
			repositories=tuple(cls.RELEASE_REPOS),
			label=cls.RELEASE_LABEL,
			release_description=cls.RELEASE_DESCRIPTION,
			max_summary_chars=cls.SUMMARY_MAX_CHARS,
			highlight_count=cls.HIGHLIGHT_COUNT,
			structured_max_items=cls.STRUCTURED_MAX_ITEMS,
			structured_per_section_cap=cls.STRUCTURED_PER_SECTION_CAP,
			dedupe_verb_prefix=cls.DEDUPE_VERB_PREFIX,
		)

	@classmethod
	def get_github_config(cls) -> Dict[str, Any]:
		"""Get GitHub configuration for the REST client."""
		return {
			"api_url": cls.GITHUB_API_URL,
			"token": cls.GITHUB_TOKEN,
			"timeout_s": cls.HTTP_TIMEOUT_S,
			"max_retries": cls.GITHUB_MAX_RETRIES,
		}

	@classmethod
	def get_backfill_years(cls) -> Tuple[int, int]:
		"""Parse BACKFILL_YEARS ("2025-2026" or "2025") into an inclusive range."""
		raw = (cls.BACKFILL_YEARS or "").strip()
		first, _, last = raw.partition("-")
		start = int(first)
		end = int(last) if last else start
		return start, end
