#!/usr/bin/env python3
"""Release notes models shared by the summary pipeline and the renderer.

DisplayEntry is what ends up as one bullet in a release page; ReleaseDocument
is the grouped, ranked set of entries for a single version.
"""
from enum import Enum
from typing import Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field, constr


class ChangeCategory(str, Enum):
	FIX = "fix"
	FEATURE = "feature"
	MAINTENANCE = "maintenance"


class SummarySection(str, Enum):
	"""Category labels used by CodeRabbit structured summaries."""

	NEW_FEATURES = "New Features"
	BUG_FIXES = "Bug Fixes"
	IMPROVEMENTS = "Improvements"
	REFACTOR = "Refactor"
	CHORES = "Chores"
	DATA = "Data"
	VALIDATION = "Validation"
	DOCUMENTATION = "Documentation"
	TESTS = "Tests"
	STYLE = "Style"
	PERFORMANCE = "Performance"
	OTHER_CHANGES = "Other Changes"
	ENHANCEMENTS = "Enhancements"
	BREAKING_CHANGES = "Breaking Changes"

	@classmethod
	def from_label(cls, label: str) -> Optional["SummarySection"]:
		try:
			return cls(label)
		except ValueError:
			return None

	@property
	def rank(self) -> int:
		return SECTION_RANKS.get(self, UNKNOWN_SECTION_RANK)

	@property
	def verb_prefix(self) -> str:
		return SECTION_VERB_PREFIXES.get(self, "")

	def render(self, text: str) -> str:
		return self.verb_prefix + text


UNKNOWN_SECTION_RANK = 99

# Lower rank is selected first
SECTION_RANKS: Dict[SummarySection, int] = {
	SummarySection.NEW_FEATURES: 0,
	SummarySection.ENHANCEMENTS: 0,
	SummarySection.BREAKING_CHANGES: 0,
	SummarySection.BUG_FIXES: 1,
	SummarySection.IMPROVEMENTS: 2,
	SummarySection.VALIDATION: 3,
	SummarySection.REFACTOR: 4,
	SummarySection.PERFORMANCE: 4,
	SummarySection.CHORES: 5,
	SummarySection.DATA: 6,
	SummarySection.DOCUMENTATION: 7,
	SummarySection.TESTS: 7,
	SummarySection.STYLE: 8,
	SummarySection.OTHER_CHANGES: 9,
}

SECTION_VERB_PREFIXES: Dict[SummarySection, str] = {
	SummarySection.BUG_FIXES: "fixed ",
	SummarySection.IMPROVEMENTS: "improved ",
	SummarySection.VALIDATION: "added validation for ",
}


class SummaryItem(BaseModel):
	"""One bullet of a structured summary block."""

	model_config = ConfigDict(frozen=True)

	section: SummarySection
	text: str


class DisplayEntry(BaseModel):
	"""One pull request as it appears in a release page."""

	model_config = ConfigDict(frozen=True, extra="forbid")

	number: int
	title: constr(min_length=1)
	url: str = ""
	merged_at: Optional[str] = None
	repository: str
	category: ChangeCategory = ChangeCategory.FEATURE


class ReleaseDocument(BaseModel):
	"""Grouped and ranked entries for a single release version."""

	version: str
	description: str
	# Insertion order follows the configured repository order
	groups: Dict[str, List[DisplayEntry]] = Field(default_factory=dict)
	highlights: List[DisplayEntry] = Field(default_factory=list)
	fixes: List[DisplayEntry] = Field(default_factory=list)


class ReleaseVersion(BaseModel):
	"""A released version tag and its publication date, if known."""

	tag: str
	date: Optional[str] = None

	@property
	def year(self) -> Optional[int]:
		if not self.date or len(self.date) < 4 or not self.date[:4].isdigit():
			return None
		return int(self.date[:4])
