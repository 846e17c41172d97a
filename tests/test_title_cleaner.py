from __future__ import annotations

import pytest

from utils.title_cleaner import (
    clean_pr_title,
    is_author_segment,
    is_ticket_branch,
    strip_branch_segments,
    strip_conventional_prefix,
)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("TEC-7097/Weekly-Update-Character-Limit/Carlo-Sanchez", "Weekly update character limit"),
        ("feat(auth): Allow deleting L4 items", "Allow deleting L4 items"),
        ("fix: crash on login", "Crash on login"),
        ("CHORE: bump deps", "Bump deps"),
        ("UPDATE README", "Update readme"),
        ("API", "API"),
        ("add-export-button", "Add export button"),
        ("  spaced   out   title ", "Spaced out title"),
        ("TEC-12/API-Cleanup", "API cleanup"),
    ],
)
def test_clean_pr_title(raw: str, expected: str) -> None:
    assert clean_pr_title(raw) == expected


def test_clean_pr_title_keeps_text_when_no_segment_survives() -> None:
    assert clean_pr_title("TEC-1/Jane-Doe") == "TEC 1/Jane Doe"


def test_clean_pr_title_empty() -> None:
    assert clean_pr_title("") == ""


def test_clean_pr_title_never_empties_non_empty_input() -> None:
    assert clean_pr_title("fix:") == "Fix:"
    assert clean_pr_title("---") == "---"


def test_strip_conventional_prefix_requires_known_type() -> None:
    assert strip_conventional_prefix("refactor(core): tidy") == "tidy"
    assert strip_conventional_prefix("wip: tidy") == "wip: tidy"


def test_branch_heuristics() -> None:
    assert is_ticket_branch("ABC-1/thing")
    assert not is_ticket_branch("A-1/thing")
    assert is_author_segment("Carlo-Sanchez")
    assert not is_author_segment("carlo-sanchez")


def test_author_segment_only_dropped_in_last_position() -> None:
    title, from_branch = strip_branch_segments("TEC-5/Jane-Doe/header-fix")

    assert from_branch
    assert title == "Jane-Doe header-fix"
