"""Tests for branch-name and commit-subject mining."""

import pytest

from aigit_core.git.branch import (
    extract_commit_details,
    extract_issue_numbers,
    extract_issues_from_text,
    title_from_branch,
)
from aigit_core.models import CommitRecord


@pytest.mark.parametrize(
    "branch,expected_type,expected_ticket",
    [
        ("feature/1234-new-login", "feat", "1234"),
        ("fix/5678-fix-bug", "fix", "5678"),
        ("bugfix/8765-another-bug", "fix", "8765"),
        ("feat/4321-add-feature", "feat", "4321"),
        ("hotfix/9999-critical-issue", "fix", "9999"),
        ("release/v1.0", "", ""),
        ("no-ticket-feat", "feat", ""),
        ("12345-fix-something", "fix", "12345"),
        ("feature/1234-20250620-new-login", "feat", "1234"),
        ("Feature/20250620-4321-Upper", "feat", "4321"),
        ("", "", ""),
    ],
)
def test_extract_commit_details(branch, expected_type, expected_ticket):
    assert extract_commit_details(branch) == (expected_type, expected_ticket)


@pytest.mark.parametrize("prefix", ["feature", "fix", "chore", "team/sub"])
def test_date_token_never_shadows_ticket(prefix):
    _, ticket = extract_commit_details(f"{prefix}/20240131-5150-thing")
    assert ticket == "5150"


class TestIssueNumbers:
    def test_hash_references(self):
        assert "42" in extract_issues_from_text("Refs #42")

    def test_closing_keyword_without_hash(self):
        assert extract_issues_from_text("resolves 77") == ["77"]

    def test_branch_and_commits_are_deduplicated_in_order(self):
        commits = [
            CommitRecord("a", "x", "d", "fix: crash (#12)"),
            CommitRecord("b", "x", "d", "Fixes #12 and #13"),
        ]
        assert extract_issue_numbers("feature/#9-login", commits) == ["9", "12", "13"]

    def test_no_references(self):
        assert extract_issue_numbers("main", [CommitRecord("a", "x", "d", "tidy up")]) == []


class TestTitleFromBranch:
    def test_strips_prefix_ticket_and_separators(self):
        assert title_from_branch("feature/1234-add_login-page") == "Add login page"

    def test_strips_date_token(self):
        assert title_from_branch("fix/20250620-broken-build") == "Broken build"

    def test_plain_branch(self):
        assert title_from_branch("cleanup") == "Cleanup"
