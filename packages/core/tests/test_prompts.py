"""Prompt builders are pure functions; these pin the parts the normalizer relies on."""

from aigit_core.models import CommitRecord, PRAnalysis
from aigit_core.prompts import (
    MAX_PR_DIFF_CHARS,
    commit_message_prompt,
    pr_description_prompt,
    review_prompt,
    summary_prompt,
)


def _commits(n):
    return [CommitRecord(f"{i:040d}", "Ann", "2024-01-01", f"fix: bug {i}") for i in range(n)]


class TestCommitPrompt:
    def test_conventional_rules(self):
        prompt = commit_message_prompt("+x = 1")
        assert "<type>(<scope>): <subject>" in prompt
        assert "+x = 1" in prompt

    def test_simple_rules(self):
        prompt = commit_message_prompt("+x", conventional=False)
        assert "<type>(<scope>)" not in prompt
        assert "imperative mood" in prompt

    def test_type_and_scope_constraints(self):
        prompt = commit_message_prompt("+x", commit_type="fix", scope="parser")
        assert "Commit type must be: fix" in prompt
        assert "Scope must be: parser" in prompt


class TestSummaryPrompt:
    def test_lists_commits(self):
        prompt = summary_prompt(_commits(2))
        assert "fix: bug 0" in prompt
        assert "fix: bug 1" in prompt

    def test_changelog_and_grouping(self):
        assert "changelog format" in summary_prompt(_commits(1), changelog=True)
        assert "Group commits by their type" in summary_prompt(_commits(1), group_by_type=True)


class TestReviewPrompt:
    def test_asks_for_markdown_sections(self):
        prompt = review_prompt("+x")
        assert "## Issues" in prompt
        assert "## Suggestions" in prompt
        assert "PRIORITY" not in prompt

    def test_focus_flags(self):
        prompt = review_prompt("+x", focus_areas=["security", "naming"], security=True, performance=True)
        assert "Security vulnerabilities (PRIORITY)" in prompt
        assert "Performance issues and optimization opportunities (PRIORITY)" in prompt
        assert "Specific areas: security, naming" in prompt


class TestPRPrompt:
    def _analysis(self, **kwargs):
        defaults = dict(current_branch="feature/x", target_branch="main", diff="+x", commits=_commits(12))
        defaults.update(kwargs)
        return PRAnalysis(**defaults)

    def test_commit_list_is_capped(self):
        prompt = pr_description_prompt(self._analysis())
        assert "fix: bug 9" in prompt
        assert "fix: bug 10" not in prompt
        assert "... and 2 more commits" in prompt

    def test_long_diff_is_truncated(self):
        prompt = pr_description_prompt(self._analysis(diff="+" * (MAX_PR_DIFF_CHARS + 100)))
        assert "(diff truncated for brevity)" in prompt

    def test_platform_link_style(self):
        assert "Closes #issue" in pr_description_prompt(self._analysis(platform="gitlab"))
        assert "GitHub-specific formatting" in pr_description_prompt(self._analysis())

    def test_requests_json(self):
        prompt = pr_description_prompt(self._analysis(issue_numbers=["42"]))
        assert '"breaking_changes"' in prompt
        assert "Related Issues: 42" in prompt
