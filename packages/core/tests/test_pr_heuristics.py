"""Tests for the local PR description heuristics."""

from aigit_core.models import CommitRecord, PRAnalysis, PRDescription
from aigit_core.pr import (
    analyze_changes,
    build_checklist,
    build_pr_description,
    detect_breaking_changes,
    format_issue_links,
    needs_screenshots,
    summary_from_commits,
)
from aigit_core.pr import testing_notes as notes_for_diff

BACKEND_DIFF = """\
diff --git a/src/service.go b/src/service.go
--- a/src/service.go
+++ b/src/service.go
@@ -1 +1 @@
-return nil
+return err
"""

TEST_DIFF = """\
diff --git a/src/service_test.go b/src/service_test.go
--- a/src/service_test.go
+++ b/src/service_test.go
@@ -1 +1 @@
+func TestX(t *testing.T) {}
"""


def _commit(message):
    return CommitRecord("f" * 40, "Ann", "2024-01-01", message)


class TestAnalyzeChanges:
    def test_default_entry(self):
        assert analyze_changes(BACKEND_DIFF) == ["🔧 Modified existing functionality"]

    def test_added_and_removed_files(self):
        diff = "--- /dev/null\n+++ b/new.go\n--- a/old.go\n+++ /dev/null\n"
        changes = analyze_changes(diff)
        assert "📄 Added new files" in changes
        assert "🗑️ Removed files" in changes

    def test_dependencies_and_tests(self):
        changes = analyze_changes("+++ b/go.mod\n" + TEST_DIFF)
        assert "📦 Updated dependencies" in changes
        assert "🧪 Updated tests" in changes


class TestIssueLinks:
    def test_github_uses_fixes(self):
        assert format_issue_links(["12", "13"], "github") == ["Fixes #12", "Fixes #13"]

    def test_gitlab_uses_closes(self):
        assert format_issue_links(["7"], "gitlab") == ["Closes #7"]

    def test_bitbucket_uses_fixes(self):
        assert format_issue_links(["7"], "bitbucket") == ["Fixes #7"]

    def test_duplicates_are_dropped(self):
        assert format_issue_links(["7", "7"], "github") == ["Fixes #7"]


class TestTestingAndChecklist:
    def test_notes_when_tests_changed(self):
        assert notes_for_diff(TEST_DIFF).startswith("✅")

    def test_notes_for_dependency_change(self):
        assert "dependencies" in notes_for_diff("+++ b/requirements.txt\n")

    def test_manual_testing_default(self):
        assert "Manual testing" in notes_for_diff(BACKEND_DIFF)

    def test_checklist_with_docs_change(self):
        checklist = build_checklist("+++ b/README.md\n")
        docs = [item for item in checklist if "Documentation" in item.text]
        assert docs[0].checked is True
        assert len(checklist) == 4

    def test_checklist_without_tests(self):
        texts = [item.text for item in build_checklist(BACKEND_DIFF)]
        assert "Tests have been added/updated" in texts
        assert not any(item.checked for item in build_checklist(BACKEND_DIFF))


class TestBreakingChanges:
    def test_breaking_change_marker(self):
        commits = [_commit("feat: new api BREAKING CHANGE removes v1"), _commit("fix: typo")]
        assert detect_breaking_changes(commits, "") == ["feat: new api BREAKING CHANGE removes v1"]

    def test_bang_after_type(self):
        assert detect_breaking_changes([_commit("feat(api)!: drop v1")], "") == ["feat(api)!: drop v1"]

    def test_exported_interface_in_diff(self):
        breaking = detect_breaking_changes([], "+export function login() {}")
        assert breaking == ["Modified public interfaces - review for compatibility"]


class TestMisc:
    def test_screenshots_for_ui_files(self):
        assert needs_screenshots("+++ b/web/Button.tsx")
        assert not needs_screenshots(BACKEND_DIFF)

    def test_summary_from_commits(self):
        assert summary_from_commits([]) == "No commits found in this branch."
        assert summary_from_commits([_commit("fix: x")]) == "This PR contains a single commit: fix: x"
        assert "2 commits" in summary_from_commits([_commit("a"), _commit("b")])


class TestBuildPRDescription:
    def _analysis(self, **kwargs):
        defaults = dict(
            current_branch="feature/1234-login-page",
            target_branch="main",
            diff=BACKEND_DIFF,
            commits=[_commit("feat: add login (#5)")],
            issue_numbers=["5"],
        )
        defaults.update(kwargs)
        return PRAnalysis(**defaults)

    def test_provider_fields_win(self):
        generated = PRDescription(title="Add login", summary="Adds login.", changes=["route"], testing_notes="curl it")
        pr = build_pr_description(generated, self._analysis())
        assert pr.title == "Add login"
        assert pr.summary == "Adds login."
        assert pr.changes == ["route"]
        assert pr.testing_notes == "curl it"
        assert pr.issue_links == ["Fixes #5"]
        assert pr.checklist

    def test_empty_fields_are_filled_locally(self):
        pr = build_pr_description(PRDescription(), self._analysis())
        assert pr.title == "Login page"
        assert pr.summary == "This PR contains a single commit: feat: add login (#5)"
        assert pr.changes == ["🔧 Modified existing functionality"]
        assert "Manual testing" in pr.testing_notes

    def test_draft_marker_depends_on_platform(self):
        github = build_pr_description(PRDescription(title="T"), self._analysis(is_draft=True))
        gitlab = build_pr_description(PRDescription(title="T"), self._analysis(is_draft=True, platform="gitlab"))
        assert github.title == "[WIP] T"
        assert gitlab.title == "Draft: T"
        assert gitlab.platform == "gitlab"
        assert gitlab.issue_links == ["Closes #5"]

    def test_breaking_changes_are_merged_once(self):
        generated = PRDescription(title="T", breaking_changes=["feat!: drop v1"])
        pr = build_pr_description(generated, self._analysis(commits=[_commit("feat!: drop v1")]))
        assert pr.breaking_changes == ["feat!: drop v1"]
