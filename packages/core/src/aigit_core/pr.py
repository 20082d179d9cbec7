"""Local heuristics that complete a provider-generated PR description.

The provider only writes prose (title, summary, changes, testing, breaking
changes). Issue links, the reviewer checklist and the screenshot reminder
are derived from the diff and commit list here, so they stay consistent
across providers.
"""

from __future__ import annotations

from dataclasses import replace

from aigit_core.git.branch import title_from_branch
from aigit_core.models import ChecklistItem, CommitRecord, PRAnalysis, PRDescription

_TEST_MARKERS = ("_test.", ".test.", "test_")
_DOC_MARKERS = ("README", ".md")
_DEPENDENCY_FILES = ("package.json", "go.mod", "requirements.txt", "pyproject.toml")
_UI_MARKERS = (".css", ".scss", ".html", ".jsx", ".tsx", ".vue", "component", "style", "ui/", "frontend/")

ISSUE_LINK_VERBS = {"gitlab": "Closes", "bitbucket": "Fixes", "github": "Fixes"}
DRAFT_PREFIXES = {"gitlab": "Draft: ", "bitbucket": "[WIP] ", "github": "[WIP] "}


def _touches_tests(diff: str) -> bool:
    return any(marker in diff for marker in _TEST_MARKERS)


def _touches_docs(diff: str) -> bool:
    return any(marker in diff for marker in _DOC_MARKERS)


def analyze_changes(diff: str) -> list[str]:
    changes = []
    if "+++ /dev/null" in diff:
        changes.append("🗑️ Removed files")
    if "--- /dev/null" in diff:
        changes.append("📄 Added new files")
    if any(name in diff for name in _DEPENDENCY_FILES):
        changes.append("📦 Updated dependencies")
    if _touches_tests(diff) or "spec." in diff:
        changes.append("🧪 Updated tests")
    if _touches_docs(diff):
        changes.append("📚 Updated documentation")
    if ".css" in diff or ".scss" in diff or "style" in diff:
        changes.append("🎨 Updated styles")
    return changes or ["🔧 Modified existing functionality"]


def format_issue_links(issue_numbers: list[str], platform: str) -> list[str]:
    verb = ISSUE_LINK_VERBS.get(platform, "Fixes")
    seen = dict.fromkeys(issue_numbers)
    return [f"{verb} #{issue}" for issue in seen]


def testing_notes(diff: str) -> str:
    if _touches_tests(diff):
        return "✅ Tests have been updated to cover the changes"
    if any(name in diff for name in _DEPENDENCY_FILES):
        return "🔄 Run tests after installing new dependencies"
    return "🧪 Manual testing recommended for the modified functionality"


def build_checklist(diff: str) -> list[ChecklistItem]:
    checklist = [
        ChecklistItem("Code follows project style guidelines"),
        ChecklistItem("Self-review of code has been performed"),
    ]
    if _touches_tests(diff):
        checklist.append(ChecklistItem("Tests pass locally"))
    else:
        checklist.append(ChecklistItem("Tests have been added/updated"))
    if _touches_docs(diff):
        checklist.append(ChecklistItem("Documentation has been updated", checked=True))
    else:
        checklist.append(ChecklistItem("Documentation updated if needed"))
    return checklist


def detect_breaking_changes(commits: list[CommitRecord], diff: str) -> list[str]:
    breaking = []
    for commit in commits:
        lowered = commit.message.lower()
        if "breaking change" in lowered or "breaking:" in lowered or commit.message.split(":", 1)[0].endswith("!"):
            breaking.append(commit.message)
    if "public interface" in diff or "export" in diff:
        breaking.append("Modified public interfaces - review for compatibility")
    return breaking


def needs_screenshots(diff: str) -> bool:
    lowered = diff.lower()
    return any(marker in lowered for marker in _UI_MARKERS)


def summary_from_commits(commits: list[CommitRecord]) -> str:
    if not commits:
        return "No commits found in this branch."
    if len(commits) == 1:
        return f"This PR contains a single commit: {commits[0].message}"
    return f"This PR contains {len(commits)} commits with various changes and improvements."


def build_pr_description(generated: PRDescription, analysis: PRAnalysis) -> PRDescription:
    """Merge the provider's prose with locally derived sections.

    Provider fields win where present; empty ones are filled from the
    heuristics above. Breaking changes from both sources are kept, once each.
    """
    title = generated.title or title_from_branch(analysis.current_branch)
    if analysis.is_draft:
        title = DRAFT_PREFIXES.get(analysis.platform, "[WIP] ") + title

    breaking = list(dict.fromkeys(generated.breaking_changes + detect_breaking_changes(analysis.commits, analysis.diff)))

    return replace(
        generated,
        title=title,
        summary=generated.summary or summary_from_commits(analysis.commits),
        changes=generated.changes or analyze_changes(analysis.diff),
        issue_links=format_issue_links(analysis.issue_numbers, analysis.platform),
        testing_notes=generated.testing_notes or testing_notes(analysis.diff),
        checklist=build_checklist(analysis.diff),
        breaking_changes=breaking,
        screenshots_needed=needs_screenshots(analysis.diff),
        platform=analysis.platform,
    )
