"""Best-effort metadata mined from branch names and commit subjects."""

from __future__ import annotations

import re

from aigit_core.models import CommitRecord

_DATE_TOKEN = re.compile(r"\d{8}")
_TICKET = re.compile(r"(\d{4,5})")

_ISSUE_PATTERNS = [
    re.compile(r"#(\d+)"),
    re.compile(r"(?i)(?:fix|fixes|fixed|close|closes|closed|resolve|resolves|resolved)\s+#(\d+)"),
    re.compile(r"(?i)(?:fix|fixes|fixed|close|closes|closed|resolve|resolves|resolved)\s+(\d+)"),
]

_BRANCH_PREFIXES = ("feature/", "feat/", "fix/", "bugfix/", "hotfix/", "chore/", "docs/")


def extract_commit_details(branch_name: str) -> tuple[str, str]:
    """Return ``(commit_type, ticket_number)`` guessed from a branch name.

    >>> extract_commit_details("feature/1234-20250620-new-login")
    ('feat', '1234')

    Either value is an empty string when nothing matches.
    """
    name = _DATE_TOKEN.sub("", branch_name.lower())

    match = _TICKET.search(name)
    ticket = match.group(1) if match else ""

    if "fix" in name or "bugfix" in name:
        commit_type = "fix"
    elif "feature" in name or "feat" in name:
        commit_type = "feat"
    else:
        commit_type = ""
    return commit_type, ticket


def extract_issues_from_text(text: str) -> list[str]:
    issues = []
    for pattern in _ISSUE_PATTERNS:
        issues.extend(pattern.findall(text))
    return issues


def extract_issue_numbers(branch_name: str, commits: list[CommitRecord]) -> list[str]:
    """Issue numbers referenced by the branch and its commits, deduplicated in first-seen order."""
    seen: dict[str, None] = {}
    for text in [branch_name, *(c.message for c in commits)]:
        for issue in extract_issues_from_text(text):
            seen.setdefault(issue, None)
    return list(seen)


def title_from_branch(branch_name: str) -> str:
    title = branch_name
    for prefix in _BRANCH_PREFIXES:
        if title.startswith(prefix):
            title = title[len(prefix) :]
            break
    title = _DATE_TOKEN.sub("", title)
    title = re.sub(r"\d{4,5}-?", "", title)
    title = title.replace("-", " ").replace("_", " ")
    title = " ".join(title.split())
    return title[:1].upper() + title[1:]
