"""Turn free-form model output into typed results.

Every parser here is total: malformed or unexpected text degrades to a
partial structure, never an exception. Structured parsers try JSON first
(the shape the prompt asks for) and fall back to scanning markdown headings
and bullets, since models routinely ignore format instructions.
"""

from __future__ import annotations

import json
import logging
import posixpath
import re
from typing import Any, Iterator

from aigit_core.models import (
    CommitMessage,
    CommitOptions,
    CommitRecord,
    CommitSummary,
    Issue,
    PerformanceIssue,
    PRDescription,
    ReviewResult,
    SecurityRisk,
    Suggestion,
    Summary,
    SummaryOptions,
    capitalize_first,
)

logger = logging.getLogger(__name__)

FALLBACK_SUBJECT = "update code"

FOOTER_MARKERS = ("BREAKING CHANGE:", "Fixes #", "Closes #", "Resolves #")
BULLET_MARKERS = ("-", "*", "•")

# Heading text (lower-cased) → section key.
_SECTION_ALIASES = {
    "summary": "summary",
    "issues": "issues",
    "suggestions": "suggestions",
    "security risks": "security",
    "security": "security",
    "performance issues": "performance",
    "performance": "performance",
}
FINDING_SECTIONS = ("issues", "suggestions", "security", "performance")

_CONVENTIONAL_SUBJECT = re.compile(r"^(\w+)(?:\(([^)]*)\))?!?:\s*(.*)$")


# ------------------------------------------------------------------ #
# Shared helpers                                                       #
# ------------------------------------------------------------------ #


def strip_code_fences(raw: str) -> str:
    """Strip only the outer ``` fence a model wraps its answer in, not inner ones."""
    cleaned = re.sub(r"^```[\w-]*\s*\n?", "", raw.strip())
    return re.sub(r"\n?\s*```$", "", cleaned.strip())


def load_json_object(raw: str) -> dict | None:
    """Best-effort decode of a JSON object from model output.

    Tries the fence-stripped text first, then the outermost ``{...}`` span
    for answers that wrap the object in prose. Returns None when neither
    decodes to a dict.
    """
    candidates = [strip_code_fences(raw)]
    start, end = raw.find("{"), raw.rfind("}")
    if 0 <= start < end:
        candidates.append(raw[start : end + 1])
    for candidate in candidates:
        try:
            value = json.loads(candidate)
        except (json.JSONDecodeError, ValueError):
            continue
        if isinstance(value, dict):
            return value
    return None


def _first(data: dict, *keys: str, default: Any = None) -> Any:
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


def _as_str(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, list):
        return "\n".join(_as_str(v) for v in value)
    return str(value).strip()


def _as_str_list(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value] if value.strip() else []
    if isinstance(value, list):
        return [_as_str(v) for v in value if _as_str(v)]
    return [_as_str(value)]


def _as_int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return 0


def _strip_bullet(line: str) -> str | None:
    """Return the bullet's content, or None if the line is not a bullet."""
    if line.startswith(BULLET_MARKERS):
        return line[1:].strip()
    return None


# ------------------------------------------------------------------ #
# Commit messages                                                      #
# ------------------------------------------------------------------ #


def parse_commit_message(text: str, conventional: bool = True) -> CommitMessage:
    """Decompose a generated commit message and reassemble its canonical form."""
    lines = strip_code_fences(text).split("\n")
    first = lines[0].strip()
    message = CommitMessage()

    if conventional and ":" in first:
        head, subject = first.split(":", 1)
        head = head.strip()
        open_idx = head.find("(")
        close_idx = head.find(")", open_idx + 1) if open_idx != -1 else -1
        if open_idx != -1 and close_idx != -1:
            message.type = head[:open_idx].strip()
            message.scope = head[open_idx + 1 : close_idx].strip()
        else:
            message.type = head
        message.subject = subject.strip()
    else:
        message.subject = first

    # The body starts after the blank separator line; a model that skips the
    # separator still gets its second line kept as body.
    start = 2 if len(lines) > 1 and not lines[1].strip() else 1
    body_lines: list[str] = []
    footer_lines: list[str] = []
    for i in range(start, len(lines)):
        if lines[i].startswith(FOOTER_MARKERS):
            footer_lines = lines[i:]
            break
        body_lines.append(lines[i])
    message.body = "\n".join(body_lines).strip()
    message.footer = "\n".join(footer_lines).strip()

    if not message.subject and not message.type:
        message.subject = FALLBACK_SUBJECT
    message.full_message = message.assemble()
    return message


def fallback_commit_message(diff: str, options: CommitOptions) -> CommitMessage:
    """Approximate a commit message from the diff alone, for when the provider is unavailable.

    Files count as added when a ``new file mode`` marker appears anywhere in
    the diff, not per file, so a mixed add/modify diff reports every touched
    file as added. That is a known limitation of the heuristic.
    """
    added: list[str] = []
    modified: list[str] = []
    deleted: list[str] = []
    has_new_file = "new file mode" in diff
    source = ""

    for line in diff.split("\n"):
        if line.startswith("---"):
            source = line[4:] if line.startswith("--- ") else line[3:]
        elif line.startswith("+++"):
            if "/dev/null" in line:
                # Deletion: the "--- a/<file>" source is paired with a /dev/null target.
                filename = source.removeprefix("a/")
                if source and "/dev/null" not in source and filename not in deleted:
                    deleted.append(filename)
                continue
            filename = line.removeprefix("+++ b/")
            if filename not in added and filename not in modified:
                (added if has_new_file else modified).append(filename)

    if options.type:
        commit_type = options.type
    elif added:
        commit_type = "feat"
    elif deleted:
        commit_type = "chore"
    else:
        commit_type = "fix"

    subject = FALLBACK_SUBJECT
    for verb, files in (("add", added), ("remove", deleted), ("update", modified)):
        if files:
            subject = f"{verb} {posixpath.basename(files[0])}" if len(files) == 1 else f"{verb} {len(files)} files"
            break

    message = CommitMessage(type=commit_type, scope=options.scope, subject=subject)
    message.full_message = message.header() if options.conventional else capitalize_first(subject)
    return message


# ------------------------------------------------------------------ #
# Code review                                                          #
# ------------------------------------------------------------------ #


def classify_review_lines(text: str) -> Iterator[tuple[str, str]]:
    """Yield ``(section, content)`` for every line that belongs to a section.

    A ``## `` heading opens a section (unknown headings open a section named
    after the heading so their content is not attributed to the previous
    one). Lines before the first heading are dropped. Content is yielded
    unstripped so the summary keeps its formatting.
    """
    section = ""
    for line in text.split("\n"):
        stripped = line.strip()
        if stripped.startswith("## "):
            heading = stripped[3:].strip().strip("*:").strip().lower()
            section = _SECTION_ALIASES.get(heading, heading)
            continue
        if section:
            yield section, line


def _review_from_json(data: dict) -> ReviewResult:
    def items(*keys: str) -> list:
        value = _first(data, *keys, default=[])
        return value if isinstance(value, list) else [value]

    def text_of(item: Any) -> str:
        if isinstance(item, dict):
            return _as_str(_first(item, "description", "message", "text", default=""))
        return _as_str(item)

    def field_of(item: Any, *keys: str, default: str = "") -> str:
        if isinstance(item, dict):
            return _as_str(_first(item, *keys, default=default)) or default
        return default

    review = ReviewResult(summary=_as_str(data.get("summary")))
    for item in items("issues"):
        if text_of(item):
            review.issues.append(
                Issue(
                    description=text_of(item),
                    severity=field_of(item, "severity", default="medium"),
                    type=field_of(item, "type", default="general"),
                    file=field_of(item, "file"),
                    line=_as_int(item.get("line")) if isinstance(item, dict) else 0,
                    suggestion=field_of(item, "suggestion"),
                )
            )
    for item in items("suggestions"):
        if text_of(item):
            review.suggestions.append(
                Suggestion(
                    description=text_of(item),
                    type=field_of(item, "type", default="general"),
                    file=field_of(item, "file"),
                    line=_as_int(item.get("line")) if isinstance(item, dict) else 0,
                    example=field_of(item, "example"),
                )
            )
    for item in items("security_risks", "securityRisks", "security"):
        if text_of(item):
            review.security_risks.append(
                SecurityRisk(
                    description=text_of(item),
                    severity=field_of(item, "severity", default="medium"),
                    type=field_of(item, "type", default="general"),
                    mitigation=field_of(item, "mitigation"),
                )
            )
    for item in items("performance_issues", "performanceIssues", "performance"):
        if text_of(item):
            review.performance_issues.append(
                PerformanceIssue(
                    description=text_of(item),
                    type=field_of(item, "type", default="general"),
                    impact=field_of(item, "impact"),
                    solution=field_of(item, "solution"),
                )
            )
    return review


_REVIEW_KEYS = (
    "summary",
    "issues",
    "suggestions",
    "security_risks",
    "securityRisks",
    "security",
    "performance_issues",
    "performanceIssues",
    "performance",
)


def parse_review_response(text: str) -> ReviewResult:
    data = load_json_object(text)
    if data is not None and any(k in data for k in _REVIEW_KEYS):
        return _review_from_json(data)

    review = ReviewResult()
    summary_lines: list[str] = []
    for section, line in classify_review_lines(text):
        if section == "summary":
            summary_lines.append(line)
            continue
        if section not in FINDING_SECTIONS:
            continue
        content = _strip_bullet(line.strip())
        if not content:
            continue
        if section == "issues":
            review.issues.append(Issue(description=content))
        elif section == "suggestions":
            review.suggestions.append(Suggestion(description=content))
        elif section == "security":
            review.security_risks.append(SecurityRisk(description=content))
        else:
            review.performance_issues.append(PerformanceIssue(description=content))

    review.summary = "\n".join(summary_lines).strip()
    return review


# ------------------------------------------------------------------ #
# Pull request descriptions                                            #
# ------------------------------------------------------------------ #


def parse_pr_description(text: str) -> PRDescription:
    data = load_json_object(text)
    if data is not None and any(k in data for k in ("title", "summary", "changes")):
        return PRDescription(
            title=_as_str(data.get("title")),
            summary=_as_str(data.get("summary")),
            changes=_as_str_list(data.get("changes")),
            testing_notes=_as_str(_first(data, "testing", "testing_notes", "testingNotes", default="")),
            breaking_changes=_as_str_list(_first(data, "breaking_changes", "breakingChanges", default=[])),
        )

    logger.debug("PR description was not JSON, falling back to text heuristics")
    description = PRDescription(title="Generated PR Title", summary=text.strip())
    for line in text.split("\n"):
        line = line.strip()
        if line and not line.startswith("#"):
            description.title = line
            break

    lowered = text.lower()
    if "add" in lowered or "new" in lowered:
        description.changes.append("Added new functionality")
    if "fix" in lowered or "bug" in lowered:
        description.changes.append("Fixed bugs")
    if "update" in lowered or "modify" in lowered:
        description.changes.append("Updated existing features")
    if not description.changes:
        description.changes.append("Made various improvements")

    description.testing_notes = "Please test the changes manually"
    return description


# ------------------------------------------------------------------ #
# Commit summaries                                                     #
# ------------------------------------------------------------------ #


def group_commits(commits: list[CommitRecord]) -> dict[str, list[CommitSummary]]:
    """Group commits by conventional type; non-conventional subjects land under "other"."""
    groups: dict[str, list[CommitSummary]] = {}
    for commit in commits:
        match = _CONVENTIONAL_SUBJECT.match(commit.message)
        if match:
            entry = CommitSummary(commit.hash, match.group(1).lower(), match.group(2) or "", match.group(3))
        else:
            entry = CommitSummary(commit.hash, "other", "", commit.message)
        groups.setdefault(entry.type, []).append(entry)
    return groups


def _summary_from_json(data: dict) -> Summary:
    groups: dict[str, list[CommitSummary]] = {}
    raw_groups = data.get("groups")
    if isinstance(raw_groups, dict):
        for group, entries in raw_groups.items():
            for entry in entries if isinstance(entries, list) else []:
                if isinstance(entry, dict):
                    groups.setdefault(str(group), []).append(
                        CommitSummary(
                            hash=_as_str(entry.get("hash")),
                            type=_as_str(entry.get("type")) or str(group),
                            scope=_as_str(entry.get("scope")),
                            subject=_as_str(_first(entry, "subject", "message", default="")),
                        )
                    )
                elif _as_str(entry):
                    groups.setdefault(str(group), []).append(CommitSummary(type=str(group), subject=_as_str(entry)))
    return Summary(
        title=_as_str(data.get("title")),
        description=_as_str(data.get("description")),
        groups=groups,
        markdown=_as_str(data.get("markdown")),
    )


def parse_summary(text: str, commits: list[CommitRecord], options: SummaryOptions) -> Summary:
    data = load_json_object(text)
    if data is not None and any(k in data for k in ("title", "description", "groups")):
        summary = _summary_from_json(data)
    else:
        summary = Summary(description=text.strip())
        for line in text.split("\n"):
            if line.strip():
                summary.title = line.strip().lstrip("#").strip()
                break
        if options.format == "markdown":
            summary.markdown = text.strip()

    if options.group_by_type and not summary.groups:
        summary.groups = group_commits(commits)
    return summary
