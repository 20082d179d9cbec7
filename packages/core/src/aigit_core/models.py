"""Typed results passed between the git accessor, providers and the CLI.

Kept as plain dataclasses (no SDK or click imports) so both packages and the
tests can build them freely.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace


@dataclass
class CommitRecord:
    """One entry of `git log`, reverse-chronological."""

    hash: str
    author: str
    date: str
    message: str

    @property
    def short_hash(self) -> str:
        return self.hash[:7]


@dataclass
class CommitOptions:
    type: str = ""
    scope: str = ""
    conventional: bool = True


def capitalize_first(text: str) -> str:
    return text[:1].upper() + text[1:]


@dataclass
class CommitMessage:
    """A commit message decomposed for display.

    full_message is what actually gets committed; the other fields may be
    empty and are only used for rendering.
    """

    type: str = ""
    scope: str = ""
    subject: str = ""
    body: str = ""
    footer: str = ""
    full_message: str = ""

    def header(self) -> str:
        if self.type and self.scope:
            return f"{self.type}({self.scope}): {self.subject}"
        if self.type:
            return f"{self.type}: {self.subject}"
        return self.subject

    def assemble(self) -> str:
        """Header, body and footer separated by blank lines, empty parts omitted."""
        parts = [self.header()]
        if self.body:
            parts.extend(["", self.body])
        if self.footer:
            parts.extend(["", self.footer])
        return "\n".join(parts)

    def with_ticket(self, ticket: str) -> CommitMessage:
        """Return a copy whose subject (and full_message) carry the ticket prefix."""
        if not ticket:
            return self
        first_line, _, rest = self.full_message.partition("\n")
        updated = replace(self, subject=f"{ticket}-{self.subject}")
        if first_line == self.header():
            new_first = updated.header()
        else:
            # Plain (non-conventional) header, e.g. the capitalised fallback.
            new_first = capitalize_first(updated.subject)
        updated.full_message = f"{new_first}\n{rest}" if rest else new_first
        return updated


@dataclass
class SummaryOptions:
    group_by_type: bool = False
    format: str = "text"  # text | markdown | json
    changelog: bool = False


@dataclass
class CommitSummary:
    hash: str = ""
    type: str = ""
    scope: str = ""
    subject: str = ""


@dataclass
class Summary:
    title: str = ""
    description: str = ""
    groups: dict[str, list[CommitSummary]] = field(default_factory=dict)
    markdown: str = ""


@dataclass
class ReviewOptions:
    focus_areas: list[str] = field(default_factory=list)
    verbose: bool = False
    security: bool = False
    performance: bool = False


@dataclass
class Issue:
    description: str
    severity: str = "medium"  # high | medium | low
    type: str = "general"  # bug | style | logic | general
    file: str = ""
    line: int = 0
    suggestion: str = ""


@dataclass
class Suggestion:
    description: str
    type: str = "general"  # refactor | optimization | clarity | general
    file: str = ""
    line: int = 0
    example: str = ""


@dataclass
class SecurityRisk:
    description: str
    severity: str = "medium"
    type: str = "general"
    mitigation: str = ""


@dataclass
class PerformanceIssue:
    description: str
    type: str = "general"
    impact: str = ""
    solution: str = ""


@dataclass
class ReviewResult:
    summary: str = ""
    issues: list[Issue] = field(default_factory=list)
    suggestions: list[Suggestion] = field(default_factory=list)
    security_risks: list[SecurityRisk] = field(default_factory=list)
    performance_issues: list[PerformanceIssue] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.summary or self.issues or self.suggestions or self.security_risks or self.performance_issues)


@dataclass
class ChecklistItem:
    text: str
    checked: bool = False


@dataclass
class PRDescription:
    title: str = ""
    summary: str = ""
    changes: list[str] = field(default_factory=list)
    issue_links: list[str] = field(default_factory=list)
    testing_notes: str = ""
    checklist: list[ChecklistItem] = field(default_factory=list)
    breaking_changes: list[str] = field(default_factory=list)
    screenshots_needed: bool = False
    platform: str = "github"


@dataclass
class PRAnalysis:
    """Everything gathered from git before asking the provider for a PR description."""

    current_branch: str
    target_branch: str
    diff: str
    commits: list[CommitRecord] = field(default_factory=list)
    issue_numbers: list[str] = field(default_factory=list)
    platform: str = "github"
    template: str = "standard"
    is_draft: bool = False


@dataclass(frozen=True)
class ProviderConfig:
    """Immutable per-invocation provider settings, built from the loaded config."""

    provider: str
    api_key: str
    model: str = ""
    temperature: float = 0.7
    max_tokens: int = 2000
