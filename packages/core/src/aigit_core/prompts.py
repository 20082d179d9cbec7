"""Instruction blocks sent to the provider, one builder per task.

Pure string functions: no provider, config or git knowledge, so every
backend produces byte-identical prompts for the same inputs.
"""

from __future__ import annotations

from aigit_core.models import CommitRecord, PRAnalysis

MAX_PR_COMMITS = 10
MAX_PR_DIFF_CHARS = 8000

_PLATFORM_RULES = {
    "gitlab": ("GitLab", "Closes #issue"),
    "bitbucket": ("Bitbucket", "Fixes #issue"),
    "github": ("GitHub", "Fixes #issue"),
}


def _commit_lines(commits: list[CommitRecord], limit: int | None = None) -> list[str]:
    lines = []
    for i, commit in enumerate(commits):
        if limit is not None and i >= limit:
            lines.append(f"... and {len(commits) - limit} more commits")
            break
        lines.append(f"- {commit.short_hash}: {commit.message}")
    return lines


def commit_message_prompt(diff: str, commit_type: str = "", scope: str = "", conventional: bool = True) -> str:
    lines = ["Analyze the following git diff and generate a concise, conventional commit message.", "", "Rules:"]
    if conventional:
        lines += [
            "1. Use conventional commit format: <type>(<scope>): <subject>",
            "2. Types: feat, fix, docs, style, refactor, test, chore, perf, ci, build",
            "3. Subject line max 50 characters",
            '4. Use present tense ("add" not "added")',
            "5. No period at the end of subject",
            "6. Include body if changes are complex (wrap at 72 chars)",
            "7. Include footer for breaking changes or issue references",
        ]
    else:
        lines += [
            "1. Subject line max 50 characters",
            '2. Use imperative mood ("Add feature" not "Added feature")',
            "3. Capitalize the subject line",
            "4. No period at the end",
            "5. Include body if needed (wrap at 72 chars)",
        ]
    if commit_type:
        lines += ["", f"Commit type must be: {commit_type}"]
    if scope:
        lines.append(f"Scope must be: {scope}")

    return "\n".join(lines) + f"""

Diff:
```
{diff}
```

Generate the commit message (respond with ONLY the commit message, no explanations):"""


def summary_prompt(commits: list[CommitRecord], group_by_type: bool = False, changelog: bool = False) -> str:
    if changelog:
        intro = """Summarize the following git commits in changelog format.

Format the output as a proper changelog entry with:
- Version header
- Date
- Grouped changes by type (Features, Bug Fixes, etc.)
- Clear, user-facing descriptions
"""
    else:
        intro = "Summarize the following git commits in a clear, concise manner.\n"
        if group_by_type:
            intro += "\nGroup commits by their type (feat, fix, docs, etc.).\n"

    commit_block = "\n".join(_commit_lines(commits))
    return f"""{intro}
Commits:

{commit_block}

Generate the summary:"""


def review_prompt(
    diff: str,
    focus_areas: list[str] | None = None,
    security: bool = False,
    performance: bool = False,
) -> str:
    focus = [
        "1. Potential bugs or errors",
        "2. Code quality and best practices",
        "3. Readability and maintainability",
    ]
    if security:
        focus.append("4. Security vulnerabilities (PRIORITY)")
    if performance:
        focus.append("5. Performance issues and optimization opportunities (PRIORITY)")
    if focus_areas:
        focus.append(f"6. Specific areas: {', '.join(focus_areas)}")

    provide = [
        "- Summary of the changes",
        "- List of issues found (if any)",
        "- Suggestions for improvement",
    ]
    if security:
        provide.append("- Security risks and mitigations")
    if performance:
        provide.append("- Performance concerns and solutions")

    focus_block = "\n".join(focus)
    provide_block = "\n".join(provide)
    return f"""Review the following code changes and provide constructive feedback.

Focus on:
{focus_block}

Provide:
{provide_block}

Code changes:
```diff
{diff}
```

Provide a structured review using markdown headers (e.g., ## Summary, ## Issues, ## Suggestions, ## Security Risks, ## Performance Issues).
Put every finding on its own line starting with "- "."""


def pr_description_prompt(analysis: PRAnalysis) -> str:
    platform_name, link_style = _PLATFORM_RULES.get(analysis.platform, _PLATFORM_RULES["github"])

    branch_info = [
        f"- Current Branch: {analysis.current_branch}",
        f"- Target Branch: {analysis.target_branch}",
        f"- Platform: {analysis.platform}",
    ]
    if analysis.issue_numbers:
        branch_info.append(f"- Related Issues: {', '.join(analysis.issue_numbers)}")

    diff = analysis.diff
    if len(diff) > MAX_PR_DIFF_CHARS:
        diff = diff[:MAX_PR_DIFF_CHARS] + "\n... (diff truncated for brevity)"

    branch_block = "\n".join(branch_info)
    commit_block = "\n".join(_commit_lines(analysis.commits, limit=MAX_PR_COMMITS))
    return f"""Generate a comprehensive Pull Request description based on the following information.

Branch Information:
{branch_block}

Commits in this branch:
{commit_block}

Generate a PR description with the following structure:
1. **Title**: Concise, descriptive title (50 chars max)
2. **Summary**: Brief overview of what this PR accomplishes
3. **Changes**: Bullet points of key changes made
4. **Testing**: How the changes should be tested
5. **Breaking Changes**: Any breaking changes (if applicable)

Requirements:
- Use clear, professional language
- Focus on business value and impact
- Include technical details where relevant
- Mention any dependencies or requirements
- Use {platform_name}-specific formatting
- Use '{link_style}' for issue linking

Code changes:
```diff
{diff}
```

Respond with a JSON object containing:
{{
  "title": "PR title",
  "summary": "Brief summary paragraph",
  "changes": ["change 1", "change 2", ...],
  "testing": "Testing instructions",
  "breaking_changes": ["breaking change 1", ...]
}}
Use an empty array for breaking_changes if there are none. Do not return any text outside the JSON object."""
