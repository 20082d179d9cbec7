"""Terminal rendering for every aigit command.

All output goes through the module-level ``console`` so `configure` can apply
the ``ui`` config section (colour, emoji, spinner) once per invocation and
tests can swap in a recording console.
"""

from __future__ import annotations

import json
from contextlib import contextmanager
from dataclasses import asdict
from typing import Iterator

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.text import Text

from aigit_core.models import ChecklistItem, CommitMessage, PRDescription, ReviewResult, Summary
from aigit_core.utils.diff import truncate

console = Console()

_settings = {"emoji": True, "spinner": "dots"}

_COMMIT_TYPE_COLORS = {
    "feat": "#10B981",
    "fix": "#EF4444",
    "docs": "#3B82F6",
    "style": "#8B5CF6",
    "refactor": "#F59E0B",
    "test": "#EC4899",
    "chore": "#6B7280",
    "perf": "#F97316",
    "ci": "#06B6D4",
    "build": "#84CC16",
}


def configure(ui_config: dict) -> None:
    global console
    console = Console(no_color=not ui_config.get("color", True))
    _settings["emoji"] = bool(ui_config.get("emoji", True))
    _settings["spinner"] = ui_config.get("spinner") or "dots"


def _icon(symbol: str) -> str:
    return f"{symbol} " if _settings["emoji"] else ""


def info(message: str) -> None:
    console.print(f"[blue]{_icon('ℹ️ ')}{escape(message)}[/blue]")


def success(message: str) -> None:
    console.print(f"[green]{_icon('✅')}{escape(message)}[/green]")


def warning(message: str) -> None:
    console.print(f"[yellow]{_icon('⚠️ ')}{escape(message)}[/yellow]")


def error(message: str) -> None:
    console.print(f"[bold red]{_icon('❌')}Error: {escape(message)}[/bold red]")


@contextmanager
def spinner(message: str) -> Iterator[None]:
    with console.status(message, spinner=_settings["spinner"]):
        yield


def format_list(items: list[str]) -> str:
    return "\n".join(f"  • {item}" for item in items)


# ------------------------------------------------------------------ #
# commit                                                               #
# ------------------------------------------------------------------ #


def show_dry_run(diff: str) -> None:
    console.print(f"[bold magenta]{_icon('🔍')}Dry Run - Staged Changes:[/bold magenta]")
    console.print(Panel(escape(truncate(diff, 1000)), style="on #1F2937"))
    console.print("[dim]\n(This is a preview. Remove --dry-run to generate commit message)[/dim]")


def show_commit_message(message: CommitMessage) -> None:
    console.print("[bold magenta]Generated Commit Message:[/bold magenta]")
    header = Text()
    if message.type:
        header.append(message.type, style=f"bold {_COMMIT_TYPE_COLORS.get(message.type, '#6B7280')}")
        header.append(f"({message.scope})" if message.scope else "", style="dim")
        header.append(": ", style="dim")
    header.append(message.subject)
    console.print(Panel(header, border_style="#7C3AED", expand=False))
    if message.body:
        console.print(f"\n[bold]Body:[/bold]\n{escape(message.body)}")
    if message.footer:
        console.print(f"\n[bold]Footer:[/bold]\n{escape(message.footer)}")


def show_diff(diff: str) -> None:
    for line in diff.split("\n"):
        if line.startswith(("+++", "---", "@@", "diff")):
            style = "#3B82F6"
        elif line.startswith("+"):
            style = "#10B981"
        elif line.startswith("-"):
            style = "#EF4444"
        else:
            style = ""
        console.print(Text(line, style=style))


# ------------------------------------------------------------------ #
# review                                                               #
# ------------------------------------------------------------------ #


def show_review(review: ReviewResult) -> None:
    console.print("[bold magenta]Code Review Results Completed[/bold magenta]")

    if review.summary:
        console.print("[dim]## Summary[/dim]")
        console.print(Panel(escape(review.summary), border_style="#7C3AED"))

    if review.issues:
        console.print("[bold red]## Issues[/bold red]")
        for issue in review.issues:
            location = f" ({issue.file}:{issue.line})" if issue.file and issue.line else ""
            console.print(
                f"  [red]•[/red] \\[Severity: {issue.severity}, Type: {issue.type}]{escape(location)} "
                f"{escape(issue.description)}",
                highlight=False,
            )
            if issue.suggestion:
                console.print(f"    [dim]↳[/dim] Suggestion: {escape(issue.suggestion)}")

    if review.suggestions:
        console.print("[blue]## Suggestions[/blue]")
        for suggestion in review.suggestions:
            console.print(f"  [blue]•[/blue] \\[Type: {suggestion.type}] {escape(suggestion.description)}")
            if suggestion.example:
                console.print(f"    [dim]↳[/dim] Example: {escape(suggestion.example)}")

    if review.security_risks:
        console.print("[bold red]## Security Risks[/bold red]")
        for risk in review.security_risks:
            console.print(f"  [red]•[/red] \\[Severity: {risk.severity}] {escape(risk.description)}")
            if risk.mitigation:
                console.print(f"    [dim]↳[/dim] Mitigation: {escape(risk.mitigation)}")

    if review.performance_issues:
        console.print("[yellow]## Performance Issues[/yellow]")
        for perf in review.performance_issues:
            impact = f" (Impact: {perf.impact})" if perf.impact else ""
            console.print(f"  [yellow]•[/yellow] \\[Type: {perf.type}] {escape(perf.description)}{escape(impact)}")
            if perf.solution:
                console.print(f"    [dim]↳[/dim] Solution: {escape(perf.solution)}")

    if review.is_empty:
        console.print("[green]No findings.[/green]")


# ------------------------------------------------------------------ #
# summary                                                              #
# ------------------------------------------------------------------ #


def format_summary_markdown(summary: Summary) -> str:
    if summary.markdown:
        return summary.markdown
    lines = [f"# {summary.title}", ""] if summary.title else []
    if summary.description and summary.description != summary.title:
        lines += [summary.description, ""]
    for group, entries in summary.groups.items():
        lines += [f"## {group}", ""]
        lines += [f"- {e.subject}" + (f" ({e.hash[:7]})" if e.hash else "") for e in entries]
        lines.append("")
    return "\n".join(lines).strip()


def show_summary(summary: Summary, output: str) -> None:
    if output == "json":
        # Plain stdout: JSON output is meant to be piped.
        console.print_json(json.dumps(asdict(summary)))
        return
    if output == "markdown":
        # Verbatim, never wrapped to the console width.
        click.echo(format_summary_markdown(summary))
        return

    console.print(f"[bold magenta]{escape(summary.title or 'Summary')}[/bold magenta]")
    if summary.description:
        console.print(Panel(escape(summary.description), border_style="#7C3AED"))
    for group, entries in summary.groups.items():
        color = _COMMIT_TYPE_COLORS.get(group, "#6B7280")
        console.print(f"[bold {color}]{escape(group)}[/bold {color}]")
        for entry in entries:
            scope = f"({entry.scope}) " if entry.scope else ""
            console.print(f"  • [dim]{entry.hash[:7]}[/dim] {escape(scope + entry.subject)}")


# ------------------------------------------------------------------ #
# pr                                                                   #
# ------------------------------------------------------------------ #


def format_checklist(items: list[ChecklistItem], platform: str) -> str:
    # GitHub, GitLab and Bitbucket all render the same task-list syntax.
    return "\n".join(f"  - [{'x' if item.checked else ' '}] {item.text}" for item in items)


def format_pr_markdown(pr: PRDescription, template: str = "standard", commits=None) -> str:
    """Render the PR body. The title is not included; platforms take it separately.

    ``minimal`` keeps summary, changes and issue links; ``detailed`` adds the
    commit list to the standard sections.
    """
    sections: list[str] = []
    if pr.summary:
        sections.append(f"## Summary\n\n{pr.summary}")
    if pr.changes:
        sections.append("## Changes\n\n" + "\n".join(f"- {c}" for c in pr.changes))
    if template != "minimal":
        if pr.testing_notes:
            sections.append(f"## Testing\n\n{pr.testing_notes}")
        if pr.checklist:
            sections.append(
                "## Checklist\n\n"
                + "\n".join(f"- {'[x]' if item.checked else '[ ]'} {item.text}" for item in pr.checklist)
            )
        if pr.breaking_changes:
            sections.append("## ⚠️ Breaking Changes\n\n" + "\n".join(f"- {b}" for b in pr.breaking_changes))
    if template == "detailed" and commits:
        sections.append("## Commits\n\n" + "\n".join(f"- {c.short_hash} {c.message}" for c in commits))
    if pr.issue_links:
        # Last, so the platform auto-links and auto-closes them.
        sections.append("## Related Issues\n\n" + "\n".join(pr.issue_links))
    return "\n\n".join(sections).strip()


def show_pr_description(pr: PRDescription, markdown: str) -> None:
    console.print(f"[bold magenta]{_icon('🚀')}Generated PR/MR Description[/bold magenta]")

    console.print("[bold #7C3AED]Title:[/bold #7C3AED]")
    console.print(Panel(escape(pr.title), border_style="#7C3AED"))

    if pr.summary:
        console.print("[bold #7C3AED]Summary:[/bold #7C3AED]")
        console.print(Panel(escape(pr.summary), border_style="#7C3AED"))
    if pr.changes:
        console.print("[bold #7C3AED]Changes:[/bold #7C3AED]")
        console.print(Panel(escape(format_list(pr.changes)), border_style="#7C3AED"))
    if pr.issue_links:
        console.print("[bold #7C3AED]Related Issues:[/bold #7C3AED]")
        console.print(Panel(escape(format_list(pr.issue_links)), border_style="#7C3AED"))
    if pr.testing_notes:
        console.print("[bold #7C3AED]Testing:[/bold #7C3AED]")
        console.print(Panel(escape(pr.testing_notes), border_style="#7C3AED"))
    if pr.checklist:
        console.print("[bold #7C3AED]Checklist:[/bold #7C3AED]")
        console.print(Panel(escape(format_checklist(pr.checklist, pr.platform)), border_style="#7C3AED"))
    if pr.breaking_changes:
        console.print(f"[bold red]{_icon('⚠️ ')}Breaking Changes:[/bold red]")
        console.print(Panel(escape(format_list(pr.breaking_changes)), border_style="red"))
    if pr.screenshots_needed:
        console.print(f"[yellow]{_icon('📸')}Don't forget to add screenshots of UI changes![/yellow]")

    console.print(f"[dim]\n{_icon('📋')}Formatted for {pr.platform.capitalize()}[/dim]")
    console.print("[bold #7C3AED]Markdown Output:[/bold #7C3AED]")
    console.print(Panel(escape(markdown), style="on #1F2937"))
