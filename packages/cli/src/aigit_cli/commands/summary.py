"""summary command: summarise recent commits."""

from __future__ import annotations

import click

from aigit_cli import ui
from aigit_cli.session import command_errors, open_provider
from aigit_core.git import repo
from aigit_core.models import SummaryOptions
from aigit_core.utils.deadline import Deadline

SUMMARY_TIMEOUT = 60.0


@click.command("summary")
@click.option("--number", "-n", default=10, show_default=True, type=click.IntRange(min=1), help="Number of commits.")
@click.option("--branch", "-b", default="", help="Branch to read history from (default: current).")
@click.option("--from", "-f", "from_ref", default="", help="Start commit or ref.")
@click.option("--to", "-t", "to_ref", default="", help="End commit or ref (default: HEAD when --from is set).")
@click.option(
    "--output",
    "-o",
    type=click.Choice(["text", "markdown", "json"]),
    default="text",
    show_default=True,
    help="Output format.",
)
@click.option("--group", "-g", "group_by_type", is_flag=True, help="Group commits by conventional type.")
@click.option("--changelog", is_flag=True, help="Write the summary as a changelog entry.")
@click.pass_context
def summary_cmd(
    ctx,
    number: int,
    branch: str,
    from_ref: str,
    to_ref: str,
    output: str,
    group_by_type: bool,
    changelog: bool,
):
    """Generate an AI-powered summary of recent commits.

    Use --output json to pipe the result into other tools, or --changelog
    for release notes.
    """
    config = ctx.obj["config"]

    with command_errors("failed to get commits"):
        commits = repo.get_commits(number=number, branch=branch, from_ref=from_ref, to_ref=to_ref)
    if not commits:
        raise click.ClickException("no commits found in the specified range")

    # Status lines would corrupt piped JSON.
    if output != "json":
        ui.info(f"Found {len(commits)} commits to summarize")

    options = SummaryOptions(group_by_type=group_by_type, format=output, changelog=changelog)
    with open_provider(config) as provider, command_errors("failed to generate summary"):
        with ui.spinner("Summarizing commits..."):
            summary = provider.generate_summary(commits, options, Deadline(SUMMARY_TIMEOUT))

    ui.show_summary(summary, output)
