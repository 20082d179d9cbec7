"""pr command: draft a pull/merge request description for the current branch."""

from __future__ import annotations

import logging

import click
import pyperclip

from aigit_cli import ui
from aigit_cli.session import command_errors, open_provider
from aigit_core.git import repo
from aigit_core.git.branch import extract_issue_numbers
from aigit_core.models import PRAnalysis
from aigit_core.pr import build_pr_description
from aigit_core.utils.deadline import Deadline

logger = logging.getLogger(__name__)

PR_TIMEOUT = 60.0
MAX_BRANCH_COMMITS = 50

_NEXT_PLATFORM = {"github": "gitlab", "gitlab": "bitbucket", "bitbucket": "github"}


@click.command("pr")
@click.option("--target", "-t", default=None, help="Target branch. Defaults to git.default_branch.")
@click.option(
    "--platform",
    "-p",
    type=click.Choice(["github", "gitlab", "bitbucket"]),
    default="github",
    show_default=True,
    help="Platform whose conventions the description follows.",
)
@click.option(
    "--template",
    type=click.Choice(["standard", "minimal", "detailed"]),
    default="standard",
    show_default=True,
    help="Which sections to include in the markdown body.",
)
@click.option("--draft", "-d", is_flag=True, help="Mark the title as a draft / work in progress.")
@click.option(
    "--interactive/--no-interactive",
    "-i/-I",
    default=True,
    show_default=True,
    help="Offer to edit the markdown in $EDITOR.",
)
@click.option("--copy", "-c", "copy_to_clipboard", is_flag=True, help="Copy the markdown body to the clipboard.")
@click.pass_context
def pr_cmd(
    ctx,
    target: str | None,
    platform: str,
    template: str,
    draft: bool,
    interactive: bool,
    copy_to_clipboard: bool,
):
    """Generate an AI-powered PR/MR description.

    Compares the current branch against the target branch and builds a
    summary, change list, issue links and a reviewer checklist.
    """
    config = ctx.obj["config"]
    target = target or config["git"].get("default_branch") or "main"

    with command_errors("failed to read branch"):
        current = repo.get_current_branch()
    if current == target:
        raise click.ClickException(f"current branch ({current}) is the same as target branch ({target})")

    ui.info(f"Analyzing changes from {target} to {current}...")
    with command_errors("failed to get branch diff"):
        diff = repo.get_branch_diff(target)
        if not diff:
            ui.warning("No differences found between current branch and target branch")
            return
        commits = repo.get_commits(number=MAX_BRANCH_COMMITS, branch=f"{target}..{current}")

    ui.info(f"Found {len(commits)} commits and analyzing diff...")
    analysis = PRAnalysis(
        current_branch=current,
        target_branch=target,
        diff=diff,
        commits=commits,
        issue_numbers=extract_issue_numbers(current, commits),
        platform=platform,
        template=template,
        is_draft=draft,
    )

    provider_name = config["ai"]["provider"].capitalize()
    with open_provider(config) as provider, command_errors("failed to generate PR description"):
        with ui.spinner(f"Generating PR description with {provider_name}..."):
            generated = provider.generate_pr_description(analysis, Deadline(PR_TIMEOUT))

    description = build_pr_description(generated, analysis)
    markdown = ui.format_pr_markdown(description, template, commits)
    ui.show_pr_description(description, markdown)

    if interactive and click.confirm("\nEdit PR description?", default=False):
        edited = click.edit(markdown, extension=".md")
        if edited and edited.strip():
            markdown = edited.strip()
            ui.info("Using the edited description.")

    if copy_to_clipboard:
        try:
            pyperclip.copy(markdown)
        except pyperclip.PyperclipException as e:
            logger.debug("Clipboard copy failed: %s", e)
            ui.warning("Could not copy to clipboard; copy the markdown above manually.")
        else:
            ui.success("PR description copied to clipboard!")

    ui.success("PR description generated successfully!")
    ui.info(f"Tip: Use 'aigit pr --platform {_NEXT_PLATFORM[platform]}' to format for different platforms")
