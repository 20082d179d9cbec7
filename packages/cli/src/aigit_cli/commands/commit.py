"""commit command: generate a commit message for the staged changes."""

from __future__ import annotations

import logging
from dataclasses import replace

import click

from aigit_cli import ui
from aigit_cli.session import command_errors, open_provider
from aigit_core.errors import GitCommandError, RateLimitError
from aigit_core.git import repo
from aigit_core.git.branch import extract_commit_details
from aigit_core.models import CommitMessage, CommitOptions
from aigit_core.normalizer import fallback_commit_message
from aigit_core.utils.deadline import Deadline

logger = logging.getLogger(__name__)

COMMIT_TIMEOUT = 30.0

COMMIT_TYPES = ("feat", "fix", "docs", "style", "refactor", "test", "chore", "perf", "ci", "build")


def _edit_message(message: CommitMessage) -> CommitMessage:
    if not click.confirm("\nEdit commit message?", default=False):
        return message
    edited = click.edit(message.full_message)
    if not edited or not edited.strip():
        return message
    edited = edited.strip()
    return replace(message, subject=edited.split("\n", 1)[0], full_message=edited)


@click.command("commit")
@click.option(
    "--type",
    "-t",
    "commit_type",
    type=click.Choice(COMMIT_TYPES),
    default=None,
    help="Commit type. Overrides the type derived from the branch name.",
)
@click.option("--scope", "-s", default="", help="Commit scope.")
@click.option(
    "--interactive/--no-interactive",
    "-i/-I",
    default=True,
    show_default=True,
    help="Ask for confirmation before committing.",
)
@click.option(
    "--conventional/--no-conventional",
    "-c/-C",
    default=None,
    help="Force (or disable) the conventional commit format. Defaults to git.commit_template.",
)
@click.option("--push", "-p", is_flag=True, help="Push to the remote after committing.")
@click.option("--dry-run", is_flag=True, help="Show the staged diff without calling the AI provider.")
@click.pass_context
def commit_cmd(
    ctx,
    commit_type: str | None,
    scope: str,
    interactive: bool,
    conventional: bool | None,
    push: bool,
    dry_run: bool,
):
    """Generate an AI-powered commit message for staged changes.

    \b
    The branch name contributes a default type and ticket number:
      feature/20240115-1234-login  ->  feat: 1234-<subject>
      bugfix/8765-crash            ->  fix: 8765-<subject>
    """
    config = ctx.obj["config"]
    if conventional is None:
        conventional = config["git"].get("commit_template", "conventional") == "conventional"

    try:
        branch = repo.get_current_branch()
    except GitCommandError as e:
        logger.debug("Could not read current branch: %s", e)
        ui.warning("Could not get current branch name, proceeding without it.")
        branch = ""

    branch_type, ticket = extract_commit_details(branch)
    options = CommitOptions(type=commit_type or branch_type, scope=scope, conventional=conventional)

    with command_errors("failed to get staged changes"):
        if config["git"].get("auto_stage") and not repo.has_staged_changes():
            ui.info("Nothing staged; staging all changes (git.auto_stage is on)")
            repo.stage_all()
        diff = repo.get_staged_diff()

    if not diff:
        ui.warning("No staged changes found. Stage your changes with 'git add' first")
        return

    if dry_run:
        ui.show_dry_run(diff)
        return

    provider_name = config["ai"]["provider"].capitalize()
    with open_provider(config) as provider, command_errors("failed to generate commit message"):
        try:
            with ui.spinner(f"Analyzing staged changes with {provider_name}..."):
                message = provider.generate_commit_message(diff, options, Deadline(COMMIT_TIMEOUT))
        except RateLimitError as e:
            logger.info("Falling back to a local commit message: %s", e)
            ui.warning("API quota exceeded. Falling back to manual mode...")
            message = fallback_commit_message(diff, options)
            ui.info("Generated fallback commit message:")
            ui.show_commit_message(message)
            if interactive:
                message = _edit_message(message)

    message = message.with_ticket(ticket)
    ui.show_commit_message(message)

    if interactive and not click.confirm("\nUse this commit message?", default=True):
        ui.info("Commit cancelled")
        return

    with command_errors("failed to commit"):
        repo.create_commit(message.full_message)
    ui.success("Commit created successfully!")

    if push:
        ui.info("Pushing to remote...")
        try:
            repo.push()
        except GitCommandError as e:
            ui.warning(f"Failed to push: {e}")
        else:
            ui.success("Pushed to remote successfully!")
