"""review command: AI code review of a diff."""

from __future__ import annotations

import click

from aigit_cli import ui
from aigit_cli.session import command_errors, open_provider
from aigit_core.git import repo
from aigit_core.models import ReviewOptions
from aigit_core.utils.deadline import Deadline
from aigit_core.utils.diff import filter_diff, truncate

REVIEW_TIMEOUT = 60.0


def _resolve_diff(staged: bool, commit: str | None, commit_range: str | None, branch: str | None) -> str:
    """Pick the diff source; the first selector given wins, unstaged changes otherwise."""
    if staged:
        ui.info("Reviewing staged changes...")
        return repo.get_staged_diff()
    if commit:
        ui.info(f"Reviewing commit {commit}...")
        return repo.get_commit_diff(commit)
    if commit_range:
        ui.info(f"Reviewing commit range {commit_range}...")
        return repo.get_range_diff(commit_range)
    if branch:
        ui.info(f"Reviewing changes against branch {branch}...")
        return repo.get_branch_diff(branch)
    ui.info("Reviewing unstaged changes...")
    return repo.get_diff()


@click.command("review")
@click.option("--staged", "-s", is_flag=True, help="Review staged changes only.")
@click.option("--commit", "-c", "commit", default=None, help="Review a specific commit.")
@click.option("--range", "-r", "commit_range", default=None, help="Review a commit range, e.g. main..HEAD.")
@click.option("--branch", "-b", default=None, help="Review changes against a specific branch.")
@click.option(
    "--files",
    "-f",
    "files",
    default=None,
    help="Only review files matching this glob. Comma-separate several patterns.",
)
@click.option("--verbose", "-v", is_flag=True, help="Show a preview of the diff being reviewed.")
@click.option("--security", is_flag=True, help="Focus on security issues.")
@click.option("--performance", is_flag=True, help="Focus on performance issues.")
@click.pass_context
def review_cmd(
    ctx,
    staged: bool,
    commit: str | None,
    commit_range: str | None,
    branch: str | None,
    files: str | None,
    verbose: bool,
    security: bool,
    performance: bool,
):
    """Get an AI-powered code review for changes.

    Without a selector the unstaged working-tree changes are reviewed. Files
    are filtered through review.include_patterns / review.exclude_patterns
    from the configuration.
    """
    config = ctx.obj["config"]
    review_config = config["review"]

    with command_errors("failed to get diff"):
        diff = _resolve_diff(staged, commit, commit_range, branch)

    include = [p.strip() for p in files.split(",") if p.strip()] if files else review_config.get("include_patterns")
    diff = filter_diff(diff, include=include, exclude=review_config.get("exclude_patterns"))
    if not diff:
        raise click.ClickException("no changes found to review")

    if verbose:
        ui.show_diff(truncate(diff, 500))

    options = ReviewOptions(
        focus_areas=list(review_config.get("focus_areas") or []),
        verbose=verbose,
        security=security,
        performance=performance,
    )
    with open_provider(config) as provider, command_errors("failed to get code review"):
        with ui.spinner("Sending diff to AI for review..."):
            review = provider.review_code(diff, options, Deadline(REVIEW_TIMEOUT))

    ui.show_review(review)
