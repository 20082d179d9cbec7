"""CLI entry point for aigit.

Commands:
  commit: generate a commit message for the staged changes and commit
  review: AI code review of staged, unstaged, commit, range or branch diffs
  summary: summarise recent commits as text, markdown or JSON
  pr: draft a pull/merge request description for the current branch
  config: inspect and edit the YAML configuration
"""

from __future__ import annotations

import importlib.metadata
import logging

import click
from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler

from aigit_cli import ui
from aigit_cli.commands.commit import commit_cmd
from aigit_cli.commands.config import config_cmd
from aigit_cli.commands.pr import pr_cmd
from aigit_cli.commands.review import review_cmd
from aigit_cli.commands.summary import summary_cmd


def _init_logging(debug: bool) -> None:
    """Route library logging to stderr so it never mixes with command output."""
    handler = RichHandler(console=Console(stderr=True), show_path=False, rich_tracebacks=debug)
    handler.setFormatter(logging.Formatter("%(message)s"))
    root = logging.getLogger()
    root.handlers = [h for h in root.handlers if not isinstance(h, RichHandler)]
    root.addHandler(handler)
    root.setLevel(logging.DEBUG if debug else logging.WARNING)

    # SDK request logs are noise even in debug mode.
    for name in ("httpx", "httpcore", "openai", "anthropic", "google", "urllib3"):
        logging.getLogger(name).setLevel(logging.WARNING)


@click.group()
@click.version_option(
    version=importlib.metadata.version("aigit"),
    prog_name="aigit",
)
@click.option(
    "--config",
    "config_path",
    default=None,
    help="Path to the configuration file. Defaults to $XDG_CONFIG_HOME/aigit/config.yaml.",
    envvar="AIGIT_CONFIG",
)
@click.option("--debug", is_flag=True, help="Log provider traffic and retries to stderr.")
@click.pass_context
def main(ctx: click.Context, config_path: str | None, debug: bool):
    """AI-powered git assistant: commit messages, reviews, summaries and PR descriptions."""
    from aigit_core.config import load_config
    from aigit_core.errors import ConfigurationError

    ctx.ensure_object(dict)
    load_dotenv()
    _init_logging(debug)

    try:
        config = load_config(config_path)
    except ConfigurationError as e:
        raise click.ClickException(str(e)) from e

    ui.configure(config["ui"])
    ctx.obj["config"] = config
    ctx.obj["config_path"] = config_path


main.add_command(commit_cmd)
main.add_command(review_cmd)
main.add_command(summary_cmd)
main.add_command(pr_cmd)
main.add_command(config_cmd)

# Short aliases.
main.add_command(commit_cmd, name="c")
main.add_command(review_cmd, name="r")
main.add_command(summary_cmd, name="s")
main.add_command(pr_cmd, name="mr")
main.add_command(pr_cmd, name="pull-request")
main.add_command(pr_cmd, name="merge-request")
