"""config command group: inspect and edit the YAML configuration."""

from __future__ import annotations

from pathlib import Path

import click
from rich.table import Table

from aigit_cli import ui
from aigit_core.config import default_config_path, flatten, get_value, read_config_file, save_config, set_value
from aigit_core.errors import ConfigurationError

_SECRET_KEYS = {"ai.api_key"}


def _display(key: str, value) -> str:
    if key in _SECRET_KEYS and value:
        text = str(value)
        return text[:4] + "…" + text[-4:] if len(text) > 12 else "****"
    if isinstance(value, list):
        return ", ".join(str(v) for v in value) or "[]"
    if isinstance(value, bool):
        return str(value).lower()
    return str(value)


def _config_path(ctx: click.Context) -> Path:
    path = ctx.obj.get("config_path")
    return Path(path) if path else default_config_path()


@click.group("config")
def config_cmd():
    """Manage aigit configuration."""


@config_cmd.command("set")
@click.argument("key")
@click.argument("value")
@click.pass_context
def config_set(ctx, key: str, value: str):
    """Set a configuration value, e.g. `aigit config set ai.provider gemini`.

    Only the file is edited; environment variables still take precedence
    when commands run.
    """
    path = _config_path(ctx)
    try:
        document = read_config_file(str(path))
        typed = set_value(document, key, value)
    except ConfigurationError as e:
        raise click.UsageError(str(e)) from e
    save_config(document, str(path))
    ui.success(f"Set {key} = {_display(key, typed)}")


@config_cmd.command("get")
@click.argument("key")
@click.pass_context
def config_get(ctx, key: str):
    """Print the effective value of KEY (file, environment and defaults merged)."""
    try:
        value = get_value(ctx.obj["config"], key)
    except ConfigurationError as e:
        raise click.ClickException(str(e)) from e
    if isinstance(value, dict):
        for sub_key, sub_value in flatten(value, key):
            click.echo(f"{sub_key} = {_display(sub_key, sub_value)}")
    else:
        click.echo(f"{key} = {_display(key, value)}")


@config_cmd.command("list")
@click.pass_context
def config_list(ctx):
    """List every effective configuration value."""
    table = Table(title="Current configuration", show_header=True, header_style="bold cyan")
    table.add_column("Key", style="bold")
    table.add_column("Value")
    for key, value in flatten(ctx.obj["config"]):
        table.add_row(key, _display(key, value))
    ui.console.print(table)


@config_cmd.command("path")
@click.pass_context
def config_path(ctx):
    """Show the configuration file path."""
    path = _config_path(ctx)
    label = "Config file" if ctx.obj.get("config_path") else "Default config path"
    ui.info(f"{label}: {path}")
