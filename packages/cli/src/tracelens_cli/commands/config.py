"""config command group — view and edit the YAML config file."""

from __future__ import annotations

import os

import click
import yaml
from rich.console import Console

from tracelens_core.config import (
    SECRET_KEYS,
    SETTABLE_KEYS,
    mask,
    parse_value,
    read_config_file,
    remove_config_key,
    save_config_values,
)

console = Console()


def _check_key(key: str) -> None:
    if key not in SETTABLE_KEYS:
        raise click.UsageError(f"Unknown key {key!r}. Allowed keys: {', '.join(SETTABLE_KEYS)}")


@click.group("config")
def config_cmd():
    """View and edit persistent configuration."""


@config_cmd.command("view")
@click.pass_context
def view_cmd(ctx):
    """Print the config path and the effective values."""
    config = dict(ctx.obj["config"])
    for key in SECRET_KEYS:
        config[key] = mask(config.get(key))
    console.print(f"[bold]Config path:[/bold] {ctx.obj['config_path']}")
    click.echo(yaml.dump(config, default_flow_style=False, sort_keys=False))


@config_cmd.command("set")
@click.argument("key")
@click.argument("value", nargs=-1, required=True)
@click.pass_context
def set_cmd(ctx, key: str, value: tuple[str, ...]):
    """Set KEY to VALUE in the config file."""
    _check_key(key)
    try:
        parsed = parse_value(key, " ".join(value))
    except ValueError as e:
        raise click.UsageError(str(e))
    save_config_values({key: parsed}, ctx.obj["config_path"])
    console.print(f"[green]Updated {key}[/green]")


@config_cmd.command("unset")
@click.argument("key")
@click.pass_context
def unset_cmd(ctx, key: str):
    """Remove KEY from the config file."""
    _check_key(key)
    if remove_config_key(key, ctx.obj["config_path"]):
        console.print(f"[green]Removed {key}[/green]")
    else:
        console.print(f"[yellow]{key} was not set.[/yellow]")


@config_cmd.command("path")
@click.pass_context
def path_cmd(ctx):
    """Print the config file path."""
    click.echo(ctx.obj["config_path"])


@config_cmd.command("raw")
@click.pass_context
def raw_cmd(ctx):
    """Print only what the config file itself sets."""
    click.echo(yaml.dump(read_config_file(ctx.obj["config_path"]), default_flow_style=False, sort_keys=False))


@config_cmd.command("edit")
@click.pass_context
def edit_cmd(ctx):
    """Open the config file in $EDITOR, creating it if needed."""
    path = ctx.obj["config_path"]
    if not os.path.exists(path):
        save_config_values({}, path)
    click.edit(filename=path)
