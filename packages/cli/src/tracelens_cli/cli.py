"""CLI entry point for tracelens.

Commands:
  review   — full-screen trace triage (the main tool)
  list     — print one page of traces as a table
  stats    — tier and severity breakdown across the trace list
  ask      — one-shot question about a trace
  status   — analysis/review readiness for a trace
  config   — view and edit the YAML config file
"""

from __future__ import annotations

import importlib.metadata
import logging

import click
from rich.console import Console

from tracelens_cli.commands.ask import ask_cmd, status_cmd
from tracelens_cli.commands.config import config_cmd
from tracelens_cli.commands.list import list_cmd
from tracelens_cli.commands.review import review_cmd
from tracelens_cli.commands.stats import stats_cmd

console = Console()


def _build_store(config: dict):
    """Instantiate the configured trace store from .tracelens.yml settings.

    Store selection:
      store: file → InMemoryTraceStore over traces_file (a JSON export)
      (default)   → HttpTraceStore against api_url

    This factory lives in cli.py so neither tracelens_core nor
    tracelens_store know about the CLI config format.
    """
    from tracelens_cli.auth import resolve_api_key, resolve_workspace_id
    from tracelens_store.memory import InMemoryTraceStore

    store_type = config.get("store", "http")

    if store_type == "file":
        traces_file = config.get("traces_file")
        if not traces_file:
            console.print("[yellow]The file store requires traces_file. Falling back to an empty store.[/yellow]")
            return InMemoryTraceStore()
        return InMemoryTraceStore.from_json_file(traces_file)

    from tracelens_store.http import HttpTraceStore

    return HttpTraceStore(
        base_url=config["api_url"],
        api_key=resolve_api_key(config),
        workspace_id=resolve_workspace_id(config),
    )


def _configure_logging(debug: bool, log_file: str | None) -> None:
    # The review screen owns the terminal, so logs only ever go to a file.
    if not debug:
        for name in ("tracelens_cli", "tracelens_core", "tracelens_store"):
            logging.getLogger(name).addHandler(logging.NullHandler())
        return
    logging.basicConfig(
        level=logging.DEBUG,
        filename=log_file or ".tracelens.log",
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@click.group()
@click.version_option(
    version=importlib.metadata.version("tracelens"),
    prog_name="tracelens",
)
@click.option(
    "--config",
    "config_path",
    default=".tracelens.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="TRACELENS_CONFIG",
)
@click.option("--debug", is_flag=True, envvar="TRACELENS_DEBUG", help="Write debug logs to the configured log_file.")
@click.pass_context
def main(ctx: click.Context, config_path: str, debug: bool):
    """Triage evaluation traces from the terminal."""
    from tracelens_core.config import load_config
    from tracelens_store.base import TraceStoreError

    ctx.ensure_object(dict)

    config = load_config(config_path)
    _configure_logging(debug, config.get("log_file"))

    ctx.obj["config"] = config
    ctx.obj["config_path"] = config_path

    # `config` edits the file itself and must work even when the store can't be built.
    if ctx.invoked_subcommand == "config":
        return

    try:
        store = _build_store(config)
    except TraceStoreError as e:
        raise click.UsageError(str(e))
    ctx.obj["store"] = store
    ctx.call_on_close(store.close)


main.add_command(review_cmd)
main.add_command(list_cmd)
main.add_command(stats_cmd)
main.add_command(ask_cmd)
main.add_command(status_cmd)
main.add_command(config_cmd)
