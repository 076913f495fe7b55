"""list command — print one page of traces from the store."""

from __future__ import annotations

import json

import click
from rich.console import Console
from rich.table import Table

from tracelens_core.projector import project
from tracelens_core.tiering import count_failed_requirements, severity_counts, tier
from tracelens_store.base import TraceStoreError
from tracelens_store.models import record_to_dict

console = Console()

_TIER_STYLE = {0: "red", 1: "yellow", 2: "blue", 3: "dim"}


def _correctness(value: bool | None) -> str:
    if value is True:
        return "[green]✓ correct[/green]"
    if value is False:
        return "[red]✗ incorrect[/red]"
    return "[yellow]? unknown[/yellow]"


@click.command("list")
@click.option("--offset", default=0, show_default=True, help="Index of the first trace to fetch.")
@click.option("--limit", default=25, show_default=True, help="Maximum number of traces to fetch.")
@click.option("--order", type=click.Choice(["asc", "desc"]), default=None, help="Sort order. Overrides config file.")
@click.option("--failures-only", is_flag=True, help="Only show tier 0-2 traces, most urgent first.")
@click.option("--json", "as_json", is_flag=True, help="Print the page as JSON (usable as a traces_file).")
@click.pass_context
def list_cmd(ctx, offset: int, limit: int, order: str | None, failures_only: bool, as_json: bool):
    """List traces with their triage tier and issue counts."""
    config = ctx.obj["config"]
    store = ctx.obj["store"]

    try:
        page = store.list_page(offset, limit, order or config["order"])
    except TraceStoreError as e:
        raise click.ClickException(str(e))

    records = project(page.items, failures_only)

    if as_json:
        click.echo(
            json.dumps(
                {
                    "items": [record_to_dict(r) for r in records],
                    "offset": page.offset,
                    "limit": page.limit,
                    "total": page.total,
                },
                indent=2,
            )
        )
        return

    if not records:
        console.print("[yellow]No traces found.[/yellow]")
        return

    table = Table(
        title=f"Traces {offset + 1}–{offset + len(page.items)} of {page.total}",
        show_header=True,
        header_style="bold cyan",
    )
    table.add_column("Trace", style="bold", max_width=24)
    table.add_column("Tier", justify="right", width=4)
    table.add_column("Failed", justify="right", width=6)
    table.add_column("C/H/M/L", width=9)
    table.add_column("Correctness", width=12)
    table.add_column("Task", max_width=50)

    for record in records:
        t = tier(record)
        counts = severity_counts(record)
        style = _TIER_STYLE[t]
        table.add_row(
            record.trace_id,
            f"[{style}]{t}[/{style}]",
            str(count_failed_requirements(record)),
            f"{counts.critical}/{counts.high}/{counts.medium}/{counts.low}",
            _correctness(record.correctness),
            record.task[:50],
        )

    console.print(table)
