"""stats command — aggregate triage tiers across the trace list."""

from __future__ import annotations

from collections import Counter

import click
from rich.console import Console
from rich.table import Table

from tracelens_core.pool import PagePool
from tracelens_core.tiering import count_failed_requirements, tier
from tracelens_store.base import TraceStoreError

console = Console()


def collect(store, order: str, max_pages: int) -> PagePool:
    """Page through the store sequentially until exhausted or ``max_pages`` is hit."""
    pool = PagePool(order=order)
    for _ in range(max_pages):
        _, request = pool.advance(len(pool), len(pool))
        if request is None:
            break
        page = store.list_page(request.offset, request.limit, request.order)
        pool.complete(request.generation, page)
    return pool


@click.command("stats")
@click.option("--max-pages", default=20, show_default=True, help="Stop after this many pages of 25 traces.")
@click.pass_context
def stats_cmd(ctx, max_pages: int):
    """Show how traces split across triage tiers and issue severities.

    Tier 0 traces have a failed requirement or a critical issue, tier 1 a high
    issue, tier 2 a medium issue; tier 3 traces are clean or low-only and are
    hidden in failures-only review.
    """
    config = ctx.obj["config"]
    store = ctx.obj["store"]

    try:
        pool = collect(store, config["order"], max_pages)
    except TraceStoreError as e:
        raise click.ClickException(str(e))

    records = pool.items
    if not records:
        console.print("[yellow]No traces found.[/yellow]")
        return

    tier_counter: Counter[int] = Counter(tier(r) for r in records)
    severity_counter: Counter[str] = Counter()
    failed_requirements = 0
    for record in records:
        failed_requirements += count_failed_requirements(record)
        for issue in record.issues:
            severity_counter[(issue.severity or "").upper() or "UNKNOWN"] += 1

    # --- Summary ---
    console.print("\n[bold]Trace stats[/bold]")
    console.print(f"  Traces scanned:      {len(records)}" + ("" if pool.exhausted else f" (of {pool.total})"))
    console.print(f"  Failed requirements: {failed_requirements}")
    console.print(f"  Needing attention:   {sum(tier_counter[t] for t in (0, 1, 2))}")

    # --- Tier breakdown ---
    tier_table = Table(title="Tier Breakdown", show_header=True)
    tier_table.add_column("Tier", style="bold")
    tier_table.add_column("Meaning")
    tier_table.add_column("Count", justify="right")
    tier_table.add_column("% of total", justify="right")
    _tier_rows = [
        (0, "red", "failed requirement or critical"),
        (1, "yellow", "high severity"),
        (2, "blue", "medium severity"),
        (3, "dim", "low-only or clean"),
    ]
    for t, style, meaning in _tier_rows:
        count = tier_counter.get(t, 0)
        pct = f"{count / len(records) * 100:.1f}%"
        tier_table.add_row(f"[{style}]{t}[/{style}]", meaning, str(count), pct)
    console.print(tier_table)

    # --- Severity breakdown ---
    if severity_counter:
        sev_table = Table(title="Issue Severities", show_header=True)
        sev_table.add_column("Severity", style="bold")
        sev_table.add_column("Count", justify="right")
        known = ["CRITICAL", "HIGH", "MEDIUM", "LOW"]
        others = sorted(s for s in severity_counter if s not in known)
        for severity in known + others:
            sev_table.add_row(severity, str(severity_counter.get(severity, 0)))
        console.print(sev_table)
