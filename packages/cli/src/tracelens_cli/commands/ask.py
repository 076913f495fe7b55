"""ask and status commands — one-shot queries about a single trace."""

from __future__ import annotations

import click
from rich.console import Console

from tracelens_store.base import TraceStoreError

console = Console()


def _yes_no(value: bool) -> str:
    return "[green]yes[/green]" if value else "[yellow]no[/yellow]"


@click.command("ask")
@click.argument("trace_id")
@click.argument("question", nargs=-1, required=True)
@click.pass_context
def ask_cmd(ctx, trace_id: str, question: tuple[str, ...]):
    """Ask a question about a stored trace."""
    text = " ".join(question).strip()
    if not text:
        raise click.UsageError("QUESTION must not be blank.")

    try:
        answer = ctx.obj["store"].ask(trace_id, text)
    except TraceStoreError as e:
        raise click.ClickException(str(e))

    console.print("[cyan]Ask:[/cyan]")
    console.print(answer, markup=False)


@click.command("status")
@click.argument("trace_id")
@click.pass_context
def status_cmd(ctx, trace_id: str):
    """Show analysis/review readiness for a trace."""
    try:
        status = ctx.obj["store"].get_status(trace_id)
    except TraceStoreError as e:
        raise click.ClickException(str(e))

    console.print(f"[bold]Trace ID:[/bold] {status.trace_id}")
    console.print(f"[bold]Analysis:[/bold] {status.analysis_status}")
    if status.review_status:
        console.print(f"[bold]Review:[/bold] {status.review_status}")
    console.print(f"[bold]Has Analyzer:[/bold] {_yes_no(status.has_analyzer_eval)}")
    console.print(f"[bold]Has Correctness:[/bold] {_yes_no(status.has_correctness_eval)}")
    console.print(f"[bold]Ready for Review:[/bold] {_yes_no(status.ready_for_review)}")
    if status.created_at:
        console.print(f"[bold]Created:[/bold] {status.created_at}")
