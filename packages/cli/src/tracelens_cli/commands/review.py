"""review command — full-screen trace triage."""

from __future__ import annotations

import logging

import click

from tracelens_core.session import ReviewSession

logger = logging.getLogger(__name__)


def build_session(config: dict, failures_only: bool | None = None, order: str | None = None) -> ReviewSession:
    """Create a ReviewSession from merged config, letting CLI flags win."""
    return ReviewSession(
        order=order or config["order"],
        failures_only=config["failures_only"] if failures_only is None else failures_only,
        show_summaries=bool(config["show_summaries"]),
        answer_timeout=float(config["answer_timeout"]),
        notice_timeout=float(config["notice_timeout"]),
    )


@click.command("review")
@click.option(
    "--failures-only/--all",
    "failures_only",
    default=None,
    help="Only review tier 0-2 traces, most urgent first. Overrides config file.",
)
@click.option(
    "--order",
    type=click.Choice(["asc", "desc"]),
    default=None,
    help="Order traces are fetched in. Overrides config file.",
)
@click.pass_context
def review_cmd(ctx, failures_only: bool | None, order: str | None):
    """Step through traces and send feedback or questions for each one.

    \b
    Keys:
      ←/→        previous / next trace
      ↑/↓ PgUp/PgDn  scroll the focused pane (Tab switches pane)
      a / f      ask a question / write feedback (Enter sends, Esc cancels)
      t          full transcript
      s          fold or unfold summaries
      x          toggle failures-only
      v          show or hide the last answer
      q          quit
    """
    from tracelens_cli.tui import ReviewApp

    config = ctx.obj["config"]
    store = ctx.obj["store"]
    session = build_session(config, failures_only=failures_only, order=order)
    logger.debug("Starting review (order=%s, failures_only=%s)", session.pool.order, session.failures_only)

    ReviewApp(session, store).run()
