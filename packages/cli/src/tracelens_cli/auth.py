"""Evaluation service credential resolution.

Resolution order for each value (stops at first success):
  1. Environment variable (EVAL_API_KEY / EVAL_WORKSPACE_ID), so CI and
     one-off shells can override without touching the config file
  2. The config file (`api_key` / `workspace_id`, set with `tracelens config set`)

A local development service usually runs without auth, so a missing key is
not an error here. The server rejects the request if it needs one.
"""

from __future__ import annotations

import logging
import os

logger = logging.getLogger(__name__)


def resolve_api_key(config: dict) -> str | None:
    """Return an API key or None if no source provides one. Never raises."""
    key = os.environ.get("EVAL_API_KEY")
    if key:
        return key

    key = config.get("api_key")
    if key:
        logger.debug("Resolved API key from config file.")
        return str(key).strip() or None

    logger.debug("No API key configured; requests will be sent unauthenticated.")
    return None


def resolve_workspace_id(config: dict) -> str | None:
    workspace = os.environ.get("EVAL_WORKSPACE_ID") or config.get("workspace_id")
    if not workspace:
        return None
    return str(workspace).strip() or None
