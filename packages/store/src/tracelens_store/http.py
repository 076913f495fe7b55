"""HttpTraceStore — the evaluation service's REST API over httpx.

Endpoints used:
  GET  /traces/list?offset=&limit=&only_completed=true&order=
  POST /ask/{trace_id}                  body: {"question": ...}
  POST /reviews/{trace_id}/feedback?feedback=...
  GET  /traces/status/{trace_id}

Authentication is a bearer API key plus an optional workspace header. Both
are resolved by the caller (see tracelens_cli.auth) and passed in here, so
this module never reads the environment or the config file.
"""

from __future__ import annotations

import logging
from urllib.parse import quote

import httpx

from tracelens_store.base import BaseTraceStore, TraceStoreError
from tracelens_store.models import TracePage, TraceStatus, page_from_dict, status_from_dict

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


class HttpTraceStore(BaseTraceStore):
    """Talks to the evaluation service.

    ``transport`` is passed straight to httpx.Client; tests use
    httpx.MockTransport to serve canned responses.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str | None = None,
        workspace_id: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ):
        headers = {}
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"
        if workspace_id:
            headers["X-Workspace-Id"] = workspace_id
        self.base_url = base_url.rstrip("/")
        self._client = httpx.Client(
            base_url=self.base_url,
            headers=headers,
            timeout=httpx.Timeout(timeout, connect=10.0),
            transport=transport,
        )

    def list_page(self, offset: int, limit: int, order: str = "desc") -> TracePage:
        data = self._request(
            "GET",
            "/traces/list",
            params={
                "offset": str(offset),
                "limit": str(limit),
                "only_completed": "true",
                "order": order,
            },
        )
        page = page_from_dict(data or {})
        logger.debug("Fetched %d trace(s) at offset %d (total %d)", len(page.items), offset, page.total)
        return page

    def ask(self, trace_id: str, question: str) -> str:
        data = self._request("POST", f"/ask/{quote(trace_id, safe='')}", json={"question": question})
        return (data or {}).get("answer", "")

    def submit_feedback(self, trace_id: str, feedback: str) -> None:
        self._request(
            "POST",
            f"/reviews/{quote(trace_id, safe='')}/feedback",
            params={"feedback": feedback},
        )

    def get_status(self, trace_id: str) -> TraceStatus:
        data = self._request("GET", f"/traces/status/{quote(trace_id, safe='')}")
        return status_from_dict(data or {})

    def close(self) -> None:
        self._client.close()

    def _request(self, method: str, path: str, **kwargs) -> dict | list | None:
        """Send one request and decode the JSON body.

        Status failures are reported as "<status> <reason>: <body>" so the
        server's own explanation reaches the user verbatim.
        """
        try:
            response = self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.warning("%s %s failed: %s", method, path, e)
            raise TraceStoreError(f"{type(e).__name__}: {e}") from e

        if response.is_error:
            body = response.text or str(response.status_code)
            raise TraceStoreError(f"{response.status_code} {response.reason_phrase}: {body}")
        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise TraceStoreError(f"Invalid JSON from {path}: {response.text[:200]}") from e
