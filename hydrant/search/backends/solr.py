# -*- coding: utf-8 -*-
"""
Minimal Solr transport over httpx.

Sends the query's opaque engine params to ``<base_url>/select`` with
``wt=json`` and returns the decoded JSON body. Query-string construction,
retries and pooling policy belong to the caller; pass a preconfigured
``httpx.Client`` to control them.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional

import httpx

from ...config import settings
from ...errors import TransportError
from ..query import SearchQuery

logger = logging.getLogger("search.transport")


class HttpSolrTransport:
    """Thin sync transport; implements the `Transport` protocol."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        timeout: Optional[float] = None,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self.base_url = (base_url or getattr(settings, "SOLR_URL", None) or "").rstrip("/")
        if not self.base_url:
            raise ValueError("SOLR_URL is not configured.")
        self.timeout = timeout if timeout is not None else settings.SOLR_TIMEOUT
        self._owns_client = client is None
        self._client = client or httpx.Client(
            timeout=self.timeout,
            headers={"Accept": "application/json"},
        )

    def execute(self, query: SearchQuery) -> Mapping[str, Any]:
        params: Dict[str, Any] = dict(query.params)
        params["wt"] = "json"
        url = f"{self.base_url}/select"

        try:
            resp = self._client.get(url, params=params)
        except httpx.HTTPError as exc:
            logger.warning("solr.request_failed url=%s error=%s", url, exc)
            raise TransportError(f"Request to {url} failed: {exc}") from exc

        if resp.status_code >= 400:
            raise TransportError(
                f"Solr returned HTTP {resp.status_code}",
                status_code=resp.status_code,
                body=resp.text[:2000],
            )
        try:
            return resp.json()
        except ValueError as exc:
            raise TransportError(
                "Solr returned a non-JSON body",
                status_code=resp.status_code,
                body=resp.text[:2000],
            ) from exc

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "HttpSolrTransport":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()
