"""Shared HTTP helpers for the Salesforce REST API.

Uses `httpx.AsyncClient` with:
* Base URL = the ``instance_url`` handed out by the token endpoint
* Bearer-token injection on every request
* Prometheus counter + histogram (labels: sobject, method, status)

Requests are sent exactly once; there is no retry or refresh on 401/5xx.
Tests pass an `httpx.MockTransport`.
"""
from __future__ import annotations

import logging
import time
from typing import Any, Optional

import httpx
from prometheus_client import Counter, Histogram

from common.errors import TransportError

from . import sobject as _default_sobject

__all__ = ["SalesforceHTTP", "response_body"]

_LOG = logging.getLogger(__name__)

_REQUESTS_TOTAL = Counter(
    "sf_http_requests_total",
    "HTTP requests to the Salesforce REST API",
    labelnames=["sobject", "method", "status"],
)
_LATENCY_SEC = Histogram(
    "sf_http_latency_seconds",
    "Latency for Salesforce REST requests",
    labelnames=["sobject", "method"],
)


def response_body(resp: httpx.Response) -> Any:
    """Decoded JSON body, the raw text when it is not JSON, ``None`` when empty."""

    if not resp.content:
        return None
    try:
        return resp.json()
    except ValueError:
        return resp.text


class SalesforceHTTP:
    def __init__(
        self,
        base_url: str,
        access_token: str,
        *,
        sobject: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._access_token = access_token
        self._sobject = sobject or _default_sobject()
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"), timeout=None, transport=transport
        )
        _LOG.debug("Salesforce HTTP ready: base_url=%s sobject=%s", base_url, self._sobject)

    async def _request(self, method: str, url: str, **kwargs) -> httpx.Response:  # noqa: D401 – imperative
        headers = {
            **kwargs.pop("headers", {}),
            "Authorization": f"Bearer {self._access_token}",
        }
        start = time.perf_counter()
        try:
            resp = await self._client.request(method, url, headers=headers, **kwargs)
        except httpx.RequestError as exc:
            _REQUESTS_TOTAL.labels(self._sobject, method.lower(), "error").inc()
            raise TransportError(f"{method} {url} failed: {exc}") from exc
        _LATENCY_SEC.labels(self._sobject, method.lower()).observe(time.perf_counter() - start)
        _REQUESTS_TOTAL.labels(self._sobject, method.lower(), resp.status_code).inc()
        _LOG.debug(
            "%s %s -> %s", method, url, resp.status_code,
            extra={"endpoint": url, "status": resp.status_code},
        )
        return resp

    async def get(self, url: str, **kw) -> httpx.Response:  # noqa: D401 – imperative
        return await self._request("GET", url, **kw)

    async def post(self, url: str, **kw) -> httpx.Response:  # noqa: D401 – imperative
        return await self._request("POST", url, **kw)

    async def aclose(self) -> None:
        await self._client.aclose()

    # context-manager sugar
    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.aclose()
