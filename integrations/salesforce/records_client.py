from __future__ import annotations

"""Async client for creating and reading a single sObject record.

Bodies are returned exactly as decoded from the API. Designed for easy mocking
via `httpx.MockTransport`.
"""

import logging
from typing import Any, Dict, Mapping, Optional, Sequence

import httpx
from pydantic import ValidationError

from common.errors import RecordNotFound, RecordRejected, TransportError

from . import sobject as _default_sobject, sobject_path
from .http import SalesforceHTTP, response_body
from .models import CreateResponse

__all__ = ["RecordsClient", "create_record", "get_record"]

_LOG = logging.getLogger(__name__)


class RecordsClient:
    def __init__(
        self,
        http: Optional[SalesforceHTTP] = None,
        *,
        base_url: Optional[str] = None,
        access_token: Optional[str] = None,
        sobject: Optional[str] = None,
        api_version: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        if http is None and (not base_url or not access_token):
            raise ValueError("RecordsClient needs either http or base_url + access_token")
        self._own_http = http is None
        self.http = http or SalesforceHTTP(
            base_url, access_token, sobject=sobject, transport=transport
        )
        self.sobject = sobject or _default_sobject()
        self._path = sobject_path(self.sobject, api_version)

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        if self._own_http:
            await self.http.aclose()

    # ---------------------------------------------------------------------
    # Public API
    # ---------------------------------------------------------------------

    async def create_record(self, payload: Mapping[str, Any]) -> Dict[str, Any]:
        """POST *payload* as a new record; returns the response body (has ``id``)."""

        resp = await self.http.post(
            self._path,
            json=dict(payload),
            headers={"Content-Type": "application/json"},
        )
        body = response_body(resp)
        if not resp.is_success:
            _LOG.error("Error creating %s: HTTP %s %s", self.sobject, resp.status_code, body)
            raise RecordRejected(
                f"{self.sobject} creation rejected with HTTP {resp.status_code}",
                status_code=resp.status_code,
                body=body,
            )
        if not isinstance(body, dict):
            raise TransportError(
                f"{self.sobject} creation returned a non-JSON body",
                status_code=resp.status_code,
                body=body,
            )
        try:
            created = CreateResponse.model_validate(body)
        except ValidationError as exc:
            raise RecordRejected(
                f"{self.sobject} creation response has no id",
                status_code=resp.status_code,
                body=body,
            ) from exc
        _LOG.info("%s created successfully: %s", self.sobject, created.id, extra={"record_id": created.id})
        return body

    async def get_record(
        self, record_id: str, *, fields: Optional[Sequence[str]] = None
    ) -> Dict[str, Any]:
        """GET the full snapshot of *record_id*; ``fields`` narrows it server-side."""

        params = {"fields": ",".join(fields)} if fields else None
        resp = await self.http.get(f"{self._path}/{record_id}", params=params)
        body = response_body(resp)
        if not resp.is_success:
            _LOG.error(
                "Error retrieving %s %s: HTTP %s %s", self.sobject, record_id, resp.status_code, body
            )
            raise RecordNotFound(
                f"{self.sobject} {record_id} could not be read (HTTP {resp.status_code})",
                status_code=resp.status_code,
                body=body,
            )
        if not isinstance(body, dict):
            raise TransportError(
                f"{self.sobject} {record_id} returned a non-JSON body",
                status_code=resp.status_code,
                body=body,
            )
        _LOG.info("%s details retrieved successfully", self.sobject, extra={"record_id": record_id})
        return body


# convenience helpers for one-off calls
async def create_record(
    base_url: str,
    access_token: str,
    payload: Mapping[str, Any],
    **kwargs: Any,
) -> Dict[str, Any]:
    async with RecordsClient(base_url=base_url, access_token=access_token, **kwargs) as client:
        return await client.create_record(payload)


async def get_record(
    base_url: str,
    access_token: str,
    record_id: str,
    *,
    fields: Optional[Sequence[str]] = None,
    **kwargs: Any,
) -> Dict[str, Any]:
    async with RecordsClient(base_url=base_url, access_token=access_token, **kwargs) as client:
        return await client.get_record(record_id, fields=fields)
