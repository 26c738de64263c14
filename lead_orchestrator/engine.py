"""Create-then-read workflow for a single Lead.

Steps run strictly in order and each one's output feeds the next:

    authenticate -> load template -> create -> read back -> persist

The first :class:`SalesforceError` stops the run. Nothing is retried, and a
record that was created but could not be read back is left in place.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional, Sequence

import httpx
from pydantic import ValidationError

from common.datetime import utcnow
from common.errors import SalesforceError
from common.secrets import SecretsManager, load_json_object, template_path
from integrations.salesforce import sobject as _default_sobject, token_url
from integrations.salesforce.auth import PasswordGrantAuthenticator
from integrations.salesforce.models import LeadSummary
from integrations.salesforce.records_client import RecordsClient

from .persist import persist

__all__ = ["LeadWorkflow", "WorkflowResult"]

_LOG = logging.getLogger(__name__)


@dataclass
class WorkflowResult:
    """Outcome of one run; ``error`` is set exactly when ``ok`` is False."""

    ok: bool
    output_path: Optional[Path] = None
    record_id: Optional[str] = None
    record: Optional[Dict[str, Any]] = None
    error: Optional[SalesforceError] = None


class LeadWorkflow:
    def __init__(
        self,
        *,
        config: Optional[Mapping[str, Any]] = None,
        config_path: str | Path | None = None,
        template: Optional[Mapping[str, Any]] = None,
        template_file: str | Path | None = None,
        output_dir: str | Path | None = None,
        sobject: Optional[str] = None,
        fields: Optional[Sequence[str]] = None,
        login_url: Optional[str] = None,
        clock: Callable[[], datetime] = utcnow,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._authenticator = PasswordGrantAuthenticator(
            config,
            secrets=SecretsManager(config_path),
            token_url=token_url(login_url),
            transport=transport,
        )
        self._template = template
        self._template_path = template_path(template_file)
        self._output_dir = output_dir
        self._sobject = sobject or _default_sobject()
        self._fields = fields
        self._clock = clock
        self._transport = transport

    def load_template(self) -> Dict[str, Any]:
        if self._template is not None:
            return dict(self._template)
        return load_json_object(self._template_path)

    async def run(self) -> WorkflowResult:
        try:
            return await self._run()
        except SalesforceError as exc:
            _LOG.error("Error: %s", exc)
            return WorkflowResult(ok=False, error=exc)

    async def _run(self) -> WorkflowResult:
        auth = await self._authenticator.authenticate()
        payload = self.load_template()

        async with RecordsClient(
            base_url=auth.instance_url,
            access_token=auth.access_token,
            sobject=self._sobject,
            transport=self._transport,
        ) as client:
            created = await client.create_record(payload)
            record_id = created["id"]
            record = await client.get_record(record_id, fields=self._fields)

        self._log_summary(record_id, record)
        path = persist(record, directory=self._output_dir, clock=self._clock)
        return WorkflowResult(ok=True, output_path=path, record_id=record_id, record=record)

    def _log_summary(self, record_id: str, record: Dict[str, Any]) -> None:
        if _LOG.isEnabledFor(logging.DEBUG):
            _LOG.debug("%s details:\n%s", self._sobject, json.dumps(record, indent=2, ensure_ascii=False))
        try:
            summary = LeadSummary.from_record(record)
        except ValidationError:
            _LOG.info("Retrieved %s %s", self._sobject, record_id, extra={"record_id": record_id})
            return
        _LOG.info("Retrieved %s %s", self._sobject, summary.describe(), extra={"record_id": record_id})
