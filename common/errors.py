"""Error taxonomy for the lead capture workflow.

Every stage raises a subclass of :class:`SalesforceError`; the workflow engine
is the only place that catches them. Errors raised before any network call
(missing/invalid credential or template documents) are flagged ``preflight``
so the CLI can print remediation text instead of a bare message.
"""
from __future__ import annotations

import json
from typing import Any, Optional

__all__ = [
    "SalesforceError",
    "ConfigMissing",
    "ConfigInvalid",
    "ConfigIncomplete",
    "AuthRejected",
    "TemplateMissing",
    "TemplateInvalid",
    "RecordRejected",
    "RecordNotFound",
    "TransportError",
    "WriteError",
]


class SalesforceError(Exception):
    """Base class; carries the remote status/body when a call failed."""

    preflight = False

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        body: Any = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.body = body

    def __str__(self) -> str:
        if self.body in (None, "", [], {}):
            return self.message
        if isinstance(self.body, str):
            detail = self.body
        else:
            detail = json.dumps(self.body, ensure_ascii=False)
        return f"{self.message}: {detail}"


class ConfigMissing(SalesforceError):
    preflight = True

    def __init__(self, path: str) -> None:
        super().__init__(f"configuration file not found: {path}")
        self.path = path


class ConfigInvalid(SalesforceError):
    preflight = True

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"configuration file {path} is not valid JSON: {reason}")
        self.path = path


class ConfigIncomplete(SalesforceError):
    preflight = True

    def __init__(self, field: str) -> None:
        super().__init__(f'missing required field "{field}" in configuration')
        self.field = field


class AuthRejected(SalesforceError):
    pass


class TemplateMissing(SalesforceError):
    preflight = True

    def __init__(self, path: str) -> None:
        super().__init__(f"record template not found: {path}")
        self.path = path


class TemplateInvalid(SalesforceError):
    preflight = True

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"record template {path} is not a JSON object: {reason}")
        self.path = path


class RecordRejected(SalesforceError):
    pass


class RecordNotFound(SalesforceError):
    pass


class TransportError(SalesforceError):
    pass


class WriteError(SalesforceError):
    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"could not write {path}: {reason}")
        self.path = path
