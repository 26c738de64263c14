"""OAuth2 password-grant authentication for Salesforce.

One exchange per run: the credential document is validated, form-encoded and
posted to the token endpoint. The result is neither cached nor refreshed;
a rejected exchange ends the run.
"""
from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

import httpx
from prometheus_client import Counter
from pydantic import ValidationError

from common.errors import AuthRejected, ConfigIncomplete, TransportError
from common.secrets import SecretsManager

from . import token_url as _default_token_url
from .http import response_body
from .models import AuthResult

_LOG = logging.getLogger(__name__)

_TOKENS_ISSUED = Counter(
    "sf_oauth_tokens_issued_total", "OAuth tokens issued by the password grant"
)
_AUTH_ERRORS = Counter(
    "sf_oauth_errors_total", "OAuth token exchange failures", ["reason"]
)

# Checked in this order; the first missing one is reported.
REQUIRED_FIELDS = ("grant_type", "client_id", "client_secret", "username", "password")

__all__ = [
    "REQUIRED_FIELDS",
    "PasswordGrantAuthenticator",
    "authenticate",
    "validate_config",
]


def validate_config(config: Mapping[str, Any]) -> None:
    """Raise :class:`ConfigIncomplete` for the first absent or empty field."""

    for field in REQUIRED_FIELDS:
        if not config.get(field):
            _AUTH_ERRORS.labels("config_incomplete").inc()
            raise ConfigIncomplete(field)


class PasswordGrantAuthenticator:
    """Exchanges username/password(+security token) for an access token."""

    def __init__(
        self,
        config: Optional[Mapping[str, Any]] = None,
        *,
        secrets: Optional[SecretsManager] = None,
        token_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._config = config
        self._secrets = secrets
        self._token_url = token_url or _default_token_url()
        self._transport = transport

    def _load_config(self) -> Mapping[str, Any]:
        if self._config is not None:
            return self._config
        return (self._secrets or SecretsManager()).load()

    async def authenticate(self) -> AuthResult:
        config = self._load_config()
        validate_config(config)

        headers = {"Content-Type": "application/x-www-form-urlencoded"}
        # httpx encodes None as "" and booleans as "true"/"false"
        data = dict(config)
        try:
            async with httpx.AsyncClient(timeout=None, transport=self._transport) as client:
                resp = await client.post(self._token_url, data=data, headers=headers)
        except httpx.RequestError as exc:
            _AUTH_ERRORS.labels("transport").inc()
            _LOG.error("Authentication failed: %s", exc)
            raise TransportError(f"token request to {self._token_url} failed: {exc}") from exc

        body = response_body(resp)
        if not resp.is_success:
            _AUTH_ERRORS.labels("rejected").inc()
            _LOG.error("Authentication failed: HTTP %s %s", resp.status_code, body)
            raise AuthRejected(
                f"token exchange rejected with HTTP {resp.status_code}",
                status_code=resp.status_code,
                body=body,
            )

        try:
            result = AuthResult.model_validate(body)
        except ValidationError as exc:
            _AUTH_ERRORS.labels("malformed").inc()
            _LOG.error("Authentication failed: unexpected token response")
            raise AuthRejected(
                "token response lacks access_token/instance_url",
                status_code=resp.status_code,
                # key names only; a partial body may still hold a live token
                body=sorted(body) if isinstance(body, dict) else body,
            ) from exc

        _TOKENS_ISSUED.inc()
        _LOG.info("Authentication successful; access token received for %s", result.instance_url)
        return result


async def authenticate(
    config: Optional[Mapping[str, Any]] = None,
    **kwargs: Any,
) -> AuthResult:
    """Shortcut for ``PasswordGrantAuthenticator(config, **kwargs).authenticate()``."""

    return await PasswordGrantAuthenticator(config, **kwargs).authenticate()
