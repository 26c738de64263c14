"""Salesforce REST integration package.

Settings are read from the environment on every call so values loaded from a
``.env`` file after import still apply.
"""
import os
from typing import Final, Optional

TOKEN_PATH: Final[str] = "/services/oauth2/token"
DEFAULT_LOGIN_URL: Final[str] = "https://login.salesforce.com"
DEFAULT_API_VERSION: Final[str] = "v57.0"
DEFAULT_SOBJECT: Final[str] = "Lead"


def login_url() -> str:
    return os.getenv("SALESFORCE_LOGIN_URL", DEFAULT_LOGIN_URL).rstrip("/")


def api_version() -> str:
    return os.getenv("SALESFORCE_API_VERSION", DEFAULT_API_VERSION)


def sobject() -> str:
    return os.getenv("SALESFORCE_SOBJECT", DEFAULT_SOBJECT)


def token_url(base: Optional[str] = None) -> str:
    return f"{(base or login_url()).rstrip('/')}{TOKEN_PATH}"


def sobject_path(name: Optional[str] = None, version: Optional[str] = None) -> str:
    return f"/services/data/{version or api_version()}/sobjects/{name or sobject()}"
