import json
import logging
from typing import Callable, List

import httpx
import pytest

INSTANCE_URL = "https://example.my.salesforce.com"

VALID_CONFIG = {
    "grant_type": "password",
    "client_id": "cid",
    "client_secret": "csecret",
    "username": "user@example.com",
    "password": "hunter2TOKEN",
}


def pytest_configure(config):
    """If pytest-socket is installed, disable network sockets (asyncio still needs unix ones)."""
    try:
        import pytest_socket

        pytest_socket.disable_socket(allow_unix_socket=True)
    except ImportError:
        pass


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path):
    """Keep tests away from a developer's real config/template/output locations."""

    monkeypatch.setenv("CRM_CONFIG_PATH", str(tmp_path / "config.json"))
    monkeypatch.setenv("CRM_TEMPLATE_PATH", str(tmp_path / "leadModel.json"))
    monkeypatch.setenv("CRM_OUTPUT_DIR", str(tmp_path))
    # set-then-delete so monkeypatch also undoes values a test loads from .env
    for name in ("SALESFORCE_LOGIN_URL", "SALESFORCE_API_VERSION", "SALESFORCE_SOBJECT", "LOG_LEVEL", "LOG_FORMAT"):
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    # configure_logging() swaps root handlers; put pytest's back
    root.handlers[:] = handlers
    root.setLevel(level)


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it served."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self.requests: List[httpx.Request] = []

        def _wrapped(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(_wrapped)


def salesforce_handler(
    *,
    token_status: int = 200,
    create_status: int = 201,
    create_body=None,
    get_status: int = 200,
    record=None,
):
    """Route token / create / read requests to canned responses."""

    token_body = {
        "access_token": "00Dxx!tok",
        "instance_url": INSTANCE_URL,
        "id": "https://login.salesforce.com/id/00Dxx/005xx",
        "token_type": "Bearer",
        "issued_at": "1714557630123",
        "signature": "sig=",
    }
    create_body = create_body if create_body is not None else {"id": "00Q5g00000AbCdE", "success": True, "errors": []}

    def handler(request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if path.endswith("/services/oauth2/token"):
            if token_status != 200:
                return httpx.Response(token_status, json={"error": "invalid_grant", "error_description": "authentication failure"})
            return httpx.Response(200, json=token_body)
        if request.method == "POST":
            return httpx.Response(create_status, json=create_body)
        if get_status != 200:
            return httpx.Response(get_status, json=[{"errorCode": "NOT_FOUND", "message": "The requested resource does not exist"}])
        body = dict(record) if record is not None else {
            "attributes": {"type": "Lead", "url": path},
            "Id": path.rsplit("/", 1)[-1],
            "Name": "Ada Lovelace",
            "Company": "Analytical Engines Ltd",
            "Status": "Open - Not Contacted",
            "CreatedDate": "2024-05-01T10:20:30.000+0000",
        }
        return httpx.Response(200, json=body)

    return handler


@pytest.fixture
def write_json(tmp_path):
    def _write(name: str, data) -> str:
        path = tmp_path / name
        path.write_text(json.dumps(data) if not isinstance(data, str) else data, encoding="utf-8")
        return str(path)

    return _write
