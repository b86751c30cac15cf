import os
import asyncio
import base64
import json
from typing import Any, Callable, Dict
from urllib.parse import urlencode
import pytest
from fastapi.testclient import TestClient

# tests/conftest.py

# Ensure tests never build real AWS notifiers unless explicitly overridden
os.environ.setdefault("FORMRELAY_CONTACT_NOTIFIER", "mock")
os.environ.setdefault("FORMRELAY_ANALYTICS_NOTIFIER", "mock")

import formrelay.main as main_mod
from formrelay.config import SiteConfig
from formrelay.constants import FORM_CONTENT_TYPE, JSON_CONTENT_TYPE
from formrelay.endpoints.analytics import create_analytics_handler
from formrelay.endpoints.contact import create_contact_handler
from formrelay.notifier.adapters import MockNotifier

WEBSITE_HOSTNAME = "www.example.com"
WEBSITE_URL = f"https://{WEBSITE_HOSTNAME}"
FIXED_NOW_MS = 1_700_000_000_000

DEFAULT_EMAIL = "user@domain.com"
DEFAULT_NAME = "Jane Doe"
DEFAULT_MESSAGE = "Hello, I would like to know more about the services offered on your website."

# marks a field that is left out of the request body entirely
OMIT = object()


@pytest.fixture(scope="session")
def app():
    """FastAPI app instance."""
    return main_mod.app


@pytest.fixture
def client(app) -> TestClient:
    """TestClient for the FastAPI app."""
    return TestClient(app)


@pytest.fixture
def site_config() -> SiteConfig:
    return SiteConfig(website_hostname=WEBSITE_HOSTNAME, email_address="contact@example.com")


@pytest.fixture
def notifier() -> MockNotifier:
    return MockNotifier()


@pytest.fixture
def contact_handler(site_config, notifier):
    return create_contact_handler(site_config, notifier=notifier)


@pytest.fixture
def analytics_handler(site_config, notifier):
    return create_analytics_handler(site_config, notifier=notifier, clock=lambda: FIXED_NOW_MS)


def _json_body(fields: Dict[str, Any]) -> str:
    return json.dumps({k: v for k, v in fields.items() if v is not OMIT})


def _form_body(fields: Dict[str, Any]) -> str:
    # falsy values are left out of form bodies
    return urlencode({k: v for k, v in fields.items() if v is not OMIT and v})


@pytest.fixture
def make_contact_event() -> Callable[..., Dict[str, Any]]:
    """
    Return a helper building a gateway event for the contact endpoint.
    Usage: event = make_contact_event(accept="application/json", redirect="/thanks")
    A content_type of OMIT leaves the header out; body overrides the encoded fields.
    """
    def _make(
        content_type: Any = JSON_CONTENT_TYPE,
        accept: Any = OMIT,
        email: Any = DEFAULT_EMAIL,
        message: Any = DEFAULT_MESSAGE,
        name: Any = DEFAULT_NAME,
        redirect: Any = OMIT,
        extra: Dict[str, Any] | None = None,
        body: Any = OMIT,
        base64_body: bool = False,
        lower_case_headers: bool = False,
    ) -> Dict[str, Any]:
        fields = {"email": email, "message": message, "name": name, "redirect": redirect}
        fields.update(extra or {})
        if body is OMIT:
            body = _form_body(fields) if content_type == FORM_CONTENT_TYPE else _json_body(fields)
        if base64_body and body is not None:
            body = base64.b64encode(body.encode("utf-8")).decode("ascii")

        headers: Dict[str, str] = {}
        if content_type is not OMIT:
            headers["content-type" if lower_case_headers else "Content-Type"] = content_type
        if accept is not OMIT:
            headers["accept" if lower_case_headers else "Accept"] = accept
        return {"body": body, "headers": headers, "isBase64Encoded": base64_body}
    return _make


@pytest.fixture
def make_analytics_event() -> Callable[..., Dict[str, Any]]:
    """
    Return a helper building a gateway event for the analytics endpoint.
    Usage: event = make_analytics_event({"event": "PageUnload", ...})
    """
    def _make(
        data: Any,
        content_type: Any = JSON_CONTENT_TYPE,
        accept: Any = OMIT,
        base64_body: bool = False,
    ) -> Dict[str, Any]:
        body = data if isinstance(data, str) else json.dumps(data)
        if base64_body:
            body = base64.b64encode(body.encode("utf-8")).decode("ascii")
        headers: Dict[str, str] = {}
        if content_type is not OMIT:
            headers["Content-Type"] = content_type
        if accept is not OMIT:
            headers["Accept"] = accept
        return {"body": body, "headers": headers, "isBase64Encoded": base64_body}
    return _make


@pytest.fixture
def call():
    """
    Run a handler against a gateway event and return the gateway response dict.
    Usage: response = call(contact_handler, event)
    """
    def _call(handler, event: Dict[str, Any]) -> Dict[str, Any]:
        return asyncio.run(handler(event))
    return _call


@pytest.fixture(autouse=True)
def reset_app_notifiers():
    # the app's mock notifiers are module-level; start every test with empty outboxes
    for n in (main_mod.contact_notifier, main_mod.analytics_notifier):
        if isinstance(n, MockNotifier):
            n.sent.clear()
    yield
