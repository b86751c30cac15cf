import json

import pytest

from formrelay.config import SiteConfig
from formrelay.notifier.adapters import MockNotifier
from formrelay.schemas.notifications import AnalyticsEvent, ContactMessage
import formrelay.main as main_mod
from formrelay.endpoints.analytics import now_ms

SESSION_ID = "0b5d3c0e-7f6a-4d8b-9c2e-1a2b3c4d5e6f"
MESSAGE = "Hello, I would like to know more about the services offered on your website."


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"


def test_contact_json(client):
    r = client.post(
        "/contact",
        content=json.dumps({"email": "user@domain.com", "message": MESSAGE, "name": "Jane Doe"}),
        headers={"Content-Type": "application/json"},
    )
    assert r.status_code == 204
    assert r.content == b""
    sent = main_mod.contact_notifier.sent
    assert len(sent) == 1
    assert isinstance(sent[0], ContactMessage)
    assert sent[0].email == "user@domain.com"


def test_contact_form_redirect(client):
    website_url = main_mod.config.website_url
    r = client.post(
        "/contact",
        data={"email": "user@domain.com", "message": MESSAGE, "name": "Jane Doe", "redirect": "/thanks"},
        follow_redirects=False,
    )
    assert r.status_code == 302
    assert r.headers["location"] == f"{website_url}/thanks"
    assert r.headers["access-control-allow-origin"] == website_url


def test_contact_validation_error(client):
    r = client.post(
        "/contact",
        content=json.dumps({"email": "user@domain.com", "name": "Jane Doe"}),
        headers={"Content-Type": "application/json", "Accept": "application/json"},
    )
    assert r.status_code == 422
    assert r.json() == {"message": 'Validation error: "message" is required'}
    assert main_mod.contact_notifier.sent == []


def test_contact_missing_content_type(client):
    r = client.post("/contact", content=b"")
    assert r.status_code == 400
    assert r.headers["content-type"].startswith("text/plain")
    assert r.text == "Missing Content-Type header"


def test_contact_not_acceptable(client):
    r = client.post(
        "/contact",
        content=json.dumps({"email": "user@domain.com", "message": MESSAGE, "name": "Jane Doe"}),
        headers={"Content-Type": "application/json", "Accept": "text/html"},
    )
    assert r.status_code == 406
    assert r.text == "Unsupported Accept type(s): text/html"


def test_analytics_event(client):
    r = client.post(
        "/analytics",
        content=json.dumps({"event": "SessionTimeout", "session_id": SESSION_ID, "timestamp": now_ms()}),
        headers={"Content-Type": "application/json"},
    )
    assert r.status_code == 204
    sent = main_mod.analytics_notifier.sent
    assert len(sent) == 1
    assert isinstance(sent[0], AnalyticsEvent)
    assert sent[0].attributes == {"session_id": SESSION_ID}


def test_analytics_rejects_form(client):
    r = client.post("/analytics", data={"event": "PageUnload"})
    assert r.status_code == 415
    assert r.json() == {"message": "Unsupported Content-Type: application/x-www-form-urlencoded"}


def test_lambda_entry_points():
    from formrelay.endpoints import analytics, contact

    response = contact.lambda_handler({
        "body": json.dumps({"email": "user@domain.com", "message": MESSAGE, "name": "Jane Doe"}),
        "headers": {"content-type": "application/json"},
        "isBase64Encoded": False,
    }, None)
    assert response["statusCode"] == 204

    response = analytics.lambda_handler({
        "body": json.dumps({"event": "PageUnload", "session_id": SESSION_ID, "timestamp": now_ms()}),
        "headers": {"Content-Type": "application/json", "Accept": "text/plain"},
    }, None)
    assert response["statusCode"] == 406
    assert response["body"] == "Unsupported Accept type(s): text/plain"


def test_misconfigured_notifier_fails_startup():
    # Pinpoint needs an application id
    with pytest.raises(ValueError):
        main_mod._notifier_for("pinpoint", SiteConfig())
    with pytest.raises(ValueError):
        main_mod._notifier_for("carrier-pigeon", SiteConfig())
    assert isinstance(main_mod._notifier_for("mock", SiteConfig()), MockNotifier)
