import pytest
from fastapi.testclient import TestClient

from hubdispatch.core.config import Settings
from hubdispatch.main import create_app
from hubdispatch.schemas.events import Event
from hubdispatch.schemas.payloads import InstallationPayload, PingPayload
from hubdispatch.services.registry import WebhookRegistry
from hubdispatch.services.signature import sign_payload

WEBHOOK_PATH = "/webhooks/github"


@pytest.fixture
def ping_payload():
    return {
        "zen": "Design for failure.",
        "hook_id": 12345678,
        "hook": {
            "type": "Repository",
            "id": 12345678,
            "name": "web",
            "active": True,
            "events": ["push", "pull_request"],
            "config": {"content_type": "json", "insecure_ssl": "0"},
        },
    }


def test_ping_is_dispatched(client, registry, recorder, webhook_signature, ping_payload):
    registry.register(Event.PING, recorder)
    headers, body = webhook_signature("s3cr3t", ping_payload)

    response = client.post(WEBHOOK_PATH, content=body, headers=headers)

    assert response.status_code == 200
    assert response.text == ""
    assert len(recorder.calls) == 1
    payload, request_headers = recorder.calls[0]
    assert isinstance(payload, PingPayload)
    assert payload.zen == "Design for failure."
    assert payload.hook.events == ["push", "pull_request"]
    assert request_headers["X-GitHub-Delivery"] == headers["X-GitHub-Delivery"]


def test_handler_registered_after_startup(client, registry, recorder, webhook_signature):
    headers, body = webhook_signature("s3cr3t", {"zen": "x"})

    first = client.post(WEBHOOK_PATH, content=body, headers=headers)
    registry.register(Event.PING, recorder)
    second = client.post(WEBHOOK_PATH, content=body, headers=headers)

    assert first.status_code == 200
    assert "not registered" in first.text
    assert second.status_code == 200
    assert len(recorder.calls) == 1


def test_missing_event_header_returns_400(client, registry, recorder):
    registry.register(Event.PING, recorder)

    response = client.post(WEBHOOK_PATH, content=b'{"zen":"x"}')

    assert response.status_code == 400
    assert response.text == "Missing X-GitHub-Event Header"
    assert recorder.calls == []


def test_altered_signature_returns_403(client, registry, recorder, webhook_signature):
    registry.register(Event.PING, recorder)
    headers, body = webhook_signature("s3cr3t", {"zen": "x"})
    signature = headers["X-Hub-Signature"]
    headers["X-Hub-Signature"] = signature[:-1] + ("0" if signature[-1] != "0" else "1")

    response = client.post(WEBHOOK_PATH, content=body, headers=headers)

    assert response.status_code == 403
    assert response.text == "HMAC verification failed"
    assert recorder.calls == []


def test_wrong_secret_returns_403(client, registry, recorder, webhook_signature):
    registry.register(Event.PING, recorder)
    headers, body = webhook_signature("not-the-secret", {"zen": "x"})

    response = client.post(WEBHOOK_PATH, content=body, headers=headers)

    assert response.status_code == 403
    assert recorder.calls == []


def test_missing_signature_returns_403(client, registry, recorder):
    registry.register(Event.PING, recorder)

    response = client.post(
        WEBHOOK_PATH, content=b'{"zen":"x"}', headers={"X-GitHub-Event": "ping"}
    )

    assert response.status_code == 403
    assert "X-Hub-Signature" in response.text
    assert recorder.calls == []


def test_body_is_verified_byte_for_byte(client, registry, recorder, webhook_signature):
    registry.register(Event.PING, recorder)
    headers, body = webhook_signature("s3cr3t", {"zen": "x"})

    # Same JSON document, different bytes
    response = client.post(WEBHOOK_PATH, content=body + b"\n", headers=headers)

    assert response.status_code == 403
    assert recorder.calls == []


def test_empty_body_returns_500(recorder):
    app = create_app(
        registry=WebhookRegistry(handlers={Event.PING: recorder}),
        settings=Settings(ALLOW_UNSIGNED=True, _env_file=None),
    )
    client = TestClient(app)

    response = client.post(WEBHOOK_PATH, content=b"", headers={"X-GitHub-Event": "ping"})

    assert response.status_code == 500
    assert response.text == "Issue reading Payload"
    assert recorder.calls == []


def test_malformed_body_returns_400(client, registry, recorder, webhook_signature):
    registry.register(Event.PING, recorder)
    headers, _ = webhook_signature("s3cr3t", {})
    body = b"definitely not json"
    headers["X-Hub-Signature"] = sign_payload("s3cr3t", body)

    response = client.post(WEBHOOK_PATH, content=body, headers=headers)

    assert response.status_code == 400
    assert recorder.calls == []


def test_deeply_nested_body_returns_400(recorder):
    app = create_app(
        registry=WebhookRegistry(handlers={Event.PING: recorder}),
        settings=Settings(ALLOW_UNSIGNED=True, _env_file=None),
    )
    client = TestClient(app)

    response = client.post(
        WEBHOOK_PATH, content=b'{"zen": [' * 100000, headers={"X-GitHub-Event": "ping"}
    )

    assert response.status_code == 400
    assert recorder.calls == []


@pytest.mark.parametrize("event", ["installation", "integration_installation"])
def test_installation_aliases(client, registry, recorder, webhook_signature, event):
    registry.register_events(recorder, Event.INSTALLATION, Event.INTEGRATION_INSTALLATION)
    headers, body = webhook_signature(
        "s3cr3t",
        {"action": "created", "installation": {"id": 1, "account": {"login": "octo-org"}}},
        event=event,
    )

    response = client.post(WEBHOOK_PATH, content=body, headers=headers)

    assert response.status_code == 200
    payload, _ = recorder.calls[0]
    assert isinstance(payload, InstallationPayload)
    assert payload.installation.account.login == "octo-org"


def test_handler_exception_is_not_caught(client, registry, webhook_signature):
    def handle_ping(payload, headers):
        raise RuntimeError("boom")

    registry.register(Event.PING, handle_ping)
    headers, body = webhook_signature("s3cr3t", {"zen": "x"})

    with pytest.raises(RuntimeError, match="boom"):
        client.post(WEBHOOK_PATH, content=body, headers=headers)


def test_handler_exception_becomes_server_error(registry, settings, webhook_signature):
    def handle_ping(payload, headers):
        raise RuntimeError("boom")

    registry.register(Event.PING, handle_ping)
    client = TestClient(
        create_app(registry=registry, settings=settings), raise_server_exceptions=False
    )
    headers, body = webhook_signature("s3cr3t", {"zen": "x"})

    response = client.post(WEBHOOK_PATH, content=body, headers=headers)

    assert response.status_code == 500


def test_create_app_from_settings(recorder, webhook_signature):
    app = create_app(
        handlers={Event.PING: recorder},
        settings=Settings(WEBHOOK_SECRET="s3cr3t", WEBHOOK_PATH="/hooks", _env_file=None),
    )
    client = TestClient(app)
    headers, body = webhook_signature("s3cr3t", {"zen": "x"})

    response = client.post("/hooks", content=body, headers=headers)

    assert response.status_code == 200
    assert len(recorder.calls) == 1
    assert client.get("/health").json() == {"status": "healthy"}


def test_create_app_refuses_missing_secret():
    with pytest.raises(ValueError):
        create_app(handlers={}, settings=Settings(_env_file=None))
