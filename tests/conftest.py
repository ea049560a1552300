import hashlib
import hmac
import json
from typing import Any, Dict, Tuple

import pytest
from fastapi.testclient import TestClient

from hubdispatch.core.config import Settings
from hubdispatch.main import create_app
from hubdispatch.services.pipeline import WebhookPipeline
from hubdispatch.services.registry import WebhookRegistry

WEBHOOK_SECRET = "s3cr3t"


class RecordingHandler:
    """Handler that remembers every (payload, headers) it was called with"""

    def __init__(self):
        self.calls = []

    def __call__(self, payload, headers):
        self.calls.append((payload, headers))


@pytest.fixture
def settings():
    return Settings(WEBHOOK_SECRET=WEBHOOK_SECRET, _env_file=None)


@pytest.fixture
def recorder():
    return RecordingHandler()


@pytest.fixture
def registry():
    return WebhookRegistry(secret=WEBHOOK_SECRET)


@pytest.fixture
def pipeline(registry, settings):
    return WebhookPipeline(registry, settings)


@pytest.fixture
def client(registry, settings):
    app = create_app(registry=registry, settings=settings)
    return TestClient(app)


@pytest.fixture
def webhook_signature():
    """Fixture to generate webhook signatures for testing"""
    def _generate_signature(
        webhook_secret: str, payload: Dict[str, Any], event: str = "ping"
    ) -> Tuple[Dict[str, str], bytes]:
        payload_bytes = json.dumps(payload).encode()
        signature = hmac.new(
            key=webhook_secret.encode(),
            msg=payload_bytes,
            digestmod=hashlib.sha1
        ).hexdigest()

        headers = {
            "X-GitHub-Event": event,
            "X-GitHub-Delivery": "72d3162e-cc78-11e3-81ab-4c9367dc0958",
            "X-Hub-Signature": f"sha1={signature}",
        }

        return headers, payload_bytes

    return _generate_signature
