import hashlib
import hmac
import json
from typing import Any, Dict, List, Optional

import pytest

from hookrelay.schemas.message import SourceConfig
from hookrelay.schemas.webhook import RawRequest
from hookrelay.services.publishers import PublisherFanout
from hookrelay.services.webhook_handlers.github import GitHubWebhookHandler
from tests.fakes import RecordingSink

WEBHOOK_SECRET = "test_secret"


@pytest.fixture
def webhook_secret():
    return WEBHOOK_SECRET


@pytest.fixture
def webhook_signature():
    """Fixture to generate webhook signatures for testing"""
    def _generate_signature(
        webhook_secret: str, payload_bytes: bytes, digestmod=hashlib.sha256
    ) -> str:
        prefix = "sha256" if digestmod is hashlib.sha256 else "sha1"
        signature = hmac.new(
            key=webhook_secret.encode(),
            msg=payload_bytes,
            digestmod=digestmod
        ).hexdigest()
        return f"{prefix}={signature}"

    return _generate_signature


@pytest.fixture
def sample_push_payload() -> Dict[str, Any]:
    return {
        "ref": "refs/heads/main",
        "before": "a" * 40,
        "after": "b" * 40,
        "repository": {
            "name": "r",
            "full_name": "o/r",
            "html_url": "https://github.com/o/r",
            "owner": {"name": "o", "login": "o"},
        },
        "pusher": {"name": "octocat", "email": "octocat@github.com"},
        "commits": [{"id": "b" * 40, "message": "Update README.md"}],
    }


@pytest.fixture
def sample_check_run_payload() -> Dict[str, Any]:
    return {
        "action": "completed",
        "check_run": {
            "id": 4242,
            "name": "build",
            "status": "completed",
            "check_suite": {
                "id": 99,
                "head_branch": "feature/x",
                "before": "c" * 40,
                "after": "d" * 40,
            },
        },
        "repository": {
            "name": "r",
            "full_name": "o/r",
            "owner": {"login": "o"},
        },
        "sender": {"login": "test-user"},
    }


@pytest.fixture
def make_request(webhook_signature):
    def _make_request(
        payload: Any,
        event_type: str = "push",
        delivery_id: Optional[str] = "d-1",
        secret: str = WEBHOOK_SECRET,
        content_type: str = "application/json",
        extra_headers: Optional[Dict[str, str]] = None,
    ) -> RawRequest:
        body = payload if isinstance(payload, bytes) else json.dumps(payload).encode()
        headers = {
            "Content-Type": content_type,
            "X-GitHub-Event": event_type,
            "X-Hub-Signature-256": webhook_signature(secret, body),
        }
        if delivery_id is not None:
            headers["X-GitHub-Delivery"] = delivery_id
        headers.update(extra_headers or {})
        return RawRequest(headers=headers, body=body)

    return _make_request


@pytest.fixture
def source_config():
    return SourceConfig(source_app="hookrelay", source_env="test")


@pytest.fixture
def sink_calls() -> List[tuple]:
    return []


@pytest.fixture
def two_sinks(sink_calls):
    return [RecordingSink("topic", sink_calls), RecordingSink("bus", sink_calls)]


@pytest.fixture
def github_handler(two_sinks, source_config):
    return GitHubWebhookHandler(WEBHOOK_SECRET, source_config, PublisherFanout(two_sinks))
