import base64
import json
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

import httpx
import pytest

from credly_client.services.credly_client import CredlyClient

API_TOKEN = "test-token"
ORGANIZATION_ID = "abcd-efgh-1234-5678"
FIXED_NOW = datetime(2024, 5, 17, 9, 30, 15, tzinfo=timezone(timedelta(hours=2)))

BADGE = {
    "id": "badge-123",
    "image_url": "https://images.credly.com/badge-123.png",
    "badge_url": "https://www.credly.com/badges/badge-123",
    "issued_at": "2024-05-17T09:30:15+02:00",
    "state": "issued",
    "image": {"url": "https://images.credly.com/size/340x340/badge-123.png"},
    "badge_template": {
        "id": "template-123",
        "name": "Test Badge",
        "skills": ["python", "testing"],
        "url": "https://www.credly.com/org/acme/badge/test-badge",
        "image_url": "https://images.credly.com/template-123.png",
        "vanity_slug": "test-badge",
    },
    "user": {
        "id": "user-1",
        "email": "user@example.com",
        "first_name": "Ada",
        "last_name": "Lovelace",
        "url": "https://www.credly.com/users/ada-lovelace",
    },
}


class Recorder:
    """Collects requests seen by a MockTransport and answers with a canned response."""

    def __init__(self, status_code: int = 200, body: object = None, content: bytes | None = None) -> None:
        self.status_code = status_code
        self.body = body
        self.content = content
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.content is not None:
            return httpx.Response(self.status_code, content=self.content)
        if self.body is None:
            return httpx.Response(self.status_code)
        return httpx.Response(self.status_code, json=self.body)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> dict:
        return json.loads(self.last.content)


@pytest.fixture
def expected_token() -> str:
    return base64.b64encode(f"{API_TOKEN}|".encode()).decode()


@pytest.fixture
def make_client() -> Callable[[Recorder], CredlyClient]:
    def factory(recorder: Recorder) -> CredlyClient:
        return CredlyClient.create(
            API_TOKEN,
            ORGANIZATION_ID,
            http_client=httpx.Client(transport=httpx.MockTransport(recorder)),
            clock=lambda: FIXED_NOW,
        )

    return factory
