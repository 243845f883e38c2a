"""Shared fixtures: a fake API.Bible served through httpx.MockTransport."""

from __future__ import annotations

from typing import Any

import httpx
import pytest

from bible_mcp.bible_client import BibleAPIClient
from bible_mcp.config import Settings
from tests.data import BIBLE_ID

BASE_URL = "https://api.test/v1"


class FakeBibleAPI:
    """Answers API.Bible paths from a table and records every request."""

    prefix = f"/v1/bibles/{BIBLE_ID}/"

    def __init__(self) -> None:
        self.routes: dict[str, tuple[int, Any]] = {}
        self.requests: list[httpx.Request] = []
        self.failure: Exception | None = None

    def add(self, path: str, data: Any = None, status: int = 200, payload: Any = None) -> None:
        """Serve ``{"data": data}`` (or a raw payload) at a path below the Bible."""
        self.routes[path] = (status, payload if payload is not None else {"data": data})

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.failure is not None:
            raise self.failure
        path = request.url.path.removeprefix(self.prefix)
        if path not in self.routes:
            return httpx.Response(404, json={"statusCode": 404, "error": "Not Found"})
        status, body = self.routes[path]
        return httpx.Response(status, json=body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def paths(self) -> list[str]:
        return [r.url.path.removeprefix(self.prefix) for r in self.requests]

    @property
    def last_params(self) -> httpx.QueryParams:
        return self.requests[-1].url.params


@pytest.fixture
def settings() -> Settings:
    return Settings(
        api_key="test-key",
        bible_id=BIBLE_ID,
        base_url=BASE_URL,
        keepalive_seconds=0,
    )


@pytest.fixture
def provider() -> FakeBibleAPI:
    return FakeBibleAPI()


@pytest.fixture
def client(settings: Settings, provider: FakeBibleAPI) -> BibleAPIClient:
    return BibleAPIClient(settings, transport=provider.transport)
