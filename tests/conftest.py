"""Shared pytest fixtures."""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import AsyncIterator, Callable

import httpx
import pytest
from fastapi.testclient import TestClient

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("ENVIRONMENT", "test")

from app.config import Settings, get_settings  # noqa: E402
from app.dependencies import get_http_client  # noqa: E402
from app.main import create_app  # noqa: E402

Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture(autouse=True)
def configure_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Provide credentials and a model reference unless a test removes them."""

    monkeypatch.setenv("OPENAI_API_KEY", "test-key")
    monkeypatch.setenv("REPLICATE_API_TOKEN", "r8-test-token")
    monkeypatch.setenv("CAPTION_MODEL_VERSION", "salesforce/blip:2e1dddc8621f")
    monkeypatch.setenv("ENVIRONMENT", "test")


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None)


class Provider:
    """Stub upstream that records every request it receives."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.handler: Handler = lambda _: httpx.Response(500)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)


@pytest.fixture
def provider() -> Provider:
    return Provider()


@pytest.fixture
def app():
    return create_app()


@pytest.fixture
def client(app, provider: Provider) -> TestClient:
    """TestClient whose outbound provider calls hit ``provider``.

    Settings are read per test so ``monkeypatch.delenv`` takes effect.
    """

    async def http_client_override() -> AsyncIterator[httpx.AsyncClient]:
        async with httpx.AsyncClient(transport=httpx.MockTransport(provider)) as http_client:
            yield http_client

    app.dependency_overrides[get_http_client] = http_client_override
    app.dependency_overrides[get_settings] = lambda: Settings(_env_file=None)
    return TestClient(app)
