from __future__ import annotations

import os

# Keep test runs quiet and offline before any app module reads the environment.
os.environ["ENABLE_FILE_LOGGING"] = "false"
os.environ["ENABLE_REQUEST_LOGGING"] = "false"
for _key in ("OPENAI_API_KEY", "ELEVENLABS_API_KEY", "DATABASE_URL", "SENTRY_DSN"):
    os.environ.pop(_key, None)

from typing import Callable

import httpx
import pytest
from fastapi.testclient import TestClient

from core.config import Settings
from fakes import FakeOpenAI, make_settings
from main import create_app
from services.transcription_service import TranscriptionService
from services.triage_service import TriageService


@pytest.fixture
def sqlite_url(tmp_path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'symptoms.db'}"


@pytest.fixture
def app_settings(sqlite_url) -> Settings:
    return make_settings(DATABASE_URL=sqlite_url)


@pytest.fixture
def app(app_settings):
    return create_app(app_settings)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def model_replies(app) -> Callable[..., FakeOpenAI]:
    """Swap the model client for one that returns the given replies."""

    def _install(*replies) -> FakeOpenAI:
        fake = FakeOpenAI(*replies)
        app.state.triage_service = TriageService(client=fake)
        return fake

    return _install


@pytest.fixture
def transcription_provider(app) -> Callable[[Callable[[httpx.Request], httpx.Response]], list]:
    """Route ElevenLabs calls to ``handler``; returns the captured requests."""

    def _install(handler) -> list[httpx.Request]:
        seen: list[httpx.Request] = []

        def _capture(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return handler(request)

        app.state.transcription_service = TranscriptionService(
            api_key="test-key",
            transport=httpx.MockTransport(_capture),
        )
        return seen

    return _install
