"""Pytest configuration and fixtures."""

from typing import AsyncGenerator

import pytest
from faker import Faker
from httpx import ASGITransport, AsyncClient

from oncall.api.dependencies import reset_providers
from oncall.config import settings
from oncall.main import app
from oncall.models.intent import DetectedIntent, IntentResult
from oncall.models.mockup import MockupResult, MockupVariant
from oncall.security import SessionStore, SignedTokenCodec
from oncall.utils.metrics import MetricsCollector, metrics

TEST_SECRET = "test-session-secret"
TEST_ORIGIN = "https://app.example.com"


@pytest.fixture(autouse=True)
def reset_metrics():
    """Start every test with an empty global collector."""
    metrics.reset()
    yield
    metrics.reset()


# Test settings
@pytest.fixture
def test_settings(monkeypatch):
    """Fill in every credential and drop cached components."""
    values = {
        "OPENAI_API_KEY": "test-key",
        "SESSION_SECRET": TEST_SECRET,
        "PUBLIC_ORIGIN": TEST_ORIGIN,
        "LINEAR_OAUTH_CLIENT_ID": "linear-client-id",
        "LINEAR_OAUTH_CLIENT_SECRET": "linear-client-secret",
        "LINEAR_TEAM_ID": None,
        "ELEVENLABS_API_KEY": "eleven-key",
        "ELEVENLABS_AGENT_ID": "agent-123",
        "ENVIRONMENT": "test",
    }
    for name, value in values.items():
        monkeypatch.setattr(settings, name, value)

    reset_providers()
    yield settings
    reset_providers()


@pytest.fixture
def empty_settings(monkeypatch):
    """Settings with no credentials at all."""
    for name in (
        "OPENAI_API_KEY",
        "SESSION_SECRET",
        "PUBLIC_ORIGIN",
        "LINEAR_OAUTH_CLIENT_ID",
        "LINEAR_OAUTH_CLIENT_SECRET",
        "ELEVENLABS_API_KEY",
        "ELEVENLABS_AGENT_ID",
    ):
        monkeypatch.setattr(settings, name, None)

    reset_providers()
    yield settings
    reset_providers()


@pytest.fixture
def codec() -> SignedTokenCodec:
    return SignedTokenCodec(TEST_SECRET)


@pytest.fixture
def session_store(codec) -> SessionStore:
    return SessionStore(codec)


@pytest.fixture
def metrics_collector() -> MetricsCollector:
    """Isolated collector so tests do not share counters."""
    return MetricsCollector()


# FastAPI test client
@pytest.fixture
async def api_client(test_settings) -> AsyncGenerator[AsyncClient, None]:
    """Create async HTTP client for API testing."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


# Sample factories
@pytest.fixture
def intent_factory():
    """Factory for classifier results."""

    def create_result(**kwargs) -> IntentResult:
        defaults = {
            "is_ui_request": True,
            "confidence": 0.9,
            "component": "login form",
            "intent": "improve login page design",
            "context": "Users find the current form cluttered",
            "reasoning_short": "Explicit request for a redesigned login page",
        }
        return IntentResult(**{**defaults, **kwargs})

    return create_result


@pytest.fixture
def detected_intent_factory(intent_factory):
    """Factory for surfaced intents."""
    fake = Faker()

    def create_intent(intent_id: str = "intent-1", source_text: str = None, **kwargs) -> DetectedIntent:
        return DetectedIntent.from_result(
            intent_factory(**kwargs),
            intent_id,
            source_text or fake.sentence(),
        )

    return create_intent


@pytest.fixture
def mockup_result() -> MockupResult:
    return MockupResult(variants=[
        MockupVariant(
            name="Minimal",
            html="<form class=\"login\"><input type=\"email\"></form>",
            css=".login { display: flex; }"
        ),
        MockupVariant(
            name="Card",
            html="<div class=\"card\"><form></form></div>",
            css=".card { padding: 24px; }"
        ),
    ])
