import pytest
from unittest.mock import AsyncMock

from models.chat_models import PersonaStrategy, ProviderDescriptor, ProviderKind


@pytest.fixture
def anyio_backend():
    """The gateway is asyncio-based (asyncio.wait_for); run anyio tests on asyncio only."""
    return "asyncio"


@pytest.fixture
def mock_http_client(monkeypatch):
    """Mock pooled HTTP client used by the HTTP-based providers."""
    client = AsyncMock()
    client.post = AsyncMock()
    monkeypatch.setattr("utils.http_client.HTTPClientManager.get_provider_client", lambda: client)
    return client


@pytest.fixture
def gemini_descriptor():
    return ProviderDescriptor(
        name="gemini",
        kind=ProviderKind.GEMINI,
        endpoint="https://generativelanguage.googleapis.com",
        api_key_env="GEMINI_API_KEY",
        model="gemini-primary",
        fallback_model="gemini-backup",
        priority=0,
        persona_strategy=PersonaStrategy.HISTORY,
        assistant_role="model",
        max_tokens=256,
    )


@pytest.fixture
def groq_descriptor():
    return ProviderDescriptor(
        name="groq",
        kind=ProviderKind.CHAT_COMPLETION,
        endpoint="https://api.groq.com/openai/v1/chat/completions",
        api_key_env="GROQ_API_KEY",
        model="llama-test",
        priority=1,
        persona_strategy=PersonaStrategy.SYSTEM,
        temperature=0.5,
        max_tokens=300,
    )


@pytest.fixture
def huggingface_descriptor():
    return ProviderDescriptor(
        name="huggingface",
        kind=ProviderKind.TEXT_GENERATION,
        endpoint="https://api-inference.huggingface.co/models/test-model",
        api_key_env="HUGGINGFACE_API_KEY",
        model="test-model",
        priority=3,
        supports_history=False,
        persona_strategy=PersonaStrategy.FLATTEN,
        max_tokens=200,
    )


@pytest.fixture
def conversation():
    """Validated three-turn conversation ending with a user prompt."""
    from models.api_models import ChatRequest
    from tests.fixtures.responses import SAMPLE_MESSAGES
    return ChatRequest.model_validate({"messages": SAMPLE_MESSAGES})


@pytest.fixture
def app_factory():
    """Build a bare app serving the chat route with the given gateway."""
    from fastapi import FastAPI
    from fastapi.testclient import TestClient
    from routes import chat

    clients = []

    def build(gateway):
        app = FastAPI()
        app.include_router(chat.router)
        app.state.gateway = gateway
        client = TestClient(app)
        clients.append(client)
        return client

    yield build

    for client in clients:
        client.close()
