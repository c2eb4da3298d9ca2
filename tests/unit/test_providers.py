import httpx
import pytest

from models.api_models import Message
from models.chat_models import Failure, Success
from services.fallback import FallbackOrchestrator
from services.providers import ChatCompletionClient, TextGenerationClient
from tests.fixtures.mock_clients import succeeding
from tests.fixtures.responses import (
    CHAT_COMPLETION_RESPONSE,
    CHAT_COMPLETION_WITH_CONTENT_PARTS,
    CHAT_COMPLETION_WITHOUT_CONTENT,
    TEXT_GENERATION_ERROR_RESPONSE,
    TEXT_GENERATION_LIST_RESPONSE,
    TEXT_GENERATION_STRING_RESPONSE,
)
from tests.helpers import make_http_response
from utils.constants import EMPTY_RESPONSE_PLACEHOLDER

HISTORY = [
    Message(role="user", content="Hola"),
    Message(role="system", content="dropped"),
    Message(role="assistant", content="¡Hola! Soy Renny."),
]


@pytest.fixture
def groq_client(groq_descriptor):
    return ChatCompletionClient(groq_descriptor, "groq-key", persona="persona", timeout=5.0)


@pytest.fixture
def huggingface_client(huggingface_descriptor):
    return TextGenerationClient(huggingface_descriptor, "hf-key", persona="persona", timeout=5.0)


@pytest.mark.anyio
async def test_chat_completion_returns_message_content(groq_client, mock_http_client, mocker):
    """Given a standard completion body, generate should return the first choice content."""
    mock_http_client.post.return_value = make_http_response(mocker, json_data=CHAT_COMPLETION_RESPONSE)

    result = await groq_client.generate("¿Qué proyectos tienes?", HISTORY)

    assert result == Success(text="Hola, soy Renny. ¿En qué te ayudo?")
    mock_http_client.post.assert_awaited_once()


@pytest.mark.anyio
async def test_chat_completion_sends_bearer_token_and_flat_messages(groq_client, mock_http_client, mocker):
    """Given a conversation, the request should carry auth, model, params and a system-primed message list."""
    mock_http_client.post.return_value = make_http_response(mocker, json_data=CHAT_COMPLETION_RESPONSE)

    await groq_client.generate("¿Qué proyectos tienes?", HISTORY, persona="persona en")

    args, kwargs = mock_http_client.post.call_args
    assert args[0] == "https://api.groq.com/openai/v1/chat/completions"
    assert kwargs["headers"]["Authorization"] == "Bearer groq-key"
    assert kwargs["timeout"] == 5.0
    payload = kwargs["json"]
    assert payload["model"] == "llama-test"
    assert payload["temperature"] == 0.5
    assert payload["max_tokens"] == 300
    assert payload["messages"] == [
        {"role": "system", "content": "persona en"},
        {"role": "user", "content": "Hola"},
        {"role": "assistant", "content": "¡Hola! Soy Renny."},
        {"role": "user", "content": "¿Qué proyectos tienes?"},
    ]


@pytest.mark.anyio
async def test_chat_completion_missing_content_is_placeholder_success(groq_client, mock_http_client, mocker):
    """Given a reachable provider without choices, generate should succeed with the placeholder text."""
    mock_http_client.post.return_value = make_http_response(mocker, json_data=CHAT_COMPLETION_WITHOUT_CONTENT)

    result = await groq_client.generate("hola", [])

    assert result == Success(text=EMPTY_RESPONSE_PLACEHOLDER)


@pytest.mark.anyio
async def test_chat_completion_non_2xx_is_failure(groq_client, mock_http_client, mocker):
    """Given an HTTP error status, generate should return a Failure instead of raising."""
    mock_http_client.post.return_value = make_http_response(mocker, status_code=429, json_data={"error": "rate"})

    result = await groq_client.generate("hola", [])

    assert result == Failure(provider_name="groq", cause="HTTP 429")


@pytest.mark.anyio
async def test_chat_completion_malformed_body_is_failure(groq_client, mock_http_client, mocker):
    """Given a body that is not JSON, generate should return a malformed-body Failure."""
    mock_http_client.post.return_value = make_http_response(mocker, json_error=ValueError("Expecting value"))

    result = await groq_client.generate("hola", [])

    assert isinstance(result, Failure)
    assert result.cause == "malformed response body"


@pytest.mark.anyio
async def test_network_error_is_failure(groq_client, mock_http_client):
    """Given a connection error, generate should capture it as a Failure."""
    mock_http_client.post.side_effect = httpx.ConnectError("connection refused")

    result = await groq_client.generate("hola", [])

    assert isinstance(result, Failure)
    assert result.provider_name == "groq"
    assert result.cause.startswith("network error")


@pytest.mark.anyio
async def test_timeout_is_failure(groq_client, mock_http_client):
    """Given a timed-out call, generate should return a timeout Failure eligible for fallback."""
    mock_http_client.post.side_effect = httpx.ReadTimeout("too slow")

    result = await groq_client.generate("hola", [])

    assert result == Failure(provider_name="groq", cause="timed out after 5.0s")


@pytest.mark.anyio
async def test_unexpected_exception_is_failure(groq_client, mock_http_client):
    """Given an unexpected exception, generate should still not raise."""
    mock_http_client.post.side_effect = RuntimeError("kaboom")

    result = await groq_client.generate("hola", [])

    assert isinstance(result, Failure)
    assert "kaboom" in result.cause


@pytest.mark.anyio
@pytest.mark.parametrize("body, expected", [
    (TEXT_GENERATION_LIST_RESPONSE, "Claro, puedo compartir mi portafolio."),
    (TEXT_GENERATION_STRING_RESPONSE, "Tengo experiencia en desarrollo web."),
])
async def test_text_generation_accepts_known_shapes(huggingface_client, mock_http_client, mocker, body, expected):
    """Given a string or generated_text list body, generate should return the text."""
    mock_http_client.post.return_value = make_http_response(mocker, json_data=body)

    result = await huggingface_client.generate("¿Compartes tu portafolio?", HISTORY)

    assert result == Success(text=expected)


@pytest.mark.anyio
@pytest.mark.parametrize("body", [TEXT_GENERATION_ERROR_RESPONSE, [], [{"text": "x"}], 42])
async def test_text_generation_rejects_other_shapes(huggingface_client, mock_http_client, mocker, body):
    """Given any other body shape, generate should fail with an invalid-shape cause."""
    mock_http_client.post.return_value = make_http_response(mocker, json_data=body)

    result = await huggingface_client.generate("hola", [])

    assert result == Failure(provider_name="huggingface", cause="invalid response shape")


@pytest.mark.anyio
async def test_text_generation_sends_only_persona_and_prompt(huggingface_client, mock_http_client, mocker):
    """Given a provider without history support, the inputs string should skip prior turns."""
    mock_http_client.post.return_value = make_http_response(mocker, json_data=TEXT_GENERATION_STRING_RESPONSE)

    await huggingface_client.generate("¿Qué haces?", HISTORY)

    payload = mock_http_client.post.call_args.kwargs["json"]
    assert payload["inputs"] == "persona\n\nUsuario: ¿Qué haces?\nAsistente:"
    assert payload["parameters"]["max_new_tokens"] == 200
    assert mock_http_client.post.call_args.kwargs["headers"]["Authorization"] == "Bearer hf-key"


@pytest.mark.anyio
async def test_chat_completion_non_string_content_is_failure(groq_client, mock_http_client, mocker):
    """Given message content as a list of parts, generate should return an invalid-shape Failure."""
    mock_http_client.post.return_value = make_http_response(mocker, json_data=CHAT_COMPLETION_WITH_CONTENT_PARTS)

    result = await groq_client.generate("hola", [])

    assert result == Failure(provider_name="groq", cause="invalid response shape")


@pytest.mark.anyio
async def test_non_string_content_falls_through_to_next_provider(groq_client, mock_http_client, mocker):
    """Given a provider replying with content parts, the fallback chain should still reach the backup."""
    mock_http_client.post.return_value = make_http_response(mocker, json_data=CHAT_COMPLETION_WITH_CONTENT_PARTS)
    backup = succeeding("backup", "respaldo", priority=9)

    result = await FallbackOrchestrator([groq_client, backup]).run("hola", [])

    assert result == Success(text="respaldo")
    assert len(backup.calls) == 1
