"""
Generation provider clients.
Each client wraps one outbound call and normalizes the outcome into a
Success or Failure; no provider exception escapes `generate`.
"""
import asyncio
from abc import ABC, abstractmethod
from typing import Optional

import google.generativeai as genai
import httpx
from google.api_core import exceptions as google_exceptions

from config import Config
from models.api_models import Message
from models.chat_models import (
    Failure,
    GenerationResult,
    PersonaStrategy,
    ProviderDescriptor,
    ProviderKind,
    Success,
)
from services.history import HistoryAdapter
from services.prompt_builder import PromptBuilder
from utils.constants import EMPTY_RESPONSE_PLACEHOLDER, PERSONA_PROMPT
from utils.exceptions import ModelNotFound, ProviderUnavailable
from utils.http_client import HTTPClientManager
from utils.logger import app_logger


class ProviderClient(ABC):
    """Common contract for every generation provider."""

    def __init__(
        self,
        descriptor: ProviderDescriptor,
        api_key: str,
        persona: str = PERSONA_PROMPT,
        timeout: Optional[float] = None,
    ):
        self.descriptor = descriptor
        self.api_key = api_key
        self.persona = persona
        self.timeout = timeout if timeout is not None else Config.PROVIDER_TIMEOUT

    @property
    def name(self) -> str:
        return self.descriptor.name

    @property
    def priority(self) -> int:
        return self.descriptor.priority

    async def generate(self, prompt: str, history: list[Message], persona: Optional[str] = None) -> GenerationResult:
        """
        Ask the provider for a reply.

        Args:
            prompt: Latest user message
            history: Earlier messages, oldest first
            persona: Persona override (e.g. language-conditioned); defaults to the client's persona

        Returns:
            Success with the reply text, or Failure describing why the call failed
        """
        persona = persona or self.persona
        try:
            return await self._generate(prompt, history, persona)
        except ProviderUnavailable as e:
            app_logger.warning(f"Provider {self.name} unavailable: {e.cause}")
            return Failure(provider_name=self.name, cause=e.cause)
        except (asyncio.TimeoutError, httpx.TimeoutException):
            app_logger.warning(f"Provider {self.name} timed out after {self.timeout}s")
            return Failure(provider_name=self.name, cause=f"timed out after {self.timeout}s")
        except httpx.HTTPError as e:
            app_logger.warning(f"Provider {self.name} network error: {e}")
            return Failure(provider_name=self.name, cause=f"network error: {e}")
        except Exception as e:
            app_logger.error(f"Provider {self.name} failed unexpectedly: {e!r}")
            return Failure(provider_name=self.name, cause=f"unexpected error: {e}")

    @abstractmethod
    async def _generate(self, prompt: str, history: list[Message], persona: str) -> Success:
        """Perform the provider call; raise on failure."""


class GeminiClient(ProviderClient):
    """
    Primary conversational provider (Google Gemini).
    Retries once on a fallback model when the configured model is not found.
    """

    def __init__(self, descriptor: ProviderDescriptor, api_key: str, **kwargs):
        super().__init__(descriptor, api_key, **kwargs)
        genai.configure(api_key=api_key)

    def _build_model(self, model_name: str, persona: str):
        options = {
            "generation_config": genai.GenerationConfig(
                temperature=self.descriptor.temperature,
                max_output_tokens=self.descriptor.max_tokens,
            )
        }
        if self.descriptor.persona_strategy == PersonaStrategy.SYSTEM:
            options["system_instruction"] = persona
        return genai.GenerativeModel(model_name, **options)

    def _wire_history(self, history: list[Message], persona: str) -> list:
        wire_history = HistoryAdapter.adapt(history, self.descriptor)
        if self.descriptor.persona_strategy == PersonaStrategy.HISTORY:
            return PromptBuilder.inject_into_history(persona, wire_history, self.descriptor)
        return wire_history

    async def _send(self, model_name: str, prompt: str, wire_history: list, persona: str) -> str:
        model = self._build_model(model_name, persona)
        chat = model.start_chat(history=wire_history)
        app_logger.info(f"Gemini: sending prompt to {model_name} with {len(wire_history)} history turns")
        try:
            response = await asyncio.wait_for(chat.send_message_async(prompt), timeout=self.timeout)
        except google_exceptions.NotFound as e:
            raise ModelNotFound(self.name, f"model '{model_name}' not found: {e}")
        except google_exceptions.GoogleAPIError as e:
            raise ProviderUnavailable(self.name, f"API error: {e}")

        try:
            return response.text
        except ValueError as e:
            # Blocked or candidate-less responses have no text accessor
            raise ProviderUnavailable(self.name, f"response carried no text: {e}")

    async def _generate(self, prompt: str, history: list[Message], persona: str) -> Success:
        wire_history = self._wire_history(history, persona)
        fallback_model = self.descriptor.fallback_model
        try:
            text = await self._send(self.descriptor.model, prompt, wire_history, persona)
        except ModelNotFound as e:
            if not fallback_model or fallback_model == self.descriptor.model:
                raise
            app_logger.warning(f"{e.cause}; retrying with fallback model {fallback_model}")
            text = await self._send(fallback_model, prompt, wire_history, persona)
        return Success(text=text)


class HTTPProviderClient(ProviderClient):
    """Base for providers reached with a bearer-token JSON POST."""

    def _headers(self) -> dict:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    async def _post_json(self, payload: dict):
        client = HTTPClientManager.get_provider_client()
        response = await client.post(
            self.descriptor.endpoint,
            headers=self._headers(),
            json=payload,
            timeout=self.timeout
        )

        if not 200 <= response.status_code < 300:
            raise ProviderUnavailable(self.name, f"HTTP {response.status_code}")

        try:
            return response.json()
        except ValueError:
            raise ProviderUnavailable(self.name, "malformed response body")


class ChatCompletionClient(HTTPProviderClient):
    """OpenAI-style chat-completions provider (Groq, OpenRouter)."""

    def build_messages(self, prompt: str, history: list[Message], persona: str) -> list:
        """Persona, adapted history and the current prompt as one message list."""
        wire_history = HistoryAdapter.adapt(history, self.descriptor)
        if self.descriptor.persona_strategy == PersonaStrategy.HISTORY:
            messages = PromptBuilder.inject_into_history(persona, wire_history, self.descriptor)
        else:
            messages = [PromptBuilder.system_message(persona), *wire_history]
        messages.append({"role": "user", "content": prompt})
        return messages

    @staticmethod
    def extract_content(data) -> Optional[str]:
        """
        Read choices[0].message.content, or None when the path is missing.

        Raises:
            ValueError: content is present but not a string (e.g. a list of parts)
        """
        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            return None
        if content is not None and not isinstance(content, str):
            raise ValueError(f"message content is {type(content).__name__}, expected str")
        return content

    async def _generate(self, prompt: str, history: list[Message], persona: str) -> Success:
        payload = {
            "model": self.descriptor.model,
            "messages": self.build_messages(prompt, history, persona),
            "temperature": self.descriptor.temperature,
        }
        if self.descriptor.max_tokens:
            payload["max_tokens"] = self.descriptor.max_tokens

        app_logger.info(f"{self.name}: requesting completion from {self.descriptor.model}")
        data = await self._post_json(payload)

        try:
            content = self.extract_content(data)
        except ValueError:
            raise ProviderUnavailable(self.name, "invalid response shape")
        if not content:
            app_logger.warning(f"{self.name}: response had no message content")
            return Success(text=EMPTY_RESPONSE_PLACEHOLDER)
        return Success(text=content)


class TextGenerationClient(HTTPProviderClient):
    """Hosted inference provider that only accepts a single `inputs` string."""

    def build_inputs(self, prompt: str, history: list[Message], persona: str) -> str:
        turns = HistoryAdapter.filter_turns(history) if self.descriptor.supports_history else []
        return PromptBuilder.flatten(persona, turns, prompt)

    @staticmethod
    def parse_generated_text(data) -> Optional[str]:
        """Accept a bare string or a list whose first item has generated_text."""
        if isinstance(data, str):
            return data
        if isinstance(data, list) and data and isinstance(data[0], dict):
            generated = data[0].get("generated_text")
            if isinstance(generated, str):
                return generated
        return None

    async def _generate(self, prompt: str, history: list[Message], persona: str) -> Success:
        payload = {
            "inputs": self.build_inputs(prompt, history, persona),
            "parameters": {
                "temperature": self.descriptor.temperature,
                "return_full_text": False,
            },
        }
        if self.descriptor.max_tokens:
            payload["parameters"]["max_new_tokens"] = self.descriptor.max_tokens

        app_logger.info(f"{self.name}: requesting text generation from {self.descriptor.model}")
        data = await self._post_json(payload)

        text = self.parse_generated_text(data)
        if text is None:
            raise ProviderUnavailable(self.name, "invalid response shape")
        return Success(text=text.strip())


PROVIDER_CLASSES = {
    ProviderKind.GEMINI: GeminiClient,
    ProviderKind.CHAT_COMPLETION: ChatCompletionClient,
    ProviderKind.TEXT_GENERATION: TextGenerationClient,
}


def build_provider_clients(descriptors: list[ProviderDescriptor], persona: str = PERSONA_PROMPT) -> list[ProviderClient]:
    """Instantiate one client per descriptor, ordered by priority."""
    clients = []
    for descriptor in sorted(descriptors, key=lambda d: d.priority):
        client_class = PROVIDER_CLASSES[descriptor.kind]
        clients.append(client_class(descriptor, Config.get_api_key(descriptor.api_key_env), persona=persona))
    return clients
