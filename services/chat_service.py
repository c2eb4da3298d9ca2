"""
Chat gateway containing the request-level chat logic.
Validates the conversation, primes the persona, delegates generation and
shapes the HTTP envelope.
"""
from typing import Optional

from pydantic import ValidationError

from config import Config
from models.api_models import ChatReply, ChatRequest, ErrorReply
from models.chat_models import Failure, GatewayResponse, LanguageTag, Success
from services.fallback import FallbackOrchestrator
from services.language import LanguageDetector
from services.prompt_builder import PromptBuilder
from services.providers import ProviderClient, build_provider_clients
from utils.constants import (
    INTERNAL_SERVER_ERROR,
    INVALID_MESSAGES_ERROR,
    MISSING_MESSAGES_ERROR,
    PERSONA_PROMPT,
)
from utils.exceptions import AllProvidersExhausted, ClientInputError
from utils.logger import app_logger


class ChatGateway:
    """
    Request boundary for the assistant.

    Exactly one of `provider` (single-provider mode) or `orchestrator`
    (fallback mode) is set. An empty reply from either one is a failure.
    """

    def __init__(
        self,
        provider: Optional[ProviderClient] = None,
        orchestrator: Optional[FallbackOrchestrator] = None,
        detector: Optional[LanguageDetector] = None,
        persona: str = PERSONA_PROMPT,
    ):
        if (provider is None) == (orchestrator is None):
            raise ValueError("ChatGateway needs exactly one of provider or orchestrator")
        self.provider = provider
        self.orchestrator = orchestrator
        self.detector = detector
        self.persona = persona

    @classmethod
    def from_config(cls) -> "ChatGateway":
        """Build the gateway described by Config (call Config.validate() first)."""
        clients = build_provider_clients(Config.provider_descriptors(), persona=PERSONA_PROMPT)
        detector = LanguageDetector() if Config.LANGUAGE_DETECTION else None

        if Config.CHAT_STRATEGY == "single":
            app_logger.info(f"Chat gateway: single provider {clients[0].name}")
            return cls(provider=clients[0], detector=detector)

        orchestrator = FallbackOrchestrator(clients)
        app_logger.info(f"Chat gateway: fallback chain {' -> '.join(orchestrator.provider_names)}")
        return cls(orchestrator=orchestrator, detector=detector)

    @property
    def mode(self) -> str:
        return "single" if self.provider is not None else "fallback"

    @staticmethod
    def validate(payload) -> ChatRequest:
        """
        Validate the inbound payload.

        Raises:
            ClientInputError: messages missing, not a non-empty array, or malformed
        """
        if not isinstance(payload, dict):
            raise ClientInputError(MISSING_MESSAGES_ERROR)

        messages = payload.get("messages")
        if not isinstance(messages, list) or not messages:
            raise ClientInputError(MISSING_MESSAGES_ERROR)

        try:
            return ChatRequest.model_validate({"messages": messages})
        except ValidationError as e:
            first_error = e.errors()[0]
            location = ".".join(str(part) for part in first_error.get("loc", ()))
            message = first_error.get("msg", "invalid value")
            raise ClientInputError(f"{INVALID_MESSAGES_ERROR}: {location}: {message}")

    def detect_language(self, prompt: str) -> Optional[LanguageTag]:
        """Classify the prompt when language detection is enabled."""
        if self.detector is None:
            return None
        language = self.detector.detect(prompt)
        app_logger.info(f"Detected language: {language.value}")
        return language

    async def generate_reply(self, chat_request: ChatRequest) -> str:
        """
        Produce the assistant reply for a validated conversation.

        Raises:
            AllProvidersExhausted: no provider produced usable text
        """
        prompt = chat_request.prompt
        history = chat_request.history
        persona = PromptBuilder.with_language(self.persona, self.detect_language(prompt))

        if self.provider is not None:
            result = await self.provider.generate(prompt, history, persona=persona)
        else:
            result = await self.orchestrator.run(prompt, history, persona=persona)

        if isinstance(result, Failure):
            raise AllProvidersExhausted(list(result.attempts) or [result])

        if isinstance(result, Success) and not result.text.strip():
            provider_name = self.provider.name if self.provider is not None else "fallback"
            raise AllProvidersExhausted([Failure(provider_name=provider_name, cause="empty response")])

        return result.text

    async def handle(self, payload) -> GatewayResponse:
        """
        Run one request through validation and generation.

        Returns:
            200 {text}, 400 {error} for bad input, or 500 {error} for anything else
        """
        try:
            chat_request = self.validate(payload)
        except ClientInputError as e:
            app_logger.warning(f"Rejected chat request: {e}")
            return GatewayResponse(status_code=400, body=ErrorReply(error=str(e)).model_dump())

        app_logger.info(
            f"Chat request ({self.mode}): {len(chat_request.messages)} messages, "
            f"prompt of {len(chat_request.prompt)} characters"
        )

        try:
            text = await self.generate_reply(chat_request)
        except AllProvidersExhausted as e:
            app_logger.error(f"Chat generation failed: {e}")
            return GatewayResponse(status_code=500, body=ErrorReply(error=INTERNAL_SERVER_ERROR).model_dump())
        except Exception as e:
            app_logger.error(f"Chat error: {e!r}", exc_info=True)
            return GatewayResponse(status_code=500, body=ErrorReply(error=INTERNAL_SERVER_ERROR).model_dump())

        return GatewayResponse(status_code=200, body=ChatReply(text=text).model_dump())
