"""
Data models for chat processing.
Contains provider descriptors, generation results and gateway responses.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union


class Role(str, Enum):
    """Conversation roles understood by the gateway."""
    USER = "user"
    ASSISTANT = "assistant"


class LanguageTag(str, Enum):
    """Locales the assistant can answer in."""
    ES = "es"
    EN = "en"


class ProviderKind(str, Enum):
    """Wire protocol families supported by the provider clients."""
    GEMINI = "gemini"
    CHAT_COMPLETION = "chat_completion"
    TEXT_GENERATION = "text_generation"


class PersonaStrategy(str, Enum):
    """How the persona instruction reaches a provider."""
    HISTORY = "history"
    SYSTEM = "system"
    FLATTEN = "flatten"


@dataclass(frozen=True)
class ProviderDescriptor:
    """
    Static description of one configured generation provider.
    Built once at startup; priority defines the fallback order (lowest first).
    """
    name: str
    kind: ProviderKind
    endpoint: str
    api_key_env: str
    model: str
    priority: int
    supports_history: bool = True
    persona_strategy: PersonaStrategy = PersonaStrategy.SYSTEM
    assistant_role: str = "assistant"
    fallback_model: Optional[str] = None
    temperature: float = 0.7
    max_tokens: Optional[int] = None


@dataclass(frozen=True)
class Success:
    """A provider produced text."""
    text: str


@dataclass(frozen=True)
class Failure:
    """
    A provider attempt (or the whole fallback chain) failed.
    The orchestrator's terminal failure lists each attempt in `attempts`.
    """
    provider_name: str
    cause: str
    attempts: tuple = field(default_factory=tuple)

    @property
    def attempted_providers(self) -> list[str]:
        """Names of every provider that was tried."""
        if self.attempts:
            return [attempt.provider_name for attempt in self.attempts]
        return [self.provider_name]


GenerationResult = Union[Success, Failure]


@dataclass(frozen=True)
class GatewayResponse:
    """HTTP-ready outcome of one chat request."""
    status_code: int
    body: dict
