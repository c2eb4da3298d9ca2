"""
Persona composition for the different provider protocols.
Covers leading-turn injection, native system instructions and flattened prompts.
"""
from typing import Optional

from models.api_models import Message
from models.chat_models import LanguageTag, ProviderDescriptor, ProviderKind
from utils.constants import (
    FLATTENED_ASSISTANT_LABEL,
    FLATTENED_USER_LABEL,
    LANGUAGE_INSTRUCTIONS,
)


class PromptBuilder:
    """Builds persona-primed payloads for providers."""

    @staticmethod
    def with_language(persona: str, language: Optional[LanguageTag]) -> str:
        """Suffix the persona with an instruction to answer in the given language."""
        if language is None:
            return persona
        instruction = LANGUAGE_INSTRUCTIONS[LanguageTag(language).value]
        return f"{persona.rstrip()}\n\n{instruction}"

    @staticmethod
    def persona_turn(persona: str, descriptor: ProviderDescriptor) -> dict:
        """
        Synthetic leading turn carrying the persona.
        Attributed to the user role since some protocols have no system role.
        """
        if descriptor.kind == ProviderKind.GEMINI:
            return {"role": "user", "parts": [persona]}
        return {"role": "user", "content": persona}

    @staticmethod
    def inject_into_history(persona: str, wire_history: list, descriptor: ProviderDescriptor) -> list:
        """Prepend the persona turn to an already adapted history."""
        return [PromptBuilder.persona_turn(persona, descriptor), *wire_history]

    @staticmethod
    def system_message(persona: str) -> dict:
        """Persona as a native system message for chat-completion providers."""
        return {"role": "system", "content": persona}

    @staticmethod
    def flatten(persona: str, history: list[Message], prompt: str) -> str:
        """
        Serialize persona, transcript and prompt into one string for
        providers without a structured message concept.
        """
        lines = [persona.strip(), ""]
        for message in history:
            label = FLATTENED_ASSISTANT_LABEL if message.role == "assistant" else FLATTENED_USER_LABEL
            lines.append(f"{label}: {message.content}")
        lines.append(f"{FLATTENED_USER_LABEL}: {prompt}")
        lines.append(f"{FLATTENED_ASSISTANT_LABEL}:")
        return "\n".join(lines)
