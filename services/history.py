"""
Conversation history adaptation to each provider's wire format.
"""
from models.api_models import Message
from models.chat_models import ProviderDescriptor, ProviderKind, Role

_SUPPORTED_ROLES = {Role.USER.value, Role.ASSISTANT.value}


class HistoryAdapter:
    """Maps role-tagged messages to provider turn structures."""

    @staticmethod
    def filter_turns(history: list[Message]) -> list[Message]:
        """Keep only user and assistant messages, preserving order."""
        return [message for message in history if message.role in _SUPPORTED_ROLES]

    @staticmethod
    def adapt(history: list[Message], descriptor: ProviderDescriptor) -> list:
        """
        Convert history into the provider's turn list.

        Args:
            history: Prior messages, oldest first (without the current prompt)
            descriptor: Target provider

        Returns:
            Wire turns; empty when the provider does not accept history
        """
        if not descriptor.supports_history:
            return []

        wire_history = []
        for message in HistoryAdapter.filter_turns(history):
            role = descriptor.assistant_role if message.role == Role.ASSISTANT.value else "user"
            if descriptor.kind == ProviderKind.GEMINI:
                wire_history.append({"role": role, "parts": [message.content]})
            else:
                wire_history.append({"role": role, "content": message.content})
        return wire_history
