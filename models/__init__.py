"""
Models package exports.
"""
from models.api_models import Message, ChatRequest, ChatReply, ErrorReply
from models.chat_models import (
    Role,
    LanguageTag,
    ProviderKind,
    PersonaStrategy,
    ProviderDescriptor,
    Success,
    Failure,
    GenerationResult,
    GatewayResponse,
)

__all__ = [
    'Message',
    'ChatRequest',
    'ChatReply',
    'ErrorReply',
    'Role',
    'LanguageTag',
    'ProviderKind',
    'PersonaStrategy',
    'ProviderDescriptor',
    'Success',
    'Failure',
    'GenerationResult',
    'GatewayResponse',
]
