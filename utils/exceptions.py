"""
Exception taxonomy for the chat gateway.
"""


class GatewayError(Exception):
    """Base class for gateway errors."""


class ClientInputError(GatewayError):
    """The inbound payload is missing or has an invalid `messages` field."""


class ProviderUnavailable(GatewayError):
    """A single provider call failed (network, status, body or shape)."""

    def __init__(self, provider_name: str, cause: str):
        self.provider_name = provider_name
        self.cause = cause
        super().__init__(f"{provider_name}: {cause}")


class ModelNotFound(ProviderUnavailable):
    """The provider rejected the requested model identifier."""


class AllProvidersExhausted(GatewayError):
    """Every configured provider failed for this request."""

    def __init__(self, attempts: list):
        self.attempts = attempts
        detail = "; ".join(f"{a.provider_name} ({a.cause})" for a in attempts)
        super().__init__(f"All providers failed: {detail}")


class ConfigurationError(GatewayError):
    """Process configuration is unusable; the server must not start."""
