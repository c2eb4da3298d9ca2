"""
Sequential fallback across generation providers.
"""
from typing import Optional

from models.api_models import Message
from models.chat_models import Failure, GenerationResult, Success
from utils.logger import app_logger


class FallbackOrchestrator:
    """
    Tries providers one at a time in priority order and returns the first
    non-empty reply. Providers are never called concurrently.
    """

    def __init__(self, providers: list):
        if not providers:
            raise ValueError("FallbackOrchestrator needs at least one provider")
        self.providers = sorted(providers, key=lambda provider: provider.priority)

    @property
    def provider_names(self) -> list[str]:
        return [provider.name for provider in self.providers]

    async def run(self, prompt: str, history: list[Message], persona: Optional[str] = None) -> GenerationResult:
        """
        Run the fallback chain.

        Returns:
            The first Success with text, or a Failure listing every attempt
        """
        attempts = []
        for position, provider in enumerate(self.providers, start=1):
            app_logger.info(f"Provider attempt {position}/{len(self.providers)}: {provider.name}")
            result = await provider.generate(prompt, history, persona=persona)

            if isinstance(result, Success):
                if isinstance(result.text, str) and result.text.strip():
                    app_logger.info(f"Provider {provider.name} answered ({len(result.text)} characters)")
                    return result
                result = Failure(provider_name=provider.name, cause="empty response")

            app_logger.warning(f"Provider {provider.name} failed: {result.cause}; trying next provider")
            attempts.append(result)

        summary = "; ".join(f"{attempt.provider_name} ({attempt.cause})" for attempt in attempts)
        app_logger.error(f"All providers exhausted: {summary}")
        return Failure(
            provider_name="fallback",
            cause=f"all providers failed: {summary}",
            attempts=tuple(attempts),
        )
