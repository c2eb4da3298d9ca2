"""
HTTP client utilities with connection pooling.
Provides a reusable httpx client for outbound provider calls.
"""
import httpx
from config import Config


class HTTPClientManager:
    """Manages the shared httpx client with connection pooling."""

    _provider_client: httpx.AsyncClient | None = None

    @classmethod
    def get_provider_client(cls) -> httpx.AsyncClient:
        """
        Get or create a shared httpx client for generation provider calls.

        Features:
        - Connection pooling (reuses TCP connections to each provider)
        - Bounded per-request timeout from PROVIDER_TIMEOUT

        Returns:
            Configured httpx.AsyncClient for provider operations
        """
        if cls._provider_client is None:
            limits = httpx.Limits(
                max_connections=Config.MAX_PROVIDER_CONNECTIONS,
                max_keepalive_connections=5,
                keepalive_expiry=30.0
            )

            cls._provider_client = httpx.AsyncClient(
                timeout=Config.PROVIDER_TIMEOUT,
                limits=limits,
                http2=True
            )

        return cls._provider_client

    @classmethod
    async def close_all(cls) -> None:
        """
        Close the managed client and clean up connections.
        """
        if cls._provider_client is not None:
            await cls._provider_client.aclose()
            cls._provider_client = None
