"""
Shared HTTP client with connection pooling.

The inference client issues two classifier calls per analysis; reusing one
pooled ``httpx.AsyncClient`` avoids a TLS handshake per call.

Lifecycle:
    # In main.py lifespan
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await http_client_manager.startup()
        yield
        await http_client_manager.shutdown()
"""

import logging
from typing import Optional

import httpx

logger = logging.getLogger("Journal.HTTP.Client")


class HTTPClientManager:
    """
    Owns the process-wide pooled ``httpx.AsyncClient``.

    Configuration:
    - max_connections: Maximum total connections (default: 50)
    - max_keepalive_connections: Max idle connections to keep (default: 10)
    - default_timeout: Default request timeout in seconds (default: 30.0)
    """

    def __init__(
        self,
        max_connections: int = 50,
        max_keepalive_connections: int = 10,
        default_timeout: float = 30.0,
    ):
        self._max_connections = max_connections
        self._max_keepalive_connections = max_keepalive_connections
        self._default_timeout = default_timeout
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def limits(self) -> httpx.Limits:
        return httpx.Limits(
            max_connections=self._max_connections,
            max_keepalive_connections=self._max_keepalive_connections,
        )

    async def startup(self) -> None:
        """Create the pooled client. Called from the application lifespan."""
        if self._client is not None:
            logger.warning("HTTP client manager already initialized")
            return

        self._client = httpx.AsyncClient(
            limits=self.limits,
            timeout=httpx.Timeout(self._default_timeout),
            follow_redirects=True,
        )
        logger.info(
            f"HTTP client manager initialized "
            f"(max_connections={self._max_connections}, "
            f"max_keepalive={self._max_keepalive_connections})"
        )

    async def shutdown(self) -> None:
        """Close the pooled client and release its connections."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
            logger.info("HTTP client manager shut down")

    async def get_client(self) -> httpx.AsyncClient:
        """
        Return the pooled client, starting it lazily if the lifespan did not.

        Returns:
            The shared httpx.AsyncClient instance
        """
        if self._client is None:
            logger.warning(
                "HTTP client accessed before startup - initializing now. "
                "Consider calling startup() during app initialization."
            )
            await self.startup()
        return self._client


# Global singleton instance
http_client_manager = HTTPClientManager()
