"""
Base HTTP client for service-to-service calls

Connection pooling follows httpx practice:
- Single shared AsyncClient initialized at app startup
- Proper limits to prevent connection exhaustion
- Pool timeout for fast failure under load
"""

from typing import Optional

import httpx
import structlog

logger = structlog.get_logger(__name__)


class ServiceClient:
    """
    Pooled HTTP client for one upstream service.

    Lifecycle:
        - Call start() during app startup (FastAPI lifespan)
        - Call stop() during app shutdown
        - If not initialized, falls back to per-request client
    """

    # Connection pool settings (per worker)
    MAX_CONNECTIONS = 100
    MAX_KEEPALIVE = 20
    KEEPALIVE_EXPIRY = 5.0

    # Timeout settings
    CONNECT_TIMEOUT = 5.0
    READ_TIMEOUT = 30.0
    WRITE_TIMEOUT = 5.0
    POOL_TIMEOUT = 30.0

    service_name = "upstream"

    def __init__(self, base_url: str, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.base_url = base_url.rstrip('/')
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def is_started(self) -> bool:
        return self._client is not None

    def _timeout(self) -> httpx.Timeout:
        return httpx.Timeout(
            connect=self.CONNECT_TIMEOUT,
            read=self.READ_TIMEOUT,
            write=self.WRITE_TIMEOUT,
            pool=self.POOL_TIMEOUT
        )

    async def start(self) -> None:
        """Initialize the shared HTTP client"""
        if self._client is not None:
            logger.warning("Service client already started", service=self.service_name)
            return

        limits = httpx.Limits(
            max_connections=self.MAX_CONNECTIONS,
            max_keepalive_connections=self.MAX_KEEPALIVE,
            keepalive_expiry=self.KEEPALIVE_EXPIRY
        )

        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            limits=limits,
            timeout=self._timeout(),
            transport=self._transport,
        )

        logger.info(
            "Service client started",
            service=self.service_name,
            base_url=self.base_url,
            max_connections=self.MAX_CONNECTIONS,
        )

    async def stop(self) -> None:
        """Close the HTTP client and release resources"""
        if self._client:
            await self._client.aclose()
            self._client = None
            logger.info("Service client stopped", service=self.service_name)

    async def request(self, method: str, path: str, **kwargs) -> httpx.Response:
        """
        Send a request to the upstream service

        Raises:
            httpx.HTTPError: On transport failures
        """
        if self._client:
            return await self._client.request(method, path, **kwargs)

        logger.warning("Service client not initialized, using per-request client", service=self.service_name)
        async with httpx.AsyncClient(
            base_url=self.base_url, timeout=self._timeout(), transport=self._transport
        ) as client:
            return await client.request(method, path, **kwargs)
