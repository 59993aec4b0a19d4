"""
Upstream proxying

Maps public path prefixes to backend services and forwards requests over
pooled HTTP clients.
"""

from typing import Dict, Iterable, List, Optional, Tuple

import httpx
import structlog
from fastapi import Request
from fastapi.responses import Response

from shared.utils.service_client import ServiceClient

logger = structlog.get_logger(__name__)

# Headers that describe a single hop and must not be forwarded
HOP_BY_HOP_HEADERS = frozenset({
    "connection",
    "keep-alive",
    "proxy-authenticate",
    "proxy-authorization",
    "te",
    "trailers",
    "transfer-encoding",
    "upgrade",
    "host",
    "content-length",
})

RESPONSE_EXCLUDED_HEADERS = HOP_BY_HOP_HEADERS | {"content-encoding"}


class UpstreamClient(ServiceClient):
    """Pooled client for one proxied backend service"""

    def __init__(self, name: str, base_url: str, transport: Optional[httpx.AsyncBaseTransport] = None):
        super().__init__(base_url, transport=transport)
        self.service_name = name

    async def forward(self, request: Request) -> Response:
        """
        Replay the request against this upstream

        Raises:
            httpx.HTTPError: If the upstream cannot be reached
        """
        headers = [
            (name, value)
            for name, value in request.headers.items()
            if name.lower() not in HOP_BY_HOP_HEADERS
        ]
        params = [(key, value) for key, value in request.query_params.multi_items() if key != "token"]
        body = await request.body()

        upstream_response = await self.request(
            request.method,
            request.url.path,
            params=params,
            headers=headers,
            content=body,
        )

        return Response(
            content=upstream_response.content,
            status_code=upstream_response.status_code,
            headers={
                name: value
                for name, value in upstream_response.headers.items()
                if name.lower() not in RESPONSE_EXCLUDED_HEADERS
            },
        )


class RouteTable:
    """Path-prefix routing table, longest prefix first"""

    def __init__(self, routes: Iterable[Tuple[str, UpstreamClient]]):
        self._routes: List[Tuple[str, UpstreamClient]] = sorted(routes, key=lambda item: len(item[0]), reverse=True)

    def resolve(self, path: str) -> Optional[UpstreamClient]:
        for prefix, upstream in self._routes:
            if path == prefix or path.startswith(prefix + "/"):
                return upstream
        return None

    @property
    def upstreams(self) -> Dict[str, UpstreamClient]:
        """Distinct upstream clients by service name"""
        return {upstream.service_name: upstream for _, upstream in self._routes}

    @property
    def prefixes(self) -> List[str]:
        return [prefix for prefix, _ in self._routes]

    async def start(self) -> None:
        for upstream in self.upstreams.values():
            await upstream.start()

    async def stop(self) -> None:
        for upstream in self.upstreams.values():
            await upstream.stop()
