"""HTTP transport for the management API.

A thin wrapper over httpx.AsyncClient: it sends a method, an already escaped
relative path and an optional JSON body, and hands back the status code and
the raw body. Status code policy lives in the client.
"""

import time
from dataclasses import dataclass

import httpx
from loguru import logger

from rmq_management.errors import ManagementConnectionError
from rmq_management.metrics import record_request

_HEADERS = {"Accept": "application/json"}
_JSON_BODY_HEADERS = {"Content-Type": "application/json"}


@dataclass(frozen=True)
class TransportResponse:
    status_code: int
    content: bytes

    @property
    def text(self) -> str:
        return self.content.decode("utf-8", errors="replace")


class HttpTransport:
    """Sends requests to one management endpoint with basic auth.

    Args:
        endpoint: Absolute base URL ending with a slash
        username: Management user
        password: Management password
        timeout: Request timeout in seconds
        metrics_enabled: Record Prometheus request metrics
        client: Pre-built httpx client, mainly for tests
    """

    def __init__(
        self,
        endpoint: str,
        username: str,
        password: str,
        timeout: float,
        metrics_enabled: bool = True,
        client: httpx.AsyncClient | None = None,
    ):
        self.endpoint = endpoint
        self.metrics_enabled = metrics_enabled
        self._client = client or httpx.AsyncClient(
            base_url=endpoint,
            auth=httpx.BasicAuth(username, password),
            timeout=timeout,
            headers=_HEADERS,
        )

    async def send(self, method: str, path: str, body: bytes | None = None) -> TransportResponse:
        """Send one request.

        Raises:
            ManagementConnectionError: If the request could not be completed
        """
        logger.debug("Management API request", method=method, path=path)
        started = time.perf_counter()
        try:
            response = await self._client.request(
                method,
                path,
                content=body,
                headers=_JSON_BODY_HEADERS if body is not None else None,
            )
        except httpx.TransportError as exc:
            self._record(method, "error", started)
            logger.warning(
                "Management API request failed",
                method=method,
                path=path,
                error=str(exc),
            )
            raise ManagementConnectionError(f"{method} {path} failed: {exc}") from exc

        self._record(method, response.status_code, started)
        logger.debug(
            "Management API response",
            method=method,
            path=path,
            status_code=response.status_code,
        )
        return TransportResponse(status_code=response.status_code, content=response.content)

    def _record(self, method: str, status: int | str, started: float) -> None:
        if self.metrics_enabled:
            record_request(method, status, time.perf_counter() - started)

    async def aclose(self) -> None:
        await self._client.aclose()
