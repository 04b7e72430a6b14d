"""
Mindlog API client.

This module provides an async HTTP client for the Mindlog server API.
"""

from typing import Any

import httpx
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from mindlog.schemas import LogRecord
from mindlog.server.api.models import LogListResponse, LogResponse, SessionResponse
from mindlog.utils.logger import get_logger

logger = get_logger(__name__)

_retry_transport_errors = retry(
    retry=retry_if_exception_type(httpx.TransportError),
    wait=wait_exponential(multiplier=1, min=1, max=8),
    stop=stop_after_attempt(4),
    reraise=True,
)


class MindlogClient:
    """
    Async client for the Mindlog API.

    GET requests are retried on network errors with exponential backoff.
    Writes (POST, PUT, DELETE) are sent once, since the server may have
    applied them before the connection failed. HTTP error responses are
    raised immediately as ``httpx.HTTPStatusError``.

    Example:
        >>> async with MindlogClient("http://localhost:8000") as client:
        ...     await client.sign_in(id_token)
        ...     results = await client.search("apple")
    """

    def __init__(
        self,
        base_url: str,
        timeout: int = 30,
        token: str | None = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            base_url: Server base URL (e.g., http://localhost:8000)
            timeout: Request timeout in seconds (default: 30)
            token: Existing session token, if already signed in
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.token = token
        self.client = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            follow_redirects=True,
        )

    async def close(self) -> None:
        """Close the HTTP client."""
        await self.client.aclose()

    async def __aenter__(self) -> "MindlogClient":
        """Async context manager entry."""
        return self

    async def __aexit__(self, *args: object) -> None:
        """Async context manager exit."""
        await self.close()

    def _headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"} if self.token else {}

    async def _request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> httpx.Response:
        if method == "GET":
            return await self._send_with_retry(method, path, params=params, json=json)
        return await self._send(method, path, params=params, json=json)

    @_retry_transport_errors
    async def _send_with_retry(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> httpx.Response:
        return await self._send(method, path, params=params, json=json)

    async def _send(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> httpx.Response:
        url = f"{self.base_url}{path}"
        logger.debug(f"{method} {url}", extra={"context": {"params": params}})

        response = await self.client.request(
            method, url, params=params, json=json, headers=self._headers()
        )
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(
                f"Mindlog API returned {e.response.status_code}: {e.response.text[:200]}",
                extra={"context": {"url": url}},
            )
            raise
        return response

    async def sign_in(self, id_token: str) -> SessionResponse:
        """
        Start a session and remember its token for later calls.

        Args:
            id_token: ID token issued by the identity provider

        Returns:
            The created session
        """
        response = await self._request("POST", "/api/auth/session", json={"id_token": id_token})
        session = SessionResponse.model_validate(response.json())
        self.token = session.token
        return session

    async def sign_out(self) -> None:
        """End the current session."""
        if not self.token:
            return
        await self._request("DELETE", "/api/auth/session")
        self.token = None

    async def search(self, query: str) -> list[LogRecord]:
        """Search the signed-in user's own and liked logs."""
        response = await self._request("GET", "/api/search", params={"q": query})
        return LogListResponse.model_validate(response.json()).logs

    async def search_public(self, query: str = "") -> list[LogRecord]:
        """Search public logs."""
        response = await self._request("GET", "/api/public/logs", params={"q": query})
        return LogListResponse.model_validate(response.json()).logs

    async def get_log(self, log_id: str) -> LogResponse:
        """Read a single log."""
        response = await self._request("GET", f"/api/logs/{log_id}")
        return LogResponse.model_validate(response.json())

    async def create_log(self, form: dict[str, Any]) -> LogRecord:
        """
        Create a log.

        Args:
            form: Log form fields (title, description, related_log_ids, ...)

        Returns:
            The created log
        """
        response = await self._request("POST", "/api/logs", json=form)
        return LogRecord.model_validate(response.json())
