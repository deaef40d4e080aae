"""Client for the remote favorites service."""

import logging
from typing import Any, Optional, Protocol

import httpx

from favsync.config import get_settings
from favsync.exceptions import RemoteGatewayError
from favsync.models.remote_favorite import RemoteFavorite

logger = logging.getLogger(__name__)


class RemoteFavoritesGateway(Protocol):
    """CRUD over the remote favorites collection, keyed by server id.

    Any exception raised by an implementation is treated as a remote
    failure by the sync engine.
    """

    async def list(self) -> list[RemoteFavorite]: ...

    async def create(self, payload: dict) -> None: ...

    async def delete_by_id(self, favorite_id: int) -> None: ...

    async def delete_all(self) -> None: ...


class FavoritesAPIClient:
    """HTTP client for the /favorites endpoints.

    Every failure (connection, timeout, non-2xx, bad JSON) is raised as
    RemoteGatewayError so callers handle one exception type.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        settings = get_settings()
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.token = token if token is not None else settings.api_token
        self.timeout = timeout if timeout is not None else settings.request_timeout
        self._transport = transport

    def _get_headers(self) -> dict:
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    async def _request(self, method: str, path: str, json: Optional[dict] = None) -> Any:
        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                response = await client.request(
                    method,
                    f"{self.base_url}{path}",
                    headers=self._get_headers(),
                    json=json,
                    timeout=self.timeout,
                )
                response.raise_for_status()
                return response.json() if response.content else None
        except httpx.HTTPStatusError as e:
            raise RemoteGatewayError(
                f"{method} {path} failed with status {e.response.status_code}",
                status_code=e.response.status_code,
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            raise RemoteGatewayError(f"{method} {path} failed: {e}") from e

    async def list(self) -> list[RemoteFavorite]:
        """Fetch all of the user's remote favorites."""
        data = await self._request("GET", "/favorites")
        try:
            return [RemoteFavorite.from_api(item) for item in data.get("favorites", [])]
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise RemoteGatewayError(f"Unexpected favorites payload: {e}") from e

    async def create(self, payload: dict) -> None:
        """Create a favorite. The server ignores natural-key duplicates."""
        await self._request("POST", "/favorites", json=payload)

    async def delete_by_id(self, favorite_id: int) -> None:
        await self._request("DELETE", f"/favorites/{favorite_id}")

    async def delete_all(self) -> None:
        await self._request("DELETE", "/favorites")
