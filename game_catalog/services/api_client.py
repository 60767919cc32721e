"""HTTP gateway to the catalog backend's REST API."""

from collections.abc import Callable
from typing import Any, Generic, TypeVar

import httpx
import structlog

from ..models import Category, Game
from .errors import ApiError, NetworkError

log = structlog.stdlib.get_logger()

T = TypeVar("T")

JSON_HEADERS: dict[str, str] = {"Content-Type": "application/json"}


class ResourceApi(Generic[T]):
    """List/get/create/update/delete for one REST resource.

    Each call issues exactly one request. Responses outside the 2xx range
    raise ApiError carrying the backend's text; transport failures raise
    NetworkError. Nothing is retried.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        path: str,
        decode: Callable[[dict[str, Any]], T],
    ) -> None:
        """Initialize the resource gateway.

        Args:
            client: Shared HTTP client bound to the API base URL
            path: Resource path relative to the base URL (e.g. "games")
            decode: Builds a model instance from a JSON object
        """
        self._client = client
        self.path = path.strip("/")
        self._decode = decode

    async def list(self) -> list[T]:
        """Fetch every entity of this resource."""
        response = await self._request("GET", self.path)
        return [self._decode(item) for item in response.json()]

    async def get(self, entity_id: int) -> T:
        """Fetch one entity by identifier."""
        response = await self._request("GET", f"{self.path}/{entity_id}")
        return self._decode(response.json())

    async def create(self, payload: dict[str, Any]) -> T:
        """Create an entity and return the server-assigned representation."""
        response = await self._request("POST", self.path, json=payload)
        return self._decode(response.json())

    async def update(self, entity_id: int, payload: dict[str, Any]) -> None:
        """Replace an entity. The backend returns no body."""
        body = {**payload, "id": entity_id}
        _ = await self._request("PUT", f"{self.path}/{entity_id}", json=body)

    async def delete(self, entity_id: int) -> None:
        """Delete an entity by identifier."""
        _ = await self._request("DELETE", f"{self.path}/{entity_id}")

    async def _request(
        self,
        method: str,
        url: str,
        params: dict[str, str] | None = None,
        json: dict[str, Any] | None = None,
    ) -> httpx.Response:
        log.debug("API request", method=method, url=url, params=params)
        try:
            response = await self._client.request(method, url, params=params, json=json)
        except httpx.RequestError as e:
            raise NetworkError(
                message="Unable to reach the catalog server.",
                original_error=e,
                url=str(self._client.base_url.join(url)),
            ) from e

        if not response.is_success:
            raise ApiError(
                message=_error_message(response),
                status_code=response.status_code,
                method=method,
                url=str(response.request.url),
            )

        log.debug("API response", method=method, url=url, status_code=response.status_code)
        return response


class GamesApi(ResourceApi[Game]):
    """Games resource, with the backend's name search on top of plain CRUD."""

    def __init__(self, client: httpx.AsyncClient) -> None:
        super().__init__(client, "games", Game.from_api)

    async def search(self, name: str) -> list[Game]:
        """Search games by name on the server (GET /games/search?nome=)."""
        response = await self._request("GET", f"{self.path}/search", params={"nome": name})
        return [self._decode(item) for item in response.json()]


class CatalogApiClient:
    """Gateway owning the HTTP client and one ResourceApi per resource."""

    def __init__(
        self,
        base_url: str,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the API client.

        Args:
            base_url: API root, e.g. http://localhost:5000/api
            transport: Optional transport override (used by tests)
        """
        self.base_url = base_url.rstrip("/") + "/"
        self.transport = transport
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers=JSON_HEADERS,
            transport=transport,
        )
        self.games = GamesApi(self._client)
        self.categories: ResourceApi[Category] = ResourceApi(
            self._client, "categories", Category.from_api
        )
        log.info("API client initialized", base_url=self.base_url)

    async def close(self) -> None:
        """Close the HTTP client and clean up resources."""
        await self._client.aclose()
        log.info("API client closed")

    async def __aenter__(self) -> "CatalogApiClient":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: type[Exception] | None, exc_val: Exception | None, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.close()


def _error_message(response: httpx.Response) -> str:
    """Body text of a failed response, or a status line when the body is empty."""
    text = response.text
    if text:
        return text
    return f"Error {response.status_code}: {response.reason_phrase}"
