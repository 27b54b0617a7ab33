"""USDA FoodData Central API client."""

from dataclasses import dataclass

import httpx

from pantry_tracker.services.food_search import FdcClient


@dataclass
class HttpxFdcClient(FdcClient):
    """HTTPX-backed FDC search client."""

    api_key: str
    base_url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, api_key: str, base_url: str) -> "HttpxFdcClient":
        """Create an FDC client with a managed httpx session."""
        return cls(api_key=api_key, base_url=base_url, http_client=httpx.AsyncClient())

    async def search_foods(
        self, query: str, page_size: int, data_types: tuple[str, ...]
    ) -> dict[str, object]:
        """Search foods by query, restricted to the given data types."""
        response = await self.http_client.get(
            f"{self.base_url}/foods/search",
            params={
                "api_key": self.api_key,
                "query": query,
                "pageSize": page_size,
                "dataType": ",".join(data_types),
            },
            timeout=15,
        )
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
