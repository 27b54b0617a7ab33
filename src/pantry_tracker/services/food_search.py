"""Food catalog search backed by USDA FoodData Central."""

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from pantry_tracker.domain.errors import SearchUnavailableError, ValidationError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from pantry_tracker.services.cache import Cache

_logger = logging.getLogger(__name__)

MIN_QUERY_LENGTH = 2
SEARCH_DATA_TYPES = ("Foundation", "SR Legacy", "Survey (FNDDS)", "Branded")


class FdcClient(Protocol):
    """Interface for FoodData Central search."""

    async def search_foods(
        self, query: str, page_size: int, data_types: tuple[str, ...]
    ) -> dict[str, object]:
        """Search foods by query and return the raw API payload."""


class FoodSearchResult(BaseModel):
    """Catalog candidate a user can add to their pantry."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    fdc_id: int
    name: str
    category: str
    data_type: str | None = None
    brand_owner: str | None = None


@dataclass
class FoodSearchService:
    """Search FoodData Central with caching and a short retry."""

    fdc_client: FdcClient
    cache: "Cache"
    page_size: int = 20
    ttl_seconds: int = 3600
    retry_attempts: int = 1
    retry_delay_seconds: float = 0.3

    async def search(self, query: str | None) -> tuple[list[FoodSearchResult], int]:
        """Return matching foods and the total hit count."""
        cleaned = (query or "").strip()
        if len(cleaned) < MIN_QUERY_LENGTH:
            raise ValidationError("Query must be at least 2 characters")

        cache_key = f"fdc:search:{cleaned.lower()}:{self.page_size}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, tuple):
            return cached

        try:
            payload = await self._call_with_retry(
                lambda: self.fdc_client.search_foods(
                    cleaned, self.page_size, SEARCH_DATA_TYPES
                )
            )
        except Exception as exc:
            raise SearchUnavailableError("Failed to search food database") from exc
        foods = payload.get("foods") or []
        results = [_parse_food(food) for food in foods if isinstance(food, dict)]
        total_hits = payload.get("totalHits")
        result = (
            results,
            total_hits if isinstance(total_hits, int) else len(results),
        )
        self.cache.set(cache_key, result, ttl_seconds=self.ttl_seconds)
        return result

    async def _call_with_retry(
        self, func: "Callable[[], Awaitable[dict[str, object]]]"
    ) -> dict[str, object]:
        attempt = 0
        while True:
            try:
                return await func()
            except Exception as exc:
                attempt += 1
                _logger.warning(
                    "Food search failed (attempt %s/%s, status=%s): %s",
                    attempt,
                    self.retry_attempts + 1,
                    _status_code_from_exception(exc),
                    exc,
                )
                if attempt > self.retry_attempts:
                    raise
                await asyncio.sleep(self.retry_delay_seconds)


def _parse_food(food: dict[str, object]) -> FoodSearchResult:
    brand_owner = food.get("brandOwner")
    category = food.get("foodCategory") or brand_owner or "Uncategorized"
    if isinstance(category, dict):
        category = category.get("description") or "Uncategorized"
    return FoodSearchResult(
        fdc_id=int(food["fdcId"]),
        name=str(food.get("description", "")),
        category=str(category),
        data_type=food.get("dataType"),
        brand_owner=brand_owner,
    )


def _status_code_from_exception(exc: Exception) -> str:
    response = getattr(exc, "response", None)
    status_code = getattr(response, "status_code", None)
    if isinstance(status_code, int):
        return str(status_code)
    return "n/a"
