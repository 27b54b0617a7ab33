"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from uuid import UUID

from fastapi import Depends, FastAPI, Request, status
from fastapi.responses import JSONResponse

from pantry_tracker.api.auth import require_user
from pantry_tracker.api.models import (
    CreatePantryItemRequest,
    FoodSearchResponse,
    GenerateRecipeRequest,
    LifespanRequest,
    PantryItemResponse,
    SavedRecipeResponse,
    SaveRecipeRequest,
    UnitResponse,
    UpdatePantryItemRequest,
    dump,
)
from pantry_tracker.app_logging import configure_logging
from pantry_tracker.containers import AppContainer
from pantry_tracker.domain.errors import PantryTrackerError


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(PantryTrackerError)
    async def handle_pantry_error(
        request: Request, exc: PantryTrackerError
    ) -> JSONResponse:
        if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            logger.warning("%s %s failed: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error"},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/pantry")
    async def list_pantry(
        request: Request, user_id: UUID = Depends(require_user)
    ) -> list[dict[str, object]]:
        """Return the caller's pantry, soonest expiring first."""
        state_container: AppContainer = request.app.state.container
        records = state_container.pantry_service.list_items(user_id)
        return [dump(PantryItemResponse.from_domain(record)) for record in records]

    @app.post("/pantry", status_code=status.HTTP_201_CREATED)
    async def add_pantry_item(
        payload: CreatePantryItemRequest,
        request: Request,
        user_id: UUID = Depends(require_user),
    ) -> dict[str, object]:
        """Add an item with an estimated expiration date."""
        state_container: AppContainer = request.app.state.container
        record = await state_container.pantry_service.add_item(
            user_id,
            fdc_id=payload.fdc_id,
            food_name=payload.food_name,
            food_category=payload.food_category,
            unit_id=payload.unit_id,
            quantity=payload.quantity,
            purchase_date=payload.purchase_date,
        )
        return dump(PantryItemResponse.from_domain(record))

    @app.patch("/pantry/{item_id}")
    async def update_pantry_item(
        item_id: UUID,
        payload: UpdatePantryItemRequest,
        request: Request,
        user_id: UUID = Depends(require_user),
    ) -> dict[str, object]:
        """Update fields of a pantry item."""
        state_container: AppContainer = request.app.state.container
        record = state_container.pantry_service.update_item(
            user_id, item_id, payload.changes()
        )
        return dump(PantryItemResponse.from_domain(record))

    @app.delete("/pantry/{item_id}")
    async def delete_pantry_item(
        item_id: UUID, request: Request, user_id: UUID = Depends(require_user)
    ) -> dict[str, bool]:
        """Delete a pantry item."""
        state_container: AppContainer = request.app.state.container
        state_container.pantry_service.delete_item(user_id, item_id)
        return {"success": True}

    @app.get("/units", dependencies=[Depends(require_user)])
    async def list_units(request: Request) -> list[dict[str, object]]:
        """Return measurement units."""
        state_container: AppContainer = request.app.state.container
        units = state_container.pantry_service.list_units()
        return [dump(UnitResponse.from_domain(unit)) for unit in units]

    @app.get("/food-items/search", dependencies=[Depends(require_user)])
    async def search_food_items(
        request: Request, q: str | None = None
    ) -> dict[str, object]:
        """Search the food database."""
        state_container: AppContainer = request.app.state.container
        results, total_hits = await state_container.food_search_service.search(q)
        return dump(FoodSearchResponse(results=results, total_hits=total_hits))

    @app.post("/lifespan", dependencies=[Depends(require_user)])
    async def estimate_lifespan(
        payload: LifespanRequest, request: Request
    ) -> dict[str, object]:
        """Estimate storage and shelf life; the estimate is null when unavailable."""
        state_container: AppContainer = request.app.state.container
        estimate = await state_container.lifespan_estimator.estimate(payload.food_name)
        return {"estimate": dump(estimate) if estimate else None}

    @app.post("/recipes/generate", dependencies=[Depends(require_user)])
    async def generate_recipe(
        payload: GenerateRecipeRequest, request: Request
    ) -> dict[str, object]:
        """Generate a recipe from ingredients sorted by priority."""
        state_container: AppContainer = request.app.state.container
        recipe = await state_container.recipe_service.generate(payload.ingredients)
        return {"recipe": dump(recipe)}

    @app.get("/recipes")
    async def list_recipes(
        request: Request, user_id: UUID = Depends(require_user)
    ) -> list[dict[str, object]]:
        """Return the caller's saved recipes, newest first."""
        state_container: AppContainer = request.app.state.container
        recipes = state_container.recipe_service.list_recipes(user_id)
        return [dump(SavedRecipeResponse.from_domain(recipe)) for recipe in recipes]

    @app.post("/recipes")
    async def save_recipe(
        payload: SaveRecipeRequest,
        request: Request,
        user_id: UUID = Depends(require_user),
    ) -> dict[str, object]:
        """Save a generated recipe."""
        state_container: AppContainer = request.app.state.container
        recipe = state_container.recipe_service.save_recipe(user_id, payload.recipe)
        return dump(SavedRecipeResponse.from_domain(recipe))

    @app.delete("/recipes/{recipe_id}")
    async def delete_recipe(
        recipe_id: UUID, request: Request, user_id: UUID = Depends(require_user)
    ) -> dict[str, bool]:
        """Delete a saved recipe."""
        state_container: AppContainer = request.app.state.container
        state_container.recipe_service.delete_recipe(user_id, recipe_id)
        return {"success": True}

    @app.post("/recipes/{recipe_id}/cook")
    async def cook_recipe(
        recipe_id: UUID, request: Request, user_id: UUID = Depends(require_user)
    ) -> JSONResponse:
        """Subtract a recipe's ingredients from the pantry."""
        state_container: AppContainer = request.app.state.container
        result = state_container.cook_service.cook(user_id, recipe_id)
        return JSONResponse(
            status_code=(
                status.HTTP_200_OK if result.success else status.HTTP_400_BAD_REQUEST
            ),
            content={"success": result.success, "message": result.message},
        )

    return app
