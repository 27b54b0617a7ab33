"""Shared test fixtures."""

from collections.abc import Callable
from dataclasses import dataclass, field, replace
from datetime import UTC, date, datetime
from uuid import UUID, uuid4

import pytest

from pantry_tracker.config import Settings
from pantry_tracker.containers import AppContainer
from pantry_tracker.domain.errors import StockConflictError
from pantry_tracker.domain.generation import GeneratedRecipe
from pantry_tracker.domain.pantry import FoodItem, PantryRecord, StockDecrement, Unit
from pantry_tracker.domain.recipes import Recipe, RecipeIngredient
from pantry_tracker.services.cache import InMemoryCache
from pantry_tracker.services.cooking import CookService
from pantry_tracker.services.food_search import FdcClient, FoodSearchService
from pantry_tracker.services.lifespan import LifespanEstimator
from pantry_tracker.services.pantry import PantryRepository, PantryService
from pantry_tracker.services.recipe_generation import RecipeGenerator
from pantry_tracker.services.recipes import RecipeRepository, RecipeService
from pantry_tracker.services.text_generation import TextGenerationClient

TEST_API_TOKEN = "api-token"


@dataclass
class FakeTextClient(TextGenerationClient):
    """Fake model client returning a fixed reply or raising."""

    reply: str = '{"type": "FRIDGE", "duration": 7}'
    error: Exception | None = None
    prompts: list[str] = field(default_factory=list)

    async def generate_text(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.reply


@dataclass
class FakeFdcClient(FdcClient):
    """Fake FDC client with an in-memory search payload."""

    payload: dict[str, object] = field(
        default_factory=lambda: {
            "totalHits": 1,
            "foods": [
                {
                    "fdcId": 171287,
                    "description": "Egg, whole, raw, fresh",
                    "foodCategory": "Dairy and Egg Products",
                    "dataType": "SR Legacy",
                }
            ],
        }
    )
    error: Exception | None = None
    calls: list[tuple[str, int, tuple[str, ...]]] = field(default_factory=list)

    async def search_foods(
        self, query: str, page_size: int, data_types: tuple[str, ...]
    ) -> dict[str, object]:
        self.calls.append((query, page_size, data_types))
        if self.error is not None:
            raise self.error
        return self.payload


@dataclass
class InMemoryPantryRepository(PantryRepository):
    """In-memory pantry repository for tests."""

    records: dict[UUID, PantryRecord] = field(default_factory=dict)
    food_items: dict[UUID, FoodItem] = field(default_factory=dict)
    units: dict[UUID, Unit] = field(default_factory=dict)
    before_consume: Callable[[], None] | None = None
    consumed: list[list[StockDecrement]] = field(default_factory=list)

    def add_unit(self, short_name: str, display_name: str | None = None) -> Unit:
        unit = Unit(
            id=uuid4(), short_name=short_name, display_name=display_name or short_name
        )
        self.units[unit.id] = unit
        return unit

    def add_record(  # noqa: PLR0913
        self,
        user_id: UUID,
        name: str,
        quantity: float,
        unit_short_name: str = "count",
        purchase_date: date = date(2024, 1, 1),
        estimated_expiration_date: date | None = None,
    ) -> PantryRecord:
        unit = next(
            (item for item in self.units.values() if item.short_name == unit_short_name),
            None,
        ) or self.add_unit(unit_short_name)
        food_item = self.create_food_item(name=name, category="Test", fdc_id=None)
        return self.create_record(
            user_id=user_id,
            food_item_id=food_item.id,
            unit_id=unit.id,
            quantity=quantity,
            purchase_date=purchase_date,
            estimated_expiration_date=estimated_expiration_date,
        )

    def list_records(self, user_id: UUID) -> list[PantryRecord]:
        owned = [record for record in self.records.values() if record.user_id == user_id]
        owned.sort(key=lambda record: record.purchase_date, reverse=True)
        owned.sort(
            key=lambda record: (
                record.estimated_expiration_date is None,
                record.estimated_expiration_date or date.max,
            )
        )
        return owned

    def get_record(self, record_id: UUID) -> PantryRecord | None:
        return self.records.get(record_id)

    def create_record(  # noqa: PLR0913
        self,
        user_id: UUID,
        food_item_id: UUID,
        unit_id: UUID,
        quantity: float,
        purchase_date: date,
        estimated_expiration_date: date | None,
    ) -> PantryRecord:
        record = PantryRecord(
            id=uuid4(),
            user_id=user_id,
            food_item=self.food_items[food_item_id],
            unit=self.units[unit_id],
            quantity=quantity,
            purchase_date=purchase_date,
            estimated_expiration_date=estimated_expiration_date,
        )
        self.records[record.id] = record
        return record

    def update_record(self, record_id: UUID, payload: dict[str, object]) -> PantryRecord:
        current = self.records[record_id]
        changes: dict[str, object] = {}
        for key, value in payload.items():
            if key == "food_item_id":
                changes["food_item"] = self.food_items[value]
            elif key == "unit_id":
                changes["unit"] = self.units[value]
            else:
                changes[key] = value
        updated = replace(current, **changes)
        self.records[record_id] = updated
        return updated

    def delete_record(self, record_id: UUID) -> None:
        self.records.pop(record_id, None)

    def consume_stock(self, user_id: UUID, decrements: list[StockDecrement]) -> None:
        if self.before_consume is not None:
            self.before_consume()
        remaining: dict[UUID, float] = {}
        for item in decrements:
            record = self.records.get(item.user_food_item_id)
            if record is None or record.user_id != user_id:
                raise StockConflictError(f"Pantry item {item.user_food_item_id} gone")
            available = remaining.get(record.id, record.quantity)
            if available < item.quantity:
                raise StockConflictError(f"Pantry item {record.id} is short")
            remaining[record.id] = available - item.quantity
        for record_id, quantity in remaining.items():
            if quantity <= 0:
                del self.records[record_id]
            else:
                self.records[record_id] = replace(
                    self.records[record_id], quantity=quantity
                )
        self.consumed.append(list(decrements))

    def find_food_item_by_fdc_id(self, fdc_id: int) -> FoodItem | None:
        for item in self.food_items.values():
            if item.fdc_id == fdc_id:
                return item
        return None

    def create_food_item(self, name: str, category: str, fdc_id: int | None) -> FoodItem:
        item = FoodItem(id=uuid4(), name=name, category=category, fdc_id=fdc_id)
        self.food_items[item.id] = item
        return item

    def get_food_item(self, food_item_id: UUID) -> FoodItem | None:
        return self.food_items.get(food_item_id)

    def get_unit(self, unit_id: UUID) -> Unit | None:
        return self.units.get(unit_id)

    def list_units(self) -> list[Unit]:
        return sorted(self.units.values(), key=lambda unit: unit.display_name)


@dataclass
class InMemoryRecipeRepository(RecipeRepository):
    """In-memory recipe repository for tests."""

    recipes: dict[UUID, Recipe] = field(default_factory=dict)

    def add_recipe(
        self,
        user_id: UUID,
        ingredients: list[tuple[str, float, str, UUID | None]],
        title: str = "Test recipe",
    ) -> Recipe:
        recipe_id = uuid4()
        recipe = Recipe(
            id=recipe_id,
            user_id=user_id,
            title=title,
            description=None,
            servings=None,
            prep_time=None,
            cook_time=None,
            steps=["Cook it."],
            created_at=datetime.now(tz=UTC),
            ingredients=[
                RecipeIngredient(
                    id=uuid4(),
                    recipe_id=recipe_id,
                    name=name,
                    fdc_id=None,
                    quantity_used=quantity,
                    unit=unit,
                    user_food_item_id=record_id,
                )
                for name, quantity, unit, record_id in ingredients
            ],
        )
        self.recipes[recipe_id] = recipe
        return recipe

    def list_recipes(self, user_id: UUID) -> list[Recipe]:
        owned = [recipe for recipe in self.recipes.values() if recipe.user_id == user_id]
        return sorted(owned, key=lambda recipe: recipe.created_at, reverse=True)

    def get_recipe(self, recipe_id: UUID) -> Recipe | None:
        return self.recipes.get(recipe_id)

    def create_recipe(self, user_id: UUID, recipe: GeneratedRecipe) -> Recipe:
        recipe_id = uuid4()
        saved = Recipe(
            id=recipe_id,
            user_id=user_id,
            title=recipe.title,
            description=recipe.description,
            servings=recipe.servings,
            prep_time=recipe.prep_time,
            cook_time=recipe.cook_time,
            steps=list(recipe.steps),
            created_at=datetime.now(tz=UTC),
            ingredients=[
                RecipeIngredient(
                    id=uuid4(),
                    recipe_id=recipe_id,
                    name=item.name,
                    fdc_id=item.fdc_id,
                    quantity_used=item.quantity_used,
                    unit=item.unit,
                    user_food_item_id=item.user_food_item_id,
                )
                for item in recipe.used_ingredients
            ],
        )
        self.recipes[recipe_id] = saved
        return saved

    def delete_recipe(self, recipe_id: UUID) -> None:
        self.recipes.pop(recipe_id, None)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
        api_token=TEST_API_TOKEN,
        openai_api_key="openai-key",
        fdc_api_key="fdc-key",
    )


@pytest.fixture
def text_client() -> FakeTextClient:
    return FakeTextClient()


@pytest.fixture
def pantry_repository() -> InMemoryPantryRepository:
    return InMemoryPantryRepository()


@pytest.fixture
def recipe_repository() -> InMemoryRecipeRepository:
    return InMemoryRecipeRepository()


@pytest.fixture
def fdc_client() -> FakeFdcClient:
    return FakeFdcClient()


@pytest.fixture
def user_id() -> UUID:
    return uuid4()


@pytest.fixture
def auth_headers(user_id: UUID) -> dict[str, str]:
    return {"X-Api-Token": TEST_API_TOKEN, "X-User-Id": str(user_id)}


@pytest.fixture
def container(
    settings: Settings,
    text_client: FakeTextClient,
    pantry_repository: InMemoryPantryRepository,
    recipe_repository: InMemoryRecipeRepository,
    fdc_client: FakeFdcClient,
) -> AppContainer:
    lifespan_estimator = LifespanEstimator(text_client)

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        lifespan_estimator=lifespan_estimator,
        pantry_service=PantryService(
            repository=pantry_repository,
            estimator=lifespan_estimator,
        ),
        recipe_service=RecipeService(
            repository=recipe_repository,
            generator=RecipeGenerator(text_client),
        ),
        cook_service=CookService(
            recipe_repository=recipe_repository,
            pantry_repository=pantry_repository,
        ),
        food_search_service=FoodSearchService(
            fdc_client=fdc_client,
            cache=InMemoryCache(),
            retry_delay_seconds=0,
        ),
        close_resources=close_resources,
    )
