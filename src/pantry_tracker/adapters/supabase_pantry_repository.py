"""Supabase implementation for pantry records, catalog items and units."""

from dataclasses import dataclass
from datetime import date
from uuid import UUID

from supabase import Client, PostgrestAPIError

from pantry_tracker.domain.errors import StockConflictError
from pantry_tracker.domain.pantry import FoodItem, PantryRecord, StockDecrement, Unit
from pantry_tracker.services.pantry import PantryRepository

_RECORD_COLUMNS = "*, food_items(*), units(*)"
STOCK_CONFLICT_CODE = "PT409"


@dataclass
class SupabasePantryRepository(PantryRepository):
    """Supabase-backed repository for pantry stock."""

    client: Client

    def list_records(self, user_id: UUID) -> list[PantryRecord]:
        """Return a user's records, soonest expiring first."""
        response = (
            self.client.table("user_food_items")
            .select(_RECORD_COLUMNS)
            .eq("user_id", str(user_id))
            .order("estimated_expiration_date", nullsfirst=False)
            .order("purchase_date", desc=True)
            .execute()
        )
        return [_parse_record(row) for row in response.data or []]

    def get_record(self, record_id: UUID) -> PantryRecord | None:
        """Return a pantry record by id, if present."""
        response = (
            self.client.table("user_food_items")
            .select(_RECORD_COLUMNS)
            .eq("id", str(record_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_record(response.data[0])

    def create_record(  # noqa: PLR0913
        self,
        user_id: UUID,
        food_item_id: UUID,
        unit_id: UUID,
        quantity: float,
        purchase_date: date,
        estimated_expiration_date: date | None,
    ) -> PantryRecord:
        """Create a pantry record and return it with its relations."""
        response = (
            self.client.table("user_food_items")
            .insert(
                {
                    "user_id": str(user_id),
                    "food_item_id": str(food_item_id),
                    "unit_id": str(unit_id),
                    "quantity": quantity,
                    "purchase_date": purchase_date.isoformat(),
                    "estimated_expiration_date": _isoformat(
                        estimated_expiration_date
                    ),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create pantry item")
        return self._require_record(UUID(response.data[0]["id"]))

    def update_record(self, record_id: UUID, payload: dict[str, object]) -> PantryRecord:
        """Update a pantry record and return it with its relations."""
        response = (
            self.client.table("user_food_items")
            .update(_serialize_payload(payload))
            .eq("id", str(record_id))
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to update pantry item")
        return self._require_record(record_id)

    def delete_record(self, record_id: UUID) -> None:
        """Delete a pantry record."""
        self.client.table("user_food_items").delete().eq("id", str(record_id)).execute()

    def consume_stock(self, user_id: UUID, decrements: list[StockDecrement]) -> None:
        """Apply decrements in one database transaction.

        ``consume_pantry_stock`` locks each row, re-checks its quantity and
        deletes rows that reach zero; it raises ``PT409`` and rolls back when
        any record is gone or short.
        """
        if not decrements:
            return
        try:
            self.client.rpc(
                "consume_pantry_stock",
                {
                    "p_user_id": str(user_id),
                    "p_items": [
                        {
                            "user_food_item_id": str(item.user_food_item_id),
                            "quantity": item.quantity,
                        }
                        for item in decrements
                    ],
                },
            ).execute()
        except PostgrestAPIError as exc:
            if exc.code == STOCK_CONFLICT_CODE:
                raise StockConflictError(str(exc.message)) from exc
            raise

    def find_food_item_by_fdc_id(self, fdc_id: int) -> FoodItem | None:
        """Return the catalog entry for a FoodData Central id."""
        response = (
            self.client.table("food_items")
            .select("*")
            .eq("fdc_id", fdc_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_food_item(response.data[0])

    def create_food_item(self, name: str, category: str, fdc_id: int | None) -> FoodItem:
        """Create a catalog entry and return it."""
        response = (
            self.client.table("food_items")
            .insert({"name": name, "category": category, "fdc_id": fdc_id})
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create food item")
        return _parse_food_item(response.data[0])

    def get_food_item(self, food_item_id: UUID) -> FoodItem | None:
        """Return a catalog entry by id."""
        response = (
            self.client.table("food_items")
            .select("*")
            .eq("id", str(food_item_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_food_item(response.data[0])

    def get_unit(self, unit_id: UUID) -> Unit | None:
        """Return a unit by id."""
        response = (
            self.client.table("units")
            .select("*")
            .eq("id", str(unit_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_unit(response.data[0])

    def list_units(self) -> list[Unit]:
        """Return all units ordered by display name."""
        response = self.client.table("units").select("*").order("display_name").execute()
        return [_parse_unit(row) for row in response.data or []]

    def _require_record(self, record_id: UUID) -> PantryRecord:
        record = self.get_record(record_id)
        if record is None:
            raise RuntimeError(f"Pantry item {record_id} disappeared after write")
        return record


def _parse_record(row: dict[str, object]) -> PantryRecord:
    """Parse a pantry row with embedded relations into a domain model."""
    expiration_raw = row.get("estimated_expiration_date")
    return PantryRecord(
        id=UUID(row["id"]),
        user_id=UUID(row["user_id"]),
        food_item=_parse_food_item(row["food_items"]),
        unit=_parse_unit(row["units"]),
        quantity=float(row.get("quantity", 0.0)),
        purchase_date=_parse_date(row["purchase_date"]),
        estimated_expiration_date=(
            _parse_date(expiration_raw) if expiration_raw else None
        ),
    )


def _parse_food_item(row: dict[str, object]) -> FoodItem:
    fdc_id = row.get("fdc_id")
    return FoodItem(
        id=UUID(row["id"]),
        name=str(row.get("name", "")),
        category=str(row.get("category", "")),
        fdc_id=int(fdc_id) if fdc_id is not None else None,
    )


def _parse_unit(row: dict[str, object]) -> Unit:
    return Unit(
        id=UUID(row["id"]),
        short_name=str(row.get("short_name", "")),
        display_name=str(row.get("display_name", "")),
    )


def _parse_date(value: object) -> date:
    return date.fromisoformat(str(value)[:10])


def _isoformat(value: date | None) -> str | None:
    return value.isoformat() if value else None


def _serialize_payload(payload: dict[str, object]) -> dict[str, object]:
    serialized: dict[str, object] = {}
    for key, value in payload.items():
        if isinstance(value, UUID):
            serialized[key] = str(value)
        elif isinstance(value, date):
            serialized[key] = value.isoformat()
        else:
            serialized[key] = value
    return serialized
