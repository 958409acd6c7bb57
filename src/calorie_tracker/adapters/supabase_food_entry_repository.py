"""Supabase repository for food entries."""

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from calorie_tracker.domain.entries import FoodEntry
from calorie_tracker.domain.foods import ResolvedNutrientProfile, round_calories
from calorie_tracker.services.entries import FoodEntryRepository

_COLUMNS = "id, user_id, food_name, quantity, calories, protein, carbs, fat, created_at"


@dataclass
class SupabaseFoodEntryRepository(FoodEntryRepository):
    """Supabase implementation for the food_entries table."""

    client: Client

    def create_entries(
        self, user_id: UUID, profiles: Sequence[ResolvedNutrientProfile]
    ) -> list[FoodEntry]:
        """Insert food entry rows."""
        payload = [
            {
                "user_id": str(user_id),
                "food_name": profile.food_name,
                "quantity": profile.quantity,
                "calories": profile.calories,
                "protein": profile.protein,
                "carbs": profile.carbs,
                "fat": profile.fat,
            }
            for profile in profiles
        ]
        response = self.client.table("food_entries").insert(payload).execute()
        if not response.data:
            raise RuntimeError("Failed to save food entries")
        return [_parse_row(row) for row in response.data]

    def list_entries(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[FoodEntry]:
        """Return entries in the time range, oldest first."""
        response = (
            self.client.table("food_entries")
            .select(_COLUMNS)
            .eq("user_id", str(user_id))
            .gte("created_at", start.isoformat())
            .lt("created_at", end.isoformat())
            .order("created_at", desc=False)
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]


def _parse_row(row: dict[str, object]) -> FoodEntry:
    created_at_raw = row.get("created_at")
    created_at = (
        datetime.fromisoformat(created_at_raw)
        if isinstance(created_at_raw, str) and created_at_raw
        else datetime.now(tz=UTC)
    )
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=UTC)
    return FoodEntry(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        food_name=str(row.get("food_name") or ""),
        quantity=str(row.get("quantity") or ""),
        calories=round_calories(float(row.get("calories") or 0)),
        protein=float(row.get("protein") or 0.0),
        carbs=float(row.get("carbs") or 0.0),
        fat=float(row.get("fat") or 0.0),
        created_at=created_at,
    )
