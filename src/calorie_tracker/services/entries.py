"""Food entry logging and history totals."""

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import UTC, date, datetime, time, timedelta
from typing import Protocol
from uuid import UUID
from zoneinfo import ZoneInfo

from calorie_tracker.domain.entries import DailyTotals, FoodEntry, MealTotals
from calorie_tracker.domain.foods import (
    ResolvedNutrientProfile,
    round_calories,
    round_grams,
)


class FoodEntryRepository(Protocol):
    """Persistence interface for food entries."""

    def create_entries(
        self, user_id: UUID, profiles: Sequence[ResolvedNutrientProfile]
    ) -> list[FoodEntry]:
        """Insert one entry per profile and return the stored rows."""

    def list_entries(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[FoodEntry]:
        """Return entries created in [start, end), oldest first."""


def summarize(items: Sequence[ResolvedNutrientProfile | FoodEntry]) -> MealTotals:
    """Sum calories and macros for profiles or entries."""
    return MealTotals(
        calories=round_calories(sum(item.calories for item in items)),
        protein=round_grams(sum(item.protein for item in items)),
        carbs=round_grams(sum(item.carbs for item in items)),
        fat=round_grams(sum(item.fat for item in items)),
    )


@dataclass
class FoodEntryService:
    """Service that saves analyzed foods and reports daily totals."""

    repository: FoodEntryRepository

    def save_entries(
        self, user_id: UUID, profiles: Sequence[ResolvedNutrientProfile]
    ) -> list[FoodEntry]:
        """Persist profiles as food entries for the user."""
        if not profiles:
            return []
        return self.repository.create_entries(user_id, profiles)

    def daily_totals(
        self, user_id: UUID, start: date, end: date, timezone_name: str
    ) -> list[DailyTotals]:
        """Return per-day totals for local days start..end inclusive."""
        if end < start:
            raise ValueError("end must not be before start")
        tz = ZoneInfo(timezone_name)
        range_start = datetime.combine(start, time.min, tzinfo=tz)
        range_end = datetime.combine(end + timedelta(days=1), time.min, tzinfo=tz)
        entries = self.repository.list_entries(
            user_id, range_start.astimezone(UTC), range_end.astimezone(UTC)
        )

        by_day: dict[date, list[FoodEntry]] = {}
        for entry in entries:
            day = entry.created_at.astimezone(tz).date()
            if start <= day <= end:
                by_day.setdefault(day, []).append(entry)
        return [
            DailyTotals(
                day=day, totals=summarize(day_entries), entry_count=len(day_entries)
            )
            for day, day_entries in sorted(by_day.items())
        ]
