"""Domain models for logged food entries."""

from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID


@dataclass(frozen=True)
class FoodEntry:
    """A logged food item."""

    id: UUID
    user_id: UUID
    food_name: str
    quantity: str
    calories: int
    protein: float
    carbs: float
    fat: float
    created_at: datetime


@dataclass(frozen=True)
class MealTotals:
    """Summed calories and macros."""

    calories: int
    protein: float
    carbs: float
    fat: float


@dataclass(frozen=True)
class DailyTotals:
    """Totals for a single local day."""

    day: date
    totals: MealTotals
    entry_count: int
