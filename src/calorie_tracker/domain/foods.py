"""Food identification and nutrient domain models."""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_QUANTITY = "per 100g"


class ExtractedFoodItem(BaseModel):
    """Single food item named by the vision model."""

    model_config = ConfigDict(frozen=True)

    food_name: str = Field(min_length=1)
    quantity: str


class FoodExtraction(BaseModel):
    """Structured output for food extraction."""

    model_config = ConfigDict(frozen=True)

    food_items: list[ExtractedFoodItem]


class DataType(StrEnum):
    """FoodData Central data-quality tiers."""

    SR_LEGACY = "SR Legacy"
    FOUNDATION = "Foundation"
    SURVEY = "Survey (FNDDS)"
    BRANDED = "Branded"

    @classmethod
    def parse(cls, raw: object) -> "DataType | None":
        """Return the tier for a wire string, or None when unknown."""
        try:
            return cls(raw)
        except ValueError:
            return None


class NutrientSource(StrEnum):
    """Which resolution path produced a profile."""

    DATABASE = "database"
    AI_ESTIMATE = "ai_estimate"


@dataclass(frozen=True)
class CandidateNutrient:
    """Nutrient value reported for a database candidate."""

    name: str
    value: float
    unit: str


@dataclass(frozen=True)
class NutrientCandidate:
    """Raw search result from the nutrition database."""

    description: str
    data_type: DataType | None
    nutrients: tuple[CandidateNutrient, ...]

    def nutrient_names(self) -> set[str]:
        """Return the names of all reported nutrients."""
        return {nutrient.name for nutrient in self.nutrients}


@dataclass(frozen=True)
class ResolvedNutrientProfile:
    """Final nutrient profile for one extracted food item."""

    food_name: str
    quantity: str
    calories: int
    protein: float
    carbs: float
    fat: float
    source: NutrientSource
    error: str | None = None

    def to_response(self) -> dict[str, object]:
        """Serialize for API responses."""
        payload: dict[str, object] = {
            "foodName": self.food_name,
            "quantity": self.quantity,
            "calories": self.calories,
            "protein": self.protein,
            "carbs": self.carbs,
            "fat": self.fat,
            "source": self.source.value,
        }
        if self.error is not None:
            payload["error"] = self.error
        return payload


def round_calories(value: float) -> int:
    """Round kcal to the nearest integer, never below zero."""
    rounded = Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return max(int(rounded), 0)


def round_grams(value: float) -> float:
    """Round grams to one decimal place, never below zero."""
    rounded = Decimal(str(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
    return max(float(rounded), 0.0)


def empty_profile(
    food_name: str, quantity: str, source: NutrientSource, error: str
) -> ResolvedNutrientProfile:
    """Build an all-zero profile carrying a per-item error."""
    return ResolvedNutrientProfile(
        food_name=food_name,
        quantity=quantity,
        calories=0,
        protein=0.0,
        carbs=0.0,
        fat=0.0,
        source=source,
        error=error,
    )
