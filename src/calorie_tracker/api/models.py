"""Request models for the HTTP API."""

from pydantic import BaseModel, ConfigDict, Field

from calorie_tracker.domain.foods import (
    NutrientSource,
    ResolvedNutrientProfile,
    round_calories,
    round_grams,
)


class AnalyzeFoodRequest(BaseModel):
    """Body for photo analysis."""

    image: object = None


class FoodPayload(BaseModel):
    """An analyzed food as confirmed (and possibly edited) by the patient."""

    model_config = ConfigDict(populate_by_name=True, allow_inf_nan=False)

    food_name: str = Field(alias="foodName", min_length=1)
    quantity: str = ""
    calories: float = Field(ge=0)
    protein: float = Field(default=0.0, ge=0)
    carbs: float = Field(default=0.0, ge=0)
    fat: float = Field(default=0.0, ge=0)
    source: NutrientSource = NutrientSource.AI_ESTIMATE

    def to_profile(self) -> ResolvedNutrientProfile:
        """Convert to a rounded profile."""
        return ResolvedNutrientProfile(
            food_name=self.food_name,
            quantity=self.quantity,
            calories=round_calories(self.calories),
            protein=round_grams(self.protein),
            carbs=round_grams(self.carbs),
            fat=round_grams(self.fat),
            source=self.source,
        )


class SaveEntriesRequest(BaseModel):
    """Body for logging analyzed foods."""

    foods: list[FoodPayload]
