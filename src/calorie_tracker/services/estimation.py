"""AI nutrient estimation for foods the database cannot resolve."""

import logging
from dataclasses import dataclass, field

from pydantic import BaseModel, ConfigDict, ValidationError

from calorie_tracker.domain.foods import (
    ExtractedFoodItem,
    NutrientSource,
    ResolvedNutrientProfile,
    empty_profile,
    round_calories,
    round_grams,
)
from calorie_tracker.services.events import (
    EventSink,
    LoggingEventSink,
    ResolutionEvent,
    ResolutionStage,
)
from calorie_tracker.services.generation import StructuredClient
from calorie_tracker.services.nutrition import NutrientResolver

ESTIMATION_ERROR = "Failed to estimate nutrients"

ESTIMATE_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "calories": {"type": "number", "description": "Estimated calories in kcal"},
        "protein": {"type": "number", "description": "Estimated protein in grams"},
        "carbs": {
            "type": "number",
            "description": "Estimated carbohydrates in grams",
        },
        "fat": {"type": "number", "description": "Estimated fat in grams"},
    },
    "required": ["calories", "protein", "carbs", "fat"],
    "additionalProperties": False,
}


class EstimationFailure(Exception):
    """Raised when the estimator call fails or returns unusable output."""


class NutrientEstimate(BaseModel):
    """Raw estimator output for the stated quantity."""

    model_config = ConfigDict(allow_inf_nan=False)

    calories: float
    protein: float
    carbs: float
    fat: float


def build_estimation_prompt(food_name: str, quantity: str) -> str:
    """Build the estimator prompt for a food and stated quantity."""
    return (
        f"Estimate the nutritional content for: {quantity} of {food_name}\n\n"
        "Provide realistic estimates based on typical nutritional values for this "
        "food. Return the values for the specified quantity, not per 100g.\n\n"
        "Be accurate and use your knowledge of food nutrition."
    )


@dataclass
class EstimationService:
    """Service that asks a text model for per-quantity nutrients."""

    client: StructuredClient
    model: str
    reasoning_effort: str | None
    store: bool

    async def estimate(self, food_name: str, quantity: str) -> ResolvedNutrientProfile:
        """Estimate nutrients for the stated quantity of a food."""
        try:
            raw = await self.client.generate(
                model=self.model,
                reasoning_effort=self.reasoning_effort,
                store=self.store,
                prompt=build_estimation_prompt(food_name, quantity),
                schema_name="nutrient_estimate",
                schema=ESTIMATE_SCHEMA,
            )
            estimate = NutrientEstimate.model_validate(raw)
        except ValidationError as exc:
            raise EstimationFailure("Estimator output did not match schema") from exc
        except Exception as exc:
            raise EstimationFailure(str(exc) or type(exc).__name__) from exc

        return ResolvedNutrientProfile(
            food_name=food_name,
            quantity=quantity,
            calories=round_calories(estimate.calories),
            protein=round_grams(estimate.protein),
            carbs=round_grams(estimate.carbs),
            fat=round_grams(estimate.fat),
            source=NutrientSource.AI_ESTIMATE,
        )


@dataclass
class EstimationResolver(NutrientResolver):
    """Terminal resolver strategy backed by the estimator."""

    service: EstimationService
    events: EventSink = field(default_factory=LoggingEventSink)
    name: str = "ai_estimate"

    async def resolve(self, item: ExtractedFoodItem) -> ResolvedNutrientProfile:
        """Estimate the item; a failed estimate becomes a zero profile."""
        self.events.emit(
            ResolutionEvent(
                stage=ResolutionStage.ESTIMATION_ATTEMPTED,
                food_name=item.food_name,
                fields={"quantity": item.quantity},
            )
        )
        try:
            return await self.service.estimate(item.food_name, item.quantity)
        except EstimationFailure as exc:
            self.events.emit(
                ResolutionEvent(
                    stage=ResolutionStage.ESTIMATION_FAILED,
                    food_name=item.food_name,
                    level=logging.ERROR,
                    fields={"error": str(exc)},
                )
            )
            return empty_profile(
                item.food_name,
                item.quantity,
                NutrientSource.AI_ESTIMATE,
                ESTIMATION_ERROR,
            )
