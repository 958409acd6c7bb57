"""Photo-to-nutrients pipeline."""

import asyncio
import logging
from dataclasses import dataclass

from calorie_tracker.domain.foods import ResolvedNutrientProfile
from calorie_tracker.services.nutrition import NutritionService
from calorie_tracker.services.vision import VisionExtractionError, VisionService

_logger = logging.getLogger(__name__)


class NoFoodIdentifiedError(VisionExtractionError):
    """Raised when the vision model finds no food in the image."""


@dataclass
class FoodAnalysisService:
    """Extracts foods from a photo and resolves each one concurrently."""

    vision_service: VisionService
    nutrition_service: NutritionService

    async def analyze(self, image_bytes: bytes) -> list[ResolvedNutrientProfile]:
        """Return one profile per extracted item, in extraction order."""
        extraction = await self.vision_service.extract(image_bytes)
        items = extraction.food_items
        if not items:
            raise NoFoodIdentifiedError("Could not identify food in image")

        profiles = await asyncio.gather(
            *(self.nutrition_service.resolve(item) for item in items)
        )
        failed = sum(1 for profile in profiles if profile.error)
        _logger.info(
            "Analyzed photo: items=%s unresolved=%s", len(profiles), failed
        )
        return list(profiles)
