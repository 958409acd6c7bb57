"""Food extraction from photos using a vision LLM."""

import base64
import binascii
import logging
from dataclasses import dataclass

from pydantic import ValidationError

from calorie_tracker.domain.foods import FoodExtraction
from calorie_tracker.services.generation import StructuredClient

_logger = logging.getLogger(__name__)

VISION_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "food_items": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "food_name": {
                        "type": "string",
                        "description": "The name of the food item",
                    },
                    "quantity": {
                        "type": "string",
                        "description": (
                            'Estimated quantity with unit (e.g., "1 cup", '
                            '"200g", "1 piece")'
                        ),
                    },
                },
                "required": ["food_name", "quantity"],
                "additionalProperties": False,
            },
        }
    },
    "required": ["food_items"],
    "additionalProperties": False,
}

VISION_PROMPT = (
    "Analyze this food image and identify all food items visible. "
    "For each distinct food item, provide:\n"
    "1. The name of the food using simple, generic terms that would appear in a "
    'nutrition database (e.g., "chicken breast fried" instead of "crispy fried '
    'chicken", "white rice" instead of "steamed jasmine rice")\n'
    "2. An estimated quantity with appropriate units "
    '(e.g., "1 cup", "200g", "1 piece", "1 serving")\n\n'
    "Use simple food names without brand names or elaborate descriptions. "
    "List each distinct food item separately."
)


class VisionExtractionError(Exception):
    """Raised when the vision call fails or returns unusable output."""


class InvalidImageError(ValueError):
    """Raised when an uploaded image payload cannot be used."""


@dataclass
class VisionService:
    """Service that prompts the vision model and validates its output."""

    client: StructuredClient
    model: str
    reasoning_effort: str | None
    store: bool

    async def extract(self, image_bytes: bytes) -> FoodExtraction:
        """Extract food items from an image via the configured client."""
        data_url = _to_data_url(image_bytes)
        try:
            raw = await self.client.generate(
                model=self.model,
                reasoning_effort=self.reasoning_effort,
                store=self.store,
                prompt=VISION_PROMPT,
                schema_name="food_extraction",
                schema=VISION_SCHEMA,
                image_data_url=data_url,
            )
            extraction = FoodExtraction.model_validate(raw)
        except ValidationError as exc:
            raise VisionExtractionError("Vision output did not match schema") from exc
        except Exception as exc:
            raise VisionExtractionError(str(exc) or type(exc).__name__) from exc
        _logger.info("Vision extracted %s food items", len(extraction.food_items))
        return extraction


def decode_image_data_url(value: str, max_bytes: int) -> bytes:
    """Decode a base64 image data URL (or bare base64) into bytes."""
    payload = value.strip()
    if payload.startswith("data:"):
        header, sep, payload = payload.partition(",")
        if not sep or not header.endswith(";base64"):
            raise InvalidImageError("Image must be a base64 data URL")
        if not header[len("data:") :].startswith("image/"):
            raise InvalidImageError("Data URL is not an image")
    if not payload:
        raise InvalidImageError("No image provided")
    # base64 expands 3 bytes to 4 chars
    if len(payload) * 3 // 4 > max_bytes + 3:
        raise InvalidImageError("Image is too large")
    try:
        image_bytes = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise InvalidImageError("Image is not valid base64") from exc
    if not image_bytes:
        raise InvalidImageError("No image provided")
    if len(image_bytes) > max_bytes:
        raise InvalidImageError("Image is too large")
    return image_bytes


def _to_data_url(image_bytes: bytes) -> str:
    """Convert bytes to a base64 data URL for image input."""
    mime_type = _detect_mime_type(image_bytes)
    encoded = base64.b64encode(image_bytes).decode("utf-8")
    return f"data:{mime_type};base64,{encoded}"


def _detect_mime_type(image_bytes: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if image_bytes.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    if image_bytes[:6] in {b"GIF87a", b"GIF89a"}:
        return "image/gif"
    return "image/jpeg"
