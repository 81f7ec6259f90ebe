"""Food photo analysis using LLM vision."""

import base64
import binascii
from dataclasses import dataclass
from typing import Protocol

from nutriscan.domain.ai import FoodAnalysis

FOOD_ANALYSIS_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "food_name": {"type": "string"},
        "serving_size": {"anyOf": [{"type": "string"}, {"type": "null"}]},
        "calories": {"type": "number", "minimum": 0},
        "protein_g": {"type": "number", "minimum": 0},
        "carbs_g": {"type": "number", "minimum": 0},
        "fat_g": {"type": "number", "minimum": 0},
        "fiber_g": {"type": "number", "minimum": 0},
        "confidence": {"type": "string", "enum": ["high", "medium", "low"]},
    },
    "required": [
        "food_name",
        "serving_size",
        "calories",
        "protein_g",
        "carbs_g",
        "fat_g",
        "fiber_g",
        "confidence",
    ],
    "additionalProperties": False,
}

FOOD_ANALYSIS_PROMPT = (
    "You are a nutrition expert specializing in Indian food. "
    "Identify the dish in the image and estimate nutrition for the visible "
    "portion: calories, protein, carbs, fat and fiber in grams, a short "
    "serving size description, and your confidence (high, medium or low). "
    "Dishes like roti, dal, rice, sabzi, dosa, idli, biryani and paneer are "
    "common; use typical portion sizes."
)


class StructuredClient(Protocol):
    """Interface for LLM calls that return schema-conforming JSON."""

    async def generate(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        prompt: str,
        schema: dict[str, object],
        schema_name: str,
        image_data_url: str | None = None,
    ) -> dict[str, object]:
        """Return structured output data."""


class InvalidImageError(ValueError):
    """Raised when uploaded image data cannot be used."""


@dataclass
class FoodScanService:
    """Service that prepares vision prompts and validates results."""

    client: StructuredClient
    model: str
    reasoning_effort: str | None
    store: bool

    async def analyze(self, image_bytes: bytes) -> FoodAnalysis:
        """Estimate nutrition for the food in an image."""
        raw = await self.client.generate(
            model=self.model,
            reasoning_effort=self.reasoning_effort,
            store=self.store,
            prompt=FOOD_ANALYSIS_PROMPT,
            schema=FOOD_ANALYSIS_SCHEMA,
            schema_name="food_analysis",
            image_data_url=_to_data_url(image_bytes),
        )
        return FoodAnalysis.model_validate(raw)


def decode_image(encoded: str, max_bytes: int) -> bytes:
    """Decode base64 image data, accepting an optional data URL prefix."""
    payload = encoded.strip()
    if payload.startswith("data:"):
        _, _, payload = payload.partition(",")
    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise InvalidImageError(f"Invalid base64 image: {exc}") from exc
    if not data:
        raise InvalidImageError("Image is empty")
    if len(data) > max_bytes:
        raise InvalidImageError(f"Image too large: {len(data)} bytes > {max_bytes}")
    return data


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
    return "image/jpeg"
