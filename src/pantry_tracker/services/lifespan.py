"""Shelf-life estimation backed by a text generation model."""

import logging
import math
from dataclasses import dataclass

import pydantic
from pydantic import BaseModel, ConfigDict, Field, field_validator

from pantry_tracker.domain.generation import LifespanEstimate, StorageType
from pantry_tracker.services.text_generation import (
    TextGenerationClient,
    strip_code_fences,
)

_logger = logging.getLogger(__name__)

MAX_LIFESPAN_DAYS = 36500


class _LifespanPayload(BaseModel):
    """Shape the model is instructed to reply with."""

    model_config = ConfigDict(extra="ignore")

    type: StorageType
    duration: float = Field(
        gt=0, le=MAX_LIFESPAN_DAYS, strict=True, allow_inf_nan=False
    )

    @field_validator("type", mode="before")
    @classmethod
    def _normalize_type(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().upper()
        return value


@dataclass
class LifespanEstimator:
    """Estimate how long a food keeps under its most likely storage."""

    client: TextGenerationClient

    async def estimate(self, food_name: str) -> LifespanEstimate | None:
        """Return a lifespan estimate, or None when none could be obtained."""
        prompt = build_lifespan_prompt(food_name)
        try:
            raw = await self.client.generate_text(prompt)
        except Exception as exc:
            _logger.warning("Lifespan estimate failed for %r: %s", food_name, exc)
            return None
        estimate = parse_lifespan(raw)
        if estimate is None:
            _logger.warning("Unusable lifespan estimate for %r: %r", food_name, raw)
        return estimate


def build_lifespan_prompt(food_name: str) -> str:
    """Build the estimation prompt for a food name."""
    return (
        f'For the food item "{food_name}", determine the single most likely way '
        "a household would store it: refrigerated (FRIDGE), frozen (FREEZER) "
        "or at room temperature (AMBIENT). Estimate how many days it stays good "
        "under that condition.\n"
        "Respond with only a JSON object of the form "
        '{"type": "FRIDGE" | "FREEZER" | "AMBIENT", "duration": <days>} '
        "where duration is a whole number of days. Do not add any other text."
    )


def parse_lifespan(raw: str) -> LifespanEstimate | None:
    """Parse a model reply into an estimate, returning None on any mismatch."""
    try:
        payload = _LifespanPayload.model_validate_json(strip_code_fences(raw))
    except pydantic.ValidationError:
        return None
    return LifespanEstimate(
        storage_type=payload.type,
        duration_days=math.ceil(payload.duration),
    )
