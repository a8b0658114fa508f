"""Domain vocabulary and schemas for weather-driven outfit recommendations.

This module defines the stable contract shared by the weather provider, the
prompt builder, the parser, the fallback engine and the cache: enums for the
closed vocabularies, and Pydantic models for the payloads that flow through the
recommendation pipeline. No interpretation logic lives here.
"""

from __future__ import annotations

from enum import Enum
from typing import List, Tuple

from pydantic import BaseModel, ConfigDict, Field


class _FrozenModel(BaseModel):
    """Immutable model that rejects unknown fields."""

    model_config = ConfigDict(extra="forbid", frozen=True)


class ClothingStyle(str, Enum):
    """Child's presentation preference; biases vocabulary and visual assets."""
    BOY = "boy"
    GIRL = "girl"
    NEUTRAL = "neutral"


class DaySlot(str, Enum):
    """Independent recommendation targets, each cached under its own key."""
    TODAY = "today"
    TOMORROW = "tomorrow"


class ClothingItem(str, Enum):
    """Controlled vocabulary of clothing tokens."""
    # tops
    TSHIRT = "tshirt"
    LONG_SLEEVE = "long-sleeve"
    SWEATER = "sweater"
    HOODIE = "hoodie"
    # outerwear
    LIGHT_JACKET = "light-jacket"
    WARM_COAT = "warm-coat"
    RAIN_JACKET = "rain-jacket"
    # bottoms
    PANTS = "pants"
    JEANS = "jeans"
    SHORTS = "shorts"
    # footwear
    BOOTS = "boots"
    RAIN_BOOTS = "rain-boots"
    # accessories
    SUN_HAT = "sun-hat"
    WARM_HAT = "warm-hat"
    SUNGLASSES = "sunglasses"
    GLOVES = "gloves"
    # girl style only
    DRESS = "dress"
    SKIRT = "skirt"
    LEGGINGS = "leggings"


BASE_VOCABULARY: Tuple[ClothingItem, ...] = (
    ClothingItem.TSHIRT,
    ClothingItem.LONG_SLEEVE,
    ClothingItem.SWEATER,
    ClothingItem.HOODIE,
    ClothingItem.LIGHT_JACKET,
    ClothingItem.WARM_COAT,
    ClothingItem.RAIN_JACKET,
    ClothingItem.PANTS,
    ClothingItem.JEANS,
    ClothingItem.SHORTS,
    ClothingItem.BOOTS,
    ClothingItem.RAIN_BOOTS,
    ClothingItem.SUN_HAT,
    ClothingItem.WARM_HAT,
    ClothingItem.SUNGLASSES,
    ClothingItem.GLOVES,
)

GIRL_EXTRAS: Tuple[ClothingItem, ...] = (
    ClothingItem.DRESS,
    ClothingItem.SKIRT,
    ClothingItem.LEGGINGS,
)


def vocabulary_for(style: ClothingStyle) -> List[ClothingItem]:
    """Return the tokens a recommendation may use for ``style``."""
    if ClothingStyle(style) is ClothingStyle.GIRL:
        return [*BASE_VOCABULARY, *GIRL_EXTRAS]
    return list(BASE_VOCABULARY)


MIN_CHILD_AGE = 1
MAX_CHILD_AGE = 10


class CurrentConditions(_FrozenModel):
    """Conditions at fetch time (°F, mph, %)."""
    temp: float
    feels_like: float
    description: str
    weather_code: int
    wind_speed: float
    humidity: float


class DayForecast(_FrozenModel):
    """Daily forecast for one slot (°F, mph, %)."""
    high: float
    low: float
    description: str = "Unknown"
    weather_code: int = 0
    precipitation_chance: float = 0.0
    wind_speed: float = 0.0


class WeatherSnapshot(_FrozenModel):
    """Result of one forecast fetch, already normalized to Fahrenheit and mph."""
    location: str
    current: CurrentConditions
    today: DayForecast
    tomorrow: DayForecast

    def day(self, slot: DaySlot) -> DayForecast:
        """Return the forecast backing ``slot``."""
        return self.today if DaySlot(slot) is DaySlot.TODAY else self.tomorrow


class UserPreferences(BaseModel):
    """Child profile that personalizes the generation prompt."""
    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    child_age: int = Field(default=2, ge=MIN_CHILD_AGE, le=MAX_CHILD_AGE)
    clothing_style: ClothingStyle = ClothingStyle.NEUTRAL
    has_completed_setup: bool = False


class StructuredRecommendation(_FrozenModel):
    """One-sentence summary plus ordered clothing tokens.

    Tokens outside ``ClothingItem`` are allowed: model output is passed through
    and the asset lookup downstream skips what it does not recognize.
    """
    summary: str = Field(min_length=1)
    clothing_items: List[str] = Field(min_length=1)


class CacheEntry(BaseModel):
    """Recommendation stored with its write time in epoch milliseconds."""
    data: StructuredRecommendation
    timestamp: int


class DailyRecommendations(_FrozenModel):
    """Recommendations for both slots of a snapshot."""
    today: StructuredRecommendation
    tomorrow: StructuredRecommendation
