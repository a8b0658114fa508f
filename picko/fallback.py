"""Rule-based recommendations used when generation or parsing fails.

Total and deterministic: every snapshot, including degenerate all-zero ones,
maps to a summary ending in a period and one to five distinct tokens.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

from picko.domain import ClothingItem, DaySlot, StructuredRecommendation, WeatherSnapshot


MAX_FALLBACK_ITEMS = 5
RAIN_PRECIPITATION_THRESHOLD = 50.0
RAIN_SUFFIX = " with rain expected."


@dataclass(frozen=True)
class TemperatureBand:
    """Average-temperature band (°F, exclusive upper bound) and its outfit."""
    upper_bound: float
    summary: str
    items: Tuple[ClothingItem, ...]


TEMPERATURE_BANDS: Tuple[TemperatureBand, ...] = (
    TemperatureBand(
        upper_bound=40.0,
        summary="Bundle up in a warm coat and cozy layers for the cold.",
        items=(
            ClothingItem.WARM_COAT,
            ClothingItem.SWEATER,
            ClothingItem.PANTS,
            ClothingItem.WARM_HAT,
            ClothingItem.GLOVES,
        ),
    ),
    TemperatureBand(
        upper_bound=55.0,
        summary="A light jacket over a sweater will keep the chill away.",
        items=(ClothingItem.LIGHT_JACKET, ClothingItem.SWEATER, ClothingItem.PANTS, ClothingItem.BOOTS),
    ),
    TemperatureBand(
        upper_bound=70.0,
        summary="Long sleeves and comfy pants are just right for mild weather.",
        items=(ClothingItem.LONG_SLEEVE, ClothingItem.PANTS, ClothingItem.BOOTS),
    ),
    TemperatureBand(
        upper_bound=85.0,
        summary="A t-shirt and light bottoms are perfect for a warm day.",
        items=(ClothingItem.TSHIRT, ClothingItem.SHORTS, ClothingItem.SUN_HAT),
    ),
    TemperatureBand(
        upper_bound=float("inf"),
        summary="Keep cool with a t-shirt, shorts, and sun protection in the heat.",
        items=(ClothingItem.TSHIRT, ClothingItem.SHORTS, ClothingItem.SUN_HAT, ClothingItem.SUNGLASSES),
    ),
)


def select_band(average_temp: float) -> TemperatureBand:
    """Return the band whose upper bound lies above ``average_temp``."""
    for band in TEMPERATURE_BANDS:
        if average_temp < band.upper_bound:
            return band
    # NaN compares False against every bound
    return TEMPERATURE_BANDS[-1]


def rain_expected(precipitation_chance: float, description: str) -> bool:
    """True when precipitation is above 50% or the description mentions rain."""
    return precipitation_chance > RAIN_PRECIPITATION_THRESHOLD or "rain" in (description or "").lower()


def _with_rain_suffix(summary: str) -> str:
    base = summary[:-1] if summary.endswith(".") else summary
    return f"{base}{RAIN_SUFFIX}"


def fallback_recommendation(
    snapshot: WeatherSnapshot,
    slot: DaySlot = DaySlot.TOMORROW,
) -> StructuredRecommendation:
    """Derive a recommendation for ``slot`` from temperature band and rain alone."""
    day = snapshot.day(slot)
    band = select_band((day.high + day.low) / 2)

    summary = band.summary
    items: List[str] = [item.value for item in band.items]
    if rain_expected(day.precipitation_chance, day.description):
        items += [ClothingItem.RAIN_JACKET.value, ClothingItem.RAIN_BOOTS.value]
        summary = _with_rain_suffix(summary)

    # Rain gear is appended before the cap, so five-item bands lose it.
    unique_items = list(dict.fromkeys(items))[:MAX_FALLBACK_ITEMS]
    return StructuredRecommendation(summary=summary, clothing_items=unique_items)
