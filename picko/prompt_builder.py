"""Prompt construction for the clothing recommendation request."""

from __future__ import annotations

from picko.domain import ClothingStyle, DaySlot, WeatherSnapshot, vocabulary_for


SUMMARY_PREFIX = "SUMMARY:"
CLOTHING_PREFIX = "CLOTHING:"

LAYERING_RULES = """Layering rules (follow all of them):
- Pick at most ONE top (tshirt, long-sleeve, sweater, hoodie).
- Pick at most ONE outerwear layer (light-jacket, warm-coat, rain-jacket).
- Pick at most ONE bottom (pants, jeans, shorts).
- Below 40°F: warm-coat, sweater, pants, warm-hat, gloves.
- 40-54°F: light-jacket or warm-coat, long-sleeve or sweater, pants, boots.
- 55-69°F: long-sleeve or hoodie, pants or jeans, optionally a light-jacket.
- 70-84°F: tshirt, shorts or light pants, sun-hat.
- 85°F and above: tshirt, shorts, sun-hat, sunglasses.
- Add rain-jacket and rain-boots when rain is likely.
- Never combine: sweater with hoodie, shorts with warm-hat, shorts with gloves, warm-coat with sun-hat, tshirt with warm-coat, light-jacket with warm-coat, rain-jacket with warm-coat."""

GIRL_LAYERING_RULE = (
    "- A dress counts as the top and needs no other bottom; skirt and leggings count as bottoms. "
    "Never combine dress with shorts, or skirt with pants."
)


def age_phrase(age: int) -> str:
    """Describe a child's age bracket in plain words."""
    if age <= 1:
        return "infant/toddler"
    if age <= 3:
        return "toddler"
    if age <= 5:
        return "preschooler"
    if age <= 7:
        return "young child"
    return "child"


def _fmt(value: float) -> str:
    """Render whole numbers without a trailing .0."""
    return str(int(value)) if float(value).is_integer() else f"{value:.1f}"


def build_prompt(
    snapshot: WeatherSnapshot,
    age: int,
    style: ClothingStyle,
    slot: DaySlot = DaySlot.TOMORROW,
) -> str:
    """
    Build the instruction string sent to the generation API.

    Deterministic and side-effect free. ``age`` is not validated here; it only
    selects the phrase describing the child.
    """
    style = ClothingStyle(style)
    slot = DaySlot(slot)
    day = snapshot.day(slot)
    vocabulary = ", ".join(item.value for item in vocabulary_for(style))

    lines = [
        "You are a helpful weather assistant for parents.",
        f"Recommend what a {age}-year-old {age_phrase(age)} should wear {slot.value} "
        f"in {snapshot.location}. Clothing style preference: {style.value}.",
        "",
        f"Weather forecast for {slot.value}:",
        f"- Temperature: High of {_fmt(day.high)}°F, Low of {_fmt(day.low)}°F",
        f"- Conditions: {day.description}",
        f"- Wind: {_fmt(day.wind_speed)} mph",
        f"- Chance of precipitation: {_fmt(day.precipitation_chance)}%",
        "",
        f"Use ONLY these clothing items: {vocabulary}",
        "",
        LAYERING_RULES,
        *([GIRL_LAYERING_RULE] if style is ClothingStyle.GIRL else []),
        "",
        "Respond with exactly two lines and nothing else:",
        f"{SUMMARY_PREFIX} <one friendly sentence about what to wear>",
        f"{CLOTHING_PREFIX} <comma-separated clothing items from the list above>",
        "",
        "Example:",
        f"{SUMMARY_PREFIX} A cozy sweater and warm coat will keep your little one toasty.",
        f"{CLOTHING_PREFIX} warm-coat, sweater, pants, warm-hat, gloves",
    ]
    return "\n".join(lines)
