"""
Recommendation pipeline: cache check, prompt, generation, parse, fallback.

Only successfully parsed generated recommendations are cached. Fallback
results are returned but never stored, so the next request tries generation
again instead of sticking with the rule-based answer for twelve hours.
"""

from __future__ import annotations

import asyncio

from picko.domain import (
    ClothingStyle,
    DailyRecommendations,
    DaySlot,
    StructuredRecommendation,
    UserPreferences,
    WeatherSnapshot,
)
from picko.fallback import fallback_recommendation
from picko.newell_client import GenerationError, NewellClient
from picko.prompt_builder import build_prompt
from picko.recommendation_cache import RecommendationCache
from picko.recommendation_parser import ParseFailure, parse_recommendation
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="recommendation_service")


class RecommendationService:
    """Produces one recommendation per slot, concurrently for today and tomorrow."""

    def __init__(self, cache: RecommendationCache, client: NewellClient) -> None:
        self.cache = cache
        self.client = client

    async def get_recommendation(
        self,
        slot: DaySlot,
        snapshot: WeatherSnapshot,
        age: int,
        style: ClothingStyle,
    ) -> StructuredRecommendation:
        """Return the cached recommendation for ``slot`` or generate a new one."""
        slot = DaySlot(slot)
        cached = await self.cache.get(slot)
        if cached is not None:
            logger.info("Using cached recommendation for %s", slot.value)
            return cached

        prompt = build_prompt(snapshot, age, style, slot)
        try:
            raw_text = await asyncio.to_thread(self.client.generate_text, prompt)
        except GenerationError as exc:
            logger.warning("Generation failed for %s; using fallback: %s", slot.value, exc)
            return fallback_recommendation(snapshot, slot)

        parsed = parse_recommendation(raw_text)
        if isinstance(parsed, ParseFailure):
            logger.warning(
                "Could not parse generated recommendation for %s (%s); using fallback",
                slot.value,
                parsed.reason,
            )
            logger.debug("Unparseable generation output: %r", parsed.raw_text[:500])
            return fallback_recommendation(snapshot, slot)

        try:
            await self.cache.set(slot, parsed)
        except Exception as exc:
            # the computed recommendation is still returned
            logger.error("Cache write failed for %s: %s", slot.value, exc)
        return parsed

    async def get_daily_recommendations(
        self,
        snapshot: WeatherSnapshot,
        preferences: UserPreferences,
    ) -> DailyRecommendations:
        """Run the today and tomorrow pipelines together and join them."""
        today, tomorrow = await asyncio.gather(
            self.get_recommendation(DaySlot.TODAY, snapshot, preferences.child_age, preferences.clothing_style),
            self.get_recommendation(DaySlot.TOMORROW, snapshot, preferences.child_age, preferences.clothing_style),
        )
        return DailyRecommendations(today=today, tomorrow=tomorrow)
