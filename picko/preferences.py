"""Persistence of the child profile, with cache invalidation on every change."""

from __future__ import annotations

import asyncio
from typing import Optional

from pydantic import ValidationError

from picko.domain import ClothingStyle, UserPreferences
from picko.kv_store import KeyValueStore
from picko.recommendation_cache import RecommendationCache
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="preferences")

PREFERENCES_KEY = "user_preferences"


class PreferencesStore:
    """
    Load and save ``UserPreferences`` in a key-value store.

    Cached recommendations are personalized by age and style but are not keyed
    by them, so every mutation clears the recommendation cache.
    """

    def __init__(self, store: KeyValueStore, cache: Optional[RecommendationCache] = None) -> None:
        self.store = store
        self.cache = cache

    async def get(self) -> UserPreferences:
        """Return stored preferences, or defaults when missing or unreadable."""
        try:
            raw = await asyncio.to_thread(self.store.get, PREFERENCES_KEY)
        except Exception as exc:
            logger.error("Error loading preferences: %s", exc)
            return UserPreferences()
        if not raw:
            return UserPreferences()
        try:
            return UserPreferences.model_validate_json(raw)
        except ValidationError as exc:
            logger.warning("Stored preferences are invalid; using defaults: %s", exc)
            return UserPreferences()

    async def save(self, preferences: UserPreferences) -> None:
        """Persist ``preferences`` and invalidate cached recommendations."""
        try:
            await asyncio.to_thread(self.store.set, PREFERENCES_KEY, preferences.model_dump_json())
        except Exception as exc:
            logger.error("Error saving preferences: %s", exc)
            raise
        await self._invalidate_cache()

    async def update(self, **changes) -> UserPreferences:
        """Merge ``changes`` into the stored preferences; raises ValidationError on bad values."""
        current = await self.get()
        updated = UserPreferences.model_validate({**current.model_dump(), **changes})
        await self.save(updated)
        return updated

    async def complete_setup(self, child_age: int, clothing_style: ClothingStyle) -> UserPreferences:
        """Record first-launch answers and mark setup as done."""
        preferences = UserPreferences(
            child_age=child_age,
            clothing_style=clothing_style,
            has_completed_setup=True,
        )
        await self.save(preferences)
        return preferences

    async def reset(self) -> None:
        """Forget the profile and every cached recommendation."""
        try:
            await asyncio.to_thread(self.store.remove, PREFERENCES_KEY)
        except Exception as exc:
            logger.error("Error resetting preferences: %s", exc)
            raise
        await self._invalidate_cache()

    async def _invalidate_cache(self) -> None:
        if self.cache is not None:
            await self.cache.clear_all()
