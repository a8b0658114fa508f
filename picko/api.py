"""HTTP API for weather-driven toddler outfit recommendations."""

import asyncio
import hmac
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Query, status
from pydantic import BaseModel, ValidationError

from .config import settings
from .domain import (
    ClothingStyle,
    StructuredRecommendation,
    UserPreferences,
    WeatherSnapshot,
)
from .kv_store import build_store
from .newell_client import NewellClient
from .preferences import PreferencesStore
from .recommendation_cache import RecommendationCache
from .recommendation_service import RecommendationService
from .weather_service import OpenMeteoWeatherProvider, WeatherUnavailableError
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="api")


def require_api_key(x_api_key: str | None = Header(default=None)):
    """Validate the X-API-Key header against the static api_key setting, if one is set."""
    if not settings.api_key:
        logger.debug("No API key configured; allowing all requests")
        return

    if not x_api_key:
        logger.debug("No API key provided")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing API key")

    if hmac.compare_digest(str(x_api_key), str(settings.api_key)):
        return

    logger.debug("Invalid API key provided")
    raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid API key")


router = APIRouter(dependencies=[Depends(require_api_key)])

STORE = build_store(settings)
CACHE = RecommendationCache(STORE, ttl_ms=settings.cache_ttl_ms)
PREFERENCES = PreferencesStore(STORE, cache=CACHE)
RECOMMENDATIONS = RecommendationService(CACHE, NewellClient())
WEATHER = OpenMeteoWeatherProvider()


class RecommendationsResponse(BaseModel):
    """Forecast plus one recommendation per day slot."""
    location: str
    weather: WeatherSnapshot
    preferences: UserPreferences
    today: StructuredRecommendation
    tomorrow: StructuredRecommendation


class PreferencesUpdate(BaseModel):
    """Partial preferences update; omitted fields keep their stored values."""
    child_age: Optional[int] = None
    clothing_style: Optional[ClothingStyle] = None
    has_completed_setup: Optional[bool] = None


class SetupRequest(BaseModel):
    """First-launch answers."""
    child_age: int
    clothing_style: ClothingStyle = ClothingStyle.NEUTRAL


class PreferencesResponse(BaseModel):
    """Preferences response payload."""
    preferences: UserPreferences


async def _fetch_snapshot(latitude: float, longitude: float) -> WeatherSnapshot:
    """Fetch the forecast off the event loop, mapping provider failures to 502."""
    try:
        return await asyncio.to_thread(WEATHER.fetch_snapshot, latitude, longitude)
    except WeatherUnavailableError as exc:
        logger.error("Weather unavailable for (%s, %s): %s", latitude, longitude, exc)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Weather data unavailable.")


def _validation_error(exc: ValidationError) -> HTTPException:
    return HTTPException(
        status_code=422,
        detail=exc.errors(include_url=False, include_context=False),
    )


@router.get("/weather", response_model=WeatherSnapshot)
async def get_weather(
    latitude: float = Query(ge=-90, le=90),
    longitude: float = Query(ge=-180, le=180),
):
    """Return the normalized forecast for a coordinate pair."""
    return await _fetch_snapshot(latitude, longitude)


@router.get("/recommendations", response_model=RecommendationsResponse)
async def get_recommendations(
    latitude: float = Query(ge=-90, le=90),
    longitude: float = Query(ge=-180, le=180),
):
    """Fetch the forecast, then today's and tomorrow's outfits concurrently."""
    snapshot = await _fetch_snapshot(latitude, longitude)
    prefs = await PREFERENCES.get()
    logger.info(
        "Recommending for %s (age=%d, style=%s)",
        snapshot.location,
        prefs.child_age,
        prefs.clothing_style.value,
    )
    daily = await RECOMMENDATIONS.get_daily_recommendations(snapshot, prefs)
    return RecommendationsResponse(
        location=snapshot.location,
        weather=snapshot,
        preferences=prefs,
        today=daily.today,
        tomorrow=daily.tomorrow,
    )


@router.delete("/recommendations/cache", status_code=status.HTTP_204_NO_CONTENT)
async def clear_recommendation_cache():
    """Drop cached recommendations for both slots."""
    await CACHE.clear_all()


@router.get("/preferences", response_model=PreferencesResponse)
async def get_preferences():
    """Return stored preferences (defaults before setup)."""
    return PreferencesResponse(preferences=await PREFERENCES.get())


@router.put("/preferences", response_model=PreferencesResponse)
async def update_preferences(req: PreferencesUpdate):
    """Apply a partial update; cached recommendations are cleared."""
    changes = req.model_dump(exclude_none=True)
    try:
        prefs = await PREFERENCES.update(**changes)
    except ValidationError as exc:
        raise _validation_error(exc)
    return PreferencesResponse(preferences=prefs)


@router.post("/preferences/setup", response_model=PreferencesResponse)
async def complete_setup(req: SetupRequest):
    """Store first-launch answers and mark setup complete."""
    try:
        prefs = await PREFERENCES.complete_setup(req.child_age, req.clothing_style)
    except ValidationError as exc:
        raise _validation_error(exc)
    return PreferencesResponse(preferences=prefs)


@router.post("/preferences/reset", response_model=PreferencesResponse)
async def reset_preferences():
    """Forget the profile and cached recommendations."""
    await PREFERENCES.reset()
    return PreferencesResponse(preferences=await PREFERENCES.get())
