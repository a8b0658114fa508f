"""Thin client for the Newell text-generation endpoint."""

import requests

from .config import settings
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="newell_client")


class GenerationError(RuntimeError):
    """Base class for failed generation requests."""


class GenerationAPIError(GenerationError):
    """Transport failure or non-2xx response from the generation API."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class GenerationAuthError(GenerationAPIError):
    """403 from the generation API: the project id was rejected."""


class NewellClient:
    """Minimal client for ``POST /v1/generate/text``; returns the raw text body."""

    def __init__(
        self,
        base_url: str | None = None,
        project_id: str | None = None,
        *,
        max_tokens: int | None = None,
        temperature: float | None = None,
        timeout: float | None = None,
    ):
        self.url = f"{(base_url or settings.newell_api_url).rstrip('/')}/v1/generate/text"
        self.project_id = project_id or settings.project_id
        self.max_tokens = max_tokens if max_tokens is not None else settings.generation_max_tokens
        self.temperature = temperature if temperature is not None else settings.generation_temperature
        self.timeout = timeout if timeout is not None else settings.generation_timeout_seconds

    def generate_text(self, prompt: str) -> str:
        """Send ``prompt`` and return the response body as text. No retries."""
        payload = {
            "project_id": self.project_id,
            "prompt": prompt,
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
        }
        logger.debug("Newell POST payload: prompt_chars=%d max_tokens=%d", len(prompt), self.max_tokens)

        try:
            r = requests.post(self.url, json=payload, timeout=self.timeout)
        except requests.exceptions.RequestException as exc:
            logger.error("Newell POST failed: %s", exc)
            raise GenerationAPIError(f"Newell request failed: {exc}") from exc

        logger.info(
            "Newell POST took %.2fs, status %d",
            r.elapsed.total_seconds(),
            r.status_code,
        )
        if r.status_code == 403:
            raise GenerationAuthError("Project validation failed", status_code=403)
        if not 200 <= r.status_code < 300:
            raise GenerationAPIError(
                f"API error: {r.status_code}: {(r.text or '')[:200]}", status_code=r.status_code
            )
        return r.text
