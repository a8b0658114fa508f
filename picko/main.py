"""FastAPI application setup for the Picko outfit-advice service."""

import os

from fastapi import FastAPI

from utils.logging_utils import setup_logging

setup_logging(level=os.getenv("PICKO_LOG_LEVEL", "INFO"), job_name="picko_api")

from .api import router as api_router  # noqa: E402

app = FastAPI(title="Picko")


@app.get("/health")
def health():
    """Liveness probe."""
    return {"status": "ok"}


app.include_router(api_router, prefix="/v1")
