from __future__ import annotations

import logging
import os

from fastapi import FastAPI
from pydantic import BaseModel

from app.config import get_weather_settings, load_env_files


class HealthResponse(BaseModel):
    status: str
    weather_enabled: bool


def _configure_logging() -> None:
    """
    Configure root logging once for the API process.
    """

    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.
    """

    load_env_files()
    _configure_logging()

    weather_settings = get_weather_settings()

    application = FastAPI(
        title="WeerOmzet API",
        version="1.0.0",
    )

    from app.api.routers import sales_analysis_router

    application.include_router(sales_analysis_router)

    @application.get("/health", response_model=HealthResponse)
    def healthcheck() -> HealthResponse:
        return HealthResponse(status="ok", weather_enabled=weather_settings.enabled)

    logging.getLogger(__name__).info(
        "API configured weather_enabled=%s", weather_settings.enabled
    )
    return application


app = create_app()
