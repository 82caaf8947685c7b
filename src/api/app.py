from __future__ import annotations

from fastapi import FastAPI

from core.settings import Settings, get_settings
from math_pipeline import __version__
from math_pipeline.config import AppConfig, load_config
from math_pipeline.core import MathService
from math_pipeline.logging import init_logging

from .routers import health, math, search


def create_app(config: AppConfig | None = None, service: MathService | None = None) -> FastAPI:
    config = config or _prepare_config(get_settings())
    init_logging(config.runtime)

    app = FastAPI(title="Math Pipeline", version=__version__)
    app.state.config = config
    app.state.service = service or MathService(config)

    app.include_router(health.router)
    app.include_router(math.router)
    app.include_router(search.router)
    return app


def _prepare_config(settings: Settings) -> AppConfig:
    config = load_config(settings.config_path)
    if settings.log_level:
        config.runtime.log_level = settings.log_level.upper()
    return config


__all__ = ["create_app"]
