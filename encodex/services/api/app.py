from __future__ import annotations

from fastapi import FastAPI

from encodex.common.settings import get_settings
from encodex.services.api.routers import health, media

cfg = get_settings()


def create_app() -> FastAPI:
    app = FastAPI(
        title="Encodex API",
        version="0.1.0",
        docs_url=f"{cfg.api.prefix}/docs",
        openapi_url=f"{cfg.api.prefix}/openapi.json",
    )

    # Routers
    app.include_router(health.router)
    app.include_router(media.router)
    return app

app = create_app()
