"""FastAPI application entry point."""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.routes import batch, health, proximity, routes, selections
from .config import settings
from .services.proximity import ProximitySorter, SortCache


def create_app() -> FastAPI:
    app = FastAPI(title=settings.app_name)
    if settings.frontend_allowed_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=list(settings.frontend_allowed_origins),
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.state.selections = {}
    app.state.proximity_sorter = ProximitySorter(
        cache=SortCache(ttl_ms=settings.sort_cache_ttl_ms, max_entries=settings.sort_cache_max_entries),
        batch_size=settings.proximity_batch_size,
    )

    @app.get("/")
    def root():
        return {
            "service": settings.app_name,
            "status": "running",
            "api_prefix": settings.api_prefix,
            "health": f"{settings.api_prefix}/health",
            "docs": "/docs",
        }

    app.include_router(health.router, prefix=settings.api_prefix)
    app.include_router(selections.router, prefix=settings.api_prefix)
    app.include_router(batch.router, prefix=settings.api_prefix)
    app.include_router(proximity.router, prefix=settings.api_prefix)
    app.include_router(routes.router, prefix=settings.api_prefix)
    return app


app = create_app()
