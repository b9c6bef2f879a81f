"""FastAPI application entry point."""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.dependencies import SearchServices, build_services
from .api.routes import health, search
from .config import Settings, settings


def create_app(config: Settings | None = None, services: SearchServices | None = None) -> FastAPI:
    config = config or settings
    app = FastAPI(title=config.app_name, root_path="")
    app.state.search_services = services or build_services(config)

    if config.frontend_allowed_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=list(config.frontend_allowed_origins),
            allow_credentials=True,
            allow_methods=["GET"],
            allow_headers=["*"],
        )

    # Root endpoint for diagnostics
    @app.get("/")
    def root():
        return {
            "service": config.app_name,
            "status": "running",
            "api_prefix": config.api_prefix,
            "health": f"{config.api_prefix}/health",
            "docs": "/docs",
        }

    app.include_router(health.router, prefix=config.api_prefix)
    app.include_router(search.router, prefix=config.api_prefix)
    return app


app = create_app()
