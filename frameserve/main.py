# frameserve/main.py — only app wiring, no endpoints here.
from typing import Optional

from fastapi import FastAPI

from frameserve.core.config import Settings, load_settings
from frameserve.middleware.auth import AuthGateMiddleware
from frameserve.middleware.security import SecurityHeadersMiddleware
from frameserve.services.assets import load_assets

# import routers
from frameserve.api.routes import health, photos, ui


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the app around one immutable Settings object (loaded from env if omitted)."""
    settings = settings or load_settings()

    app = FastAPI(title="Frameserve", version="1.0", docs_url=None, redoc_url=None, openapi_url=None)
    app.state.settings = settings
    app.state.assets = load_assets()

    # API routers
    app.include_router(photos.api_router, prefix="/api")

    # public (non-API) routers: UI, image bytes, health
    app.include_router(ui.router)
    app.include_router(photos.public_router)   # /photos/*
    app.include_router(health.router)          # /healthz

    # Middleware added last runs first: security headers wrap the auth gate,
    # so 401 pages and token redirects get them too.
    if settings.auth_enabled:
        app.add_middleware(AuthGateMiddleware, token=settings.auth_token)
    app.add_middleware(SecurityHeadersMiddleware)
    return app
