"""PC Finder engine — FastAPI application.

Mounts the internal gateway (/internal/*) used by the storefront backend.
The catalog is loaded once at startup and shared read-only by every request.
"""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from pcfinder import __version__
from pcfinder.api.internal import router as internal_router
from pcfinder.api.internal import set_cache, set_catalog_provider
from pcfinder.cache.redis_cache import RecommendationCache
from pcfinder.catalog.repository import CatalogProvider
from pcfinder.errors import CatalogUnavailable, InvalidProfile

logger = logging.getLogger(__name__)

CATALOG_PATH = os.getenv("PCFINDER_CATALOG_PATH")


# ──────────────────────────────────────────────
# Error Handlers
# ──────────────────────────────────────────────


async def invalid_profile_handler(request: Request, exc: InvalidProfile) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content={"detail": str(exc), "errors": exc.errors},
    )


async def catalog_unavailable_handler(request: Request, exc: CatalogUnavailable) -> JSONResponse:
    logger.error("Catalog unavailable: %s", exc)
    return JSONResponse(status_code=503, content={"detail": str(exc)})


# ──────────────────────────────────────────────
# App
# ──────────────────────────────────────────────


def create_app(
    catalog_provider: Optional[CatalogProvider] = None,
    cache: Optional[RecommendationCache] = None,
) -> FastAPI:
    """Factory function — creates and configures the FastAPI app.

    Args:
        catalog_provider: Catalog source; defaults to PCFINDER_CATALOG_PATH
            or the bundled catalog.
        cache: Cache instance; defaults to Redis at REDIS_URL.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Load the catalog and connect the cache on startup."""
        provider = catalog_provider or CatalogProvider.from_path(CATALOG_PATH)
        try:
            catalog = provider.get()
            logger.info("Catalog ready: %d entries", len(catalog.components()))
        except CatalogUnavailable as e:
            # Keep serving /health; recommendation routes answer 503
            logger.error("Catalog failed to load: %s", e)

        active_cache = cache or RecommendationCache()
        cache_connected = await active_cache.connect()

        set_catalog_provider(provider)
        set_cache(active_cache if cache_connected else None)

        if not cache_connected:
            logger.warning("Redis unavailable, caching disabled")

        yield

        await active_cache.disconnect()
        set_catalog_provider(None)
        set_cache(None)
        logger.info("Shutting down PC Finder engine")

    app = FastAPI(
        title="PC Finder Engine",
        description=(
            "Build recommendation and synergy scoring for the PC Finder storefront.\n\n"
            "- **Internal** (`/internal/*`): storefront backend, no auth required\n"
        ),
        version=__version__,
        lifespan=lifespan,
    )

    allowed_origins = os.getenv(
        "CORS_ORIGINS",
        "http://localhost:3000,http://localhost:5173",
    ).split(",")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in allowed_origins],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(InvalidProfile, invalid_profile_handler)
    app.add_exception_handler(CatalogUnavailable, catalog_unavailable_handler)

    app.include_router(internal_router)

    @app.get("/", tags=["Root"])
    async def root():
        return {
            "engine": "PC Finder",
            "version": __version__,
            "gateways": {"internal": "/internal"},
        }

    return app


# ──────────────────────────────────────────────
# Entrypoint
# ──────────────────────────────────────────────

app = create_app()

if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(
        "pcfinder.api.app:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", "8000")),
        reload=True,
    )
