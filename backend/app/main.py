"""
FastAPI application entry point.

Uses structured logging from core.logging module. The Redis response cache
is built once per application, connected in the lifespan and handed to the
caching middleware through their constructors.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from core.cache import CacheKeys, RedisCache
from core.config import Settings, get_settings
from core.db import db
from core.logging import RequestLoggingMiddleware, configure_logging, get_logger

from .error_handlers import register_exception_handlers
from .middleware import CacheInvalidationMiddleware, RequestIDMiddleware, ResponseCacheMiddleware
from .routers import calls as calls_router
from .routers import cash as cash_router
from .routers import directors as directors_router
from .routers import masters as masters_router
from .routers import orders as orders_router
from .routers import reports as reports_router

logger = get_logger("api")


def _add_cache_middleware(app: FastAPI, cache: RedisCache, settings: Settings) -> None:
    """
    Wire the read-through cache and the per-resource invalidation.

    Order writes touch master listings (embedded orders), the cash register
    (income on close) and every report, so they invalidate all of them.
    Calls are read-only and only expire.
    """
    prefix = settings.api_prefix
    orders = f"{prefix}/orders"
    masters = f"{prefix}/masters"
    cash = f"{prefix}/cash"
    reports = f"{prefix}/reports"
    calls = f"{prefix}/calls"
    directors = f"{prefix}/admin/directors"

    app.add_middleware(
        ResponseCacheMiddleware,
        cache=cache,
        ttl=settings.cache_response_ttl,
        paths=(orders, masters, cash, reports, calls, directors),
    )

    # Cached resource -> write paths that make it stale
    invalidation = {
        orders: (orders, masters),
        masters: (masters, orders),
        cash: (cash, orders),
        reports: (orders, masters, cash),
        directors: (directors,),
    }
    for resource, write_paths in invalidation.items():
        app.add_middleware(
            CacheInvalidationMiddleware,
            cache=cache,
            pattern=CacheKeys.resource_pattern(resource),
            paths=write_paths,
        )


def create_app(settings: Settings | None = None, cache: RedisCache | None = None) -> FastAPI:
    settings = settings or get_settings()
    cache = cache or RedisCache.from_settings(settings)

    configure_logging(level="DEBUG" if settings.debug else "INFO")

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("app_startup", app_name=settings.app_name, env=settings.env)

        db.initialize(settings)
        db.create_all_tables()
        logger.info("database_initialized")

        if await cache.connect() is None:
            logger.info("cache_disabled", configured=cache.is_configured)
        try:
            yield
        finally:
            await cache.close()
            logger.info("app_shutdown")

    app = FastAPI(title=settings.app_name, debug=settings.debug, lifespan=lifespan)
    app.state.settings = settings
    app.state.cache = cache

    # Innermost first: each add_middleware call wraps everything added before it
    _add_cache_middleware(app, cache, settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Accept", "Origin", "X-Requested-With"],
    )

    # Structured request logging middleware
    app.add_middleware(RequestLoggingMiddleware)

    # Request ID middleware (for tracing)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    @app.get("/health", tags=["health"])
    def health_check():
        """Health check endpoint (liveness probe)."""
        return {"status": "ok"}

    @app.get("/health/ready", tags=["health"])
    async def readiness_check():
        """
        Readiness check endpoint.

        The database is required. The cache is optional and never makes the
        service not-ready.

        Returns 200 if ready, 503 if not ready.
        """
        database = db.health_check()
        cache_status = await cache.health_check()
        checks = {
            "database": database["healthy"],
            "cache": cache_status["status"],
        }

        if not database["healthy"]:
            logger.warning("readiness_check_failed", error=database["error"])
            return JSONResponse(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                content={"status": "not_ready", "checks": checks},
            )
        return {"status": "ready", "checks": checks}

    app.include_router(orders_router.router, prefix=settings.api_prefix)
    app.include_router(masters_router.router, prefix=settings.api_prefix)
    app.include_router(cash_router.router, prefix=settings.api_prefix)
    app.include_router(reports_router.router, prefix=settings.api_prefix)
    app.include_router(calls_router.router, prefix=settings.api_prefix)
    app.include_router(directors_router.router, prefix=settings.api_prefix)

    return app


app = create_app()
