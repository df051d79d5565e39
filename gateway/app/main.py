"""
FastAPI Gateway Application Factory
===================================

This is the main entry point for the backend-for-frontend gateway that sits
between the storefront client and the upstream API.

Architecture:
    Storefront client → Gateway (this service) → Upstream API

Routers:
    - /auth/*       : Login and registration, forwarded upstream
    - /tenants      : Store creation (requires Authorization)
    - /products     : Product listing, query string passed through
    - /health       : Composite gateway + upstream health

Environment Variables:
    - API_URL: Upstream base URL (default: http://localhost:3001/api)
    - API_URL_PROD: Upstream base URL when ENVIRONMENT=production
    - ENVIRONMENT: Runtime mode (default: development)
    - APP_VERSION: Display-only version string
    - UPSTREAM_TIMEOUT_SECONDS: Outbound timeout (default: none)
    - ALLOWED_ORIGINS: Comma-separated CORS origins
    - LOG_LEVEL: Logging level (default: INFO)

Running the Service:
    Development:
        uvicorn gateway.app.main:app --reload --host 0.0.0.0 --port 3000

    Production:
        ENVIRONMENT=production uvicorn gateway.app.main:app --host 0.0.0.0 --port 3000 --workers 4
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

import httpx
import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .auth import auth_router
from .config import Settings, get_settings
from .exceptions import GENERIC_ERROR_MESSAGE
from .health import HealthAggregator
from .proxy import proxy_router
from .proxy.forwarder import RequestForwarder

SERVICE_NAME = "storefront-gateway"


def setup_logging(log_level: str = "INFO") -> None:
    """
    Configure structured logging for the application.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format='{"timestamp": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", "message": "%(message)s", "module": "%(module)s", "function": "%(funcName)s"}',
        handlers=[logging.StreamHandler(sys.stdout)]
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Logs startup and shutdown. Upstream connections are opened per request,
    so there is nothing to close on shutdown.
    """
    settings: Settings = app.state.settings
    logger = logging.getLogger("gateway.main")

    logger.info(
        "Gateway service started",
        extra={
            "upstream_url": settings.upstream_base_url,
            "environment": settings.ENVIRONMENT,
            "version": settings.APP_VERSION,
        }
    )

    yield

    logger.info("Gateway service shutdown complete")


def create_app(
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """
    Application factory function.

    Creates and configures the FastAPI application instance with:
        - Lifespan management
        - CORS middleware
        - Route handlers
        - Exception handlers

    Args:
        settings: Settings to use; resolved from the environment when omitted
        transport: Optional httpx transport shared by the forwarder and the
            health probe (tests pass an httpx.MockTransport here)

    Returns:
        FastAPI: Configured application instance
    """
    settings = settings or get_settings()
    setup_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title="Storefront Gateway",
        description="Backend-for-frontend gateway for the storefront client",
        version=settings.APP_VERSION,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.forwarder = RequestForwarder(settings, transport=transport)
    app.state.health_aggregator = HealthAggregator(settings, transport=transport)

    if settings.allowed_origins_list:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.allowed_origins_list,
            allow_credentials=True,
            allow_methods=["GET", "POST", "OPTIONS"],
            allow_headers=["Content-Type", "Authorization"],
        )

    app.include_router(auth_router, prefix="/auth", tags=["Authentication"])
    app.include_router(proxy_router, tags=["Upstream Proxy"])

    @app.get("/health", tags=["System"])
    async def health_check() -> JSONResponse:
        """
        Composite health check.

        Returns:
            200 with the report when the probe completed, 500 otherwise
        """
        report = await app.state.health_aggregator.check_health()
        return JSONResponse(
            status_code=200 if report.status == "ok" else 500,
            content=report.model_dump(mode="json", exclude={"error"} if report.error is None else None),
        )

    @app.get("/", tags=["System"])
    async def root() -> Dict[str, Any]:
        return {
            "service": SERVICE_NAME,
            "version": settings.APP_VERSION,
            "endpoints": {
                "health": "/health",
                "auth": "/auth",
                "tenants": "/tenants",
                "products": "/products",
            }
        }

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        """Render framework HTTP errors (404, 405, 503) in the message envelope."""
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """
        Global exception handler for unhandled errors.

        Logs the error and returns the generic error envelope.
        """
        logger = logging.getLogger("gateway.main")
        logger.error(
            f"Unhandled exception: {str(exc)}",
            extra={
                "path": request.url.path,
                "method": request.method,
                "exception_type": type(exc).__name__
            },
            exc_info=True
        )

        return JSONResponse(
            status_code=500,
            content={"message": GENERIC_ERROR_MESSAGE},
        )

    return app


app = create_app()


if __name__ == "__main__":
    settings = get_settings()

    uvicorn.run(
        "gateway.app.main:app",
        host=settings.GATEWAY_HOST,
        port=settings.GATEWAY_PORT,
        reload=not settings.is_production,
        log_level=settings.LOG_LEVEL.lower()
    )
