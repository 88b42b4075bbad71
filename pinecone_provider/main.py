"""FastAPI app entry: config, logging, provider lifecycle, health, and graceful shutdown."""

from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from pinecone_provider import __version__
from pinecone_provider.config.logging import configure_logging, get_logger
from pinecone_provider.config.settings import Settings, get_settings
from pinecone_provider.controllers.routes.index_data_source import router as index_data_source_router
from pinecone_provider.controllers.routes.index_resource import router as index_resource_router
from pinecone_provider.controllers.routes.provider import router as provider_router
from pinecone_provider.models.resource import ProviderConfigModel
from pinecone_provider.resources.controlplane.base import BaseControlPlaneClient
from pinecone_provider.resources.controlplane.health import ping_controlplane
from pinecone_provider.services.diagnostics import Diagnostics
from pinecone_provider.services.provider import PineconeProvider

logger = get_logger(__name__)


def create_app(settings: Settings | None = None, client: BaseControlPlaneClient | None = None) -> FastAPI:
    """Build the app. client replaces the backend chosen by settings (tests pass the in-memory one)."""
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup: logging and provider from the environment. Shutdown: stop waits, close the client."""
        configure_logging(settings)
        logger.info("Application starting", extra={"app_name": settings.app_name, "environment": settings.environment})
        provider = PineconeProvider(settings=settings, client=client)
        # Environment-only configuration; a host may still POST /v1/provider/configure later
        diagnostics = Diagnostics()
        await provider.configure(ProviderConfigModel(), diagnostics)
        for diagnostic in diagnostics:
            logger.warning("Provider not configured at startup", extra={"summary": diagnostic.summary})
        app.state.provider = provider
        yield
        logger.info("Application shutting down")
        await provider.shutdown()
        logger.info("Shutdown complete")

    app = FastAPI(
        title="Pinecone Index Provider",
        description="Declarative lifecycle management for Pinecone indexes",
        version=__version__,
        lifespan=lifespan,
    )
    app.include_router(provider_router)
    app.include_router(index_resource_router)
    app.include_router(index_data_source_router)

    @app.get("/health")
    async def health() -> dict[str, Any]:
        """Liveness: service is up. Does not check dependencies."""
        return {"status": "ok"}

    @app.get("/ready")
    async def ready(request: Request):
        """Readiness: provider configured and the controller answers an authenticated list call."""
        controlplane = await ping_controlplane(request.app.state.provider.client)
        ok = controlplane.get("ok", False)
        body = {
            "status": "ok" if ok else "degraded",
            "controlplane": {"ok": ok, "error": controlplane.get("error")},
        }
        return JSONResponse(content=body, status_code=200 if ok else 503)

    @app.exception_handler(Exception)
    async def global_exception_handler(_request: Request, exc: Exception):
        """Connection failures and timeouts get a 503; anything else a non-leaking 500."""
        exc_name = type(exc).__name__
        if "Connection" in exc_name or "Timeout" in exc_name:
            logger.warning("Connection or timeout error", extra={"error": exc_name})
            return JSONResponse(
                content={"detail": "A dependency is temporarily unavailable. Please retry later."},
                status_code=503,
            )
        logger.exception("Unhandled error")
        return JSONResponse(
            content={"detail": "An internal error occurred."},
            status_code=500,
        )

    return app


app = create_app()


def run() -> None:
    """Console entry point: serve the app with uvicorn on the configured host and port."""
    import uvicorn

    settings = get_settings()
    uvicorn.run("pinecone_provider.main:app", host=settings.host, port=settings.port, log_level=settings.log_level.lower())
