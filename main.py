"""
Developer Portal Health API Server

Probes the health and system information of components deployed across
landscapes through the portal's proxy gateway.
"""

import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from devportal.api.config import APIConfig
from devportal.api.handlers.health import (
    check_batch,
    check_catalog_landscape,
    check_health,
    lookup_system_info,
    probe_url,
)
from devportal.api.middleware.request_logger import RequestLoggerMiddleware
from devportal.api.models.errors import (
    health_service_unavailable,
    invalid_request_error,
    not_found_error,
    server_error,
)
from devportal.api.models.health import (
    BatchHealthRequest,
    BatchHealthResponse,
    LandscapeList,
    LandscapeOut,
    ProbeOutcomeOut,
    ProbeRequest,
    SystemInfoOut,
    SystemInfoRequest,
)
from devportal.core.health_service import ComponentHealthService
from devportal.lib.cancellation import CancellationToken
from devportal.lib.config import ConfigLoader
from devportal.lib.logger import setup_logging

logger = logging.getLogger(__name__)

DISCONNECT_POLL_SECONDS = 0.5


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load the catalog and open the proxy client."""
    logger.info("Starting developer portal health API server")

    if getattr(app.state, "catalog", None) is None:
        try:
            app.state.catalog = ConfigLoader(config_dir=config.get("catalog.config_dir", "config"))
        except ValueError as e:
            logger.error(f"Failed to load component catalog: {e}")
            app.state.catalog = None

    proxy_client = None
    if getattr(app.state, "health_service", None) is None:
        if app.state.catalog is not None:
            proxy_client = app.state.catalog.proxy.create_client()
            app.state.health_service = ComponentHealthService(proxy_client)
            logger.info(f"Proxy client initialized for {proxy_client.base_url}")
        else:
            logger.error("No proxy configuration - component health endpoints disabled")

    yield

    logger.info("Shutting down health API server")
    if proxy_client is not None:
        await proxy_client.close()


app = FastAPI(
    title="Developer Portal Health API",
    description="Component health and system information aggregated through the portal proxy",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

config = APIConfig()
app.state.config = config

setup_logging(
    log_level=config.get("logging.level", "INFO"),
    log_file=config.get("logging.file"),
    structured=config.get("logging.structured", False),
)

if config.get("cors.enabled", True):
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.get("cors.allow_origins", ["*"]),
        allow_credentials=True,
        allow_methods=config.get("cors.allow_methods", ["GET", "POST", "OPTIONS"]),
        allow_headers=config.get("cors.allow_headers", ["Content-Type", "Authorization"]),
    )

app.add_middleware(RequestLoggerMiddleware)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Return unexpected exceptions in the standard error envelope."""
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)

    return JSONResponse(status_code=500, content=server_error().model_dump())


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """Unwrap ErrorResponse bodies so errors sit at the top level."""
    if isinstance(exc.detail, dict) and "error" in exc.detail:
        return JSONResponse(status_code=exc.status_code, content=exc.detail)

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": {
                "message": str(exc.detail),
                "type": "api_error",
                "param": None,
                "code": None,
            }
        },
    )


def _health_service() -> ComponentHealthService:
    service = getattr(app.state, "health_service", None)
    if service is None:
        raise HTTPException(status_code=503, detail=health_service_unavailable().model_dump())
    return service


@asynccontextmanager
async def _request_token(request: Request):
    """Cancellation token that fires when the HTTP client goes away."""
    token = CancellationToken()

    async def watch():
        while not token.cancelled:
            if await request.is_disconnected():
                token.cancel("client disconnected")
                return
            await asyncio.sleep(DISCONNECT_POLL_SECONDS)

    watcher = asyncio.create_task(watch())
    try:
        yield token
    finally:
        watcher.cancel()


@app.get("/")
async def root():
    """API root endpoint."""
    return {
        "message": "Developer Portal Health API",
        "version": "0.1.0",
        "docs": "/docs",
        "endpoints": {
            "health": "/health",
            "landscapes": "/v1/landscapes",
            "landscape_health": "/v1/landscapes/{name}/health",
            "batch": "/v1/health/batch",
            "probe": "/v1/health/probe",
            "system_info": "/v1/system-info",
        },
    }


@app.get("/health")
async def health():
    """Health check endpoint for this service."""
    return await check_health(config, getattr(app.state, "catalog", None))


@app.get("/v1/landscapes", response_model=LandscapeList)
async def list_landscapes():
    """List configured landscapes."""
    catalog = getattr(app.state, "catalog", None)
    landscapes = catalog.list_landscapes() if catalog else []
    return LandscapeList(
        data=[LandscapeOut(**landscape.to_dict()) for landscape in landscapes]
    )


@app.get("/v1/landscapes/{name}/health", response_model=BatchHealthResponse)
async def landscape_health(name: str, request: Request):
    """Check every catalog component in one landscape."""
    catalog = getattr(app.state, "catalog", None)
    landscape = catalog.get_landscape(name) if catalog else None
    if landscape is None:
        raise HTTPException(
            status_code=404,
            detail=not_found_error(f"Unknown landscape: {name}", param="name").model_dump(),
        )

    service = _health_service()
    async with _request_token(request) as token:
        return await check_catalog_landscape(service, catalog, landscape, token)


@app.post("/v1/health/batch", response_model=BatchHealthResponse)
async def batch_health(body: BatchHealthRequest, request: Request):
    """Check the health of the given components in one landscape."""
    service = _health_service()
    try:
        async with _request_token(request) as token:
            return await check_batch(service, body, token)
    except ValueError as e:
        logger.warning(f"Invalid batch request: {e}")
        raise HTTPException(status_code=400, detail=invalid_request_error(str(e)).model_dump())


@app.post("/v1/health/probe", response_model=ProbeOutcomeOut)
async def probe(body: ProbeRequest, request: Request):
    """Probe a single URL through the proxy."""
    service = _health_service()
    async with _request_token(request) as token:
        return await probe_url(service, body, token)


@app.post("/v1/system-info", response_model=SystemInfoOut)
async def system_info(body: SystemInfoRequest, request: Request):
    """Fetch build/version metadata of one component."""
    service = _health_service()
    try:
        async with _request_token(request) as token:
            return await lookup_system_info(service, body, token)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=invalid_request_error(str(e)).model_dump())


if __name__ == "__main__":
    import uvicorn

    server_config = config.get("server", {})

    uvicorn.run(
        app="main:app",
        host=server_config.get("host", "0.0.0.0"),
        port=server_config.get("port", 9100),
        reload=server_config.get("reload", False),
        workers=1 if server_config.get("reload", False) else server_config.get("workers", 1),
        log_level=config.get("logging.level", "info").lower(),
    )
