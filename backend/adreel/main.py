"""
AdReel Backend API
FastAPI application for generating campaign video ads with voiceover

This is the main entry point that wires together all routes and services.
"""

import os
import shutil
import uuid
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from .config import API_DESCRIPTION, API_TITLE, API_VERSION, CORS_ORIGINS, Settings
from .core import clear_context, get_logger, set_request_id, setup_logging
from .routes import campaigns_router, catalog_router, export_jobs_router
from .services.infrastructure.orchestration.lifecycle import ServiceContainer

# Initialize logging
log_level = os.getenv("LOG_LEVEL", "INFO")
log_file = os.getenv("LOG_FILE")
use_json_logs = os.getenv("JSON_LOGS", "false").lower() == "true"

setup_logging(
    level=log_level,
    log_file=Path(log_file) if log_file else None,
    use_json=use_json_logs,
)

logger = get_logger(__name__, service="api")


@asynccontextmanager
async def lifespan(app: FastAPI):
    container = getattr(app.state, "container", None)
    if container is None:
        container = ServiceContainer(Settings.from_env())
        app.state.container = container
    await container.startup()
    try:
        yield
    finally:
        await container.shutdown()


async def add_request_correlation(request: Request, call_next):
    """Add a correlation id to every request and its log lines."""
    request_id = request.headers.get("X-Request-ID", str(uuid.uuid4()))
    set_request_id(request_id)
    logger.info(f"{request.method} {request.url.path}", extra={
        "method": request.method,
        "path": request.url.path,
    })
    try:
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        logger.info(f"Response: {response.status_code}", extra={
            "status_code": response.status_code,
            "method": request.method,
            "path": request.url.path,
        })
        return response
    finally:
        clear_context()


async def root():
    """Root endpoint - API info"""
    return {
        "message": "AdReel API - Generate campaign video ads",
        "version": API_VERSION,
    }


async def health_check(request: Request):
    """
    Health check endpoint for container orchestration.

    Reports media tools, credentials and the startup runtime report.
    Returns 503 only when the design credential is missing, since every
    other gap just degrades a pipeline stage.
    """
    container: Optional[ServiceContainer] = getattr(request.app.state, "container", None)
    settings = container.settings if container else Settings.from_env()

    checks = {"status": "healthy", "checks": {}}
    for tool in (settings.ffmpeg_binary, settings.ffprobe_binary):
        path = shutil.which(tool)
        checks["checks"][tool] = {"available": path is not None, "required": False, "path": path}
        if path is None:
            logger.warning(f"Health check: {tool} not found in PATH (merge stage disabled)")

    checks["checks"]["canva_access_token"] = {"configured": bool(settings.canva_access_token)}
    checks["checks"]["elevenlabs_api_key"] = {"configured": bool(settings.elevenlabs_api_key)}

    if container is not None and container.runtime_report is not None:
        checks["checks"]["runtime_startup"] = container.runtime_report

    if not settings.canva_access_token:
        checks["status"] = "unhealthy"
        raise HTTPException(status_code=503, detail=checks)
    return checks


def create_app(container: Optional[ServiceContainer] = None) -> FastAPI:
    application = FastAPI(
        title=API_TITLE,
        description=API_DESCRIPTION,
        version=API_VERSION,
        lifespan=lifespan,
    )
    if container is not None:
        application.state.container = container

    application.middleware("http")(add_request_correlation)
    application.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.include_router(campaigns_router)
    application.include_router(catalog_router)
    application.include_router(export_jobs_router)
    application.get("/")(root)
    application.get("/health")(health_check)

    # Campaign output, so media paths recorded in manifests can be fetched
    settings = container.settings if container is not None else Settings.from_env()
    application.mount(
        "/campaigns",
        StaticFiles(directory=str(settings.campaign_output_dir), check_dir=False),
        name="campaigns",
    )
    return application


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "adreel.main:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", "8000")),
        reload=os.getenv("RELOAD", "false").lower() == "true",
    )
