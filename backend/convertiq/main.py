"""ConvertiQ Backend Application.

This is the main entry point for the ConvertiQ file conversion service.
Clients upload a file, pick a target format, and download the converted
result; every temp file involved is deleted by the lifecycle manager.

Modules:
    - uploads: multipart staging (and the diagnostic test-upload endpoint)
    - formats: MIME type classification and routing categories
    - conversion: dispatcher and stub converters, POST /api/convert
    - lifecycle: temp-file deletion and retention timers
    - downloads: GET /api/download/{filename}
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from convertiq.config import get_config
from convertiq.conversion.dispatcher import ConversionDispatcher, set_dispatcher
from convertiq.conversion.router import router as conversion_router
from convertiq.downloads.router import router as downloads_router
from convertiq.downloads.service import DownloadResponder, set_download_responder
from convertiq.formats.router import router as formats_router
from convertiq.lifecycle.manager import TempFileLifecycleManager, set_lifecycle_manager
from convertiq.uploads.router import router as uploads_router
from convertiq.uploads.service import UploadReceiver, set_upload_receiver

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

# multipart logs every parsed part at DEBUG; not useful here.
for _noisy in ("multipart", "python_multipart", "httpx", "httpcore"):
    logging.getLogger(_noisy).setLevel(logging.WARNING)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup/shutdown events."""
    # Startup
    config = get_config()

    configured_level = getattr(logging, config.logging.level.upper(), None)
    if configured_level is not None:
        logging.getLogger().setLevel(configured_level)
        logger.info("Root logger level set to %s", config.logging.level.upper())

    staging = config.staging_config()
    staging.directory.mkdir(parents=True, exist_ok=True)

    lifecycle = TempFileLifecycleManager(
        staging,
        sweep_interval_seconds=config.cleanup.sweep_interval_seconds,
        orphan_max_age_seconds=config.cleanup.orphan_max_age_seconds,
        orphan_sweep_enabled=config.cleanup.orphan_sweep_enabled,
    )
    await lifecycle.start()

    set_lifecycle_manager(lifecycle)
    set_upload_receiver(UploadReceiver(staging, max_upload_bytes=config.uploads.max_upload_bytes))
    set_dispatcher(ConversionDispatcher.from_settings(config.conversion))
    set_download_responder(DownloadResponder(staging, lifecycle))

    logger.info(
        "Staging directory %s (retention %ss)", staging.directory, staging.retention_seconds
    )

    yield  # Application runs here

    # Shutdown
    await lifecycle.stop()
    logger.info("Application shutdown complete")


# Create FastAPI application with metadata
app = FastAPI(
    title="ConvertiQ API",
    description="Upload a file, convert it to another format, download the result",
    version="0.1.0",
    lifespan=lifespan,
)

# Register all routers
app.include_router(uploads_router)
app.include_router(formats_router)
app.include_router(conversion_router)
app.include_router(downloads_router)


@app.get("/health")
async def health() -> dict:
    """Health check endpoint.

    Returns:
        dict: Status object indicating the server is running.
    """
    return {"status": "ok"}
