"""Main FastAPI application entry point."""
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from zapnote import __version__
from zapnote.api import files, minutes
from zapnote.dependencies import (
    get_config,
    get_extraction_router,
    get_minutes_service,
    reset_dependencies,
)
from zapnote.logging_client import setup_logger

# Initialize logger
logger = setup_logger('zapnote')


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info(f"Starting ZapNote v{__version__}...")

    config = get_config()

    # Parser runtime must be initialized before the first upload
    router = get_extraction_router()
    logger.info(
        f"Extraction ready: parser_mode={config.extraction.parser_mode}, "
        f"formats={sorted(router.supported_mimetypes)}"
    )

    service = get_minutes_service()
    logger.info(f"Minutes service ready: model={service.model}, host={config.minutes.host}")

    yield

    logger.info("Shutting down ZapNote...")
    reset_dependencies()


app = FastAPI(
    title="ZapNote",
    description="Meeting transcript extraction and minutes generation",
    version=__version__,
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_config().server.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(files.router, prefix="/api/files", tags=["files"])
app.include_router(minutes.router, prefix="/api/minutes", tags=["minutes"])


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    config = get_config()
    return {
        "status": "healthy",
        "version": __version__,
        "parser_mode": config.extraction.parser_mode,
        "model": config.minutes.model,
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
