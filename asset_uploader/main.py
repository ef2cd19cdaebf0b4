from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from asset_uploader.config import settings as app_settings
from asset_uploader.dependencies import get_uploader
from asset_uploader.routers import settings, upload
import structlog

# Configure structured logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    wrapper_class=structlog.stdlib.BoundLogger,
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Pull the persisted storage settings before serving requests."""
    provider = app.dependency_overrides.get(get_uploader, get_uploader)
    provider().reload_settings()
    logger.info("Storage settings loaded")
    yield


# Create FastAPI app
app = FastAPI(
    title="S3 Asset Uploader",
    description="Validates files and remote images and stores them in an S3 bucket",
    version="1.0.0",
    lifespan=lifespan
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(upload.router)
app.include_router(settings.router)


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"message": "S3 Asset Uploader is running"}


@app.get("/health")
async def health_check():
    """Detailed health check endpoint."""
    return {
        "status": "healthy",
        "service": "s3-asset-uploader",
        "version": "1.0.0"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=app_settings.server_host, port=app_settings.server_port)
