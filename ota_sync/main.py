# ota_sync/main.py

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ota_sync.config import ALLOWED_ORIGINS
from ota_sync.dependencies import get_http_client
from ota_sync.logging_config import setup_logging
from ota_sync.middleware import RequestIDMiddleware
from ota_sync.routes.configurations import router as configurations_router
from ota_sync.routes.health import router as health_router
from ota_sync.routes.metrics import router as metrics_router
from ota_sync.routes.sync import router as sync_router

# Initialize structured logging
setup_logging()
logger = structlog.get_logger(__name__)

app = FastAPI(
    title="OTA Channel Sync API",
    description="API for managing OTA partner configurations and availability syncs",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS if "*" not in ALLOWED_ORIGINS else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestIDMiddleware)

# Register routers
app.include_router(health_router, tags=["Health"])
app.include_router(metrics_router, tags=["Metrics"])
app.include_router(configurations_router, prefix="/api/ota", tags=["Configurations"])
app.include_router(sync_router, prefix="/api/ota", tags=["Sync"])


@app.on_event("startup")
def startup_event() -> None:
    logger.info("FastAPI application starting up...")


@app.on_event("shutdown")
def shutdown_event() -> None:
    """Release pooled partner connections."""
    get_http_client().close()
    logger.info("FastAPI application shut down")
