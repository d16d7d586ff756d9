from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
import os
import logging
import sys

from waiterboard.api import audit, board, health, patients, records, settings as api_settings
from waiterboard.core.config import settings
from waiterboard.core.logging_config import setup_logging
from waiterboard.db.database import AsyncSessionLocal, init_db
from waiterboard.exceptions import APIError
from waiterboard.rate_limiter import limiter
from waiterboard.services.board_maintenance import BoardMaintenanceService

logger = logging.getLogger(__name__)

if settings.is_cors_misconfigured():
    logger.error("Production environment detected but CORS_ORIGINS is not set or only contains localhost.")
    sys.exit(1)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()

    logger.info(f"Starting up in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS Allowed Origins: {settings.CORS_ORIGINS}")

    await init_db()

    app.state.board_maintenance = BoardMaintenanceService(
        session_factory=AsyncSessionLocal,
        polling_interval_seconds=settings.BOARD_MAINTENANCE_INTERVAL_SECONDS,
    )
    await app.state.board_maintenance.start_maintenance_task()

    yield

    await app.state.board_maintenance.stop_maintenance_task()


app = FastAPI(title="Pharmacy Waiter Board", lifespan=lifespan)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(APIError)
async def api_error_handler(request: Request, exc: APIError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

if os.getenv("TESTING") != "true":
    app.add_middleware(SlowAPIMiddleware)


app.include_router(health.router, prefix="/api/v1/health", tags=["Health Check"])
app.include_router(records.router, prefix="/api/v1/records", tags=["Records"])
app.include_router(board.router, prefix="/api/v1/board", tags=["Boards"])
app.include_router(patients.router, prefix="/api/v1/patients", tags=["Patients"])
app.include_router(api_settings.router, prefix="/api/v1/settings", tags=["Settings"])
app.include_router(audit.router, prefix="/api/v1/audit", tags=["Audit Log"])
