"""FastAPI application entry point."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from goal_tracker.config import settings
from goal_tracker.database import database
from goal_tracker.errors import BackendUnavailableError
from goal_tracker.routers import goals, profile, weekly_report


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - pick the storage backend once at startup."""
    logging.basicConfig(level=settings.log_level)
    await database.connect()
    yield


app = FastAPI(
    title="Goal Tracker API",
    description="Daily goals, profiles and weekly summaries stored in Google Sheets",
    version="0.1.0",
    lifespan=lifespan,
    debug=settings.debug,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(goals.router)
app.include_router(profile.router)
app.include_router(weekly_report.router)


@app.exception_handler(BackendUnavailableError)
async def backend_unavailable_handler(request: Request, exc: BackendUnavailableError):
    """Report spreadsheet failures as 503."""
    logger.error("Storage backend failed on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "Storage backend unavailable"},
    )


@app.get("/")
async def root():
    """Root endpoint - health check."""
    return {"status": "ok", "message": "Goal Tracker API"}


@app.get("/health")
async def health():
    """Health check endpoint."""
    durable = database.backend.durable if database.backend else False
    return {"status": "healthy", "storage": "sheets" if durable else "memory"}
