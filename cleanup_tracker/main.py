# cleanup_tracker/main.py
"""
FastAPI application entry point.
Includes request logging, domain/global error handlers, and all routers.
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from cleanup_tracker.routers import auth, health, jobs, users
from cleanup_tracker.database import create_tables
from cleanup_tracker.config import DEV_ACCESS_SECRET, DEV_REFRESH_SECRET, settings
from cleanup_tracker.errors import TrackerError
from cleanup_tracker.utils.logger import get_logger
import time

logger = get_logger(__name__)

app = FastAPI(
    title="Cleanup Tracker API",
    description="Vehicle reconditioning job lifecycle — PIN login, timed work, QC sign-off.",
    version="2.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# ── CORS (dashboards and tablets on the shop LAN) ───────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── Request Timing Middleware ────────────────────────────────────────────────
@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    response = await call_next(request)
    duration = round((time.time() - start) * 1000, 2)
    logger.debug(f"{request.method} {request.url.path} → {response.status_code} ({duration}ms)")
    return response


# ── Domain Error Handler ─────────────────────────────────────────────────────
@app.exception_handler(TrackerError)
async def tracker_error_handler(request: Request, exc: TrackerError):
    logger.warning(f"{request.method} {request.url.path} → {exc.status_code} {type(exc).__name__}: {exc.message}")
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == status.HTTP_401_UNAUTHORIZED else None
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=headers)


# ── Global Exception Handler ─────────────────────────────────────────────────
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


# ── Routers ──────────────────────────────────────────────────────────────────
app.include_router(auth.router,   prefix="/api/v1", tags=["Auth"])
app.include_router(jobs.router,   prefix="/api/v1", tags=["Jobs"])
app.include_router(users.router,  prefix="/api/v1", tags=["Users"])
app.include_router(health.router, prefix="/api/v1", tags=["Health"])


# ── Startup ───────────────────────────────────────────────────────────────────
@app.on_event("startup")
async def startup():
    logger.info("Cleanup Tracker starting up...")
    # Raises in production when a JWT secret is missing
    if settings.access_secret == DEV_ACCESS_SECRET or settings.refresh_secret == DEV_REFRESH_SECRET:
        logger.warning("Using development JWT secrets — set JWT_ACCESS_SECRET and JWT_REFRESH_SECRET")
    create_tables()
    logger.info("Database tables ready")
    logger.info(f"Listening on http://{settings.BACKEND_IP}:{settings.BACKEND_PORT}")
    logger.info("API docs at /docs")


@app.on_event("shutdown")
async def shutdown():
    logger.info("Cleanup Tracker shutting down...")
