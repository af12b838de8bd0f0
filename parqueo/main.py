# parqueo/main.py
"""
FastAPI application entry point.
Includes security middleware, domain/global error handlers, and all routers.
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from parqueo.routers import health, parking_records, parking_spaces, parkings, reports, vehicles
from parqueo.database import create_tables
from parqueo.config import settings
from parqueo.services.errors import CommitFailed, ParkingError, ReasonCode
from parqueo.utils.logger import get_logger
import time

logger = get_logger(__name__)

app = FastAPI(
    title="Parqueo Parking Core API",
    description="Vehicle admission, space assignment and parking sessions.",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# ── CORS (the single-page UI is served from another origin) ─────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],   # Restrict to the UI origin in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── API Key Middleware ───────────────────────────────────────────────────────
class APIKeyMiddleware(BaseHTTPMiddleware):
    """
    Optional lightweight API key check between the gateway and this service.
    Health check, docs and the public lot list stay open.
    Set API_KEY in .env. Leave empty to disable.
    """
    async def dispatch(self, request: Request, call_next):
        open_paths = {"/api/v1/health", "/api/v1/parkings", "/docs", "/redoc", "/openapi.json"}
        public = request.url.path in open_paths and request.method == "GET"
        if public or not settings.API_KEY:
            return await call_next(request)

        api_key = request.headers.get("X-API-Key") or request.query_params.get("api_key")
        if api_key != settings.API_KEY:
            return JSONResponse(
                status_code=status.HTTP_401_UNAUTHORIZED,
                content={"error": "Invalid or missing API key"},
            )
        return await call_next(request)


if settings.API_KEY:
    app.add_middleware(APIKeyMiddleware)


# ── Request Timing Middleware ────────────────────────────────────────────────
@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    response = await call_next(request)
    duration = round((time.time() - start) * 1000, 2)
    logger.debug(f"{request.method} {request.url.path} → {response.status_code} ({duration}ms)")
    return response


# ── Reason code → HTTP status ────────────────────────────────────────────────
STATUS_BY_CODE = {
    ReasonCode.INVALID_INPUT: status.HTTP_400_BAD_REQUEST,
    ReasonCode.SCOPE_REQUIRED: status.HTTP_400_BAD_REQUEST,
    ReasonCode.VEHICLE_LIMIT_REACHED: status.HTTP_400_BAD_REQUEST,
    ReasonCode.LOT_NOT_EMPTY: status.HTTP_400_BAD_REQUEST,
    ReasonCode.UNREGISTERED_BLOCKED: status.HTTP_403_FORBIDDEN,
    ReasonCode.OUT_OF_SCOPE: status.HTTP_403_FORBIDDEN,
    ReasonCode.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ReasonCode.VEHICLE_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ReasonCode.SPACE_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ReasonCode.RECORD_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ReasonCode.LOT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ReasonCode.NO_HANDICAP_SPACES: status.HTTP_404_NOT_FOUND,
    ReasonCode.NO_AVAILABLE_SPACES: status.HTTP_404_NOT_FOUND,
    ReasonCode.VEHICLE_ALREADY_PARKED: status.HTTP_409_CONFLICT,
    ReasonCode.SPACE_ALREADY_OCCUPIED: status.HTTP_409_CONFLICT,
    ReasonCode.DUPLICATE_PLATE: status.HTTP_409_CONFLICT,
    ReasonCode.ALREADY_EXITED: status.HTTP_409_CONFLICT,
    ReasonCode.DUPLICATE_SPACE_NUMBER: status.HTTP_409_CONFLICT,
    ReasonCode.DUPLICATE_LOT_NAME: status.HTTP_409_CONFLICT,
}


@app.exception_handler(ParkingError)
async def parking_error_handler(request: Request, exc: ParkingError):
    return JSONResponse(
        status_code=STATUS_BY_CODE.get(exc.code, status.HTTP_400_BAD_REQUEST),
        content=exc.to_dict(),
    )


@app.exception_handler(CommitFailed)
async def commit_failed_handler(request: Request, exc: CommitFailed):
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Operation could not be completed, nothing was changed"},
    )


# ── Global Exception Handler ─────────────────────────────────────────────────
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"},
    )


# ── Routers ──────────────────────────────────────────────────────────────────
app.include_router(parking_records.router, prefix="/api/v1", tags=["🚗 Entry / Exit"])
app.include_router(parking_spaces.router,  prefix="/api/v1", tags=["🅿️  Spaces"])
app.include_router(parkings.router,        prefix="/api/v1", tags=["🏢 Lots"])
app.include_router(vehicles.router,        prefix="/api/v1", tags=["🔍 Vehicles"])
app.include_router(reports.router,         prefix="/api/v1", tags=["📊 Reports"])
app.include_router(health.router,          prefix="/api/v1", tags=["💚 Health"])


# ── Startup ───────────────────────────────────────────────────────────────────
@app.on_event("startup")
async def startup():
    logger.info("🚀 Parqueo backend starting up...")
    create_tables()
    logger.info("✅ Database tables ready")
    logger.info(f"🌐 Listening on http://{settings.BACKEND_IP}:{settings.BACKEND_PORT}")
    logger.info("📖 API docs at /docs")


@app.on_event("shutdown")
async def shutdown():
    logger.info("🛑 Parqueo backend shutting down...")
